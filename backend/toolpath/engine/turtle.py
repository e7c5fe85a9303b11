"""Output sink ("turtle") contract and a recording implementation.

The converter pushes one flattened transform per rendered node and pops it on
exit; the turtle owns composition. RecordingTurtle starts from ``scale(1, -1)``,
the first half of the SVG (Y down) → machine (Y up) flip; the root element's
translation supplies the second half.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Protocol

from toolpath.engine import affine
from toolpath.engine.segments import SegmentSequence

logger = logging.getLogger(__name__)


class Turtle(Protocol):
    def push_transform(self, transform: affine.Matrix) -> None: ...

    def pop_transform(self) -> None: ...

    def draw(self, segments: SegmentSequence) -> None: ...

    def annotate(self, label: str) -> None: ...


@dataclass(frozen=True)
class DrawCommand:
    # Composed transform active when the segments were drawn
    transform: tuple[float, float, float, float, float, float]
    segments: SegmentSequence
    label: str = ""

    def matrix(self) -> affine.Matrix:
        return affine.from_coefficients(*self.transform)

    def end_points(self) -> list[tuple[float, float]]:
        """Segment end points mapped through the transform (close segments skipped)."""
        m = self.matrix()
        points: list[tuple[float, float]] = []
        x = y = 0.0
        for seg in self.segments:
            if hasattr(seg, "x"):
                x = seg.x
            if hasattr(seg, "y"):
                y = seg.y
            if not hasattr(seg, "x") and not hasattr(seg, "y"):
                continue
            points.append(affine.apply(m, x, y))
        return points


@dataclass
class RecordingTurtle:
    """Composes pushed transforms and records every draw call."""

    base: affine.Matrix = field(default_factory=lambda: affine.scaling(1.0, -1.0))
    draws: list[DrawCommand] = field(default_factory=list)
    push_count: int = 0
    pop_count: int = 0
    max_depth: int = 0

    def __post_init__(self) -> None:
        self._stack: list[affine.Matrix] = []
        self._current = self.base
        self._label = ""

    @property
    def depth(self) -> int:
        return len(self._stack)

    @property
    def current_transform(self) -> affine.Matrix:
        return self._current

    def push_transform(self, transform: affine.Matrix) -> None:
        self._stack.append(self._current)
        # the pushed (child) transform applies to points first
        self._current = self._current @ transform
        self.push_count += 1
        self.max_depth = max(self.max_depth, len(self._stack))

    def pop_transform(self) -> None:
        self._current = self._stack.pop()
        self.pop_count += 1

    def annotate(self, label: str) -> None:
        self._label = label

    def draw(self, segments: SegmentSequence) -> None:
        self.draws.append(DrawCommand(affine.coefficients(self._current), segments, self._label))
        logger.debug("draw %d segments (%s)", len(segments), self._label)
