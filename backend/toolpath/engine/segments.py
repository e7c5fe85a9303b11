"""Canonical path segments handed to the output sink.

Every segment is absolute. Shapes are lowered into tuples of these and the
tuples are never mutated afterwards.
"""

from __future__ import annotations

import enum
from dataclasses import asdict, dataclass
from typing import Any, ClassVar, Union


class SegmentKind(str, enum.Enum):
    MOVE = "move"
    LINE = "line"
    HORIZONTAL_LINE = "horizontal_line"
    VERTICAL_LINE = "vertical_line"
    CUBIC = "cubic"
    QUADRATIC = "quadratic"
    ARC = "arc"
    CLOSE = "close"


@dataclass(frozen=True)
class MoveTo:
    kind: ClassVar[SegmentKind] = SegmentKind.MOVE
    x: float
    y: float


@dataclass(frozen=True)
class LineTo:
    kind: ClassVar[SegmentKind] = SegmentKind.LINE
    x: float
    y: float


@dataclass(frozen=True)
class HorizontalLineTo:
    kind: ClassVar[SegmentKind] = SegmentKind.HORIZONTAL_LINE
    x: float


@dataclass(frozen=True)
class VerticalLineTo:
    kind: ClassVar[SegmentKind] = SegmentKind.VERTICAL_LINE
    y: float


@dataclass(frozen=True)
class CubicTo:
    """Only produced by path data; shape lowering never emits curves."""

    kind: ClassVar[SegmentKind] = SegmentKind.CUBIC
    x1: float
    y1: float
    x2: float
    y2: float
    x: float
    y: float


@dataclass(frozen=True)
class QuadraticTo:
    kind: ClassVar[SegmentKind] = SegmentKind.QUADRATIC
    x1: float
    y1: float
    x: float
    y: float


@dataclass(frozen=True)
class ArcTo:
    kind: ClassVar[SegmentKind] = SegmentKind.ARC
    rx: float
    ry: float
    x_axis_rotation: float
    large_arc: bool
    sweep: bool
    x: float
    y: float


@dataclass(frozen=True)
class ClosePath:
    kind: ClassVar[SegmentKind] = SegmentKind.CLOSE


Segment = Union[MoveTo, LineTo, HorizontalLineTo, VerticalLineTo, CubicTo, QuadraticTo, ArcTo, ClosePath]

# A lowered shape: finite, ordered, immutable.
SegmentSequence = tuple[Segment, ...]


def segment_to_dict(segment: Segment) -> dict[str, Any]:
    """Flat JSON-friendly form: {"kind": "arc", "rx": ..., ...}."""
    return {"kind": segment.kind.value, **asdict(segment)}
