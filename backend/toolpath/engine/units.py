"""Unit resolution: SVG lengths → user units (px).

Absolute units go through the configured DPI, em/ex through the configured
font size, and percentages through the innermost established viewport.
"""

from __future__ import annotations

import enum
import math

from toolpath.engine.config import ConversionConfig
from toolpath.engine.diagnostics import DiagnosticsSink, LoggingDiagnostics, warn
from toolpath.svg.attributes import Length, LengthUnit, parse_length
from toolpath.svg.document import SvgNode

_CM_PER_INCH = 2.54
_MM_PER_INCH = 25.4
_PT_PER_INCH = 72.0
_PC_PER_INCH = 6.0


class DimensionHint(enum.Enum):
    """Which viewport axis a percentage refers to."""

    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"
    OTHER = "other"


_ATTRIBUTE_HINTS: dict[str, DimensionHint] = {
    "x": DimensionHint.HORIZONTAL,
    "x1": DimensionHint.HORIZONTAL,
    "x2": DimensionHint.HORIZONTAL,
    "cx": DimensionHint.HORIZONTAL,
    "rx": DimensionHint.HORIZONTAL,
    "width": DimensionHint.HORIZONTAL,
    "y": DimensionHint.VERTICAL,
    "y1": DimensionHint.VERTICAL,
    "y2": DimensionHint.VERTICAL,
    "cy": DimensionHint.VERTICAL,
    "ry": DimensionHint.VERTICAL,
    "height": DimensionHint.VERTICAL,
}


class ViewportStack:
    """(width, height) of every viewport currently open, innermost last."""

    DEFAULT = (1.0, 1.0)

    def __init__(self) -> None:
        self._sizes: list[tuple[float, float]] = []

    def push(self, size: tuple[float, float]) -> None:
        self._sizes.append((float(size[0]), float(size[1])))

    def pop(self) -> tuple[float, float]:
        return self._sizes.pop()

    def top(self) -> tuple[float, float]:
        return self._sizes[-1] if self._sizes else self.DEFAULT

    def __len__(self) -> int:
        return len(self._sizes)


class UnitResolver:
    def __init__(
        self,
        viewports: ViewportStack,
        config: ConversionConfig | None = None,
        diagnostics: DiagnosticsSink | None = None,
    ) -> None:
        self.viewports = viewports
        self.config = config or ConversionConfig()
        self.diagnostics = diagnostics or LoggingDiagnostics()

    def length_to_user_units(self, length: Length, hint: DimensionHint) -> float:
        n = length.number
        dpi = self.config.dpi
        unit = length.unit
        if unit in (LengthUnit.NONE, LengthUnit.PX):
            return n
        if unit is LengthUnit.IN:
            return n * dpi
        if unit is LengthUnit.CM:
            return n * dpi / _CM_PER_INCH
        if unit is LengthUnit.MM:
            return n * dpi / _MM_PER_INCH
        if unit is LengthUnit.PT:
            return n * dpi / _PT_PER_INCH
        if unit is LengthUnit.PC:
            return n * dpi / _PC_PER_INCH
        if unit is LengthUnit.EM:
            return n * self.config.font_size
        if unit is LengthUnit.EX:
            # x-height approximated as half the em
            return n * self.config.font_size / 2.0
        # percentage
        w, h = self.viewports.top()
        if hint is DimensionHint.HORIZONTAL:
            reference = w
        elif hint is DimensionHint.VERTICAL:
            reference = h
        else:
            reference = math.sqrt((w * w + h * h) / 2.0)
        return n / 100.0 * reference

    def length_attr_to_user_units(self, node: SvgNode, attribute: str) -> float | None:
        """Resolve a length attribute; absent or invalid values give None."""
        raw = node.attribute(attribute)
        if raw is None:
            return None
        try:
            length = parse_length(raw)
        except ValueError:
            warn(self.diagnostics, f"Invalid length for {attribute} on <{node.tag}>: {raw!r}", node.tag)
            return None
        return self.length_to_user_units(length, _ATTRIBUTE_HINTS.get(attribute, DimensionHint.OTHER))
