"""Shape lowering — primitive elements → canonical segment sequences.

Each lowering returns either the complete sequence or None (with a warning);
partial geometry is never produced.
"""

from __future__ import annotations

import enum

from toolpath.engine.diagnostics import DiagnosticsSink, info, warn
from toolpath.engine.segments import (
    ArcTo,
    ClosePath,
    HorizontalLineTo,
    LineTo,
    MoveTo,
    Segment,
    SegmentSequence,
    VerticalLineTo,
)
from toolpath.engine.units import UnitResolver
from toolpath.svg.attributes import parse_points
from toolpath.svg.document import SvgNode
from toolpath.svg.path_data import parse_path_data


class ShapeKind(enum.Enum):
    SVG = "svg"
    GROUP = "g"
    USE = "use"
    SYMBOL = "symbol"
    DEFS = "defs"
    MARKER = "marker"
    CLIP_PATH = "clipPath"
    PATH = "path"
    POLYLINE = "polyline"
    POLYGON = "polygon"
    RECT = "rect"
    CIRCLE = "circle"
    ELLIPSE = "ellipse"
    LINE = "line"
    UNKNOWN = ""

    @classmethod
    def from_tag(cls, tag: str) -> ShapeKind:
        try:
            return cls(tag)
        except ValueError:
            return cls.UNKNOWN


# Tags that never emit geometry of their own
CONTAINER_KINDS = frozenset(
    {
        ShapeKind.SVG,
        ShapeKind.GROUP,
        ShapeKind.USE,
        ShapeKind.SYMBOL,
        ShapeKind.DEFS,
        ShapeKind.MARKER,
        ShapeKind.CLIP_PATH,
    }
)


def _arc(rx: float, ry: float, x: float, y: float) -> ArcTo:
    return ArcTo(rx=rx, ry=ry, x_axis_rotation=0.0, large_arc=False, sweep=True, x=x, y=y)


def lower_path(node: SvgNode, diagnostics: DiagnosticsSink) -> SegmentSequence | None:
    d = node.attribute("d")
    if d is None:
        warn(diagnostics, "There is a path node containing no actual path", node.tag)
        return None
    segments = parse_path_data(d)
    if not segments:
        warn(diagnostics, "There is a path node with empty path data", node.tag)
        return None
    return segments


def lower_poly(node: SvgNode, diagnostics: DiagnosticsSink, closed: bool) -> SegmentSequence | None:
    raw = node.attribute("points")
    if raw is None:
        warn(diagnostics, f"There is a {node.tag} node containing no actual path", node.tag)
        return None
    points = parse_points(raw)
    if not points:
        warn(diagnostics, f"There is a {node.tag} node with no valid points", node.tag)
        return None
    first, *rest = points
    segments: list[Segment] = [MoveTo(*first)]
    segments.extend(LineTo(x, y) for x, y in rest)
    if closed:
        segments.append(ClosePath())
    return tuple(segments)


def lower_rect(node: SvgNode, units: UnitResolver, diagnostics: DiagnosticsSink) -> SegmentSequence | None:
    x = units.length_attr_to_user_units(node, "x") or 0.0
    y = units.length_attr_to_user_units(node, "y") or 0.0
    width = units.length_attr_to_user_units(node, "width")
    height = units.length_attr_to_user_units(node, "height")
    rx = units.length_attr_to_user_units(node, "rx") or 0.0
    ry = units.length_attr_to_user_units(node, "ry") or 0.0

    if width is None or height is None:
        warn(diagnostics, "Invalid rectangle node: width and height are required", node.tag)
        return None
    if width <= 0 or height <= 0:
        warn(diagnostics, f"Invalid rectangle node: {width}x{height}", node.tag)
        return None

    # rx and ry do not default to each other here
    has_radius = rx > 0 and ry > 0
    if not has_radius:
        rx = ry = 0.0

    segments = (
        MoveTo(x + rx, y),
        HorizontalLineTo(x + width - rx),
        _arc(rx, ry, x + width, y + ry),
        VerticalLineTo(y + height - ry),
        _arc(rx, ry, x + width - rx, y + height),
        HorizontalLineTo(x + rx),
        _arc(rx, ry, x, y + height - ry),
        VerticalLineTo(y + ry),
        _arc(rx, ry, x + rx, y),
        ClosePath(),
    )
    if has_radius:
        return segments
    return tuple(s for s in segments if not isinstance(s, ArcTo))


def lower_ellipse(node: SvgNode, units: UnitResolver, diagnostics: DiagnosticsSink) -> SegmentSequence | None:
    cx = units.length_attr_to_user_units(node, "cx") or 0.0
    cy = units.length_attr_to_user_units(node, "cy") or 0.0
    r = units.length_attr_to_user_units(node, "r") or 0.0
    rx = units.length_attr_to_user_units(node, "rx")
    ry = units.length_attr_to_user_units(node, "ry")
    rx = r if rx is None else rx
    ry = r if ry is None else ry

    if rx <= 0 or ry <= 0:
        warn(diagnostics, f"Invalid {node.tag} node: radius must be positive", node.tag)
        return None

    arcs = tuple(
        _arc(rx, ry, px, py)
        for px, py in ((cx, cy + ry), (cx - rx, cy), (cx, cy - ry), (cx + rx, cy))
    )
    return (MoveTo(cx + rx, cy), *arcs, ClosePath())


def lower_line(node: SvgNode, units: UnitResolver, diagnostics: DiagnosticsSink) -> SegmentSequence | None:
    coords = [units.length_attr_to_user_units(node, name) for name in ("x1", "y1", "x2", "y2")]
    if any(c is None for c in coords):
        warn(diagnostics, "Invalid line node: x1, y1, x2 and y2 are required", node.tag)
        return None
    x1, y1, x2, y2 = coords
    return (MoveTo(x1, y1), LineTo(x2, y2))


def lower_shape(
    node: SvgNode,
    kind: ShapeKind,
    units: UnitResolver,
    diagnostics: DiagnosticsSink,
) -> SegmentSequence | None:
    """Lower one element. None means no geometry (containers, invalid or unknown nodes)."""
    if kind is ShapeKind.PATH:
        return lower_path(node, diagnostics)
    if kind is ShapeKind.POLYLINE:
        return lower_poly(node, diagnostics, closed=False)
    if kind is ShapeKind.POLYGON:
        return lower_poly(node, diagnostics, closed=True)
    if kind is ShapeKind.RECT:
        return lower_rect(node, units, diagnostics)
    if kind in (ShapeKind.CIRCLE, ShapeKind.ELLIPSE):
        return lower_ellipse(node, units, diagnostics)
    if kind is ShapeKind.LINE:
        return lower_line(node, units, diagnostics)
    if kind in CONTAINER_KINDS:
        return None
    info(diagnostics, f"Unknown node: {node.tag}", node.tag)
    return None
