"""Coordinate resolver — the single flattened transform each element contributes.

Per element, in order:
  1. its own transform list
  2. transform-origin (parsed, reported, not applied)
  3. viewport establishment (root <svg> and <symbol> only), including the
     root's Y-axis flip translation
  4. the <use> x/y offset

Nothing here touches the viewport stack: ``resolve`` reports the size an
establishing element wants pushed and the caller pushes it, so a fatal error
half way through leaves every stack as it was.

https://www.w3.org/TR/SVG/coords.html#EstablishingANewSVGViewport
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from toolpath.engine import affine
from toolpath.engine.config import ConversionOptions
from toolpath.engine.diagnostics import DiagnosticsSink, warn
from toolpath.engine.shapes import ShapeKind
from toolpath.engine.units import DimensionHint, UnitResolver
from toolpath.engine.viewport import viewport_transform
from toolpath.svg.attributes import (
    AspectRatio,
    ViewBox,
    parse_aspect_ratio,
    parse_points,
    parse_transform_list,
    parse_view_box,
)
from toolpath.svg.document import SvgNode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Resolution:
    transform: affine.Matrix
    # Set only for viewport-establishing elements
    viewport: tuple[float, float] | None = None


class CoordinateResolver:
    def __init__(
        self,
        units: UnitResolver,
        diagnostics: DiagnosticsSink,
        options: ConversionOptions | None = None,
    ) -> None:
        self.units = units
        self.diagnostics = diagnostics
        self.options = options or ConversionOptions()

    def resolve(self, node: SvgNode, kind: ShapeKind, is_root: bool = False) -> Resolution:
        if kind is ShapeKind.CLIP_PATH:
            warn(self.diagnostics, "Clip paths are not supported", node.tag)
        if node.has_attribute("clip-path"):
            warn(self.diagnostics, f"clip-path on <{node.tag}> is not supported", node.tag)

        origin = node.attribute("transform-origin")
        if origin is not None:
            # TODO: apply transform-origin around the transform list (css-transforms-1)
            first = parse_points(origin)[:1]
            warn(self.diagnostics, f"transform-origin {first} not supported yet", node.tag)

        flattened = self._own_transform(node)
        viewport = None

        if is_root and kind is ShapeKind.SVG:
            flattened, viewport = self._establish_root_viewport(node, flattened)
        elif kind is ShapeKind.USE:
            # https://www.w3.org/TR/SVG2/struct.html#UseLayout
            x = self.units.length_attr_to_user_units(node, "x") or 0.0
            y = self.units.length_attr_to_user_units(node, "y") or 0.0
            flattened = affine.then(flattened, affine.translation(x, y))
        elif kind is ShapeKind.SYMBOL:
            flattened, viewport = self._establish_symbol_viewport(node, flattened)
        elif node.has_attribute("viewBox"):
            warn(self.diagnostics, f"View box is not supported on a {node.tag}", node.tag)

        return Resolution(flattened, viewport)

    def _own_transform(self, node: SvgNode) -> affine.Matrix:
        acc = affine.identity()
        value = node.attribute("transform")
        if value is None:
            return acc
        # Earlier functions are nested inside later ones:
        # https://stackoverflow.com/questions/18582935/the-applying-order-of-svg-transforms
        for fn in parse_transform_list(value):
            acc = affine.then(fn.to_matrix(), acc)
        return acc

    def _view_box(self, node: SvgNode) -> ViewBox | None:
        raw = node.attribute("viewBox")
        if raw is None:
            return None
        view_box = parse_view_box(raw)
        if view_box.width <= 0 or view_box.height <= 0:
            warn(self.diagnostics, f"Invalid viewBox: {raw!r}", node.tag)
            return None
        return view_box

    def _aspect_ratio(self, node: SvgNode) -> AspectRatio | None:
        raw = node.attribute("preserveAspectRatio")
        return None if raw is None else parse_aspect_ratio(raw)

    def _establish_root_viewport(
        self, node: SvgNode, flattened: affine.Matrix
    ) -> tuple[affine.Matrix, tuple[float, float]]:
        view_box = self._view_box(node)
        aspect_ratio = self._aspect_ratio(node)

        width = self.units.length_attr_to_user_units(node, "width")
        height = self.units.length_attr_to_user_units(node, "height")

        # https://www.w3.org/TR/SVG/coords.html#SizingSVGInCSS (natural aspect ratio)
        if view_box is not None:
            ratio: float | None = view_box.width / view_box.height
        elif width is not None and height is not None and height != 0:
            ratio = width / height
        else:
            ratio = None

        width_override, height_override = self.options.dimensions
        if width_override is not None:
            width = self.units.length_to_user_units(width_override, DimensionHint.HORIZONTAL)
        if height_override is not None:
            height = self.units.length_to_user_units(height_override, DimensionHint.VERTICAL)

        # https://www.w3.org/TR/css-images-3/#default-sizing
        if width is not None and height is not None:
            size = (width, height)
        elif width is not None and ratio is not None:
            size = (width, width / ratio)
        elif height is not None and ratio is not None:
            size = (height * ratio, height)
        elif view_box is not None:
            # no width or height: the viewBox is just pixels on the viewport
            size = (view_box.width, view_box.height)
        elif width is not None:
            size = (width, width)
        elif height is not None:
            size = (height, height)
        else:
            size = (1.0, 1.0)

        x = self.units.length_attr_to_user_units(node, "x")
        y = self.units.length_attr_to_user_units(node, "y")

        if view_box is not None:
            vt = viewport_transform(view_box, aspect_ratio, size, (x, y))
            flattened = affine.then(flattened, vt)
            pushed = (view_box.width, view_box.height)
        else:
            pushed = size

        # second half of the SVG -> machine Y flip; the turtle's base scale is the first
        flattened = affine.then(flattened, affine.translation(0.0, -(size[1] + (y or 0.0))))
        logger.debug("Root viewport %.3fx%.3f (viewBox=%s)", size[0], size[1], view_box)
        return flattened, pushed

    def _establish_symbol_viewport(
        self, node: SvgNode, flattened: affine.Matrix
    ) -> tuple[affine.Matrix, tuple[float, float]]:
        view_box = self._view_box(node)
        aspect_ratio = self._aspect_ratio(node)
        width = self.units.length_attr_to_user_units(node, "width")
        height = self.units.length_attr_to_user_units(node, "height")

        if width is not None and height is not None:
            size = (width, height)
        elif view_box is not None:
            size = (view_box.width, view_box.height)
        else:
            size = self.units.viewports.top()

        if view_box is None:
            return flattened, size
        # already in machine space, no flip; position comes from the <use> offset
        vt = viewport_transform(view_box, aspect_ratio, size, (None, None))
        return affine.then(flattened, vt), (view_box.width, view_box.height)
