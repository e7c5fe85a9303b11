"""Conversion visitor — lowers an SVG document onto a turtle.

For every rendered node the visitor pushes, in lock-step with the traversal:
  - the node's flattened transform (onto the turtle)
  - its label (onto the name stack)
  - its viewport size, for the root <svg> and <symbol> only
and pops exactly those on exit.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field

from toolpath.engine.config import ConversionConfig, ConversionOptions
from toolpath.engine.diagnostics import CollectingDiagnostics, Diagnostic, DiagnosticsSink, LoggingDiagnostics, warn
from toolpath.engine.resolver import CoordinateResolver
from toolpath.engine.shapes import ShapeKind, lower_shape
from toolpath.engine.traversal import depth_first_visit
from toolpath.engine.turtle import DrawCommand, RecordingTurtle, Turtle
from toolpath.engine.units import UnitResolver, ViewportStack
from toolpath.svg.document import SvgDocument, SvgNode

logger = logging.getLogger(__name__)

_NAME_SEPARATOR = " > "


def node_name(node: SvgNode, extra_attribute_name: str | None = None) -> str:
    """Human-readable label: ``tag``, ``tag#id``, plus ``=>value`` of the extra attribute."""
    name = node.tag
    node_id = node.attribute("id")
    if node_id is not None:
        name += f"#{node_id}"
    if extra_attribute_name:
        extra = node.attribute(extra_attribute_name)
        if extra is not None:
            name += f"=>{extra}"
    return name


class ConversionVisitor:
    def __init__(
        self,
        document: SvgDocument,
        turtle: Turtle,
        config: ConversionConfig | None = None,
        options: ConversionOptions | None = None,
        diagnostics: DiagnosticsSink | None = None,
    ) -> None:
        self.document = document
        self.turtle = turtle
        self.config = config or ConversionConfig()
        self.diagnostics = diagnostics or LoggingDiagnostics()
        self.viewport_dim_stack = ViewportStack()
        self.name_stack: list[str] = []
        # per open node: did it push a viewport?
        self._pushed_viewport: list[bool] = []
        self.units = UnitResolver(self.viewport_dim_stack, self.config, self.diagnostics)
        self.resolver = CoordinateResolver(self.units, self.diagnostics, options)

    @property
    def is_unwound(self) -> bool:
        return not self.name_stack and not self._pushed_viewport and len(self.viewport_dim_stack) == 0

    def enter(self, node: SvgNode) -> None:
        kind = ShapeKind.from_tag(node.tag)
        is_root = node.index == self.document.root_element.index

        # Everything that can fail happens before the first push.
        resolution = self.resolver.resolve(node, kind, is_root=is_root)
        segments = lower_shape(node, kind, self.units, self.diagnostics)

        if resolution.viewport is not None:
            self.viewport_dim_stack.push(resolution.viewport)
        self._pushed_viewport.append(resolution.viewport is not None)
        self.turtle.push_transform(resolution.transform)
        self.name_stack.append(node_name(node, self.config.extra_attribute_name))

        if segments:
            self.turtle.annotate(_NAME_SEPARATOR.join(self.name_stack))
            self.turtle.draw(segments)

    def exit(self, node: SvgNode) -> None:
        self.turtle.pop_transform()
        self.name_stack.pop()
        if self._pushed_viewport.pop():
            self.viewport_dim_stack.pop()


def svg_to_turtle(
    document: SvgDocument,
    turtle: Turtle,
    config: ConversionConfig | None = None,
    options: ConversionOptions | None = None,
    diagnostics: DiagnosticsSink | None = None,
) -> None:
    """Walk ``document`` and emit its geometry onto ``turtle``."""
    diagnostics = diagnostics or LoggingDiagnostics()
    if document.root_element.tag != "svg":
        warn(diagnostics, f"Root element is <{document.root_element.tag}>, not <svg>", document.root_element.tag)
    visitor = ConversionVisitor(document, turtle, config, options, diagnostics)
    depth_first_visit(document, visitor, diagnostics)
    if not visitor.is_unwound:
        raise RuntimeError("conversion finished with open stacks")


@dataclass
class ConversionResult:
    draws: tuple[DrawCommand, ...] = ()
    diagnostics: list[Diagnostic] = field(default_factory=list)
    processing_time_ms: float = 0.0


def convert_svg(
    svg_text: str | bytes,
    config: ConversionConfig | None = None,
    options: ConversionOptions | None = None,
    diagnostics: CollectingDiagnostics | None = None,
) -> ConversionResult:
    """Parse ``svg_text`` and record its geometry. Fatal problems raise ConversionError."""
    start = time.perf_counter()
    diagnostics = diagnostics if diagnostics is not None else CollectingDiagnostics()
    document = SvgDocument.from_string(svg_text)
    turtle = RecordingTurtle()
    svg_to_turtle(document, turtle, config, options, diagnostics)
    elapsed = (time.perf_counter() - start) * 1000
    logger.info(
        "Converted SVG: %d draws, %d diagnostics in %.1fms",
        len(turtle.draws),
        len(diagnostics.items),
        elapsed,
    )
    return ConversionResult(
        draws=tuple(turtle.draws),
        diagnostics=list(diagnostics.items),
        processing_time_ms=round(elapsed, 1),
    )
