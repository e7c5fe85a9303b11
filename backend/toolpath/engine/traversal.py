"""Depth-first traversal driver.

The strict walk skips anything that is not rendered directly (defs, markers,
symbols, hidden elements). A <use> with a resolvable same-document reference is
expanded through the relaxed walk, which lets a symbol or definition render,
but only through the reference; the relaxed walk goes back to the strict one
for the referenced node's children. A <use> that resolves does not visit its own
children; one that does not resolve is walked like any other container.

enter/exit are scoped: exit runs on every way out of a node, including a fatal
error raised further down.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Protocol

from toolpath.engine.diagnostics import DiagnosticsSink, LoggingDiagnostics, warn
from toolpath.engine.errors import ReferenceCycleError
from toolpath.svg.document import XLINK_NS, SvgDocument, SvgNode

logger = logging.getLogger(__name__)

HIDDEN_STYLE = "display:none"
_NOT_DIRECTLY_RENDERED = frozenset({"defs", "marker", "symbol"})


class XmlVisitor(Protocol):
    def enter(self, node: SvgNode) -> None: ...

    def exit(self, node: SvgNode) -> None: ...


def is_hidden(node: SvgNode) -> bool:
    style = node.attribute("style")
    return style is not None and HIDDEN_STYLE in style


def should_render_node(node: SvgNode) -> bool:
    """Used to skip over elements that are explicitly marked as do not render."""
    return node.is_element and not is_hidden(node) and node.tag not in _NOT_DIRECTLY_RENDERED


def resolve_use_href(document: SvgDocument, node: SvgNode) -> SvgNode | None:
    """Resolve ``href`` / ``xlink:href`` on a <use>. Only ``#id`` fragments are supported."""
    href = node.attribute("href")
    if href is None:
        href = node.attribute("href", XLINK_NS)
    if href is None or not href.startswith("#"):
        return None
    return document.element_by_id(href[1:])


@contextmanager
def _entered(visitor: XmlVisitor, node: SvgNode) -> Iterator[None]:
    visitor.enter(node)
    try:
        yield
    finally:
        visitor.exit(node)


def depth_first_visit(
    document: SvgDocument,
    visitor: XmlVisitor,
    diagnostics: DiagnosticsSink | None = None,
) -> None:
    diagnostics = diagnostics or LoggingDiagnostics()
    # <use> elements whose reference is being expanded right now
    expanding: set[int] = set()

    def visit_node(node: SvgNode) -> None:
        if not should_render_node(node):
            return
        with _entered(visitor, node):
            referenced = resolve_use_href(document, node) if node.tag == "use" else None
            if referenced is None:
                if node.tag == "use":
                    warn(diagnostics, f"Unresolved reference on <use>: {_href(node)!r}", node.tag)
                for child in document.children(node):
                    visit_node(child)
                return
            if node.index in expanding:
                raise ReferenceCycleError(f"<use> reference cycle through {_href(node)!r}")
            expanding.add(node.index)
            try:
                visit_use_referenced_node(referenced)
            finally:
                expanding.discard(node.index)

    def visit_use_referenced_node(node: SvgNode) -> None:
        """visit_node for the target of a <use>: symbols and defs are allowed here."""
        if not node.is_element or is_hidden(node):
            return
        with _entered(visitor, node):
            for child in document.children(node):
                visit_node(child)

    for child in document.children(document.root):
        visit_node(child)


def _href(node: SvgNode) -> str:
    return node.attribute("href") or node.attribute("href", XLINK_NS) or ""
