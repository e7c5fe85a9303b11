"""Tests for the depth-first traversal driver."""

import pytest

from toolpath.engine.errors import ReferenceCycleError
from toolpath.engine.traversal import depth_first_visit, resolve_use_href, should_render_node
from toolpath.svg.document import SvgDocument
from tests.conftest import (
    CYCLE_SVG,
    DANGLING_USE_SVG,
    HIDDEN_SVG,
    NESTED_GROUPS_SVG,
    NESTED_USE_SVG,
    SYMBOL_SVG,
    first_element,
    svg_doc,
)


class EventLog:
    """Visitor that records enter/exit events as (event, label) pairs."""

    def __init__(self):
        self.events = []

    def enter(self, node):
        node_id = node.attribute("id")
        self.events.append(("enter", f"{node.tag}#{node_id}" if node_id else node.tag))

    def exit(self, node):
        node_id = node.attribute("id")
        self.events.append(("exit", f"{node.tag}#{node_id}" if node_id else node.tag))

    @property
    def entered(self):
        return [label for event, label in self.events if event == "enter"]

    def balanced(self):
        depth = 0
        for event, _ in self.events:
            depth += 1 if event == "enter" else -1
            if depth < 0:
                return False
        return depth == 0


def _walk(svg, diagnostics):
    log = EventLog()
    depth_first_visit(SvgDocument.from_string(svg), log, diagnostics)
    return log


def test_document_order_and_nesting(diagnostics):
    log = _walk(NESTED_GROUPS_SVG, diagnostics)
    assert log.events == [
        ("enter", "svg"),
        ("enter", "g#grp"),
        ("enter", "rect#r1"),
        ("exit", "rect#r1"),
        ("enter", "g"),
        ("enter", "line"),
        ("exit", "line"),
        ("exit", "g"),
        ("exit", "g#grp"),
        ("enter", "circle"),
        ("exit", "circle"),
        ("exit", "svg"),
    ]


def test_hidden_elements_are_skipped_with_subtree(diagnostics):
    log = _walk(HIDDEN_SVG, diagnostics)
    assert log.entered == ["svg"]


def test_symbols_render_only_through_use(diagnostics):
    log = _walk(SYMBOL_SVG, diagnostics)
    assert log.entered == ["svg", "use#u1", "symbol#box", "rect", "use#u2", "circle#dot"]
    assert log.balanced()
    assert diagnostics.items == []


def test_dangling_use_warns(diagnostics):
    log = _walk(DANGLING_USE_SVG, diagnostics)
    assert log.entered == ["svg", "use"]
    assert log.balanced()
    assert len(diagnostics.warnings) == 1
    assert "#missing" in diagnostics.warnings[0].message


def test_dangling_use_visits_its_own_children(diagnostics):
    svg = svg_doc('<use href="#nope"><rect width="1" height="1"/></use>')
    log = _walk(svg, diagnostics)
    assert log.entered == ["svg", "use", "rect"]
    assert log.balanced()
    assert len(diagnostics.warnings) == 1


def test_resolved_use_skips_its_own_children(diagnostics):
    svg = svg_doc('<rect id="r" width="1" height="1"/><use href="#r"><circle r="1"/></use>')
    log = _walk(svg, diagnostics)
    assert log.entered == ["svg", "rect#r", "use", "rect#r"]
    assert diagnostics.items == []


def test_use_inside_referenced_symbol_resolves(diagnostics):
    log = _walk(NESTED_USE_SVG, diagnostics)
    assert log.entered == ["svg", "use#top", "symbol#outer", "use#inner", "rect#tile"]
    assert log.balanced()
    assert diagnostics.items == []


def test_external_reference_is_unresolved(diagnostics):
    svg = svg_doc('<use href="other.svg#r"/>')
    log = _walk(svg, diagnostics)
    assert log.entered == ["svg", "use"]
    assert len(diagnostics.warnings) == 1


def test_hidden_reference_target_is_skipped(diagnostics):
    svg = svg_doc('<defs><rect id="r" style="display:none" width="1" height="1"/></defs><use href="#r"/>')
    log = _walk(svg, diagnostics)
    assert log.entered == ["svg", "use"]


def test_same_target_used_twice(diagnostics):
    svg = svg_doc('<defs><rect id="r" width="1" height="1"/></defs><use href="#r"/><use href="#r"/>')
    log = _walk(svg, diagnostics)
    assert log.entered == ["svg", "use", "rect#r", "use", "rect#r"]


def test_reference_cycle_raises_and_unwinds(diagnostics):
    log = EventLog()
    with pytest.raises(ReferenceCycleError):
        depth_first_visit(SvgDocument.from_string(CYCLE_SVG), log, diagnostics)
    assert log.balanced()
    assert log.entered[:5] == ["svg", "g#loop", "rect", "use", "g#loop"]


def test_comments_and_processing_instructions_are_skipped(diagnostics):
    svg = '<?xml version="1.0"?>' + svg_doc("<!-- note --><?pi data?><rect width='1' height='1'/>")
    log = _walk(svg, diagnostics)
    assert log.entered == ["svg", "rect"]


def test_exit_runs_when_enter_of_child_fails(diagnostics):
    class Failing(EventLog):
        def enter(self, node):
            if node.tag == "line":
                raise ValueError("boom")
            super().enter(node)

    log = Failing()
    with pytest.raises(ValueError):
        depth_first_visit(SvgDocument.from_string(NESTED_GROUPS_SVG), log, diagnostics)
    assert log.balanced()


def test_should_render_node():
    assert should_render_node(first_element("<g/>"))
    assert not should_render_node(first_element("<defs/>"))
    assert not should_render_node(first_element("<symbol/>"))
    assert not should_render_node(first_element("<marker/>"))
    assert not should_render_node(first_element('<g style="display:none"/>'))


def test_resolve_use_href_prefers_plain_href():
    doc = SvgDocument.from_string(
        svg_doc('<rect id="a"/><rect id="b"/><use href="#a" xlink:href="#b"/>')
    )
    use = next(n for n in doc.descendants(doc.root_element) if n.tag == "use")
    assert resolve_use_href(doc, use).attribute("id") == "a"
