"""Tests for the SVG document arena."""

import pytest

from toolpath.engine.errors import SvgParseError
from toolpath.svg.document import XLINK_NS, NodeKind, SvgDocument
from tests.conftest import NESTED_GROUPS_SVG, SYMBOL_SVG


def test_root_and_namespace_stripping():
    doc = SvgDocument.from_string(NESTED_GROUPS_SVG)
    assert doc.root.kind is NodeKind.DOCUMENT
    assert doc.root_element.tag == "svg"
    assert doc.root_element.parent == doc.root.index


def test_comments_are_kept_as_non_elements():
    doc = SvgDocument.from_string(NESTED_GROUPS_SVG)
    kinds = [child.kind for child in doc.children(doc.root_element)]
    assert kinds[0] is NodeKind.COMMENT
    assert kinds[1:] == [NodeKind.ELEMENT, NodeKind.ELEMENT]


def test_descendants_in_document_order():
    doc = SvgDocument.from_string(NESTED_GROUPS_SVG)
    tags = [n.tag for n in doc.descendants(doc.root_element) if n.is_element]
    assert tags == ["svg", "g", "rect", "g", "line", "circle"]


def test_parent_links():
    doc = SvgDocument.from_string(NESTED_GROUPS_SVG)
    rect = doc.element_by_id("r1")
    assert doc.parent(rect).attribute("id") == "grp"
    assert doc.parent(doc.root) is None


def test_namespaced_href():
    doc = SvgDocument.from_string(SYMBOL_SVG)
    use = doc.element_by_id("u2")
    assert use.attribute("href") is None
    assert use.attribute("href", XLINK_NS) == "#dot"
    assert use.has_attribute("href", XLINK_NS)


def test_element_by_id_first_in_document_order():
    doc = SvgDocument.from_string(
        '<svg xmlns="http://www.w3.org/2000/svg"><g><rect id="a" width="1"/></g><circle id="a"/></svg>'
    )
    assert doc.element_by_id("a").tag == "rect"
    assert doc.element_by_id("nope") is None


def test_attributes_are_read_only():
    doc = SvgDocument.from_string(NESTED_GROUPS_SVG)
    with pytest.raises(TypeError):
        doc.root_element.attributes["width"] = "1"  # type: ignore[index]


def test_malformed_markup():
    with pytest.raises(SvgParseError):
        SvgDocument.from_string("<svg><g></svg>")
