"""SVG document model — an immutable arena of nodes built with ElementTree.

Nodes are addressed by integer index; parent/child links are indices into the
arena, so traversal state never holds on to parser objects. Index 0 is the
document node and its element child is the root element.
"""

from __future__ import annotations

import enum
import logging
import xml.etree.ElementTree as ET
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from toolpath.engine.errors import SvgParseError

logger = logging.getLogger(__name__)

SVG_NS = "http://www.w3.org/2000/svg"
XLINK_NS = "http://www.w3.org/1999/xlink"


class NodeKind(enum.Enum):
    DOCUMENT = "document"
    ELEMENT = "element"
    COMMENT = "comment"
    PROCESSING_INSTRUCTION = "processing_instruction"


@dataclass(frozen=True, eq=False)
class SvgNode:
    index: int
    kind: NodeKind
    # Local tag name with the namespace stripped; empty for non-elements
    tag: str = ""
    # Namespaced attributes keep ElementTree's "{uri}name" keys
    attributes: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    parent: int | None = None
    children: tuple[int, ...] = ()

    @property
    def is_element(self) -> bool:
        return self.kind is NodeKind.ELEMENT

    def attribute(self, name: str, namespace: str | None = None) -> str | None:
        if namespace is not None:
            name = f"{{{namespace}}}{name}"
        return self.attributes.get(name)

    def has_attribute(self, name: str, namespace: str | None = None) -> bool:
        return self.attribute(name, namespace) is not None


def _strip_ns(tag: str) -> str:
    return tag.split("}")[-1] if "}" in tag else tag


class SvgDocument:
    """Parsed SVG document. Read-only once constructed."""

    def __init__(self, nodes: list[SvgNode]) -> None:
        self._nodes = tuple(nodes)
        self._ids: dict[str, int] = {}
        for node in self.descendants(self.root):
            node_id = node.attribute("id")
            if node.is_element and node_id is not None and node_id not in self._ids:
                self._ids[node_id] = node.index

    @classmethod
    def from_string(cls, svg_text: str | bytes) -> SvgDocument:
        parser = ET.XMLParser(target=ET.TreeBuilder(insert_comments=True, insert_pis=True))
        try:
            root = ET.fromstring(svg_text, parser=parser)
        except ET.ParseError as e:
            raise SvgParseError(f"could not parse SVG: {e}") from e
        return cls.from_element(root)

    @classmethod
    def from_element(cls, root: ET.Element) -> SvgDocument:
        nodes: list[SvgNode | None] = [None]
        root_index = _flatten(root, 0, nodes)
        nodes[0] = SvgNode(index=0, kind=NodeKind.DOCUMENT, children=(root_index,))
        document = cls(nodes)  # type: ignore[arg-type]
        logger.debug("Parsed SVG document: %d nodes, root <%s>", len(nodes), document.root_element.tag)
        return document

    # ── navigation ──

    @property
    def root(self) -> SvgNode:
        return self._nodes[0]

    @property
    def root_element(self) -> SvgNode:
        return self._nodes[self.root.children[0]]

    def __len__(self) -> int:
        return len(self._nodes)

    def node(self, index: int) -> SvgNode:
        return self._nodes[index]

    def children(self, node: SvgNode) -> Iterator[SvgNode]:
        for index in node.children:
            yield self._nodes[index]

    def parent(self, node: SvgNode) -> SvgNode | None:
        return None if node.parent is None else self._nodes[node.parent]

    def descendants(self, node: SvgNode) -> Iterator[SvgNode]:
        """``node`` itself followed by everything below it, in document order."""
        stack = [node.index]
        while stack:
            current = self._nodes[stack.pop()]
            yield current
            stack.extend(reversed(current.children))

    def element_by_id(self, element_id: str) -> SvgNode | None:
        index = self._ids.get(element_id)
        return None if index is None else self._nodes[index]


def _flatten(element: ET.Element, parent: int, nodes: list[SvgNode | None]) -> int:
    """Append ``element`` and its subtree to ``nodes``; return its index."""
    index = len(nodes)
    nodes.append(None)
    if element.tag is ET.Comment:
        kind, tag, attributes = NodeKind.COMMENT, "", {}
    elif element.tag is ET.ProcessingInstruction:
        kind, tag, attributes = NodeKind.PROCESSING_INSTRUCTION, "", {}
    else:
        kind, tag, attributes = NodeKind.ELEMENT, _strip_ns(element.tag), dict(element.attrib)
    children = tuple(_flatten(child, index, nodes) for child in element)
    nodes[index] = SvgNode(
        index=index,
        kind=kind,
        tag=tag,
        attributes=MappingProxyType(attributes),
        parent=parent,
        children=children,
    )
    return index
