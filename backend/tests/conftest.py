"""Shared test fixtures."""

from __future__ import annotations

import pytest

from toolpath.engine.diagnostics import CollectingDiagnostics
from toolpath.engine.units import UnitResolver, ViewportStack


# Sample SVGs

VIEWBOX_ONLY_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 100 50">
  <rect x="0" y="0" width="10" height="10"/>
</svg>'''

ROUNDED_RECT_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 100 50">
  <rect x="0" y="0" width="10" height="10" rx="2" ry="2"/>
</svg>'''

NESTED_GROUPS_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" width="100" height="100">
  <!-- frame -->
  <g id="grp" transform="translate(10, 20)">
    <rect id="r1" data-name="Frame" x="0" y="0" width="10" height="10"/>
    <g>
      <line x1="0" y1="0" x2="5" y2="5"/>
    </g>
  </g>
  <circle cx="50" cy="50" r="10"/>
</svg>'''

SYMBOL_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" xmlns:xlink="http://www.w3.org/1999/xlink" viewBox="0 0 100 100">
  <defs>
    <circle id="dot" cx="0" cy="0" r="1"/>
  </defs>
  <symbol id="box" viewBox="0 0 10 10" width="20" height="20">
    <rect x="0" y="0" width="50%" height="50%"/>
  </symbol>
  <use id="u1" href="#box" x="30" y="40"/>
  <use id="u2" xlink:href="#dot"/>
</svg>'''

NESTED_USE_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 100 100">
  <defs>
    <rect id="tile" width="2" height="2"/>
  </defs>
  <symbol id="outer">
    <use id="inner" href="#tile" x="3" y="4"/>
  </symbol>
  <use id="top" href="#outer" x="10" y="20"/>
</svg>'''

HIDDEN_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 100 100">
  <g style="fill:red;display:none">
    <rect width="10" height="10"/>
  </g>
  <line style="display:none" x1="0" y1="0" x2="1" y2="1"/>
</svg>'''

DANGLING_USE_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 100 100">
  <use href="#missing"/>
</svg>'''

CYCLE_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 100 100">
  <g id="loop">
    <rect width="1" height="1"/>
    <use href="#loop"/>
  </g>
</svg>'''

SHAPES_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" width="200mm" height="100mm" viewBox="0 0 200 100">
  <path d="M 10 10 L 20 10 L 20 20 Z"/>
  <polyline points="0,0 10,0 10,10"/>
  <polygon points="0,0 10,0 10,10"/>
  <rect x="5" y="5" width="20" height="10" rx="3" ry="3"/>
  <circle cx="50" cy="50" r="10"/>
  <ellipse cx="80" cy="50" rx="15" ry="5"/>
  <line x1="0" y1="90" x2="200" y2="90"/>
  <text x="0" y="0">ignored</text>
</svg>'''


def svg_doc(inner: str, root_attrs: str = 'viewBox="0 0 100 100"') -> str:
    """Wrap element markup in an <svg> root."""
    return (
        f'<svg xmlns="http://www.w3.org/2000/svg" xmlns:xlink="http://www.w3.org/1999/xlink" {root_attrs}>'
        f"{inner}</svg>"
    )


@pytest.fixture
def diagnostics() -> CollectingDiagnostics:
    return CollectingDiagnostics()


@pytest.fixture
def viewports() -> ViewportStack:
    return ViewportStack()


@pytest.fixture
def units(viewports: ViewportStack, diagnostics: CollectingDiagnostics) -> UnitResolver:
    return UnitResolver(viewports, diagnostics=diagnostics)


def first_element(inner: str, root_attrs: str = 'viewBox="0 0 100 100"'):
    """Parse ``inner`` inside an <svg> root and return the first element under the root."""
    from toolpath.svg.document import SvgDocument

    doc = SvgDocument.from_string(svg_doc(inner, root_attrs))
    return next(n for n in doc.children(doc.root_element) if n.is_element)
