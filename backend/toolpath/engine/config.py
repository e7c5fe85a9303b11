"""Conversion configuration — unit context, labeling and root viewport overrides."""

from __future__ import annotations

from dataclasses import dataclass

from toolpath.svg.attributes import Length


@dataclass
class ConversionConfig:
    """Controls unit resolution and node labeling."""

    # Dots per inch used for in/cm/mm/pt/pc -> user units (px)
    dpi: float = 96.0

    # Font size in user units, for em/ex lengths
    font_size: float = 16.0

    # Appended to node labels as "=>value" when the node carries this attribute
    extra_attribute_name: str | None = None


@dataclass
class ConversionOptions:
    """Per-document overrides for the root viewport size.

    Width and height are independent; None leaves the document's own value.
    """

    dimensions: tuple[Length | None, Length | None] = (None, None)
