"""API request models."""

from __future__ import annotations

from pydantic import BaseModel, Field


class ConvertRequest(BaseModel):
    svg: str = Field(..., description="Raw SVG code")
    width: str | None = Field(default=None, description="Override for the root width, e.g. '210mm'")
    height: str | None = Field(default=None, description="Override for the root height, e.g. '297mm'")
    dpi: float | None = Field(default=None, gt=0, description="Dots per inch for absolute units")
    extra_attribute_name: str | None = Field(
        default=None,
        description="Attribute whose value is appended to node labels",
    )
