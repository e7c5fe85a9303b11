"""Viewport transform for viewBox + preserveAspectRatio.

https://www.w3.org/TR/SVG/coords.html#ComputingAViewportsTransform
"""

from __future__ import annotations

from toolpath.engine import affine
from toolpath.svg.attributes import AspectRatio, ViewBox

_ALIGN_FACTOR = {"min": 0.0, "mid": 0.5, "max": 1.0}


def viewport_transform(
    view_box: ViewBox,
    aspect_ratio: AspectRatio | None,
    size: tuple[float, float],
    position: tuple[float | None, float | None] = (None, None),
) -> affine.Matrix:
    """Transform placing ``view_box`` inside the viewport of ``size`` at ``position``."""
    aspect_ratio = aspect_ratio or AspectRatio()
    e_x = position[0] or 0.0
    e_y = position[1] or 0.0
    e_w, e_h = size

    scale_x = e_w / view_box.width
    scale_y = e_h / view_box.height
    align = aspect_ratio.align
    if align.x is not None:
        uniform = max(scale_x, scale_y) if aspect_ratio.slice else min(scale_x, scale_y)
        scale_x = scale_y = uniform

    translate_x = e_x - view_box.min_x * scale_x
    translate_y = e_y - view_box.min_y * scale_y
    if align.x is not None:
        translate_x += (e_w - view_box.width * scale_x) * _ALIGN_FACTOR[align.x]
        translate_y += (e_h - view_box.height * scale_y) * _ALIGN_FACTOR[align.y]

    return affine.translation(translate_x, translate_y) @ affine.scaling(scale_x, scale_y)
