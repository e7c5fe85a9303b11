"""POST /api/convert — lower an SVG into drawing segments."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

from toolpath.config import Settings
from toolpath.dependencies import get_settings
from toolpath.engine.config import ConversionConfig, ConversionOptions
from toolpath.engine.converter import convert_svg
from toolpath.engine.errors import ConversionError
from toolpath.engine.segments import segment_to_dict
from toolpath.models.requests import ConvertRequest
from toolpath.models.responses import ConvertResponse, DiagnosticOut, DrawOut
from toolpath.svg.attributes import Length, parse_length

logger = logging.getLogger(__name__)

router = APIRouter()


def _override(name: str, value: str | None) -> Length | None:
    if value is None:
        return None
    try:
        return parse_length(value)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=f"{name}: {e}") from e


@router.post("/convert", response_model=ConvertResponse)
def convert(req: ConvertRequest, settings: Settings = Depends(get_settings)) -> ConvertResponse:
    config = ConversionConfig(
        dpi=req.dpi or settings.default_dpi,
        font_size=settings.default_font_size,
        extra_attribute_name=req.extra_attribute_name,
    )
    options = ConversionOptions(dimensions=(_override("width", req.width), _override("height", req.height)))

    try:
        result = convert_svg(req.svg, config, options)
    except ConversionError as e:
        logger.warning("Conversion failed: %s", e)
        raise HTTPException(status_code=422, detail=str(e)) from e

    return ConvertResponse(
        draws=[
            DrawOut(
                label=draw.label,
                transform=list(draw.transform),
                segments=[segment_to_dict(s) for s in draw.segments],
            )
            for draw in result.draws
        ],
        diagnostics=[
            DiagnosticOut(severity=d.severity.value, message=d.message, tag=d.tag) for d in result.diagnostics
        ],
        processing_time_ms=result.processing_time_ms,
    )
