"""API response models."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str = "0.1.0"


class DrawOut(BaseModel):
    label: str = ""
    # Composed transform as SVG matrix coefficients (a, b, c, d, e, f)
    transform: list[float]
    segments: list[dict[str, Any]] = Field(default_factory=list)


class DiagnosticOut(BaseModel):
    severity: str
    message: str
    tag: str = ""


class ConvertResponse(BaseModel):
    draws: list[DrawOut] = Field(default_factory=list)
    diagnostics: list[DiagnosticOut] = Field(default_factory=list)
    processing_time_ms: float = 0.0
