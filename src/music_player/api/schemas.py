"""FastAPI request/response schemas."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class AssetResponse(BaseModel):
    asset_id: str
    name: str
    kind: Literal["audio", "video"]
    channels: int
    sample_rate: int
    sample_count: int
    duration_sec: float
    bits_per_sample: int
    needs_preview_surface: bool


class WaveformResponse(BaseModel):
    asset_id: str
    bins: list[float]
    max: float


class SpectrumResponse(BaseModel):
    asset_id: str
    time: float
    values: list[int]


class TrimRequest(BaseModel):
    start_pct: float = Field(ge=0.0, le=100.0)
    end_pct: float = Field(ge=0.0, le=100.0)
