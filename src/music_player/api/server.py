"""HTTP endpoints for decoding, waveform, spectrum and trim requests."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator
from urllib.parse import quote

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.responses import Response

from music_player.api.schemas import AssetResponse, SpectrumResponse, TrimRequest, WaveformResponse
from music_player.audio.models import AudioAsset, MediaKind
from music_player.audio.repository import AssetRepository
from music_player.audio.trim import trim
from music_player.engine import EngineContext
from music_player.errors import DecodeError, InvalidRegionError
from music_player.playback.selection import SelectionRegion
from music_player.visualizer.analyzer import SpectrumAnalyzer

logger = logging.getLogger(__name__)


def create_app(
    context: EngineContext | None = None,
    repository: AssetRepository | None = None,
) -> FastAPI:
    engine = context or EngineContext()
    assets = repository or AssetRepository()

    @asynccontextmanager
    async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
        yield
        if context is None:
            engine.close()

    app = FastAPI(title="music-player API", version="0.1.0", lifespan=lifespan)

    def _get_asset(asset_id: str) -> AudioAsset:
        try:
            return assets.get(asset_id)
        except KeyError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc

    @app.get("/")
    def root() -> dict[str, str]:
        return {
            "service": "music-player API",
            "status": "ok",
            "docs": "/docs",
        }

    @app.get("/favicon.ico", include_in_schema=False)
    def favicon() -> Response:
        return Response(status_code=204)

    @app.post("/v1/assets", response_model=AssetResponse, status_code=201)
    async def upload_asset(request: Request, name: str = "") -> AssetResponse:
        data = await request.body()
        kind = MediaKind.from_mime(request.headers.get("content-type"))
        try:
            asset = await engine.decode_async(data, kind=kind, name=name)
        except DecodeError as exc:
            logger.warning(f"Rejected upload {name!r}: {exc}")
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        assets.add(asset)
        return _asset_response(asset)

    @app.get("/v1/assets/{asset_id}", response_model=AssetResponse)
    def get_asset(asset_id: str) -> AssetResponse:
        return _asset_response(_get_asset(asset_id))

    @app.delete("/v1/assets/{asset_id}", status_code=204)
    def delete_asset(asset_id: str) -> Response:
        try:
            assets.remove(asset_id)
        except KeyError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        return Response(status_code=204)

    @app.get("/v1/assets/{asset_id}/waveform", response_model=WaveformResponse)
    def get_waveform(asset_id: str, bins: int | None = Query(default=None, ge=1, le=20_000)) -> WaveformResponse:
        series = engine.waveform(_get_asset(asset_id), bins)
        return WaveformResponse(asset_id=asset_id, bins=list(series.bins), max=series.max)

    @app.get("/v1/assets/{asset_id}/spectrum", response_model=SpectrumResponse)
    def get_spectrum(asset_id: str, time: float = Query(default=0.0, ge=0.0)) -> SpectrumResponse:
        asset = _get_asset(asset_id)
        settings = engine.settings
        analyzer = SpectrumAnalyzer(
            fft_size=settings.fft_size,
            smoothing_time_constant=0.0,
            min_decibels=settings.min_decibels,
            max_decibels=settings.max_decibels,
        )
        frame = analyzer.frame_at(asset, time)
        return SpectrumResponse(asset_id=asset_id, time=min(time, asset.duration_sec), values=list(frame.values))

    @app.post("/v1/assets/{asset_id}/trim")
    def trim_asset(asset_id: str, payload: TrimRequest) -> Response:
        asset = _get_asset(asset_id)
        try:
            region = SelectionRegion(start_pct=payload.start_pct, end_pct=payload.end_pct)
            result = trim(asset, region)
        except InvalidRegionError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        assets.add(result.asset)
        return Response(
            content=result.data,
            media_type="audio/wav",
            headers={
                "X-Asset-Id": result.asset.asset_id,
                "Content-Disposition": f"attachment; filename*=UTF-8''{quote(result.filename)}",
            },
        )

    return app


def _asset_response(asset: AudioAsset) -> AssetResponse:
    return AssetResponse(
        asset_id=asset.asset_id,
        name=asset.name,
        kind=asset.kind.value,
        channels=asset.channel_count,
        sample_rate=asset.sample_rate,
        sample_count=asset.sample_count,
        duration_sec=asset.duration_sec,
        bits_per_sample=asset.bits_per_sample,
        needs_preview_surface=asset.kind.needs_preview_surface,
    )


app = create_app()
