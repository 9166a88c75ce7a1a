"""Player and trim sessions wiring decode, selection, preview and visualizer."""

from __future__ import annotations

import logging

import numpy as np

from music_player.audio.models import AudioAsset, MediaKind, TrimResult, WaveformSeries
from music_player.audio.trim import trim
from music_player.engine import EngineContext
from music_player.errors import DecodeError, PlayerEngineError
from music_player.playback.preview import RegionPreview
from music_player.playback.selection import (
    CanvasGeometry,
    DragState,
    PlaybackCursor,
    PointerEvent,
    RegionSelector,
    SelectionRegion,
)
from music_player.timefmt import format_clock, parse_time
from music_player.visualizer.analyzer import SpectrumFrame
from music_player.visualizer.spectrum import SpectrumPaint, VisualizerState

logger = logging.getLogger(__name__)


class TrimSession:
    def __init__(
        self,
        context: EngineContext,
        asset: AudioAsset,
        geometry: CanvasGeometry | None = None,
        source: bytes | None = None,
        mime_type: str | None = None,
    ) -> None:
        settings = context.settings
        self._context = context
        self._asset = asset
        self._selector = RegionSelector(
            duration=asset.duration_sec,
            geometry=geometry or CanvasGeometry(width=float(settings.waveform_bins), padding=settings.label_padding_px),
            hit_tolerance=settings.hit_tolerance_px,
        )
        self._preview = RegionPreview(self._selector)
        self._preview_handle: str | None = None
        if source is not None:
            self._preview_handle = context.handles.create(source, mime_type or "application/octet-stream")
        self._closed = False

    @property
    def asset(self) -> AudioAsset:
        return self._asset

    @property
    def selector(self) -> RegionSelector:
        return self._selector

    @property
    def region(self) -> SelectionRegion:
        return self._selector.region

    @property
    def cursor(self) -> PlaybackCursor:
        return self._selector.cursor

    @property
    def state(self) -> DragState:
        return self._selector.state

    @property
    def preview_playing(self) -> bool:
        return self._preview.playing

    @property
    def preview_handle(self) -> str | None:
        return self._preview_handle

    @property
    def closed(self) -> bool:
        return self._closed

    def waveform(self, bin_count: int | None = None) -> WaveformSeries:
        return self._context.waveform(self._asset, bin_count)

    def handle_pointer(self, event: PointerEvent) -> DragState:
        if self._closed:
            return DragState.IDLE
        return self._selector.handle(event)

    def resize(self, geometry: CanvasGeometry) -> None:
        self._selector.resize(geometry)

    def set_start_pct(self, pct: float) -> bool:
        return not self._closed and self._preview.set_start_pct(pct)

    def set_end_pct(self, pct: float) -> bool:
        return not self._closed and self._preview.set_end_pct(pct)

    def set_start_text(self, text: str) -> bool:
        seconds = parse_time(text, self._asset.duration_sec)
        if seconds is None:
            return False
        return self.set_start_pct(seconds / self._asset.duration_sec * 100)

    def set_end_text(self, text: str) -> bool:
        seconds = parse_time(text, self._asset.duration_sec)
        if seconds is None:
            return False
        return self.set_end_pct(seconds / self._asset.duration_sec * 100)

    def toggle_preview(self) -> bool:
        if self._closed:
            return False
        return self._preview.toggle()

    def advance(self, current_time: float) -> float:
        return self._preview.advance(current_time)

    def labels(self) -> dict[str, str]:
        duration = self._asset.duration_sec
        region = self._selector.region
        return {
            "start": format_clock(region.start_time(duration)),
            "end": format_clock(region.end_time(duration)),
            "length": format_clock(region.end_time(duration) - region.start_time(duration)),
        }

    def commit(self) -> TrimResult:
        if self._closed:
            raise PlayerEngineError("trim session is closed")
        self._preview.stop()
        return trim(self._asset, self._selector.region)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._preview.stop()
        self._selector.pointer_up()
        self._context.handles.release(self._preview_handle)
        self._preview_handle = None

    def __enter__(self) -> TrimSession:
        return self

    def __exit__(self, *_exc: object) -> None:
        self.close()


class PlayerSession:
    """Current asset, transport state and visualizer state for one player.

    Loads are identity-checked: a decode that finishes after a newer load or a
    discard is dropped instead of replacing the current asset.
    """

    def __init__(self, context: EngineContext) -> None:
        self._context = context
        self._generation = 0
        self._asset: AudioAsset | None = None
        self._source: bytes | None = None
        self._mime_type: str | None = None
        self._media_handle: str | None = None
        self._cursor: PlaybackCursor | None = None
        self._playing = False
        self._visual_state = VisualizerState()
        self._trim: TrimSession | None = None

    @property
    def asset(self) -> AudioAsset | None:
        return self._asset

    @property
    def kind(self) -> MediaKind | None:
        return self._asset.kind if self._asset else None

    @property
    def media_handle(self) -> str | None:
        return self._media_handle

    @property
    def cursor(self) -> PlaybackCursor | None:
        return self._cursor

    @property
    def playing(self) -> bool:
        return self._playing

    @property
    def visual_state(self) -> VisualizerState:
        return self._visual_state

    @property
    def trim_session(self) -> TrimSession | None:
        return self._trim

    async def load(self, data: bytes, mime_type: str | None = None, name: str = "") -> AudioAsset | None:
        self._generation += 1
        token = self._generation
        kind = MediaKind.from_mime(mime_type)
        try:
            asset = await self._context.decode_async(data, kind=kind, name=name)
        except DecodeError as exc:
            if token != self._generation:
                logger.info(f"Ignoring failed decode of superseded load {name!r}: {exc}")
                return None
            logger.warning(f"Could not decode {name!r}: {exc}")
            raise
        if token != self._generation:
            logger.info(f"Dropping stale decode of {name!r} ({asset.asset_id})")
            return None
        self._install(asset, data, mime_type)
        return asset

    def discard(self) -> None:
        self._generation += 1
        self._release_media()
        self._asset = None
        self._source = None
        self._mime_type = None
        self._cursor = None
        self._playing = False

    def play(self) -> bool:
        if self._asset is None:
            return False
        self._playing = True
        return True

    def pause(self) -> None:
        self._playing = False

    def toggle(self) -> bool:
        if self._playing:
            self.pause()
            return False
        return self.play()

    def seek(self, time: float) -> float:
        if self._cursor is None:
            return 0.0
        return self._cursor.seek(time)

    def waveform(self, bin_count: int | None = None) -> WaveformSeries:
        if self._asset is None:
            raise PlayerEngineError("no asset loaded")
        return self._context.waveform(self._asset, bin_count)

    def tick(self, width: float, height: float, current_time: float | None = None) -> SpectrumPaint:
        analyzer = self._context.analyzer
        if current_time is not None:
            self.seek(current_time)
        if self._asset is not None and self._cursor is not None and self._playing:
            frame = analyzer.frame_at(self._asset, self._cursor.current_time)
        elif self._asset is not None:
            frame = analyzer.analyse(np.zeros(analyzer.fft_size))
        else:
            frame = SpectrumFrame.silent(analyzer.frequency_bin_count)
        self._visual_state, paint = self._context.visualizer.tick(
            self._visual_state, frame, self._playing, width, height
        )
        return paint

    def open_trim(self, geometry: CanvasGeometry | None = None) -> TrimSession:
        if self._asset is None:
            raise PlayerEngineError("no asset loaded")
        self._close_trim()
        self._trim = TrimSession(
            self._context,
            self._asset,
            geometry=geometry,
            source=self._source,
            mime_type=self._mime_type,
        )
        return self._trim

    def close(self) -> None:
        self.discard()

    def _install(self, asset: AudioAsset, data: bytes, mime_type: str | None) -> None:
        self._release_media()
        self._asset = asset
        self._source = data
        self._mime_type = mime_type
        self._media_handle = self._context.handles.create(data, mime_type or "application/octet-stream")
        self._cursor = PlaybackCursor(duration=asset.duration_sec)
        self._playing = False
        self._context.waveforms.invalidate()
        self._context.analyzer.reset()

    def _release_media(self) -> None:
        self._close_trim()
        self._context.handles.release(self._media_handle)
        self._media_handle = None

    def _close_trim(self) -> None:
        if self._trim is not None:
            self._trim.close()
            self._trim = None
