"""Explicitly owned engine context replacing ambient audio-graph globals."""

from __future__ import annotations

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor

from music_player.audio.decoder import decode
from music_player.audio.models import AudioAsset, MediaKind, WaveformSeries
from music_player.audio.waveform import WaveformCache
from music_player.config import EngineSettings
from music_player.errors import PlayerEngineError
from music_player.resources import HandleRegistry
from music_player.visualizer.analyzer import SpectrumAnalyzer
from music_player.visualizer.spectrum import SpectrumRenderer, SpectrumVisualizer

logger = logging.getLogger(__name__)


class EngineContext:
    """Owns the analyzer tap, waveform memo, blob handles and decode executor.

    Build one per player, pass it to the sessions that need it and close it on
    teardown; closing releases every outstanding handle.
    """

    def __init__(
        self,
        settings: EngineSettings | None = None,
        executor: ThreadPoolExecutor | None = None,
    ) -> None:
        self.settings = settings or EngineSettings.from_env()
        self.analyzer = SpectrumAnalyzer(
            fft_size=self.settings.fft_size,
            smoothing_time_constant=self.settings.smoothing_time_constant,
            min_decibels=self.settings.min_decibels,
            max_decibels=self.settings.max_decibels,
        )
        self.visualizer = SpectrumVisualizer(
            renderer=SpectrumRenderer(
                bar_count=self.settings.spectrum_bar_count,
                min_bar_height=self.settings.spectrum_min_bar_height,
            ),
            rate_playing=self.settings.color_rate_playing,
            rate_paused=self.settings.color_rate_paused,
            epsilon=self.settings.color_epsilon,
        )
        self.waveforms = WaveformCache()
        self.handles = HandleRegistry()
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=self.settings.decode_workers,
            thread_name_prefix="audio-decode",
        )
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def decode(self, data: bytes, kind: MediaKind = MediaKind.AUDIO, name: str = "") -> AudioAsset:
        self._ensure_open()
        return decode(data, kind=kind, name=name, settings=self.settings)

    async def decode_async(self, data: bytes, kind: MediaKind = MediaKind.AUDIO, name: str = "") -> AudioAsset:
        self._ensure_open()
        future = self._executor.submit(decode, data, kind, name, self.settings)
        return await asyncio.wrap_future(future)

    def waveform(self, asset: AudioAsset, bin_count: int | None = None) -> WaveformSeries:
        return self.waveforms.get(asset, bin_count or self.settings.waveform_bins)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        released = self.handles.release_all()
        self.waveforms.invalidate()
        self.analyzer.reset()
        if self._owns_executor:
            self._executor.shutdown(wait=False, cancel_futures=True)
        logger.info(f"Engine context closed ({released} handles released)")

    def __enter__(self) -> EngineContext:
        return self

    def __exit__(self, *_exc: object) -> None:
        self.close()

    def _ensure_open(self) -> None:
        if self._closed:
            raise PlayerEngineError("engine context is closed")
