"""RMS waveform downsampling and per-asset memoization."""

from __future__ import annotations

import logging
from typing import Sequence

import numpy as np

from music_player.audio.models import AudioAsset, WaveformSeries, as_channel_array

logger = logging.getLogger(__name__)


def downsample(channel: Sequence[float] | np.ndarray, bin_count: int, source_id: str = "") -> WaveformSeries:
    """Reduce ``channel`` to ``bin_count`` RMS values.

    Windows are ``len // bin_count`` samples wide and the last window absorbs
    the remainder, so with fewer samples than bins every window but the last
    is empty and reports 0.
    """
    if bin_count <= 0:
        raise ValueError("bin_count must be positive")
    samples = as_channel_array(channel)
    total = len(samples)
    window = total // bin_count

    bins = np.zeros(bin_count, dtype=np.float64)
    if window > 0:
        head = samples[: window * (bin_count - 1)].reshape(bin_count - 1, window)
        bins[:-1] = np.sqrt(np.mean(head * head, axis=1))
    tail = samples[window * (bin_count - 1) :]
    if len(tail):
        bins[-1] = np.sqrt(np.mean(tail * tail))

    values = tuple(float(value) for value in bins)
    return WaveformSeries(bins=values, max=max(values), source_id=source_id)


def mix_to_mono(asset: AudioAsset) -> np.ndarray:
    if asset.channel_count == 1:
        return asset.channels[0].astype(np.float64)
    return np.mean(np.stack(asset.channels).astype(np.float64), axis=0)


def downsample_asset(asset: AudioAsset, bin_count: int, channel_index: int | None = None) -> WaveformSeries:
    if channel_index is None:
        samples = mix_to_mono(asset)
    else:
        samples = asset.channel(channel_index)
    return downsample(samples, bin_count, source_id=asset.asset_id)


class WaveformCache:
    """Single-slot memo keyed on asset identity and bin count.

    A different asset always recomputes and fully replaces the slot.
    """

    def __init__(self) -> None:
        self._asset: AudioAsset | None = None
        self._key: tuple[int, int | None] | None = None
        self._series: WaveformSeries | None = None

    def get(self, asset: AudioAsset, bin_count: int, channel_index: int | None = None) -> WaveformSeries:
        key = (bin_count, channel_index)
        if self._asset is asset and self._key == key and self._series is not None:
            return self._series
        series = downsample_asset(asset, bin_count, channel_index)
        logger.debug(f"Computed {bin_count}-bin waveform for asset {asset.asset_id}")
        self._asset = asset
        self._key = key
        self._series = series
        return series

    def peek(self, asset: AudioAsset) -> WaveformSeries | None:
        if self._asset is asset:
            return self._series
        return None

    def invalidate(self) -> None:
        self._asset = None
        self._key = None
        self._series = None
