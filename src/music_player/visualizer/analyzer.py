"""Frequency-domain tap turning short PCM windows into byte spectrum frames."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from music_player.audio.models import AudioAsset


@dataclass(slots=True, frozen=True)
class SpectrumFrame:
    values: tuple[int, ...]

    def __len__(self) -> int:
        return len(self.values)

    def __getitem__(self, index: int) -> int:
        return self.values[index]

    @staticmethod
    def silent(bin_count: int) -> SpectrumFrame:
        return SpectrumFrame(values=(0,) * bin_count)


class SpectrumAnalyzer:
    """Windowed FFT with temporal smoothing and decibel-to-byte scaling.

    Each call to ``analyse`` consumes the most recent ``fft_size`` samples and
    updates the smoothing state, so one analyzer serves one playback stream.
    """

    def __init__(
        self,
        fft_size: int = 256,
        smoothing_time_constant: float = 0.8,
        min_decibels: float = -100.0,
        max_decibels: float = -30.0,
    ) -> None:
        if fft_size < 32 or fft_size & (fft_size - 1):
            raise ValueError("fft_size must be a power of two >= 32")
        if max_decibels <= min_decibels:
            raise ValueError("max_decibels must be greater than min_decibels")
        self.fft_size = fft_size
        self.smoothing_time_constant = min(max(smoothing_time_constant, 0.0), 1.0)
        self.min_decibels = min_decibels
        self.max_decibels = max_decibels
        self._window = np.blackman(fft_size)
        self._previous = np.zeros(self.frequency_bin_count, dtype=np.float64)

    @property
    def frequency_bin_count(self) -> int:
        return self.fft_size // 2

    def reset(self) -> None:
        self._previous = np.zeros(self.frequency_bin_count, dtype=np.float64)

    def analyse(self, samples: np.ndarray) -> SpectrumFrame:
        chunk = np.asarray(samples, dtype=np.float64).reshape(-1)[-self.fft_size :]
        if len(chunk) < self.fft_size:
            chunk = np.concatenate([np.zeros(self.fft_size - len(chunk)), chunk])
        chunk = np.nan_to_num(chunk, nan=0.0, posinf=0.0, neginf=0.0)

        spectrum = np.fft.rfft(chunk * self._window)[: self.frequency_bin_count]
        magnitude = np.abs(spectrum) / self.fft_size
        tau = self.smoothing_time_constant
        smoothed = tau * self._previous + (1.0 - tau) * magnitude
        self._previous = smoothed

        decibels = 20.0 * np.log10(np.maximum(smoothed, 1e-12))
        span = self.max_decibels - self.min_decibels
        scaled = np.floor((decibels - self.min_decibels) / span * 255.0)
        values = np.clip(scaled, 0, 255).astype(np.uint8)
        return SpectrumFrame(values=tuple(int(value) for value in values))

    def frame_at(self, asset: AudioAsset, time: float) -> SpectrumFrame:
        """Analyse the window of ``asset`` that ends at ``time`` seconds."""
        end = int(min(max(time, 0.0), asset.duration_sec) * asset.sample_rate)
        start = max(end - self.fft_size, 0)
        window = np.mean(
            np.stack([channel[start:end].astype(np.float64) for channel in asset.channels]),
            axis=0,
        )
        return self.analyse(window)
