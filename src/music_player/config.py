"""Engine settings resolved from defaults and MUSIC_PLAYER_* variables."""

from __future__ import annotations

import os
from dataclasses import dataclass

_PREFIX = "MUSIC_PLAYER_"


@dataclass(slots=True)
class EngineSettings:
    waveform_bins: int = 500
    hit_tolerance_px: float = 8.0
    label_padding_px: float = 0.0
    drift_threshold_sec: float = 0.1
    fft_size: int = 256
    smoothing_time_constant: float = 0.8
    min_decibels: float = -100.0
    max_decibels: float = -30.0
    spectrum_bar_count: int = 5
    spectrum_min_bar_height: float = 4.0
    color_rate_playing: float = 0.2
    color_rate_paused: float = 0.05
    color_epsilon: float = 0.01
    ffmpeg_binary: str = "ffmpeg"
    ffprobe_binary: str = "ffprobe"
    use_ffmpeg: bool = True
    decode_workers: int = 1

    @staticmethod
    def from_env() -> EngineSettings:
        defaults = EngineSettings()
        fft_size = _env_int("FFT_SIZE", defaults.fft_size)
        if fft_size < 32 or fft_size & (fft_size - 1):
            fft_size = defaults.fft_size
        bar_count = _env_int("SPECTRUM_BAR_COUNT", defaults.spectrum_bar_count)
        if bar_count <= 0 or bar_count % 2 == 0:
            bar_count = defaults.spectrum_bar_count
        min_decibels = _env_float("MIN_DECIBELS", defaults.min_decibels)
        max_decibels = _env_float("MAX_DECIBELS", defaults.max_decibels)
        if max_decibels <= min_decibels:
            min_decibels, max_decibels = defaults.min_decibels, defaults.max_decibels
        return EngineSettings(
            waveform_bins=max(_env_int("WAVEFORM_BINS", defaults.waveform_bins), 1),
            hit_tolerance_px=max(_env_float("HIT_TOLERANCE_PX", defaults.hit_tolerance_px), 0.0),
            label_padding_px=max(_env_float("LABEL_PADDING_PX", defaults.label_padding_px), 0.0),
            drift_threshold_sec=max(_env_float("DRIFT_THRESHOLD_SEC", defaults.drift_threshold_sec), 0.0),
            fft_size=fft_size,
            smoothing_time_constant=min(
                max(_env_float("SMOOTHING_TIME_CONSTANT", defaults.smoothing_time_constant), 0.0), 1.0
            ),
            min_decibels=min_decibels,
            max_decibels=max_decibels,
            spectrum_bar_count=bar_count,
            spectrum_min_bar_height=max(
                _env_float("SPECTRUM_MIN_BAR_HEIGHT", defaults.spectrum_min_bar_height), 0.0
            ),
            color_rate_playing=_env_float("COLOR_RATE_PLAYING", defaults.color_rate_playing),
            color_rate_paused=_env_float("COLOR_RATE_PAUSED", defaults.color_rate_paused),
            color_epsilon=_env_float("COLOR_EPSILON", defaults.color_epsilon),
            ffmpeg_binary=_env_str("FFMPEG_BINARY", defaults.ffmpeg_binary),
            ffprobe_binary=_env_str("FFPROBE_BINARY", defaults.ffprobe_binary),
            use_ffmpeg=_env_bool("USE_FFMPEG", defaults.use_ffmpeg),
            decode_workers=max(_env_int("DECODE_WORKERS", defaults.decode_workers), 1),
        )


def _env_str(name: str, default: str) -> str:
    return os.getenv(_PREFIX + name, "").strip() or default


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(_PREFIX + name, "").strip()
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(_PREFIX + name, "").strip()
    try:
        return float(raw)
    except ValueError:
        return default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(_PREFIX + name, "").strip().lower()
    if raw in {"1", "true", "yes", "on"}:
        return True
    if raw in {"0", "false", "no", "off"}:
        return False
    return default
