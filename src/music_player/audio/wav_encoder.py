"""RIFF/WAVE writer for trimmed PCM buffers."""

from __future__ import annotations

import io
import wave
from typing import Sequence

import numpy as np

WAV_HEADER_SIZE = 44


def encode_wav(channels: Sequence[np.ndarray], sample_rate: int, sample_width: int = 2) -> bytes:
    """Serialize float channels as interleaved little-endian integer PCM.

    The standard library writer emits the canonical 44 byte header
    (``RIFF``/``WAVE``/``fmt ``/``data``) and patches the chunk sizes on close.
    """
    if not channels:
        raise ValueError("at least one channel is required")
    if sample_width not in {1, 2, 3, 4}:
        raise ValueError(f"unsupported sample width: {sample_width}")
    if sample_rate <= 0:
        raise ValueError("sample_rate must be positive")

    frames = interleave_pcm(channels, sample_width)
    buffer = io.BytesIO()
    with wave.open(buffer, "wb") as wav:
        wav.setnchannels(len(channels))
        wav.setsampwidth(sample_width)
        wav.setframerate(sample_rate)
        wav.writeframes(frames)
    return buffer.getvalue()


def expected_wav_length(frame_count: int, channel_count: int, sample_width: int) -> int:
    return WAV_HEADER_SIZE + frame_count * channel_count * sample_width


def interleave_pcm(channels: Sequence[np.ndarray], sample_width: int) -> bytes:
    frame_count = min(len(channel) for channel in channels)
    stacked = np.empty((frame_count, len(channels)), dtype=np.float64)
    for index, channel in enumerate(channels):
        stacked[:, index] = np.asarray(channel[:frame_count], dtype=np.float64)
    return quantize(stacked.reshape(-1), sample_width).tobytes()


def quantize(samples: np.ndarray, sample_width: int) -> np.ndarray:
    clipped = np.clip(np.asarray(samples, dtype=np.float64), -1.0, 1.0)
    if sample_width == 1:
        return np.clip(np.round(clipped * 128.0) + 128.0, 0, 255).astype(np.uint8)

    full_scale = float(1 << (sample_width * 8 - 1))
    values = np.clip(np.round(clipped * full_scale), -full_scale, full_scale - 1.0).astype(np.int64)
    if sample_width == 2:
        return values.astype("<i2")
    if sample_width == 3:
        return values.astype("<i4").view(np.uint8).reshape(-1, 4)[:, :3].reshape(-1)
    return values.astype("<i4")
