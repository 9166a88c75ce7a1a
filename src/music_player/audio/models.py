"""Core audio models: decoded assets, waveform summaries and trim output."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Sequence
from uuid import uuid4

import numpy as np


class MediaKind(str, Enum):
    AUDIO = "audio"
    VIDEO = "video"

    @staticmethod
    def from_mime(mime_type: str | None) -> MediaKind:
        if mime_type and mime_type.strip().lower().startswith("video/"):
            return MediaKind.VIDEO
        return MediaKind.AUDIO

    @property
    def needs_preview_surface(self) -> bool:
        return self is MediaKind.VIDEO


@dataclass(slots=True, eq=False)
class AudioAsset:
    """One decoded source file.

    Channels are float32 arrays normalized to [-1, 1], all of equal length and
    read-only once the asset is built. ``sample_width`` is the byte width used
    when the asset is written back out as PCM.
    """

    sample_rate: int
    channels: tuple[np.ndarray, ...]
    sample_width: int = 2
    kind: MediaKind = MediaKind.AUDIO
    name: str = ""
    source_format: str = "wav"
    asset_id: str = field(default_factory=lambda: str(uuid4()))

    def __post_init__(self) -> None:
        if self.sample_rate <= 0:
            raise ValueError("sample_rate must be positive")
        if not self.channels:
            raise ValueError("asset needs at least one channel")
        if self.sample_width not in {1, 2, 3, 4}:
            raise ValueError(f"unsupported sample width: {self.sample_width}")
        owned: list[np.ndarray] = []
        for channel in self.channels:
            data = np.array(channel, dtype=np.float32, copy=True).reshape(-1)
            data.setflags(write=False)
            owned.append(data)
        if len({len(channel) for channel in owned}) != 1:
            raise ValueError("all channels must have the same length")
        self.channels = tuple(owned)

    @property
    def channel_count(self) -> int:
        return len(self.channels)

    @property
    def sample_count(self) -> int:
        return len(self.channels[0])

    @property
    def duration_sec(self) -> float:
        return self.sample_count / self.sample_rate

    @property
    def bits_per_sample(self) -> int:
        return self.sample_width * 8

    def channel(self, index: int) -> np.ndarray:
        return self.channels[index]


@dataclass(slots=True, frozen=True)
class WaveformSeries:
    bins: tuple[float, ...]
    max: float
    source_id: str = ""

    @property
    def bin_count(self) -> int:
        return len(self.bins)

    def normalized(self) -> list[float]:
        if self.max <= 0.0:
            return [0.0] * len(self.bins)
        return [value / self.max for value in self.bins]

    def heights(self, height: float, amplification: float = 0.8) -> list[float]:
        """Half-heights of each bar when drawn mirrored around the centre line."""
        half = height / 2.0
        return [value * half * amplification for value in self.normalized()]


@dataclass(slots=True)
class TrimResult:
    asset: AudioAsset
    data: bytes
    start_sample: int
    end_sample: int

    @property
    def sample_count(self) -> int:
        return self.end_sample - self.start_sample

    @property
    def byte_length(self) -> int:
        return len(self.data)

    @property
    def filename(self) -> str:
        return self.asset.name


def as_channel_array(samples: Sequence[float] | np.ndarray) -> np.ndarray:
    return np.asarray(samples, dtype=np.float64).reshape(-1)
