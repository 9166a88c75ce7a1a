"""Sample-accurate trimming and re-encoding of decoded assets."""

from __future__ import annotations

import logging
import math

from music_player.audio.models import AudioAsset, TrimResult
from music_player.audio.wav_encoder import encode_wav
from music_player.errors import InvalidRegionError
from music_player.playback.selection import SelectionRegion

logger = logging.getLogger(__name__)


def sample_bounds(start_pct: float, end_pct: float, total_samples: int) -> tuple[int, int]:
    start_sample = math.floor(start_pct / 100 * total_samples)
    end_sample = math.floor(end_pct / 100 * total_samples)
    start_sample = min(max(start_sample, 0), total_samples)
    end_sample = min(max(end_sample, start_sample), total_samples)
    if total_samples > 0 and end_sample == start_sample:
        # a non-empty region always keeps at least one sample
        if start_sample == total_samples:
            start_sample -= 1
        else:
            end_sample += 1
    return start_sample, end_sample


def trim(asset: AudioAsset, region: SelectionRegion) -> TrimResult:
    if not region.start_pct < region.end_pct:
        raise InvalidRegionError(
            f"region start {region.start_pct} must be before end {region.end_pct}"
        )
    start_sample, end_sample = sample_bounds(region.start_pct, region.end_pct, asset.sample_count)
    sliced = tuple(channel[start_sample:end_sample] for channel in asset.channels)
    data = encode_wav(sliced, asset.sample_rate, asset.sample_width)
    trimmed = AudioAsset(
        sample_rate=asset.sample_rate,
        channels=sliced,
        sample_width=asset.sample_width,
        kind=asset.kind,
        name=f"trimmed_{asset.name}" if asset.name else "trimmed.wav",
        source_format="wav",
    )
    logger.info(
        f"Trimmed {asset.asset_id} to samples [{start_sample}, {end_sample}) "
        f"-> {trimmed.asset_id} ({len(data)} bytes)"
    )
    return TrimResult(asset=trimmed, data=data, start_sample=start_sample, end_sample=end_sample)
