"""Audio decoding, waveform summaries, trimming and WAV output."""

from music_player.audio.decoder import decode
from music_player.audio.models import AudioAsset, MediaKind, TrimResult, WaveformSeries
from music_player.audio.repository import AssetRepository
from music_player.audio.trim import sample_bounds, trim
from music_player.audio.wav_encoder import WAV_HEADER_SIZE, encode_wav
from music_player.audio.waveform import WaveformCache, downsample, downsample_asset, mix_to_mono

__all__ = [
    "AssetRepository",
    "AudioAsset",
    "MediaKind",
    "TrimResult",
    "WAV_HEADER_SIZE",
    "WaveformCache",
    "WaveformSeries",
    "decode",
    "downsample",
    "downsample_asset",
    "encode_wav",
    "mix_to_mono",
    "sample_bounds",
    "trim",
]
