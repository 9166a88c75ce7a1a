"""Decoding of uploaded media bytes into multi-channel PCM assets."""

from __future__ import annotations

import io
import logging
import shutil
import subprocess
import tempfile
import wave
from pathlib import Path

import numpy as np
import soundfile as sf

from music_player.audio.models import AudioAsset, MediaKind
from music_player.config import EngineSettings
from music_player.errors import DecodeError

logger = logging.getLogger(__name__)

# Floating point and compressed sources are re-encoded as 16-bit PCM.
_FALLBACK_SAMPLE_WIDTH = 2

_SOUNDFILE_WIDTHS: dict[str, int] = {
    "PCM_U8": 1,
    "PCM_S8": 1,
    "PCM_16": 2,
    "PCM_24": 3,
    "PCM_32": 4,
}


def decode(
    data: bytes,
    kind: MediaKind = MediaKind.AUDIO,
    name: str = "",
    settings: EngineSettings | None = None,
) -> AudioAsset:
    if not data:
        raise DecodeError("empty payload")
    config = settings or EngineSettings()
    logger.debug(f"Decoding {len(data)} bytes ({kind.value}) {name!r}")

    if _looks_like_wav(data):
        try:
            asset = _decode_pcm_wav(data, kind, name)
        except (wave.Error, EOFError) as exc:
            logger.debug(f"wave reader rejected {name!r}, trying soundfile: {exc}")
        else:
            _log_decoded(asset)
            return asset

    try:
        asset = _decode_with_soundfile(data, kind, name)
    except DecodeError:
        if not (config.use_ffmpeg and shutil.which(config.ffmpeg_binary) and shutil.which(config.ffprobe_binary)):
            raise
        logger.info(f"soundfile could not decode {name!r}, falling back to ffmpeg")
        asset = _decode_with_ffmpeg(data, kind, name, config)
    _log_decoded(asset)
    return asset


def _looks_like_wav(data: bytes) -> bool:
    return len(data) >= 12 and data[:4] == b"RIFF" and data[8:12] == b"WAVE"


def _decode_pcm_wav(data: bytes, kind: MediaKind, name: str) -> AudioAsset:
    with wave.open(io.BytesIO(data), "rb") as wav:
        channels = wav.getnchannels()
        sample_width = wav.getsampwidth()
        sample_rate = wav.getframerate()
        frame_count = wav.getnframes()
        raw = wav.readframes(frame_count)

    if channels <= 0:
        raise DecodeError("invalid channel count in wav data")
    if sample_width not in {1, 2, 3, 4}:
        raise DecodeError(f"unsupported sample width: {sample_width}")
    if sample_rate <= 0:
        raise DecodeError("invalid sample rate in wav data")
    frame_size = channels * sample_width
    if len(raw) < frame_count * frame_size:
        raise DecodeError(
            f"truncated wav data: expected {frame_count * frame_size} bytes, got {len(raw)}"
        )
    if frame_count == 0:
        raise DecodeError("wav data contains no audio frames")

    pcm = _pcm_to_float(raw[: frame_count * frame_size], sample_width).reshape(frame_count, channels)
    return AudioAsset(
        sample_rate=sample_rate,
        channels=tuple(pcm[:, index] for index in range(channels)),
        sample_width=sample_width,
        kind=kind,
        name=name,
        source_format="wav",
    )


def _pcm_to_float(raw: bytes, sample_width: int) -> np.ndarray:
    if sample_width == 1:
        return (np.frombuffer(raw, dtype=np.uint8).astype(np.float64) - 128.0) / 128.0
    if sample_width == 2:
        return np.frombuffer(raw, dtype="<i2").astype(np.float64) / 32768.0
    if sample_width == 3:
        triplets = np.frombuffer(raw, dtype=np.uint8).reshape(-1, 3).astype(np.int32)
        values = triplets[:, 0] | (triplets[:, 1] << 8) | (triplets[:, 2] << 16)
        values = np.where(values & 0x800000, values - 0x1000000, values)
        return values.astype(np.float64) / 8388608.0
    return np.frombuffer(raw, dtype="<i4").astype(np.float64) / 2147483648.0


def _decode_with_soundfile(data: bytes, kind: MediaKind, name: str) -> AudioAsset:
    try:
        with sf.SoundFile(io.BytesIO(data)) as handle:
            subtype = handle.subtype
            container = handle.format
            sample_rate = handle.samplerate
            pcm = handle.read(dtype="float32", always_2d=True)
    except (sf.SoundFileError, RuntimeError, ValueError, TypeError) as exc:
        raise DecodeError(f"unsupported or corrupt media: {exc}") from exc

    if pcm.shape[0] == 0:
        raise DecodeError("media contains no audio frames")
    return AudioAsset(
        sample_rate=int(sample_rate),
        channels=tuple(pcm[:, index] for index in range(pcm.shape[1])),
        sample_width=_SOUNDFILE_WIDTHS.get(subtype, _FALLBACK_SAMPLE_WIDTH),
        kind=kind,
        name=name,
        source_format=str(container).lower(),
    )


def _decode_with_ffmpeg(data: bytes, kind: MediaKind, name: str, settings: EngineSettings) -> AudioAsset:
    suffix = Path(name).suffix if name else ""
    with tempfile.TemporaryDirectory(prefix="music-player-") as workdir:
        source = Path(workdir) / f"source{suffix}"
        source.write_bytes(data)
        try:
            sample_rate, channels = _probe_stream(source, settings)
            result = subprocess.run(
                [
                    settings.ffmpeg_binary,
                    "-v",
                    "error",
                    "-i",
                    str(source),
                    "-vn",
                    "-f",
                    "f32le",
                    "-acodec",
                    "pcm_f32le",
                    "-",
                ],
                check=True,
                capture_output=True,
            )
        except (subprocess.CalledProcessError, OSError) as exc:
            raise DecodeError(f"ffmpeg could not decode media: {exc}") from exc

    samples = np.frombuffer(result.stdout, dtype="<f4")
    frame_count = len(samples) // channels
    if frame_count == 0:
        raise DecodeError("media contains no audio frames")
    pcm = samples[: frame_count * channels].reshape(frame_count, channels)
    return AudioAsset(
        sample_rate=sample_rate,
        channels=tuple(pcm[:, index] for index in range(channels)),
        sample_width=_FALLBACK_SAMPLE_WIDTH,
        kind=kind,
        name=name,
        source_format=suffix.lstrip(".").lower() or "ffmpeg",
    )


def _probe_stream(source: Path, settings: EngineSettings) -> tuple[int, int]:
    result = subprocess.run(
        [
            settings.ffprobe_binary,
            "-v",
            "error",
            "-select_streams",
            "a:0",
            "-show_entries",
            "stream=sample_rate,channels",
            "-of",
            "default=noprint_wrappers=1",
            str(source),
        ],
        check=True,
        capture_output=True,
        text=True,
    )
    fields: dict[str, str] = {}
    for line in result.stdout.splitlines():
        key, _, value = line.partition("=")
        fields[key.strip()] = value.strip()
    try:
        sample_rate = int(fields["sample_rate"])
        channels = int(fields["channels"])
    except (KeyError, ValueError) as exc:
        raise DecodeError("media has no decodable audio stream") from exc
    if sample_rate <= 0 or channels <= 0:
        raise DecodeError("media has no decodable audio stream")
    return sample_rate, channels


def _log_decoded(asset: AudioAsset) -> None:
    logger.info(
        f"Decoded {asset.name or asset.asset_id}: {asset.channel_count}ch "
        f"{asset.sample_rate}Hz {asset.sample_count} samples ({asset.duration_sec:.3f}s)"
    )
