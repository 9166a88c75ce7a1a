import io
import math
import wave

import numpy as np
import pytest
import soundfile as sf

from music_player.audio.decoder import decode
from music_player.audio.models import MediaKind
from music_player.config import EngineSettings
from music_player.errors import DecodeError

_NO_FFMPEG = EngineSettings(use_ffmpeg=False)


def _wav_bytes(sample_rate: int = 48_000, duration_sec: float = 0.1, sample_width: int = 2, channels: int = 2) -> bytes:
    num_frames = int(sample_rate * duration_sec)
    full_scale = 1 << (sample_width * 8 - 1)
    buffer = io.BytesIO()
    with wave.open(buffer, "wb") as wav:
        wav.setnchannels(channels)
        wav.setsampwidth(sample_width)
        wav.setframerate(sample_rate)
        frames = bytearray()
        for idx in range(num_frames):
            t = idx / sample_rate
            for ch in range(channels):
                value = int(0.6 * (full_scale - 1) * math.sin(2 * math.pi * 440 * (ch + 1) * t))
                if sample_width == 1:
                    frames += bytes([value + 128])
                else:
                    frames += value.to_bytes(sample_width, "little", signed=True)
        wav.writeframes(bytes(frames))
    return buffer.getvalue()


def test_decode_pcm16_stereo_wav() -> None:
    asset = decode(_wav_bytes(), name="tone.wav", settings=_NO_FFMPEG)

    assert asset.sample_rate == 48_000
    assert asset.channel_count == 2
    assert asset.sample_count == 4800
    assert asset.sample_width == 2
    assert asset.duration_sec == pytest.approx(0.1)
    assert asset.name == "tone.wav"
    for channel in asset.channels:
        assert len(channel) == asset.sample_count
        assert float(np.max(channel)) <= 1.0
        assert float(np.min(channel)) >= -1.0


@pytest.mark.parametrize("sample_width", [1, 3, 4])
def test_decode_keeps_integer_bit_depth(sample_width: int) -> None:
    asset = decode(_wav_bytes(sample_width=sample_width, channels=1), settings=_NO_FFMPEG)
    assert asset.sample_width == sample_width
    assert asset.channel_count == 1
    peak = float(np.max(np.abs(asset.channels[0])))
    assert 0.5 < peak < 0.65


def test_duration_is_derived_from_sample_count() -> None:
    asset = decode(_wav_bytes(sample_rate=44_100, duration_sec=0.25), settings=_NO_FFMPEG)
    assert asset.duration_sec == asset.sample_count / asset.sample_rate


def test_decode_float_wav_records_16_bit_output() -> None:
    data = np.column_stack([np.linspace(-0.5, 0.5, 2205), np.zeros(2205)]).astype(np.float32)
    buffer = io.BytesIO()
    sf.write(buffer, data, 22_050, format="WAV", subtype="FLOAT")

    asset = decode(buffer.getvalue(), settings=_NO_FFMPEG)
    assert asset.sample_rate == 22_050
    assert asset.channel_count == 2
    assert asset.sample_count == 2205
    assert asset.sample_width == 2
    assert asset.channels[0][0] == pytest.approx(-0.5)


def test_decode_flac_through_soundfile() -> None:
    data = (0.3 * np.sin(np.linspace(0, 40 * math.pi, 8000))).astype(np.float64)
    buffer = io.BytesIO()
    sf.write(buffer, data, 16_000, format="FLAC", subtype="PCM_16")

    asset = decode(buffer.getvalue(), kind=MediaKind.AUDIO, settings=_NO_FFMPEG)
    assert asset.sample_rate == 16_000
    assert asset.sample_count == 8000
    assert asset.sample_width == 2
    assert asset.source_format == "flac"


def test_decode_rejects_empty_payload() -> None:
    with pytest.raises(DecodeError):
        decode(b"", settings=_NO_FFMPEG)


def test_decode_rejects_truncated_wav() -> None:
    data = _wav_bytes()
    with pytest.raises(DecodeError, match="truncated"):
        decode(data[:-100], settings=_NO_FFMPEG)


def test_decode_rejects_truncated_header() -> None:
    with pytest.raises(DecodeError):
        decode(_wav_bytes()[:20], settings=_NO_FFMPEG)


def test_decode_rejects_unsupported_payload() -> None:
    with pytest.raises(DecodeError):
        decode(b"this is not audio at all" * 10, settings=_NO_FFMPEG)


def test_decode_rejects_wav_without_frames() -> None:
    buffer = io.BytesIO()
    with wave.open(buffer, "wb") as wav:
        wav.setnchannels(1)
        wav.setsampwidth(2)
        wav.setframerate(8000)
        wav.writeframes(b"")
    with pytest.raises(DecodeError):
        decode(buffer.getvalue(), settings=_NO_FFMPEG)


def test_video_kind_is_carried_on_asset() -> None:
    asset = decode(_wav_bytes(), kind=MediaKind.from_mime("video/mp4"), settings=_NO_FFMPEG)
    assert asset.kind is MediaKind.VIDEO
    assert asset.kind.needs_preview_surface
