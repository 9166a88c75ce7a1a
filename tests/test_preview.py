import pytest

from music_player.playback.preview import RegionPreview
from music_player.playback.selection import CanvasGeometry, RegionSelector, SelectionRegion


def _selector() -> RegionSelector:
    return RegionSelector(
        duration=10.0,
        geometry=CanvasGeometry(width=500.0),
        region=SelectionRegion(start_pct=20, end_pct=50),
    )


def test_preview_stops_when_transport_reaches_region_end() -> None:
    preview = RegionPreview(_selector())
    assert preview.toggle()

    assert preview.advance(3.5) == pytest.approx(3.5)
    assert preview.playing
    assert preview.advance(5.2) == pytest.approx(5.0)
    assert not preview.playing


def test_toggle_at_region_end_restarts_from_region_start() -> None:
    selector = _selector()
    preview = RegionPreview(selector)
    preview.toggle()
    preview.advance(6.0)
    assert not preview.playing

    assert preview.toggle()
    assert selector.cursor.current_time == pytest.approx(2.0)
    assert not preview.toggle()


def test_moving_start_while_previewing_seeks_to_new_start() -> None:
    selector = _selector()
    preview = RegionPreview(selector)
    preview.toggle()
    preview.advance(4.5)

    assert preview.set_start_pct(30.0)
    assert selector.cursor.current_time == pytest.approx(3.0)
    assert preview.playing


def test_moving_start_while_stopped_keeps_playhead_inside_region() -> None:
    selector = _selector()
    preview = RegionPreview(selector)
    preview.advance(4.5)

    assert preview.set_start_pct(30.0)
    assert selector.cursor.current_time == pytest.approx(4.5)
    assert not preview.set_end_pct(25.0)
    assert selector.region.end_pct == pytest.approx(50.0)
