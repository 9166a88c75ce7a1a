import random

import pytest

from music_player.playback.selection import (
    CanvasGeometry,
    DragState,
    PointerEvent,
    PointerPhase,
    RegionSelector,
    SelectionRegion,
)


def _selector(width: float = 1000.0, padding: float = 0.0, duration: float = 100.0) -> RegionSelector:
    return RegionSelector(
        duration=duration,
        geometry=CanvasGeometry(width=width, padding=padding),
        hit_tolerance=8.0,
        region=SelectionRegion(start_pct=20, end_pct=60),
    )


def test_initial_state_is_idle_with_playhead_at_region_start() -> None:
    selector = _selector()
    assert selector.state is DragState.IDLE
    assert selector.cursor.current_time == pytest.approx(20.0)


def test_pointer_down_on_handles_enters_matching_drag_state() -> None:
    selector = _selector()
    selector.seek(40.0)

    assert selector.pointer_down(603.0) is DragState.DRAGGING_END
    selector.pointer_up()
    assert selector.pointer_down(395.0) is DragState.DRAGGING_PLAYHEAD
    selector.pointer_up()
    assert selector.pointer_down(205.0) is DragState.DRAGGING_START


def test_pointer_down_away_from_handles_seeks_inside_region() -> None:
    selector = _selector()
    assert selector.pointer_down(500.0) is DragState.DRAGGING_PLAYHEAD
    assert selector.cursor.current_time == pytest.approx(50.0)

    selector.pointer_up()
    selector.pointer_down(900.0)
    assert selector.cursor.current_time == pytest.approx(60.0)

    selector.pointer_up()
    selector.pointer_down(50.0)
    assert selector.cursor.current_time == pytest.approx(20.0)


def test_dragging_start_past_end_is_ignored_not_clamped() -> None:
    selector = _selector()
    selector.pointer_down(200.0)
    selector.pointer_move(300.0)
    assert selector.region.start_pct == pytest.approx(30.0)

    selector.pointer_move(600.0)
    assert selector.region.start_pct == pytest.approx(30.0)
    selector.pointer_move(750.0)
    assert selector.region.start_pct == pytest.approx(30.0)
    assert selector.region.end_pct == pytest.approx(60.0)


def test_dragging_end_before_start_is_ignored() -> None:
    selector = _selector()
    selector.pointer_down(600.0)
    selector.pointer_move(150.0)
    assert selector.region.end_pct == pytest.approx(60.0)
    selector.pointer_move(800.0)
    assert selector.region.end_pct == pytest.approx(80.0)


def test_moving_start_pulls_playhead_into_region() -> None:
    selector = _selector()
    selector.seek(25.0)
    selector.pointer_down(200.0)
    selector.pointer_move(400.0)
    assert selector.cursor.current_time == pytest.approx(40.0)


def test_dragging_playhead_is_clamped_to_region() -> None:
    selector = _selector()
    selector.pointer_down(450.0)
    selector.pointer_move(990.0)
    assert selector.cursor.current_time == pytest.approx(60.0)
    selector.pointer_move(-40.0)
    assert selector.cursor.current_time == pytest.approx(20.0)


def test_release_returns_to_idle_and_ignores_later_moves() -> None:
    selector = _selector()
    selector.handle(PointerEvent(PointerPhase.DOWN, 200.0))
    assert selector.handle(PointerEvent(PointerPhase.LEAVE)) is DragState.IDLE
    selector.handle(PointerEvent(PointerPhase.MOVE, 350.0))
    assert selector.region.start_pct == pytest.approx(20.0)

    selector.handle(PointerEvent(PointerPhase.DOWN, 600.0))
    assert selector.handle(PointerEvent(PointerPhase.UP)) is DragState.IDLE


def test_padding_is_excluded_from_percentage_mapping() -> None:
    geometry = CanvasGeometry(width=540.0, padding=20.0)
    assert geometry.x_to_pct(20.0) == 0.0
    assert geometry.x_to_pct(270.0) == pytest.approx(50.0)
    assert geometry.x_to_pct(520.0) == pytest.approx(100.0)
    assert geometry.x_to_pct(5.0) == 0.0
    assert geometry.pct_to_x(25.0) == pytest.approx(145.0)

    selector = RegionSelector(duration=10.0, geometry=geometry, region=SelectionRegion(0, 100))
    start_x, end_x, _ = selector.handle_positions()
    assert selector.hit_test(start_x - 6) is DragState.DRAGGING_START
    assert selector.hit_test(end_x + 6) is DragState.DRAGGING_END


def test_slider_and_time_setters_follow_same_rules() -> None:
    selector = _selector(duration=200.0)
    assert selector.set_start_pct(10.0)
    assert not selector.set_start_pct(60.0)
    assert not selector.set_end_pct(10.0)
    assert not selector.set_end_pct(100.5)
    assert selector.set_end_time(150.0)
    assert selector.region.end_pct == pytest.approx(75.0)
    assert selector.end_time() == pytest.approx(150.0)


def test_degenerate_geometry_never_raises() -> None:
    selector = RegionSelector(duration=5.0, geometry=CanvasGeometry(width=10.0, padding=20.0))
    selector.pointer_down(3.0)
    selector.pointer_move(float("nan"))
    selector.pointer_move(1e9)
    selector.pointer_up()
    assert selector.region.start_pct < selector.region.end_pct


def test_random_pointer_sequences_preserve_region_invariant() -> None:
    rng = random.Random(1234)
    for _ in range(50):
        selector = RegionSelector(
            duration=rng.uniform(0.5, 600.0),
            geometry=CanvasGeometry(width=rng.uniform(100.0, 1200.0), padding=rng.choice([0.0, 12.0, 30.0])),
            hit_tolerance=rng.uniform(2.0, 20.0),
        )
        for _ in range(300):
            phase = rng.choice([PointerPhase.DOWN, PointerPhase.MOVE, PointerPhase.MOVE, PointerPhase.UP, PointerPhase.LEAVE])
            selector.handle(PointerEvent(phase, rng.uniform(-100.0, 1400.0)))
            region = selector.region
            assert 0.0 <= region.start_pct < region.end_pct <= 100.0
            assert selector.start_time() <= selector.cursor.current_time <= selector.end_time()


def test_region_span_uses_padded_geometry() -> None:
    selector = RegionSelector(
        duration=10.0,
        geometry=CanvasGeometry(width=540.0, padding=20.0),
        region=SelectionRegion(start_pct=20, end_pct=60),
    )
    assert selector.region_span() == pytest.approx((120.0, 320.0))

    selector.set_end_pct(80.0)
    start_x, end_x = selector.region_span()
    assert (start_x, end_x) == pytest.approx(selector.handle_positions()[:2])
    assert end_x == pytest.approx(420.0)
