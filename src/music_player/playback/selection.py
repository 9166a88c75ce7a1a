"""Selection region, playback cursor and the pointer-driven drag state machine."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum

from music_player.errors import InvalidRegionError


class DragState(str, Enum):
    IDLE = "idle"
    DRAGGING_START = "draggingStart"
    DRAGGING_END = "draggingEnd"
    DRAGGING_PLAYHEAD = "draggingPlayhead"


class PointerPhase(str, Enum):
    DOWN = "down"
    MOVE = "move"
    UP = "up"
    LEAVE = "leave"


@dataclass(slots=True, frozen=True)
class PointerEvent:
    phase: PointerPhase
    x: float = 0.0


@dataclass(slots=True, frozen=True)
class SelectionRegion:
    start_pct: float = 0.0
    end_pct: float = 100.0

    def __post_init__(self) -> None:
        if not 0.0 <= self.start_pct < self.end_pct <= 100.0:
            raise InvalidRegionError(
                f"invalid region [{self.start_pct}, {self.end_pct}]: need 0 <= start < end <= 100"
            )

    def start_time(self, duration: float) -> float:
        return self.start_pct / 100 * duration

    def end_time(self, duration: float) -> float:
        return self.end_pct / 100 * duration

    def clamp_time(self, time: float, duration: float) -> float:
        return min(max(time, self.start_time(duration)), self.end_time(duration))


@dataclass(slots=True)
class PlaybackCursor:
    duration: float
    current_time: float = 0.0

    def seek(self, time: float, region: SelectionRegion | None = None) -> float:
        if not math.isfinite(time):
            time = self.current_time
        target = min(max(float(time), 0.0), max(self.duration, 0.0))
        if region is not None:
            target = region.clamp_time(target, self.duration)
        self.current_time = target
        return target

    @property
    def ratio(self) -> float:
        if self.duration <= 0.0:
            return 0.0
        return self.current_time / self.duration


@dataclass(slots=True, frozen=True)
class CanvasGeometry:
    """Horizontal layout of the waveform surface.

    ``padding`` is reserved on both sides for time labels; percentages map onto
    the usable span between them.
    """

    width: float
    padding: float = 0.0

    @property
    def usable_width(self) -> float:
        return max(self.width - 2 * self.padding, 0.0)

    def x_to_pct(self, x: float) -> float:
        usable = self.usable_width
        if usable <= 0.0:
            return 0.0
        return min(max((x - self.padding) / usable * 100, 0.0), 100.0)

    def pct_to_x(self, pct: float) -> float:
        return self.padding + pct / 100 * self.usable_width


class RegionSelector:
    """Pointer state machine over a selection region and playhead.

    Every transition is infallible: updates that would break
    ``start_pct < end_pct`` are dropped, playhead moves are clamped into the
    region.
    """

    def __init__(
        self,
        duration: float,
        geometry: CanvasGeometry,
        hit_tolerance: float = 8.0,
        region: SelectionRegion | None = None,
    ) -> None:
        self._duration = max(float(duration), 0.0)
        self._geometry = geometry
        self._hit_tolerance = max(float(hit_tolerance), 0.0)
        self._region = region or SelectionRegion()
        self._cursor = PlaybackCursor(duration=self._duration)
        self._cursor.seek(0.0, self._region)
        self._state = DragState.IDLE

    @property
    def state(self) -> DragState:
        return self._state

    @property
    def region(self) -> SelectionRegion:
        return self._region

    @property
    def cursor(self) -> PlaybackCursor:
        return self._cursor

    @property
    def duration(self) -> float:
        return self._duration

    @property
    def geometry(self) -> CanvasGeometry:
        return self._geometry

    def resize(self, geometry: CanvasGeometry) -> None:
        self._geometry = geometry

    def handle(self, event: PointerEvent) -> DragState:
        if event.phase is PointerPhase.DOWN:
            self.pointer_down(event.x)
        elif event.phase is PointerPhase.MOVE:
            self.pointer_move(event.x)
        else:
            self.pointer_up()
        return self._state

    def pointer_down(self, x: float) -> DragState:
        target = self.hit_test(x)
        if target is None:
            self.seek(self._time_at(x))
            target = DragState.DRAGGING_PLAYHEAD
        self._state = target
        return target

    def pointer_move(self, x: float) -> None:
        if self._state is DragState.IDLE:
            return
        pct = self._geometry.x_to_pct(x)
        if self._state is DragState.DRAGGING_START:
            self.set_start_pct(pct)
        elif self._state is DragState.DRAGGING_END:
            self.set_end_pct(pct)
        else:
            self.seek(pct / 100 * self._duration)

    def pointer_up(self) -> None:
        self._state = DragState.IDLE

    pointer_leave = pointer_up

    def hit_test(self, x: float) -> DragState | None:
        targets = (
            (DragState.DRAGGING_START, self._geometry.pct_to_x(self._region.start_pct)),
            (DragState.DRAGGING_END, self._geometry.pct_to_x(self._region.end_pct)),
            (DragState.DRAGGING_PLAYHEAD, self._geometry.pct_to_x(self._cursor.ratio * 100)),
        )
        best: DragState | None = None
        best_distance = self._hit_tolerance
        for state, target_x in targets:
            distance = abs(x - target_x)
            if distance <= best_distance and (best is None or distance < best_distance):
                best = state
                best_distance = distance
        return best

    def set_start_pct(self, pct: float) -> bool:
        if not 0.0 <= pct < self._region.end_pct:
            return False
        self._region = SelectionRegion(start_pct=pct, end_pct=self._region.end_pct)
        self._cursor.seek(self._cursor.current_time, self._region)
        return True

    def set_end_pct(self, pct: float) -> bool:
        if not self._region.start_pct < pct <= 100.0:
            return False
        self._region = SelectionRegion(start_pct=self._region.start_pct, end_pct=pct)
        self._cursor.seek(self._cursor.current_time, self._region)
        return True

    def set_start_time(self, seconds: float) -> bool:
        if self._duration <= 0.0:
            return False
        return self.set_start_pct(seconds / self._duration * 100)

    def set_end_time(self, seconds: float) -> bool:
        if self._duration <= 0.0:
            return False
        return self.set_end_pct(seconds / self._duration * 100)

    def seek(self, time: float) -> float:
        return self._cursor.seek(time, self._region)

    def start_time(self) -> float:
        return self._region.start_time(self._duration)

    def end_time(self) -> float:
        return self._region.end_time(self._duration)

    def region_span(self) -> tuple[float, float]:
        """x range covered by the selected region."""
        return (
            self._geometry.pct_to_x(self._region.start_pct),
            self._geometry.pct_to_x(self._region.end_pct),
        )

    def handle_positions(self) -> tuple[float, float, float]:
        """x coordinates of the start handle, end handle and playhead."""
        return (
            self._geometry.pct_to_x(self._region.start_pct),
            self._geometry.pct_to_x(self._region.end_pct),
            self._geometry.pct_to_x(self._cursor.ratio * 100),
        )

    def _time_at(self, x: float) -> float:
        return self._geometry.x_to_pct(x) / 100 * self._duration
