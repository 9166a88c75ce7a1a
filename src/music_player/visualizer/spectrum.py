"""Symmetric bar rendering of spectrum frames and the play/pause colour fade."""

from __future__ import annotations

import math
from dataclasses import dataclass

from music_player.visualizer.analyzer import SpectrumFrame

RGB = tuple[int, int, int]

PAUSED_COLOR: RGB = (128, 128, 128)
PLAYING_COLOR: RGB = (0, 0, 0)


@dataclass(slots=True, frozen=True)
class Bar:
    x: float
    y: float
    width: float
    height: float
    radius: float


@dataclass(slots=True, frozen=True)
class SpectrumPaint:
    bars: tuple[Bar, ...]
    color: RGB
    alpha: float


@dataclass(slots=True, frozen=True)
class VisualizerState:
    color_t: float = 0.0


def interpolate_color(color_t: float, start: RGB = PAUSED_COLOR, end: RGB = PLAYING_COLOR) -> RGB:
    t = min(max(color_t, 0.0), 1.0)
    return tuple(  # type: ignore[return-value]
        int(math.floor(a + (b - a) * t + 0.5)) for a, b in zip(start, end, strict=True)
    )


def advance_color(
    color_t: float,
    playing: bool,
    rate_playing: float = 0.2,
    rate_paused: float = 0.05,
    epsilon: float = 0.01,
) -> float:
    target = 1.0 if playing else 0.0
    diff = target - color_t
    if abs(diff) < epsilon:
        return target
    rate = rate_playing if playing else rate_paused
    return color_t + diff * rate


class SpectrumRenderer:
    def __init__(
        self,
        bar_count: int = 5,
        bar_width: float = 4.0,
        bar_spacing: float = 1.0,
        min_bar_height: float = 4.0,
        height_scale: float = 0.8,
    ) -> None:
        if bar_count <= 0 or bar_count % 2 == 0:
            raise ValueError("bar_count must be a positive odd number")
        self.bar_count = bar_count
        self.bar_width = bar_width
        self.bar_spacing = bar_spacing
        self.min_bar_height = min_bar_height
        self.height_scale = height_scale

    def sample_indices(self, frame_length: int) -> list[int]:
        """Frame index driving each bar, ordered left to right."""
        step = frame_length // self.bar_count
        side = self.bar_count // 2
        left = [(side - 1 - offset) * step for offset in range(side)]
        right = [(offset + side + 1) * step for offset in range(side)]
        return left + [side * step] + right

    def render(self, frame: SpectrumFrame, color_t: float, width: float, height: float) -> SpectrumPaint:
        side = self.bar_count // 2
        center_x = width / 2.0
        pitch = self.bar_width + self.bar_spacing
        bars: list[Bar] = []
        for slot, index in enumerate(self.sample_indices(len(frame))):
            magnitude = frame[min(index, len(frame) - 1)] if len(frame) else 0
            bar_height = max(magnitude / 255 * height * self.height_scale, self.min_bar_height)
            offset = slot - side
            bars.append(
                Bar(
                    x=center_x + offset * pitch - self.bar_width / 2.0,
                    y=height / 2.0 - bar_height / 2.0,
                    width=self.bar_width,
                    height=bar_height,
                    radius=self.bar_width / 2.0,
                )
            )
        t = min(max(color_t, 0.0), 1.0)
        return SpectrumPaint(bars=tuple(bars), color=interpolate_color(t), alpha=0.5 + 0.5 * t)


class SpectrumVisualizer:
    """Per-frame tick: advance the colour fade, then render the current frame."""

    def __init__(
        self,
        renderer: SpectrumRenderer | None = None,
        rate_playing: float = 0.2,
        rate_paused: float = 0.05,
        epsilon: float = 0.01,
    ) -> None:
        self.renderer = renderer or SpectrumRenderer()
        self.rate_playing = rate_playing
        self.rate_paused = rate_paused
        self.epsilon = epsilon

    def tick(
        self,
        state: VisualizerState,
        frame: SpectrumFrame,
        playing: bool,
        width: float,
        height: float,
    ) -> tuple[VisualizerState, SpectrumPaint]:
        color_t = advance_color(state.color_t, playing, self.rate_playing, self.rate_paused, self.epsilon)
        return VisualizerState(color_t=color_t), self.renderer.render(frame, color_t, width, height)
