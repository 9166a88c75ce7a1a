"""Live spectrum analysis and bar visualizer."""

from music_player.visualizer.analyzer import SpectrumAnalyzer, SpectrumFrame
from music_player.visualizer.spectrum import (
    Bar,
    SpectrumPaint,
    SpectrumRenderer,
    SpectrumVisualizer,
    VisualizerState,
    advance_color,
    interpolate_color,
)

__all__ = [
    "Bar",
    "SpectrumAnalyzer",
    "SpectrumFrame",
    "SpectrumPaint",
    "SpectrumRenderer",
    "SpectrumVisualizer",
    "VisualizerState",
    "advance_color",
    "interpolate_color",
]
