"""Playback interaction: region selection, preview and surface sync."""

from music_player.playback.preview import RegionPreview
from music_player.playback.selection import (
    CanvasGeometry,
    DragState,
    PlaybackCursor,
    PointerEvent,
    PointerPhase,
    RegionSelector,
    SelectionRegion,
)
from music_player.playback.sync import PlaybackSynchronizer, Transport, TransportEvent

__all__ = [
    "CanvasGeometry",
    "DragState",
    "PlaybackCursor",
    "PlaybackSynchronizer",
    "PointerEvent",
    "PointerPhase",
    "RegionPreview",
    "RegionSelector",
    "SelectionRegion",
    "Transport",
    "TransportEvent",
]
