"""Keeps a secondary render surface time-locked to a primary transport."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Protocol

logger = logging.getLogger(__name__)


class Transport(Protocol):
    @property
    def current_time(self) -> float: ...

    @property
    def paused(self) -> bool: ...

    def play(self) -> None: ...

    def pause(self) -> None: ...

    def seek(self, time: float) -> None: ...


class TransportEvent(str, Enum):
    PLAY = "play"
    PAUSE = "pause"
    SEEKING = "seeking"
    TIME_UPDATE = "timeupdate"


class PlaybackSynchronizer:
    def __init__(self, primary: Transport, secondary: Transport, drift_threshold: float = 0.1) -> None:
        self._primary = primary
        self._secondary = secondary
        self._drift_threshold = max(drift_threshold, 0.0)
        self._page_visible = True

    @property
    def page_visible(self) -> bool:
        return self._page_visible

    def handle(self, event: TransportEvent) -> bool:
        """Mirror one primary transport event; returns True when a re-seek happened."""
        logger.debug(f"Primary transport event: {event.value}")
        return self.resync()

    def set_page_visible(self, visible: bool) -> bool:
        self._page_visible = visible
        if not visible:
            if not self._secondary.paused:
                self._secondary.pause()
            return False
        return self.resync()

    def drift(self) -> float:
        return abs(self._primary.current_time - self._secondary.current_time)

    def resync(self) -> bool:
        corrected = False
        if self._page_visible and self.drift() > self._drift_threshold:
            logger.debug(
                f"Re-seeking secondary surface to {self._primary.current_time:.3f}s "
                f"(drift {self.drift():.3f}s)"
            )
            self._secondary.seek(self._primary.current_time)
            corrected = True

        should_play = self._page_visible and not self._primary.paused
        if should_play and self._secondary.paused:
            self._secondary.play()
        elif not should_play and not self._secondary.paused:
            self._secondary.pause()
        return corrected
