"""Region-bounded preview playback over a RegionSelector."""

from __future__ import annotations

from music_player.playback.selection import RegionSelector


class RegionPreview:
    """Tracks whether the trim preview is playing and stops it at the region end.

    The host feeds transport time through ``advance`` once per frame and
    mirrors ``playing`` onto its media element.
    """

    def __init__(self, selector: RegionSelector) -> None:
        self._selector = selector
        self._playing = False

    @property
    def playing(self) -> bool:
        return self._playing

    def toggle(self) -> bool:
        if self._playing:
            self._playing = False
            return False
        if self._selector.cursor.current_time >= self._selector.end_time():
            self._selector.seek(self._selector.start_time())
        self._playing = True
        return True

    def stop(self) -> None:
        self._playing = False

    def advance(self, current_time: float) -> float:
        position = self._selector.seek(current_time)
        if self._playing and current_time >= self._selector.end_time():
            self._playing = False
        return position

    def set_start_pct(self, pct: float) -> bool:
        accepted = self._selector.set_start_pct(pct)
        if accepted and self._playing:
            self._selector.seek(self._selector.start_time())
        return accepted

    def set_end_pct(self, pct: float) -> bool:
        return self._selector.set_end_pct(pct)
