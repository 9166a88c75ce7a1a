"""Clock formatting and free-form time entry for region bounds."""

from __future__ import annotations

import re

_STANDARD = re.compile(r"^(\d+):(\d{1,2})\.(\d{1,3})$")
_NO_MILLIS = re.compile(r"^(\d+):(\d{1,2})$")
_SECONDS_MILLIS = re.compile(r"^(\d+)\.(\d{1,3})$")
_SECONDS = re.compile(r"^(\d+)$")


def format_clock(seconds: float) -> str:
    """``m:ss`` with whole seconds truncated."""
    total = int(max(seconds, 0.0))
    minutes, secs = divmod(total, 60)
    return f"{minutes}:{secs:02d}"


def format_precise(seconds: float) -> str:
    """``m:ss.mmm`` rounded to the nearest millisecond."""
    total_ms = int(round(max(seconds, 0.0) * 1000))
    total_secs, millis = divmod(total_ms, 1000)
    minutes, secs = divmod(total_secs, 60)
    return f"{minutes}:{secs:02d}.{millis:03d}"


def format_pct_clock(pct: float, duration: float) -> str:
    return format_clock(pct / 100 * duration)


def parse_time(text: str, max_seconds: float) -> float | None:
    """Parse ``m:ss.mmm``, ``m:ss``, ``ss.mmm`` or bare seconds.

    Returns None when the text matches none of them or falls outside
    ``[0, max_seconds]``.
    """
    total = _to_seconds(re.sub(r"\s+", "", text))
    if total is not None and 0.0 <= total <= max_seconds:
        return total
    return None


def _to_seconds(value: str) -> float | None:
    match = _STANDARD.match(value)
    if match:
        minutes, secs, millis = match.groups()
        return int(minutes) * 60 + int(secs) + int(millis.ljust(3, "0")) / 1000
    match = _NO_MILLIS.match(value)
    if match:
        minutes, secs = match.groups()
        return float(int(minutes) * 60 + int(secs))
    match = _SECONDS_MILLIS.match(value)
    if match:
        secs, millis = match.groups()
        return int(secs) + int(millis.ljust(3, "0")) / 1000
    if _SECONDS.match(value):
        return float(int(value))
    return None
