"""Error taxonomy shared by the audio engine."""

from __future__ import annotations


class PlayerEngineError(RuntimeError):
    """Base class for engine failures reported to the UI collaborator."""


class DecodeError(PlayerEngineError):
    """Raised when a payload is empty, truncated, corrupt or unsupported."""


class InvalidRegionError(ValueError):
    """Raised when a selection with start >= end reaches trimming."""
