"""Registry of transient in-memory blob handles handed to render surfaces."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from uuid import uuid4

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class BlobHandle:
    handle: str
    data: bytes
    mime_type: str


class HandleRegistry:
    def __init__(self) -> None:
        self._handles: dict[str, BlobHandle] = {}

    def create(self, data: bytes, mime_type: str = "application/octet-stream") -> str:
        handle = f"blob:{uuid4()}"
        self._handles[handle] = BlobHandle(handle=handle, data=data, mime_type=mime_type)
        logger.debug(f"Created {handle} ({len(data)} bytes, {mime_type})")
        return handle

    def resolve(self, handle: str) -> BlobHandle:
        item = self._handles.get(handle)
        if item is None:
            raise KeyError(f"Handle '{handle}' not found")
        return item

    def release(self, handle: str | None) -> bool:
        if handle is None:
            return False
        released = self._handles.pop(handle, None) is not None
        if released:
            logger.debug(f"Released {handle}")
        return released

    def release_all(self) -> int:
        count = len(self._handles)
        self._handles.clear()
        if count:
            logger.debug(f"Released {count} outstanding handles")
        return count

    def __contains__(self, handle: object) -> bool:
        return handle in self._handles

    def __len__(self) -> int:
        return len(self._handles)
