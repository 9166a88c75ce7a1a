"""In-memory store of decoded assets addressed by id."""

from __future__ import annotations

from music_player.audio.models import AudioAsset


class AssetRepository:
    def __init__(self) -> None:
        self._items: dict[str, AudioAsset] = {}

    def add(self, asset: AudioAsset) -> AudioAsset:
        self._items[asset.asset_id] = asset
        return asset

    def get(self, asset_id: str) -> AudioAsset:
        item = self._items.get(asset_id)
        if item is None:
            raise KeyError(f"Asset '{asset_id}' not found")
        return item

    def find(self, asset_id: str) -> AudioAsset | None:
        return self._items.get(asset_id)

    def remove(self, asset_id: str) -> AudioAsset:
        item = self._items.pop(asset_id, None)
        if item is None:
            raise KeyError(f"Asset '{asset_id}' not found")
        return item

    def __len__(self) -> int:
        return len(self._items)
