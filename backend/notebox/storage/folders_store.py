from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, replace
from typing import Any, Optional

from notebox.storage.kv_store import FOLDERS_KEY, CorruptValue, KeyValueStore, StoreError
from notebox.storage.notes_store import (
    _parse_ts,
    _text_sort_key,
    _typed,
    _utc_now_iso,
    decode_collection,
    encode_collection,
)

logger = logging.getLogger(__name__)

FOLDER_COLORS = ("#007AFF", "#FF9500", "#FF2D55", "#5856D6", "#34C759")
DEFAULT_COLOR = FOLDER_COLORS[0]


@dataclass(frozen=True)
class Folder:
    id: str
    name: str
    color: str
    note_count: int
    last_modified: str
    created_at: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "color": self.color,
            "noteCount": self.note_count,
            "lastModified": self.last_modified,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "Folder":
        if not isinstance(raw["id"], str) or not isinstance(raw["name"], str):
            raise TypeError("id and name must be str")
        created = _typed(raw, "createdAt", str)
        last_modified = _typed(raw, "lastModified", str) or created or ""
        return cls(
            id=raw["id"],
            name=raw["name"],
            color=_typed(raw, "color", str) or DEFAULT_COLOR,
            note_count=_typed(raw, "noteCount", int) or 0,
            last_modified=last_modified,
            created_at=created or last_modified,
        )


class FoldersStore:
    """Owns the folders collection. Knows nothing about notes: counts are handed in."""

    def __init__(self, store: KeyValueStore):
        self.store = store
        self._folders: list[Folder] = []

    @property
    def folders(self) -> list[Folder]:
        return list(self._folders)

    async def _read(self) -> list[Folder]:
        try:
            data = decode_collection(await self.store.get(FOLDERS_KEY))
        except CorruptValue:
            data = None
        if data is None:
            logger.warning("stored folders are not a JSON array, resetting to empty")
            await self.store.set(FOLDERS_KEY, "[]")
            return []
        out: list[Folder] = []
        for raw in data:
            try:
                out.append(Folder.from_dict(raw))
            except (KeyError, TypeError, ValueError, AttributeError):
                logger.warning("skipping malformed folder record: %r", raw)
        return out

    async def _write(self, folders: list[Folder]) -> None:
        await self.store.set(FOLDERS_KEY, encode_collection(folders))
        self._folders = folders

    async def load(self) -> list[Folder]:
        try:
            self._folders = await self._read()
        except StoreError:
            logger.exception("loading folders failed")
        return self.folders

    async def get(self, folder_id: str) -> Optional[Folder]:
        for f in await self.load():
            if f.id == folder_id:
                return f
        return None

    async def create(self, name: str) -> Optional[Folder]:
        name = (name or "").strip()
        if not name:
            raise ValueError("Folder name must not be blank")
        now = _utc_now_iso()
        folder = Folder(
            id=str(uuid.uuid4()),
            name=name,
            color=DEFAULT_COLOR,
            note_count=0,
            last_modified=now,
            created_at=now,
        )
        try:
            folders = await self._read()
            await self._write([*folders, folder])
        except StoreError:
            logger.exception("creating folder failed")
            return None
        logger.info("created folder %s (%s)", folder.id, folder.name)
        return folder

    async def _modify(self, folder_id: str, **changes: Any) -> Optional[Folder]:
        try:
            folders = await self._read()
            for i, f in enumerate(folders):
                if f.id == folder_id:
                    break
            else:
                logger.info("folder %s not found, nothing to change", folder_id)
                self._folders = folders
                return None
            updated = replace(f, last_modified=_utc_now_iso(), **changes)
            folders[i] = updated
            await self._write(folders)
        except StoreError:
            logger.exception("saving folder %s failed", folder_id)
            return None
        return updated

    async def rename(self, folder_id: str, name: str) -> Optional[Folder]:
        name = (name or "").strip()
        if not name:
            raise ValueError("Folder name must not be blank")
        return await self._modify(folder_id, name=name)

    async def recolor(self, folder_id: str, color: str) -> Optional[Folder]:
        return await self._modify(folder_id, color=color)

    async def delete(self, folder_id: str) -> list[Folder]:
        try:
            folders = await self._read()
            remaining = [f for f in folders if f.id != folder_id]
            if len(remaining) == len(folders):
                logger.info("folder %s not found, nothing to delete", folder_id)
                self._folders = folders
                return self.folders
            await self._write(remaining)
        except StoreError:
            logger.exception("deleting folder %s failed", folder_id)
        return self.folders

    async def apply_counts(self, counts: dict[str, int]) -> list[Folder]:
        """Overwrite every folder's noteCount; folders missing from ``counts`` get 0."""
        try:
            folders = await self._read()
            recounted = [replace(f, note_count=counts.get(f.id, 0)) for f in folders]
            await self._write(recounted)
        except StoreError:
            logger.exception("saving folder counts failed")
        return self.folders

    @staticmethod
    def sort(collection: list[Folder], key: str = "name") -> list[Folder]:
        if key == "name":
            return sorted(collection, key=lambda f: _text_sort_key(f.name))
        if key == "date":
            return sorted(collection, key=lambda f: _parse_ts(f.last_modified), reverse=True)
        raise ValueError("Invalid sort key")
