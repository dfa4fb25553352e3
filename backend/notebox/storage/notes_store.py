from __future__ import annotations

import json
import logging
import uuid
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Any, Optional

from notebox.storage.kv_store import NOTES_KEY, CorruptValue, KeyValueStore, StoreError
from notebox.utils.text import derive_preview, derive_title, strip_html

logger = logging.getLogger(__name__)

CATEGORIES = ("personal", "work", "ideas", "tasks")
DEFAULT_CATEGORY = "personal"
ALL = "all"

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _parse_ts(s: Optional[str]) -> datetime:
    # unparseable or missing timestamps sort as the oldest
    if not s:
        return _EPOCH
    try:
        dt = datetime.fromisoformat(s)
    except (TypeError, ValueError):
        return _EPOCH
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def _typed(raw: dict[str, Any], key: str, kind: type) -> Any:
    """Return ``raw[key]`` if it is missing, null or a ``kind``; otherwise TypeError."""
    value = raw.get(key)
    if value is not None and not isinstance(value, kind):
        raise TypeError(f"{key} must be {kind.__name__}, not {type(value).__name__}")
    return value


def _text_sort_key(s: str) -> tuple[str, str]:
    return (s.casefold(), s)


def decode_collection(raw: Optional[str]) -> Optional[list[Any]]:
    """Decode a stored blob; ``None`` means the blob is corrupt (not a JSON array)."""
    if raw is None:
        return []
    try:
        data = json.loads(raw)
    except ValueError:
        return None
    if not isinstance(data, list):
        return None
    return data


def encode_collection(items: list[Any]) -> str:
    return json.dumps([i.to_dict() for i in items], ensure_ascii=False)


@dataclass(frozen=True)
class Note:
    id: str
    text: str
    category: Optional[str]
    folder_id: Optional[str]
    created_at: str
    updated_at: str

    @property
    def title(self) -> str:
        return derive_title(self.text)

    @property
    def preview(self) -> str:
        return derive_preview(self.text)

    @property
    def plain_text(self) -> str:
        return strip_html(self.text)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "text": self.text,
            "category": self.category,
            "folderId": self.folder_id,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "Note":
        # older records carry a single "date" instead of createdAt/updatedAt
        if not isinstance(raw["id"], str):
            raise TypeError("id must be str")
        created = _typed(raw, "createdAt", str) or _typed(raw, "date", str) or ""
        return cls(
            id=raw["id"],
            text=_typed(raw, "text", str) or "",
            category=_typed(raw, "category", str),
            folder_id=_typed(raw, "folderId", str),
            created_at=created,
            updated_at=_typed(raw, "updatedAt", str) or created,
        )


class NotesStore:
    """Owns the notes collection; every mutation is a full load-modify-store cycle."""

    def __init__(self, store: KeyValueStore):
        self.store = store
        self._notes: list[Note] = []

    @property
    def notes(self) -> list[Note]:
        return list(self._notes)

    async def _read(self) -> list[Note]:
        try:
            data = decode_collection(await self.store.get(NOTES_KEY))
        except CorruptValue:
            data = None
        if data is None:
            logger.warning("stored notes are not a JSON array, resetting to empty")
            await self.store.set(NOTES_KEY, "[]")
            return []
        out: list[Note] = []
        for raw in data:
            try:
                out.append(Note.from_dict(raw))
            except (KeyError, TypeError, AttributeError):
                logger.warning("skipping malformed note record: %r", raw)
        return out

    async def _write(self, notes: list[Note]) -> None:
        await self.store.set(NOTES_KEY, encode_collection(notes))
        self._notes = notes

    async def load(self) -> list[Note]:
        try:
            self._notes = await self._read()
        except StoreError:
            logger.exception("loading notes failed")
        return self.notes

    async def get(self, note_id: str) -> Optional[Note]:
        for n in await self.load():
            if n.id == note_id:
                return n
        return None

    async def create(self, text: str, category: Optional[str] = None) -> Optional[Note]:
        if category is not None and category not in CATEGORIES:
            raise ValueError("Invalid category")
        now = _utc_now_iso()
        note = Note(
            id=str(uuid.uuid4()),
            text=text,
            category=category or DEFAULT_CATEGORY,
            folder_id=None,
            created_at=now,
            updated_at=now,
        )
        try:
            notes = await self._read()
            await self._write([*notes, note])
        except StoreError:
            logger.exception("creating note failed")
            return None
        logger.info("created note %s", note.id)
        return note

    async def _modify(self, note_id: str, **changes: Any) -> Optional[Note]:
        try:
            notes = await self._read()
            for i, n in enumerate(notes):
                if n.id == note_id:
                    break
            else:
                logger.info("note %s not found, nothing to change", note_id)
                self._notes = notes
                return None
            updated = replace(n, **changes)
            notes[i] = updated
            await self._write(notes)
        except StoreError:
            logger.exception("saving note %s failed", note_id)
            return None
        return updated

    async def update(self, note_id: str, text: str) -> Optional[Note]:
        return await self._modify(note_id, text=text, updated_at=_utc_now_iso())

    async def categorize(self, note_id: str, category: Optional[str]) -> Optional[Note]:
        if category is not None and category not in CATEGORIES:
            raise ValueError("Invalid category")
        return await self._modify(note_id, category=category, updated_at=_utc_now_iso())

    async def set_folder(self, note_id: str, folder_id: Optional[str]) -> Optional[Note]:
        # membership is not a content edit; updatedAt stays as is
        return await self._modify(note_id, folder_id=folder_id)

    async def unfile(self, folder_id: str) -> Optional[list[Note]]:
        """Clear ``folderId`` on every note filed under ``folder_id``.

        Returns the updated collection, or None if it could not be persisted.
        """
        try:
            notes = await self._read()
            changed = [replace(n, folder_id=None) if n.folder_id == folder_id else n for n in notes]
            await self._write(changed)
        except StoreError:
            logger.exception("unfiling notes of folder %s failed", folder_id)
            return None
        return self.notes

    async def delete(self, note_id: str) -> list[Note]:
        try:
            notes = await self._read()
            remaining = [n for n in notes if n.id != note_id]
            if len(remaining) == len(notes):
                logger.info("note %s not found, nothing to delete", note_id)
                self._notes = notes
                return self.notes
            await self._write(remaining)
        except StoreError:
            logger.exception("deleting note %s failed", note_id)
        return self.notes

    @staticmethod
    def search(collection: list[Note], query: str) -> list[Note]:
        if not query:
            return collection
        q = query.lower()
        return [n for n in collection if q in n.plain_text.lower()]

    @staticmethod
    def filter(collection: list[Note], folder_id: Optional[str] = ALL, category: Optional[str] = ALL) -> list[Note]:
        out = collection
        if folder_id != ALL:
            out = [n for n in out if n.folder_id == folder_id]
        if category != ALL:
            out = [n for n in out if n.category == category]
        return list(out)

    @staticmethod
    def sort(collection: list[Note], key: str = "newest") -> list[Note]:
        if key == "newest":
            return sorted(collection, key=lambda n: _parse_ts(n.updated_at), reverse=True)
        if key == "oldest":
            return sorted(collection, key=lambda n: _parse_ts(n.updated_at))
        if key == "title":
            return sorted(collection, key=lambda n: _text_sort_key(n.title))
        raise ValueError("Invalid sort key")
