from __future__ import annotations

import asyncio
import logging
import os
import re
from pathlib import Path
from typing import Optional, Protocol

logger = logging.getLogger(__name__)

NOTES_KEY = "notes"
FOLDERS_KEY = "folders"


class StoreError(Exception):
    """Raised when the underlying store cannot read or write a value."""


class CorruptValue(StoreError):
    """The stored bytes exist but are not readable text."""


class KeyValueStore(Protocol):
    async def get(self, key: str) -> Optional[str]: ...

    async def set(self, key: str, value: str) -> None: ...


def _safe_key_path(base_dir: Path, key: str) -> Path:
    # keys become file names; keep them to a plain identifier
    if not re.fullmatch(r"[A-Za-z0-9_-]+", key or ""):
        raise ValueError("Invalid key")
    return base_dir / f"{key}.json"


class JsonFileStore:
    """One UTF-8 file per key under ``base_dir``; writes go through a hidden temp file + rename."""

    def __init__(self, base_dir: Path):
        self.base_dir = base_dir

    def _read(self, key: str) -> Optional[bytes]:
        path = _safe_key_path(self.base_dir, key)
        if not path.exists():
            return None
        return path.read_bytes()

    def _write(self, key: str, payload: bytes) -> None:
        path = _safe_key_path(self.base_dir, key)
        self.base_dir.mkdir(parents=True, exist_ok=True)
        # a crash mid-write leaves the previous value of the key in place
        tmp_path = self.base_dir / f".{key}.json.tmp"
        with tmp_path.open("wb") as f:
            f.write(payload)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, path)

    async def get(self, key: str) -> Optional[str]:
        try:
            payload = await asyncio.to_thread(self._read, key)
        except OSError as exc:
            raise StoreError(f"read of {key!r} failed") from exc
        if payload is None:
            return None
        try:
            return payload.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise CorruptValue(f"value of {key!r} is not UTF-8") from exc

    async def set(self, key: str, value: str) -> None:
        _safe_key_path(self.base_dir, key)
        try:
            payload = value.encode("utf-8")
            await asyncio.to_thread(self._write, key, payload)
        except (OSError, UnicodeEncodeError) as exc:
            raise StoreError(f"write of {key!r} failed") from exc
        logger.debug("wrote %d bytes for %s", len(payload), key)


class MemoryStore:
    """In-process store, used by tests and throwaway sessions."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self.data: dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    async def set(self, key: str, value: str) -> None:
        self.data[key] = value
