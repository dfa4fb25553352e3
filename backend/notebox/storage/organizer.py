"""Cross-collection operations: the only place that touches notes and folders together.

Folder note counts are always recomputed from membership, never adjusted
incrementally, so a missed update cannot make them drift.
"""
from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass
from typing import Optional

from notebox.storage.folders_store import Folder, FoldersStore
from notebox.storage.kv_store import KeyValueStore
from notebox.storage.notes_store import ALL, Note, NotesStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Snapshot:
    notes: list[Note]
    folders: list[Folder]


def count_members(notes: list[Note]) -> dict[str, int]:
    return dict(Counter(n.folder_id for n in notes if n.folder_id is not None))


class Organizer:
    def __init__(self, store: KeyValueStore):
        self.store = store
        self.notes = NotesStore(store)
        self.folders = FoldersStore(store)

    def snapshot(self) -> Snapshot:
        return Snapshot(notes=self.notes.notes, folders=self.folders.folders)

    async def load(self) -> Snapshot:
        await self.notes.load()
        await self.folders.load()
        return self.snapshot()

    async def recount(self) -> Snapshot:
        notes = await self.notes.load()
        await self.folders.apply_counts(count_members(notes))
        return self.snapshot()

    async def move_note(self, note_id: str, target_folder_id: Optional[str]) -> Snapshot:
        if target_folder_id == ALL:
            target_folder_id = None
        if target_folder_id is not None and await self.folders.get(target_folder_id) is None:
            logger.info("folder %s not found, note %s stays where it is", target_folder_id, note_id)
            return await self.recount()

        moved = await self.notes.set_folder(note_id, target_folder_id)
        if moved is not None:
            logger.info("moved note %s to %s", note_id, target_folder_id or "All Notes")
        return await self.recount()

    async def delete_folder(self, folder_id: str) -> Snapshot:
        # unfile members first: a note never points at a folder that is gone
        if await self.notes.unfile(folder_id) is None:
            logger.error("folder %s still has notes, keeping the folder", folder_id)
            return self.snapshot()
        await self.folders.delete(folder_id)
        logger.info("deleted folder %s", folder_id)
        return await self.recount()

    async def delete_note(self, note_id: str) -> Snapshot:
        await self.notes.delete(note_id)
        return await self.recount()

    async def reconcile(self) -> Snapshot:
        """Unfile notes that point at missing folders, then recount."""
        folder_ids = {f.id for f in await self.folders.load()}
        notes = await self.notes.load()
        dangling = {n.folder_id for n in notes if n.folder_id is not None and n.folder_id not in folder_ids}
        for folder_id in dangling:
            logger.warning("notes reference missing folder %s, unfiling them", folder_id)
            await self.notes.unfile(folder_id)
        return await self.recount()
