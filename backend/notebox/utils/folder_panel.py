"""Interaction state of the folder side panel.

Idle -> PANEL_OPEN -> DRAG_PENDING -> Idle (drop) or PANEL_OPEN (cancel).
Long-press and swipe both start a drag, opening the panel first if needed;
every drop goes through ``Organizer.move_note``. One candidate note at a time, the latest wins.
"""
from __future__ import annotations

import enum
import logging
from typing import Optional

from notebox.storage.notes_store import ALL
from notebox.storage.organizer import Organizer, Snapshot

logger = logging.getLogger(__name__)


class PanelState(enum.Enum):
    IDLE = "idle"
    PANEL_OPEN = "panel_open"
    DRAG_PENDING = "drag_pending"


class InvalidTransition(Exception):
    pass


class FolderPanel:
    def __init__(self, organizer: Organizer, swipe_threshold_px: int):
        self.organizer = organizer
        self.swipe_threshold_px = swipe_threshold_px
        self.state = PanelState.IDLE
        self.dragged_note_id: Optional[str] = None
        self.selected_folder: str = ALL

    def open(self) -> None:
        if self.state is PanelState.IDLE:
            self.state = PanelState.PANEL_OPEN

    def close(self) -> None:
        self.state = PanelState.IDLE
        self.dragged_note_id = None

    def select(self, folder_id: str) -> None:
        self.selected_folder = folder_id
        self.close()

    def long_press(self, note_id: str) -> None:
        self._start_drag(note_id)

    def swipe(self, note_id: str, dx: float) -> bool:
        """Start a drag if the rightward swipe went far enough."""
        if dx < self.swipe_threshold_px:
            return False
        self._start_drag(note_id)
        return True

    def _start_drag(self, note_id: str) -> None:
        # a drag from the note list opens the panel first
        self.open()
        if self.dragged_note_id is not None and self.dragged_note_id != note_id:
            logger.debug("drag of note %s replaced by %s", self.dragged_note_id, note_id)
        self.dragged_note_id = note_id
        self.state = PanelState.DRAG_PENDING

    def cancel_drag(self) -> None:
        if self.state is not PanelState.DRAG_PENDING:
            return
        self.dragged_note_id = None
        self.state = PanelState.PANEL_OPEN

    async def drop(self, folder_id: Optional[str]) -> Snapshot:
        if self.state is not PanelState.DRAG_PENDING or self.dragged_note_id is None:
            raise InvalidTransition("No note is being dragged")
        note_id = self.dragged_note_id
        snapshot = await self.organizer.move_note(note_id, folder_id)
        self.close()
        return snapshot

    async def delete_folder(self, folder_id: str) -> Snapshot:
        snapshot = await self.organizer.delete_folder(folder_id)
        if self.selected_folder == folder_id and all(f.id != folder_id for f in snapshot.folders):
            self.selected_folder = ALL
        return snapshot
