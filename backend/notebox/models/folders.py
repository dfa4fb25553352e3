from typing import Literal

from pydantic import BaseModel, Field

from notebox.models.notes import NoteOut
from notebox.storage.folders_store import Folder
from notebox.storage.organizer import Snapshot

FolderColor = Literal["#007AFF", "#FF9500", "#FF2D55", "#5856D6", "#34C759"]


class FolderCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100, pattern=r"\S")


class FolderRename(BaseModel):
    name: str = Field(min_length=1, max_length=100, pattern=r"\S")


class FolderRecolor(BaseModel):
    color: FolderColor


class FolderOut(BaseModel):
    id: str
    name: str
    color: str
    noteCount: int
    lastModified: str
    createdAt: str

    @classmethod
    def from_folder(cls, folder: Folder) -> "FolderOut":
        return cls(**folder.to_dict())


class SnapshotOut(BaseModel):
    notes: list[NoteOut]
    folders: list[FolderOut]

    @classmethod
    def from_snapshot(cls, snapshot: Snapshot) -> "SnapshotOut":
        return cls(
            notes=[NoteOut.from_note(n) for n in snapshot.notes],
            folders=[FolderOut.from_folder(f) for f in snapshot.folders],
        )
