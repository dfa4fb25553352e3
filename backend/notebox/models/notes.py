from typing import Literal, Optional

from pydantic import BaseModel, Field

from notebox.storage.notes_store import Note

Category = Literal["personal", "work", "ideas", "tasks"]


class NoteCreate(BaseModel):
    text: str = Field(default="", max_length=100_000)
    category: Optional[Category] = None


class NoteUpdate(BaseModel):
    text: str = Field(max_length=100_000)


class NoteCategoryIn(BaseModel):
    category: Optional[Category] = None


class NoteMove(BaseModel):
    # None or "all" means All Notes (unfiled)
    folderId: Optional[str] = Field(default=None, min_length=1, max_length=64)


class NoteOut(BaseModel):
    id: str
    text: str
    title: str
    preview: str
    category: Optional[str]
    folderId: Optional[str]
    createdAt: str
    updatedAt: str

    @classmethod
    def from_note(cls, note: Note) -> "NoteOut":
        return cls(title=note.title, preview=note.preview, **note.to_dict())
