from typing import Optional

from pydantic import BaseModel, Field


class DragIn(BaseModel):
    noteId: str = Field(min_length=1, max_length=64)


class SwipeIn(BaseModel):
    noteId: str = Field(min_length=1, max_length=64)
    dx: float


class DropIn(BaseModel):
    folderId: Optional[str] = Field(default=None, min_length=1, max_length=64)


class SelectIn(BaseModel):
    folderId: str = Field(min_length=1, max_length=64)


class PanelOut(BaseModel):
    state: str
    draggedNoteId: Optional[str]
    selectedFolder: str
