from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, Response

from notebox.api.deps import get_organizer
from notebox.models.folders import SnapshotOut
from notebox.models.notes import NoteCategoryIn, NoteCreate, NoteMove, NoteOut, NoteUpdate
from notebox.storage.notes_store import ALL, NotesStore
from notebox.storage.organizer import Organizer

router = APIRouter(prefix="/notes", tags=["notes"])

# ?folder=none lists unfiled notes only
UNFILED = "none"


@router.get("", response_model=list[NoteOut])
async def list_notes(
    q: str = "",
    folder: str = ALL,
    category: str = ALL,
    sort: Literal["newest", "oldest", "title"] = "newest",
    organizer: Organizer = Depends(get_organizer),
) -> list[NoteOut]:
    notes = await organizer.notes.load()
    folder_id = None if folder == UNFILED else folder
    notes = NotesStore.filter(notes, folder_id=folder_id, category=category)
    notes = NotesStore.search(notes, q)
    return [NoteOut.from_note(n) for n in NotesStore.sort(notes, sort)]


@router.post("", response_model=NoteOut, status_code=201)
async def create_note(payload: NoteCreate, organizer: Organizer = Depends(get_organizer)) -> NoteOut:
    note = await organizer.notes.create(payload.text, category=payload.category)
    if note is None:
        raise HTTPException(status_code=503, detail="Note could not be saved")
    return NoteOut.from_note(note)


@router.get("/{note_id}", response_model=NoteOut)
async def get_note(note_id: str, organizer: Organizer = Depends(get_organizer)) -> NoteOut:
    note = await organizer.notes.get(note_id)
    if note is None:
        raise HTTPException(status_code=404, detail="Note not found")
    return NoteOut.from_note(note)


@router.put("/{note_id}", response_model=NoteOut)
async def update_note(note_id: str, payload: NoteUpdate, organizer: Organizer = Depends(get_organizer)) -> NoteOut:
    note = await organizer.notes.update(note_id, payload.text)
    if note is None:
        raise HTTPException(status_code=404, detail="Note not found")
    return NoteOut.from_note(note)


@router.put("/{note_id}/category", response_model=NoteOut)
async def categorize_note(
    note_id: str, payload: NoteCategoryIn, organizer: Organizer = Depends(get_organizer)
) -> NoteOut:
    note = await organizer.notes.categorize(note_id, payload.category)
    if note is None:
        raise HTTPException(status_code=404, detail="Note not found")
    return NoteOut.from_note(note)


@router.post("/{note_id}/move", response_model=SnapshotOut)
async def move_note(note_id: str, payload: NoteMove, organizer: Organizer = Depends(get_organizer)) -> SnapshotOut:
    if await organizer.notes.get(note_id) is None:
        raise HTTPException(status_code=404, detail="Note not found")
    if payload.folderId not in (None, ALL) and await organizer.folders.get(payload.folderId) is None:
        raise HTTPException(status_code=404, detail="Folder not found")
    snapshot = await organizer.move_note(note_id, payload.folderId)
    return SnapshotOut.from_snapshot(snapshot)


# idempotent, like the store operation underneath
@router.delete("/{note_id}", status_code=204)
async def delete_note(note_id: str, organizer: Organizer = Depends(get_organizer)) -> Response:
    await organizer.delete_note(note_id)
    return Response(status_code=204)
