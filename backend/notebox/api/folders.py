from typing import Literal

from fastapi import APIRouter, Depends, HTTPException

from notebox.api.deps import get_organizer, get_panel
from notebox.models.folders import FolderCreate, FolderOut, FolderRecolor, FolderRename, SnapshotOut
from notebox.storage.folders_store import FoldersStore
from notebox.storage.organizer import Organizer
from notebox.utils.folder_panel import FolderPanel

router = APIRouter(prefix="/folders", tags=["folders"])


@router.get("", response_model=list[FolderOut])
async def list_folders(
    sort: Literal["name", "date"] = "name",
    organizer: Organizer = Depends(get_organizer),
) -> list[FolderOut]:
    folders = await organizer.folders.load()
    return [FolderOut.from_folder(f) for f in FoldersStore.sort(folders, sort)]


@router.post("", response_model=FolderOut, status_code=201)
async def create_folder(payload: FolderCreate, organizer: Organizer = Depends(get_organizer)) -> FolderOut:
    try:
        folder = await organizer.folders.create(payload.name)
    except ValueError:
        raise HTTPException(status_code=422, detail="Folder name must not be blank")
    if folder is None:
        raise HTTPException(status_code=503, detail="Folder could not be saved")
    return FolderOut.from_folder(folder)


@router.put("/{folder_id}/name", response_model=FolderOut)
async def rename_folder(
    folder_id: str, payload: FolderRename, organizer: Organizer = Depends(get_organizer)
) -> FolderOut:
    try:
        folder = await organizer.folders.rename(folder_id, payload.name)
    except ValueError:
        raise HTTPException(status_code=422, detail="Folder name must not be blank")
    if folder is None:
        raise HTTPException(status_code=404, detail="Folder not found")
    return FolderOut.from_folder(folder)


@router.put("/{folder_id}/color", response_model=FolderOut)
async def recolor_folder(
    folder_id: str, payload: FolderRecolor, organizer: Organizer = Depends(get_organizer)
) -> FolderOut:
    folder = await organizer.folders.recolor(folder_id, payload.color)
    if folder is None:
        raise HTTPException(status_code=404, detail="Folder not found")
    return FolderOut.from_folder(folder)


@router.delete("/{folder_id}", response_model=SnapshotOut)
async def delete_folder(folder_id: str, panel: FolderPanel = Depends(get_panel)) -> SnapshotOut:
    # through the panel so a deleted selection falls back to All Notes
    snapshot = await panel.delete_folder(folder_id)
    return SnapshotOut.from_snapshot(snapshot)
