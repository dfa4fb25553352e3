from fastapi import APIRouter, Depends, HTTPException

from notebox.api.deps import get_panel
from notebox.models.folders import SnapshotOut
from notebox.models.panel import DragIn, DropIn, PanelOut, SelectIn, SwipeIn
from notebox.utils.folder_panel import FolderPanel, InvalidTransition

router = APIRouter(prefix="/panel", tags=["panel"])


def _out(panel: FolderPanel) -> PanelOut:
    return PanelOut(
        state=panel.state.value,
        draggedNoteId=panel.dragged_note_id,
        selectedFolder=panel.selected_folder,
    )


@router.get("", response_model=PanelOut)
def get_panel_state(panel: FolderPanel = Depends(get_panel)) -> PanelOut:
    return _out(panel)


@router.post("/open", response_model=PanelOut)
def open_panel(panel: FolderPanel = Depends(get_panel)) -> PanelOut:
    panel.open()
    return _out(panel)


@router.post("/close", response_model=PanelOut)
def close_panel(panel: FolderPanel = Depends(get_panel)) -> PanelOut:
    panel.close()
    return _out(panel)


@router.post("/select", response_model=PanelOut)
def select_folder(payload: SelectIn, panel: FolderPanel = Depends(get_panel)) -> PanelOut:
    panel.select(payload.folderId)
    return _out(panel)


@router.post("/drag", response_model=PanelOut)
def long_press(payload: DragIn, panel: FolderPanel = Depends(get_panel)) -> PanelOut:
    panel.long_press(payload.noteId)
    return _out(panel)


@router.post("/swipe", response_model=PanelOut)
def swipe(payload: SwipeIn, panel: FolderPanel = Depends(get_panel)) -> PanelOut:
    panel.swipe(payload.noteId, payload.dx)
    return _out(panel)


@router.post("/cancel", response_model=PanelOut)
def cancel_drag(panel: FolderPanel = Depends(get_panel)) -> PanelOut:
    panel.cancel_drag()
    return _out(panel)


@router.post("/drop", response_model=SnapshotOut)
async def drop(payload: DropIn, panel: FolderPanel = Depends(get_panel)) -> SnapshotOut:
    try:
        snapshot = await panel.drop(payload.folderId)
    except InvalidTransition:
        raise HTTPException(status_code=409, detail="No note is being dragged")
    return SnapshotOut.from_snapshot(snapshot)
