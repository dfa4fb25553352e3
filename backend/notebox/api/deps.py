from fastapi import Request

from notebox.storage.organizer import Organizer
from notebox.utils.folder_panel import FolderPanel


def get_organizer(request: Request) -> Organizer:
    return request.app.state.organizer


def get_panel(request: Request) -> FolderPanel:
    return request.app.state.panel
