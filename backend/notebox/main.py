from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI

from notebox import config
from notebox.api import folders, notes, panel
from notebox.storage.kv_store import JsonFileStore, KeyValueStore
from notebox.storage.organizer import Organizer
from notebox.utils.folder_panel import FolderPanel
from notebox.utils.log_config import setup_logging


def create_app(store: Optional[KeyValueStore] = None, data_dir: Optional[Path] = None) -> FastAPI:
    setup_logging(config.log_level())
    if store is None:
        store = JsonFileStore(data_dir or config.data_dir())

    # one organizer per session, shared by every route
    organizer = Organizer(store)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await organizer.reconcile()
        yield

    app = FastAPI(title="Notebox API", lifespan=lifespan)
    app.state.organizer = organizer
    app.state.panel = FolderPanel(organizer, swipe_threshold_px=config.swipe_threshold_px())

    @app.get("/health")
    def health():
        return {"ok": True}

    app.include_router(notes.router)
    app.include_router(folders.router)
    app.include_router(panel.router)
    return app


app = create_app()
