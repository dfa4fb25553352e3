import pytest
from fastapi.testclient import TestClient

from notebox.main import create_app
from notebox.storage.kv_store import MemoryStore, StoreError
from notebox.storage.organizer import Organizer


class FlakyStore(MemoryStore):
    """MemoryStore whose writes can be switched off to simulate I/O failure."""

    def __init__(self, initial=None):
        super().__init__(initial)
        self.fail_writes = False

    async def set(self, key, value):
        if self.fail_writes:
            raise StoreError(f"write of {key!r} failed")
        await super().set(key, value)


@pytest.fixture()
def store():
    return FlakyStore()


@pytest.fixture()
def organizer(store):
    return Organizer(store)


@pytest.fixture()
def client(tmp_path, monkeypatch):
    # isolate data dir per test
    monkeypatch.setenv("APP_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("SWIPE_THRESHOLD_PX", "50")

    with TestClient(create_app()) as c:
        yield c
