import asyncio
import json

import pytest

from notebox.storage.folders_store import DEFAULT_COLOR, Folder, FoldersStore


def _folder(folder_id, name, last_modified="2024-01-01T00:00:00+00:00"):
    return Folder(
        id=folder_id,
        name=name,
        color=DEFAULT_COLOR,
        note_count=0,
        last_modified=last_modified,
        created_at=last_modified,
    )


def test_create_assigns_defaults(store):
    folder = asyncio.run(FoldersStore(store).create("  Work  "))
    assert folder.name == "Work"
    assert folder.color == DEFAULT_COLOR
    assert folder.note_count == 0
    assert json.loads(store.data["folders"])[0]["noteCount"] == 0


@pytest.mark.parametrize("name", ["", "   ", "\n\t"])
def test_create_rejects_blank_names(store, name):
    with pytest.raises(ValueError):
        asyncio.run(FoldersStore(store).create(name))
    assert "folders" not in store.data


def test_rename_and_recolor_touch_last_modified(store):
    folders = FoldersStore(store)
    folder = asyncio.run(folders.create("Old"))

    renamed = asyncio.run(folders.rename(folder.id, "New"))
    assert renamed.name == "New"
    assert renamed.last_modified >= folder.last_modified

    recolored = asyncio.run(folders.recolor(folder.id, "#FF9500"))
    assert recolored.color == "#FF9500"
    assert recolored.name == "New"
    assert asyncio.run(FoldersStore(store).get(folder.id)) == recolored


def test_unknown_ids_are_noops(store):
    folders = FoldersStore(store)
    asyncio.run(folders.create("Keep"))
    before = store.data["folders"]

    assert asyncio.run(folders.rename("missing", "x")) is None
    assert asyncio.run(folders.recolor("missing", "#34C759")) is None
    assert len(asyncio.run(folders.delete("missing"))) == 1
    assert store.data["folders"] == before


def test_delete_removes_record(store):
    folders = FoldersStore(store)
    a = asyncio.run(folders.create("A"))
    b = asyncio.run(folders.create("B"))
    assert asyncio.run(folders.delete(a.id)) == [b]


def test_corrupt_folders_reset_and_persisted(store):
    store.data["folders"] = json.dumps("not an array")
    assert asyncio.run(FoldersStore(store).load()) == []
    assert store.data["folders"] == "[]"


def test_apply_counts_zeroes_missing(store):
    folders = FoldersStore(store)
    a = asyncio.run(folders.create("A"))
    b = asyncio.run(folders.create("B"))
    counted = {f.id: f.note_count for f in asyncio.run(folders.apply_counts({a.id: 3}))}
    assert counted == {a.id: 3, b.id: 0}


def test_sort_by_name_and_date():
    collection = [
        _folder("1", "B", "2024-01-01T00:00:00+00:00"),
        _folder("2", "A", "2024-03-01T00:00:00+00:00"),
        _folder("3", "c", "2024-02-01T00:00:00+00:00"),
    ]
    assert [f.name for f in FoldersStore.sort(collection, "name")] == ["A", "B", "c"]
    assert [f.id for f in FoldersStore.sort(collection, "date")] == ["2", "3", "1"]
    assert [f.id for f in collection] == ["1", "2", "3"]


def test_load_skips_records_with_wrongly_typed_fields(store):
    store.data["folders"] = json.dumps([
        {"id": "ok", "name": "Fine", "lastModified": "2024-01-01T00:00:00+00:00"},
        {"id": "bad-name", "name": 3},
        {"id": "bad-color", "name": "X", "color": ["#007AFF"]},
        {"id": "bad-date", "name": "X", "lastModified": 1700000000},
        {"id": "bad-count", "name": "X", "noteCount": "many"},
    ])
    loaded = asyncio.run(FoldersStore(store).load())

    assert [f.id for f in loaded] == ["ok"]
    assert loaded[0].color == DEFAULT_COLOR
