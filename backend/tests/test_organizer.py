import asyncio
import json

from notebox.storage.organizer import Organizer


def _assert_consistent(snapshot):
    folder_ids = {f.id for f in snapshot.folders}
    for note in snapshot.notes:
        assert note.folder_id is None or note.folder_id in folder_ids
    for folder in snapshot.folders:
        assert folder.note_count == sum(1 for n in snapshot.notes if n.folder_id == folder.id)


def test_move_note_recounts_every_folder(organizer):
    a = asyncio.run(organizer.notes.create("a"))
    b = asyncio.run(organizer.notes.create("b"))
    work = asyncio.run(organizer.folders.create("Work"))
    home = asyncio.run(organizer.folders.create("Home"))

    asyncio.run(organizer.move_note(a.id, work.id))
    asyncio.run(organizer.move_note(b.id, work.id))
    snap = asyncio.run(organizer.move_note(a.id, home.id))

    _assert_consistent(snap)
    counts = {f.name: f.note_count for f in snap.folders}
    assert counts == {"Work": 1, "Home": 1}


def test_move_note_is_idempotent(organizer, store):
    note = asyncio.run(organizer.notes.create("a"))
    folder = asyncio.run(organizer.folders.create("F"))

    once = asyncio.run(organizer.move_note(note.id, folder.id))
    persisted = dict(store.data)
    twice = asyncio.run(organizer.move_note(note.id, folder.id))

    assert once == twice
    assert store.data == persisted


def test_move_to_all_unfiles(organizer):
    note = asyncio.run(organizer.notes.create("a"))
    folder = asyncio.run(organizer.folders.create("F"))
    asyncio.run(organizer.move_note(note.id, folder.id))

    snap = asyncio.run(organizer.move_note(note.id, "all"))
    assert snap.notes[0].folder_id is None
    assert snap.folders[0].note_count == 0


def test_move_to_unknown_folder_is_noop(organizer):
    note = asyncio.run(organizer.notes.create("a"))
    snap = asyncio.run(organizer.move_note(note.id, "nope"))
    assert snap.notes[0].folder_id is None
    _assert_consistent(snap)


def test_move_does_not_touch_updated_at(organizer):
    note = asyncio.run(organizer.notes.create("a"))
    folder = asyncio.run(organizer.folders.create("F"))
    snap = asyncio.run(organizer.move_note(note.id, folder.id))
    assert snap.notes[0].updated_at == note.updated_at
    assert snap.folders[0].last_modified == folder.last_modified


def test_delete_folder_unfiles_members(organizer):
    a = asyncio.run(organizer.notes.create("a"))
    b = asyncio.run(organizer.notes.create("b"))
    folder = asyncio.run(organizer.folders.create("F"))
    asyncio.run(organizer.move_note(a.id, folder.id))

    snap = asyncio.run(organizer.delete_folder(folder.id))

    assert [n.folder_id for n in snap.notes] == [None, None]
    assert {n.id for n in snap.notes} == {a.id, b.id}
    assert snap.folders == []
    reloaded = asyncio.run(Organizer(organizer.store).load())
    assert reloaded == snap


def test_delete_folder_keeps_folder_when_notes_cannot_be_saved(organizer, store):
    note = asyncio.run(organizer.notes.create("a"))
    folder = asyncio.run(organizer.folders.create("F"))
    asyncio.run(organizer.move_note(note.id, folder.id))
    store.fail_writes = True

    snap = asyncio.run(organizer.delete_folder(folder.id))

    assert [f.id for f in snap.folders] == [folder.id]
    assert snap.notes[0].folder_id == folder.id
    store.fail_writes = False
    _assert_consistent(asyncio.run(Organizer(store).load()))


def test_delete_note_recounts(organizer):
    note = asyncio.run(organizer.notes.create("a"))
    folder = asyncio.run(organizer.folders.create("F"))
    asyncio.run(organizer.move_note(note.id, folder.id))

    snap = asyncio.run(organizer.delete_note(note.id))
    assert snap.notes == []
    assert snap.folders[0].note_count == 0


def test_reconcile_repairs_dangling_references(organizer):
    note = asyncio.run(organizer.notes.create("a"))
    folder = asyncio.run(organizer.folders.create("F"))
    asyncio.run(organizer.notes.set_folder(note.id, "ghost"))
    asyncio.run(organizer.folders.apply_counts({folder.id: 7}))

    snap = asyncio.run(organizer.reconcile())
    assert snap.notes[0].folder_id is None
    assert snap.folders[0].note_count == 0


def test_reconcile_ignores_malformed_folder_references(store):
    store.data["notes"] = json.dumps([
        {"id": "a", "text": "a", "folderId": ["f"]},
        {"id": "b", "text": "b", "folderId": "f"},
    ])
    store.data["folders"] = json.dumps([{"id": "f", "name": "F", "noteCount": 9}])

    snap = asyncio.run(Organizer(store).reconcile())

    assert [n.id for n in snap.notes] == ["b"]
    assert snap.folders[0].note_count == 1
    _assert_consistent(snap)
