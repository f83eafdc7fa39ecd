import pytest

from jellyrename.history import (
    RenameEntry,
    RenameHistoryManager,
    UndoConflictError,
    undo_transaction,
)


@pytest.fixture
def history(tmp_path):
    with RenameHistoryManager(tmp_path / "history.db") as manager:
        yield manager


@pytest.fixture
def renamed(tmp_path):
    """Two files that were moved from src/ into Show/Season 01/."""
    src = tmp_path / "lib" / "src"
    dest = tmp_path / "lib" / "Show" / "Season 01"
    src.mkdir(parents=True)
    dest.mkdir(parents=True)
    entries = []
    for name in ("a", "b"):
        new_path = dest / f"Show {name}.mkv"
        new_path.write_bytes(name.encode())
        entries.append(RenameEntry(old_path=str(src / f"{name}.mkv"), new_path=str(new_path)))
    return tmp_path / "lib", entries


def test_round_trip(history):
    assert not history.has_undoable()
    assert history.get_last_undoable() is None

    entries = [RenameEntry("/old/a.mkv", "/new/A.mkv"), RenameEntry("/old/b.mkv", "/new/B.mkv")]
    batch_id = history.save_transaction("/new", entries, "move")

    assert history.has_undoable()
    tx = history.get_last_undoable()
    assert tx.batch_id == batch_id
    assert tx.folder == "/new"
    assert tx.mode == "move"
    assert tx.items == entries
    assert not tx.reverted

    history.mark_reverted(batch_id)
    assert not history.has_undoable()
    (stored,) = history.get_all_transactions()
    assert stored.reverted
    assert stored.reverted_at is not None


def test_newest_batch_first(history):
    first = history.save_transaction("/lib", [RenameEntry("/a", "/b")])
    second = history.save_transaction("/lib", [RenameEntry("/c", "/d")])

    assert history.get_last_undoable().batch_id == second
    assert [tx.batch_id for tx in history.get_all_transactions()] == [second, first]

    history.mark_reverted(second)
    assert history.get_last_undoable().batch_id == first


def test_history_persists(tmp_path):
    db = tmp_path / "history.db"
    with RenameHistoryManager(db) as history:
        batch_id = history.save_transaction("/lib", [RenameEntry("/a", "/b")])
    with RenameHistoryManager(db) as history:
        assert history.get_last_undoable().batch_id == batch_id
        assert history.db_path == db


def test_undo_restores_files(history, renamed):
    folder, entries = renamed
    history.save_transaction(str(folder), entries)
    tx = history.get_last_undoable()

    summary = undo_transaction(history, tx)

    assert summary.ok
    assert summary.restored == list(reversed(entries))
    assert (folder / "src" / "a.mkv").read_bytes() == b"a"
    assert (folder / "src" / "b.mkv").read_bytes() == b"b"
    assert not (folder / "Show").exists()
    assert str(folder / "Show" / "Season 01") in summary.removed_dirs
    assert not history.has_undoable()


def test_undo_conflict_moves_nothing(history, renamed):
    folder, entries = renamed
    history.save_transaction(str(folder), entries)
    (folder / "src" / "b.mkv").write_bytes(b"new file")

    with pytest.raises(UndoConflictError) as excinfo:
        undo_transaction(history, history.get_last_undoable())

    assert excinfo.value.conflicts == [str(folder / "src" / "b.mkv")]
    assert (folder / "Show" / "Season 01" / "Show a.mkv").exists()
    assert not (folder / "src" / "a.mkv").exists()
    assert history.has_undoable()


def test_undo_skips_missing_files(history, renamed):
    folder, entries = renamed
    history.save_transaction(str(folder), entries)
    (folder / "Show" / "Season 01" / "Show a.mkv").unlink()

    summary = undo_transaction(history, history.get_last_undoable())

    assert summary.ok
    assert summary.missing == [entries[0]]
    assert summary.restored == [entries[1]]
    assert (folder / "src" / "b.mkv").exists()
    assert not history.has_undoable()
