"""Persistent rename history backed by SQLite, and undo of a rename batch.

The database lives in the platform app-data directory next to the GUI
settings file.  Every executed move run becomes one transaction; the
last transaction that has not been reverted can be undone.
"""
from __future__ import annotations

import logging
import os
import shutil
import sqlite3
import sys
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path

log = logging.getLogger(__name__)

APP_NAME = "jellyrename"


# ---------------------------------------------------------------------------
# App-data directory (shared with gui/settings.py)
# ---------------------------------------------------------------------------

def app_data_dir() -> Path:
    if sys.platform == "win32":
        base = Path(os.environ.get("APPDATA", Path.home()))
    elif sys.platform == "darwin":
        base = Path.home() / "Library" / "Application Support"
    else:
        base = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))
    return base / APP_NAME


def default_db_path() -> Path:
    d = app_data_dir()
    d.mkdir(parents=True, exist_ok=True)
    return d / "rename_history.db"


# ---------------------------------------------------------------------------
# Data models
# ---------------------------------------------------------------------------

@dataclass
class RenameEntry:
    """One file in a rename transaction."""
    old_path: str
    new_path: str


@dataclass
class RenameTransaction:
    """A batch of moves that can be undone together."""
    batch_id: str
    timestamp: str
    folder: str
    mode: str = "move"
    items: list[RenameEntry] = field(default_factory=list)
    reverted: bool = False
    reverted_at: str | None = None


class UndoConflictError(Exception):
    """Raised when undoing would overwrite files at the original paths."""

    def __init__(self, conflicts: list[str]):
        self.conflicts = conflicts
        super().__init__(
            f"{len(conflicts)} original path(s) already exist, e.g. {conflicts[0]}"
        )


@dataclass
class UndoSummary:
    """What an undo run did."""
    restored: list[RenameEntry] = field(default_factory=list)
    missing: list[RenameEntry] = field(default_factory=list)
    failed: list[tuple[RenameEntry, str]] = field(default_factory=list)
    removed_dirs: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed


# ---------------------------------------------------------------------------
# RenameHistoryManager
# ---------------------------------------------------------------------------

class RenameHistoryManager:
    """SQLite-backed persistent rename history.

    Usage::

        with RenameHistoryManager() as history:
            history.save_transaction(folder, entries)
            tx = history.get_last_undoable()
            undo_transaction(history, tx)
    """

    def __init__(self, db_path: Path | str | None = None):
        self._db_path = Path(db_path) if db_path else default_db_path()
        self._conn: sqlite3.Connection | None = None
        self._ensure_schema()

    @property
    def db_path(self) -> Path:
        return self._db_path

    # -- connection management -------------------------------------

    def _get_conn(self) -> sqlite3.Connection:
        if self._conn is None:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
            self._conn = sqlite3.connect(
                str(self._db_path),
                check_same_thread=False,
            )
            self._conn.execute("PRAGMA foreign_keys=ON")
        return self._conn

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        conn.executescript("""
            CREATE TABLE IF NOT EXISTS transactions (
                batch_id    TEXT PRIMARY KEY,
                timestamp   TEXT NOT NULL,
                folder      TEXT NOT NULL,
                mode        TEXT NOT NULL DEFAULT 'move',
                reverted    INTEGER NOT NULL DEFAULT 0,
                reverted_at TEXT
            );

            CREATE TABLE IF NOT EXISTS rename_items (
                id          INTEGER PRIMARY KEY AUTOINCREMENT,
                batch_id    TEXT NOT NULL,
                old_path    TEXT NOT NULL,
                new_path    TEXT NOT NULL,
                FOREIGN KEY (batch_id) REFERENCES transactions(batch_id)
            );

            CREATE INDEX IF NOT EXISTS idx_items_batch
                ON rename_items(batch_id);
        """)
        conn.commit()

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def __enter__(self) -> RenameHistoryManager:
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    # -- public API ------------------------------------------------

    def save_transaction(
        self,
        folder: str,
        items: list[RenameEntry],
        mode: str = "move",
    ) -> str:
        """Persist a batch of renames.

        Args:
            folder: Output root of the run; undo never deletes above it
            items: Renamed files, in execution order
            mode: Rename mode of the run

        Returns:
            The generated batch id
        """
        batch_id = uuid.uuid4().hex[:12]
        timestamp = datetime.now(timezone.utc).isoformat(timespec="seconds")

        conn = self._get_conn()
        with conn:
            conn.execute(
                "INSERT INTO transactions (batch_id, timestamp, folder, mode) "
                "VALUES (?, ?, ?, ?)",
                (batch_id, timestamp, folder, mode),
            )
            conn.executemany(
                "INSERT INTO rename_items (batch_id, old_path, new_path) "
                "VALUES (?, ?, ?)",
                [(batch_id, e.old_path, e.new_path) for e in items],
            )
        log.debug("Saved batch %s with %d items", batch_id, len(items))
        return batch_id

    def has_undoable(self) -> bool:
        """Return True if at least one non-reverted transaction exists."""
        row = self._get_conn().execute(
            "SELECT 1 FROM transactions WHERE reverted = 0 LIMIT 1"
        ).fetchone()
        return row is not None

    def _items(self, batch_id: str) -> list[RenameEntry]:
        rows = self._get_conn().execute(
            "SELECT old_path, new_path FROM rename_items "
            "WHERE batch_id = ? ORDER BY id",
            (batch_id,),
        ).fetchall()
        return [RenameEntry(old_path=r[0], new_path=r[1]) for r in rows]

    def _transactions(self, where: str, limit: int) -> list[RenameTransaction]:
        rows = self._get_conn().execute(
            "SELECT batch_id, timestamp, folder, mode, reverted, reverted_at "
            f"FROM transactions {where} "
            "ORDER BY timestamp DESC, rowid DESC LIMIT ?",
            (limit,),
        ).fetchall()
        return [
            RenameTransaction(
                batch_id=batch_id,
                timestamp=timestamp,
                folder=folder,
                mode=mode,
                items=self._items(batch_id),
                reverted=bool(reverted),
                reverted_at=reverted_at,
            )
            for batch_id, timestamp, folder, mode, reverted, reverted_at in rows
        ]

    def get_last_undoable(self) -> RenameTransaction | None:
        """Return the most recent non-reverted transaction, or None."""
        found = self._transactions("WHERE reverted = 0", 1)
        return found[0] if found else None

    def mark_reverted(self, batch_id: str) -> None:
        """Mark a transaction as reverted."""
        reverted_at = datetime.now(timezone.utc).isoformat(timespec="seconds")
        conn = self._get_conn()
        with conn:
            conn.execute(
                "UPDATE transactions SET reverted = 1, reverted_at = ? "
                "WHERE batch_id = ?",
                (reverted_at, batch_id),
            )

    def get_all_transactions(self, limit: int = 50) -> list[RenameTransaction]:
        """Return recent transactions, newest first."""
        return self._transactions("", limit)


# ---------------------------------------------------------------------------
# Undo
# ---------------------------------------------------------------------------

def _remove_empty_parents(path: str, stop: str, removed: list[str]) -> None:
    """Remove empty directories from dirname(path) upwards, never *stop* itself."""
    stop = os.path.normpath(stop)
    current = os.path.normpath(os.path.dirname(path))
    while current != stop and current.startswith(stop + os.sep):
        try:
            if os.listdir(current):
                return
            os.rmdir(current)
        except OSError as e:
            log.warning("Could not remove directory %s: %s", current, e)
            return
        removed.append(current)
        current = os.path.dirname(current)


def undo_transaction(
    history: RenameHistoryManager,
    tx: RenameTransaction,
) -> UndoSummary:
    """
    Move every file of a batch back to where it came from.

    Files that no longer exist at their new path are skipped.  Nothing is
    moved when any original path is occupied.

    Args:
        history: Store the batch came from; the batch is marked reverted
            unless a move failed
        tx: The batch to undo

    Returns:
        UndoSummary of restored, missing and failed files

    Raises:
        UndoConflictError: If an original path already exists
    """
    conflicts = [
        e.old_path for e in tx.items
        if os.path.exists(e.new_path) and os.path.lexists(e.old_path)
    ]
    if conflicts:
        raise UndoConflictError(conflicts)

    summary = UndoSummary()
    for entry in reversed(tx.items):
        if not os.path.lexists(entry.new_path):
            log.warning("Cannot undo, file is gone: %s", entry.new_path)
            summary.missing.append(entry)
            continue
        try:
            os.makedirs(os.path.dirname(entry.old_path), exist_ok=True)
            shutil.move(entry.new_path, entry.old_path)
        except OSError as e:
            log.error("Failed to restore %s: %s", entry.old_path, e)
            summary.failed.append((entry, str(e)))
            continue
        log.info("Restored %s", entry.old_path)
        summary.restored.append(entry)
        _remove_empty_parents(entry.new_path, tx.folder, summary.removed_dirs)

    if summary.ok:
        history.mark_reverted(tx.batch_id)
    return summary
