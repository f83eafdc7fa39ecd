"""Background workers for jellyrename GUI operations."""
import sqlite3
from pathlib import Path

from PySide6.QtCore import QObject, Signal

from jellyrename.config import DEFAULT_CONFIG, EngineConfig
from jellyrename.history import RenameHistoryManager
from jellyrename.models import RenamePlan
from jellyrename.renamer import RenameMode, execute_plan, plan_renames
from jellyrename.scanner import ScanCancelled, ScanError, scan_directory


class ScanWorker(QObject):
    """Worker that scans a folder and builds the rename plan.

    Lives on a QThread; the window connects ``run`` to the thread's
    ``started`` signal and stops it through :meth:`cancel`.
    """

    # Signals
    started = Signal()
    progress = Signal(int, int)  # current, total
    log = Signal(str)
    finished = Signal(object, object)  # ScanResult, RenamePlan
    cancelled = Signal()
    error = Signal(str)

    def __init__(self, folder_path: str, config: EngineConfig = DEFAULT_CONFIG):
        super().__init__()
        self.folder_path = Path(folder_path)
        self.config = config
        self._cancelled = False

    def cancel(self):
        """Cancel the operation; checked before each file."""
        self._cancelled = True

    def _on_progress(self, index: int, total: int, path: str) -> None:
        self.progress.emit(index, total)

    def run(self):
        """Execute the scan operation."""
        try:
            self.started.emit()
            self.log.emit(f"Scanning: {self.folder_path}")

            result = scan_directory(
                self.folder_path,
                self.config,
                is_cancelled=lambda: self._cancelled,
                on_progress=self._on_progress,
            )
            self.log.emit(
                f"Found {len(result.items)} video(s): {len(result.movies)} movie(s), "
                f"{len(result.tv_shows)} episode(s), {len(result.unknown)} unknown"
            )
            plan = plan_renames(result, self.folder_path, self.config)
            for item in plan.needs_review:
                self.log.emit(f"[REVIEW] {Path(item.path).name}")
            for sub in plan.unassociated_subtitles:
                self.log.emit(f"[SUBTITLE] No video for {Path(sub).name}")
            self.finished.emit(result, plan)

        except ScanCancelled:
            self.log.emit("Scan cancelled.")
            self.cancelled.emit()
        except (ScanError, OSError) as e:
            self.error.emit(str(e))


class RenameWorker(QObject):
    """Worker for executing a rename plan."""

    # Signals
    started = Signal()
    progress = Signal(int, int)  # current, total
    item_updated = Signal(str, str, str, str)  # source, target, status, error
    log = Signal(str)
    finished = Signal(int, int, int)  # renamed, skipped, errors
    error = Signal(str)

    def __init__(
        self,
        plan: RenamePlan,
        mode: RenameMode = RenameMode.MOVE,
        dry_run: bool = False,
        history_db: Path | None = None,
    ):
        super().__init__()
        self.plan = plan
        self.mode = mode
        self.dry_run = dry_run
        self.history_db = history_db
        self._cancelled = False

    def cancel(self):
        """Cancel the operation."""
        self._cancelled = True

    def _on_progress(self, index: int, total: int, path: str) -> None:
        self.progress.emit(index, total)

    def run(self):
        """Execute the rename operation."""
        history = None
        try:
            self.started.emit()
            if self.mode is RenameMode.MOVE and not self.dry_run:
                history = RenameHistoryManager(self.history_db)

            results = execute_plan(
                self.plan,
                self.mode,
                history=history,
                dry_run=self.dry_run,
                on_progress=self._on_progress,
                is_cancelled=lambda: self._cancelled,
            )
            if self._cancelled:
                self.log.emit("Rename cancelled.")

            renamed = skipped = errors = 0
            for r in results:
                self.item_updated.emit(r.source, r.target, r.status, r.error or "")
                if r.status in ("renamed", "planned"):
                    renamed += 1
                    self.log.emit(f"{r.status.capitalize()}: {Path(r.source).name} -> {r.target}")
                elif r.status == "skipped":
                    skipped += 1
                else:
                    errors += 1
                    self.log.emit(f"[ERROR] {Path(r.source).name}: {r.error}")

            self.finished.emit(renamed, skipped, errors)

        except (OSError, sqlite3.Error) as e:
            self.error.emit(str(e))
        finally:
            if history is not None:
                history.close()
