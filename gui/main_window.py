"""Main window for the jellyrename GUI."""
from pathlib import Path

from PySide6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QHBoxLayout, QGridLayout,
    QPushButton, QLineEdit, QCheckBox, QComboBox, QTableWidget,
    QTableWidgetItem, QHeaderView, QProgressBar, QTextEdit, QLabel,
    QFileDialog, QGroupBox, QMessageBox, QToolButton, QAbstractItemView,
)
from PySide6.QtCore import Qt, QThread, Slot
from PySide6.QtGui import QColor

from jellyrename.history import RenameHistoryManager, UndoConflictError, undo_transaction
from jellyrename.models import ClassifiedItem, MediaKind, RenamePlan, ScanResult
from jellyrename.renamer import RenameMode

from .settings import SettingsManager
from .theme import COLORS, STATUS_COLORS
from .worker import ScanWorker, RenameWorker

# Table columns
COL_ORIGINAL, COL_KIND, COL_EPISODE, COL_TARGET, COL_STATUS = range(5)

KIND_LABELS = {
    MediaKind.MOVIE: "Movie",
    MediaKind.TV_SHOW: "TV Show",
    MediaKind.UNKNOWN: "Unknown",
}


class MainWindow(QMainWindow):
    """Main application window."""

    def __init__(self):
        super().__init__()

        self.setWindowTitle("jellyrename - Media File Renamer")
        self.setMinimumSize(900, 600)
        self.resize(1100, 720)

        # Data
        self.plan: RenamePlan | None = None
        self._rows: dict[str, int] = {}
        self.scan_thread: QThread | None = None
        self.rename_thread: QThread | None = None

        self.settings = SettingsManager()
        self._history = RenameHistoryManager()

        self._setup_ui()
        self._update_button_states()

    def _setup_ui(self):
        central = QWidget()
        self.setCentralWidget(central)

        layout = QVBoxLayout(central)
        layout.setContentsMargins(16, 16, 16, 16)
        layout.setSpacing(12)

        layout.addWidget(self._create_controls_group())
        layout.addWidget(self._create_table(), stretch=1)
        layout.addWidget(self._create_bottom_section())
        layout.addWidget(self._create_log_panel())

    def _create_controls_group(self) -> QGroupBox:
        """Create the folder selection and options group."""
        group = QGroupBox("Library Folder")
        layout = QGridLayout(group)
        layout.setSpacing(8)

        self.folder_edit = QLineEdit()
        self.folder_edit.setPlaceholderText("Select a folder of downloaded movies or episodes...")
        self.folder_edit.setText(self.settings.get("last_folder", ""))
        self.folder_edit.textChanged.connect(self._update_button_states)

        browse_btn = QPushButton("Browse...")
        browse_btn.clicked.connect(self._browse_folder)

        layout.addWidget(self.folder_edit, 0, 0, 1, 4)
        layout.addWidget(browse_btn, 0, 4)

        # Options row
        layout.addWidget(QLabel("Mode:"), 1, 0)
        self.mode_combo = QComboBox()
        for mode in RenameMode:
            self.mode_combo.addItem(mode.value.capitalize(), mode.value)
        index = self.mode_combo.findData(self.settings.get("rename_mode", "move"))
        self.mode_combo.setCurrentIndex(max(index, 0))
        self.mode_combo.setToolTip("Undo is only available for moves")
        self.mode_combo.currentIndexChanged.connect(self._on_options_changed)
        layout.addWidget(self.mode_combo, 1, 1)

        self.dry_run_cb = QCheckBox("Dry run (preview only)")
        self.dry_run_cb.setChecked(bool(self.settings.get("dry_run", False)))
        self.dry_run_cb.toggled.connect(self._on_options_changed)
        layout.addWidget(self.dry_run_cb, 1, 2)

        # Action buttons
        buttons = QHBoxLayout()
        self.scan_btn = QPushButton("Scan")
        self.scan_btn.setObjectName("primaryButton")
        self.scan_btn.clicked.connect(self._start_scan)

        self.clear_btn = QPushButton("Clear")
        self.clear_btn.clicked.connect(self._clear_results)

        self.stop_btn = QPushButton("Stop")
        self.stop_btn.clicked.connect(self._stop_scan)
        self.stop_btn.setVisible(False)

        buttons.addWidget(self.stop_btn)
        buttons.addWidget(self.clear_btn)
        buttons.addWidget(self.scan_btn)
        layout.addLayout(buttons, 1, 3, 1, 2)

        return group

    def _create_table(self) -> QTableWidget:
        """Create the rename preview table."""
        self.table = QTableWidget()
        self.table.setColumnCount(5)
        self.table.setHorizontalHeaderLabels(["Original", "Kind", "Episode", "New Path", "Status"])
        self.table.setAlternatingRowColors(True)
        self.table.setSelectionBehavior(QAbstractItemView.SelectRows)
        self.table.setEditTriggers(QAbstractItemView.NoEditTriggers)
        self.table.verticalHeader().setVisible(False)

        header = self.table.horizontalHeader()
        header.setSectionResizeMode(COL_ORIGINAL, QHeaderView.Stretch)
        header.setSectionResizeMode(COL_KIND, QHeaderView.ResizeToContents)
        header.setSectionResizeMode(COL_EPISODE, QHeaderView.ResizeToContents)
        header.setSectionResizeMode(COL_TARGET, QHeaderView.Stretch)
        header.setSectionResizeMode(COL_STATUS, QHeaderView.ResizeToContents)
        return self.table

    def _create_bottom_section(self) -> QWidget:
        """Create the bottom section with rename button and progress."""
        widget = QWidget()
        layout = QHBoxLayout(widget)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(12)

        self.status_label = QLabel("Ready")
        self.status_label.setObjectName("mutedLabel")

        self.progress_bar = QProgressBar()
        self.progress_bar.setVisible(False)
        self.progress_bar.setTextVisible(False)
        self.progress_bar.setFixedHeight(6)

        self.undo_btn = QPushButton("Undo Last Rename")
        self.undo_btn.setToolTip("Move the files of the most recent batch back")
        self.undo_btn.clicked.connect(self._undo_last_rename)

        self.rename_btn = QPushButton("Rename")
        self.rename_btn.setObjectName("primaryButton")
        self.rename_btn.clicked.connect(self._start_rename)

        layout.addWidget(self.status_label)
        layout.addWidget(self.progress_bar, stretch=1)
        layout.addWidget(self.undo_btn)
        layout.addWidget(self.rename_btn)
        return widget

    def _create_log_panel(self) -> QWidget:
        """Create the collapsible log panel."""
        widget = QWidget()
        layout = QVBoxLayout(widget)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(4)

        visible = bool(self.settings.get("log_visible", False))
        self.log_toggle_btn = QToolButton()
        self.log_toggle_btn.setText("Log")
        self.log_toggle_btn.setCheckable(True)
        self.log_toggle_btn.setChecked(visible)
        self.log_toggle_btn.setArrowType(Qt.DownArrow if visible else Qt.RightArrow)
        self.log_toggle_btn.clicked.connect(self._toggle_log)

        self.log_text = QTextEdit()
        self.log_text.setReadOnly(True)
        self.log_text.setMaximumHeight(150)
        self.log_text.setVisible(visible)

        layout.addWidget(self.log_toggle_btn)
        layout.addWidget(self.log_text)
        return widget

    def _toggle_log(self):
        visible = self.log_toggle_btn.isChecked()
        self.log_text.setVisible(visible)
        self.log_toggle_btn.setArrowType(Qt.DownArrow if visible else Qt.RightArrow)
        self.settings.set("log_visible", visible)
        self.settings.save()

    def _on_options_changed(self):
        self.settings.set("rename_mode", self.mode_combo.currentData())
        self.settings.set("dry_run", self.dry_run_cb.isChecked())
        self.settings.save()

    def _browse_folder(self):
        """Open folder selection dialog."""
        start_dir = self.settings.get("last_folder", "")
        if not start_dir or not Path(start_dir).exists():
            start_dir = str(Path.home())

        folder = QFileDialog.getExistingDirectory(self, "Select Media Folder", start_dir)
        if folder:
            self.folder_edit.setText(folder)
            self.settings.set("last_folder", folder)
            self.settings.save()

    def _update_button_states(self):
        """Update button enabled states."""
        idle = self.scan_thread is None and self.rename_thread is None
        has_ops = self.plan is not None and bool(self.plan.operations)

        self.scan_btn.setEnabled(bool(self.folder_edit.text()) and idle)
        self.clear_btn.setEnabled(self.plan is not None and idle)
        self.rename_btn.setEnabled(has_ops and idle)
        self.undo_btn.setEnabled(idle and self._history.has_undoable())
        self.mode_combo.setEnabled(idle)
        self.dry_run_cb.setEnabled(idle)

    def _log(self, message: str):
        self.log_text.append(message)

    def _clear_results(self):
        """Clear the preview table and reset UI state."""
        self.table.setRowCount(0)
        self._rows.clear()
        self.plan = None
        self.log_text.clear()
        self.progress_bar.setVisible(False)
        self.status_label.setText("Ready")
        self._update_button_states()

    # ------------------------------------------------------------------
    # Table
    # ------------------------------------------------------------------

    def _status_color(self, status: str) -> QColor:
        return QColor(STATUS_COLORS.get(status, COLORS["text"]))

    def _set_status(self, row: int, status: str, error: str = ""):
        cell = QTableWidgetItem(status.capitalize())
        cell.setToolTip(error)
        cell.setForeground(self._status_color(status))
        self.table.setItem(row, COL_STATUS, cell)

    def _add_row(self, source: str, kind: str, episode: str, target: str, status: str) -> int:
        row = self.table.rowCount()
        self.table.insertRow(row)

        original = QTableWidgetItem(Path(source).name)
        original.setToolTip(source)
        self.table.setItem(row, COL_ORIGINAL, original)
        self.table.setItem(row, COL_KIND, QTableWidgetItem(kind))
        self.table.setItem(row, COL_EPISODE, QTableWidgetItem(episode))

        new_path = QTableWidgetItem(target)
        new_path.setToolTip(target)
        self.table.setItem(row, COL_TARGET, new_path)

        self._set_status(row, status)
        return row

    def _populate_table(self, result: ScanResult, plan: RenamePlan):
        items: dict[str, ClassifiedItem] = {i.path: i for i in result.items}
        owners = {sub: item for item in result.items for sub in item.subtitle_paths}
        root = Path(plan.output_root)

        for op in plan.operations:
            item = items.get(op.source) or owners.get(op.source)
            kind = "Subtitle" if op.file_type == "subtitle" else KIND_LABELS[item.kind]
            episode = item.episode.episode_code if item and item.episode else ""
            try:
                target = str(Path(op.target).relative_to(root))
            except ValueError:
                target = op.target
            self._rows[op.source] = self._add_row(op.source, kind, episode, target, "pending")

        for item in plan.needs_review:
            self._add_row(item.path, KIND_LABELS[item.kind], "", "", "review")
        for sub in plan.unassociated_subtitles:
            row = self._add_row(sub, "Subtitle", "", "", "skipped")
            self._set_status(row, "skipped", "No matching video")

    # ------------------------------------------------------------------
    # Scan
    # ------------------------------------------------------------------

    def _start_scan(self):
        """Start the scan operation."""
        folder = self.folder_edit.text()
        if not folder:
            return

        self._clear_results()
        self.settings.set("last_folder", folder)
        self.settings.save()

        self.scan_worker = ScanWorker(folder, self.settings.engine_config())
        self.scan_thread = QThread()
        self.scan_worker.moveToThread(self.scan_thread)

        self.scan_thread.started.connect(self.scan_worker.run)
        self.scan_worker.started.connect(self._on_scan_started)
        self.scan_worker.progress.connect(self._on_scan_progress)
        self.scan_worker.log.connect(self._log)
        self.scan_worker.finished.connect(self._on_scan_finished)
        self.scan_worker.cancelled.connect(self._on_scan_cancelled)
        self.scan_worker.error.connect(self._on_scan_error)

        self.scan_thread.start()

    def _stop_scan(self):
        """Stop the current scan operation."""
        if self.scan_thread is not None:
            self.scan_worker.cancel()
        self._log("Stopping scan...")
        self.status_label.setText("Stopping...")

    def _finish_scan_thread(self):
        self.progress_bar.setVisible(False)
        self.stop_btn.setVisible(False)
        if self.scan_thread:
            self.scan_thread.quit()
            self.scan_thread.wait()
            self.scan_thread = None
        self._update_button_states()

    @Slot()
    def _on_scan_started(self):
        self.status_label.setText("Scanning...")
        self.progress_bar.setVisible(True)
        self.progress_bar.setRange(0, 0)
        self.stop_btn.setVisible(True)
        self._update_button_states()

    @Slot(int, int)
    def _on_scan_progress(self, current: int, total: int):
        self.progress_bar.setRange(0, total)
        self.progress_bar.setValue(current)
        self.status_label.setText(f"Scanning: {current}/{total}")

    @Slot(object, object)
    def _on_scan_finished(self, result: ScanResult, plan: RenamePlan):
        """Fill the table with the planned renames."""
        self.plan = plan
        self._populate_table(result, plan)

        self.status_label.setText(
            f"{len(result.movies)} movie(s), {len(result.tv_shows)} episode(s), "
            f"{len(plan.needs_review)} to review"
        )
        self._log(f"Output folder: {plan.output_root}")
        self._finish_scan_thread()

    @Slot()
    def _on_scan_cancelled(self):
        self.status_label.setText("Scan cancelled")
        self._finish_scan_thread()

    @Slot(str)
    def _on_scan_error(self, error: str):
        self.status_label.setText("Error")
        self._log(f"[ERROR] {error}")
        QMessageBox.critical(self, "Scan Error", error)
        self._finish_scan_thread()

    # ------------------------------------------------------------------
    # Rename
    # ------------------------------------------------------------------

    def _start_rename(self):
        """Start the rename operation."""
        if self.plan is None or not self.plan.operations:
            return

        mode = RenameMode(self.mode_combo.currentData())
        dry_run = self.dry_run_cb.isChecked()
        if not dry_run:
            result = QMessageBox.question(
                self,
                "Confirm Rename",
                f"{mode.value.capitalize()} {len(self.plan.operations)} file(s) into\n"
                f"{self.plan.output_root}?",
                QMessageBox.Yes | QMessageBox.No,
                QMessageBox.No,
            )
            if result != QMessageBox.Yes:
                return

        self.rename_worker = RenameWorker(
            self.plan, mode, dry_run, history_db=self._history.db_path
        )
        self.rename_thread = QThread()
        self.rename_worker.moveToThread(self.rename_thread)

        self.rename_thread.started.connect(self.rename_worker.run)
        self.rename_worker.started.connect(self._on_rename_started)
        self.rename_worker.progress.connect(self._on_rename_progress)
        self.rename_worker.item_updated.connect(self._on_item_updated)
        self.rename_worker.log.connect(self._log)
        self.rename_worker.finished.connect(self._on_rename_finished)
        self.rename_worker.error.connect(self._on_rename_error)

        self.rename_thread.start()

    def _finish_rename_thread(self):
        self.progress_bar.setVisible(False)
        if self.rename_thread:
            self.rename_thread.quit()
            self.rename_thread.wait()
            self.rename_thread = None
        self._update_button_states()

    @Slot()
    def _on_rename_started(self):
        self.status_label.setText("Renaming...")
        self.progress_bar.setVisible(True)
        self._update_button_states()

    @Slot(int, int)
    def _on_rename_progress(self, current: int, total: int):
        self.progress_bar.setRange(0, total)
        self.progress_bar.setValue(current)
        self.status_label.setText(f"Renaming: {current}/{total}")

    @Slot(str, str, str, str)
    def _on_item_updated(self, source: str, target: str, status: str, error: str):
        row = self._rows.get(source)
        if row is None:
            return
        self.table.item(row, COL_TARGET).setToolTip(target)
        self._set_status(row, status, error)

    @Slot(int, int, int)
    def _on_rename_finished(self, renamed: int, skipped: int, errors: int):
        verb = "planned" if self.rename_worker.dry_run else "renamed"
        summary = f"{renamed} {verb}, {skipped} skipped, {errors} errors"
        self.status_label.setText(f"Done: {summary}")
        self._log(f"Rename complete: {summary}")

        # A real run consumed the plan; scan again before renaming more
        if not self.rename_worker.dry_run:
            self.plan.operations.clear()
        self._finish_rename_thread()

    @Slot(str)
    def _on_rename_error(self, error: str):
        self.status_label.setText("Error")
        self._log(f"[ERROR] {error}")
        QMessageBox.critical(self, "Rename Error", error)
        self._finish_rename_thread()

    # ------------------------------------------------------------------
    # Undo
    # ------------------------------------------------------------------

    def _undo_last_rename(self):
        """Revert the most recent rename batch that has not been undone."""
        tx = self._history.get_last_undoable()
        if tx is None:
            QMessageBox.information(self, "Nothing to Undo", "No rename batch to undo.")
            self._update_button_states()
            return

        result = QMessageBox.question(
            self,
            "Undo Last Rename",
            f"Move {len(tx.items)} file(s) renamed on {tx.timestamp} back to "
            f"their original names?",
            QMessageBox.Yes | QMessageBox.No,
            QMessageBox.No,
        )
        if result != QMessageBox.Yes:
            return

        try:
            summary = undo_transaction(self._history, tx)
        except UndoConflictError as e:
            QMessageBox.warning(
                self,
                "Undo Blocked",
                "Nothing was moved because these original paths are taken:\n\n"
                + "\n".join(e.conflicts[:10]),
            )
            return

        for entry in summary.missing:
            self._log(f"[WARN] File is gone, not restored: {entry.new_path}")
        for entry, error in summary.failed:
            self._log(f"[ERROR] {entry.new_path}: {error}")

        message = (
            f"Restored {len(summary.restored)} file(s), "
            f"{len(summary.missing)} missing, {len(summary.failed)} failed"
        )
        self._log(f"Undo: {message}")
        self.status_label.setText(message)
        if not summary.ok:
            QMessageBox.warning(
                self, "Undo Incomplete",
                f"{message}.\nThe batch stays in the history so it can be retried.",
            )
        self._update_button_states()

    def closeEvent(self, event):
        """Handle window close."""
        if self.scan_thread:
            self.scan_worker.cancel()
            self.scan_thread.quit()
            self.scan_thread.wait()

        if self.rename_thread:
            self.rename_worker.cancel()
            self.rename_thread.quit()
            self.rename_thread.wait()

        self._history.close()
        event.accept()
