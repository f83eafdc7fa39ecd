#!/usr/bin/env python3
"""
jellyrename - Media File Renamer

Plans and performs renames of a scanned library into the folder layout
Jellyfin expects, and provides the command-line interface.
"""
import argparse
import logging
import os
import shutil
import sys
from collections.abc import Callable
from enum import Enum
from pathlib import Path

from .cleaner import clean_title_dots, extract_title, is_title_reasonable
from .config import DEFAULT_CONFIG, ConfigError, EngineConfig, load_config
from .formatter import (
    build_tree,
    episode_target,
    jellyfin_name,
    movie_target,
    subtitle_target,
)
from .grouper import ShowGroup, group_shows
from .history import (
    RenameEntry,
    RenameHistoryManager,
    UndoConflictError,
    undo_transaction,
)
from .interactive import confirm_group, confirm_proceed, prompt_movie, prompt_show
from .models import ClassifiedItem, RenameOperation, RenamePlan, RenameResult, ScanResult
from .scanner import ScanCancelled, ScanError, scan_directory
from .subtitles import subtitle_language

log = logging.getLogger(__name__)


class RenameMode(Enum):
    MOVE = "move"
    COPY = "copy"
    HARDLINK = "hardlink"
    SYMLINK = "symlink"


# ---------------------------------------------------------------------------
# Planning
# ---------------------------------------------------------------------------

def _add_subtitles(
    plan: RenamePlan,
    item: ClassifiedItem,
    video_target: str,
    config: EngineConfig,
) -> None:
    for sub in item.subtitle_paths:
        ext = os.path.splitext(sub)[1]
        plan.operations.append(RenameOperation(
            source=sub,
            target=subtitle_target(video_target, ext, subtitle_language(sub, config)),
            file_type="subtitle",
        ))


def _movie_title(item: ClassifiedItem, config: EngineConfig) -> tuple[str | None, int | None]:
    """Title from the filename, else from the folder holding the movie."""
    if is_title_reasonable(item.title, config):
        return clean_title_dots(item.title), item.year
    folder = extract_title(os.path.basename(os.path.dirname(item.path)), config)
    if is_title_reasonable(folder.title, config):
        return clean_title_dots(folder.title), item.year or folder.year
    return None, None


ShowChooser = Callable[[list[ShowGroup]], tuple[str, int | None] | None]
MovieChooser = Callable[[ClassifiedItem, str | None, int | None], tuple[str, int | None] | None]


def plan_renames(
    result: ScanResult,
    scan_root: str | Path,
    config: EngineConfig = DEFAULT_CONFIG,
    *,
    choose_show: ShowChooser | None = None,
    choose_movie: MovieChooser | None = None,
    confirm_group: Callable[[list[ShowGroup]], bool] | None = None,
) -> RenamePlan:
    """
    Work out where every scanned file should go.

    Movies go to ``<base>/Title (Year)/Title (Year).ext``, episodes to
    ``<base>/Show/Season NN/Show SxxEyy.ext`` and subtitles follow their
    video.  ``<base>`` is the scan root, or its parent when the scan holds
    a single show or a single movie, so the show folder is renamed in place.

    Args:
        result: Scan result to plan for
        scan_root: Directory that was scanned
        config: Engine tables
        choose_show: Called with the folders of one show; returns the
            (title, year) to use, or None to leave its episodes for review
        choose_movie: Called with a movie and its guessed title and year;
            same contract as choose_show
        confirm_group: Called when one show name was found in several
            folders; False names each folder separately

    Returns:
        RenamePlan; items that cannot be named are listed in needs_review
    """
    scan_root = str(Path(scan_root).expanduser().resolve())
    movies = result.movies
    shows = group_shows(result.items, scan_root, config)

    single = (not movies and len(shows) == 1) or (not shows and len(movies) == 1)
    output_root = os.path.dirname(scan_root) if single else scan_root

    plan = RenamePlan(
        scan_root=scan_root,
        output_root=output_root,
        unassociated_subtitles=list(result.unassociated_subtitles),
    )

    for item in movies:
        title, year = _movie_title(item, config)
        if choose_movie is not None:
            chosen = choose_movie(item, title, year)
            title, year = chosen if chosen else (None, None)
        if not title:
            plan.needs_review.append(item)
            continue
        ext = os.path.splitext(item.path)[1]
        target = movie_target(output_root, title, year, ext)
        plan.operations.append(RenameOperation(source=item.path, target=target))
        _add_subtitles(plan, item, target, config)

    for groups in shows.values():
        batches = [groups]
        if len(groups) > 1 and confirm_group is not None and not confirm_group(groups):
            batches = [[group] for group in groups]

        for batch in batches:
            name, year = batch[0].name, batch[0].year
            if choose_show is not None:
                chosen = choose_show(batch)
                if chosen is None:
                    log.info("Skipped show '%s'", name)
                    plan.needs_review.extend(item for group in batch for item in group.items)
                    continue
                name, year = chosen
            show_name = jellyfin_name(clean_title_dots(name), year)
            for group in batch:
                for item in group.items:
                    if item.episode is None:
                        plan.needs_review.append(item)
                        continue
                    ext = os.path.splitext(item.path)[1]
                    target = episode_target(output_root, show_name, item.episode, ext)
                    plan.operations.append(RenameOperation(source=item.path, target=target))
                    _add_subtitles(plan, item, target, config)

    plan.needs_review.extend(result.unknown)
    log.info(
        "Planned %d operations into %s, %d files need review",
        len(plan.operations), output_root, len(plan.needs_review),
    )
    return plan


# ---------------------------------------------------------------------------
# Execution
# ---------------------------------------------------------------------------

def unique_target(target: str) -> str:
    """Append " (1)", " (2)"... until the path is free."""
    if not os.path.lexists(target):
        return target
    base, ext = os.path.splitext(target)
    counter = 1
    while os.path.lexists(f"{base} ({counter}){ext}"):
        counter += 1
    log.warning("Target file already exists: %s, appending (%d)", target, counter)
    return f"{base} ({counter}){ext}"


def transfer_file(source: str, target: str, mode: RenameMode) -> None:
    """Move, copy or link *source* to *target*, creating parent folders."""
    os.makedirs(os.path.dirname(target), exist_ok=True)
    if mode is RenameMode.MOVE:
        shutil.move(source, target)
    elif mode is RenameMode.COPY:
        shutil.copy2(source, target)
    elif mode is RenameMode.HARDLINK:
        os.link(source, target)
    else:
        os.symlink(os.path.abspath(source), target)


def remove_empty_dirs(directories: set[str], scan_root: str) -> list[str]:
    """
    Delete emptied source folders, deepest first, up to and including *scan_root*.

    The current working directory is never removed.

    Returns:
        The directories that were removed
    """
    cwd = os.path.realpath(os.getcwd())
    root = os.path.normpath(scan_root)
    removed = []
    pending = set()
    for directory in directories:
        current = os.path.normpath(directory)
        while current == root or current.startswith(root + os.sep):
            pending.add(current)
            current = os.path.dirname(current)

    for directory in sorted(pending, key=len, reverse=True):
        if not os.path.isdir(directory) or os.listdir(directory):
            continue
        if os.path.realpath(directory) == cwd:
            log.info("Not deleting %s, it is the current working directory", directory)
            continue
        try:
            os.rmdir(directory)
        except OSError as e:
            log.warning("Failed to delete empty directory %s: %s", directory, e)
            continue
        log.info("Deleted empty directory: %s", directory)
        removed.append(directory)
    return removed


def execute_plan(
    plan: RenamePlan,
    mode: RenameMode = RenameMode.MOVE,
    *,
    history: RenameHistoryManager | None = None,
    dry_run: bool = False,
    on_progress: Callable[[int, int, str], None] | None = None,
    is_cancelled: Callable[[], bool] | None = None,
) -> list[RenameResult]:
    """
    Carry out a rename plan.

    Failures are reported per file and do not stop the run.  Successful
    moves are saved to *history* as one batch so they can be undone.

    Args:
        plan: Plan from plan_renames
        mode: Move, copy, hard link or symbolic link
        history: Where to record moves (optional)
        dry_run: Only compute final targets, touch nothing
        on_progress: Called as (index, total, source) per operation
        is_cancelled: Checked before each operation; True stops the run

    Returns:
        One RenameResult per operation that was reached
    """
    results: list[RenameResult] = []
    moved: list[RenameEntry] = []
    total = len(plan.operations)
    reserved: set[str] = set()

    for index, op in enumerate(plan.operations, 1):
        if is_cancelled is not None and is_cancelled():
            log.info("Rename cancelled after %d of %d operations", index - 1, total)
            break
        if on_progress is not None:
            on_progress(index, total, op.source)

        if os.path.normpath(op.source) == os.path.normpath(op.target):
            results.append(RenameResult(
                op.source, op.target, "skipped", "Already named correctly", op.file_type
            ))
            continue

        target = op.target
        if dry_run:
            # Collisions between planned targets still need distinct names
            base, ext = os.path.splitext(target)
            counter = 1
            while target in reserved or os.path.lexists(target):
                target = f"{base} ({counter}){ext}"
                counter += 1
            reserved.add(target)
            results.append(RenameResult(op.source, target, "planned", None, op.file_type))
            continue

        target = unique_target(target)
        try:
            transfer_file(op.source, target, mode)
        except OSError as e:
            log.error("Failed to %s %s to %s: %s", mode.value, op.source, target, e)
            results.append(RenameResult(op.source, target, "error", str(e), op.file_type))
            continue

        log.info("%s: %s -> %s", mode.value, op.source, target)
        results.append(RenameResult(op.source, target, "renamed", None, op.file_type))
        if mode is RenameMode.MOVE:
            moved.append(RenameEntry(old_path=op.source, new_path=target))

    if moved:
        if history is not None:
            history.save_transaction(plan.output_root, moved, mode.value)
        remove_empty_dirs({os.path.dirname(e.old_path) for e in moved}, plan.scan_root)

    return results


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------

def describe_item(item: ClassifiedItem) -> str:
    """One-line description of a classified file."""
    parts = [f"[{item.kind.value}]"]
    if item.episode is not None:
        parts.append(item.episode.episode_code)
    if item.title:
        parts.append(item.title)
    if item.year:
        parts.append(f"({item.year})")
    return " ".join(parts)


def print_scan(result: ScanResult) -> None:
    for item in result.items:
        print(f"{os.path.basename(item.path)}")
        print(f"  {describe_item(item)}")
        for sub in item.subtitle_paths:
            print(f"  + {os.path.basename(sub)}")
    print("-" * 50)
    print(
        f"Movies: {len(result.movies)} | Episodes: {len(result.tv_shows)} | "
        f"Unknown: {len(result.unknown)} | Subtitles: {result.subtitle_count}"
    )
    print_review(result.needs_review, result.unassociated_subtitles)


def print_review(needs_review, unassociated) -> None:
    if needs_review:
        print("\nNeeds manual review:")
        for item in needs_review:
            print(f"  {item.path}  {describe_item(item)}")
    if unassociated:
        print("\nSubtitles without a video:")
        for sub in unassociated:
            print(f"  {sub}")


def cmd_scan(args, config: EngineConfig) -> int:
    result = scan_directory(args.path, config)
    if not result.items:
        print("No media files found.")
        return 0
    print_scan(result)
    return 0


def cmd_rename(args, config: EngineConfig) -> int:
    mode = RenameMode(args.mode)
    result = scan_directory(args.path, config)
    if not result.items:
        print("No media files found.")
        return 0

    if args.interactive:
        plan = plan_renames(
            result, args.path, config,
            choose_show=prompt_show,
            choose_movie=prompt_movie,
            confirm_group=confirm_group,
        )
    else:
        plan = plan_renames(result, args.path, config)
    print_review(plan.needs_review, plan.unassociated_subtitles)

    if not plan.operations:
        print("No files to rename.")
        return 0

    print("\nPreview of final structure:")
    print(build_tree([op.target for op in plan.operations], plan.output_root))

    if args.dry_run:
        print("-" * 50)
        print(f"[DRY RUN] Would {mode.value}: {len(plan.operations)} files")
        return 0

    if not args.yes and not confirm_proceed(f"Proceed with {mode.value} of {len(plan.operations)} files?"):
        print("Cancelled.")
        return 0

    history = RenameHistoryManager(args.history_db) if mode is RenameMode.MOVE else None
    try:
        results = execute_plan(plan, mode, history=history)
    finally:
        if history is not None:
            history.close()

    renamed = sum(1 for r in results if r.status == "renamed")
    skipped = sum(1 for r in results if r.status == "skipped")
    errors = [r for r in results if r.status == "error"]
    for r in errors:
        print(f"[ERROR] {r.source}\n        {r.error}")
    print("-" * 50)
    print(f"Renamed: {renamed} | Skipped: {skipped} | Errors: {len(errors)}")
    return 0 if not errors else 1


def cmd_undo(args, config: EngineConfig) -> int:
    with RenameHistoryManager(args.history_db) as history:
        tx = history.get_last_undoable()
        if tx is None:
            print("Nothing to undo.")
            return 0

        print(f"Last batch {tx.batch_id} ({tx.timestamp}), {len(tx.items)} files in {tx.folder}")
        for entry in tx.items:
            print(f"  {entry.new_path}")
            print(f"  -> {entry.old_path}")
        if args.preview:
            return 0
        if not args.yes and not confirm_proceed("Undo this batch?"):
            print("Cancelled.")
            return 0

        try:
            summary = undo_transaction(history, tx)
        except UndoConflictError as e:
            print(f"Error: {e}")
            return 1

    print("-" * 50)
    print(
        f"Restored: {len(summary.restored)} | Missing: {len(summary.missing)} | "
        f"Errors: {len(summary.failed)}"
    )
    return 0 if summary.ok else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="jellyrename",
        description="Rename movies and TV episodes into the Jellyfin folder layout."
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Show detailed debug information"
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="JSON file with extra filter words and extensions"
    )
    sub = parser.add_subparsers(dest="command", required=True)

    scan = sub.add_parser("scan", help="Classify media files without renaming")
    scan.add_argument("path", type=Path, help="Directory to scan")
    scan.set_defaults(handler=cmd_scan)

    rename = sub.add_parser("rename", help="Rename media files")
    rename.add_argument("path", type=Path, help="Directory to process")
    rename.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be renamed without actually renaming"
    )
    rename.add_argument(
        "--mode",
        choices=[m.value for m in RenameMode],
        default=RenameMode.MOVE.value,
        help="How files reach their new place (default: move)"
    )
    rename.add_argument(
        "--interactive", "-i",
        action="store_true",
        help="Confirm or correct each show and movie name before renaming"
    )
    rename.add_argument("--yes", "-y", action="store_true", help="Do not ask for confirmation")
    rename.add_argument("--history-db", type=Path, default=None, help="Rename history database")
    rename.set_defaults(handler=cmd_rename)

    undo = sub.add_parser("undo", help="Undo the last rename batch")
    undo.add_argument("--preview", action="store_true", help="Only show what would be restored")
    undo.add_argument("--yes", "-y", action="store_true", help="Do not ask for confirmation")
    undo.add_argument("--history-db", type=Path, default=None, help="Rename history database")
    undo.set_defaults(handler=cmd_undo)

    return parser


def main(args: list[str] | None = None) -> int:
    """Main entry point."""
    parsed_args = build_parser().parse_args(args)

    logging.basicConfig(
        level=logging.DEBUG if parsed_args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = load_config(parsed_args.config)
        return parsed_args.handler(parsed_args, config)
    except (ConfigError, ScanError) as e:
        print(f"Error: {e}")
        return 1
    except ScanCancelled:
        print("Cancelled.")
        return 1


if __name__ == "__main__":
    sys.exit(main())
