"""Directory scanning: find videos and subtitles, classify every video."""
import logging
import os
from collections import defaultdict
from collections.abc import Callable
from dataclasses import replace
from pathlib import Path

from .cleaner import extract_title, strip_extension
from .config import DEFAULT_CONFIG, EngineConfig
from .detection import classify
from .formatter import natural_sort_key
from .models import ClassifiedItem, MediaKind, ScanResult
from .parser import extract_episode
from .subtitles import assign_subtitles

log = logging.getLogger(__name__)


class ScanError(Exception):
    """Raised when the scan root is missing or not a directory."""


class ScanCancelled(Exception):
    """Raised when the caller's cancellation check fires during a scan."""


def classify_file(
    path: str,
    base: str,
    config: EngineConfig = DEFAULT_CONFIG,
) -> ClassifiedItem:
    """
    Build the ClassifiedItem for one video file.

    Args:
        path: Absolute path of the video
        base: Directory the extraction path is made relative to, so
            that the folder holding the file is visible to the matchers
        config: Engine tables

    Returns:
        ClassifiedItem without subtitles
    """
    name = os.path.basename(path)
    parent = os.path.basename(os.path.dirname(path))
    stem = strip_extension(name, config.media_extensions)

    kind = classify(name, parent, config)
    episode = None
    if kind is MediaKind.TV_SHOW:
        episode = extract_episode(os.path.relpath(path, base), config)
        if episode is None:
            log.info("No episode number found in %s", path)

    extraction = extract_title(stem, config)
    return ClassifiedItem(
        path=path,
        kind=kind,
        title=extraction.title,
        year=extraction.year,
        episode=episode,
    )


def scan_directory(
    root: str | Path,
    config: EngineConfig = DEFAULT_CONFIG,
    *,
    is_cancelled: Callable[[], bool] | None = None,
    on_progress: Callable[[int, int, str], None] | None = None,
) -> ScanResult:
    """
    Walk *root* once and classify every video file below it.

    Args:
        root: Directory to scan
        config: Engine tables (extensions, word lists)
        is_cancelled: Checked before each file; returning True aborts
        on_progress: Called as (index, total, path) for each video

    Returns:
        ScanResult with one item per video, in natural path order

    Raises:
        ScanError: If the root does not exist or is not a directory
        ScanCancelled: If is_cancelled returned True
    """
    root = Path(root).expanduser()
    if not root.exists():
        raise ScanError(f"Directory does not exist: {root}")
    if not root.is_dir():
        raise ScanError(f"Not a directory: {root}")
    root = root.resolve()
    base = str(root.parent)

    log.info("Scanning %s", root)

    videos: dict[str, list[str]] = defaultdict(list)
    subtitles: dict[str, list[str]] = defaultdict(list)

    def on_walk_error(error: OSError) -> None:
        log.warning("Cannot read directory %s: %s", error.filename, error.strerror)

    for dirpath, dirnames, filenames in os.walk(root, onerror=on_walk_error):
        dirnames.sort(key=natural_sort_key)
        for name in sorted(filenames, key=natural_sort_key):
            if config.is_video(name):
                bucket = videos
            elif config.is_subtitle(name):
                bucket = subtitles
            else:
                continue
            full_path = os.path.join(dirpath, name)
            try:
                os.stat(full_path)
            except OSError as e:
                log.warning("Skipping %s: %s", full_path, e)
                continue
            bucket[dirpath].append(full_path)

    all_videos = sorted(
        (p for paths in videos.values() for p in paths), key=natural_sort_key
    )
    total = len(all_videos)
    items: dict[str, ClassifiedItem] = {}

    for index, path in enumerate(all_videos, 1):
        if is_cancelled is not None and is_cancelled():
            log.info("Scan cancelled after %d of %d files", index - 1, total)
            raise ScanCancelled(str(root))
        if on_progress is not None:
            on_progress(index, total, path)
        items[path] = classify_file(path, base, config)

    unassociated: list[str] = []
    for directory in sorted(set(videos) | set(subtitles), key=natural_sort_key):
        assigned, unclaimed = assign_subtitles(
            videos.get(directory, []), subtitles.get(directory, []), config
        )
        for video, subs in assigned.items():
            if subs:
                items[video] = replace(items[video], subtitle_paths=tuple(subs))
        unassociated.extend(unclaimed)

    result = ScanResult(
        items=tuple(items[p] for p in all_videos),
        unassociated_subtitles=tuple(unassociated),
    )
    log.info(
        "Found %d videos (%d movies, %d episodes, %d unknown), %d subtitles",
        len(result.items),
        len(result.movies),
        len(result.tv_shows),
        len(result.unknown),
        result.subtitle_count,
    )
    return result
