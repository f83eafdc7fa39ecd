"""Grouping of TV episodes into shows by the folders that hold them."""
import logging
import os
from dataclasses import dataclass, field

from .cleaner import extract_title, is_title_reasonable, strip_extension
from .config import DEFAULT_CONFIG, EngineConfig
from .formatter import natural_sort_key
from .models import ClassifiedItem, MediaKind
from .parser import EPISODE_CODE_PATTERN
from .seasons import is_season_dir

log = logging.getLogger(__name__)


@dataclass
class ShowGroup:
    """Episodes of one show found in one folder."""
    name: str
    directory: str
    year: int | None = None
    items: list[ClassifiedItem] = field(default_factory=list)


def show_directory(directory: str, config: EngineConfig = DEFAULT_CONFIG) -> str:
    """The folder naming the show: season folders defer to their parent."""
    directory = os.path.normpath(directory)
    if is_season_dir(os.path.basename(directory), config.cardinal_words, config.ordinal_words):
        return os.path.dirname(directory)
    return directory


def guess_show(directory: str, config: EngineConfig = DEFAULT_CONFIG) -> tuple[str, int | None]:
    """
    Guess a show name and year from the folder holding its episodes.

    Args:
        directory: Folder of an episode file
        config: Word lists used by title extraction

    Returns:
        (cleaned folder name, or the raw name when cleaning leaves nothing;
        year found in the folder name)
    """
    dir_name = os.path.basename(show_directory(directory, config))
    extraction = extract_title(dir_name, config)
    return extraction.title or dir_name, extraction.year


def guess_show_name(directory: str, config: EngineConfig = DEFAULT_CONFIG) -> str:
    return guess_show(directory, config)[0]


def _loose_file_title(item: ClassifiedItem, config: EngineConfig) -> str | None:
    """Show title of a scene-style file ("Show.S01E02...") lying in the scan root."""
    stem = strip_extension(os.path.basename(item.path), config.media_extensions)
    if EPISODE_CODE_PATTERN.search(stem) and is_title_reasonable(item.title, config):
        return item.title
    return None


def group_shows(
    items: list[ClassifiedItem],
    scan_root: str | None = None,
    config: EngineConfig = DEFAULT_CONFIG,
) -> dict[str, list[ShowGroup]]:
    """
    Group TV items by show.

    Items are grouped by folder first; folders whose guessed names are
    equal (case-insensitive) end up under the same key.  Scene-style files
    lying directly in *scan_root* are grouped by their own title instead,
    since the scan root usually is a download folder rather than a show.

    Args:
        items: Classified items; anything that is not a TV show is ignored
        scan_root: Root the items were scanned from
        config: Engine tables

    Returns:
        {lowercase show name: [ShowGroup, ...]} in natural name order
    """
    root = os.path.normpath(scan_root) if scan_root else None
    by_folder: dict[tuple[str, str], ShowGroup] = {}

    for item in items:
        if item.kind is not MediaKind.TV_SHOW:
            continue
        folder = os.path.dirname(item.path)
        name = None
        if root and os.path.normpath(folder) == root:
            name = _loose_file_title(item, config)
        if name:
            directory, year = folder, item.year
        else:
            directory = show_directory(folder, config)
            name, year = guess_show(folder, config)

        key = (name.lower(), directory)
        if key not in by_folder:
            by_folder[key] = ShowGroup(name=name, directory=directory, year=year)
        by_folder[key].items.append(item)

    groups: dict[str, list[ShowGroup]] = {}
    for (key, _), group in sorted(by_folder.items(), key=lambda kv: natural_sort_key(kv[0][0])):
        groups.setdefault(key, []).append(group)

    for key, show_groups in groups.items():
        if len(show_groups) > 1:
            log.debug(
                "Show '%s' spread over %d folders: %s",
                key, len(show_groups), ", ".join(g.directory for g in show_groups),
            )
    return groups
