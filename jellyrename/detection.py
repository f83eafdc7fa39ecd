"""Media type classification: movie, TV episode or unknown.

Pure Python, no I/O.  :func:`classify` walks ``KIND_RULES`` in order and
returns the kind of the first rule that fires.  The rules mirror the
episode cascade in :mod:`jellyrename.parser` but only decide the kind,
they never extract numbers.
"""
from __future__ import annotations

import re
from collections.abc import Callable

from .cleaner import YEAR_PATTERN, strip_extension
from .config import DEFAULT_CONFIG, EngineConfig
from .models import MediaKind
from .parser import (
    ANIME_RELEASE_PATTERN,
    BRACKET_NUMBER_PATTERN,
    EPISODE_CODE_PATTERN,
    EPISODE_WORD_PATTERN,
    PathContext,
    find_episode_marker,
    is_year,
    match_absolute_number,
    match_season_folder,
    match_three_digit,
    match_title_number,
    to_number,
)

_MOVIE_WORD = re.compile(r'(?<![^\W_])movie(?![^\W_])', re.IGNORECASE)


# ------------------------------------------------------------------
# Rules
# ------------------------------------------------------------------

def has_episode_marker(ctx: PathContext) -> bool:
    """SxxEyy, "episode 3", "EP 05", "e3" or the Arabic episode word."""
    return (
        EPISODE_CODE_PATTERN.search(ctx.stem) is not None
        or EPISODE_WORD_PATTERN.search(ctx.stem) is not None
        or find_episode_marker(ctx.stem) is not None
    )


def has_bracket_number(ctx: PathContext) -> bool:
    return any(
        to_number(m.group(1)) < 1900
        for m in BRACKET_NUMBER_PATTERN.finditer(ctx.stem)
    )


def has_anime_shape(ctx: PathContext) -> bool:
    match = ANIME_RELEASE_PATTERN.match(ctx.stem)
    return bool(match) and not is_year(to_number(match.group('ep')))


def is_numbered_file(ctx: PathContext) -> bool:
    """Numbered file in a season folder, or a bare absolute episode number."""
    return (
        match_season_folder(ctx) is not None
        or match_absolute_number(ctx) is not None
    )


def has_year(ctx: PathContext) -> bool:
    return YEAR_PATTERN.search(ctx.stem) is not None


def has_movie_word(ctx: PathContext) -> bool:
    return _MOVIE_WORD.search(ctx.stem) is not None


def has_three_digit_code(ctx: PathContext) -> bool:
    return match_three_digit(ctx) is not None


def has_title_number(ctx: PathContext) -> bool:
    return match_title_number(ctx) is not None


# Ordered: the first rule that fires decides the kind
KIND_RULES: tuple[tuple[str, Callable[[PathContext], bool], MediaKind], ...] = (
    ('episode_marker', has_episode_marker, MediaKind.TV_SHOW),
    ('bracket_number', has_bracket_number, MediaKind.TV_SHOW),
    ('anime_release', has_anime_shape, MediaKind.TV_SHOW),
    ('numbered_file', is_numbered_file, MediaKind.TV_SHOW),
    ('year', has_year, MediaKind.MOVIE),
    ('movie_word', has_movie_word, MediaKind.MOVIE),
    ('three_digit', has_three_digit_code, MediaKind.TV_SHOW),
    ('title_number', has_title_number, MediaKind.TV_SHOW),
)


def classify(
    file_name: str,
    parent_dir: str = '',
    config: EngineConfig = DEFAULT_CONFIG,
) -> MediaKind:
    """
    Decide whether a video file is a movie or a TV episode.

    Args:
        file_name: Filename, with or without extension
        parent_dir: Name of the directory holding the file
        config: Extensions and season word tables

    Returns:
        MediaKind.MOVIE, MediaKind.TV_SHOW or MediaKind.UNKNOWN
    """
    stem = strip_extension(file_name, config.media_extensions)
    if not stem:
        return MediaKind.UNKNOWN
    ctx = PathContext(stem=stem, parent=parent_dir, config=config)
    for _name, rule, kind in KIND_RULES:
        if rule(ctx):
            return kind
    return MediaKind.UNKNOWN
