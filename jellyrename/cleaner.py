"""Filename normalization and title extraction.

Two different jobs live here:

* :func:`normalize_name` produces a *comparison* form of a filename or
  directory name: tag blocks, release words and separators are gone.  It
  is never shown to the user.
* :func:`extract_title` produces a *display* title: everything in front
  of the first season/episode/year/release marker, wording preserved.
"""

import re
from functools import lru_cache

from .config import DEFAULT_CONFIG, EngineConfig
from .models import TitleExtraction

# ---------------------------------------------------------------------------
# Pattern groups
# ---------------------------------------------------------------------------

# Emoji and decorative symbols some uploaders sprinkle into names
_DECORATIVE = re.compile(
    '[☀-➿⭐⭕✨️\U0001f300-\U0001faff]'
)

# Bracketed, parenthesised or braced tag blocks, non-greedy
_TAG_BLOCK = re.compile(r'[\[({].*?[\])}]')

# Year, delimited by anything that is not a letter or digit
YEAR_PATTERN = re.compile(r'(?<![^\W_])((?:19|20)\d{2})(?![^\W_])')

# Title boundaries (searched in the cleaned name)
_SEASON_WORD = re.compile(r'\bSeason\b', re.IGNORECASE)
_EPISODE_CODE = re.compile(r'S\d{1,2}E\d{1,3}', re.IGNORECASE)
_SEASON_CODE = re.compile(r'\bS\d{1,2}\b', re.IGNORECASE)
_BARE_YEAR = re.compile(r'\b(?:19|20)\d{2}\b')
_EPISODE_MARKER = re.compile(
    r'(?:(?<![^\W_])(?:EP|E)|الحلقة)\s*\d{1,4}(?![^\W_])', re.IGNORECASE
)
_EPISODE_WORD = re.compile(r'(?<![^\W_])episode\s*\d+', re.IGNORECASE)
_DASH_NUMBER = re.compile(r'\s-\s*\d{1,4}(?![^\W_])')
_THREE_DIGIT_RANGE = re.compile(r'(?<![^\W_])\d{3,4}-\d{2}(?![^\W_])')


@lru_cache(maxsize=64)
def word_pattern(words: tuple[str, ...]) -> re.Pattern | None:
    """Compile a whole-word, case-insensitive alternation of *words*.

    Underscores and dots count as separators, so ``x265`` is found in
    ``Show_x265`` as well as ``Show.x265``.
    """
    if not words:
        return None
    # Longest first so "webrip" wins over "web"
    ordered = sorted({w for w in words if w}, key=len, reverse=True)
    body = '|'.join(re.escape(w) for w in ordered)
    return re.compile(rf'(?<![^\W_])(?:{body})(?![^\W_])', re.IGNORECASE)


def clean_filename(name: str) -> str:
    """Drop decorative symbols and tag blocks, turn dots/underscores into spaces."""
    name = _DECORATIVE.sub('', name)
    name = _TAG_BLOCK.sub(' ', name)
    name = re.sub(r'[._]', ' ', name)
    return re.sub(r'\s+', ' ', name).strip()


def normalize_name(name: str, words: tuple[str, ...] = DEFAULT_CONFIG.filter_words) -> str:
    """
    Normalize a filename or directory name for comparison.

    Args:
        name: Raw filename (with or without extension) or directory name
        words: Release/quality words to drop, whole word, case-insensitive

    Returns:
        The normalized string, possibly empty
    """
    name = _DECORATIVE.sub('', name)
    name = _TAG_BLOCK.sub(' ', name)
    # Words go before separators so dotted tags like "5.1" still match
    pattern = word_pattern(tuple(words))
    if pattern is not None:
        name = pattern.sub(' ', name)
    name = re.sub(r'[._]', ' ', name)
    return re.sub(r'\s+', ' ', name).strip()


def strip_extension(filename: str, extensions: tuple[str, ...]) -> str:
    """Remove a trailing known media extension, leave any other suffix."""
    lowered = filename.lower()
    for ext in extensions:
        if lowered.endswith(ext.lower()):
            return filename[:-len(ext)]
    return filename


def strip_language_suffix(stem: str, codes: frozenset[str]) -> str:
    """Drop trailing language/flag suffixes: "Movie.en.forced" -> "Movie"."""
    while '.' in stem:
        base, _, suffix = stem.rpartition('.')
        if suffix.lower() not in codes or not base:
            break
        stem = base
    return stem


def normalize_subtitle_name(
    filename: str,
    config: EngineConfig = DEFAULT_CONFIG,
) -> str:
    """Comparison form used by the subtitle associator (videos included)."""
    stem = strip_extension(filename, config.media_extensions)
    stem = strip_language_suffix(stem, config.language_codes)
    return normalize_name(stem, config.subtitle_filter_words).lower()


# ---------------------------------------------------------------------------
# Title extraction
# ---------------------------------------------------------------------------

def extract_title(
    file_name: str,
    config: EngineConfig = DEFAULT_CONFIG,
) -> TitleExtraction:
    """
    Extract a display title and release year from a filename.

    The year is read from the raw name first, because it often sits in
    parentheses that cleaning removes.  The title is the cleaned name up
    to the earliest season or episode marker, year, release word or stray
    extension token.

    Args:
        file_name: Filename, extension optional, or a directory name
        config: Word lists and extensions marking the end of a title

    Returns:
        TitleExtraction with title and year, either may be None
    """
    year = None
    year_match = YEAR_PATTERN.search(file_name)
    if year_match:
        year = int(year_match.group(1))

    clean_name = clean_filename(file_name)

    boundaries = [
        _SEASON_WORD,
        _EPISODE_CODE,
        _SEASON_CODE,
        _EPISODE_MARKER,
        _EPISODE_WORD,
        _DASH_NUMBER,
        _THREE_DIGIT_RANGE,
        _BARE_YEAR,
        word_pattern(tuple(config.filter_words)),
        word_pattern(tuple(ext.lstrip('.') for ext in config.media_extensions)),
    ]

    end = len(clean_name)
    for pattern in boundaries:
        if pattern is None:
            continue
        match = pattern.search(clean_name)
        if match and match.start() < end:
            end = match.start()

    title = re.sub(r'^[\s._-]+|[\s._-]+$', '', clean_name[:end])
    return TitleExtraction(title=title or None, year=year)


def is_title_reasonable(title: str | None, config: EngineConfig = DEFAULT_CONFIG) -> bool:
    """Check whether an extracted title looks usable for naming.

    Rejects missing or one-character titles, titles still carrying a file
    extension and titles that kept an episode code.
    """
    if not title or len(title) < 2:
        return False
    lowered = title.lower()
    if any(ext in lowered for ext in config.media_extensions):
        return False
    if _EPISODE_CODE.search(title):
        return False
    return True


def clean_title_dots(title: str) -> str:
    """Turn dots used as word separators into spaces ("Mädchen.im.Wald")."""
    result = re.sub(r'(\w)\.(?=\w)', r'\1 ', title)
    return result.strip('.')
