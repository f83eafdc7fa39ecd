"""Episode extraction from relative media paths.

:func:`extract_episode` runs an ordered list of matchers over the
filename (and, where a rule needs it, the parent directory name).  The
first matcher that returns an :class:`Episode` wins.  Rules go from the
least ambiguous shapes (``[Group] Title - 01``, ``S01E05``) to the most
ambiguous ones (``Title 05`` confirmed against the folder name), so that
a resolution tag such as ``1080p`` is never read as episode 108.
"""
import logging
import re
from dataclasses import dataclass
from functools import cached_property

from .cleaner import strip_extension
from .config import DEFAULT_CONFIG, EngineConfig
from .fuzzy import titles_match
from .models import Episode, EpisodeNumber
from .seasons import season_from_dir_name

log = logging.getLogger(__name__)

# A position not touching a letter or digit (underscore counts as a separator)
_L = r'(?<![^\W_])'
_R = r'(?![^\W_])'

# [Group] Title - 01 [tags]
ANIME_RELEASE_PATTERN = re.compile(
    r'^\[[^\]]*\][\s_]*(?P<title>.+?)[\s_]+-[\s_]*'
    r'(?P<ep>\d{1,4}(?:\.5)?)(?:v\d+)?(?![0-9A-Za-z.])'
)

# S03E01-E02, S03E03-04, S03E01E02
MULTI_EPISODE_PATTERN = re.compile(
    r'S(\d{1,2})E(\d{1,3})(?:[-_]E?|E)(\d{1,3})(?![\dpi])',
    re.IGNORECASE,
)

# S02E05, S01E06.5
EPISODE_CODE_PATTERN = re.compile(
    r'S(\d{1,2})E(\d{1,3}(?:\.5(?!\d))?)(?!\d)',
    re.IGNORECASE,
)

# 323-24
THREE_DIGIT_RANGE_PATTERN = re.compile(rf'{_L}(\d{{1,2}})(\d{{2}})[-_](\d{{2}}){_R}')

# EP 05, e3, E03, الحلقة 1
EPISODE_MARKER_PATTERN = re.compile(
    rf'(?:{_L}(?:EP|E)|الحلقة)[\s._-]*(\d{{1,4}}(?:\.5)?)(?!\d)',
    re.IGNORECASE,
)

# 205, 1012, 205.720p; not 1080p, not x.264
THREE_DIGIT_PATTERN = re.compile(
    rf'{_L}(?<!\d\.)(?<![xXhH]\.)(\d{{1,2}})(\d{{2}}){_R}'
)

# [01], [12v2]
BRACKET_NUMBER_PATTERN = re.compile(r'\[(\d{1,4}(?:\.5)?)(?:v\d+)?\]')

# episode 01
EPISODE_WORD_PATTERN = re.compile(rf'{_L}episode[\s._-]*(\d+)', re.IGNORECASE)

# Explicit season tokens used for the season hint: "S2", "Season 3"
SEASON_TOKEN_PATTERN = re.compile(
    rf'{_L}(?:S|Season[\s._-]*)(\d{{1,2}}){_R}',
    re.IGNORECASE,
)

# Filenames inside a season folder
_RANGE_NAME = re.compile(r'^(\d{1,4})[-_](\d{1,4})$')
_NUMBER_NAME = re.compile(r'^(\d{1,4}(?:\.5)?)$')
_ATTACHED_NAME = re.compile(
    r'^(.*?[^\W\d_])[\s._-]*(?:END[\s._-]*)?(\d{1,4}(?:\.5)?)$'
)

# Title followed by a number: "My Show - 01 FHD", "MyShow10", "ShowEND12"
TITLE_NUMBER_PATTERN = re.compile(
    r'^(?P<title>.*[^\W_])(?:[\s_]*-[\s_]*|[\s_]+)(?P<ep>\d{1,4}(?:\.5)?)(?:v\d+)?'
    r'(?:[\s._-]*END)?(?:[\s._-]+\D.*)?$'
)
TITLE_ATTACHED_PATTERN = re.compile(
    r'^(?P<title>.*?[^\W\d_])(?:END)?(?P<ep>\d{1,4})(?:[\s._-]+\D.*)?$'
)

_TAG_BLOCK = re.compile(r'[\[({].*?[\])}]')


def to_number(text: str) -> EpisodeNumber:
    """Parse "12" as 12 and "6.5" as 6.5."""
    return float(text) if '.' in text else int(text)


def is_year(number: EpisodeNumber) -> bool:
    return isinstance(number, int) and 1900 <= number <= 2099


def split_path(path: str) -> tuple[str, str]:
    """Return (parent directory name, filename) for / or \\ separated paths."""
    parts = [p for p in re.split(r'[/\\]', path) if p]
    if not parts:
        return '', ''
    return (parts[-2] if len(parts) > 1 else ''), parts[-1]


@dataclass
class PathContext:
    """The pieces of one relative path the matchers look at."""
    stem: str
    parent: str
    config: EngineConfig = DEFAULT_CONFIG

    @classmethod
    def from_path(cls, path: str, config: EngineConfig = DEFAULT_CONFIG) -> "PathContext":
        parent, filename = split_path(path)
        return cls(strip_extension(filename, config.media_extensions), parent, config)

    @cached_property
    def parent_season(self) -> int | None:
        """Season number of the parent directory, if it is a season folder."""
        return season_from_dir_name(
            self.parent, self.config.cardinal_words, self.config.ordinal_words
        )

    @cached_property
    def season_hint(self) -> int:
        """Season for rules whose pattern carries no season of its own."""
        if self.parent_season is not None:
            return self.parent_season
        for text in (self.stem, self.parent):
            match = SEASON_TOKEN_PATTERN.search(text)
            if match:
                return int(match.group(1))
        return 1


def _episode(season: int, start: EpisodeNumber, end: EpisodeNumber | None = None) -> Episode:
    if end is not None and end < start:
        end = None
    if end == start:
        end = None
    return Episode(season_number=season, episode_start=start, episode_end=end)


# ---------------------------------------------------------------------------
# Matchers, one per rule
# ---------------------------------------------------------------------------

def match_anime_release(ctx: PathContext) -> Episode | None:
    match = ANIME_RELEASE_PATTERN.match(ctx.stem)
    if not match:
        return None
    number = to_number(match.group('ep'))
    if is_year(number):
        return None
    return _episode(ctx.season_hint, number)


def match_multi_episode(ctx: PathContext) -> Episode | None:
    match = MULTI_EPISODE_PATTERN.search(ctx.stem)
    if not match:
        return None
    season, start, end = (int(g) for g in match.groups())
    if end < start:
        # Not a range, let the single-code rule read it
        return None
    return _episode(season, start, end)


def match_episode_code(ctx: PathContext) -> Episode | None:
    match = EPISODE_CODE_PATTERN.search(ctx.stem)
    if not match:
        return None
    return _episode(int(match.group(1)), to_number(match.group(2)))


def match_three_digit_range(ctx: PathContext) -> Episode | None:
    for match in THREE_DIGIT_RANGE_PATTERN.finditer(ctx.stem):
        season, start, end = (int(g) for g in match.groups())
        if season < 50 and end >= start:
            return _episode(season, start, end)
    return None


def find_episode_marker(stem: str) -> EpisodeNumber | None:
    """Number after the first "EP"/"E"/"الحلقة" marker that is not a year."""
    for match in EPISODE_MARKER_PATTERN.finditer(stem):
        number = to_number(match.group(1))
        if not is_year(number):
            return number
    return None


def match_episode_marker(ctx: PathContext) -> Episode | None:
    number = find_episode_marker(ctx.stem)
    if number is None:
        return None
    return _episode(ctx.season_hint, number)


def match_absolute_number(ctx: PathContext) -> Episode | None:
    """A filename that is only a number: "One Piece/1000.mp4"."""
    if ctx.parent_season is not None:
        return None
    match = _NUMBER_NAME.match(ctx.stem.strip())
    if not match:
        return None
    number = to_number(match.group(1))
    if is_year(number):
        return None
    return _episode(ctx.season_hint, number)


def match_three_digit(ctx: PathContext) -> Episode | None:
    for match in THREE_DIGIT_PATTERN.finditer(ctx.stem):
        digits = match.group(1) + match.group(2)
        if len(digits) == 4 and is_year(int(digits)):
            continue
        season, episode = int(match.group(1)), int(match.group(2))
        if season >= 50:
            continue
        return _episode(season or 1, episode)
    return None


def match_bracket_number(ctx: PathContext) -> Episode | None:
    for match in BRACKET_NUMBER_PATTERN.finditer(ctx.stem):
        number = to_number(match.group(1))
        if number < 1900:
            return _episode(ctx.season_hint, number)
    return None


def match_season_folder(ctx: PathContext) -> Episode | None:
    """Numbered files inside "Season 4", "season one", "الموسم الأول"..."""
    season = ctx.parent_season
    if season is None:
        return None
    stem = ctx.stem.strip()

    match = _RANGE_NAME.match(stem)
    if match:
        return _episode(season, int(match.group(1)), int(match.group(2)))

    match = _NUMBER_NAME.match(stem) or _ATTACHED_NAME.match(stem)
    if match:
        return _episode(season, to_number(match.groups()[-1]))
    return None


def match_episode_word(ctx: PathContext) -> Episode | None:
    match = EPISODE_WORD_PATTERN.search(ctx.stem)
    if not match:
        return None
    return _episode(ctx.season_hint, int(match.group(1)))


def match_title_number(ctx: PathContext) -> Episode | None:
    """Last resort: "<title> 05" where <title> matches the parent directory."""
    if not ctx.parent:
        return None
    stem = re.sub(r'\s+', ' ', _TAG_BLOCK.sub(' ', ctx.stem)).strip()
    match = TITLE_NUMBER_PATTERN.match(stem) or TITLE_ATTACHED_PATTERN.match(stem)
    if not match:
        return None

    number = to_number(match.group('ep'))
    if is_year(number):
        return None
    title = match.group('title')
    if not titles_match(title, ctx.parent):
        log.debug("'%s' does not match folder '%s'", title, ctx.parent)
        return None
    return _episode(ctx.season_hint, number)


# Ordered: the first matcher returning an Episode wins
EPISODE_RULES = (
    ('anime_release', match_anime_release),
    ('multi_episode', match_multi_episode),
    ('episode_code', match_episode_code),
    ('three_digit_range', match_three_digit_range),
    ('episode_marker', match_episode_marker),
    ('absolute_number', match_absolute_number),
    ('three_digit', match_three_digit),
    ('bracket_number', match_bracket_number),
    ('season_folder', match_season_folder),
    ('episode_word', match_episode_word),
    ('title_number', match_title_number),
)


def extract_episode(path: str, config: EngineConfig = DEFAULT_CONFIG) -> Episode | None:
    """
    Extract season and episode numbers from a relative media path.

    Args:
        path: Path relative to the library, so the parent folder is
            visible ("Season 04/08.mkv", "My Show/MS EP 05.mp4")
        config: Extensions and season word tables

    Returns:
        Episode, or None when no rule recognizes the name
    """
    ctx = PathContext.from_path(path, config)
    if not ctx.stem:
        return None

    for name, matcher in EPISODE_RULES:
        episode = matcher(ctx)
        if episode is not None:
            log.debug("%s: %s via %s", path, episode.episode_code, name)
            return episode
    return None
