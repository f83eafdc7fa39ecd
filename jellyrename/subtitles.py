"""Subtitle to video association within one directory."""
import logging
import os
import re

from .cleaner import normalize_subtitle_name, strip_extension
from .config import DEFAULT_CONFIG, EngineConfig

log = logging.getLogger(__name__)

_EPISODE_CODE = re.compile(r's(\d{1,2})e(\d{1,3})', re.IGNORECASE)
_NUMBER = re.compile(r'\d+')
_WORD = re.compile(r'[^\W\d_]+')


def _episode_code(name: str) -> tuple[int, int] | None:
    match = _EPISODE_CODE.search(name)
    if match:
        return int(match.group(1)), int(match.group(2))
    return None


def _significant_tokens(name: str, config: EngineConfig) -> set[str]:
    ignored = set(config.subtitle_filter_words)
    return {
        t for t in _WORD.findall(name.lower())
        if len(t) > 2 and t not in ignored
    }


def subtitle_matches(
    video_name: str,
    subtitle_name: str,
    config: EngineConfig = DEFAULT_CONFIG,
) -> bool:
    """
    Decide whether a subtitle belongs to a video in the same directory.

    Both names must already be normalized with
    :func:`~jellyrename.cleaner.normalize_subtitle_name`.

    Args:
        video_name: Normalized video basename
        subtitle_name: Normalized subtitle basename
        config: Supplies the words ignored when counting shared tokens

    Returns:
        True if the subtitle should follow the video
    """
    if video_name == subtitle_name:
        return True
    if not video_name or not subtitle_name:
        return False

    # Episode codes decide on their own, even against other evidence
    video_code = _episode_code(video_name)
    subtitle_code = _episode_code(subtitle_name)
    if video_code and subtitle_code:
        return video_code == subtitle_code

    # "Show 05" must not pick up "Show 06"
    video_numbers = {int(n) for n in _NUMBER.findall(video_name)}
    subtitle_numbers = {int(n) for n in _NUMBER.findall(subtitle_name)}
    if video_numbers and subtitle_numbers and not video_numbers & subtitle_numbers:
        return False

    shared = _significant_tokens(video_name, config) & _significant_tokens(subtitle_name, config)
    if len(shared) >= 2:
        return True

    if video_name.isdigit() and subtitle_name.isdigit():
        return False

    if video_name in subtitle_name:
        # "1" inside "10" or "Show 1" is too ambiguous
        return not video_name.isdigit()
    return subtitle_name in video_name


def subtitle_language(path: str, config: EngineConfig = DEFAULT_CONFIG) -> str | None:
    """Return the language/flag suffix chain of a subtitle ("en", "ara.forced")."""
    stem = strip_extension(os.path.basename(path), config.subtitle_extensions)
    parts = stem.split('.')
    suffixes = []
    while len(parts) > 1 and parts[-1].lower() in config.language_codes:
        suffixes.insert(0, parts.pop())
    # "default" is written by the renamer, never carried over
    suffixes = [s for s in suffixes if s.lower() != 'default']
    return '.'.join(suffixes) or None


def assign_subtitles(
    videos: list[str],
    subtitles: list[str],
    config: EngineConfig = DEFAULT_CONFIG,
) -> tuple[dict[str, list[str]], list[str]]:
    """
    Distribute the subtitles of one directory over its videos.

    Exact name matches are claimed first so that ``Show 1.srt`` goes to
    ``Show 1.mkv`` even when ``Show 10.mkv`` sorts earlier.  The remaining
    rules run afterwards in video order.  Each subtitle is claimed by at
    most one video.

    Args:
        videos: Video paths, in natural order
        subtitles: Subtitle paths from the same directory, in natural order
        config: Extensions, language codes and filter words

    Returns:
        (mapping of video path to its subtitle paths, unclaimed subtitles)
    """
    video_names = {
        v: normalize_subtitle_name(os.path.basename(v), config) for v in videos
    }
    subtitle_names = {
        s: normalize_subtitle_name(os.path.basename(s), config) for s in subtitles
    }
    assigned: dict[str, list[str]] = {v: [] for v in videos}
    claimed: set[str] = set()

    for video in videos:
        for subtitle in subtitles:
            if subtitle not in claimed and subtitle_names[subtitle] == video_names[video]:
                assigned[video].append(subtitle)
                claimed.add(subtitle)

    for video in videos:
        for subtitle in subtitles:
            if subtitle in claimed:
                continue
            if subtitle_matches(video_names[video], subtitle_names[subtitle], config):
                log.debug("Subtitle %s -> %s", subtitle, video)
                assigned[video].append(subtitle)
                claimed.add(subtitle)

    unclaimed = [s for s in subtitles if s not in claimed]
    return assigned, unclaimed
