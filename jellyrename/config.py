"""Engine configuration: word lists, extension sets and season tables.

Everything the extractors consult lives in an :class:`EngineConfig`
instead of being compiled into the matchers, so callers can extend the
tables (a new container format, another release tag) without touching
the extraction code.  ``DEFAULT_CONFIG`` is what every public function
uses when no config is passed.
"""
import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from pathlib import Path
from types import MappingProxyType
from typing import Any

from .seasons import CARDINAL_WORDS, ORDINAL_WORDS

log = logging.getLogger(__name__)


VIDEO_EXTENSIONS = ('.mkv', '.mp4', '.avi', '.mov', '.m4v', '.wmv')

SUBTITLE_EXTENSIONS = ('.srt', '.sub', '.ass', '.ssa', '.vtt')

# Release, quality and group tags.  They mark where a title ends and are
# dropped when names are compared.
FILTER_WORDS = (
    # Release tags
    'complete', 'proper', 'repack', 'internal', 'limited',
    # Resolution
    '720p', '1080p', '2160p', '4k',
    # Source
    'webrip', 'web', 'rip', 'bluray', 'bdrip', 'dvdrip', 'hdtv',
    # Codec / bit depth
    'x265', 'x264', 'hevc', 'h264', 'h265', 'avc', 'hdr', '10bit', '8bit',
    'bit',
    # Audio
    'aac', 'ac3', 'dts', 'flac', 'mp3', '2ch', '5.1', '7.1',
    # Groups
    'psa', 'heteam', 'etrg', 'sparks', 'rarbg', 'yify', 'joy', 'heb',
    'team',
    # Networks and services
    'amzn', 'nf', 'hbo', 'bbc', 'discovery', 'netflix', 'amazon', 'disney',
    'max', 'cr',
    # Structure words
    'series', 'season',
)

SUBTITLE_FILTER_WORDS = (
    'web', 'rip', 'bit', 'joy', 'psa', 'hevc', 'heb', 'team', 'aac', 'ac3',
    'dts', 'flac', '2ch', '5.1', '7.1', '10bit', '8bit', 'x265', 'x264',
    'h264', 'h265', 'avc', 'hdr', 'webrip', 'bluray', 'bdrip', 'dvdrip',
    'hdtv', 'netflix', 'amazon', 'disney', 'hbo', 'max', 'cr', 'proper',
    'repack', 'internal', 'limited', 'complete', 'series', 'season',
)

# Language suffixes stripped from subtitle names ("Movie.en.srt")
LANGUAGE_CODES = frozenset({
    'en', 'es', 'fr', 'de', 'it', 'pt', 'ru', 'ja', 'ko', 'zh',
    'ar', 'nl', 'pl', 'tr', 'vi', 'th', 'id', 'hi', 'he', 'cs',
    'eng', 'spa', 'fra', 'deu', 'ita', 'por', 'rus', 'jpn', 'kor', 'zho',
    'ara', 'lat', 'forced', 'sdh', 'cc', 'default',
})


class ConfigError(Exception):
    """Raised when a configuration file cannot be read or is malformed."""


@dataclass(frozen=True)
class EngineConfig:
    """Read-only tables consulted by the extraction engine."""
    filter_words: tuple[str, ...] = FILTER_WORDS
    subtitle_filter_words: tuple[str, ...] = SUBTITLE_FILTER_WORDS
    video_extensions: tuple[str, ...] = VIDEO_EXTENSIONS
    subtitle_extensions: tuple[str, ...] = SUBTITLE_EXTENSIONS
    language_codes: frozenset[str] = LANGUAGE_CODES
    cardinal_words: Mapping[str, int] = field(
        default_factory=lambda: CARDINAL_WORDS, hash=False)
    ordinal_words: Mapping[str, int] = field(
        default_factory=lambda: ORDINAL_WORDS, hash=False)

    def is_video(self, filename: str) -> bool:
        return Path(filename).suffix.lower() in self.video_extensions

    def is_subtitle(self, filename: str) -> bool:
        return Path(filename).suffix.lower() in self.subtitle_extensions

    @property
    def media_extensions(self) -> tuple[str, ...]:
        return self.video_extensions + self.subtitle_extensions

    def extended(self, **extra: Any) -> "EngineConfig":
        """Return a copy with extra entries appended to the given tables.

        Sequence tables are extended (duplicates skipped), mapping tables
        are merged.  Extensions are normalized to a leading dot, lowercase.
        """
        changes: dict[str, Any] = {}
        for key, values in extra.items():
            if not values:
                continue
            current = getattr(self, key)
            if isinstance(current, Mapping):
                merged = dict(current)
                merged.update({str(k).lower(): int(v) for k, v in values.items()})
                changes[key] = MappingProxyType(merged)
                continue
            if key.endswith('_extensions'):
                values = [_dotted(v) for v in values]
            else:
                values = [str(v).lower() for v in values]
            if isinstance(current, frozenset):
                changes[key] = current | frozenset(values)
            else:
                changes[key] = tuple(current) + tuple(
                    v for v in values if v not in current
                )
        return replace(self, **changes)


def _dotted(ext: str) -> str:
    ext = str(ext).strip().lower()
    return ext if ext.startswith('.') else f'.{ext}'


DEFAULT_CONFIG = EngineConfig()

_KNOWN_KEYS = {
    'filter_words',
    'subtitle_filter_words',
    'video_extensions',
    'subtitle_extensions',
    'language_codes',
    'cardinal_words',
    'ordinal_words',
}


def load_config(path: str | Path | None) -> EngineConfig:
    """
    Build an engine config from a JSON file.

    The file holds an object whose keys name :class:`EngineConfig`
    tables; their values are *added* to the defaults::

        {"video_extensions": [".ts"], "filter_words": ["nanda"]}

    Args:
        path: JSON file path, or None for the defaults

    Returns:
        The merged configuration

    Raises:
        ConfigError: If the file is missing, unreadable or malformed
    """
    if path is None:
        return DEFAULT_CONFIG

    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Cannot read config {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config {path} must contain a JSON object")

    unknown = set(data) - _KNOWN_KEYS
    if unknown:
        log.warning("Ignoring unknown config keys: %s", ", ".join(sorted(unknown)))

    extra = {k: v for k, v in data.items() if k in _KNOWN_KEYS}
    try:
        return DEFAULT_CONFIG.extended(**extra)
    except (TypeError, ValueError, AttributeError) as e:
        raise ConfigError(f"Invalid value in config {path}: {e}") from e
