"""Data models for the jellyrename package."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Literal


EpisodeNumber = int | float


class MediaKind(Enum):
    """What a video file is, decided once per file."""
    MOVIE = "movie"
    TV_SHOW = "tvShow"
    UNKNOWN = "unknown"


def format_episode_number(number: EpisodeNumber) -> str:
    """Zero-pad the integer part to two digits, keep a fraction unpadded."""
    if isinstance(number, float) and not number.is_integer():
        whole, _, fraction = repr(number).partition('.')
        return f"{int(whole):02d}.{fraction}"
    return f"{int(number):02d}"


@dataclass(frozen=True)
class Episode:
    """One file covering a contiguous range of episodes of a season."""
    season_number: int
    episode_start: EpisodeNumber
    episode_end: EpisodeNumber | None = None

    def __post_init__(self):
        if self.season_number < 0:
            raise ValueError(f"Negative season number: {self.season_number}")
        if self.episode_end is not None and self.episode_end < self.episode_start:
            raise ValueError(
                f"Episode range ends before it starts: "
                f"{self.episode_start}-{self.episode_end}"
            )

    @property
    def is_multi_episode(self) -> bool:
        return self.episode_end is not None and self.episode_end != self.episode_start

    @property
    def episode_code(self) -> str:
        """The episode code, e.g. "S01E05", "S03E01-E02" or "S01E06.5"."""
        code = f"S{self.season_number:02d}E{format_episode_number(self.episode_start)}"
        if self.episode_end is not None:
            code += f"-E{format_episode_number(self.episode_end)}"
        return code


@dataclass(frozen=True)
class TitleExtraction:
    """A cleaned title and the release year found next to it."""
    title: str | None = None
    year: int | None = None


@dataclass(frozen=True)
class ClassifiedItem:
    """A discovered video file with everything the scan found out about it."""
    path: str
    kind: MediaKind
    title: str | None = None
    year: int | None = None
    episode: Episode | None = None
    subtitle_paths: tuple[str, ...] = ()

    @property
    def needs_review(self) -> bool:
        """True for files a human should look at before renaming."""
        if self.kind is MediaKind.UNKNOWN:
            return True
        return self.kind is MediaKind.TV_SHOW and self.episode is None


@dataclass(frozen=True)
class ScanResult:
    """Outcome of one scan: the videos plus subtitles nobody claimed."""
    items: tuple[ClassifiedItem, ...] = ()
    unassociated_subtitles: tuple[str, ...] = ()

    @property
    def movies(self) -> list[ClassifiedItem]:
        return [i for i in self.items if i.kind is MediaKind.MOVIE]

    @property
    def tv_shows(self) -> list[ClassifiedItem]:
        return [i for i in self.items if i.kind is MediaKind.TV_SHOW]

    @property
    def unknown(self) -> list[ClassifiedItem]:
        return [i for i in self.items if i.kind is MediaKind.UNKNOWN]

    @property
    def needs_review(self) -> list[ClassifiedItem]:
        return [i for i in self.items if i.needs_review]

    @property
    def subtitle_count(self) -> int:
        return (
            sum(len(i.subtitle_paths) for i in self.items)
            + len(self.unassociated_subtitles)
        )


@dataclass
class RenameOperation:
    """A planned file operation from *source* to *target*."""
    source: str
    target: str
    file_type: Literal["video", "subtitle"] = "video"


@dataclass
class RenameResult:
    """Represents a rename operation result."""
    source: str
    target: str
    status: Literal["renamed", "planned", "skipped", "error"]
    error: str | None = None
    file_type: Literal["video", "subtitle"] = "video"


@dataclass
class RenamePlan:
    """Every operation a rename run would perform, plus files left alone."""
    scan_root: str
    output_root: str
    operations: list[RenameOperation] = field(default_factory=list)
    needs_review: list[ClassifiedItem] = field(default_factory=list)
    unassociated_subtitles: list[str] = field(default_factory=list)
