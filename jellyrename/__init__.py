"""
jellyrename - Media File Renamer

Classifies downloaded movies and TV episodes from their file and folder
names and renames them into the Jellyfin library layout.
"""
from .models import (
    MediaKind,
    Episode,
    TitleExtraction,
    ClassifiedItem,
    ScanResult,
    RenameResult,
)
from .config import EngineConfig, DEFAULT_CONFIG, ConfigError, load_config
from .cleaner import normalize_name, extract_title
from .parser import extract_episode
from .fuzzy import titles_match
from .detection import classify
from .subtitles import subtitle_matches
from .scanner import scan_directory, ScanError, ScanCancelled
from .renamer import RenameMode, plan_renames, execute_plan

__version__ = "0.1.0"
__all__ = [
    "MediaKind",
    "Episode",
    "TitleExtraction",
    "ClassifiedItem",
    "ScanResult",
    "RenameResult",
    "EngineConfig",
    "DEFAULT_CONFIG",
    "ConfigError",
    "load_config",
    "normalize_name",
    "extract_title",
    "extract_episode",
    "titles_match",
    "classify",
    "subtitle_matches",
    "scan_directory",
    "ScanError",
    "ScanCancelled",
    "RenameMode",
    "plan_renames",
    "execute_plan",
]
