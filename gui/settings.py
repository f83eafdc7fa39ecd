"""Settings management for the jellyrename GUI."""
import json
import logging
from pathlib import Path
from typing import Any

from jellyrename.config import DEFAULT_CONFIG, EngineConfig
from jellyrename.history import app_data_dir

log = logging.getLogger(__name__)


def settings_file() -> Path:
    """Return the settings file path, creating its directory if needed."""
    d = app_data_dir()
    d.mkdir(parents=True, exist_ok=True)
    return d / "settings.json"


# ---------------------------------------------------------------------------
# Default values for every known key
# ---------------------------------------------------------------------------

DEFAULT_SETTINGS: dict[str, Any] = {
    # Behavior
    "rename_mode": "move",
    "dry_run": False,

    # Additions merged into the engine tables
    "extra_filter_words": [],
    "extra_video_extensions": [],
    "extra_subtitle_extensions": [],

    # State (not shown in the window controls)
    "last_folder": "",
    "log_visible": False,
}


# ---------------------------------------------------------------------------
# SettingsManager -- single authority for reading / writing settings
# ---------------------------------------------------------------------------

class SettingsManager:
    """Centralised settings store backed by a JSON file.

    Usage:
        mgr = SettingsManager()
        mode = mgr.get("rename_mode")
        mgr.set("last_folder", "/media/incoming")
        mgr.save()
    """

    _instance: "SettingsManager | None" = None

    def __new__(cls) -> "SettingsManager":
        """Singleton -- one instance per process."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._path = settings_file()
            cls._instance._data = cls._instance._load()
        return cls._instance

    # -- public API -------------------------------------------------------

    def get(self, key: str, default: Any = None) -> Any:
        fallback = DEFAULT_SETTINGS.get(key, default)
        return self._data.get(key, fallback)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value

    def save(self) -> bool:
        try:
            with open(self._path, "w", encoding="utf-8") as f:
                json.dump(self._data, f, indent=2, ensure_ascii=False)
            return True
        except OSError as e:
            log.warning("Could not save settings to %s: %s", self._path, e)
            return False

    def all(self) -> dict[str, Any]:
        """Return a merged view: defaults + saved values."""
        merged = DEFAULT_SETTINGS.copy()
        merged.update(self._data)
        return merged

    def reload(self) -> None:
        self._data = self._load()

    def engine_config(self) -> EngineConfig:
        """The engine configuration with the user's additions merged in."""
        return DEFAULT_CONFIG.extended(
            filter_words=self.get("extra_filter_words") or [],
            video_extensions=self.get("extra_video_extensions") or [],
            subtitle_extensions=self.get("extra_subtitle_extensions") or [],
        )

    # -- private ----------------------------------------------------------

    def _load(self) -> dict[str, Any]:
        if self._path.exists():
            try:
                with open(self._path, "r", encoding="utf-8") as f:
                    data = json.load(f)
                if isinstance(data, dict):
                    return data
                log.warning("Ignoring malformed settings file %s", self._path)
            except (json.JSONDecodeError, OSError) as e:
                log.warning("Could not read settings from %s: %s", self._path, e)
        return {}


def load_settings() -> dict[str, Any]:
    """Load settings. Returns a dict with defaults for missing keys."""
    return SettingsManager().all()


def save_settings(settings: dict[str, Any]) -> bool:
    """Persist *settings* dict to disk."""
    mgr = SettingsManager()
    for k, v in settings.items():
        mgr.set(k, v)
    return mgr.save()
