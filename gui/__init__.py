"""jellyrename GUI Package."""
from .main_window import MainWindow
from .theme import DARK_STYLESHEET
from .settings import SettingsManager, load_settings, save_settings

__all__ = [
    "MainWindow",
    "DARK_STYLESHEET",
    "SettingsManager",
    "load_settings",
    "save_settings",
]
