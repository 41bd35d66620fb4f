"""
Settings package for arena_assets.

Configuration is stored through Qt's QSettings for cross-platform storage.

Usage:
    from arena_assets.settings import AppSettings

    settings = AppSettings()
    settings.arena_path = Path("/games/ARENA")
    result = settings.validate()
"""

from .core import AppSettings
from .logging import LoggingSettings
from .paths import PathSettings
from .types import ConfigVersion, ConfigError, ValidationResult

__all__ = [
    "AppSettings",
    "ConfigVersion",
    "ConfigError",
    "LoggingSettings",
    "PathSettings",
    "ValidationResult",
]
