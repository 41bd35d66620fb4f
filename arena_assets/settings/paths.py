"""
Path-related settings for arena_assets.
"""

from pathlib import Path
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from PySide6.QtCore import QSettings

DEFAULT_ARCHIVE_NAME = "GLOBAL.BSA"
DEFAULT_EXE_DATA_NAME = "exe_data.json"


class PathSettings:
    """Manages path-related settings."""

    def __init__(self, settings: "QSettings"):
        self.settings = settings

    def _get_str(self, key: str, default: str = "") -> str:
        """Type-safe string retrieval from settings."""
        value = self.settings.value(key, default)
        return str(value) if value is not None else default

    @property
    def arena_path(self) -> Optional[Path]:
        """Get the directory holding the game data files."""
        path_str = self._get_str("paths/arena", "")
        return Path(path_str) if path_str else None

    @arena_path.setter
    def arena_path(self, value: Optional[Path]) -> None:
        self.settings.setValue("paths/arena", str(value) if value else "")
        self.settings.sync()

    @property
    def archive_name(self) -> str:
        """Get the file name of the resource container inside arena_path."""
        return self._get_str("paths/archive_name", DEFAULT_ARCHIVE_NAME) or DEFAULT_ARCHIVE_NAME

    @archive_name.setter
    def archive_name(self, value: str) -> None:
        self.settings.setValue("paths/archive_name", value or DEFAULT_ARCHIVE_NAME)
        self.settings.sync()

    @property
    def archive_path(self) -> Optional[Path]:
        """Get the resource container path (derived from arena_path)."""
        if self.arena_path:
            return self.arena_path / self.archive_name
        return None

    @property
    def exe_data_path(self) -> Optional[Path]:
        """Get the executable side-data JSON path.

        Falls back to exe_data.json inside arena_path when not set explicitly.
        """
        path_str = self._get_str("paths/exe_data", "")
        if path_str:
            return Path(path_str)
        if self.arena_path:
            return self.arena_path / DEFAULT_EXE_DATA_NAME
        return None

    @exe_data_path.setter
    def exe_data_path(self, value: Optional[Path]) -> None:
        self.settings.setValue("paths/exe_data", str(value) if value else "")
        self.settings.sync()
