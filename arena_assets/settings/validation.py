"""
Settings validation for arena_assets.
"""

import logging
from typing import List, TYPE_CHECKING

from .types import ValidationResult

if TYPE_CHECKING:
    from .core import AppSettings

logger = logging.getLogger(__name__)


class SettingsValidator:
    """Validates configuration settings."""

    def __init__(self, settings: "AppSettings"):
        self.settings = settings

    def validate(self) -> ValidationResult:
        """Validate current configuration."""
        errors: List[str] = []
        warnings: List[str] = []

        arena_path = self.settings.arena_path
        if arena_path:
            if not arena_path.is_dir():
                errors.append(f"Arena path does not exist: {arena_path}")
            else:
                archive_path = self.settings.paths.archive_path
                if archive_path is not None and not archive_path.exists():
                    warnings.append(
                        f"Archive not found, only loose files will be used: {archive_path}"
                    )
        else:
            warnings.append("Arena path not set")

        exe_data_path = self.settings.exe_data_path
        if exe_data_path is not None and not exe_data_path.is_file():
            errors.append(f"Executable data file does not exist: {exe_data_path}")

        for message in errors:
            logger.debug(f"Settings error: {message}")

        return ValidationResult(
            is_valid=len(errors) == 0, errors=errors, warnings=warnings
        )
