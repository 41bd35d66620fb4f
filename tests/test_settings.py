"""Tests for QSettings backed configuration."""

from pathlib import Path

from arena_assets.settings import AppSettings, ConfigVersion


class TestSettingsInitialization:
    """Test settings initialization and defaults."""

    def test_defaults(self, settings: AppSettings) -> None:
        assert settings.arena_path is None
        assert settings.archive_name == "GLOBAL.BSA"
        assert settings.exe_data_path is None
        assert settings.console_logging is True
        assert settings.console_log_level == "INFO"
        assert settings.console_use_colors is True
        assert settings.file_logging is False
        assert settings.log_file_path == "logs/arena_assets.csv"

    def test_version_stamped(self, settings: AppSettings) -> None:
        assert settings.version == ConfigVersion.CURRENT.value
        assert settings.settings.contains("app/version")

    def test_ini_file_used(self, settings: AppSettings, tmp_path: Path) -> None:
        assert Path(settings.get_settings_file_path()) == tmp_path / "settings.ini"


class TestPathSettings:
    """Test game path settings."""

    def test_exe_data_defaults_to_game_dir(self, settings: AppSettings, tmp_path: Path) -> None:
        settings.arena_path = tmp_path
        assert settings.arena_path == tmp_path
        assert settings.exe_data_path == tmp_path / "exe_data.json"
        assert settings.paths.archive_path == tmp_path / "GLOBAL.BSA"

    def test_explicit_exe_data_path(self, settings: AppSettings, tmp_path: Path) -> None:
        settings.arena_path = tmp_path
        settings.exe_data_path = tmp_path / "other.json"
        assert settings.exe_data_path == tmp_path / "other.json"

    def test_persisted_across_instances(self, tmp_path: Path) -> None:
        ini = tmp_path / "settings.ini"
        first = AppSettings(profile="p", ini_path=ini)
        first.arena_path = tmp_path
        first.archive_name = "CUSTOM.BSA"
        first.sync()

        second = AppSettings(profile="p", ini_path=ini)
        assert second.arena_path == tmp_path
        assert second.archive_name == "CUSTOM.BSA"

    def test_profiles_are_separate(self, tmp_path: Path) -> None:
        ini = tmp_path / "settings.ini"
        AppSettings(profile="a", ini_path=ini).arena_path = tmp_path
        assert AppSettings(profile="b", ini_path=ini).arena_path is None


class TestLoggingSettings:
    """Test logging settings."""

    def test_level_is_validated(self, settings: AppSettings) -> None:
        settings.console_log_level = "debug"
        assert settings.console_log_level == "DEBUG"
        settings.console_log_level = "VERBOSE"
        assert settings.console_log_level == "DEBUG"

    def test_booleans_round_trip(self, settings: AppSettings) -> None:
        settings.file_logging = True
        settings.console_use_colors = False
        assert settings.file_logging is True
        assert settings.console_use_colors is False


class TestValidation:
    """Test settings validation."""

    def test_unset_path_is_warning(self, settings: AppSettings) -> None:
        result = settings.validate()
        assert result.is_valid
        assert any("not set" in w for w in result.warnings)

    def test_missing_game_dir(self, settings: AppSettings, tmp_path: Path) -> None:
        settings.arena_path = tmp_path / "missing"
        result = settings.validate()
        assert not result.is_valid
        assert any("does not exist" in e for e in result.errors)

    def test_missing_archive_and_exe_data(self, settings: AppSettings, tmp_path: Path) -> None:
        settings.arena_path = tmp_path
        result = settings.validate()
        assert not result.is_valid
        assert any("GLOBAL.BSA" in w for w in result.warnings)
        assert any("exe_data.json" in e for e in result.errors)

    def test_complete_install(self, settings: AppSettings, arena_dir: Path) -> None:
        settings.arena_path = arena_dir
        result = settings.validate()
        assert result.is_valid
        assert result.errors == []
        assert result.warnings == []
