"""Tests for ngstory configuration."""

from __future__ import annotations

from pathlib import Path

import pytest

from ngstory.config import (
    CoreConfig,
    NgStoryConfig,
    UIConfig,
    VersionsConfig,
    format_config_for_display,
    get_config_path,
    load_config,
    save_config,
)


class TestSections:
    """Tests for config sections."""

    def test_defaults(self) -> None:
        config = NgStoryConfig()
        assert config.core.workspace_file == "angular.json"
        assert config.core.package_manager == "auto"
        assert config.core.skip_install is False
        assert config.versions.webpack5_threshold == "12.0.0"
        assert config.versions.compodoc_version == "1.1.19"
        assert config.ui.log_level == "warning"

    def test_core_from_dict(self) -> None:
        core = CoreConfig.from_dict({"package_manager": "pnpm", "skip_install": True})
        assert core.package_manager == "pnpm"
        assert core.skip_install is True
        assert core.workspace_file == "angular.json"

    def test_unknown_package_manager(self) -> None:
        assert CoreConfig.from_dict({"package_manager": "bower"}).package_manager == "auto"

    def test_versions_from_dict(self) -> None:
        versions = VersionsConfig.from_dict({"webpack5_threshold": "13.0.0"})
        assert versions.webpack5_threshold == "13.0.0"
        assert versions.storybook_version == "^6.5.16"

    def test_invalid_threshold_uses_default(self) -> None:
        versions = VersionsConfig.from_dict({"webpack5_threshold": "latest"})
        assert versions.webpack5_threshold == "12.0.0"

    def test_ui_log_level(self) -> None:
        assert UIConfig.from_dict({"log_level": "DEBUG"}).log_level == "debug"
        assert UIConfig.from_dict({"log_level": "loud"}).log_level == "warning"

    def test_round_trip_dict(self) -> None:
        config = NgStoryConfig()
        config.core.package_manager = "yarn"
        assert NgStoryConfig.from_dict(config.to_dict()).to_dict() == config.to_dict()


class TestLoadSave:
    """Tests for load_config() and save_config()."""

    def test_missing_file_gives_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "config.toml"
        config = load_config(path)
        assert config.to_dict() == NgStoryConfig().to_dict()
        assert config.config_path == path

    def test_load_file(self, tmp_path: Path) -> None:
        path = tmp_path / "config.toml"
        path.write_text(
            '[core]\npackage_manager = "yarn"\n\n[versions]\nwebpack5_threshold = "13.0.0"\n',
            encoding="utf-8",
        )
        config = load_config(path)
        assert config.core.package_manager == "yarn"
        assert config.versions.webpack5_threshold == "13.0.0"

    def test_invalid_toml_gives_defaults(self, tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
        path = tmp_path / "config.toml"
        path.write_text("[core\n", encoding="utf-8")
        config = load_config(path)
        assert config.core.package_manager == "auto"
        assert "Failed to load config" in caplog.text

    def test_save_and_reload(self, tmp_path: Path) -> None:
        path = tmp_path / "nested" / "config.toml"
        config = NgStoryConfig()
        config.core.skip_install = True
        config.versions.compodoc_version = "1.1.21"

        assert save_config(config, path) is True
        reloaded = load_config(path)

        assert reloaded.core.skip_install is True
        assert reloaded.versions.compodoc_version == "1.1.21"

    def test_format_for_display(self) -> None:
        text = format_config_for_display(NgStoryConfig())
        assert "[core]" in text
        assert 'webpack5_threshold = "12.0.0"' in text


class TestEnvironment:
    """Tests for environment overrides."""

    def test_config_path_env(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        monkeypatch.setenv("NGSTORY_CONFIG", str(tmp_path / "custom.toml"))
        assert get_config_path() == tmp_path / "custom.toml"

    def test_overrides(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        monkeypatch.setenv("NGSTORY_PACKAGE_MANAGER", "pnpm")
        monkeypatch.setenv("NGSTORY_SKIP_INSTALL", "yes")
        monkeypatch.setenv("NGSTORY_THRESHOLD", "14.0.0")
        monkeypatch.setenv("NGSTORY_LOG_LEVEL", "INFO")

        config = load_config(tmp_path / "config.toml")

        assert config.core.package_manager == "pnpm"
        assert config.core.skip_install is True
        assert config.versions.webpack5_threshold == "14.0.0"
        assert config.ui.log_level == "info"

    def test_invalid_package_manager_env_ignored(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        monkeypatch.setenv("NGSTORY_PACKAGE_MANAGER", "bower")
        assert load_config(tmp_path / "config.toml").core.package_manager == "auto"

    def test_invalid_threshold_env_falls_back(
        self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        monkeypatch.setenv("NGSTORY_THRESHOLD", "next")

        config = load_config(tmp_path / "config.toml")

        assert config.versions.webpack5_threshold == "12.0.0"
        assert "Invalid webpack5_threshold" in caplog.text
