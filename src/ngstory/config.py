"""Configuration for ngstory.

Configuration is stored at ~/.ngstory/config.toml and organized into sections.

Configuration loading priority:
1. Environment variables (highest)
2. Config file (~/.ngstory/config.toml)
3. Defaults (lowest)

Sections:
    [core]      - Workspace file name, package manager, install behaviour
    [versions]  - Webpack 5 threshold and package versions to install
    [ui]        - Log level

Example:
    from ngstory.config import load_config

    config = load_config()
    print(config.versions.webpack5_threshold)
"""

from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import tomli_w

from .versions import DEFAULT_THRESHOLD, coerce_version

logger = logging.getLogger(__name__)

# Default config location
DEFAULT_CONFIG_DIR = Path.home() / ".ngstory"
DEFAULT_CONFIG_FILE = "config.toml"

PACKAGE_MANAGERS = ("auto", "npm", "yarn", "pnpm")
LOG_LEVELS = ("debug", "info", "warning", "error")


def _env_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def _checked_threshold(value: Any) -> str:
    if coerce_version(value) is None:
        logger.warning(f"Invalid webpack5_threshold '{value}', using {DEFAULT_THRESHOLD}")
        return DEFAULT_THRESHOLD
    return str(value)


@dataclass
class CoreConfig:
    """Core settings.

    Attributes:
        workspace_file: Workspace file name inside the project directory.
        package_manager: npm, yarn, pnpm, or auto (detect from lock files).
        skip_install: Do not install packages after editing the workspace.
    """

    workspace_file: str = "angular.json"
    package_manager: str = "auto"
    skip_install: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CoreConfig:
        """Create from dictionary."""
        package_manager = data.get("package_manager", "auto")
        if package_manager not in PACKAGE_MANAGERS:
            logger.warning(f"Unknown package_manager '{package_manager}', using auto")
            package_manager = "auto"
        return cls(
            workspace_file=data.get("workspace_file", "angular.json"),
            package_manager=package_manager,
            skip_install=bool(data.get("skip_install", False)),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "workspace_file": self.workspace_file,
            "package_manager": self.package_manager,
            "skip_install": self.skip_install,
        }


@dataclass
class VersionsConfig:
    """Version settings.

    Attributes:
        webpack5_threshold: First @angular/core version built with webpack 5.
        storybook_version: Version range for Storybook packages.
        compodoc_version: Version of @compodoc/compodoc to install.
    """

    webpack5_threshold: str = DEFAULT_THRESHOLD
    storybook_version: str = "^6.5.16"
    compodoc_version: str = "1.1.19"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> VersionsConfig:
        """Create from dictionary."""
        return cls(
            webpack5_threshold=_checked_threshold(data.get("webpack5_threshold", DEFAULT_THRESHOLD)),
            storybook_version=str(data.get("storybook_version", "^6.5.16")),
            compodoc_version=str(data.get("compodoc_version", "1.1.19")),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "webpack5_threshold": self.webpack5_threshold,
            "storybook_version": self.storybook_version,
            "compodoc_version": self.compodoc_version,
        }


@dataclass
class UIConfig:
    """Output settings.

    Attributes:
        log_level: Logging level (debug, info, warning, error).
    """

    log_level: str = "warning"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> UIConfig:
        """Create from dictionary."""
        log_level = str(data.get("log_level", "warning")).lower()
        if log_level not in LOG_LEVELS:
            log_level = "warning"
        return cls(log_level=log_level)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {"log_level": self.log_level}


@dataclass
class NgStoryConfig:
    """Main configuration container.

    Load it once with load_config() and pass it to whatever needs it.
    """

    core: CoreConfig = field(default_factory=CoreConfig)
    versions: VersionsConfig = field(default_factory=VersionsConfig)
    ui: UIConfig = field(default_factory=UIConfig)

    config_path: Path | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> NgStoryConfig:
        """Create configuration from dictionary."""
        return cls(
            core=CoreConfig.from_dict(data.get("core", {})),
            versions=VersionsConfig.from_dict(data.get("versions", {})),
            ui=UIConfig.from_dict(data.get("ui", {})),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to dictionary."""
        return {
            "core": self.core.to_dict(),
            "versions": self.versions.to_dict(),
            "ui": self.ui.to_dict(),
        }

    def apply_env_overrides(self) -> None:
        """Apply environment variable overrides to configuration."""
        if pm := os.environ.get("NGSTORY_PACKAGE_MANAGER"):
            if pm in PACKAGE_MANAGERS:
                self.core.package_manager = pm
            else:
                logger.warning(f"Ignoring NGSTORY_PACKAGE_MANAGER={pm}")
        if skip := os.environ.get("NGSTORY_SKIP_INSTALL"):
            self.core.skip_install = _env_bool(skip)
        if threshold := os.environ.get("NGSTORY_THRESHOLD"):
            self.versions.webpack5_threshold = _checked_threshold(threshold)
        if level := os.environ.get("NGSTORY_LOG_LEVEL"):
            if level.lower() in LOG_LEVELS:
                self.ui.log_level = level.lower()


def get_config_path() -> Path:
    """Get the path to the configuration file."""
    if custom_path := os.environ.get("NGSTORY_CONFIG"):
        return Path(custom_path)
    return DEFAULT_CONFIG_DIR / DEFAULT_CONFIG_FILE


def load_config(config_path: Path | None = None) -> NgStoryConfig:
    """Load configuration from TOML file.

    Args:
        config_path: Path to config file. Uses default if not specified.

    Returns:
        NgStoryConfig with settings from file and environment.
    """
    path = config_path or get_config_path()

    config = NgStoryConfig()

    if path.exists():
        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)
            config = NgStoryConfig.from_dict(data)
        except (OSError, tomllib.TOMLDecodeError) as e:
            logger.error(f"Failed to load config from {path}: {e}")
            config = NgStoryConfig()
    else:
        logger.debug(f"Config not found at {path}, using defaults")

    config.config_path = path
    config.apply_env_overrides()
    return config


def save_config(config: NgStoryConfig, config_path: Path | None = None) -> bool:
    """Save configuration to TOML file.

    Returns:
        True if saved successfully, False otherwise.
    """
    path = config_path or config.config_path or get_config_path()

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "wb") as f:
            tomli_w.dump(config.to_dict(), f)
    except OSError as e:
        logger.error(f"Failed to save config: {e}")
        return False

    config.config_path = path
    logger.info(f"Saved config to {path}")
    return True


def format_config_for_display(config: NgStoryConfig) -> str:
    """Render configuration as TOML text for display."""
    return tomli_w.dumps(config.to_dict())
