"""package.json access and package manager commands.

Reads declared dependency versions, registers npm scripts, and installs
Storybook's dev dependencies with npm, yarn or pnpm.
"""

from __future__ import annotations

import json
import logging
import subprocess
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

from .exceptions import ConfigMalformed, ConfigNotFound, InstallFailed, WriteFailed
from .utils.files import atomic_write_text, dump_json_like
from .versions import VersionPair

logger = logging.getLogger(__name__)

MANIFEST_FILE = "package.json"


class PackageManagerKind(str, Enum):
    """Supported Node package managers."""

    NPM = "npm"
    YARN = "yarn"
    PNPM = "pnpm"


# Lock file -> manager, checked in order
LOCK_FILES = {
    "yarn.lock": PackageManagerKind.YARN,
    "pnpm-lock.yaml": PackageManagerKind.PNPM,
    "package-lock.json": PackageManagerKind.NPM,
}

INSTALL_COMMANDS = {
    PackageManagerKind.NPM: ["npm", "install", "--save-dev"],
    PackageManagerKind.YARN: ["yarn", "add", "--dev"],
    PackageManagerKind.PNPM: ["pnpm", "add", "--save-dev"],
}


def _read_manifest_text(path: Path) -> tuple[str, dict[str, Any]]:
    if not path.is_file():
        raise ConfigNotFound(path, kind=MANIFEST_FILE)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigNotFound(path, kind=MANIFEST_FILE) from e

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ConfigMalformed(path, f"{e.msg} at line {e.lineno}") from e
    if not isinstance(data, dict):
        raise ConfigMalformed(path, "top level is not an object")
    return text, data


def read_manifest(directory: Path) -> dict[str, Any]:
    """Load package.json from ``directory``.

    Raises:
        ConfigNotFound: There is no package.json.
        ConfigMalformed: It is not a JSON object.
    """
    _, data = _read_manifest_text(Path(directory) / MANIFEST_FILE)
    return data


def dependency_versions(manifest: dict[str, Any], name: str) -> VersionPair:
    """Declared versions of ``name`` in dependencies and devDependencies."""

    def _lookup(section: str) -> str | None:
        deps = manifest.get(section)
        if not isinstance(deps, dict):
            return None
        value = deps.get(name)
        return value if isinstance(value, str) else None

    return VersionPair(regular=_lookup("dependencies"), dev=_lookup("devDependencies"))


def detect_package_manager(cwd: Path, preferred: str = "auto") -> PackageManagerKind:
    """Pick a package manager from config or from lock files.

    Args:
        cwd: Workspace directory.
        preferred: 'npm', 'yarn', 'pnpm', or 'auto' to look at lock files.
    """
    if preferred and preferred != "auto":
        return PackageManagerKind(preferred)

    for lock_file, kind in LOCK_FILES.items():
        if (cwd / lock_file).exists():
            return kind
    return PackageManagerKind.NPM


@dataclass
class PackageManager:
    """Runs package manager operations inside one workspace directory."""

    kind: PackageManagerKind
    cwd: Path

    @property
    def manifest_path(self) -> Path:
        return self.cwd / MANIFEST_FILE

    def add_scripts(self, scripts: dict[str, str]) -> None:
        """Merge ``scripts`` into package.json, keeping existing order.

        Raises:
            WriteFailed: package.json could not be replaced.
        """
        path = self.manifest_path
        text, data = _read_manifest_text(path)

        existing = data.get("scripts")
        if not isinstance(existing, dict):
            existing = {}
            data["scripts"] = existing
        existing.update(scripts)

        try:
            atomic_write_text(path, dump_json_like(data, text))
        except OSError as e:
            raise WriteFailed(path, e) from e
        logger.info(f"Added scripts to {path}: {', '.join(scripts)}")

    def install_command(self, packages: dict[str, str]) -> list[str]:
        """Dev-install command for ``packages`` (name -> version or '')."""
        specs = [f"{name}@{version}" if version else name for name, version in packages.items()]
        return [*INSTALL_COMMANDS[self.kind], *specs]

    def install(self, packages: dict[str, str]) -> None:
        """Install ``packages`` as dev dependencies.

        Raises:
            InstallFailed: The package manager exited non-zero or is missing.
        """
        if not packages:
            return

        command = self.install_command(packages)
        logger.info(f"Running: {' '.join(command)}")
        try:
            result = subprocess.run(
                command,
                cwd=self.cwd,
                capture_output=True,
                text=True,
            )
        except FileNotFoundError as e:
            raise InstallFailed(command, 127, str(e)) from e

        if result.returncode != 0:
            raise InstallFailed(command, result.returncode, result.stderr or result.stdout)
