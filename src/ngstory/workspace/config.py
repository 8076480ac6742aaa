"""Angular workspace (angular.json) loading and Storybook target edits.

A workspace moves through immutable snapshots:

    load_workspace() -> LoadedWorkspace
    add_entries()    -> MutatedWorkspace
    write_workspace()-> WrittenWorkspace

Each step returns a new value, so a failed write can be retried with the same
MutatedWorkspace without re-applying the edit.
"""

from __future__ import annotations

import copy
import json
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ..exceptions import (
    ConfigMalformed,
    ConfigNotFound,
    NoEligibleProject,
    UnknownProject,
    WriteFailed,
)
from ..utils.files import atomic_write_text, dump_json_like
from ..versions import Variant

logger = logging.getLogger(__name__)

WORKSPACE_FILE = "angular.json"
CONFIG_FOLDER_NAME = ".storybook"

# Target names written under a project's architect/targets block
STORYBOOK_TARGET = "storybook"
BUILD_STORYBOOK_TARGET = "build-storybook"

# Angular CLI uses "architect", Nx-style workspaces use "targets"
TARGET_KEYS = ("architect", "targets")

PROJECT_TYPES = ("application", "library")
DEFAULT_PROJECT_TYPE = "application"
DEFAULT_PORT = 6006

PromptFn = Callable[[Sequence[str]], str]


def normalize_project_type(value: Any) -> str:
    """Return 'library' or 'application' (the fallback for anything else)."""
    return value if value in PROJECT_TYPES else DEFAULT_PROJECT_TYPE


def config_folder_for(root: str) -> str:
    """Storybook config folder for a project root ('' means workspace root)."""
    root = root.rstrip("/")
    return f"{root}/{CONFIG_FOLDER_NAME}" if root else CONFIG_FOLDER_NAME


@dataclass(frozen=True)
class ProjectSettings:
    """The fields of one angular.json project entry that ngstory reads."""

    name: str
    root: str = ""
    project_type: str = DEFAULT_PROJECT_TYPE
    targets_key: str = "architect"
    has_addon: bool = False

    @classmethod
    def from_dict(cls, name: str, data: dict[str, Any]) -> ProjectSettings:
        """Create from a raw project entry."""
        targets_key = next((key for key in TARGET_KEYS if key in data), "architect")
        targets = data.get(targets_key)
        has_addon = isinstance(targets, dict) and STORYBOOK_TARGET in targets

        root = data.get("root", "")
        return cls(
            name=name,
            root=root if isinstance(root, str) else "",
            project_type=normalize_project_type(data.get("projectType")),
            targets_key=targets_key,
            has_addon=has_addon,
        )

    @property
    def config_folder(self) -> str:
        return config_folder_for(self.root)


@dataclass(frozen=True)
class _WorkspaceSnapshot:
    path: Path
    raw_text: str = field(repr=False)
    document: dict[str, Any] = field(repr=False)

    @property
    def projects(self) -> dict[str, Any]:
        projects = self.document.get("projects")
        return projects if isinstance(projects, dict) else {}


@dataclass(frozen=True)
class LoadedWorkspace(_WorkspaceSnapshot):
    """A workspace as read from disk, not yet edited."""


@dataclass(frozen=True)
class MutatedWorkspace(_WorkspaceSnapshot):
    """A workspace with Storybook targets added to one project, not yet saved."""

    project_name: str = ""


@dataclass(frozen=True)
class WrittenWorkspace:
    """Result of write_workspace()."""

    path: Path
    project_name: str | None = None
    changed: bool = False


def load_workspace(path: Path) -> LoadedWorkspace:
    """Load angular.json from disk.

    Args:
        path: Path to angular.json, or to the directory containing it.

    Raises:
        ConfigNotFound: The file does not exist.
        ConfigMalformed: The file is not a JSON object, or 'projects' is not
            an object of objects.
    """
    path = Path(path)
    if path.is_dir():
        path = path / WORKSPACE_FILE

    if not path.is_file():
        raise ConfigNotFound(path)

    try:
        raw_text = path.read_bytes().decode("utf-8")
    except OSError as e:
        raise ConfigNotFound(path) from e
    except UnicodeDecodeError as e:
        raise ConfigMalformed(path, f"not UTF-8 ({e.reason})") from e

    try:
        document = json.loads(raw_text.lstrip("\ufeff"))
    except json.JSONDecodeError as e:
        raise ConfigMalformed(path, f"{e.msg} at line {e.lineno}") from e

    if not isinstance(document, dict):
        raise ConfigMalformed(path, "top level is not an object")

    projects = document.get("projects", {})
    if not isinstance(projects, dict):
        raise ConfigMalformed(path, "'projects' is not an object")
    for name, entry in projects.items():
        if not isinstance(entry, dict):
            raise ConfigMalformed(path, f"project '{name}' is not an object")

    logger.debug(f"Loaded {len(projects)} project(s) from {path}")
    return LoadedWorkspace(path=path, raw_text=raw_text, document=document)


def list_projects(workspace: _WorkspaceSnapshot) -> list[ProjectSettings]:
    """All projects in declaration order."""
    return [ProjectSettings.from_dict(name, data) for name, data in workspace.projects.items()]


def get_project(workspace: _WorkspaceSnapshot, name: str) -> ProjectSettings:
    """Look up one project by name.

    Raises:
        UnknownProject: No project has that name.
    """
    data = workspace.projects.get(name)
    if data is None:
        raise UnknownProject(name)
    return ProjectSettings.from_dict(name, data)


def projects_without_addon(workspace: _WorkspaceSnapshot) -> list[str]:
    """Names of projects that have no storybook target yet."""
    return [p.name for p in list_projects(workspace) if not p.has_addon]


def select_project_name(candidates: Sequence[str], prompt_fn: PromptFn) -> str:
    """Pick the project to integrate.

    A single candidate is returned without prompting.

    Raises:
        NoEligibleProject: ``candidates`` is empty.
        UnknownProject: The prompt answered with a name not in ``candidates``.
    """
    if not candidates:
        raise NoEligibleProject()
    if len(candidates) == 1:
        return candidates[0]

    choice = prompt_fn(list(candidates))
    if choice not in candidates:
        raise UnknownProject(choice)
    return choice


def build_addon_entries(
    project_name: str,
    config_folder: str,
    variant: Variant,
    use_compodoc: bool = False,
    root: str = "",
) -> dict[str, dict[str, Any]]:
    """Build the storybook and build-storybook targets for a project."""
    base_options: dict[str, Any] = {
        "configDir": config_folder,
        "browserTarget": f"{project_name}:build",
        "webpack": variant.value,
        "compodoc": use_compodoc,
    }
    if use_compodoc:
        base_options["compodocArgs"] = ["-e", "json", "-d", root or "."]

    output_dir = f"dist/storybook/{project_name}" if root else "dist/storybook"

    return {
        STORYBOOK_TARGET: {
            "builder": "@storybook/angular:start-storybook",
            "options": {**base_options, "port": DEFAULT_PORT},
        },
        BUILD_STORYBOOK_TARGET: {
            "builder": "@storybook/angular:build-storybook",
            "options": {**base_options, "outputDir": output_dir},
        },
    }


def add_entries(
    workspace: LoadedWorkspace,
    project_name: str,
    config_folder: str,
    variant: Variant,
    use_compodoc: bool = False,
) -> MutatedWorkspace:
    """Return a copy of ``workspace`` with Storybook targets on one project.

    Existing storybook/build-storybook targets are replaced wholesale. No other
    key of the project or the document changes, and ``workspace`` itself is
    left as it was.

    Raises:
        UnknownProject: ``project_name`` is not in the workspace.
        TypeError: ``workspace`` was already mutated.
    """
    if not isinstance(workspace, LoadedWorkspace):
        raise TypeError(
            f"add_entries() expects a LoadedWorkspace, got {type(workspace).__name__}"
        )

    project = get_project(workspace, project_name)
    entries = build_addon_entries(
        project_name,
        config_folder,
        variant,
        use_compodoc=use_compodoc,
        root=project.root,
    )

    document = copy.deepcopy(workspace.document)
    project_data = document["projects"][project_name]
    targets = project_data.get(project.targets_key)
    if not isinstance(targets, dict):
        targets = {}
        project_data[project.targets_key] = targets
    targets.update(entries)

    logger.info(f"Added Storybook targets to project '{project_name}'")
    return MutatedWorkspace(
        path=workspace.path,
        raw_text=workspace.raw_text,
        document=document,
        project_name=project_name,
    )


def write_workspace(workspace: LoadedWorkspace | MutatedWorkspace) -> WrittenWorkspace:
    """Commit a workspace snapshot to its path.

    An unmodified LoadedWorkspace is not written at all. A MutatedWorkspace is
    serialized in the file's existing style and atomically replaces it.

    Raises:
        WriteFailed: The file could not be replaced. The snapshot is attached
            to the exception so the write can be retried.
    """
    if not isinstance(workspace, MutatedWorkspace):
        logger.debug(f"No changes to write for {workspace.path}")
        return WrittenWorkspace(path=workspace.path)

    text = dump_json_like(workspace.document, workspace.raw_text)
    try:
        atomic_write_text(workspace.path, text)
    except OSError as e:
        logger.error(f"Failed to write {workspace.path}: {e}")
        raise WriteFailed(workspace.path, e, workspace=workspace) from e

    logger.info(f"Saved workspace config to {workspace.path}")
    return WrittenWorkspace(
        path=workspace.path,
        project_name=workspace.project_name,
        changed=True,
    )
