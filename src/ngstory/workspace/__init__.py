"""Workspace module for reading and editing angular.json.

Loads the workspace into immutable snapshots, finds projects that still need
Storybook, and commits new storybook/build-storybook targets atomically.
"""

from .config import (
    BUILD_STORYBOOK_TARGET,
    CONFIG_FOLDER_NAME,
    STORYBOOK_TARGET,
    WORKSPACE_FILE,
    LoadedWorkspace,
    MutatedWorkspace,
    ProjectSettings,
    PromptFn,
    WrittenWorkspace,
    add_entries,
    build_addon_entries,
    config_folder_for,
    get_project,
    list_projects,
    load_workspace,
    normalize_project_type,
    projects_without_addon,
    select_project_name,
    write_workspace,
)

__all__ = [
    # Constants
    "WORKSPACE_FILE",
    "CONFIG_FOLDER_NAME",
    "STORYBOOK_TARGET",
    "BUILD_STORYBOOK_TARGET",
    # Data classes
    "ProjectSettings",
    "LoadedWorkspace",
    "MutatedWorkspace",
    "WrittenWorkspace",
    "PromptFn",
    # Functions
    "load_workspace",
    "list_projects",
    "get_project",
    "projects_without_addon",
    "select_project_name",
    "build_addon_entries",
    "add_entries",
    "write_workspace",
    "config_folder_for",
    "normalize_project_type",
]
