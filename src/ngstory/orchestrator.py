"""Storybook integration for one project of an Angular workspace.

integrate() makes every decision and performs the single angular.json write.
Package installs and template copies are left to the caller, which gets the
project identity and config folder back in an IntegrationResult.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from .exceptions import AlreadyIntegrated, NoProjects
from .versions import DEFAULT_THRESHOLD, Variant, VersionPair, select_variant
from .workspace import (
    PromptFn,
    add_entries,
    config_folder_for,
    get_project,
    list_projects,
    load_workspace,
    projects_without_addon,
    select_project_name,
    write_workspace,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IntegrationResult:
    """What was integrated and where its config lives."""

    project_name: str
    config_folder: str
    root: str
    project_type: str
    variant: Variant
    single_project: bool
    workspace_path: Path
    use_compodoc: bool = False


def integrate(
    workspace_path: Path,
    versions: VersionPair,
    prompt_fn: PromptFn,
    *,
    use_compodoc: bool = False,
    compodoc_fn: Callable[[], bool] | None = None,
    threshold: str = DEFAULT_THRESHOLD,
) -> IntegrationResult:
    """Add Storybook targets to one project of the workspace.

    Nothing is written unless a project has been selected and its targets
    built, so every failure before the write leaves angular.json untouched.

    Args:
        workspace_path: angular.json, or the directory holding it.
        versions: Declared @angular/core versions.
        prompt_fn: Asked to choose when several projects are eligible.
        use_compodoc: Enable Compodoc in the generated targets.
        compodoc_fn: Asked whether to use Compodoc once a project is chosen.
            Overrides ``use_compodoc`` when given.
        threshold: First Angular version that uses webpack 5.

    Raises:
        NoProjects: The workspace declares no projects.
        AlreadyIntegrated: Every project already has a storybook target.
        MissingDependency: No @angular/core version could be read.
        WriteFailed: angular.json could not be replaced.
    """
    workspace = load_workspace(workspace_path)

    projects = list_projects(workspace)
    if not projects:
        raise NoProjects(workspace.path)

    eligible = projects_without_addon(workspace)
    if not eligible:
        raise AlreadyIntegrated(workspace.path)

    variant = select_variant(versions.regular, versions.dev, threshold)

    project_name = select_project_name(eligible, prompt_fn)
    logger.info(f"Adding Storybook support to project '{project_name}'")

    project = get_project(workspace, project_name)
    if compodoc_fn is not None:
        use_compodoc = compodoc_fn()
    config_folder = config_folder_for(project.root)

    mutated = add_entries(
        workspace,
        project_name,
        config_folder,
        variant,
        use_compodoc=use_compodoc,
    )
    write_workspace(mutated)

    return IntegrationResult(
        project_name=project_name,
        config_folder=config_folder,
        root=project.root,
        project_type=project.project_type,
        variant=variant,
        single_project=len(projects) == 1,
        workspace_path=workspace.path,
        use_compodoc=use_compodoc,
    )
