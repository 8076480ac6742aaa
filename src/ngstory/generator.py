"""The `ngstory init` pipeline.

Reads the Angular version from package.json, edits angular.json through
integrate(), then installs packages, registers npm scripts and scaffolds the
config folder and example stories for the chosen project.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from .config import NgStoryConfig
from .orchestrator import IntegrationResult, integrate
from .packages import PackageManager, dependency_versions, detect_package_manager, read_manifest
from .scaffold import (
    COMPODOC_PREVIEW_PREFIX,
    STORIES_TEMPLATE_DIR,
    CopyReport,
    apply_preview_prefix,
    copy_template,
    stories_folder_for,
    template_dir,
    write_main_config,
)
from .versions import Variant
from .workspace import PromptFn

logger = logging.getLogger(__name__)

ANGULAR_CORE = "@angular/core"

STORYBOOK_PACKAGES = (
    "@storybook/angular",
    "@storybook/addon-essentials",
    "@storybook/addon-interactions",
    "@storybook/addon-links",
)
WEBPACK5_PACKAGES = (
    "@storybook/builder-webpack5",
    "@storybook/manager-webpack5",
)


@dataclass
class InitSummary:
    """Everything `ngstory init` did."""

    integration: IntegrationResult
    installed: dict[str, str] = field(default_factory=dict)
    scripts: dict[str, str] = field(default_factory=dict)
    copied: CopyReport = field(default_factory=CopyReport)
    stories: CopyReport = field(default_factory=CopyReport)
    main_config: Path | None = None


def required_packages(
    config: NgStoryConfig, variant: Variant, use_compodoc: bool
) -> dict[str, str]:
    """Packages to install for the variant, mapped to their versions."""
    storybook_version = config.versions.storybook_version
    packages = {name: storybook_version for name in STORYBOOK_PACKAGES}
    if variant is Variant.WEBPACK5:
        packages.update({name: storybook_version for name in WEBPACK5_PACKAGES})
    if use_compodoc:
        packages["@compodoc/compodoc"] = config.versions.compodoc_version
    return packages


def storybook_scripts(project_name: str) -> dict[str, str]:
    """npm scripts that run the project's Storybook targets."""
    return {
        "storybook": f"ng run {project_name}:storybook",
        "build-storybook": f"ng run {project_name}:build-storybook",
    }


def run_init(
    workspace_dir: Path,
    config: NgStoryConfig,
    prompt_fn: PromptFn,
    *,
    use_compodoc: bool = False,
    compodoc_fn: Callable[[], bool] | None = None,
    skip_install: bool | None = None,
) -> InitSummary:
    """Add Storybook to a project of the workspace in ``workspace_dir``.

    Args:
        workspace_dir: Directory with angular.json and package.json.
        config: Loaded ngstory configuration.
        prompt_fn: Chooses a project when several are eligible.
        use_compodoc: Set up Compodoc for docs generation.
        compodoc_fn: Asks about Compodoc after the workspace checks pass.
        skip_install: Override ``config.core.skip_install``.

    Raises:
        NgStoryError: Any failure. angular.json is only written once a target
            project is known; later failures leave that edit in place.
    """
    workspace_dir = Path(workspace_dir)
    if skip_install is None:
        skip_install = config.core.skip_install

    manifest = read_manifest(workspace_dir)
    versions = dependency_versions(manifest, ANGULAR_CORE)

    result = integrate(
        workspace_dir / config.core.workspace_file,
        versions,
        prompt_fn,
        use_compodoc=use_compodoc,
        compodoc_fn=compodoc_fn,
        threshold=config.versions.webpack5_threshold,
    )
    summary = InitSummary(integration=result)
    use_compodoc = result.use_compodoc

    manager = PackageManager(
        kind=detect_package_manager(workspace_dir, config.core.package_manager),
        cwd=workspace_dir,
    )

    packages = required_packages(config, result.variant, use_compodoc)
    if skip_install:
        logger.info("Skipping package installation")
    else:
        manager.install(packages)
        summary.installed = packages

    # Scripts can only point at one project
    if result.single_project:
        summary.scripts = storybook_scripts(result.project_name)
        manager.add_scripts(summary.scripts)

    config_dir = workspace_dir / result.config_folder
    summary.copied = copy_template(template_dir(result.project_type), config_dir)
    summary.main_config = write_main_config(config_dir, result.variant)
    summary.stories = copy_template(
        STORIES_TEMPLATE_DIR, workspace_dir / stories_folder_for(result.root)
    )
    if use_compodoc:
        apply_preview_prefix(config_dir, COMPODOC_PREVIEW_PREFIX)

    return summary
