"""Storybook config folder scaffolding.

Copies the bundled Angular templates into a project's config folder, writes
the generated main.ts and adds the example stories to the project sources.
"""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path

from .versions import Variant
from .workspace import normalize_project_type

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).parent / "templates" / "angular"
STORIES_TEMPLATE_DIR = TEMPLATES_DIR / "stories"

MAIN_CONFIG_FILE = "main.ts"
PREVIEW_FILE = "preview.ts"

COMPODOC_PREVIEW_PREFIX = """\
import { setCompodocJson } from '@storybook/addon-docs/angular';
import docJson from '../documentation.json';
setCompodocJson(docJson);
"""

_MAIN_TEMPLATE = """\
import type {{ StorybookConfig }} from '@storybook/core-common';

const config: StorybookConfig = {{
  stories: ['../src/**/*.stories.mdx', '../src/**/*.stories.@(js|jsx|ts|tsx)'],
  addons: ['@storybook/addon-links', '@storybook/addon-essentials', '@storybook/addon-interactions'],
  framework: '@storybook/angular',
  core: {{
    builder: '{builder}',
  }},
}};

module.exports = config;
"""

BUILDERS = {
    Variant.WEBPACK4: "webpack4",
    Variant.WEBPACK5: "@storybook/builder-webpack5",
}


@dataclass
class CopyReport:
    """Files written and files left alone by copy_template()."""

    copied: list[Path] = field(default_factory=list)
    skipped: list[Path] = field(default_factory=list)


def template_dir(project_type: str | None) -> Path:
    """Bundled template folder for a project type."""
    return TEMPLATES_DIR / normalize_project_type(project_type)


def stories_folder_for(root: str) -> str:
    """Where the example stories go for a project root."""
    return f"{root}/src/stories" if root else "src/stories"


def copy_template(source: Path, destination: Path) -> CopyReport:
    """Copy every file under ``source`` into ``destination`` verbatim.

    Existing files are never overwritten; they are listed in ``skipped``.
    """
    report = CopyReport()
    for src in sorted(p for p in source.rglob("*") if p.is_file()):
        target = destination / src.relative_to(source)
        if target.exists():
            logger.warning(f"Not overwriting existing file {target}")
            report.skipped.append(target)
            continue
        target.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(src, target)
        report.copied.append(target)

    logger.debug(f"Copied {len(report.copied)} template file(s) to {destination}")
    return report


def render_main_config(variant: Variant) -> str:
    """main.ts contents for the given builder variant."""
    return _MAIN_TEMPLATE.format(builder=BUILDERS[variant])


def write_main_config(config_dir: Path, variant: Variant) -> Path | None:
    """Write main.ts unless one exists. Returns the path if written."""
    path = config_dir / MAIN_CONFIG_FILE
    if path.exists():
        logger.warning(f"Not overwriting existing file {path}")
        return None
    config_dir.mkdir(parents=True, exist_ok=True)
    path.write_text(render_main_config(variant), encoding="utf-8")
    return path


def apply_preview_prefix(config_dir: Path, prefix: str) -> bool:
    """Prepend ``prefix`` to preview.ts. Returns False if already present."""
    path = config_dir / PREVIEW_FILE
    current = path.read_text(encoding="utf-8") if path.exists() else ""
    if current.startswith(prefix):
        return False
    path.write_text(prefix + "\n" + current, encoding="utf-8")
    return True
