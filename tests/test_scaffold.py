"""Tests for config folder scaffolding."""

from __future__ import annotations

from pathlib import Path

from ngstory.scaffold import (
    COMPODOC_PREVIEW_PREFIX,
    STORIES_TEMPLATE_DIR,
    TEMPLATES_DIR,
    apply_preview_prefix,
    copy_template,
    render_main_config,
    stories_folder_for,
    template_dir,
    write_main_config,
)
from ngstory.versions import Variant


class TestTemplateDir:
    """Tests for template_dir()."""

    def test_application(self) -> None:
        assert template_dir("application") == TEMPLATES_DIR / "application"

    def test_library(self) -> None:
        assert template_dir("library") == TEMPLATES_DIR / "library"

    def test_fallback(self) -> None:
        assert template_dir(None) == TEMPLATES_DIR / "application"
        assert template_dir("e2e") == TEMPLATES_DIR / "application"


def test_stories_folder_for() -> None:
    assert stories_folder_for("projects/shop") == "projects/shop/src/stories"
    assert stories_folder_for("") == "src/stories"


def test_bundled_stories() -> None:
    names = {p.name for p in STORIES_TEMPLATE_DIR.iterdir()}
    assert {"Button.stories.ts", "Header.stories.ts", "Page.stories.ts", "User.ts"} <= names

    def test_bundled_templates_exist(self) -> None:
        for project_type in ("application", "library"):
            names = {p.name for p in template_dir(project_type).iterdir()}
            assert {"tsconfig.json", "preview.ts", "typings.d.ts"} <= names


class TestCopyTemplate:
    """Tests for copy_template()."""

    def test_copies_verbatim(self, tmp_path: Path) -> None:
        source = template_dir("library")
        destination = tmp_path / "projects" / "ui" / ".storybook"

        report = copy_template(source, destination)

        assert len(report.copied) == 3
        assert report.skipped == []
        assert (destination / "tsconfig.json").read_bytes() == (source / "tsconfig.json").read_bytes()

    def test_never_overwrites(self, tmp_path: Path) -> None:
        destination = tmp_path / ".storybook"
        destination.mkdir()
        (destination / "preview.ts").write_text("// mine", encoding="utf-8")

        report = copy_template(template_dir("application"), destination)

        assert report.skipped == [destination / "preview.ts"]
        assert (destination / "preview.ts").read_text(encoding="utf-8") == "// mine"
        assert (destination / "tsconfig.json").exists()


class TestMainConfig:
    """Tests for main.ts generation."""

    def test_webpack5(self) -> None:
        text = render_main_config(Variant.WEBPACK5)
        assert "builder: '@storybook/builder-webpack5'" in text
        assert "framework: '@storybook/angular'" in text

    def test_webpack4(self) -> None:
        assert "builder: 'webpack4'" in render_main_config(Variant.WEBPACK4)

    def test_write_main_config(self, tmp_path: Path) -> None:
        path = write_main_config(tmp_path / ".storybook", Variant.WEBPACK5)
        assert path == tmp_path / ".storybook" / "main.ts"
        assert "builder-webpack5" in path.read_text(encoding="utf-8")

    def test_keeps_existing_main_config(self, tmp_path: Path) -> None:
        (tmp_path / "main.ts").write_text("// mine", encoding="utf-8")
        assert write_main_config(tmp_path, Variant.WEBPACK5) is None
        assert (tmp_path / "main.ts").read_text(encoding="utf-8") == "// mine"


class TestPreviewPrefix:
    """Tests for apply_preview_prefix()."""

    def test_prepends_once(self, tmp_path: Path) -> None:
        (tmp_path / "preview.ts").write_text("export const parameters = {};\n", encoding="utf-8")

        assert apply_preview_prefix(tmp_path, COMPODOC_PREVIEW_PREFIX) is True
        assert apply_preview_prefix(tmp_path, COMPODOC_PREVIEW_PREFIX) is False

        text = (tmp_path / "preview.ts").read_text(encoding="utf-8")
        assert text.startswith("import { setCompodocJson }")
        assert text.count("setCompodocJson(docJson);") == 1
        assert text.endswith("export const parameters = {};\n")
