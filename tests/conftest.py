"""Shared fixtures for ngstory tests."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Callable

import pytest

WorkspaceFactory = Callable[..., Path]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep NGSTORY_* variables from the developer's shell out of tests."""
    for key in list(os.environ):
        if key.startswith("NGSTORY_"):
            monkeypatch.delenv(key, raising=False)


def app_project(root: str = "", **extra: Any) -> dict[str, Any]:
    """A minimal angular.json project entry."""
    project: dict[str, Any] = {
        "projectType": "application",
        "root": root,
        "sourceRoot": f"{root}/src" if root else "src",
        "prefix": "app",
        "architect": {
            "build": {"builder": "@angular-devkit/build-angular:browser"},
            "serve": {"builder": "@angular-devkit/build-angular:dev-server"},
        },
    }
    project.update(extra)
    return project


@pytest.fixture
def make_workspace(tmp_path: Path) -> WorkspaceFactory:
    """Write angular.json (and package.json) into tmp_path.

    Returns a factory taking the projects mapping. ``angular_version`` and
    ``dev_angular_version`` fill package.json; pass ``manifest=False`` to skip
    it.
    """

    def _make(
        projects: dict[str, Any] | None,
        *,
        angular_version: str | None = "^13.2.0",
        dev_angular_version: str | None = None,
        manifest: bool = True,
        indent: int | str = 2,
    ) -> Path:
        document: dict[str, Any] = {
            "$schema": "./node_modules/@angular/cli/lib/config/schema.json",
            "version": 1,
            "newProjectRoot": "projects",
        }
        if projects is not None:
            document["projects"] = projects
        document["cli"] = {"analytics": False}

        path = tmp_path / "angular.json"
        path.write_text(json.dumps(document, indent=indent) + "\n", encoding="utf-8")

        if manifest:
            package: dict[str, Any] = {
                "name": "demo",
                "version": "0.0.0",
                "scripts": {"ng": "ng", "start": "ng serve"},
            }
            if angular_version:
                package["dependencies"] = {"@angular/core": angular_version}
            if dev_angular_version:
                package["devDependencies"] = {"@angular/core": dev_angular_version}
            (tmp_path / "package.json").write_text(
                json.dumps(package, indent=2) + "\n", encoding="utf-8"
            )
        return path

    return _make
