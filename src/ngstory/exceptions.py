"""Exceptions raised while integrating Storybook into a workspace."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .workspace.config import MutatedWorkspace


class NgStoryError(Exception):
    """Base class for all ngstory errors."""


class ConfigNotFound(NgStoryError):
    """A workspace or manifest file does not exist."""

    def __init__(self, path: Path | str, kind: str = "angular.json") -> None:
        self.path = Path(path)
        self.kind = kind
        super().__init__(f"{kind} not found: {self.path}")


class ConfigMalformed(NgStoryError):
    """A workspace or manifest file could not be parsed."""

    def __init__(self, path: Path | str, reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Could not parse {self.path}: {reason}")


class NoProjects(NgStoryError):
    """The workspace declares no projects."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        super().__init__(
            f"No projects found in {self.path}. Is this an Angular CLI workspace?"
        )


class AlreadyIntegrated(NgStoryError):
    """Every project already has Storybook. Nothing to do."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        super().__init__(
            "Every project in your workspace is already set up with Storybook"
        )


class NoEligibleProject(NgStoryError):
    """Project selection was asked to choose from an empty candidate list."""

    def __init__(self) -> None:
        super().__init__("No project is eligible for Storybook integration")


class UnknownProject(NgStoryError):
    """A project name does not exist in the workspace."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Project '{name}' does not exist in the workspace")


class WriteFailed(NgStoryError):
    """Writing a file failed. The previous content is untouched.

    ``workspace`` holds the pending snapshot so the write alone can be retried.
    """

    def __init__(
        self,
        path: Path | str,
        original: OSError,
        workspace: MutatedWorkspace | None = None,
    ) -> None:
        self.path = Path(path)
        self.original = original
        self.workspace = workspace
        super().__init__(f"Failed to write {self.path}: {original}")


class MissingDependency(NgStoryError):
    """No usable version of a required dependency was declared."""

    def __init__(self, dependency: str = "@angular/core") -> None:
        self.dependency = dependency
        super().__init__(
            f"Could not determine the installed version of {dependency}"
        )


class InstallFailed(NgStoryError):
    """The package manager exited with an error."""

    def __init__(self, command: list[str], returncode: int, output: str = "") -> None:
        self.command = command
        self.returncode = returncode
        self.output = output
        super().__init__(
            f"'{' '.join(command)}' exited with status {returncode}"
        )
