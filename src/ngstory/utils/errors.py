"""Error handling utilities for the ngstory CLI.

Provides consistent error formatting with:
- Human-friendly messages
- Suggested fixes
- Documentation links
- Hidden stack traces (unless debug mode)
"""

from __future__ import annotations

import os
import sys
import traceback
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from ..exceptions import (
    AlreadyIntegrated,
    ConfigMalformed,
    ConfigNotFound,
    InstallFailed,
    MissingDependency,
    NgStoryError,
    NoEligibleProject,
    NoProjects,
    UnknownProject,
    WriteFailed,
)

if TYPE_CHECKING:
    from rich.console import Console

# Debug mode enabled by NGSTORY_DEBUG=1 or --debug flag
_debug_mode = os.environ.get("NGSTORY_DEBUG", "0") == "1"


class ErrorCategory(str, Enum):
    """Categories of errors for consistent formatting."""

    CONFIG = "config"  # angular.json / package.json problems
    FILE = "file"  # File not found, permission errors
    WORKSPACE = "workspace"  # Project selection problems
    DEPENDENCY = "dependency"  # Missing or failed packages
    INTERNAL = "internal"  # Internal/unexpected errors


DOCS_BASE = "https://storybook.js.org/docs/angular"
DOCS_LINKS = {
    ErrorCategory.CONFIG: f"{DOCS_BASE}/configure/overview",
    ErrorCategory.WORKSPACE: f"{DOCS_BASE}/get-started/install",
    ErrorCategory.DEPENDENCY: f"{DOCS_BASE}/get-started/install",
}


@dataclass
class ErrorInfo:
    """Structured error information for consistent display."""

    message: str
    category: ErrorCategory
    suggestion: str | None = None
    details: str | None = None
    docs_link: str | None = None
    original_error: Exception | None = None

    def __post_init__(self) -> None:
        if self.docs_link is None and self.category in DOCS_LINKS:
            self.docs_link = DOCS_LINKS[self.category]


def set_debug_mode(enabled: bool) -> None:
    """Enable or disable debug mode for verbose error output."""
    global _debug_mode
    _debug_mode = enabled


def is_debug_mode() -> bool:
    """Check if debug mode is enabled."""
    return _debug_mode


def format_error(error: ErrorInfo, console: Console) -> None:
    """Format and display an error with consistent styling.

    Args:
        error: Structured error information
        console: Rich console for output
    """
    console.print(f"[bold red]Error:[/bold red] {error.message}")

    if error.details:
        if _debug_mode or len(error.details) < 200:
            console.print(f"[dim]{error.details}[/dim]")

    if error.suggestion:
        console.print()
        console.print(f"[yellow]Suggestion:[/yellow] {error.suggestion}")

    if error.docs_link:
        console.print(f"[dim]Documentation: {error.docs_link}[/dim]")

    if _debug_mode and error.original_error:
        console.print()
        console.print("[dim]Stack trace (debug mode):[/dim]")
        tb_lines = traceback.format_exception(
            type(error.original_error),
            error.original_error,
            error.original_error.__traceback__,
        )
        for line in tb_lines:
            console.print(f"[dim]{line.rstrip()}[/dim]")

    if not _debug_mode and error.original_error:
        console.print()
        console.print("[dim]Set NGSTORY_DEBUG=1 or use --debug for more details[/dim]")


def error_internal(message: str, original: Exception | None = None) -> ErrorInfo:
    """Create error info for internal/unexpected errors."""
    return ErrorInfo(
        message=f"Internal error: {message}",
        category=ErrorCategory.INTERNAL,
        suggestion="This may be a bug. Please report it with the output of --debug",
        original_error=original,
    )


def classify_exception(exception: Exception, context: str = "operation") -> ErrorInfo:
    """Classify an exception into an ErrorInfo.

    Args:
        exception: The exception to classify
        context: Description of what was being done

    Returns:
        ErrorInfo with appropriate categorization
    """
    message = str(exception)

    if isinstance(exception, ConfigNotFound):
        return ErrorInfo(
            message=message,
            category=ErrorCategory.FILE,
            suggestion=f"Run ngstory from the directory containing {exception.kind}",
            original_error=exception,
        )

    if isinstance(exception, ConfigMalformed):
        return ErrorInfo(
            message=message,
            category=ErrorCategory.CONFIG,
            suggestion="Fix the JSON syntax and run the command again",
            original_error=exception,
        )

    if isinstance(exception, NoProjects):
        return ErrorInfo(
            message=message,
            category=ErrorCategory.WORKSPACE,
            suggestion="Create a project with 'ng generate application' first",
        )

    if isinstance(exception, AlreadyIntegrated):
        return ErrorInfo(
            message=f"{message}. There is nothing to do!",
            category=ErrorCategory.WORKSPACE,
            docs_link="",
        )

    if isinstance(exception, (NoEligibleProject, UnknownProject)):
        return ErrorInfo(
            message=message,
            category=ErrorCategory.WORKSPACE,
            suggestion="Run 'ngstory projects' to see the projects in this workspace",
        )

    if isinstance(exception, MissingDependency):
        return ErrorInfo(
            message=message,
            category=ErrorCategory.DEPENDENCY,
            suggestion=f"Add {exception.dependency} to package.json and install it",
        )

    if isinstance(exception, InstallFailed):
        return ErrorInfo(
            message=f"Package installation failed: {message}",
            category=ErrorCategory.DEPENDENCY,
            suggestion="Run the command yourself to see the full output",
            details=exception.output.strip() or None,
            original_error=exception,
        )

    if isinstance(exception, WriteFailed):
        return ErrorInfo(
            message=message,
            category=ErrorCategory.FILE,
            suggestion="The file was left unchanged. Check permissions and retry",
            original_error=exception,
        )

    if isinstance(exception, NgStoryError):
        return ErrorInfo(message=message, category=ErrorCategory.CONFIG, original_error=exception)

    if isinstance(exception, PermissionError):
        return ErrorInfo(
            message=f"Permission denied: {exception}",
            category=ErrorCategory.FILE,
            suggestion="Check file permissions or run with appropriate access",
            original_error=exception,
        )

    return error_internal(f"{context}: {exception}", exception)


def handle_exception(
    console: Console,
    exception: Exception,
    context: str = "operation",
    exit_code: int = 1,
    exit_on_error: bool = True,
) -> ErrorInfo:
    """Handle an exception and display a formatted error.

    Args:
        console: Rich console for output
        exception: The exception to handle
        context: Description of what was being done
        exit_code: Exit code to use if exit_on_error is True
        exit_on_error: Whether to exit after displaying the error

    Returns:
        ErrorInfo for the error (useful if not exiting)
    """
    error = classify_exception(exception, context)
    format_error(error, console)

    if exit_on_error:
        sys.exit(exit_code)

    return error
