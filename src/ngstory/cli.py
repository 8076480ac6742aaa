"""ngstory CLI - add Storybook to Angular workspaces.

Main entry point for the ngstory command.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from . import __version__
from .config import NgStoryConfig, format_config_for_display, get_config_path, load_config, save_config
from .exceptions import AlreadyIntegrated, NgStoryError
from .generator import InitSummary, run_init
from .utils.errors import handle_exception, is_debug_mode, set_debug_mode
from .workspace import WORKSPACE_FILE, list_projects, load_workspace

console = Console()


def setup_logging(level: str) -> None:
    """Route log records through rich."""
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def prompt_for_project(candidates: Sequence[str]) -> str:
    """Ask which project should get Storybook."""
    console.print("[bold]Several projects can get Storybook:[/bold]")
    for name in candidates:
        console.print(f"  • {name}")
    return click.prompt(
        "Project",
        type=click.Choice(list(candidates)),
        default=candidates[0],
    )


def confirm_compodoc() -> bool:
    """Ask whether Compodoc should generate the docs."""
    return click.confirm("Do you want to use Compodoc for documentation?", default=True)


def print_init_summary(summary: InitSummary) -> None:
    """Show what init changed."""
    result = summary.integration
    console.print()
    console.print(f"[green]✓ Added Storybook to '{result.project_name}'[/green]")
    console.print(f"[dim]  Config folder: {result.config_folder}[/dim]")
    console.print(f"[dim]  Builder: {result.variant.value}[/dim]")

    if summary.installed:
        console.print(f"[green]✓ Installed {len(summary.installed)} package(s)[/green]")
    if summary.scripts:
        console.print(f"[green]✓ Added scripts: {', '.join(summary.scripts)}[/green]")
    if summary.stories.copied:
        console.print(f"[green]✓ Added example stories to {summary.stories.copied[0].parent}[/green]")
    for path in summary.copied.skipped + summary.stories.skipped:
        console.print(f"[yellow]  Kept existing {path}[/yellow]")

    console.print()
    console.print(f"Run [cyan]ng run {result.project_name}:storybook[/cyan] to start Storybook")


@click.group(invoke_without_command=True)
@click.option("--version", "-v", is_flag=True, help="Show version and exit")
@click.option("--debug", "-d", is_flag=True, help="Enable debug mode with verbose error output")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Use a different config file",
)
@click.pass_context
def main(ctx: click.Context, version: bool, debug: bool, config_path: Path | None) -> None:
    """ngstory - add Storybook to an Angular CLI workspace.

    Use --debug for verbose error output with stack traces.
    """
    if debug:
        set_debug_mode(True)

    if version:
        console.print(f"ngstory version {__version__}")
        return

    config = load_config(config_path)
    setup_logging("debug" if is_debug_mode() else config.ui.log_level)
    ctx.obj = config

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@main.command()
@click.argument(
    "path",
    required=False,
    type=click.Path(exists=True, file_okay=False, path_type=Path),
)
@click.option("--yes", "-y", is_flag=True, help="Accept defaults (enables Compodoc)")
@click.option("--compodoc/--no-compodoc", default=None, help="Use Compodoc for docs")
@click.option("--skip-install/--install", default=None, help="Skip or force package installation")
@click.option(
    "--package-manager",
    "-p",
    type=click.Choice(["auto", "npm", "yarn", "pnpm"]),
    help="Package manager to install with",
)
@click.pass_obj
def init(
    config: NgStoryConfig,
    path: Path | None,
    yes: bool,
    compodoc: bool | None,
    skip_install: bool | None,
    package_manager: str | None,
) -> None:
    """Add Storybook to a project in the current workspace.

    When several projects do not have Storybook yet you are asked to pick one.

    \\b
    Examples:
        ngstory init                  # Integrate the workspace in cwd
        ngstory init --yes            # No questions, Compodoc enabled
        ngstory init --skip-install   # Only edit files
    """
    workspace_dir = path or Path.cwd()
    if package_manager:
        config.core.package_manager = package_manager

    compodoc_fn = None
    if compodoc is None and yes:
        compodoc = True
    elif compodoc is None:
        compodoc_fn = confirm_compodoc

    console.print(f"[bold cyan]Adding Storybook to {workspace_dir.resolve().name}[/bold cyan]")

    try:
        summary = run_init(
            workspace_dir,
            config,
            prompt_for_project,
            use_compodoc=bool(compodoc),
            compodoc_fn=compodoc_fn,
            skip_install=skip_install,
        )
    except AlreadyIntegrated as e:
        console.print(f"[yellow]{e}. There is nothing to do![/yellow]")
        return
    except NgStoryError as e:
        handle_exception(console, e, context="init")
        return

    print_init_summary(summary)


@main.command()
@click.argument(
    "path",
    required=False,
    type=click.Path(exists=True, file_okay=False, path_type=Path),
)
@click.pass_obj
def projects(config: NgStoryConfig, path: Path | None) -> None:
    """List the workspace projects and whether they have Storybook."""
    workspace_dir = path or Path.cwd()
    try:
        workspace = load_workspace(workspace_dir / config.core.workspace_file)
    except NgStoryError as e:
        handle_exception(console, e, context="projects")
        return

    entries = list_projects(workspace)
    if not entries:
        console.print(f"[yellow]No projects in {WORKSPACE_FILE}[/yellow]")
        return

    table = Table(title=str(workspace.path))
    table.add_column("Project", style="cyan")
    table.add_column("Type")
    table.add_column("Root")
    table.add_column("Storybook")
    for project in entries:
        table.add_row(
            project.name,
            project.project_type,
            project.root or ".",
            "[green]yes[/green]" if project.has_addon else "[dim]no[/dim]",
        )
    console.print(table)


@main.group()
def config() -> None:
    """View and manage ngstory configuration.

    Configuration priority:
    1. Environment variables (highest)
    2. Config file (~/.ngstory/config.toml)
    3. Defaults (lowest)
    """


@config.command("show")
@click.option("--json", "-j", "as_json", is_flag=True, help="Output as JSON")
@click.pass_obj
def config_show(cfg: NgStoryConfig, as_json: bool) -> None:
    """Show current configuration."""
    if as_json:
        click.echo(json.dumps(cfg.to_dict(), indent=2))
        return
    console.print(f"[dim]# {cfg.config_path}[/dim]")
    console.print(format_config_for_display(cfg), markup=False, highlight=False)


@config.command("path")
def config_path_cmd() -> None:
    """Print the config file location."""
    click.echo(str(get_config_path()))


@config.command("init")
@click.option("--force", "-f", is_flag=True, help="Overwrite an existing config file")
@click.pass_obj
def config_init(cfg: NgStoryConfig, force: bool) -> None:
    """Write the current settings to the config file."""
    path = cfg.config_path or get_config_path()
    if path.exists() and not force:
        console.print(f"[yellow]Config already exists: {path}[/yellow]")
        console.print("[dim]Use --force to overwrite[/dim]")
        return
    if not save_config(cfg, path):
        raise click.ClickException(f"Could not write {path}")
    console.print(f"[green]✓ Wrote {path}[/green]")


if __name__ == "__main__":
    main()
