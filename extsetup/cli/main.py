"""
Extension setup CLI

Commands:
- extsetup status                          Show recorded/current version and transition
- extsetup plan [--transition upgrade]     Show the installation plan without running it
- extsetup startup [--current-version V]   Run the startup install/upgrade
"""

import logging
from pathlib import Path
from typing import Optional

import click
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from extsetup import __version__
from extsetup.core.config import ExtSetupSettings, get_settings
from extsetup.core.host.actions import build_default_catalog
from extsetup.core.host.file_host import FileHost
from extsetup.core.logging_setup import configure_logging
from extsetup.core.setup.models import OrchestrationResult, Transition
from extsetup.core.setup.resolver import TransitionResolver
from extsetup.core.setup.startup import on_startup
from extsetup.core.setup.version_store import AppSettingVersionStore, read_installed_version

logger = logging.getLogger(__name__)
console = Console()

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def _settings_from_context(ctx: click.Context) -> ExtSetupSettings:
    return ctx.obj["settings"]


def _current_version(value: Optional[str]) -> str:
    if value is None:
        return __version__
    if not value.strip():
        raise click.BadParameter("must not be blank", param_hint="--current-version")
    return value.strip()


@click.group()
@click.version_option(version=__version__, prog_name="extsetup")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Host configuration document (overrides EXTSETUP_HOST_CONFIG_PATH)",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default=None,
    help="Logging level (default: from settings)",
)
@click.pass_context
def cli(ctx, config_path: Optional[Path], log_level: Optional[str]):
    """Install and upgrade the extension inside its host"""
    try:
        settings = get_settings()
    except ValidationError as e:
        raise click.ClickException(f"Invalid settings: {e}")
    updates = {}
    if config_path is not None:
        updates["host_config_path"] = config_path
    if log_level is not None:
        updates["log_level"] = log_level.upper()
    if updates:
        settings = settings.model_copy(update=updates)

    configure_logging(settings.log_level)
    ctx.ensure_object(dict)
    ctx.obj["settings"] = settings


@cli.command(name="status")
@click.option("--current-version", default=None, help="Running extension version (default: package version)")
@click.pass_context
def status_cmd(ctx, current_version: Optional[str]):
    """Show the recorded version and the transition the next startup would run"""
    settings = _settings_from_context(ctx)
    current_version = _current_version(current_version)

    host = FileHost(settings.host_config_path)
    installed = read_installed_version(AppSettingVersionStore(host, settings.version_key))
    transition = TransitionResolver.resolve(installed, current_version)

    table = Table(title="Extension Setup Status", show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    table.add_row("Host configuration", escape(str(settings.host_config_path)))
    table.add_row("Installed version", escape(installed) if installed else "[dim]not installed[/dim]")
    table.add_row("Current version", current_version)
    table.add_row("Transition", transition.value)
    console.print(table)


@cli.command(name="plan")
@click.option("--current-version", default=None, help="Running extension version (default: package version)")
@click.option(
    "--transition",
    "forced_transition",
    type=click.Choice([t.value for t in Transition]),
    default=None,
    help="Show the plan for this transition instead of the resolved one",
)
@click.pass_context
def plan_cmd(ctx, current_version: Optional[str], forced_transition: Optional[str]):
    """Show the ordered actions the next startup would run, without running them"""
    settings = _settings_from_context(ctx)
    current_version = _current_version(current_version)

    host = FileHost(settings.host_config_path)
    if forced_transition:
        transition = Transition(forced_transition)
    else:
        installed = read_installed_version(AppSettingVersionStore(host, settings.version_key))
        transition = TransitionResolver.resolve(installed, current_version)

    plan = build_default_catalog(host, settings).actions_for(transition)

    console.print(f"[bold]Transition:[/bold] {transition.value}")
    if not plan:
        console.print("Nothing to do.")
        return

    table = Table(title=f"Installation Plan ({len(plan)} actions)")
    table.add_column("#", justify="right")
    table.add_column("Action", style="cyan")
    table.add_column("Applies on")
    table.add_column("Failure policy")
    for index, action in enumerate(plan, start=1):
        policy_style = "red" if action.failure_policy.value == "fatal" else "yellow"
        table.add_row(
            str(index),
            action.name,
            action.applies_on.value,
            f"[{policy_style}]{action.failure_policy.value}[/{policy_style}]",
        )
    console.print(table)


def _print_result(result: OrchestrationResult) -> None:
    console.print(f"[bold]Transition:[/bold] {result.transition.value}")
    if result.previous_version:
        console.print(f"  Previous version: {result.previous_version}")
    console.print(f"  Current version: {result.current_version}")
    console.print(f"  Actions run: {len(result.ran_actions)}")

    for failure in result.soft_failures:
        console.print(f"  [yellow]Soft failure:[/yellow] {failure.action_name} - {escape(failure.cause)}")

    if result.fatal_failure is not None:
        console.print(
            f"[red]Setup failed:[/red] {result.fatal_failure.action_name} - "
            f"{escape(result.fatal_failure.cause)}"
        )
    elif result.version_written:
        console.print(f"[green]Recorded version {result.current_version}[/green]")
    else:
        console.print("[green]Already up to date[/green]")


@cli.command(name="startup")
@click.option("--current-version", default=None, help="Running extension version (default: package version)")
@click.pass_context
def startup_cmd(ctx, current_version: Optional[str]):
    """Run the install or upgrade for this startup"""
    settings = _settings_from_context(ctx)
    result = on_startup(current_version=current_version, settings=settings)
    _print_result(result)
    if not result.success:
        ctx.exit(1)


if __name__ == "__main__":
    cli()
