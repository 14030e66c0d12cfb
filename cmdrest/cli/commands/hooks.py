"""CLI command listing the registered request-alter hooks."""

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from cmdrest.cli.helpers import get_config_path_from_context, get_rich_toolkit
from cmdrest.config.settings import ConfigurationError, Settings
from cmdrest.core.errors import HookLoadError
from cmdrest.hooks.loader import load_hooks
from cmdrest.hooks.registry import HookRegistration, HookRegistry


def build_hooks_table(registrations: list[HookRegistration], port: str | None) -> Table:
    table = Table(title="Request-alter hooks (invocation order)")
    table.add_column("#", justify="right")
    table.add_column("Name", style="cyan")
    table.add_column("Ports")
    table.add_column("Priority", justify="right")
    table.add_column("Active", justify="center")

    for index, registration in enumerate(registrations, start=1):
        ports = ", ".join(sorted(registration.ports)) if registration.ports else "all"
        active = "-" if port is None else (
            "yes" if registration.matches_port(port) else "no"
        )
        table.add_row(
            str(index), registration.name, ports, str(registration.priority), active
        )
    return table


def list_hooks(
    port: Annotated[
        str | None,
        typer.Option("--port", "-p", help="Show which hooks would run on this port"),
    ] = None,
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to configuration file (TOML)",
            exists=True,
            dir_okay=False,
        ),
    ] = None,
) -> None:
    """List configured and discovered request-alter hooks."""
    toolkit = get_rich_toolkit()
    try:
        settings = Settings.from_config(
            config_path=config or get_config_path_from_context()
        )
        registry = HookRegistry()
        load_hooks(registry, settings.hooks)
    except (ConfigurationError, HookLoadError) as e:
        toolkit.print(str(e), tag="error")
        raise typer.Exit(1) from e

    registrations = registry.get_alter_hooks()
    if not registrations:
        toolkit.print(
            "No hooks registered: every request runs the command and returns its JSON output.",
            tag="hook",
        )
        return

    Console().print(build_hooks_table(registrations, port))
