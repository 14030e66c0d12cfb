"""Main entry point for the cmdrest CLI."""

from pathlib import Path

import typer

from cmdrest._version import __version__
from cmdrest.cli.helpers import get_rich_toolkit

from .commands import api, list_hooks, request_command


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        toolkit = get_rich_toolkit()
        toolkit.print(f"cmdrest {__version__}", tag="version")
        raise typer.Exit()


app = typer.Typer(
    rich_markup_mode="rich",
    add_completion=True,
    no_args_is_help=True,
    pretty_exceptions_enable=False,
)


@app.callback()
def app_main(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    config: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to configuration file (TOML)",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
) -> None:
    """cmdrest - run commands over REST, with request-alter hooks."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config


app.command(name="serve")(api)
app.command(name="request")(request_command)
app.command(name="hooks")(list_hooks)


def main() -> None:
    """Entry point for the CLI application."""
    app()


if __name__ == "__main__":
    main()
