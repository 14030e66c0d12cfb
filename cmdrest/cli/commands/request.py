"""Process a single command request without starting the server.

The request runs through the same hooks and default invocation as an HTTP
request would, which makes it handy for trying out hooks.
"""

import asyncio
import sys
from pathlib import Path
from typing import Annotated

import typer

from cmdrest.cli.helpers import get_config_path_from_context, get_rich_toolkit
from cmdrest.config.settings import ConfigurationError, Settings
from cmdrest.core.errors import CmdRestError
from cmdrest.core.logging import setup_logging
from cmdrest.models.requests import CallerContext, IncomingRequest, OptionValue
from cmdrest.services.container import create_service_container
from cmdrest.services.request_processor import ProcessedResponse

from ..options.server_options import parse_option, validate_options, validate_port


def run_request(
    settings: Settings, caller: CallerContext, request: IncomingRequest
) -> ProcessedResponse:
    """Build the services and process one request."""
    container = create_service_container(settings)
    return asyncio.run(container.request_processor.process(caller, request))


def request_command(
    alias: Annotated[str, typer.Argument(help="Site alias, e.g. @self")],
    command: Annotated[str, typer.Argument(help="Command to run")],
    args: Annotated[
        list[str] | None,
        typer.Argument(help="Positional arguments for the command"),
    ] = None,
    option: Annotated[
        list[str] | None,
        typer.Option(
            "--option",
            "-o",
            help="Command option as name=value, or name for a flag (repeatable)",
            callback=validate_options,
        ),
    ] = None,
    port: Annotated[
        int | None,
        typer.Option(
            "--port",
            "-p",
            help="Port reported to hooks (defaults to the configured server port)",
            callback=validate_port,
        ),
    ] = None,
    ip_address: Annotated[
        str,
        typer.Option("--ip", help="Caller IP address reported to hooks"),
    ] = "127.0.0.1",
    caller_host: Annotated[
        str,
        typer.Option("--caller-host", help="Caller host name reported to hooks"),
    ] = "localhost",
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
    """Process one request through the hooks and print the response body."""
    toolkit = get_rich_toolkit()
    try:
        settings = Settings.from_config(
            config_path=config or get_config_path_from_context(),
            cli_context={"port": port},
        )
    except ConfigurationError as e:
        toolkit.print(f"Configuration error: {e}", tag="error")
        raise typer.Exit(1) from e

    setup_logging(
        json_logs=settings.logging.json_logs,
        log_level_name=settings.logging.level,
        log_file=settings.logging.file,
        colors=settings.logging.colors,
    )

    options: dict[str, OptionValue] = dict(parse_option(o) for o in option or [])
    try:
        incoming = IncomingRequest(
            alias=alias, command=command, args=tuple(args or ()), options=options
        )
    except ValueError as e:
        toolkit.print(f"Invalid request: {e}", tag="error")
        raise typer.Exit(2) from e

    caller = CallerContext(
        ip_address=ip_address, host=caller_host, port=settings.listening_port
    )

    try:
        response = run_request(settings, caller, incoming)
    except CmdRestError as e:
        toolkit.print(f"{e.error_type}: {e.message}", tag="error")
        raise typer.Exit(1) from e

    sys.stdout.write(response.text())
    if not response.content.endswith(b"\n"):
        sys.stdout.write("\n")

    if response.status_code >= 400:
        raise typer.Exit(1)
