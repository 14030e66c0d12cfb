"""Serve command for the cmdrest API server."""

import os
from pathlib import Path
from typing import Annotated

import typer
import uvicorn

from cmdrest.cli.helpers import get_config_path_from_context, get_rich_toolkit
from cmdrest.config.settings import ConfigurationError, Settings
from cmdrest.core.errors import HookLoadError
from cmdrest.core.logging import get_logger, setup_logging

from ..options.server_options import validate_log_level, validate_port


def _export_overrides(settings: Settings, config: Path | None) -> None:
    """Pass effective settings to worker processes started from an import string."""
    os.environ["SERVER__HOST"] = settings.server.host
    os.environ["SERVER__PORT"] = str(settings.server.port)
    os.environ["LOGGING__LEVEL"] = settings.logging.level
    if settings.logging.file:
        os.environ["LOGGING__FILE"] = settings.logging.file
    if config is not None:
        os.environ["CONFIG_FILE"] = str(config)


def _run_local_server(settings: Settings, config: Path | None) -> None:
    """Run the server locally."""
    from cmdrest.api.app import create_app

    toolkit = get_rich_toolkit()
    logger = get_logger(__name__)

    toolkit.print_title(
        f"Starting cmdrest on {settings.server_url}", tag="cmdrest"
    )
    logger.debug(
        "server_starting",
        host=settings.server.host,
        port=settings.server.port,
        url=settings.server_url,
    )

    if settings.server.reload or settings.server.workers > 1:
        _export_overrides(settings, config)
        uvicorn.run(
            app="cmdrest.api.app:create_app",
            factory=True,
            host=settings.server.host,
            port=settings.server.port,
            reload=settings.server.reload,
            workers=settings.server.workers,
            log_config=None,
            access_log=False,
            server_header=False,
            reload_includes=["cmdrest"] if settings.server.reload else None,
        )
        return

    uvicorn.run(
        app=create_app(settings),
        host=settings.server.host,
        port=settings.server.port,
        log_config=None,
        access_log=False,
        server_header=False,
    )


def api(
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to configuration file (TOML)",
            exists=True,
            file_okay=True,
            dir_okay=False,
            readable=True,
            rich_help_panel="Configuration",
        ),
    ] = None,
    port: Annotated[
        int | None,
        typer.Option(
            "--port",
            "-p",
            help="Port to run the server on. Hooks may restrict themselves to it",
            callback=validate_port,
            rich_help_panel="Server Settings",
        ),
    ] = None,
    host: Annotated[
        str | None,
        typer.Option(
            "--host",
            "-h",
            help="Host to bind the server to",
            rich_help_panel="Server Settings",
        ),
    ] = None,
    reload: Annotated[
        bool | None,
        typer.Option(
            "--reload/--no-reload",
            help="Enable auto-reload for development",
            rich_help_panel="Server Settings",
        ),
    ] = None,
    log_level: Annotated[
        str | None,
        typer.Option(
            "--log-level",
            help="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
            callback=validate_log_level,
            rich_help_panel="Server Settings",
        ),
    ] = None,
    log_file: Annotated[
        str | None,
        typer.Option(
            "--log-file",
            help="Path to JSON log file",
            rich_help_panel="Server Settings",
        ),
    ] = None,
) -> None:
    """Start the cmdrest API server."""
    toolkit = get_rich_toolkit()
    try:
        if config is None:
            config = get_config_path_from_context()

        cli_context = {
            "port": port,
            "host": host,
            "reload": reload,
            "log_level": log_level,
            "log_file": log_file,
        }
        settings = Settings.from_config(config_path=config, cli_context=cli_context)

        setup_logging(
            json_logs=settings.logging.json_logs,
            log_level_name=settings.logging.level,
            log_file=settings.logging.file,
            colors=settings.logging.colors,
        )
        get_logger(__name__).debug(
            "configuration_loaded",
            host=settings.server.host,
            port=settings.server.port,
            log_level=settings.logging.level,
            executable=settings.commands.executable,
        )

        _run_local_server(settings, config)

    except ConfigurationError as e:
        toolkit.print(f"Configuration error: {e}", tag="error")
        raise typer.Exit(1) from e
    except HookLoadError as e:
        toolkit.print(f"Hook error: {e}", tag="error")
        raise typer.Exit(1) from e
    except OSError as e:
        toolkit.print(
            f"Server startup failed (port/permission issue): {e}", tag="error"
        )
        raise typer.Exit(1) from e
