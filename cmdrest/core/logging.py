"""Structured logging setup for the cmdrest server.

All application logging goes through structlog. Records from the standard
library (uvicorn, httpx, ...) are routed through the same processor chain via
``structlog.stdlib.ProcessorFormatter`` so console and file output look alike.
"""

import logging
import sys
from pathlib import Path
from typing import Any

import structlog
from structlog.typing import Processor


_NOISY_LOGGERS = ("httpx", "httpcore", "asyncio", "watchfiles")


def _shared_processors() -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]


def setup_logging(
    json_logs: bool = False,
    log_level_name: str = "INFO",
    log_file: str | None = None,
    colors: bool | None = None,
) -> structlog.stdlib.BoundLogger:
    """Configure structlog and the standard library logging tree.

    Args:
        json_logs: Render console output as JSON lines instead of colored text
        log_level_name: Root log level name
        log_file: Optional path of a file that receives JSON formatted logs
        colors: Force colored console output on or off; ``None`` colors only
            when stderr is a terminal

    Returns:
        A logger bound to this module
    """
    level = getattr(logging, log_level_name.upper(), logging.INFO)
    shared = _shared_processors()

    structlog.configure(
        processors=[
            *shared,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    console_renderer: Processor
    if json_logs:
        console_renderer = structlog.processors.JSONRenderer()
    else:
        console_renderer = structlog.dev.ConsoleRenderer(
            colors=sys.stderr.isatty() if colors is None else colors
        )

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                *([structlog.processors.format_exc_info] if json_logs else []),
                console_renderer,
            ],
        )
    )

    handlers: list[logging.Handler] = [console_handler]

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(
            structlog.stdlib.ProcessorFormatter(
                foreign_pre_chain=shared,
                processors=[
                    structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                    structlog.processors.format_exc_info,
                    structlog.processors.JSONRenderer(),
                ],
            )
        )
        handlers.append(file_handler)

    root = logging.getLogger()
    root.handlers = handlers
    root.setLevel(level)

    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        uvicorn_logger = logging.getLogger(name)
        uvicorn_logger.handlers = []
        uvicorn_logger.propagate = True

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)
    logger.debug(
        "logging_configured",
        level=log_level_name.upper(),
        json_logs=json_logs,
        log_file=log_file,
    )
    return logger


def get_logger(name: str | None = None, **initial_values: Any) -> Any:
    """Get a structlog logger, optionally bound to initial values."""
    return structlog.get_logger(name, **initial_values)
