"""Default command invocation.

When no hook replaces the response the server runs::

    <executable> <alias> <command> [args...] [--name=value | --flag]

and returns everything it captured as a :class:`CommandResult`.
"""

import asyncio
import contextlib
import json
import time
from typing import Protocol

import structlog

from cmdrest.config.commands import CommandSettings
from cmdrest.core.errors import CommandExecutionError, CommandTimeoutError
from cmdrest.models.requests import IncomingRequest
from cmdrest.models.responses import CommandResult


logger = structlog.get_logger(__name__)


class Invoker(Protocol):
    """Anything able to run a request and report its full output."""

    async def invoke(self, request: IncomingRequest) -> CommandResult: ...


def build_argv(executable: str, request: IncomingRequest) -> list[str]:
    """Command line for a request. ``False`` options are left out."""
    argv = [executable, request.alias, request.command, *request.args]
    for name, value in request.options.items():
        if value is True:
            argv.append(f"--{name}")
        elif value is False:
            continue
        else:
            argv.append(f"--{name}={value}")
    return argv


def _decode_object(output: str) -> object:
    text = output.strip()
    if not text or text[0] not in "[{":
        return None
    try:
        return json.loads(text)
    except ValueError:
        return None


async def _terminate(process: asyncio.subprocess.Process) -> None:
    if process.returncode is None:
        with contextlib.suppress(ProcessLookupError):
            process.kill()
    await process.wait()


class CommandInvoker:
    """Runs commands as subprocesses."""

    def __init__(self, settings: CommandSettings):
        self.settings = settings

    async def invoke(self, request: IncomingRequest) -> CommandResult:
        """Run the command and capture its output.

        A non-zero exit status is reported in the result, not raised.

        Raises:
            CommandExecutionError: The executable could not be started
            CommandTimeoutError: The command exceeded ``settings.timeout``
        """
        argv = build_argv(self.settings.executable, request)
        logger.debug("command_invoking", argv=argv)
        started = time.perf_counter()

        try:
            process = await asyncio.create_subprocess_exec(
                *argv,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                stdin=asyncio.subprocess.DEVNULL,
                cwd=self.settings.working_dir,
            )
        except OSError as e:
            raise CommandExecutionError(
                f"Cannot start '{self.settings.executable}': {e}",
                details={"executable": self.settings.executable},
            ) from e

        try:
            stdout, stderr = await asyncio.wait_for(
                process.communicate(), timeout=self.settings.timeout
            )
        except TimeoutError as e:
            await _terminate(process)
            logger.warning(
                "command_timed_out",
                command=request.command,
                timeout=self.settings.timeout,
            )
            raise CommandTimeoutError(request.command, self.settings.timeout) from e
        except BaseException:
            # cancelled, e.g. on shutdown
            await _terminate(process)
            raise

        duration_ms = round((time.perf_counter() - started) * 1000, 2)
        exit_code = process.returncode if process.returncode is not None else -1
        output = stdout.decode("utf-8", errors="replace")

        logger.info(
            "command_completed",
            alias=request.alias,
            command=request.command,
            exit_code=exit_code,
            duration_ms=duration_ms,
        )

        return CommandResult(
            alias=request.alias,
            command=request.command,
            args=list(request.args),
            options=dict(request.options),
            output=output,
            error_output=stderr.decode("utf-8", errors="replace"),
            exit_code=exit_code,
            error_status=exit_code != 0,
            duration_ms=duration_ms,
            object=_decode_object(output),
        )
