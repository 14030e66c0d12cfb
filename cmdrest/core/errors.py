"""Custom exceptions for the cmdrest server."""

from typing import Any


class CmdRestError(Exception):
    """Base exception for cmdrest errors."""

    def __init__(
        self,
        message: str,
        error_type: str = "internal_server_error",
        status_code: int = 500,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_type = error_type
        self.status_code = status_code
        self.details = details or {}


class ValidationError(CmdRestError):
    """Validation error (400)."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            message=message,
            error_type="invalid_request_error",
            status_code=400,
            details=details,
        )


class HookExecutionError(CmdRestError):
    """A request-alter hook raised while handling a request (500)."""

    def __init__(self, hook_name: str, cause: BaseException) -> None:
        super().__init__(
            message=f"Hook '{hook_name}' failed: {cause}",
            error_type="hook_error",
            status_code=500,
            details={"hook": hook_name, "cause": type(cause).__name__},
        )
        self.hook_name = hook_name


class HookLoadError(CmdRestError):
    """A configured hook could not be imported or instantiated."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(
            message=f"Cannot load hook '{path}': {reason}",
            error_type="hook_load_error",
            status_code=500,
            details={"path": path},
        )
        self.path = path


class CommandExecutionError(CmdRestError):
    """The command could not be started (500)."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            message=message,
            error_type="command_execution_error",
            status_code=500,
            details=details,
        )


class CommandTimeoutError(CmdRestError):
    """The command did not finish in time (504)."""

    def __init__(self, command: str, timeout: float) -> None:
        super().__init__(
            message=f"Command '{command}' timed out after {timeout:g}s",
            error_type="command_timeout_error",
            status_code=504,
            details={"command": command, "timeout": timeout},
        )


class ConfigurationError(Exception):
    """Raised when configuration loading or validation fails."""
