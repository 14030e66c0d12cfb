"""Response models returned by the server."""

from typing import Annotated, Any

from pydantic import BaseModel, Field

from .requests import OptionValue


class CommandResult(BaseModel):
    """Full output of a command invocation, returned as JSON by default."""

    alias: str
    command: str
    args: list[str] = Field(default_factory=list)
    options: dict[str, OptionValue] = Field(default_factory=dict)
    output: Annotated[str, Field(description="Captured standard output")] = ""
    error_output: Annotated[str, Field(description="Captured standard error")] = ""
    exit_code: int = 0
    error_status: Annotated[
        bool, Field(description="True when the command exited non-zero")
    ] = False
    duration_ms: float = 0.0
    object: Annotated[
        Any, Field(description="Standard output decoded as JSON, if it was JSON")
    ] = None


class ErrorDetail(BaseModel):
    """Error detail information."""

    type: Annotated[str, Field(description="Error type identifier")]
    message: Annotated[str, Field(description="Human-readable error message")]


class ErrorResponse(BaseModel):
    """Error body shared by all failure responses."""

    error: ErrorDetail
