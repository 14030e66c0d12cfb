"""Inbound request models."""

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator


OptionValue = str | bool


class IncomingRequest(BaseModel):
    """A REST-style command invocation request.

    Frozen so hooks cannot alter it in place; a hook expresses any change
    through the value it returns.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    alias: Annotated[
        str, Field(description="Target environment or site alias, e.g. '@self'")
    ] = "@self"
    command: Annotated[str, Field(description="Name of the command to execute")]
    args: Annotated[
        tuple[str, ...], Field(description="Ordered positional arguments")
    ] = ()
    options: Annotated[
        dict[str, OptionValue],
        Field(description="Option name to value; True marks a bare flag"),
    ] = Field(default_factory=dict)

    @field_validator("command")
    @classmethod
    def validate_command(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("command must not be empty")
        if any(ch.isspace() for ch in v):
            raise ValueError("command must not contain whitespace")
        return v

    @field_validator("options", mode="before")
    @classmethod
    def stringify_numbers(cls, v: object) -> object:
        if isinstance(v, dict):
            return {
                k: str(val)
                if isinstance(val, int | float) and not isinstance(val, bool)
                else val
                for k, val in v.items()
            }
        return v

    @field_validator("options")
    @classmethod
    def validate_options(cls, v: dict[str, OptionValue]) -> dict[str, OptionValue]:
        for name in v:
            if not name or not name.strip():
                raise ValueError("option names must not be empty")
        return v


class CallerContext(BaseModel):
    """Network origin of a request as reported by the transport.

    ``ip_address`` and ``host`` can be spoofed by non-browser clients. The
    server passes them to hooks verbatim and never decides anything on them.
    """

    model_config = ConfigDict(frozen=True)

    ip_address: str = ""
    host: str = ""
    port: str
