"""Hook loading settings."""

from typing import Any

from pydantic import BaseModel, Field, field_validator


class HookEntry(BaseModel):
    """One configured request-alter hook."""

    path: str = Field(
        description="Import path of the hook in 'package.module:attribute' form",
    )

    ports: list[str] | None = Field(
        default=None,
        description="Only run the hook for these listening ports (exact string match)",
    )

    priority: int | None = Field(
        default=None,
        description="Lower values run first; defaults to the hook's own priority, then 500",
    )

    options: dict[str, Any] = Field(
        default_factory=dict,
        description="Keyword arguments for a hook class, e.g. `allowed` or `addresses`",
    )

    enabled: bool = Field(default=True)

    @field_validator("path")
    @classmethod
    def validate_path(cls, v: str) -> str:
        module, sep, attr = v.partition(":")
        if not sep or not module or not attr:
            raise ValueError(f"Hook path must look like 'module:attribute', got {v!r}")
        return v

    @field_validator("ports", mode="before")
    @classmethod
    def coerce_ports(cls, v: object) -> object:
        # TOML users tend to write ports as integers
        if isinstance(v, list):
            return [str(p) for p in v]
        return v


class HookSettings(BaseModel):
    """Which hooks are registered at startup."""

    request_alter: list[HookEntry] = Field(
        default_factory=list,
        description="Request-alter hooks loaded from import paths",
    )

    discover_entry_points: bool = Field(
        default=True,
        description="Also load hooks published under the 'cmdrest.hooks' entry point group",
    )

    strict: bool = Field(
        default=False,
        description="Fail startup when a hook cannot be loaded instead of skipping it",
    )
