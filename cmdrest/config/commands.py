"""Settings for the default command invocation."""

from pydantic import BaseModel, Field


class CommandSettings(BaseModel):
    """How the server runs a command when no hook replaces the response."""

    executable: str = Field(
        default="drush",
        description="Executable invoked as `<executable> <alias> <command> [args] [--options]`",
    )

    timeout: float = Field(
        default=60.0,
        gt=0,
        description="Seconds before a running command is killed",
    )

    working_dir: str | None = Field(
        default=None,
        description="Working directory for the command (defaults to the server's cwd)",
    )
