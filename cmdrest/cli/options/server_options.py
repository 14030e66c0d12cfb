"""Server-related CLI options."""

import typer


def validate_port(
    ctx: typer.Context, param: typer.CallbackParam, value: int | None
) -> int | None:
    """Validate port number."""
    if value is None:
        return None

    if value < 1 or value > 65535:
        raise typer.BadParameter("Port must be between 1 and 65535")

    return value


def validate_log_level(
    ctx: typer.Context, param: typer.CallbackParam, value: str | None
) -> str | None:
    """Validate log level."""
    if value is None:
        return None

    valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
    if value.upper() not in valid_levels:
        raise typer.BadParameter(
            f"Log level must be one of: {', '.join(sorted(valid_levels))}"
        )

    return value.upper()


def parse_option(value: str) -> tuple[str, str | bool]:
    """Split ``name=value``; a bare ``name`` is a flag."""
    name, sep, option_value = value.partition("=")
    name = name.strip().lstrip("-")
    if not name:
        raise typer.BadParameter(f"Invalid option {value!r}, expected name=value")
    return name, option_value if sep else True


def validate_options(
    ctx: typer.Context, param: typer.CallbackParam, value: list[str] | None
) -> list[str] | None:
    """Reject malformed ``--option`` values early."""
    for item in value or []:
        parse_option(item)
    return value
