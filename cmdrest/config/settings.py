import os
import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from cmdrest.core.errors import ConfigurationError
from cmdrest.core.logging import get_logger

from .commands import CommandSettings
from .hooks import HookSettings
from .logging import LoggingSettings
from .server import ServerSettings
from .utils import find_toml_config_file


__all__ = ["Settings", "ConfigurationError", "get_settings"]


_NESTED_SECTIONS = ("server", "logging", "commands", "hooks")


class Settings(BaseSettings):
    """
    Configuration settings for the cmdrest server.

    Settings are loaded from environment variables, .env files, and TOML configuration files.
    Environment variables take precedence over .env file values and TOML values.
    TOML configuration files are loaded in the following order:
    1. .cmdrest.toml in current directory
    2. cmdrest.toml in git repository root
    3. config.toml in XDG_CONFIG_HOME/cmdrest/
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_nested_delimiter="__",
    )

    server: ServerSettings = Field(
        default_factory=ServerSettings,
        description="Server configuration settings",
    )

    logging: LoggingSettings = Field(
        default_factory=LoggingSettings,
        description="Logging configuration",
    )

    commands: CommandSettings = Field(
        default_factory=CommandSettings,
        description="Default command invocation settings",
    )

    hooks: HookSettings = Field(
        default_factory=HookSettings,
        description="Request-alter hook registration",
    )

    @property
    def server_url(self) -> str:
        """Get the complete server URL."""
        return f"http://{self.server.host}:{self.server.port}"

    @property
    def listening_port(self) -> str:
        """The port handed to hooks, as a string."""
        return str(self.server.port)

    @classmethod
    def load_toml_config(cls, toml_path: Path) -> dict[str, Any]:
        """Load configuration from a TOML file."""
        try:
            with toml_path.open("rb") as f:
                return tomllib.load(f)
        except OSError as e:
            raise ConfigurationError(
                f"Cannot read TOML config file {toml_path}: {e}"
            ) from e
        except tomllib.TOMLDecodeError as e:
            raise ConfigurationError(f"Invalid TOML syntax in {toml_path}: {e}") from e

    @classmethod
    def load_config_file(cls, config_path: Path) -> dict[str, Any]:
        """Load configuration from a file based on its extension."""
        suffix = config_path.suffix.lower()

        if suffix in [".toml"]:
            return cls.load_toml_config(config_path)
        raise ConfigurationError(
            f"Unsupported config file format: {suffix}. "
            "Only TOML (.toml) files are supported."
        )

    @classmethod
    def from_config(
        cls,
        config_path: Path | str | None = None,
        cli_context: dict[str, Any] | None = None,
        **kwargs: Any,
    ) -> "Settings":
        """Create Settings from a config file, the environment and overrides.

        Precedence, highest first: keyword overrides and CLI context,
        environment variables, TOML file, defaults.
        """
        if config_path is None:
            config_path_env = os.environ.get("CONFIG_FILE")
            if config_path_env:
                config_path = Path(config_path_env)

        if isinstance(config_path, str):
            config_path = Path(config_path)

        if config_path is None:
            config_path = find_toml_config_file()

        config_data: dict[str, Any] = {}
        if config_path and config_path.exists():
            config_data = cls.load_config_file(config_path)
            get_logger(__name__).info(
                "config_file_loaded",
                path=str(config_path),
                category="config",
            )

        try:
            settings = cls()

            for key, value in config_data.items():
                if key in _NESTED_SECTIONS and isinstance(value, dict):
                    current: BaseModel = getattr(settings, key)
                    merged = current.model_dump()
                    for nested_key, nested_value in value.items():
                        env_key = f"{key.upper()}__{nested_key.upper()}"
                        if os.getenv(env_key) is None:
                            merged[nested_key] = nested_value
                    setattr(settings, key, type(current).model_validate(merged))

            overrides: dict[str, dict[str, Any]] = {}
            for section, values in kwargs.items():
                if section in _NESTED_SECTIONS and isinstance(values, dict):
                    overrides.setdefault(section, {}).update(values)

            if cli_context:
                server_overrides = overrides.setdefault("server", {})
                for name in ("host", "port", "reload"):
                    if cli_context.get(name) is not None:
                        server_overrides[name] = cli_context[name]

                logging_overrides = overrides.setdefault("logging", {})
                if cli_context.get("log_level") is not None:
                    logging_overrides["level"] = cli_context["log_level"]
                if cli_context.get("log_file") is not None:
                    logging_overrides["file"] = cli_context["log_file"]

            for section, values in overrides.items():
                if not values:
                    continue
                current = getattr(settings, section)
                merged = current.model_dump()
                merged.update(values)
                setattr(settings, section, type(current).model_validate(merged))
        except ValueError as e:
            # pydantic.ValidationError subclasses ValueError
            raise ConfigurationError(str(e)) from e

        return settings


def get_settings(config_path: Path | str | None = None) -> Settings:
    """Load settings from the default sources."""
    return Settings.from_config(config_path=config_path)
