"""Server configuration settings."""

from pydantic import BaseModel, Field


class ServerSettings(BaseModel):
    """Server-specific configuration settings."""

    host: str = Field(
        default="127.0.0.1",
        description="Server host address",
    )

    port: int = Field(
        default=8000,
        description="Server port number. Hooks see it as a string",
        ge=1,
        le=65535,
    )

    workers: int = Field(
        default=1,
        description="Number of worker processes",
        ge=1,
        le=32,
    )

    reload: bool = Field(
        default=False,
        description="Enable auto-reload for development",
    )

    trust_forwarded_headers: bool = Field(
        default=False,
        description="Report the first X-Forwarded-For entry as the caller IP address",
    )
