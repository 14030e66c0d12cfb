"""Tests for the structlog setup."""

from typing import Any

import pytest
import structlog

from cmdrest.config.logging import LoggingSettings
from cmdrest.core.logging import setup_logging


@pytest.fixture
def renderer_kwargs(monkeypatch):
    """Record the arguments the console renderer is built with."""
    seen: list[dict[str, Any]] = []
    console_renderer = structlog.dev.ConsoleRenderer

    def recording_renderer(**kwargs: Any) -> structlog.dev.ConsoleRenderer:
        seen.append(kwargs)
        return console_renderer(**kwargs)

    monkeypatch.setattr(structlog.dev, "ConsoleRenderer", recording_renderer)
    yield seen
    monkeypatch.undo()
    setup_logging(json_logs=False, log_level_name="DEBUG")


@pytest.mark.unit
class TestLogFormat:
    @pytest.mark.parametrize(
        ("log_format", "colors"),
        [("auto", None), ("rich", True), ("plain", False), ("json", None)],
    )
    def test_format_selects_coloring(self, log_format, colors):
        assert LoggingSettings(format=log_format).colors is colors

    def test_unknown_format_is_rejected(self):
        with pytest.raises(ValueError):
            LoggingSettings(format="xml")

    @pytest.mark.parametrize("log_format", ["rich", "plain"])
    def test_console_renderer_follows_format(self, renderer_kwargs, log_format):
        settings = LoggingSettings(format=log_format)

        setup_logging(json_logs=settings.json_logs, colors=settings.colors)

        assert renderer_kwargs == [{"colors": settings.colors}]

    def test_json_format_skips_console_renderer(self, renderer_kwargs):
        setup_logging(json_logs=True)

        assert renderer_kwargs == []
