"""Shared test fixtures and configuration for cmdrest tests.

The fixtures use the real registry, manager, processor and FastAPI app;
only the command invocation is replaced by an in-memory invoker.
"""

from collections.abc import Generator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from cmdrest.api.app import create_app
from cmdrest.config import HookSettings, ServerSettings, Settings
from cmdrest.core.logging import setup_logging
from cmdrest.hooks import HookManager, HookRegistry
from cmdrest.models import CallerContext, CommandResult, IncomingRequest
from cmdrest.services.container import ServiceContainer, create_service_container
from cmdrest.services.request_processor import RequestProcessor


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest with custom settings."""
    setup_logging(json_logs=False, log_level_name="DEBUG")


class FakeInvoker:
    """Invoker that records requests and answers without a subprocess."""

    def __init__(self) -> None:
        self.calls: list[IncomingRequest] = []

    async def invoke(self, request: IncomingRequest) -> CommandResult:
        self.calls.append(request)
        return CommandResult(
            alias=request.alias,
            command=request.command,
            args=list(request.args),
            options=dict(request.options),
            output=f"{request.command} ok\n",
            exit_code=0,
            duration_ms=1.5,
        )


@pytest.fixture
def fake_invoker() -> FakeInvoker:
    return FakeInvoker()


@pytest.fixture
def test_settings() -> Settings:
    """Settings listening on port 5678 with no hook discovery."""
    return Settings(
        server=ServerSettings(port=5678),
        hooks=HookSettings(discover_entry_points=False),
    )


@pytest.fixture
def hook_registry() -> HookRegistry:
    """Create a fresh hook registry for testing."""
    return HookRegistry()


@pytest.fixture
def hook_manager(hook_registry: HookRegistry) -> HookManager:
    """Create a hook manager with the test registry."""
    return HookManager(hook_registry)


@pytest.fixture
def processor(hook_manager: HookManager, fake_invoker: FakeInvoker) -> RequestProcessor:
    return RequestProcessor(hook_manager, fake_invoker)


@pytest.fixture
def status_request() -> IncomingRequest:
    return IncomingRequest(alias="@self", command="status", args=(), options={})


@pytest.fixture
def caller_5678() -> CallerContext:
    return CallerContext(ip_address="10.0.0.7", host="client.example", port="5678")


@pytest.fixture
def caller_80() -> CallerContext:
    return CallerContext(ip_address="10.0.0.7", host="client.example", port="80")


@pytest.fixture
def container(
    test_settings: Settings, hook_registry: HookRegistry, fake_invoker: FakeInvoker
) -> ServiceContainer:
    return create_service_container(
        test_settings, registry=hook_registry, invoker=fake_invoker
    )


@pytest.fixture
def app(container: ServiceContainer) -> FastAPI:
    return create_app(container=container)


@pytest.fixture
def client(app: FastAPI) -> Generator[TestClient, None, None]:
    """Test client with the application lifespan running."""
    with TestClient(app) as test_client:
        yield test_client
