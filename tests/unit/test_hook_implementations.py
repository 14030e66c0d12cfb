"""Tests for the bundled hook implementations."""

from datetime import UTC, datetime
from unittest.mock import MagicMock

import pytest

from cmdrest.hooks import UNALTERED, HookContext, HookEvent, Replaced
from cmdrest.hooks.implementations import (
    CallerAllowlistHook,
    CommandFilterHook,
    LoggingHook,
    OutputSubsetHook,
    PlainOutputHook,
)
from cmdrest.models import CallerContext, IncomingRequest


NOW = datetime.now(UTC)


def call(hook, caller: CallerContext, request: IncomingRequest):
    return hook(caller.ip_address, caller.host, caller.port, request)


@pytest.mark.unit
class TestCommandFilterHook:
    def test_allowed_command_passes(self, caller_5678, status_request):
        hook = CommandFilterHook(allowed=["status", "cache-rebuild"])
        assert call(hook, caller_5678, status_request) is UNALTERED

    def test_unlisted_command_is_rejected(self, caller_5678):
        hook = CommandFilterHook(allowed=["status"])
        result = call(hook, caller_5678, IncomingRequest(command="sql-drop"))

        assert isinstance(result, Replaced)
        assert result.status_code == 403
        assert result.payload["error"]["type"] == "command_not_allowed"

    def test_denied_wins_over_allowed(self):
        hook = CommandFilterHook(allowed=["status"], denied=["status"])
        assert not hook.is_allowed("status")

    def test_no_allowlist_allows_everything_not_denied(self):
        hook = CommandFilterHook(denied=["sql-drop"])
        assert hook.is_allowed("status")
        assert not hook.is_allowed("sql-drop")

    def test_class_attributes_feed_registration(self, hook_registry):
        registration = hook_registry.register_alter(CommandFilterHook(ports=["5678"]))

        assert registration.name == "command_filter"
        assert registration.priority == 100
        assert registration.ports == frozenset({"5678"})


@pytest.mark.unit
class TestCallerAllowlistHook:
    def test_listed_ip_passes(self, caller_5678, status_request):
        hook = CallerAllowlistHook(addresses=["10.0.0.7"])
        assert call(hook, caller_5678, status_request) is UNALTERED

    def test_listed_host_passes(self, status_request):
        hook = CallerAllowlistHook(addresses=["client.example"])
        caller = CallerContext(ip_address="", host="client.example", port="5678")
        assert call(hook, caller, status_request) is UNALTERED

    def test_unknown_caller_is_rejected(self, caller_5678, status_request):
        hook = CallerAllowlistHook(addresses=["192.168.1.1"])
        result = call(hook, caller_5678, status_request)

        assert result.status_code == 403
        assert result.payload["error"]["type"] == "caller_not_allowed"

    def test_runs_before_command_filter(self, hook_registry):
        hook_registry.register_alter(CommandFilterHook())
        hook_registry.register_alter(CallerAllowlistHook(addresses=[]))

        names = [r.name for r in hook_registry.get_alter_hooks()]
        assert names == ["caller_allowlist", "command_filter"]


@pytest.mark.unit
class TestPlainOutputHook:
    async def test_returns_plain_text(self, fake_invoker, caller_5678, status_request):
        hook = PlainOutputHook(invoker=fake_invoker)

        result = await call(hook, caller_5678, status_request)

        assert result == Replaced(
            payload="status ok\n", media_type="text/plain", status_code=200
        )
        assert fake_invoker.calls == [status_request]

    async def test_failing_command_is_server_error(
        self, fake_invoker, caller_5678, status_request
    ):
        async def failing_invoke(request):
            result = await type(fake_invoker).invoke(fake_invoker, request)
            return result.model_copy(update={"exit_code": 1, "error_status": True})

        fake_invoker.invoke = failing_invoke
        hook = PlainOutputHook(invoker=fake_invoker)

        result = await call(hook, caller_5678, status_request)

        assert result.status_code == 500


@pytest.mark.unit
class TestOutputSubsetHook:
    async def test_returns_selected_fields(
        self, fake_invoker, caller_5678, status_request
    ):
        hook = OutputSubsetHook(fields=("command", "exit_code"), invoker=fake_invoker)

        result = await call(hook, caller_5678, status_request)

        assert result.payload == {"command": "status", "exit_code": 0}

    def test_unknown_fields_are_rejected(self):
        with pytest.raises(ValueError, match="Unknown result fields"):
            OutputSubsetHook(fields=("command", "nope"))


@pytest.mark.unit
class TestLoggingHook:
    def test_listens_to_every_event(self):
        hook = LoggingHook()
        assert hook.name == "logging_hook"
        assert set(hook.events) == set(HookEvent)

    async def test_logs_request_context(self, caller_5678, status_request):
        logger = MagicMock()
        hook = LoggingHook(logger=logger)
        context = HookContext(
            event=HookEvent.REQUEST_COMPLETED,
            timestamp=NOW,
            data={"exit_code": 0},
            request_id="req-1",
            caller=caller_5678,
            request=status_request,
        )

        await hook(context)

        logger.info.assert_called_once()
        kwargs = logger.info.call_args.kwargs
        assert kwargs["hook_event"] == "request.completed"
        assert kwargs["request_id"] == "req-1"
        assert kwargs["port"] == "5678"
        assert kwargs["command"] == "status"
        assert kwargs["exit_code"] == 0

    async def test_failures_log_at_error(self, caller_5678):
        logger = MagicMock()
        hook = LoggingHook(logger=logger)
        context = HookContext(
            event=HookEvent.REQUEST_FAILED,
            timestamp=NOW,
            data={},
            caller=caller_5678,
            error=RuntimeError("boom"),
        )

        await hook(context)

        logger.error.assert_called_once()
        assert logger.error.call_args.kwargs["error_type"] == "RuntimeError"

    async def test_received_logs_at_debug(self):
        logger = MagicMock()
        hook = LoggingHook(logger=logger)

        await hook(HookContext(event=HookEvent.REQUEST_RECEIVED, timestamp=NOW, data={}))

        logger.debug.assert_called_once()
