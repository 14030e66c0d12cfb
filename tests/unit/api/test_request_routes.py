"""Tests for the HTTP surface of the reference host."""

import pytest
from fastapi.testclient import TestClient

from cmdrest.hooks import Replaced
from cmdrest.hooks.implementations import CommandFilterHook


def block_on_5678(ip_address, host, port, request):
    return "blocked"


@pytest.mark.unit
class TestPostRequest:
    def test_default_output_without_hooks(self, client: TestClient, fake_invoker):
        response = client.post("/request", json={"alias": "@self", "command": "status"})

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("application/json")
        assert response.headers["x-cmdrest-altered"] == "0"
        body = response.json()
        assert body["command"] == "status"
        assert body["output"] == "status ok\n"
        assert body["exit_code"] == 0
        assert len(fake_invoker.calls) == 1

    def test_hook_guarded_on_listening_port_replaces(
        self, client: TestClient, hook_registry, fake_invoker
    ):
        hook_registry.register_alter(block_on_5678, ports=["5678"])

        response = client.post("/request", json={"command": "status"})

        assert response.status_code == 200
        assert response.text == "blocked"
        assert response.headers["x-cmdrest-altered"] == "1"
        assert fake_invoker.calls == []

    def test_hook_guarded_on_other_port_is_skipped(
        self, client: TestClient, hook_registry
    ):
        hook_registry.register_alter(block_on_5678, ports=["80"])

        response = client.post("/request", json={"command": "status"})

        assert response.headers["x-cmdrest-altered"] == "0"
        assert response.json()["command"] == "status"

    def test_hook_sees_transport_values(self, client: TestClient, hook_registry):
        seen = {}

        def recorder(ip_address, host, port, request):
            seen.update(ip_address=ip_address, host=host, port=port)

        hook_registry.register_alter(recorder)

        client.post("/request", json={"command": "status"})

        assert seen == {"ip_address": "testclient", "host": "testserver", "port": "5678"}

    def test_hook_fault_fails_only_that_request(
        self, client: TestClient, hook_registry
    ):
        state = {"fail": True}

        def fragile(ip_address, host, port, request):
            if state.pop("fail", False):
                raise RuntimeError("hook bug")

        hook_registry.register_alter(fragile, name="fragile")

        failed = client.post("/request", json={"command": "status"})
        assert failed.status_code == 500
        assert failed.json()["error"]["type"] == "hook_error"

        recovered = client.post("/request", json={"command": "status"})
        assert recovered.status_code == 200
        assert recovered.json()["command"] == "status"

    def test_rejection_keeps_hook_status(self, client: TestClient, hook_registry):
        hook_registry.register_alter(CommandFilterHook(allowed=["status"]))

        response = client.post("/request", json={"command": "sql-drop"})

        assert response.status_code == 403
        assert response.json()["error"]["type"] == "command_not_allowed"

    def test_structured_replacement_is_json(self, client: TestClient, hook_registry):
        hook_registry.register_alter(
            lambda ip_address, host, port, request: Replaced(
                {"cached": True}, status_code=202
            )
        )

        response = client.post("/request", json={"command": "status"})

        assert response.status_code == 202
        assert response.json() == {"cached": True}

    @pytest.mark.parametrize(
        "body",
        [
            {},
            {"command": ""},
            {"command": "two words"},
            {"command": "status", "unknown": 1},
        ],
    )
    def test_invalid_body_is_rejected(self, client: TestClient, fake_invoker, body):
        response = client.post("/request", json=body)

        assert response.status_code == 422
        assert response.json()["error"]["type"] == "invalid_request_error"
        assert fake_invoker.calls == []


@pytest.mark.unit
class TestQueryRequest:
    def test_args_and_options_from_query(self, client: TestClient, fake_invoker):
        response = client.get(
            "/run/@prod/user-info",
            params=[("arg", "admin"), ("arg", "editor"), ("format", "json"), ("full", "")],
        )

        assert response.status_code == 200
        request = fake_invoker.calls[0]
        assert request.alias == "@prod"
        assert request.command == "user-info"
        assert request.args == ("admin", "editor")
        assert request.options == {"format": "json", "full": True}

    def test_hooks_apply_to_query_requests(self, client: TestClient, hook_registry):
        hook_registry.register_alter(block_on_5678, ports=["5678"])

        response = client.get("/run/@self/status")

        assert response.text == "blocked"

    def test_invalid_option_name(self, client: TestClient):
        response = client.get("/run/@self/status?=value")

        assert response.status_code == 400
        assert response.json()["error"]["type"] == "invalid_request_error"

    def test_health_paths_are_not_commands(self, client: TestClient, fake_invoker):
        response = client.get("/health/foo")

        assert response.status_code == 404
        assert fake_invoker.calls == []


@pytest.mark.unit
class TestRequestId:
    def test_generated_when_missing(self, client: TestClient):
        response = client.get("/health/live")
        assert response.headers["x-request-id"]

    def test_propagated_when_given(self, client: TestClient):
        response = client.get("/health/live", headers={"x-request-id": "abc-123"})
        assert response.headers["x-request-id"] == "abc-123"


@pytest.mark.unit
class TestHealth:
    def test_liveness(self, client: TestClient):
        response = client.get("/health/live")
        assert response.status_code == 200
        assert response.json()["status"] == "pass"
        assert response.headers["cache-control"].startswith("no-cache")

    def test_readiness(self, client: TestClient):
        assert client.get("/health/ready").json()["status"] == "pass"

    def test_detailed_reports_hooks_and_executable(
        self, client: TestClient, hook_registry, monkeypatch
    ):
        monkeypatch.setattr("cmdrest.api.routes.health.shutil.which", lambda _: None)
        hook_registry.register_alter(block_on_5678)

        body = client.get("/health").json()

        assert body["status"] == "warn"
        assert body["checks"]["hooks:request_alter"][0]["observedValue"] == 1
        assert body["checks"]["command:executable"][0]["status"] == "warn"
