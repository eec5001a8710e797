"""
Pytest configuration for infra-load.

Provides fixtures for:
- Settings isolation (environment scrubbed, cache cleared)
- A fake scenario registry so orchestrator tests never open sockets
- A stub of the proxy service for integration tests
"""

from __future__ import annotations

import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Callable, Dict, Generator, List, Optional

import pytest

from infra_load import orchestrator
from infra_load.config import get_settings
from infra_load.domain.models import LoadProfile
from infra_load.scenarios.abstract import BaseLoadScenario, ScenarioResult
from infra_load.scenarios.health import HealthCheckUser

_SETTINGS_ENV = (
    "TARGET_HOST",
    "APP_ENV",
    "LOG_LEVEL",
    "LOG_JSON",
    "RESULTS_DIR",
    "FAILURE_POLICY",
    "PREFLIGHT",
    "PREFLIGHT_ATTEMPTS",
    "PREFLIGHT_TIMEOUT_SECONDS",
)


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch, tmp_path) -> Generator[None, None, None]:
    """
    Run every test against default settings, away from any local `.env`.
    """
    for var in _SETTINGS_ENV:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class FakeScenario(BaseLoadScenario):
    name = "fake"
    description = "records calls instead of generating load"
    user_class = HealthCheckUser
    profile = LoadProfile(users=2, duration="10s")

    calls: List[tuple] = []

    def execute(self, host: str, profile: Optional[LoadProfile] = None) -> ScenarioResult:
        FakeScenario.calls.append((host, profile))
        return ScenarioResult(
            requests=10,
            failures=1,
            failure_ratio=0.1,
            duration_seconds=2.0,
            requests_per_sec=5.0,
            p95_response_ms=12.345,
            users=profile.users if profile else self.profile.users,
        )


class FailingScenario(FakeScenario):
    name = "failing"

    def execute(self, host: str, profile: Optional[LoadProfile] = None) -> ScenarioResult:
        FakeScenario.calls.append((host, profile))
        raise RuntimeError("intentional failure")


@pytest.fixture
def fake_registry(monkeypatch) -> List[tuple]:
    """
    Replace the scenario registry with FakeScenario/FailingScenario.

    Returns the shared call log.
    """
    FakeScenario.calls = []

    def fake_factories() -> Dict[str, Callable[[], BaseLoadScenario]]:
        return {"fake": FakeScenario, "failing": FailingScenario}

    monkeypatch.setattr(orchestrator, "_scenario_factories", fake_factories)
    return FakeScenario.calls


class _ProxyStubHandler(BaseHTTPRequestHandler):
    hits: List[str] = []

    def do_GET(self) -> None:  # noqa: N802 - http.server naming
        _ProxyStubHandler.hits.append(self.path)
        if self.path == "/health":
            body = b'{"status":202,"message":"Healthcheck response"}'
        elif self.path == "/blocknumber":
            body = b'{"jsonrpc":"2.0","id":1,"result":"0xdeadbe"}'
        else:
            self.send_error(404)
            return
        self.send_response(200)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def log_message(self, format, *args) -> None:  # noqa: A002
        pass


@pytest.fixture
def proxy_stub() -> Generator[tuple, None, None]:
    """
    Serve /health and /blocknumber on an ephemeral port.

    Yields ``(base_url, hits)`` where `hits` lists requested paths.
    """
    _ProxyStubHandler.hits = []
    server = ThreadingHTTPServer(("127.0.0.1", 0), _ProxyStubHandler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        yield f"http://127.0.0.1:{server.server_address[1]}", _ProxyStubHandler.hits
    finally:
        server.shutdown()
        server.server_close()
