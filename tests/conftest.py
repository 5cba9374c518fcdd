"""Root test configuration for Shrike Guard.

Every test starts from a clean configuration environment: no SHRIKE_* variables,
no config file on the search path, and a scratch working directory. Tests that
need a variable or a file set it up themselves.

Shared fakes live here too:
  - FakeScanService — in-process scan API behind httpx.MockTransport
  - guard_config    — a valid GuardConfig pointing at the fake service
"""

from __future__ import annotations

import json
from typing import Any, Callable, Optional

import httpx
import pytest

from shrike_guard.config import GuardConfig

SHRIKE_ENV_VARS = (
    "SHRIKE_API_KEY",
    "SHRIKE_ENDPOINT",
    "SHRIKE_FAIL_MODE",
    "SHRIKE_SCAN_TIMEOUT_MS",
    "SHRIKE_CONFIG",
)

TEST_ENDPOINT = "https://scan.test/agent"
TEST_API_KEY = "shrike-test-key"


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch: pytest.MonkeyPatch, tmp_path: Any) -> None:
    """Strip SHRIKE_* env vars and config search paths for every test."""
    for name in SHRIKE_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr("shrike_guard.config.DEFAULT_CONFIG_PATHS", [])
    monkeypatch.chdir(tmp_path)


class FakeScanService:
    """Scan API stand-in that records requests and replies with a canned verdict.

    ``responder`` may be replaced to return any httpx.Response or raise any
    exception (timeouts, connection errors) for failure-mode tests.
    """

    def __init__(
        self,
        body: Any = None,
        *,
        status_code: int = 200,
        responder: Optional[Callable[[httpx.Request], httpx.Response]] = None,
    ) -> None:
        self.requests: list[httpx.Request] = []
        self.body = {"safe": True} if body is None else body
        self.status_code = status_code
        self.responder = responder

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.responder is not None:
            return self.responder(request)
        return httpx.Response(self.status_code, json=self.body)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))

    @property
    def call_count(self) -> int:
        return len(self.requests)

    def last_payload(self) -> dict[str, Any]:
        return json.loads(self.requests[-1].content)


@pytest.fixture
def scan_service() -> FakeScanService:
    return FakeScanService()


def make_config(**overrides: Any) -> GuardConfig:
    values: dict[str, Any] = {"api_key": TEST_API_KEY, "endpoint": TEST_ENDPOINT}
    values.update(overrides)
    return GuardConfig(**values)


@pytest.fixture
def guard_config() -> GuardConfig:
    return make_config()
