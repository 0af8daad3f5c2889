"""Shared fixtures: an in-process fake of the Syndic8 XML-RPC service."""

import xmlrpc.client
from collections.abc import Iterator
from typing import Any

import httpx
import pytest

from syndic8_mcp_server.api.client import Syndic8Client
from syndic8_mcp_server.config import clear_settings_cache


class FakeSyndic8:
    """Decodes XML-RPC calls, records them and replies with canned results."""

    def __init__(self) -> None:
        self.responses: dict[str, Any] = {}
        self.calls: list[tuple[str, tuple[Any, ...]]] = []

    def reply(self, method: str, result: Any) -> None:
        self.responses[method] = result

    def fault(self, method: str, code: int, message: str) -> None:
        self.responses[method] = xmlrpc.client.Fault(code, message)

    def methods(self) -> list[str]:
        return [method for method, _ in self.calls]

    def handler(self, request: httpx.Request) -> httpx.Response:
        params, method = xmlrpc.client.loads(request.content)
        self.calls.append((method, params))

        result = self.responses[method]
        if isinstance(result, xmlrpc.client.Fault):
            body = xmlrpc.client.dumps(result, methodresponse=True)
        else:
            body = xmlrpc.client.dumps((result,), methodresponse=True, allow_none=True)
        return httpx.Response(200, content=body.encode("utf-8"), headers={"Content-Type": "text/xml"})


@pytest.fixture
def fake_service() -> FakeSyndic8:
    return FakeSyndic8()


@pytest.fixture
def client(fake_service: FakeSyndic8) -> Iterator[Syndic8Client]:
    """Anonymous client wired to the fake service."""
    with Syndic8Client(transport=httpx.MockTransport(fake_service.handler)) as c:
        yield c


@pytest.fixture
def auth_client(fake_service: FakeSyndic8) -> Iterator[Syndic8Client]:
    """Logged-in client wired to the fake service."""
    with Syndic8Client(
        "joebob", "p455w3rd", transport=httpx.MockTransport(fake_service.handler)
    ) as c:
        yield c


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Keep tests independent of the caller's environment."""
    for name in (
        "SYNDIC8_ENDPOINT",
        "SYNDIC8_USERNAME",
        "SYNDIC8_PASSWORD",
        "REQUEST_TIMEOUT",
        "DEFAULT_MAX_RESULTS",
        "MCP_TRANSPORT",
        "MCP_HOST",
        "MCP_PORT",
    ):
        monkeypatch.delenv(name, raising=False)
    clear_settings_cache()
    yield
    clear_settings_cache()
