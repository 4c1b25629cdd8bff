"""
Pytest configuration and fixtures for Wakflo connector tests.

Vendor APIs are simulated with httpx.MockTransport through MockVendor,
which routes (method, path) pairs to canned JSON and records every
request it sees.
"""

from __future__ import annotations

import json
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

import httpx
import pytest

# Add the repository root to path for imports
# This allows `from wakflo.sdk import ...` to work without installing
repo_root = Path(__file__).parent.parent
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from wakflo.config import ConnectorSettings  # noqa: E402
from wakflo.sdk.client import ClientConfig  # noqa: E402
from wakflo.sdk.context import AuthContext  # noqa: E402

Handler = Callable[[httpx.Request], httpx.Response]


class MockVendor:
    """In-memory vendor API for one test."""

    def __init__(self) -> None:
        self._routes: dict[tuple[str, str], Handler] = {}
        self.requests: list[httpx.Request] = []

    def add(
        self,
        method: str,
        path: str,
        json_body: Any = None,
        *,
        status: int = 200,
        headers: dict[str, str] | None = None,
    ) -> MockVendor:
        """Answer method + path with a fixed status and JSON body."""
        self._routes[(method, path)] = lambda request: httpx.Response(
            status, json=json_body, headers=headers
        )
        return self

    def add_handler(self, method: str, path: str, handler: Handler) -> MockVendor:
        """Answer method + path with a custom handler."""
        self._routes[(method, path)] = handler
        return self

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self._routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(404, json={"error": f"unmocked {request.method} {request.url.path}"})
        return route(request)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self._handle)

    def calls(self, path: str, method: str | None = None) -> list[httpx.Request]:
        return [
            r
            for r in self.requests
            if r.url.path == path and (method is None or r.method == method)
        ]

    def last_json(self, path: str) -> Any:
        """Decoded JSON body of the last request to path."""
        return json.loads(self.calls(path)[-1].content)


@pytest.fixture
def vendor():
    """Fresh mock vendor API."""
    return MockVendor()


@pytest.fixture
def settings():
    """Default connector settings."""
    return ConnectorSettings()


@pytest.fixture
def client_config(vendor):
    """ClientConfig pointed at a fake host through the mock transport."""
    return ClientConfig(base_url="https://api.test", max_pages=10, transport=vendor.transport)


@pytest.fixture
def oauth():
    """Auth context carrying an OAuth access token."""
    return AuthContext(access_token="test-token")


@pytest.fixture
def shopify_auth():
    """Custom Shopify connection."""
    return AuthContext(extra={"domain": "test-shop", "token": "shpat_test"})


@pytest.fixture
def claude_auth():
    """Custom Claude connection holding an API key."""
    return AuthContext(extra={"apiKey": "sk-ant-test"})
