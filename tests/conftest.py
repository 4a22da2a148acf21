"""
Shared test fixtures.

FakeDigitalOcean serves the registry, account and OAuth revocation endpoints
in memory through httpx.MockTransport, so lifecycle tests exercise the real
client code path without network access.
"""

from __future__ import annotations

import json
import uuid
from urllib.parse import urlsplit

import httpx
import pytest

from docr_tools.config import ProviderConfig
from docr_tools.digitalocean import build_docker_config

ACCOUNT_TOKEN = "dop_v1_account_token"

UNAUTHORIZED = {"id": "unauthorized", "message": "Unable to authenticate you."}
NOT_FOUND = {"id": "not_found", "message": "The resource you requested could not be found."}


class FakeDigitalOcean:
    """In-memory DigitalOcean API."""

    def __init__(self):
        self.registry: dict | None = None
        self.tier: str | None = None
        self.valid_tokens = {ACCOUNT_TOKEN}
        self.revoked: set[str] = set()
        self.issued: list[dict] = []
        self.requests: list[httpx.Request] = []
        self.failures: dict[tuple[str, str], httpx.Response] = {}

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def add_registry(self, name: str, tier: str = "basic", region: str = "nyc3") -> None:
        self.registry = {
            "name": name,
            "storage_usage_bytes": 0,
            "created_at": "2026-10-19T10:00:00Z",
            "region": region,
        }
        self.tier = tier

    def fail(self, method: str, path: str, status: int, body: dict | None = None) -> None:
        self.failures[(method, path)] = httpx.Response(status, json=body or {})

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = urlsplit(str(request.url)).path
        token = request.headers.get("Authorization", "").removeprefix("Bearer ")

        if (request.method, path) in self.failures:
            return self.failures[(request.method, path)]

        if path == "/v1/oauth/revoke":
            body = json.loads(request.content)
            if body.get("token") not in self.valid_tokens:
                return httpx.Response(401, json=UNAUTHORIZED)
            self.valid_tokens.discard(body["token"])
            self.revoked.add(body["token"])
            return httpx.Response(200, json={})

        if token not in self.valid_tokens:
            return httpx.Response(401, json=UNAUTHORIZED)

        route = (request.method, path)
        if route == ("GET", "/v2/account"):
            return httpx.Response(
                200, json={"account": {"uuid": "acc-1", "email": "ops@example.com", "status": "active"}}
            )
        if path.startswith("/v2/registry") and route != ("POST", "/v2/registry") and self.registry is None:
            return httpx.Response(404, json=NOT_FOUND)
        if route == ("GET", "/v2/registry"):
            return httpx.Response(200, json={"registry": self.registry})
        if route == ("POST", "/v2/registry"):
            body = json.loads(request.content)
            self.add_registry(
                body["name"], body["subscription_tier_slug"], body.get("region", "nyc3")
            )
            return httpx.Response(201, json={"registry": self.registry})
        if route == ("DELETE", "/v2/registry"):
            self.registry = None
            return httpx.Response(204)
        if route == ("GET", "/v2/registry/subscription"):
            return httpx.Response(200, json={"subscription": {"tier": {"slug": self.tier}}})
        if route == ("POST", "/v2/registry/subscription"):
            self.tier = json.loads(request.content)["tier_slug"]
            return httpx.Response(200, json={"subscription": {"tier": {"slug": self.tier}}})
        if route == ("GET", "/v2/registry/docker-credentials"):
            issued = f"dop_v1_{uuid.uuid4().hex}"
            self.valid_tokens.add(issued)
            self.issued.append(
                {
                    "token": issued,
                    "read_write": request.url.params.get("read_write"),
                    "expiry_seconds": request.url.params.get("expiry_seconds"),
                }
            )
            return httpx.Response(200, text=build_docker_config(issued).to_json())

        return httpx.Response(404, json=NOT_FOUND)


@pytest.fixture
def fake_do():
    return FakeDigitalOcean()


@pytest.fixture
def meta(fake_do):
    """Provider configuration routed to the fake API."""
    return ProviderConfig(token=ACCOUNT_TOKEN, transport=fake_do.transport)


@pytest.fixture
def clean_env(monkeypatch):
    """Remove env vars that leak between tests."""
    for key in [
        "DIGITALOCEAN_TOKEN",
        "DIGITALOCEAN_ACCESS_TOKEN",
        "DIGITALOCEAN_API_URL",
        "DOCR_TOOLS_HTTP_TIMEOUT",
        "DOCR_ACC",
    ]:
        monkeypatch.delenv(key, raising=False)
