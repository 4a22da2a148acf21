"""
Provider configuration.

Resolves the API token and endpoint through the CredentialManager (overrides,
environment, .env) and hands out authenticated DigitalOceanClient instances.

Environment Variables:
    DIGITALOCEAN_TOKEN         - API token (DIGITALOCEAN_ACCESS_TOKEN also accepted)
    DIGITALOCEAN_API_URL       - API base URL (default: https://api.digitalocean.com)
    DOCR_TOOLS_HTTP_TIMEOUT    - Request timeout in seconds (default: 30)
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

import httpx

from docr_tools.credentials import CredentialManager
from docr_tools.digitalocean.client import (
    DEFAULT_API_URL,
    DEFAULT_TIMEOUT,
    OAUTH_REVOKE_URL,
    DigitalOceanClient,
)
from docr_tools.digitalocean.docker_config import REGISTRY_HOST
from docr_tools.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


@dataclass
class ProviderConfig:
    """Configuration shared by every resource lifecycle call."""

    token: str
    api_url: str = DEFAULT_API_URL
    revoke_url: str = OAUTH_REVOKE_URL
    registry_host: str = REGISTRY_HOST
    timeout: float = DEFAULT_TIMEOUT
    transport: httpx.BaseTransport | None = None

    def __post_init__(self) -> None:
        if not self.token:
            raise ConfigurationError(
                "Missing DigitalOcean token. Set DIGITALOCEAN_TOKEN environment variable."
            )
        if self.timeout <= 0:
            raise ConfigurationError(f"HTTP timeout must be positive, got {self.timeout}")

    @classmethod
    def from_credentials(
        cls,
        credentials: CredentialManager | None = None,
        **overrides,
    ) -> "ProviderConfig":
        """Build a configuration from credentials and DOCR_TOOLS_* settings."""
        credentials = credentials or CredentialManager()

        raw_timeout = os.getenv("DOCR_TOOLS_HTTP_TIMEOUT")
        try:
            timeout = float(raw_timeout) if raw_timeout else DEFAULT_TIMEOUT
        except ValueError:
            raise ConfigurationError(
                f"DOCR_TOOLS_HTTP_TIMEOUT must be a number, got {raw_timeout!r}"
            ) from None

        settings = {
            "token": credentials.get("digitalocean_token") or "",
            "api_url": credentials.get("digitalocean_api_url") or DEFAULT_API_URL,
            "timeout": timeout,
        }
        settings.update(overrides)
        return cls(**settings)

    def client(self, token: str | None = None) -> DigitalOceanClient:
        """Return a client authenticated with the provider token, or with `token`."""
        return DigitalOceanClient(
            token or self.token,
            base_url=self.api_url,
            timeout=self.timeout,
            revoke_url=self.revoke_url,
            transport=self.transport,
        )
