"""
DigitalOcean API client for container registry operations.

Covers the subset of the API needed to manage a registry and its Docker
credentials:
- Account lookup (also used to probe whether a token is still valid)
- Registry get / create / delete / subscription tier change
- Docker credential issuance
- OAuth token revocation

API Reference: https://docs.digitalocean.com/reference/api/
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from docr_tools.exceptions import APIError, RevocationError

logger = logging.getLogger(__name__)

# Constants
DEFAULT_API_URL = "https://api.digitalocean.com"
OAUTH_REVOKE_URL = "https://cloud.digitalocean.com/v1/oauth/revoke"
DEFAULT_TIMEOUT = 30.0
USER_AGENT = "docr-tools"


def _api_error(response: httpx.Response, error_cls: type[APIError] = APIError) -> APIError:
    """Build an APIError from a DigitalOcean error body ({"id", "message", "request_id"})."""
    error_id = None
    request_id = response.headers.get("x-request-id")
    try:
        body = response.json()
    except ValueError:
        body = None

    if isinstance(body, dict):
        error_id = body.get("id")
        message = body.get("message") or response.reason_phrase or response.text
        request_id = body.get("request_id") or request_id
    else:
        message = response.text or response.reason_phrase

    return error_cls(
        message,
        status_code=response.status_code,
        error_id=error_id,
        request_id=request_id,
    )


class DigitalOceanClient:
    """
    DigitalOcean API client.

    Every call opens a short-lived httpx.Client. Non-2xx responses raise
    APIError; nothing is retried.
    """

    def __init__(
        self,
        access_token: str,
        base_url: str = DEFAULT_API_URL,
        timeout: float = DEFAULT_TIMEOUT,
        revoke_url: str = OAUTH_REVOKE_URL,
        transport: httpx.BaseTransport | None = None,
    ):
        """
        Initialize the DigitalOcean client.

        Args:
            access_token: API token (personal access token or registry token).
            base_url: Base URL for the API (default: https://api.digitalocean.com).
            timeout: Request timeout in seconds.
            revoke_url: OAuth revocation endpoint.
            transport: Optional httpx transport, used to route requests in tests.
        """
        self._access_token = access_token
        self._base_url = base_url.rstrip("/")
        self._api_url = f"{self._base_url}/v2"
        self._revoke_url = revoke_url
        self._timeout = timeout
        self._transport = transport
        self._headers = {
            "Authorization": f"Bearer {access_token}",
            "Content-Type": "application/json",
            "Accept": "application/json",
            "User-Agent": USER_AGENT,
        }

    def _send(
        self,
        method: str,
        url: str,
        params: dict[str, Any] | None = None,
        json_data: dict[str, Any] | None = None,
    ) -> httpx.Response:
        with httpx.Client(timeout=self._timeout, transport=self._transport) as client:
            return client.request(
                method=method,
                url=url,
                headers=self._headers,
                params=params,
                json=json_data,
            )

    def _make_request(
        self,
        method: str,
        endpoint: str,
        params: dict[str, Any] | None = None,
        json_data: dict[str, Any] | None = None,
    ) -> httpx.Response:
        """
        Make an HTTP request to the DigitalOcean API.

        Args:
            method: HTTP method (GET, POST, DELETE).
            endpoint: API endpoint (e.g., '/registry').
            params: Query parameters.
            json_data: JSON body data.

        Returns:
            The successful response.

        Raises:
            APIError: If the request fails with a non-2xx status.
        """
        response = self._send(method, f"{self._api_url}{endpoint}", params, json_data)
        if not response.is_success:
            error = _api_error(response)
            logger.debug("%s %s failed: %s", method, endpoint, error)
            raise error
        return response

    def get_account(self) -> dict[str, Any]:
        """
        Get the account the token belongs to.

        Returns:
            Account object with 'uuid', 'email', 'status', etc.

        Raises:
            APIError: 401 when the token is invalid or revoked.
        """
        response = self._make_request("GET", "/account")
        return response.json().get("account", {})

    def get_registry(self) -> dict[str, Any]:
        """
        Get the account's container registry.

        Returns:
            Registry object with 'name', 'region', 'created_at', etc.

        Raises:
            APIError: 404 when the account has no registry.
        """
        response = self._make_request("GET", "/registry")
        return response.json().get("registry", {})

    def create_registry(
        self,
        name: str,
        subscription_tier_slug: str,
        region: str | None = None,
    ) -> dict[str, Any]:
        """
        Create the account's container registry.

        Args:
            name: Globally unique registry name.
            subscription_tier_slug: 'starter', 'basic' or 'professional'.
            region: Optional region slug.

        Returns:
            Created registry object.
        """
        data: dict[str, Any] = {
            "name": name,
            "subscription_tier_slug": subscription_tier_slug,
        }
        if region:
            data["region"] = region

        response = self._make_request("POST", "/registry", json_data=data)
        return response.json().get("registry", {})

    def delete_registry(self) -> None:
        """Delete the account's container registry."""
        self._make_request("DELETE", "/registry")

    def get_subscription(self) -> dict[str, Any]:
        """Get the registry subscription (tier, creation time)."""
        response = self._make_request("GET", "/registry/subscription")
        return response.json().get("subscription", {})

    def update_subscription(self, tier_slug: str) -> dict[str, Any]:
        """Change the registry subscription tier."""
        response = self._make_request(
            "POST", "/registry/subscription", json_data={"tier_slug": tier_slug}
        )
        return response.json().get("subscription", {})

    def get_docker_credentials(
        self,
        read_write: bool = False,
        expiry_seconds: int | None = None,
    ) -> str:
        """
        Issue Docker credentials for the registry.

        Args:
            read_write: Grant push access in addition to pull.
            expiry_seconds: Lifetime of the issued token. Omitted when None.

        Returns:
            The Docker config JSON document, verbatim.
        """
        params: dict[str, Any] = {"read_write": str(read_write).lower()}
        if expiry_seconds is not None:
            params["expiry_seconds"] = expiry_seconds

        response = self._make_request(
            "GET", "/registry/docker-credentials", params=params
        )
        return response.text

    def revoke_token(self, token: str) -> None:
        """
        Revoke an OAuth token.

        The request authenticates with the token being revoked.

        Raises:
            RevocationError: If the revocation endpoint answers with a non-2xx status.
        """
        headers = {**self._headers, "Authorization": f"Bearer {token}"}
        with httpx.Client(timeout=self._timeout, transport=self._transport) as client:
            response = client.request(
                method="POST",
                url=self._revoke_url,
                headers=headers,
                json={"token": token},
            )
        if not response.is_success:
            raise _api_error(response, RevocationError)
