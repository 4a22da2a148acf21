"""
Docker config JSON handling.

The registry issues credentials as a Docker config document:

    {"auths": {"registry.digitalocean.com": {"auth": "<base64 of username:token>"}}}

For DigitalOcean both the username and the password are the same API token,
so the bearer token is whatever follows the first ':' in the decoded value.
"""

from __future__ import annotations

import base64
import binascii
import json
from dataclasses import dataclass, field
from typing import Any

from docr_tools.exceptions import DockerConfigError

REGISTRY_HOST = "registry.digitalocean.com"


@dataclass
class DockerAuth:
    """A single registry entry of a Docker config."""

    auth: str

    def decode(self) -> tuple[str, str]:
        """Return (username, password) from the base64 'auth' value."""
        try:
            decoded = base64.b64decode(self.auth, validate=True).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError) as e:
            raise DockerConfigError(f"Registry auth is not valid base64: {e}") from e

        username, sep, password = decoded.partition(":")
        if not sep or not password:
            raise DockerConfigError("Unable to split registry auth into username and token")
        return username, password


@dataclass
class DockerConfig:
    """Parsed Docker config document."""

    auths: dict[str, DockerAuth] = field(default_factory=dict)

    def auth_for(self, host: str = REGISTRY_HOST) -> DockerAuth:
        try:
            return self.auths[host]
        except KeyError:
            raise DockerConfigError(
                f"Docker config has no auth entry for '{host}'",
                details={"hosts": sorted(self.auths)},
            ) from None

    def to_json(self) -> str:
        return json.dumps({"auths": {h: {"auth": a.auth} for h, a in self.auths.items()}})


def parse_docker_config(text: str) -> DockerConfig:
    """
    Parse a Docker config JSON document.

    Raises:
        DockerConfigError: If the document is not JSON or lacks auths.<host>.auth.
    """
    try:
        data: Any = json.loads(text)
    except (TypeError, ValueError) as e:
        raise DockerConfigError(f"Docker credentials are not valid JSON: {e}") from e

    auths = data.get("auths") if isinstance(data, dict) else None
    if not isinstance(auths, dict) or not auths:
        raise DockerConfigError("Docker config is missing the 'auths' map")

    parsed: dict[str, DockerAuth] = {}
    for host, entry in auths.items():
        auth = entry.get("auth") if isinstance(entry, dict) else None
        if not isinstance(auth, str) or not auth:
            raise DockerConfigError(f"Docker config entry for '{host}' has no 'auth' field")
        parsed[host] = DockerAuth(auth=auth)

    return DockerConfig(auths=parsed)


def decode_token(config: DockerConfig, host: str = REGISTRY_HOST) -> str:
    """Extract the bearer token from a Docker config."""
    _, token = config.auth_for(host).decode()
    return token


def build_docker_config(token: str, host: str = REGISTRY_HOST) -> DockerConfig:
    """Build the Docker config the registry would issue for a token."""
    auth = base64.b64encode(f"{token}:{token}".encode("utf-8")).decode("ascii")
    return DockerConfig(auths={host: DockerAuth(auth=auth)})
