"""
digitalocean_container_registry_docker_credentials

Issues Docker credentials for a container registry and revokes them on
destroy. Every input attribute forces replacement, so a credential is never
mutated in place.

Error handling:
- Malformed credentials JSON: DockerConfigError, fatal.
- Issuance failures: APIError raised verbatim, no retry.
- Revocation answered with 401: the token is already invalid, destroy succeeds.
- Any other revocation failure: RevocationError.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from docr_tools.config import ProviderConfig
from docr_tools.digitalocean import DigitalOceanClient, decode_token, parse_docker_config
from docr_tools.exceptions import APIError, DocrToolsError, RevocationError

from .base import Resource
from .schema import Attribute, AttributeType, ResourceData, Schema
from .validation import int_between, registry_name

logger = logging.getLogger(__name__)

TYPE_NAME = "digitalocean_container_registry_docker_credentials"
# API default and upper bound (roughly 50 years)
DEFAULT_EXPIRY_SECONDS = 1576800000
MAX_EXPIRY_SECONDS = 1576800000
TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(value: datetime) -> str:
    return value.astimezone(timezone.utc).strftime(TIMESTAMP_FORMAT)


def parse_timestamp(value: str) -> datetime:
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class DockerCredentialsResource(Resource):
    """Lifecycle callbacks for registry Docker credentials."""

    type_name = TYPE_NAME
    schema = Schema(
        {
            "registry_name": Attribute(
                AttributeType.STRING,
                required=True,
                force_new=True,
                validate=registry_name,
                description="Name of the container registry.",
            ),
            "write": Attribute(
                AttributeType.BOOL,
                optional=True,
                force_new=True,
                default=False,
                description="Grant push access in addition to pull.",
            ),
            "expiry_seconds": Attribute(
                AttributeType.INT,
                optional=True,
                force_new=True,
                default=DEFAULT_EXPIRY_SECONDS,
                validate=int_between(0, MAX_EXPIRY_SECONDS),
                description="Lifetime of the issued token in seconds.",
            ),
            "docker_credentials": Attribute(
                AttributeType.STRING,
                computed=True,
                sensitive=True,
                description="Docker config JSON for the registry.",
            ),
            "credential_expiration_time": Attribute(
                AttributeType.STRING,
                computed=True,
                description="RFC 3339 time after which the credentials are invalid.",
            ),
        }
    )

    def __init__(self, clock: Optional[Callable[[], datetime]] = None):
        self._clock = clock or _utcnow

    def create(self, data: ResourceData, meta: ProviderConfig) -> None:
        client = meta.client()
        name = data.get("registry_name")

        registry = client.get_registry()
        if registry.get("name") != name:
            raise DocrToolsError(
                f"Container registry '{name}' not found",
                details={"registry": registry.get("name")},
            )

        self._issue(data, client, meta)
        data.set_id(name)
        logger.info("Issued Docker credentials for registry %s", name)

    def read(self, data: ResourceData, meta: ProviderConfig) -> None:
        client = meta.client()
        name = data.get("registry_name")

        try:
            registry = client.get_registry()
        except APIError as e:
            if e.is_not_found:
                logger.warning("Container registry %s not found, removing from state", name)
                data.set_id("")
                return
            raise

        if registry.get("name") != name:
            logger.warning("Container registry %s no longer exists, removing from state", name)
            data.set_id("")
            return

        data.set_id(name)
        if self._needs_refresh(data):
            logger.info("Docker credentials for registry %s expired, reissuing", name)
            prior = data.get("docker_credentials")
            if prior:
                revoke_docker_credentials(prior, meta)
            self._issue(data, client, meta)

    def update(self, data: ResourceData, meta: ProviderConfig) -> None:
        prior = data.get_prior("docker_credentials")
        if prior:
            revoke_docker_credentials(prior, meta)
        self._issue(data, meta.client(), meta)
        data.set_id(data.get("registry_name"))

    def delete(self, data: ResourceData, meta: ProviderConfig) -> None:
        creds = data.get("docker_credentials")
        if creds:
            revoke_docker_credentials(creds, meta)
        data.set_id("")

    def _needs_refresh(self, data: ResourceData) -> bool:
        expiration = data.get("credential_expiration_time")
        if not data.get("docker_credentials") or not expiration:
            return True
        try:
            return parse_timestamp(expiration) < self._clock()
        except ValueError:
            logger.warning("Unparseable credential_expiration_time %r, reissuing", expiration)
            return True

    def _issue(
        self,
        data: ResourceData,
        client: DigitalOceanClient,
        meta: ProviderConfig,
    ) -> None:
        expiry_seconds = data.get("expiry_seconds")
        issued_at = self._clock()
        docker_config = client.get_docker_credentials(
            read_write=data.get("write"),
            expiry_seconds=expiry_seconds,
        )
        # stored credentials must always decode
        decode_token(parse_docker_config(docker_config), meta.registry_host)

        data.set("docker_credentials", docker_config)
        data.set(
            "credential_expiration_time",
            format_timestamp(issued_at + timedelta(seconds=expiry_seconds)),
        )


def revoke_docker_credentials(docker_config: str, meta: ProviderConfig) -> bool:
    """
    Revoke the token embedded in a Docker config.

    Returns:
        True if the token was revoked now, False if it was already invalid.

    Raises:
        DockerConfigError: If the token cannot be decoded.
        RevocationError: If revocation failed for any reason other than 401.
    """
    token = decode_token(parse_docker_config(docker_config), meta.registry_host)
    try:
        meta.client(token).revoke_token(token)
    except RevocationError as e:
        if e.is_unauthorized:
            logger.info("Docker credentials already revoked")
            return False
        raise
    logger.info("Revoked Docker credentials")
    return True
