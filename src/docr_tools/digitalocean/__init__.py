"""
DigitalOcean API access for container registry credentials.

Usage:
    from docr_tools.digitalocean import DigitalOceanClient, parse_docker_config, decode_token

    client = DigitalOceanClient(access_token)
    config = parse_docker_config(client.get_docker_credentials(read_write=True))
    client.revoke_token(decode_token(config))
"""

from .client import DEFAULT_API_URL, OAUTH_REVOKE_URL, DigitalOceanClient
from .docker_config import (
    REGISTRY_HOST,
    DockerAuth,
    DockerConfig,
    build_docker_config,
    decode_token,
    parse_docker_config,
)

__all__ = [
    "DEFAULT_API_URL",
    "DigitalOceanClient",
    "DockerAuth",
    "DockerConfig",
    "OAUTH_REVOKE_URL",
    "REGISTRY_HOST",
    "build_docker_config",
    "decode_token",
    "parse_docker_config",
]
