"""
Container registry credential tools for MCP Server.

Lets agents issue, revoke and probe Docker credentials for the account's
DigitalOcean Container Registry:
- Get registry details
- Generate Docker credentials (pull-only or push+pull, optional expiry)
- Revoke Docker credentials
- Check whether Docker credentials are still valid

Authentication: DigitalOcean personal access token (DIGITALOCEAN_TOKEN).
"""

import json
import logging

from fastmcp import Context, FastMCP

from docr_tools.config import ProviderConfig
from docr_tools.digitalocean import REGISTRY_HOST, decode_token, parse_docker_config
from docr_tools.exceptions import APIError, DocrToolsError
from docr_tools.resources.docker_credentials import (
    DockerCredentialsResource,
    revoke_docker_credentials,
)
from docr_tools.utils import error_response

logger = logging.getLogger(__name__)

MISSING_CREDENTIALS = {
    "error": "Missing DigitalOcean credentials. Set DIGITALOCEAN_TOKEN environment variable."
}


def _get_config(credentials) -> ProviderConfig | None:
    """
    Create a ProviderConfig from credentials.

    Args:
        credentials: CredentialManager instance.

    Returns:
        ProviderConfig if a token is available, None otherwise.
    """
    if not credentials:
        return None

    try:
        credentials.validate_for_tools(["docr_get_registry"])
        return ProviderConfig.from_credentials(credentials)
    except Exception as e:
        logger.error(f"Failed to get DigitalOcean credentials: {e}")
        return None


def register_tools(mcp: FastMCP, credentials=None):
    """
    Register container registry credential tools with the MCP server.

    Args:
        mcp: FastMCP server instance.
        credentials: Optional CredentialManager for API token access.
    """

    @mcp.tool(
        name="docr_get_registry",
        description="Get the account's DigitalOcean container registry (name, region, usage).",
    )
    def docr_get_registry(ctx: Context = None) -> str:
        """
        Get registry details.

        Returns:
            JSON string containing the registry object.
        """
        config = _get_config(credentials)
        if not config:
            return json.dumps(MISSING_CREDENTIALS)

        try:
            registry = config.client().get_registry()
            return json.dumps(registry, indent=2, default=str)
        except APIError as e:
            return json.dumps(error_response(e, "DigitalOcean API error"))
        except Exception as e:
            return json.dumps(error_response(e, "Failed to get registry"))

    @mcp.tool(
        name="docr_generate_docker_credentials",
        description=(
            "Generate Docker credentials for a DigitalOcean container registry. "
            "Returns a Docker config JSON usable with 'docker login' or as an "
            "image pull secret, plus its expiration time."
        ),
    )
    def docr_generate_docker_credentials(
        registry_name: str,
        write: bool = False,
        expiry_seconds: int | None = None,
        ctx: Context = None,
    ) -> str:
        """
        Generate Docker credentials.

        Args:
            registry_name: Name of the account's container registry.
            write: Grant push access in addition to pull (default: False).
            expiry_seconds: Token lifetime in seconds (default and maximum: 1576800000).

        Returns:
            JSON string with 'docker_credentials' and 'credential_expiration_time'.
        """
        config = _get_config(credentials)
        if not config:
            return json.dumps(MISSING_CREDENTIALS)

        resource = DockerCredentialsResource()
        try:
            resource_config = {"registry_name": registry_name, "write": write}
            if expiry_seconds is not None:
                resource_config["expiry_seconds"] = expiry_seconds
            data = resource.new_data(config=resource_config)
            resource.create(data, config)
            return json.dumps(data.state(), indent=2)
        except APIError as e:
            return json.dumps(error_response(e, "DigitalOcean API error"))
        except DocrToolsError as e:
            logger.error(f"Error generating Docker credentials: {e.message}")
            return json.dumps({"error": e.message})
        except Exception as e:
            return json.dumps(error_response(e, "Failed to generate Docker credentials"))

    @mcp.tool(
        name="docr_revoke_docker_credentials",
        description=(
            "Revoke Docker credentials previously generated for a DigitalOcean "
            "container registry. Already revoked credentials are reported, not treated as errors."
        ),
    )
    def docr_revoke_docker_credentials(
        docker_credentials: str,
        ctx: Context = None,
    ) -> str:
        """
        Revoke Docker credentials.

        Args:
            docker_credentials: Docker config JSON returned by docr_generate_docker_credentials.

        Returns:
            JSON string with 'revoked' and 'already_revoked' flags.
        """
        config = _get_config(credentials)
        if not config:
            return json.dumps(MISSING_CREDENTIALS)

        try:
            revoked = revoke_docker_credentials(docker_credentials, config)
            return json.dumps({"revoked": True, "already_revoked": not revoked})
        except APIError as e:
            return json.dumps(error_response(e, "Failed to revoke Docker credentials"))
        except DocrToolsError as e:
            logger.error(f"Error revoking Docker credentials: {e.message}")
            return json.dumps({"error": e.message})
        except Exception as e:
            return json.dumps(error_response(e, "Failed to revoke Docker credentials"))

    @mcp.tool(
        name="docr_check_docker_credentials",
        description="Check whether Docker credentials are still valid (not expired or revoked).",
    )
    def docr_check_docker_credentials(
        docker_credentials: str,
        ctx: Context = None,
    ) -> str:
        """
        Probe Docker credentials against the account endpoint.

        Args:
            docker_credentials: Docker config JSON.

        Returns:
            JSON string with 'valid' flag.
        """
        config = _get_config(credentials)
        registry_host = config.registry_host if config else REGISTRY_HOST

        try:
            token = decode_token(parse_docker_config(docker_credentials), registry_host)
            if config is None:
                config = ProviderConfig.from_credentials(credentials, token=token)
            config.client(token).get_account()
            return json.dumps({"valid": True})
        except APIError as e:
            if e.is_unauthorized:
                return json.dumps({"valid": False})
            return json.dumps(error_response(e, "DigitalOcean API error"))
        except DocrToolsError as e:
            return json.dumps({"error": e.message})
        except Exception as e:
            return json.dumps(error_response(e, "Failed to check Docker credentials"))
