"""
docr-tools - Tool implementations for FastMCP.

Usage:
    from fastmcp import FastMCP
    from docr_tools.tools import register_all_tools
    from docr_tools.credentials import CredentialManager

    mcp = FastMCP("my-server")
    credentials = CredentialManager()
    register_all_tools(mcp, credentials=credentials)
"""
from typing import TYPE_CHECKING, List, Optional

from fastmcp import FastMCP

if TYPE_CHECKING:
    from docr_tools.credentials import CredentialManager

from .registry_credentials_tool import register_tools as register_registry_credentials

TOOL_NAMES = [
    "docr_get_registry",
    "docr_generate_docker_credentials",
    "docr_revoke_docker_credentials",
    "docr_check_docker_credentials",
]


def register_all_tools(
    mcp: FastMCP,
    credentials: Optional["CredentialManager"] = None,
) -> List[str]:
    """
    Register all tools with a FastMCP server.

    Args:
        mcp: FastMCP server instance
        credentials: Optional CredentialManager for centralized credential access.

    Returns:
        List of registered tool names
    """
    register_registry_credentials(mcp, credentials=credentials)

    return list(TOOL_NAMES)
