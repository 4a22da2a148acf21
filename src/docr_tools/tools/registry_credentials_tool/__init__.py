"""
Container registry credential tools for the docr-tools MCP Server.

Provides tools for DigitalOcean Container Registry Docker credentials:
- Get registry details
- Generate, revoke and check Docker credentials

Usage:
    from docr_tools.tools.registry_credentials_tool import register_tools

    register_tools(mcp, credentials=credentials)
"""

from .registry_credentials import register_tools

__all__ = ["register_tools"]
