#!/usr/bin/env python3
"""
docr-tools MCP Server

Exposes container registry credential tools via Model Context Protocol using FastMCP.

Usage:
    # Run with HTTP transport (default)
    python -m docr_tools.mcp_server

    # Run with custom port
    python -m docr_tools.mcp_server --port 8001

    # Run with STDIO transport (for local testing)
    python -m docr_tools.mcp_server --stdio

Environment Variables:
    MCP_PORT              - Server port (default: 4001)
    DIGITALOCEAN_TOKEN    - Required by every docr_* tool except docr_check_docker_credentials
    DIGITALOCEAN_API_URL  - Optional API base URL
"""

import argparse
import logging
import os
import sys

logger = logging.getLogger(__name__)


def setup_logger():
    """Configure logger for MCP server."""
    if not logger.handlers:
        stream = sys.stderr if "--stdio" in sys.argv else sys.stdout
        handler = logging.StreamHandler(stream)
        formatter = logging.Formatter("[MCP] %(message)s")
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)


setup_logger()

from fastmcp import FastMCP  # noqa: E402
from starlette.requests import Request  # noqa: E402
from starlette.responses import PlainTextResponse  # noqa: E402

from docr_tools.credentials import CredentialError, CredentialManager  # noqa: E402
from docr_tools.tools import TOOL_NAMES, register_all_tools  # noqa: E402
from docr_tools.utils import configure_logging  # noqa: E402

configure_logging()

credentials = CredentialManager()

try:
    credentials.validate_startup()
    credentials.validate_for_tools(TOOL_NAMES)
    logger.info("DigitalOcean credentials validated")
except CredentialError as e:
    logger.warning(str(e))

mcp = FastMCP("docr-tools")

tools = register_all_tools(mcp, credentials=credentials)
if "--stdio" not in sys.argv:
    logger.info(f"Registered {len(tools)} tools: {tools}")


@mcp.custom_route("/health", methods=["GET"])
async def health_check(request: Request) -> PlainTextResponse:
    """Health check endpoint for container orchestration."""
    return PlainTextResponse("OK")


def main() -> None:
    """Entry point for the MCP server."""
    parser = argparse.ArgumentParser(description="docr-tools MCP Server")
    parser.add_argument(
        "--port",
        type=int,
        default=int(os.getenv("MCP_PORT", "4001")),
        help="HTTP server port (default: 4001)",
    )
    parser.add_argument(
        "--host",
        default="0.0.0.0",
        help="HTTP server host (default: 0.0.0.0)",
    )
    parser.add_argument(
        "--stdio",
        action="store_true",
        help="Use STDIO transport instead of HTTP",
    )
    args = parser.parse_args()

    if args.stdio:
        mcp.run(transport="stdio")
    else:
        logger.info(f"Starting HTTP server on {args.host}:{args.port}")
        mcp.run(transport="http", host=args.host, port=args.port)


if __name__ == "__main__":
    main()
