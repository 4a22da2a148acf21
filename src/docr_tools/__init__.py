"""
docr-tools - DigitalOcean Container Registry Docker credentials.

Issue, refresh and revoke short-lived Docker credentials through a resource
lifecycle (create/read/update/delete), with FastMCP tools on top.
"""

__version__ = "0.1.0"
