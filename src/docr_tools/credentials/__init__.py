"""
Centralized credential management for docr-tools.

Usage:
    from docr_tools.credentials import CredentialManager

    credentials = CredentialManager()
    token = credentials.get("digitalocean_token")

    # In tests
    credentials = CredentialManager.for_testing({"digitalocean_token": "test-token"})
"""

from .base import CredentialError, CredentialManager, CredentialSpec
from .digitalocean import DIGITALOCEAN_CREDENTIALS

CREDENTIAL_SPECS = {
    **DIGITALOCEAN_CREDENTIALS,
}

__all__ = [
    "CREDENTIAL_SPECS",
    "CredentialError",
    "CredentialManager",
    "CredentialSpec",
    "DIGITALOCEAN_CREDENTIALS",
]
