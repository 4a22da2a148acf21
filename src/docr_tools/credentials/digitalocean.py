"""
DigitalOcean credential specifications.

The API token authorizes every registry call. DIGITALOCEAN_ACCESS_TOKEN is
accepted as a fallback for DIGITALOCEAN_TOKEN.
"""

from .base import CredentialSpec

DOCR_TOOLS = [
    "docr_get_registry",
    "docr_generate_docker_credentials",
    "docr_revoke_docker_credentials",
]

DIGITALOCEAN_CREDENTIALS = {
    "digitalocean_token": CredentialSpec(
        env_var="DIGITALOCEAN_TOKEN",
        fallback_env_vars=["DIGITALOCEAN_ACCESS_TOKEN"],
        tools=DOCR_TOOLS,
        required=True,
        startup_required=False,
        help_url="https://cloud.digitalocean.com/account/api/tokens",
        description=(
            "DigitalOcean personal access token with registry read/write scope. "
            "Required to issue and revoke container registry credentials."
        ),
    ),
    "digitalocean_api_url": CredentialSpec(
        env_var="DIGITALOCEAN_API_URL",
        tools=DOCR_TOOLS,
        required=False,
        description=(
            "Base URL for the DigitalOcean API. "
            "Defaults to 'https://api.digitalocean.com'."
        ),
    ),
}
