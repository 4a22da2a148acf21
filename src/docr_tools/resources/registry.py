"""
digitalocean_container_registry

The account's container registry. Credentials resources only reference it
by name; the registry owns its own lifecycle.
"""

from __future__ import annotations

import logging

from docr_tools.config import ProviderConfig
from docr_tools.exceptions import APIError

from .base import Resource
from .schema import Attribute, AttributeType, ResourceData, Schema
from .validation import registry_name, string_in

logger = logging.getLogger(__name__)

TYPE_NAME = "digitalocean_container_registry"
SUBSCRIPTION_TIERS = ("starter", "basic", "professional")


class RegistryResource(Resource):
    """Lifecycle callbacks for the container registry."""

    type_name = TYPE_NAME
    schema = Schema(
        {
            "name": Attribute(
                AttributeType.STRING, required=True, force_new=True, validate=registry_name
            ),
            "subscription_tier_slug": Attribute(
                AttributeType.STRING, required=True, validate=string_in(SUBSCRIPTION_TIERS)
            ),
            "region": Attribute(
                AttributeType.STRING, optional=True, computed=True, force_new=True
            ),
            "endpoint": Attribute(AttributeType.STRING, computed=True),
            "server_url": Attribute(AttributeType.STRING, computed=True),
            "storage_usage_bytes": Attribute(AttributeType.INT, computed=True),
            "created_at": Attribute(AttributeType.STRING, computed=True),
        }
    )

    def create(self, data: ResourceData, meta: ProviderConfig) -> None:
        client = meta.client()
        registry = client.create_registry(
            name=data.get("name"),
            subscription_tier_slug=data.get("subscription_tier_slug"),
            region=data.get("region"),
        )
        data.set_id(registry.get("name") or data.get("name"))
        logger.info("Created container registry %s", data.id)
        self.read(data, meta)

    def read(self, data: ResourceData, meta: ProviderConfig) -> None:
        client = meta.client()
        try:
            registry = client.get_registry()
        except APIError as e:
            if e.is_not_found:
                logger.warning("Container registry %s not found, removing from state", data.id)
                data.set_id("")
                return
            raise

        name = registry["name"]
        data.set_id(name)
        data.set("name", name)
        data.set("region", registry.get("region"))
        data.set("endpoint", f"{meta.registry_host}/{name}")
        data.set("server_url", meta.registry_host)
        data.set("storage_usage_bytes", registry.get("storage_usage_bytes", 0))
        data.set("created_at", registry.get("created_at"))

        tier = client.get_subscription().get("tier", {}).get("slug")
        if tier:
            data.set("subscription_tier_slug", tier)

    def update(self, data: ResourceData, meta: ProviderConfig) -> None:
        if data.has_change("subscription_tier_slug"):
            meta.client().update_subscription(data.get("subscription_tier_slug"))
            logger.info(
                "Changed container registry %s tier to %s",
                data.id,
                data.get("subscription_tier_slug"),
            )
        self.read(data, meta)

    def delete(self, data: ResourceData, meta: ProviderConfig) -> None:
        try:
            meta.client().delete_registry()
        except APIError as e:
            if not e.is_not_found:
                raise
        data.set_id("")
