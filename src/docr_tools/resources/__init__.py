"""
Resource types managed by docr-tools.

Usage:
    from docr_tools.resources import get_resource

    resource = get_resource("digitalocean_container_registry_docker_credentials")
    data = resource.new_data(config={"registry_name": "example", "write": True})
    resource.create(data, meta)
    state = data.state()
"""

from typing import Dict

from .base import Resource
from .docker_credentials import DockerCredentialsResource
from .registry import RegistryResource
from .schema import Attribute, AttributeType, Diff, ResourceData, Schema

RESOURCES: Dict[str, type[Resource]] = {
    DockerCredentialsResource.type_name: DockerCredentialsResource,
    RegistryResource.type_name: RegistryResource,
}


def get_resource(type_name: str) -> Resource:
    """Instantiate the resource registered under type_name."""
    try:
        return RESOURCES[type_name]()
    except KeyError:
        raise KeyError(
            f"Unknown resource type '{type_name}'. Available: {list(RESOURCES)}"
        ) from None


__all__ = [
    "Attribute",
    "AttributeType",
    "Diff",
    "DockerCredentialsResource",
    "RESOURCES",
    "RegistryResource",
    "Resource",
    "ResourceData",
    "Schema",
    "get_resource",
]
