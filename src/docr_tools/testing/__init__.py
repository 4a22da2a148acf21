"""
Acceptance testing helpers for docr-tools resources.
"""

from .acceptance import (
    AcceptanceCase,
    Ref,
    ResourceState,
    State,
    Step,
    acceptance_enabled,
    check_no_resource_attr,
    check_resource_attr,
    check_resource_attr_set,
    compose_checks,
    pre_check,
    random_test_name,
)
from .checks import check_docker_credentials_revoked, check_registry_exists, check_token_revoked

__all__ = [
    "AcceptanceCase",
    "Ref",
    "ResourceState",
    "State",
    "Step",
    "acceptance_enabled",
    "check_docker_credentials_revoked",
    "check_no_resource_attr",
    "check_registry_exists",
    "check_resource_attr",
    "check_resource_attr_set",
    "check_token_revoked",
    "compose_checks",
    "pre_check",
    "random_test_name",
]
