"""
Resource lifecycle contract.

A host orchestrator reconciles desired and actual state by calling the four
lifecycle callbacks. Each callback receives the attribute bag and the
provider configuration and raises on failure.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Mapping, Optional

from docr_tools.config import ProviderConfig

from .schema import Diff, ResourceData, Schema


class Resource(ABC):
    """Base class for resource types."""

    type_name: str
    schema: Schema

    def new_data(
        self,
        config: Optional[Mapping[str, Any]] = None,
        state: Optional[Mapping[str, str]] = None,
    ) -> ResourceData:
        return ResourceData(self.schema, config=config, state=state)

    def diff(self, config: Mapping[str, Any], state: Mapping[str, str]) -> Diff:
        return self.schema.diff(config, state)

    @abstractmethod
    def create(self, data: ResourceData, meta: ProviderConfig) -> None:
        """Create the remote object and populate the bag."""

    @abstractmethod
    def read(self, data: ResourceData, meta: ProviderConfig) -> None:
        """Refresh the bag from the remote object. Clear the ID if it is gone."""

    @abstractmethod
    def update(self, data: ResourceData, meta: ProviderConfig) -> None:
        """Apply in-place changes."""

    @abstractmethod
    def delete(self, data: ResourceData, meta: ProviderConfig) -> None:
        """Destroy the remote object."""
