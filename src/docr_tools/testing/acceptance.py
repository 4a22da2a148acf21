"""
Acceptance test harness.

Plays the host orchestrator for resource lifecycle tests. A case is a list
of steps, each holding a declarative configuration:

    case = AcceptanceCase(
        steps=[
            Step(
                config={
                    "digitalocean_container_registry.foobar": {
                        "name": name,
                        "subscription_tier_slug": "basic",
                    },
                    "digitalocean_container_registry_docker_credentials.foobar": {
                        "registry_name": Ref("digitalocean_container_registry.foobar", "name"),
                        "write": True,
                    },
                },
                check=compose_checks(
                    check_resource_attr(address, "write", "true"),
                    check_resource_attr_set(address, "docker_credentials"),
                ),
            )
        ],
        check_destroy=check_docker_credentials_revoked(meta),
        meta=meta,
    )
    case.run()

For every step the harness creates, replaces or updates resources to match
the configuration, runs the step's checks, then refreshes every resource
and fails if the configuration still differs from state. After the last
step everything is destroyed in reverse order and check_destroy runs
against the last state seen before destroy. A failed destroy does not stop
teardown: the remaining resources are still destroyed and a DestroyError
names whatever was left behind.
"""

from __future__ import annotations

import logging
import os
import uuid
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from docr_tools.config import ProviderConfig
from docr_tools.credentials import CredentialManager
from docr_tools.exceptions import CheckFailure, ConfigurationError, DestroyError
from docr_tools.resources import RESOURCES, Resource

logger = logging.getLogger(__name__)

TEST_NAME_PREFIX = "tf-acc-test"


@dataclass(frozen=True)
class Ref:
    """Reference to an attribute of another resource in the same configuration."""

    address: str
    attribute: str


@dataclass
class ResourceState:
    type_name: str
    attributes: Dict[str, str]

    @property
    def id(self) -> str:
        return self.attributes.get("id", "")


@dataclass
class State:
    """Resources by address ("<type>.<name>"), in creation order."""

    resources: Dict[str, ResourceState] = field(default_factory=dict)

    def get(self, address: str) -> ResourceState:
        try:
            return self.resources[address]
        except KeyError:
            raise CheckFailure(f"Not found: {address}") from None

    def of_type(self, type_name: str) -> List[ResourceState]:
        return [rs for rs in self.resources.values() if rs.type_name == type_name]

    def copy(self) -> "State":
        return State(
            {
                address: ResourceState(rs.type_name, dict(rs.attributes))
                for address, rs in self.resources.items()
            }
        )


Check = Callable[[State], None]


@dataclass
class Step:
    config: Mapping[str, Mapping[str, Any]]
    check: Optional[Check] = None


def _type_of(address: str) -> str:
    type_name, sep, name = address.partition(".")
    if not sep or not name:
        raise ConfigurationError(f"Invalid resource address '{address}'")
    return type_name


@dataclass
class AcceptanceCase:
    steps: List[Step]
    meta: Optional[ProviderConfig] = None
    check_destroy: Optional[Check] = None
    pre_check: Optional[Callable[[], None]] = None
    resources: Mapping[str, Callable[[], Resource]] = field(
        default_factory=lambda: dict(RESOURCES)
    )

    def run(self) -> State:
        """Run every step, then destroy. Returns the last state seen before destroy."""
        if self.pre_check is not None:
            self.pre_check()
        meta = self.meta or ProviderConfig.from_credentials()

        instances: Dict[str, Resource] = {}
        state = State()
        step_error: Optional[Exception] = None
        try:
            for number, step in enumerate(self.steps, 1):
                logger.debug("Applying step %d/%d", number, len(self.steps))
                try:
                    self._apply(step.config, state, instances, meta)
                    if step.check is not None:
                        step.check(state)
                    self._assert_empty_plan(step.config, state, instances, meta)
                except CheckFailure as e:
                    raise CheckFailure(f"Step {number}/{len(self.steps)} error: {e.message}") from e
        except Exception as e:
            step_error = e

        snapshot = state.copy()
        failures = self._destroy_all(state, instances, meta)
        if failures:
            lines = [f"{address}: {e}" for address, e in failures]
            if step_error is not None:
                lines.insert(0, f"step failed first: {step_error}")
            raise DestroyError(
                "Error destroying resources: " + "; ".join(lines),
                details={"left_behind": [address for address, _ in failures]},
            ) from (step_error or failures[0][1])
        if step_error is not None:
            raise step_error

        if self.check_destroy is not None:
            self.check_destroy(snapshot)
        return snapshot

    def _resource(self, address: str, instances: Dict[str, Resource]) -> Resource:
        if address not in instances:
            type_name = _type_of(address)
            if type_name not in self.resources:
                raise ConfigurationError(f"Unknown resource type '{type_name}'")
            instances[address] = self.resources[type_name]()
        return instances[address]

    def _resolve(self, config: Mapping[str, Any], state: State) -> Dict[str, Any]:
        resolved = {}
        for key, value in config.items():
            if isinstance(value, Ref):
                attrs = state.get(value.address).attributes
                if value.attribute not in attrs:
                    raise CheckFailure(f"{value.address}: attribute '{value.attribute}' not set")
                value = attrs[value.attribute]
            resolved[key] = value
        return resolved

    def _apply(
        self,
        config: Mapping[str, Mapping[str, Any]],
        state: State,
        instances: Dict[str, Resource],
        meta: ProviderConfig,
    ) -> None:
        for address in reversed([a for a in state.resources if a not in config]):
            self._destroy(address, state, instances, meta)

        for address, raw in config.items():
            resource = self._resource(address, instances)
            desired = self._resolve(raw, state)
            current = state.resources.get(address)

            if current is None:
                self._create(address, resource, desired, state, meta)
                continue

            diff = resource.diff(desired, current.attributes)
            if diff.empty:
                continue
            if diff.requires_replace:
                logger.info("%s must be replaced: %s", address, diff)
                self._destroy(address, state, instances, meta)
                self._create(address, resource, desired, state, meta)
            else:
                logger.info("%s will be updated in-place: %s", address, diff)
                data = resource.new_data(config=desired, state=current.attributes)
                resource.update(data, meta)
                state.resources[address] = ResourceState(resource.type_name, data.state())

    def _create(
        self,
        address: str,
        resource: Resource,
        desired: Mapping[str, Any],
        state: State,
        meta: ProviderConfig,
    ) -> None:
        data = resource.new_data(config=desired)
        resource.create(data, meta)
        if not data.id:
            raise CheckFailure(f"{address}: create returned no ID")
        state.resources[address] = ResourceState(resource.type_name, data.state())

    def _assert_empty_plan(
        self,
        config: Mapping[str, Mapping[str, Any]],
        state: State,
        instances: Dict[str, Resource],
        meta: ProviderConfig,
    ) -> None:
        for address, raw in config.items():
            resource = instances[address]
            current = state.get(address)
            data = resource.new_data(state=current.attributes)
            resource.read(data, meta)
            refreshed = data.state()
            if not refreshed:
                raise CheckFailure(f"{address}: resource disappeared after apply")
            state.resources[address] = ResourceState(resource.type_name, refreshed)

            diff = resource.diff(self._resolve(raw, state), refreshed)
            if not diff.empty:
                raise CheckFailure(
                    f"After applying this step, the plan was not empty: {address}: {diff}"
                )

    def _destroy(
        self,
        address: str,
        state: State,
        instances: Dict[str, Resource],
        meta: ProviderConfig,
    ) -> None:
        current = state.resources[address]
        resource = self._resource(address, instances)
        data = resource.new_data(state=current.attributes)
        resource.delete(data, meta)
        del state.resources[address]
        logger.info("Destroyed %s", address)

    def _destroy_all(
        self,
        state: State,
        instances: Dict[str, Resource],
        meta: ProviderConfig,
    ) -> List[Tuple[str, Exception]]:
        """Destroy every resource in reverse order; failed ones stay in state."""
        failures: List[Tuple[str, Exception]] = []
        for address in reversed(list(state.resources)):
            try:
                self._destroy(address, state, instances, meta)
            except Exception as e:
                logger.error("Failed to destroy %s: %s", address, e)
                failures.append((address, e))
        return failures


def check_resource_attr(address: str, key: str, value: str) -> Check:
    def check(state: State) -> None:
        attrs = state.get(address).attributes
        if key not in attrs:
            raise CheckFailure(f"{address}: Attribute '{key}' not found")
        if attrs[key] != value:
            raise CheckFailure(
                f"{address}: Attribute '{key}' expected {value!r}, got {attrs[key]!r}"
            )

    return check


def check_resource_attr_set(address: str, key: str) -> Check:
    def check(state: State) -> None:
        if not state.get(address).attributes.get(key):
            raise CheckFailure(f"{address}: Attribute '{key}' expected to be set")

    return check


def check_no_resource_attr(address: str, key: str) -> Check:
    def check(state: State) -> None:
        if key in state.get(address).attributes:
            raise CheckFailure(f"{address}: Attribute '{key}' found when not expected")

    return check


def compose_checks(*checks: Check) -> Check:
    """Run checks in order, stopping at the first failure."""

    def check(state: State) -> None:
        for number, fn in enumerate(checks, 1):
            try:
                fn(state)
            except CheckFailure as e:
                raise CheckFailure(f"Check {number}/{len(checks)} error: {e.message}") from e

    return check


def random_test_name(prefix: str = TEST_NAME_PREFIX) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:10]}"


def pre_check(credentials: Optional[CredentialManager] = None) -> None:
    """Fail fast when no DigitalOcean token is configured."""
    credentials = credentials or CredentialManager()
    if not credentials.is_available("digitalocean_token"):
        raise ConfigurationError(
            "DIGITALOCEAN_TOKEN or DIGITALOCEAN_ACCESS_TOKEN must be set for acceptance tests"
        )


def acceptance_enabled() -> bool:
    return os.getenv("DOCR_ACC", "") not in ("", "0", "false")
