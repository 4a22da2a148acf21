"""
Resource schemas and attribute bags.

A Schema describes the attributes of a resource type. ResourceData is the
attribute bag handed to lifecycle callbacks: it merges prior state with the
desired configuration and renders the result back into a flat string map,
the form an orchestrator stores in state ("true", "3600", ...).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Iterator, Mapping, Optional

from docr_tools.exceptions import SchemaError

ID_KEY = "id"


class AttributeType(str, Enum):
    STRING = "string"
    BOOL = "bool"
    INT = "int"


@dataclass
class Attribute:
    """A single schema attribute."""

    type: AttributeType
    required: bool = False
    optional: bool = False
    computed: bool = False
    force_new: bool = False
    sensitive: bool = False
    default: Any = None
    validate: Optional[Callable[[str, Any], None]] = None
    description: str = ""

    @property
    def configurable(self) -> bool:
        return self.required or self.optional

    def coerce(self, name: str, value: Any) -> Any:
        """Convert a config or state value to the attribute's Python type."""
        if value is None:
            return None

        if self.type is AttributeType.BOOL:
            if isinstance(value, bool):
                return value
            if isinstance(value, str) and value.lower() in ("true", "false"):
                return value.lower() == "true"
            raise SchemaError(f"{name}: expected a bool, got {value!r}")

        if self.type is AttributeType.INT:
            if isinstance(value, bool):
                raise SchemaError(f"{name}: expected an int, got {value!r}")
            if isinstance(value, int):
                return value
            if isinstance(value, str):
                try:
                    return int(value)
                except ValueError:
                    pass
            raise SchemaError(f"{name}: expected an int, got {value!r}")

        if not isinstance(value, str):
            raise SchemaError(f"{name}: expected a string, got {value!r}")
        return value

    def flatten(self, value: Any) -> str:
        """Render a typed value as a state string."""
        if self.type is AttributeType.BOOL:
            return "true" if value else "false"
        return str(value)


@dataclass
class AttributeDiff:
    old: Optional[str]
    new: Optional[str]
    force_new: bool = False


@dataclass
class Diff:
    """Differences between a configuration and the current state."""

    changes: Dict[str, AttributeDiff] = field(default_factory=dict)

    @property
    def empty(self) -> bool:
        return not self.changes

    @property
    def requires_replace(self) -> bool:
        return any(change.force_new for change in self.changes.values())

    def __str__(self) -> str:
        if self.empty:
            return "no changes"
        return ", ".join(
            f"{name}: {c.old!r} => {c.new!r}{' (forces replacement)' if c.force_new else ''}"
            for name, c in sorted(self.changes.items())
        )


class Schema(Mapping[str, Attribute]):
    """Ordered collection of named attributes."""

    def __init__(self, attributes: Dict[str, Attribute]):
        self._attributes = dict(attributes)

    def __getitem__(self, name: str) -> Attribute:
        return self._attributes[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._attributes)

    def __len__(self) -> int:
        return len(self._attributes)

    def expand(self, state: Mapping[str, str]) -> Dict[str, Any]:
        """Convert a flat state map to typed values. Unknown keys are ignored."""
        values: Dict[str, Any] = {}
        for name, attr in self._attributes.items():
            if name in state:
                values[name] = attr.coerce(name, state[name])
        return values

    def apply_config(self, config: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Validate a configuration and fill in defaults.

        Raises:
            SchemaError: Unknown attribute, computed-only attribute set,
                missing required attribute, or a validator rejected the value.
        """
        for name in config:
            if name not in self._attributes:
                raise SchemaError(f"Unsupported argument: {name}")
            if not self._attributes[name].configurable:
                raise SchemaError(f"{name}: attribute is computed and cannot be set")

        values: Dict[str, Any] = {}
        for name, attr in self._attributes.items():
            if not attr.configurable:
                continue

            value = attr.coerce(name, config.get(name))
            if value is None:
                value = attr.default
            if value is None:
                if attr.required:
                    raise SchemaError(f"Missing required argument: {name}")
                continue

            if attr.validate is not None:
                attr.validate(name, value)
            values[name] = value
        return values

    def flatten(self, values: Mapping[str, Any]) -> Dict[str, str]:
        return {
            name: attr.flatten(values[name])
            for name, attr in self._attributes.items()
            if values.get(name) is not None
        }

    def diff(self, config: Mapping[str, Any], state: Mapping[str, str]) -> Diff:
        """
        Compare a configuration against state.

        Optional+computed attributes left out of the configuration keep
        whatever the server assigned and never show up as a change.
        """
        desired = self.flatten(self.apply_config(config))
        changes: Dict[str, AttributeDiff] = {}
        for name, attr in self._attributes.items():
            if not attr.configurable:
                continue
            if name not in desired and attr.computed:
                continue
            old, new = state.get(name), desired.get(name)
            if old != new:
                changes[name] = AttributeDiff(old=old, new=new, force_new=attr.force_new)
        return Diff(changes=changes)


class ResourceData:
    """
    Attribute bag passed to lifecycle callbacks.

    Values come from prior state, overlaid by the desired configuration.
    Callbacks set computed attributes with set() and the resource ID with
    set_id(); an empty ID means the resource does not exist.
    """

    def __init__(
        self,
        schema: Schema,
        config: Optional[Mapping[str, Any]] = None,
        state: Optional[Mapping[str, str]] = None,
    ):
        self._schema = schema
        state = state or {}
        self._id = state.get(ID_KEY, "")
        self._prior = schema.expand(state)
        self._values = dict(self._prior)
        if config is not None:
            self._values.update(schema.apply_config(config))

    @property
    def id(self) -> str:
        return self._id

    def set_id(self, value: str) -> None:
        self._id = value or ""

    def get(self, name: str) -> Any:
        if name not in self._schema:
            raise SchemaError(f"Unknown attribute: {name}")
        return self._values.get(name)

    def get_prior(self, name: str) -> Any:
        return self._prior.get(name)

    def set(self, name: str, value: Any) -> None:
        if name not in self._schema:
            raise SchemaError(f"Unknown attribute: {name}")
        self._values[name] = self._schema[name].coerce(name, value)

    def has_change(self, name: str) -> bool:
        return self._prior.get(name) != self._values.get(name)

    def state(self) -> Dict[str, str]:
        """Render the bag as a flat state map. Empty when the ID is cleared."""
        if not self._id:
            return {}
        flat = self._schema.flatten(self._values)
        flat[ID_KEY] = self._id
        return flat
