"""Attribute validators shared by resource schemas."""

from __future__ import annotations

import re
from typing import Any, Callable, Iterable

from docr_tools.exceptions import SchemaError

_REGISTRY_NAME_RE = re.compile(r"^[a-z0-9-]{1,63}$")


def int_between(low: int, high: int) -> Callable[[str, Any], None]:
    def validate(name: str, value: Any) -> None:
        if not low <= value <= high:
            raise SchemaError(f"{name}: expected to be in the range ({low} - {high}), got {value}")

    return validate


def string_in(choices: Iterable[str]) -> Callable[[str, Any], None]:
    allowed = tuple(choices)

    def validate(name: str, value: Any) -> None:
        if value not in allowed:
            raise SchemaError(f"{name}: expected one of {list(allowed)}, got {value!r}")

    return validate


def registry_name(name: str, value: Any) -> None:
    if not _REGISTRY_NAME_RE.match(value):
        raise SchemaError(
            f"{name}: must be 1-63 lowercase alphanumeric characters or dashes, got {value!r}"
        )
