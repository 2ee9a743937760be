"""Type definitions for jsondelta core values."""

from __future__ import annotations

from typing import Any, Literal

ValueKind = Literal[
    "missing",
    "null",
    "object",
    "array",
    "string",
    "number",
    "boolean",
]

Side = Literal["left", "right"]
Highlight = Literal["changed", "added", "removed"]

SIDES: tuple[str, ...] = ("left", "right")


class _Missing:
    """Marker for a node absent on one side (missing key or index)."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()


def describe_kind(value: Any) -> ValueKind:
    """Classify a value into its JSON kind.

    ``bool`` is checked before numbers because it subclasses ``int``.
    """
    if value is MISSING:
        return "missing"
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, dict):
        return "object"
    if isinstance(value, (list, tuple)):
        return "array"
    raise TypeError(f"Unsupported value type: {type(value).__name__}")
