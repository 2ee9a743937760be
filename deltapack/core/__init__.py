"""Core value model and path primitives for jsondelta."""

from deltapack.core.exceptions import DeltaError, InvalidSideError, InvalidValueError
from deltapack.core.paths import (
    ROOT,
    ROOT_ARRAY_MARKER,
    ROOT_PATH,
    JsonPath,
    is_root_designator,
)
from deltapack.core.types import MISSING, SIDES, Highlight, Side, ValueKind, describe_kind
from deltapack.core.validation import ensure_value

__all__ = [
    "DeltaError",
    "InvalidSideError",
    "InvalidValueError",
    "JsonPath",
    "MISSING",
    "ROOT",
    "ROOT_ARRAY_MARKER",
    "ROOT_PATH",
    "SIDES",
    "Highlight",
    "Side",
    "ValueKind",
    "describe_kind",
    "ensure_value",
    "is_root_designator",
]
