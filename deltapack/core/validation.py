"""Eager validation of inputs against the JSON value domain."""

from __future__ import annotations

import math
from typing import Any

from deltapack.core.exceptions import InvalidValueError
from deltapack.core.paths import ROOT, JsonPath
from deltapack.core.types import MISSING


def ensure_value(value: Any, *, allow_missing: bool = False) -> None:
    """Raise ``InvalidValueError`` unless ``value`` is a well-formed JSON value.

    Rejects non-finite floats, non-string object keys, unsupported types and
    cyclic containers. Shared (acyclic) subtrees are accepted.
    """
    if value is MISSING:
        if allow_missing:
            return
        raise InvalidValueError("MISSING is only accepted as a root argument")
    _check(value)


def _check(value: Any) -> None:
    # Entries flagged ``leaving`` pop a container off the ancestor chain once
    # its members have been checked.
    ancestors: set[int] = set()
    pending: list[tuple[Any, JsonPath, bool]] = [(value, ROOT, False)]
    while pending:
        item, path, leaving = pending.pop()
        if leaving:
            ancestors.discard(id(item))
            continue

        if item is None or isinstance(item, (bool, str, int)):
            continue

        if isinstance(item, float):
            if math.isnan(item) or math.isinf(item):
                raise InvalidValueError(f"Non-finite number at {_display(path)}: {item!r}")
            continue

        if not isinstance(item, (dict, list, tuple)):
            raise InvalidValueError(
                f"Unsupported value type at {_display(path)}: {type(item).__name__}"
            )

        marker = id(item)
        if marker in ancestors:
            raise InvalidValueError(f"Cyclic reference at {_display(path)}")
        ancestors.add(marker)
        pending.append((item, path, True))

        members: list[tuple[Any, JsonPath, bool]] = []
        if isinstance(item, dict):
            for key, member in item.items():
                if not isinstance(key, str):
                    raise InvalidValueError(
                        f"Object key must be a string at {_display(path)}: {key!r}"
                    )
                members.append((member, path.child_key(key), False))
        else:
            for index, member in enumerate(item):
                members.append((member, path.child_index(index), False))
        pending.extend(reversed(members))


def _display(path: JsonPath) -> str:
    return str(path) or "<root>"
