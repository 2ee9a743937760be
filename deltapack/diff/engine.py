"""Lock-step structural differencer for JSON values."""

from __future__ import annotations

import logging
from typing import Any

from deltapack.core.paths import ROOT, JsonPath, root_key
from deltapack.core.types import MISSING, describe_kind
from deltapack.core.validation import ensure_value
from deltapack.diff.models import ChangeSet, DiffResult

logger = logging.getLogger(__name__)


def analyze(left: Any, right: Any) -> DiffResult:
    """Diff two values in O(n) node count.

    Nodes are correlated by structural path. Presence and type mismatches are
    terminal; an array length mismatch flags the array and still compares
    its elements.
    """
    ensure_value(left, allow_missing=True)
    ensure_value(right, allow_missing=True)

    out: dict[str, set[str]] = {"changed": set(), "added": set(), "removed": set()}
    _walk(left, right, path=ROOT, out=out)

    result = DiffResult(
        changes=ChangeSet(
            changed=frozenset(out["changed"]),
            added=frozenset(out["added"]),
            removed=frozenset(out["removed"]),
        )
    )
    logger.debug("analyze finished: match=%s %s", result.is_match, result.summary())
    return result


def _walk(left: Any, right: Any, *, path: JsonPath, out: dict[str, set[str]]) -> None:
    pending: list[tuple[Any, Any, JsonPath]] = [(left, right, path)]
    while pending:
        left, right, path = pending.pop()
        left_kind = describe_kind(left)
        right_kind = describe_kind(right)

        if left_kind == "missing" and right_kind == "missing":
            continue

        if left_kind == "missing":
            out["added"].add(_path_key(path, is_array=right_kind == "array"))
            continue

        if right_kind == "missing":
            out["removed"].add(_path_key(path, is_array=left_kind == "array"))
            continue

        if left_kind != right_kind:
            out["changed"].add(str(path))
            continue

        if left_kind == "object":
            keys = set(left.keys()) | set(right.keys())
            for key in keys:
                pending.append(
                    (left.get(key, MISSING), right.get(key, MISSING), path.child_key(key))
                )
            continue

        if left_kind == "array":
            if len(left) != len(right):
                out["changed"].add(_path_key(path, is_array=True))
            max_len = max(len(left), len(right))
            for idx in range(max_len):
                pending.append(
                    (
                        left[idx] if idx < len(left) else MISSING,
                        right[idx] if idx < len(right) else MISSING,
                        path.child_index(idx),
                    )
                )
            continue

        if left != right:
            out["changed"].add(str(path))


def _path_key(path: JsonPath, *, is_array: bool) -> str:
    if path.is_root:
        return root_key(is_array=is_array)
    return str(path)
