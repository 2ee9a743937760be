"""CLI-friendly rendering for change-sets."""

from __future__ import annotations

from typing import Callable

from deltapack.core.paths import is_root_designator
from deltapack.diff.models import CHANGE_KINDS, DiffResult

_MARKERS = {"changed": "~", "added": "+", "removed": "-"}


def render_diff_summary(result: DiffResult) -> str:
    summary = result.summary()
    return (
        f"match={result.is_match} changed={summary['changed']} "
        f"added={summary['added']} removed={summary['removed']}"
    )


def render_change_paths(
    result: DiffResult,
    *,
    max_paths: int = 50,
    style: Callable[[str, str], str] | None = None,
) -> str:
    """List classified paths, one per line; ``style`` decorates each (marker, kind)."""
    if result.is_match:
        return "no differences detected"

    entries: list[tuple[str, str]] = []
    for kind in CHANGE_KINDS:
        for path in result.changes.paths(kind):
            entries.append((path, kind))
    entries.sort()

    lines: list[str] = ["changes:"]
    for path, kind in entries[:max_paths]:
        display = "<root>" if is_root_designator(path) else path
        marker = _MARKERS[kind] if style is None else style(_MARKERS[kind], kind)
        lines.append(f"  {marker} {display} ({kind})")
    if len(entries) > max_paths:
        lines.append(f"  ... {len(entries) - max_paths} additional paths omitted")
    return "\n".join(lines)


def plural(count: int) -> str:
    return "" if count == 1 else "s"
