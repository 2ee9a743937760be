"""Stable public API surface for jsondelta.

This module is the supported import path for library users.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from deltapack import __version__
from deltapack.core import MISSING, InvalidSideError, InvalidValueError, Side
from deltapack.diff import ChangeSet, DiffResult
from deltapack.diff import analyze as _analyze
from deltapack.records import (
    DEFAULT_SANITATION_POLICY,
    DatasetComparison,
    SanitationPolicy,
    compare_datasets,
    parse_dataset,
    read_dataset,
)
from deltapack.render import render as _render
from deltapack.render import render_pair_html


def analyze(left: Any, right: Any) -> DiffResult:
    """Compare two JSON values structurally.

    Args:
        left: First (left) decoded JSON value.
        right: Second (right) decoded JSON value.

    Returns:
        Diff result whose ``changes`` classify paths as changed, added
        (right only) or removed (left only).

    Raises:
        InvalidValueError: If either value is outside the JSON domain.
    """
    return _analyze(left, right)


def render(value: Any, changes: DiffResult | ChangeSet | None, side: Side) -> str:
    """Render one side of a comparison as highlighted, escaped markup.

    Raises:
        InvalidSideError: If ``side`` is not ``"left"`` or ``"right"``.
        InvalidValueError: If ``value`` is outside the JSON domain.
    """
    return _render(value, changes, side)


def compare_text(
    left: str,
    right: str,
    *,
    left_label: str = "left",
    right_label: str = "right",
    sanitation_policy: SanitationPolicy = DEFAULT_SANITATION_POLICY,
) -> DatasetComparison:
    """Compare two CSV/TSV record datasets given as text."""
    return compare_datasets(
        parse_dataset(left, label=left_label, policy=sanitation_policy),
        parse_dataset(right, label=right_label, policy=sanitation_policy),
    )


def compare_files(
    left: str | Path,
    right: str | Path,
    *,
    sanitation_policy: SanitationPolicy = DEFAULT_SANITATION_POLICY,
) -> DatasetComparison:
    """Compare two CSV/TSV record dataset files keyed by entity_reference_id."""
    return compare_datasets(
        read_dataset(left, policy=sanitation_policy),
        read_dataset(right, policy=sanitation_policy),
    )


def report_html(left: Any, right: Any, *, title: str = "JSON comparison") -> str:
    """Return a standalone HTML page comparing two values side by side."""
    return render_pair_html(left, right, title=title)


__all__ = [
    "__version__",
    "MISSING",
    "Side",
    "ChangeSet",
    "DiffResult",
    "DatasetComparison",
    "SanitationPolicy",
    "InvalidSideError",
    "InvalidValueError",
    "analyze",
    "render",
    "compare_text",
    "compare_files",
    "report_html",
]
