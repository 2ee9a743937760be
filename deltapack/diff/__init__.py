"""Diff subsystem for jsondelta."""

from deltapack.diff.engine import analyze
from deltapack.diff.formatting import render_change_paths, render_diff_summary
from deltapack.diff.models import CHANGE_KINDS, ChangeKind, ChangeSet, DiffResult

__all__ = [
    "CHANGE_KINDS",
    "ChangeKind",
    "ChangeSet",
    "DiffResult",
    "analyze",
    "render_change_paths",
    "render_diff_summary",
]
