"""Pairwise comparison of two record datasets."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Any, Literal

from deltapack.diff import DiffResult, analyze
from deltapack.diff.formatting import plural
from deltapack.records.dataset import UNKNOWN_ENTITY_TYPE, Dataset, Record

logger = logging.getLogger(__name__)

RecordStatus = Literal["MATCH", "DIFF", "MISSING", "INVALID"]
RECORD_STATUSES: tuple[str, ...] = ("MATCH", "DIFF", "MISSING", "INVALID")

STATUS_LABELS = {
    "MATCH": "MATCH",
    "DIFF": "DIFF",
    "MISSING": "MISSING",
    "INVALID": "INVALID JSON",
}


def status_label(status: str) -> str:
    return STATUS_LABELS.get(status, status)


@dataclass(slots=True)
class RecordComparison:
    """Comparison outcome for a single reference id."""

    index: int
    reference_id: str
    entity_type: str
    status: RecordStatus
    left: Record | None
    right: Record | None
    diff: DiffResult | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "index": self.index,
            "entity_reference_id": self.reference_id,
            "entity_type": self.entity_type,
            "status": self.status,
            "left": self.left.to_dict() if self.left is not None else None,
            "right": self.right.to_dict() if self.right is not None else None,
            "diff": self.diff.to_dict() if self.diff is not None else None,
        }


@dataclass(slots=True)
class DatasetComparison:
    """All record comparisons between a left and a right dataset."""

    left_label: str
    right_label: str
    results: list[RecordComparison] = field(default_factory=list)
    messages: list[str] = field(default_factory=list)

    @property
    def all_match(self) -> bool:
        return all(result.status == "MATCH" for result in self.results)

    def find(self, reference_id: str) -> RecordComparison | None:
        for result in self.results:
            if result.reference_id == reference_id:
                return result
        return None

    def summary(self) -> dict[str, int]:
        counts = {status: 0 for status in RECORD_STATUSES}
        for result in self.results:
            counts[result.status] += 1
        return counts

    def to_dict(self) -> dict[str, Any]:
        return {
            "left_label": self.left_label,
            "right_label": self.right_label,
            "all_match": self.all_match,
            "summary": self.summary(),
            "messages": list(self.messages),
            "results": [result.to_dict() for result in self.results],
        }


def compare_datasets(left: Dataset, right: Dataset) -> DatasetComparison:
    """Pair records by id and classify each pair.

    Ordering follows first occurrence: left ids, then ids only seen on the
    right.
    """
    comparison = DatasetComparison(
        left_label=left.label,
        right_label=right.label,
        messages=[*left.errors, *right.errors],
    )

    for reference_id in merge_orders(left.order, right.order):
        comparison.results.append(
            compare_records(
                reference_id,
                left.records.get(reference_id),
                right.records.get(reference_id),
                index=len(comparison.results) + 1,
            )
        )

    logger.info(
        "compared %s vs %s: %s",
        left.label,
        right.label,
        comparison.summary(),
    )
    return comparison


def compare_records(
    reference_id: str,
    left: Record | None,
    right: Record | None,
    *,
    index: int = 1,
) -> RecordComparison:
    entity_type = _entity_type(left, right)
    diff: DiffResult | None = None

    if left is None or right is None:
        status: RecordStatus = "MISSING"
    elif not left.is_valid or not right.is_valid:
        status = "INVALID"
    else:
        diff = analyze(left.parsed, right.parsed)
        status = "MATCH" if diff.is_match else "DIFF"

    return RecordComparison(
        index=index,
        reference_id=reference_id,
        entity_type=entity_type,
        status=status,
        left=left,
        right=right,
        diff=diff,
    )


def merge_orders(left: list[str], right: list[str]) -> list[str]:
    merged: list[str] = []
    seen: set[str] = set()
    for reference_id in [*left, *right]:
        if reference_id not in seen:
            merged.append(reference_id)
            seen.add(reference_id)
    return merged


def describe_record(
    result: RecordComparison,
    *,
    left_label: str = "left",
    right_label: str = "right",
) -> str:
    """Plain-text explanation of a record's comparison status."""
    lines: list[str] = []
    if result.status == "MATCH":
        lines.append(f"MATCH: {left_label} and {right_label} JSON payloads are identical.")
    elif result.status == "DIFF":
        lines.append("DIFF: The JSON payloads differ.")
        if result.diff is not None:
            counts = result.diff.summary()
            changed = counts["changed"]
            lines.append(
                f"Highlights show {changed} changed field{plural(changed)}, "
                f"{counts['removed']} removed, and {counts['added']} added."
            )
    elif result.status == "MISSING":
        lines.append("MISSING: Record is present on only one side.")
    else:
        lines.append("INVALID JSON: At least one record could not be parsed as valid JSON.")

    if result.left is not None and result.left.parse_error:
        lines.append(f"{left_label} parse error: {result.left.parse_error}.")
    if result.right is not None and result.right.parse_error:
        lines.append(f"{right_label} parse error: {result.right.parse_error}.")
    return " ".join(lines)


def _entity_type(left: Record | None, right: Record | None) -> str:
    for record in (left, right):
        if record is not None and record.entity_type:
            return record.entity_type
    return UNKNOWN_ENTITY_TYPE
