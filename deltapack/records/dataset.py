"""Delimited (CSV/TSV) record dataset ingestion."""

from __future__ import annotations

import csv
from dataclasses import dataclass, field
import json
import logging
from pathlib import Path
import re
from typing import Any

from deltapack.records.exceptions import DatasetFormatError
from deltapack.records.sanitize import (
    DEFAULT_SANITATION_POLICY,
    SanitationPolicy,
    sanitize_value,
)

logger = logging.getLogger(__name__)

ID_COLUMN = "entity_reference_id"
TYPE_COLUMN = "entity_type"
REPRESENTATION_COLUMN = "entity_representation"
UNKNOWN_ENTITY_TYPE = "—"

_FALLBACK_POSITIONS = {ID_COLUMN: 0, TYPE_COLUMN: 1, REPRESENTATION_COLUMN: 2}
_LINE_SPLIT_RE = re.compile(r"\r?\n")


@dataclass(slots=True)
class Record:
    """One dataset row: identity plus its decoded JSON representation."""

    reference_id: str
    entity_type: str
    representation: str
    parsed: Any = None
    parse_error: str | None = None
    pretty: str = ""

    @property
    def is_valid(self) -> bool:
        return self.parse_error is None

    def to_dict(self) -> dict[str, Any]:
        return {
            "entity_reference_id": self.reference_id,
            "entity_type": self.entity_type,
            "valid": self.is_valid,
            "parse_error": self.parse_error,
        }


@dataclass(slots=True)
class Dataset:
    """Records keyed by reference id, in first-seen order."""

    label: str
    records: dict[str, Record] = field(default_factory=dict)
    errors: list[str] = field(default_factory=list)

    @property
    def order(self) -> list[str]:
        return list(self.records.keys())


@dataclass(frozen=True, slots=True)
class _Header:
    is_header: bool
    columns: dict[str, int]


def parse_dataset(
    text: str,
    *,
    label: str,
    policy: SanitationPolicy = DEFAULT_SANITATION_POLICY,
) -> Dataset:
    """Parse CSV or TSV text into records.

    Row problems are collected as messages on the dataset instead of raising.
    Duplicate ids keep the latest row at the position of the first one.
    """
    dataset = Dataset(label=label)
    if not text.strip():
        return dataset

    lines = [line for line in _LINE_SPLIT_RE.split(text) if line.strip()]
    delimiter = detect_delimiter(lines)
    header = _read_header(lines[0], delimiter)
    start = 1 if header.is_header else 0

    for line_index in range(start, len(lines)):
        line_number = line_index + 1
        fields = split_line(lines[line_index], delimiter)
        if len(fields) < 3:
            dataset.errors.append(f"{label}: Line {line_number} has fewer than 3 columns.")
            continue

        reference_id = _extract_field(fields, header, ID_COLUMN)
        if not reference_id:
            dataset.errors.append(
                f"{label}: Line {line_number} is missing an {ID_COLUMN}."
            )
            continue

        record = build_record(
            reference_id=reference_id,
            entity_type=_extract_field(fields, header, TYPE_COLUMN),
            representation=_extract_field(fields, header, REPRESENTATION_COLUMN),
            policy=policy,
        )

        if reference_id in dataset.records:
            dataset.errors.append(
                f"{label}: Duplicate {ID_COLUMN} '{reference_id}' detected; "
                "keeping the latest entry."
            )
        dataset.records[reference_id] = record

    for message in dataset.errors:
        logger.info(message)
    logger.debug("parsed %s dataset: %d records", label, len(dataset.records))
    return dataset


def read_dataset(
    path: str | Path,
    *,
    label: str | None = None,
    policy: SanitationPolicy = DEFAULT_SANITATION_POLICY,
) -> Dataset:
    """Read a UTF-8 dataset file and parse it."""
    dataset_path = Path(path)
    try:
        text = dataset_path.read_text(encoding="utf-8")
    except UnicodeDecodeError as error:
        raise DatasetFormatError(f"Dataset is not UTF-8 text ({dataset_path}): {error}") from error
    return parse_dataset(text, label=label or dataset_path.name, policy=policy)


def build_record(
    *,
    reference_id: str,
    entity_type: str,
    representation: str,
    policy: SanitationPolicy = DEFAULT_SANITATION_POLICY,
) -> Record:
    record = Record(
        reference_id=reference_id,
        entity_type=entity_type or UNKNOWN_ENTITY_TYPE,
        representation=representation,
        pretty=representation,
    )
    if not representation:
        return record

    try:
        decoded = json.loads(representation)
    except json.JSONDecodeError as error:
        record.parse_error = str(error)
        return record

    record.parsed = sanitize_value(decoded, policy=policy)
    record.pretty = json.dumps(record.parsed, indent=2, ensure_ascii=False)
    return record


def detect_delimiter(lines: list[str]) -> str:
    """Tab when the first non-empty line has at least as many tabs as commas."""
    sample = next((line for line in lines if line.strip()), "")
    return "\t" if sample.count("\t") >= sample.count(",") else ","


def split_line(line: str, delimiter: str) -> list[str]:
    if delimiter == "\t":
        return line.split("\t")
    return next(csv.reader([line], delimiter=delimiter, quotechar='"', doublequote=True))


def normalize_field(value: str) -> str:
    """Trim and unwrap a double-quoted field."""
    trimmed = value.strip()
    if len(trimmed) >= 2 and trimmed.startswith('"') and trimmed.endswith('"'):
        return trimmed[1:-1].replace('""', '"').strip()
    return trimmed


def _read_header(line: str, delimiter: str) -> _Header:
    lowered = [normalize_field(value).lower() for value in split_line(line, delimiter)]
    columns = {
        name: lowered.index(name) if name in lowered else -1
        for name in _FALLBACK_POSITIONS
    }
    return _Header(is_header=ID_COLUMN in lowered, columns=columns)


def _extract_field(fields: list[str], header: _Header, name: str) -> str:
    index = _FALLBACK_POSITIONS[name]
    if header.is_header and header.columns[name] >= 0:
        index = header.columns[name]
    value = fields[index] if index < len(fields) else ""
    return normalize_field(value)
