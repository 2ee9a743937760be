"""Data models for structural change-sets."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

from deltapack.core.paths import ROOT_DESIGNATORS, is_root_designator

ChangeKind = Literal["changed", "added", "removed"]
CHANGE_KINDS: tuple[str, ...] = ("changed", "added", "removed")


@dataclass(frozen=True, slots=True)
class ChangeSet:
    """Paths classified as changed, added (right only) or removed (left only)."""

    changed: frozenset[str] = field(default_factory=frozenset)
    added: frozenset[str] = field(default_factory=frozenset)
    removed: frozenset[str] = field(default_factory=frozenset)

    @property
    def is_empty(self) -> bool:
        return not (self.changed or self.added or self.removed)

    def paths(self, kind: ChangeKind) -> frozenset[str]:
        if kind not in CHANGE_KINDS:
            raise ValueError(f"Unsupported change kind: {kind}")
        return getattr(self, kind)

    def contains(self, kind: ChangeKind, path: str) -> bool:
        """Membership test where ``""`` and ``"[]"`` both designate the root."""
        paths = self.paths(kind)
        if is_root_designator(path):
            return not paths.isdisjoint(ROOT_DESIGNATORS)
        return path in paths

    def counts(self) -> dict[str, int]:
        return {
            "changed": len(self.changed),
            "added": len(self.added),
            "removed": len(self.removed),
        }

    def to_dict(self) -> dict[str, list[str]]:
        return {
            "changed": sorted(self.changed),
            "added": sorted(self.added),
            "removed": sorted(self.removed),
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "ChangeSet":
        return cls(
            changed=frozenset(raw.get("changed", ())),
            added=frozenset(raw.get("added", ())),
            removed=frozenset(raw.get("removed", ())),
        )


EMPTY_CHANGES = ChangeSet()


@dataclass(frozen=True, slots=True)
class DiffResult:
    """Outcome of comparing a left and a right value."""

    changes: ChangeSet = EMPTY_CHANGES

    @property
    def is_match(self) -> bool:
        return self.changes.is_empty

    def summary(self) -> dict[str, int]:
        return self.changes.counts()

    def to_dict(self) -> dict[str, Any]:
        return {
            "is_match": self.is_match,
            "summary": self.summary(),
            "changes": self.changes.to_dict(),
        }
