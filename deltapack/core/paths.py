"""Structural paths shared by the differencer and the renderer."""

from __future__ import annotations

from dataclasses import dataclass

ROOT_PATH = ""
ROOT_ARRAY_MARKER = "[]"
ROOT_DESIGNATORS = frozenset({ROOT_PATH, ROOT_ARRAY_MARKER})


@dataclass(frozen=True, slots=True)
class JsonPath:
    """Address of a node inside a value tree.

    Segments are object keys (``str``) or array indices (``int``). The
    canonical string form joins keys with ``.`` and renders indices as
    ``[i]``; the root is the empty string.
    """

    segments: tuple[str | int, ...] = ()

    @property
    def is_root(self) -> bool:
        return not self.segments

    def child_key(self, key: str) -> "JsonPath":
        return JsonPath(self.segments + (key,))

    def child_index(self, index: int) -> "JsonPath":
        return JsonPath(self.segments + (index,))

    def __str__(self) -> str:
        parts: list[str] = []
        for segment in self.segments:
            if isinstance(segment, int):
                parts.append(f"[{segment}]")
            elif parts:
                parts.append(f".{segment}")
            else:
                parts.append(segment)
        return "".join(parts)


ROOT = JsonPath()


def is_root_designator(path: str) -> bool:
    return path in ROOT_DESIGNATORS


def root_key(*, is_array: bool) -> str:
    """Path recorded for a finding at the root of the tree."""
    return ROOT_ARRAY_MARKER if is_array else ROOT_PATH
