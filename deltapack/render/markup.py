"""Annotated markup rendering of one side of a comparison."""

from __future__ import annotations

from dataclasses import dataclass
import html
import json
import logging
import re
from typing import Any

from deltapack.core.exceptions import InvalidSideError
from deltapack.core.paths import ROOT, JsonPath
from deltapack.core.types import SIDES, Highlight, Side, describe_kind
from deltapack.core.validation import ensure_value
from deltapack.diff.models import EMPTY_CHANGES, ChangeSet, DiffResult

logger = logging.getLogger(__name__)

INDENT_UNIT = "  "
KEY_CLASS = "json-key"
HIGHLIGHT_CLASSES: dict[str, str] = {
    "changed": "diff-changed",
    "added": "diff-added",
    "removed": "diff-removed",
}

_LEADING_WHITESPACE_RE = re.compile(r"^\s+")
_WRAPPER_WHITESPACE_RE = re.compile(r"^<span([^>]*)>\s+")


@dataclass(frozen=True, slots=True)
class RenderContext:
    """Side being rendered plus the change-set it is highlighted against."""

    side: Side
    changes: ChangeSet


def render(value: Any, changes: DiffResult | ChangeSet | None, side: str) -> str:
    """Render ``value`` as indented markup with per-node highlight wrappers.

    ``side`` selects the perspective: ``removed`` paths only paint the left
    rendering, ``added`` paths only paint the right one, ``changed`` paths
    paint both.
    """
    ensure_value(value)
    context = RenderContext(side=normalize_side(side), changes=_coerce_changes(changes))
    markup = "\n".join(_render_tree(value, context))
    logger.debug("rendered %s side (%d chars)", context.side, len(markup))
    return markup


def normalize_side(side: str) -> Side:
    if side not in SIDES:
        raise InvalidSideError(f"side must be 'left' or 'right', got {side!r}")
    return side  # type: ignore[return-value]


def resolve_highlight(path: str, context: RenderContext) -> Highlight | None:
    """Pick the highlight for ``path``; ``changed`` wins over added/removed."""
    changes = context.changes
    if changes.contains("changed", path):
        return "changed"
    if context.side == "left" and changes.contains("removed", path):
        return "removed"
    if context.side == "right" and changes.contains("added", path):
        return "added"
    return None


def format_scalar(value: Any) -> str:
    """JSON literal text of a scalar, escaped for embedding in markup."""
    return html.escape(json.dumps(value, ensure_ascii=False), quote=True)


def format_key(key: str) -> str:
    """Quoted member name; the wrapping quotes stay literal."""
    return '"' + html.escape(json.dumps(key, ensure_ascii=False)[1:-1], quote=True) + '"'


def strip_indent(markup: str) -> str:
    """Drop leading indentation, including right after a highlight opening tag."""
    stripped = _LEADING_WHITESPACE_RE.sub("", markup, count=1)
    return _WRAPPER_WHITESPACE_RE.sub(r"<span\1>", stripped, count=1)


def wrap_highlight(content: str, highlight: Highlight | None) -> str:
    if highlight is None:
        return content
    return f"{_opening_tag(highlight)}{content}</span>"


def _opening_tag(highlight: Highlight) -> str:
    return f'<span class="{HIGHLIGHT_CLASSES[highlight]}">'


def _coerce_changes(changes: DiffResult | ChangeSet | None) -> ChangeSet:
    if changes is None:
        return EMPTY_CHANGES
    if isinstance(changes, DiffResult):
        return changes.changes
    return changes


@dataclass(slots=True)
class _Frame:
    """Non-empty container whose members are still being rendered."""

    path: JsonPath
    depth: int
    is_object: bool
    entries: list[tuple[Any, Any]]
    lines: list[str]
    highlight: Highlight | None
    position: int = 0

    def child_path(self) -> JsonPath:
        segment = self.entries[self.position][0]
        if self.is_object:
            return self.path.child_key(segment)
        return self.path.child_index(segment)


def _render_tree(value: Any, context: RenderContext) -> list[str]:
    # Explicit stack: nesting depth is bounded by memory, not the interpreter.
    stack: list[_Frame] = []
    lines = _enter(value, path=ROOT, depth=0, context=context, stack=stack)
    while stack:
        frame = stack[-1]
        if lines is not None:
            _attach_child(frame, lines, context)
            lines = None
        if frame.position < len(frame.entries):
            lines = _enter(
                frame.entries[frame.position][1],
                path=frame.child_path(),
                depth=frame.depth + 1,
                context=context,
                stack=stack,
            )
            continue
        stack.pop()
        closer = "}" if frame.is_object else "]"
        frame.lines.append(f"{INDENT_UNIT * frame.depth}{closer}")
        lines = _wrap_lines(frame.lines, frame.highlight)
    return lines  # type: ignore[return-value]


def _enter(
    value: Any,
    *,
    path: JsonPath,
    depth: int,
    context: RenderContext,
    stack: list[_Frame],
) -> list[str] | None:
    """Lines of a leaf or empty container, or ``None`` after pushing a frame."""
    kind = describe_kind(value)
    indent = INDENT_UNIT * depth
    highlight = resolve_highlight(str(path), context)

    if kind == "object" and value:
        entries: list[tuple[Any, Any]] = list(value.items())
        opener = "{"
    elif kind == "array" and value:
        entries = list(enumerate(value))
        opener = "["
    else:
        if kind == "object":
            body = "{}"
        elif kind == "array":
            body = "[]"
        else:
            body = format_scalar(value)
        return _wrap_lines([f"{indent}{body}"], highlight)

    stack.append(
        _Frame(
            path=path,
            depth=depth,
            is_object=kind == "object",
            entries=entries,
            lines=[f"{indent}{opener}"],
            highlight=highlight,
        )
    )
    return None


def _attach_child(frame: _Frame, child_lines: list[str], context: RenderContext) -> None:
    key = frame.entries[frame.position][0]
    child_path = frame.child_path()
    frame.position += 1

    prefix = INDENT_UNIT * (frame.depth + 1)
    if frame.is_object:
        prefix += f'<span class="{KEY_CLASS}">{format_key(key)}</span>: '
    child_lines[0] = prefix + strip_indent(child_lines[0])
    if frame.position < len(frame.entries):
        child_lines[-1] += ","
    frame.lines.extend(_wrap_lines(child_lines, resolve_highlight(str(child_path), context)))


def _wrap_lines(lines: list[str], highlight: Highlight | None) -> list[str]:
    """Multi-line counterpart of ``wrap_highlight``."""
    if highlight is not None:
        lines[0] = _opening_tag(highlight) + lines[0]
        lines[-1] += "</span>"
    return lines
