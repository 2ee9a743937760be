"""Standalone HTML reports with side-by-side annotated renderings."""

from __future__ import annotations

import html
from typing import Any

from deltapack.diff import DiffResult, analyze
from deltapack.render.markup import render
from deltapack.records.compare import (
    DatasetComparison,
    RecordComparison,
    describe_record,
    status_label,
)
from deltapack.records.dataset import Record

_STYLE = """
    :root {
      --bg: #f7f4ed;
      --panel: #fffdfa;
      --ink: #1f2933;
      --muted: #6b7280;
      --border: #d6d3d1;
      --changed: #fde68a;
      --added: #bbf7d0;
      --removed: #fecaca;
      --match: #047857;
      --diff: #b45309;
      --missing: #7c2d12;
      --invalid: #b91c1c;
    }

    * { box-sizing: border-box; }
    body {
      margin: 0;
      padding: 20px 24px;
      font-family: "Avenir Next", "Trebuchet MS", "Segoe UI", sans-serif;
      color: var(--ink);
      background: var(--bg);
    }

    h1 { margin: 0 0 12px; font-size: 1.5rem; }
    h2 { margin: 24px 0 8px; font-size: 1.1rem; }

    .summary { color: var(--muted); margin-bottom: 12px; }

    .panes {
      display: grid;
      grid-template-columns: repeat(2, minmax(280px, 1fr));
      gap: 12px;
    }

    .pane {
      border: 1px solid var(--border);
      border-radius: 8px;
      background: var(--panel);
      padding: 10px 12px;
      overflow-x: auto;
    }

    .pane h3 { margin: 0 0 8px; font-size: 0.95rem; }
    pre { margin: 0; white-space: pre; font-size: 0.85rem; }

    .json-key { color: #1d4ed8; }
    .diff-changed { background: var(--changed); }
    .diff-added { background: var(--added); }
    .diff-removed { background: var(--removed); }

    table { border-collapse: collapse; width: 100%; background: var(--panel); }
    th, td { border: 1px solid var(--border); padding: 6px 10px; text-align: left; }

    .status-match { color: var(--match); }
    .status-diff { color: var(--diff); }
    .status-missing { color: var(--missing); }
    .status-invalid { color: var(--invalid); }
    .placeholder { color: var(--muted); font-style: italic; }
    .messages { color: var(--invalid); }
"""


def render_pair_html(
    left: Any,
    right: Any,
    *,
    result: DiffResult | None = None,
    title: str = "JSON comparison",
    left_label: str = "left",
    right_label: str = "right",
) -> str:
    """Build a standalone HTML page comparing two values side by side."""
    diff = result if result is not None else analyze(left, right)
    counts = diff.summary()
    status = "MATCH" if diff.is_match else "DIFF"
    summary = (
        f"Status: {status}. changed={counts['changed']} "
        f"added={counts['added']} removed={counts['removed']}"
    )
    body = "\n".join(
        [
            f"<h1>{html.escape(title)}</h1>",
            f'<div class="summary {_status_class(status)}">{html.escape(summary)}</div>',
            _panes(
                _json_pane(left_label, render(left, diff, "left")),
                _json_pane(right_label, render(right, diff, "right")),
            ),
        ]
    )
    return _document(title, body)


def render_dataset_report_html(
    comparison: DatasetComparison,
    *,
    title: str = "Dataset comparison",
) -> str:
    """Build a standalone HTML report with a results table and record details."""
    parts: list[str] = [f"<h1>{html.escape(title)}</h1>"]
    counts = comparison.summary()
    parts.append(
        '<div class="summary">'
        + html.escape(", ".join(f"{status}={count}" for status, count in counts.items()))
        + "</div>"
    )

    if comparison.messages:
        items = "".join(f"<li>{html.escape(message)}</li>" for message in comparison.messages)
        parts.append(
            f'<div class="messages"><strong>Review the following issues:</strong><ul>{items}</ul></div>'
        )

    parts.append(_results_table(comparison))
    for result in comparison.results:
        parts.append(
            _record_section(
                result,
                left_label=comparison.left_label,
                right_label=comparison.right_label,
            )
        )
    return _document(title, "\n".join(parts))


def _results_table(comparison: DatasetComparison) -> str:
    if not comparison.results:
        return (
            '<p class="placeholder">No overlapping records found. '
            "Verify the input data and try again.</p>"
        )

    rows = [
        "<table>",
        "<thead><tr><th>#</th><th>Entity Reference ID</th><th>Entity Type</th>"
        "<th>Status</th></tr></thead>",
        "<tbody>",
    ]
    for result in comparison.results:
        anchor = html.escape(_anchor(result), quote=True)
        rows.append(
            f'<tr class="{_status_class(result.status)}">'
            f"<td>{result.index}</td>"
            f'<td><a href="#{anchor}">{html.escape(result.reference_id)}</a></td>'
            f"<td>{html.escape(result.entity_type)}</td>"
            f"<td>{html.escape(status_label(result.status))}</td>"
            "</tr>"
        )
    rows.extend(["</tbody>", "</table>"])
    return "\n".join(rows)


def _record_section(result: RecordComparison, *, left_label: str, right_label: str) -> str:
    heading = (
        f'<h2 id="{html.escape(_anchor(result), quote=True)}">'
        f"Entity Reference ID: {html.escape(result.reference_id)} "
        f'<span class="{_status_class(result.status)}">'
        f"(Status: {html.escape(status_label(result.status))})</span></h2>"
    )
    summary = describe_record(result, left_label=left_label, right_label=right_label)
    return "\n".join(
        [
            "<section>",
            heading,
            f'<div class="summary">{html.escape(summary)}</div>',
            _panes(
                _record_pane(left_label, result.left, result.diff, "left"),
                _record_pane(right_label, result.right, result.diff, "right"),
            ),
            "</section>",
        ]
    )


def _record_pane(label: str, record: Record | None, diff: DiffResult | None, side: str) -> str:
    if record is None:
        return _pane(label, "Missing", '<div class="placeholder">No data available.</div>')

    if not record.is_valid:
        content = (
            f'<div class="status-invalid">Invalid JSON: {html.escape(record.parse_error or "")}</div>'
            f"<pre>{html.escape(record.representation)}</pre>"
        )
        return _pane(label, "Invalid", content)

    if diff is not None and _has_content(record.parsed):
        return _pane(label, "Valid", f"<pre>{render(record.parsed, diff, side)}</pre>")
    return _pane(label, "Valid", f"<pre>{html.escape(record.pretty)}</pre>")


def _has_content(value: Any) -> bool:
    """Empty containers count as content; null, false, 0 and "" do not."""
    if isinstance(value, (dict, list)):
        return True
    return bool(value)


def _json_pane(label: str, markup: str) -> str:
    return _pane(label, None, f"<pre>{markup}</pre>")


def _pane(label: str, badge: str | None, content: str) -> str:
    heading = html.escape(label)
    if badge:
        heading = f"{heading} <small>({html.escape(badge)})</small>"
    return f'<div class="pane"><h3>{heading}</h3>{content}</div>'


def _panes(left: str, right: str) -> str:
    return f'<div class="panes">{left}{right}</div>'


def _anchor(result: RecordComparison) -> str:
    return f"record-{result.index}"


def _status_class(status: str) -> str:
    return "status-" + status.lower().replace(" ", "-")


def _document(title: str, body: str) -> str:
    return (
        "<!doctype html>\n"
        '<html lang="en">\n'
        "<head>\n"
        '  <meta charset="utf-8" />\n'
        '  <meta name="viewport" content="width=device-width, initial-scale=1" />\n'
        f"  <title>{html.escape(title)}</title>\n"
        f"  <style>{_STYLE}  </style>\n"
        "</head>\n"
        "<body>\n"
        f"{body}\n"
        "</body>\n"
        "</html>\n"
    )
