import json
from importlib.metadata import PackageNotFoundError, version as package_version
import logging
from pathlib import Path
from dataclasses import dataclass
from typing import Any, NoReturn

import typer

from deltapack.core import InvalidValueError
from deltapack.diff import DiffResult, analyze, render_change_paths, render_diff_summary
from deltapack.records import (
    DEFAULT_SANITATION_POLICY,
    SANITIZE_CONFIG_ENV_VAR,
    DatasetFormatError,
    SanitationPolicy,
    SanitationPolicyConfigError,
    compare_datasets,
    describe_record,
    load_sanitation_policy_from_file,
    read_dataset,
    sanitize_value,
    status_label,
)
from deltapack.render import render, render_dataset_report_html, render_pair_html

app = typer.Typer(help="jsondelta CLI")

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class _OutputOptions:
    quiet: bool = False
    no_color: bool = False
    stable_json: bool = True


_OUTPUT_OPTIONS = _OutputOptions()
_LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"
_KIND_COLORS = {"changed": "yellow", "added": "green", "removed": "red"}
_STATUS_COLORS = {"MATCH": "green", "DIFF": "yellow", "MISSING": "red", "INVALID": "magenta"}


class _InputError(Exception):
    """A CLI input file could not be loaded."""


def _resolve_cli_version() -> str:
    try:
        return package_version("jsondelta")
    except PackageNotFoundError:
        from deltapack import __version__ as local_version

        return local_version


def _version_callback(value: bool) -> None:
    if not value:
        return
    typer.echo(_resolve_cli_version(), color=False)
    raise typer.Exit()


@app.callback()
def app_options(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show jsondelta version and exit.",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        help="Suppress non-error text output.",
    ),
    no_color: bool = typer.Option(
        False,
        "--no-color",
        help="Disable ANSI color output (markers and statuses).",
    ),
    stable_json: bool = typer.Option(
        True,
        "--stable-json/--pretty-json",
        help="Emit stable compact JSON (or pretty JSON).",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Log debug diagnostics to stderr.",
    ),
) -> None:
    """Global output controls for all CLI commands."""
    _OUTPUT_OPTIONS.quiet = quiet
    _OUTPUT_OPTIONS.no_color = no_color
    _OUTPUT_OPTIONS.stable_json = stable_json
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format=_LOG_FORMAT, force=True)


def _color_mode() -> bool | None:
    # None lets click strip ANSI codes when the stream is not a terminal.
    return False if _OUTPUT_OPTIONS.no_color else None


def _style(text: str, color: str) -> str:
    if _OUTPUT_OPTIONS.no_color:
        return text
    return typer.style(text, fg=color)


def _echo(message: str, *, err: bool = False, force: bool = False) -> None:
    if _OUTPUT_OPTIONS.quiet and not err and not force:
        return
    typer.echo(message, err=err, color=_color_mode())


def _echo_json(payload: dict[str, Any], *, err: bool = False) -> None:
    if _OUTPUT_OPTIONS.stable_json:
        rendered = json.dumps(
            payload,
            ensure_ascii=True,
            sort_keys=True,
            separators=(",", ":"),
        )
    else:
        rendered = json.dumps(
            payload,
            ensure_ascii=True,
            sort_keys=True,
            indent=2,
        )
    typer.echo(rendered, err=err, color=_color_mode())


def _fail(
    command: str,
    error: Exception,
    *,
    json_output: bool,
    extra: dict[str, Any],
) -> NoReturn:
    message = f"{command} failed: {error}"
    if json_output:
        _echo_json({"status": "error", "exit_code": 1, "message": message, **extra})
    else:
        _echo(message, err=True)
    raise typer.Exit(code=1) from error


def _load_policy(config_path: Path | None) -> SanitationPolicy:
    if config_path is None:
        return DEFAULT_SANITATION_POLICY
    return load_sanitation_policy_from_file(config_path)


def _load_document(path: Path, *, policy: SanitationPolicy | None) -> Any:
    try:
        value = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as error:
        raise _InputError(f"file not found: {path}") from error
    except OSError as error:
        raise _InputError(f"cannot read {path}: {error.strerror or error}") from error
    except (json.JSONDecodeError, UnicodeDecodeError) as error:
        raise _InputError(f"invalid JSON in {path}: {error}") from error
    if policy is not None:
        value = sanitize_value(value, policy=policy)
    logger.debug("loaded document %s", path)
    return value


def _load_pair(
    left: Path,
    right: Path,
    *,
    sanitize: bool,
    sanitize_config: Path | None,
) -> tuple[Any, Any]:
    policy = _load_policy(sanitize_config) if sanitize or sanitize_config else None
    return (
        _load_document(left, policy=policy),
        _load_document(right, policy=policy),
    )


_SANITIZE_OPTION = typer.Option(
    False,
    "--sanitize",
    help="Drop nulls, ignored fields and .000 time suffixes before comparing.",
)
_SANITIZE_CONFIG_OPTION = typer.Option(
    None,
    "--sanitize-config",
    envvar=SANITIZE_CONFIG_ENV_VAR,
    help=(
        "Path to JSON sanitation policy config (implies --sanitize). "
        f"Can also be set via {SANITIZE_CONFIG_ENV_VAR}."
    ),
)


@app.command()
def diff(
    left: Path = typer.Argument(..., help="Path to left JSON document."),
    right: Path = typer.Argument(..., help="Path to right JSON document."),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Emit machine-readable diff output.",
    ),
    max_paths: int = typer.Option(
        50,
        "--max-paths",
        help="Maximum number of classified paths to print in text mode.",
    ),
    fail_on_diff: bool = typer.Option(
        False,
        "--fail-on-diff",
        help="Exit with code 1 when the documents differ.",
    ),
    sanitize: bool = _SANITIZE_OPTION,
    sanitize_config: Path | None = _SANITIZE_CONFIG_OPTION,
) -> None:
    """Diff two JSON documents structurally."""
    try:
        left_value, right_value = _load_pair(
            left, right, sanitize=sanitize, sanitize_config=sanitize_config
        )
        result = analyze(left_value, right_value)
    except (_InputError, InvalidValueError, SanitationPolicyConfigError, OSError) as error:
        _fail(
            "diff",
            error,
            json_output=json_output,
            extra={"left_path": str(left), "right_path": str(right)},
        )

    if json_output:
        _echo_json(
            {
                **result.to_dict(),
                "status": "ok",
                "exit_code": 1 if fail_on_diff and not result.is_match else 0,
                "message": "diff completed",
                "left_path": str(left),
                "right_path": str(right),
            }
        )
    else:
        _echo(render_diff_summary(result))
        _echo(
            render_change_paths(
                result,
                max_paths=max(1, max_paths),
                style=lambda marker, kind: _style(marker, _KIND_COLORS[kind]),
            )
        )

    if fail_on_diff and not result.is_match:
        raise typer.Exit(code=1)


@app.command(name="render")
def render_command(
    document: Path = typer.Argument(..., help="Path to the JSON document to render."),
    against: Path = typer.Option(
        ...,
        "--against",
        help="Path to the JSON document it is compared with.",
    ),
    side: str = typer.Option(
        "left",
        "--side",
        help="Side the document occupies in the comparison: left or right.",
    ),
    sanitize: bool = _SANITIZE_OPTION,
    sanitize_config: Path | None = _SANITIZE_CONFIG_OPTION,
) -> None:
    """Print annotated markup for one side of a comparison."""
    if side not in ("left", "right"):
        _echo(f"render failed: side must be 'left' or 'right', got {side!r}", err=True)
        raise typer.Exit(code=2)

    try:
        if side == "left":
            value, other = _load_pair(
                document, against, sanitize=sanitize, sanitize_config=sanitize_config
            )
            result = analyze(value, other)
        else:
            other, value = _load_pair(
                against, document, sanitize=sanitize, sanitize_config=sanitize_config
            )
            result = analyze(other, value)
    except (_InputError, InvalidValueError, SanitationPolicyConfigError, OSError) as error:
        _fail("render", error, json_output=False, extra={})

    _echo(render(value, result, side), force=True)


@app.command()
def report(
    left: Path = typer.Argument(..., help="Path to left JSON document."),
    right: Path = typer.Argument(..., help="Path to right JSON document."),
    out: Path = typer.Option(
        Path("jsondelta-report.html"),
        "--out",
        help="Output path for the HTML report.",
    ),
    title: str = typer.Option(
        "JSON comparison",
        "--title",
        help="Report page title.",
    ),
    sanitize: bool = _SANITIZE_OPTION,
    sanitize_config: Path | None = _SANITIZE_CONFIG_OPTION,
) -> None:
    """Write a side-by-side HTML comparison of two JSON documents."""
    try:
        left_value, right_value = _load_pair(
            left, right, sanitize=sanitize, sanitize_config=sanitize_config
        )
        result: DiffResult = analyze(left_value, right_value)
    except (_InputError, InvalidValueError, SanitationPolicyConfigError, OSError) as error:
        _fail("report", error, json_output=False, extra={})

    page = render_pair_html(
        left_value,
        right_value,
        result=result,
        title=title,
        left_label=left.name,
        right_label=right.name,
    )
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(page, encoding="utf-8")
    _echo(f"report written: {out} ({render_diff_summary(result)})")


@app.command()
def compare(
    left: Path = typer.Argument(..., help="Path to left CSV/TSV record dataset."),
    right: Path = typer.Argument(..., help="Path to right CSV/TSV record dataset."),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Emit machine-readable comparison output.",
    ),
    report_path: Path | None = typer.Option(
        None,
        "--report",
        help="Write an HTML report with per-record renderings to this path.",
    ),
    left_label: str | None = typer.Option(
        None,
        "--left-label",
        help="Display label for the left dataset (defaults to file name).",
    ),
    right_label: str | None = typer.Option(
        None,
        "--right-label",
        help="Display label for the right dataset (defaults to file name).",
    ),
    fail_on_diff: bool = typer.Option(
        False,
        "--fail-on-diff",
        help="Exit with code 1 unless every record matches.",
    ),
    sanitize_config: Path | None = _SANITIZE_CONFIG_OPTION,
) -> None:
    """Compare two record datasets keyed by entity_reference_id."""
    try:
        policy = _load_policy(sanitize_config)
        left_dataset = read_dataset(left, label=left_label, policy=policy)
        right_dataset = read_dataset(right, label=right_label, policy=policy)
    except (DatasetFormatError, SanitationPolicyConfigError, OSError) as error:
        _fail(
            "compare",
            error,
            json_output=json_output,
            extra={"left_path": str(left), "right_path": str(right)},
        )

    comparison = compare_datasets(left_dataset, right_dataset)
    failed = fail_on_diff and not comparison.all_match

    if report_path is not None:
        report_path.parent.mkdir(parents=True, exist_ok=True)
        report_path.write_text(render_dataset_report_html(comparison), encoding="utf-8")

    if json_output:
        _echo_json(
            {
                **comparison.to_dict(),
                "status": "ok",
                "exit_code": 1 if failed else 0,
                "message": "compare completed",
                "left_path": str(left),
                "right_path": str(right),
                "report_path": str(report_path) if report_path is not None else None,
            }
        )
    else:
        for message in comparison.messages:
            _echo(f"warning: {message}", err=True)
        if not comparison.results:
            _echo("no records found")
        for result in comparison.results:
            _echo(
                f"{result.index}\t{result.reference_id}\t{result.entity_type}\t"
                f"{_style(status_label(result.status), _STATUS_COLORS[result.status])}"
            )
            if result.status != "MATCH":
                _echo(
                    "  "
                    + describe_record(
                        result,
                        left_label=comparison.left_label,
                        right_label=comparison.right_label,
                    )
                )
        summary = comparison.summary()
        _echo(" ".join(f"{status.lower()}={count}" for status, count in summary.items()))
        if report_path is not None:
            _echo(f"report written: {report_path}")

    if failed:
        raise typer.Exit(code=1)


def main() -> None:
    app()
