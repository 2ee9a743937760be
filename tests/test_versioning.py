from pathlib import Path
import subprocess
import sys

from typer.testing import CliRunner

import deltapack
import jsondelta
from deltapack.cli.app import app

REPO_ROOT = Path(__file__).resolve().parents[1]


def _pyproject_table(section: str) -> dict[str, str]:
    table: dict[str, str] = {}
    in_section = False
    for raw_line in (REPO_ROOT / "pyproject.toml").read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if line.startswith("["):
            in_section = line == f"[{section}]"
            continue
        if in_section and "=" in line:
            name, _, value = line.partition("=")
            table[name.strip()] = value.strip().strip('"')
    return table


def test_public_and_implementation_packages_share_one_version() -> None:
    assert jsondelta.__version__ == deltapack.__version__


def test_pyproject_declares_package_version_and_entry_point() -> None:
    project = _pyproject_table("project")
    scripts = _pyproject_table("project.scripts")

    assert project["name"] == "jsondelta"
    assert project["version"] == deltapack.__version__
    assert scripts["jsondelta"] == "deltapack.cli.app:main"


def test_version_option_short_circuits_commands() -> None:
    result = CliRunner().invoke(app, ["--version", "diff", "missing.json", "other.json"])

    assert result.exit_code == 0
    assert result.output.strip() == deltapack.__version__


def test_module_entry_point_reports_version() -> None:
    completed = subprocess.run(
        [sys.executable, "-m", "deltapack", "--version"],
        cwd=REPO_ROOT,
        capture_output=True,
        text=True,
        check=False,
    )

    assert completed.returncode == 0
    assert completed.stdout.strip() == deltapack.__version__
