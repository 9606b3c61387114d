from __future__ import annotations

"""
End-to-End (E2E) CLI Tests.

Invokes the entry point in a separate process to validate argument
parsing, exit codes and the stdout/stderr split exactly as a shell user
would see them.
"""

import os
import subprocess
import sys
from pathlib import Path
from typing import List, Optional

import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
SRC_DIR = PROJECT_ROOT / "src"
ENTRY_POINT = SRC_DIR / "rdu" / "main.py"


def run_cli(args: List[str], cwd: Optional[Path] = None, config: Optional[Path] = None) -> subprocess.CompletedProcess:
    """
    Execute the CLI in a separate process.

    Injects 'src' into PYTHONPATH so the package resolves without being
    installed, and isolates the persistent configuration file.
    """
    env = os.environ.copy()
    env["PYTHONPATH"] = str(SRC_DIR) + os.pathsep + env.get("PYTHONPATH", "")
    env["RDU_CONFIG"] = str(config or (PROJECT_ROOT / "nonexistent-rdu-config.json"))

    return subprocess.run(
        [sys.executable, str(ENTRY_POINT)] + args,
        cwd=cwd,
        env=env,
        capture_output=True,
        text=True,
        encoding="utf-8",
    )


def test_basic_directory_scan(scenario_root: Path) -> None:
    result = run_cli([str(scenario_root)])

    assert result.returncode == 0, result.stderr
    lines = result.stdout.splitlines()
    assert len(lines) == 6
    for size in ("6000", "5000", "3000", "2000", "1000"):
        assert any(line.split()[0] == size for line in lines)


def test_human_readable_option(make_tree) -> None:
    root = make_tree([("large_file.txt", 1_000_000)])

    result = run_cli(["--human-readable", str(root)])

    assert result.returncode == 0
    assert "    1M" in result.stdout


def test_max_depth_option(scenario_root: Path) -> None:
    result = run_cli(["--max-depth=1", str(scenario_root)])

    assert result.returncode == 0
    assert len(result.stdout.splitlines()) == 3


def test_threshold_option(scenario_root: Path) -> None:
    result = run_cli(["-t2999", "-j1", str(scenario_root)])

    assert result.returncode == 0
    assert [line.split()[0] for line in result.stdout.splitlines()] == ["3000", "3000", "5000", "6000"]


def test_default_root_is_current_directory(scenario_root: Path) -> None:
    result = run_cli(["-d0", "-j1"], cwd=scenario_root)

    assert result.stdout == f"{6000:>12} .\n"


def test_multiple_roots_are_reported_in_order(make_tree) -> None:
    first = make_tree([("a.bin", 10)], name="first")
    second = make_tree([("b.bin", 20)], name="second")

    result = run_cli(["-d0", str(first), str(second)])

    assert result.stdout == f"{10:>12} {first}\n{20:>12} {second}\n"


def test_unknown_option_is_rejected(scenario_root: Path) -> None:
    result = run_cli(["--unknown", str(scenario_root)])

    assert result.returncode == 2
    assert result.stdout == ""
    assert "unrecognized arguments: --unknown" in result.stderr


def test_invalid_threshold_is_rejected(scenario_root: Path) -> None:
    result = run_cli(["-tabc", str(scenario_root)])

    assert result.returncode == 2
    assert result.stdout == ""


def test_missing_root_is_a_diagnostic_not_a_failure(tmp_path: Path) -> None:
    result = run_cli([str(tmp_path / "missing")])

    assert result.returncode == 0
    assert result.stdout == ""
    assert "Failed to read" in result.stderr


@pytest.mark.skipif(sys.platform == "win32", reason="POSIX permissions")
@pytest.mark.skipif(hasattr(os, "geteuid") and os.geteuid() == 0, reason="root bypasses permissions")
def test_unreadable_subdirectory_keeps_siblings(make_tree) -> None:
    root = make_tree([("locked/a.bin", 700), ("open/b.bin", 300)])
    (root / "locked").chmod(0)
    try:
        result = run_cli([str(root)])
    finally:
        (root / "locked").chmod(0o755)

    assert result.returncode == 0
    assert f"{300:>12} {root / 'open'}\n" in result.stdout
    assert str(root / "locked") not in result.stdout
    assert "Permission denied" in result.stderr
