from __future__ import annotations

"""
End-to-End (E2E) CLI Tests.

Verifies the application's external behavior by invoking the entry point
script via subprocess: argument parsing, exit codes, stream output and
the generated site on disk.
"""

import json
import os
import subprocess
import sys
from pathlib import Path
from typing import List, Optional

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
SRC_DIR = PROJECT_ROOT / "src"
ENTRY_POINT = SRC_DIR / "sitesmith" / "main.py"


def run_cli(args: List[str], cwd: Optional[Path] = None) -> subprocess.CompletedProcess[str]:
    """
    Execute the CLI in a separate process.

    Injects the 'src' directory into PYTHONPATH so the package resolves
    without being installed.
    """
    env = os.environ.copy()
    env["PYTHONPATH"] = str(SRC_DIR) + os.pathsep + env.get("PYTHONPATH", "")

    cmd = [sys.executable, str(ENTRY_POINT)] + args

    return subprocess.run(
        cmd,
        cwd=cwd,
        env=env,
        capture_output=True,
        text=True,
        encoding="utf-8",
        timeout=60,
    )


def test_cli_help() -> None:
    result = run_cli(["--help"])

    assert result.returncode == 0
    assert "--production" in result.stdout


def test_cli_builds_project(site_project: Path) -> None:
    result = run_cli(["-p", str(site_project)])

    assert result.returncode == 0, result.stderr
    assert "Output:" in result.stdout
    index = (site_project / "dist" / "index.html").read_text(encoding="utf-8")
    assert "<title>Hello</title>" in index


def test_cli_json_output(site_project: Path) -> None:
    result = run_cli(["-p", str(site_project), "--json", "--production"])

    assert result.returncode == 0, result.stderr
    payload = json.loads(result.stdout)
    assert payload["ok"] is True
    assert payload["production"] is True
    assert payload["summary"]["written"]["pages"] == 2


def test_cli_build_issues_exit_one(site_project: Path) -> None:
    (site_project / "src" / "data" / "bad.json").write_text("{", encoding="utf-8")

    result = run_cli(["-p", str(site_project)])

    assert result.returncode == 1
    assert "bad.json" in result.stderr


def test_cli_missing_project_exit_two(tmp_path: Path) -> None:
    result = run_cli(["-p", str(tmp_path / "nowhere")])

    assert result.returncode == 2
    assert "does not exist" in result.stderr


def test_cli_missing_data_dir_exit_two(site_project: Path) -> None:
    (site_project / "sitesmith.json").write_text(json.dumps({"data_dir": "src/gone"}), encoding="utf-8")
    result = run_cli(["-p", str(site_project)])

    assert result.returncode == 2


def test_cli_dump_config_respects_overrides(site_project: Path) -> None:
    (site_project / "sitesmith.json").write_text(json.dumps({"dist_dir": "public"}), encoding="utf-8")

    result = run_cli(["-p", str(site_project), "--dump-config", "--port", "8123"])
    assert result.returncode == 0
    cfg = json.loads(result.stdout)
    assert cfg["dist_dir"] == "public"
    assert cfg["port"] == 8123

    result = run_cli(["-p", str(site_project), "--dump-config", "--use-defaults"])
    assert json.loads(result.stdout)["dist_dir"] == "dist"
