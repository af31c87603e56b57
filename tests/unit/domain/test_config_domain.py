from __future__ import annotations

"""
Unit tests for Configuration Domain Management.

Covers default generation and the merging of the project file, including
tolerance of missing and corrupt files.
"""

import json
from pathlib import Path

from sitesmith.domain.config import get_config_path, get_default_config, load_config
from sitesmith.domain.constants import CONFIG_FILE_NAME


def test_default_config_is_independent_per_call() -> None:
    a = get_default_config("/tmp/a")
    b = get_default_config("/tmp/a")

    a["page_globs"].append("extra")
    a["bundles"]["assets/js/app.js"].append("extra.js")

    assert "extra" not in b["page_globs"]
    assert b["bundles"]["assets/js/app.js"] == ["src/assets/js/app.js"]


def test_get_config_path_defaults_to_project_file(tmp_path: Path) -> None:
    assert get_config_path(str(tmp_path)) == str(tmp_path / CONFIG_FILE_NAME)
    assert get_config_path(str(tmp_path), "other.json").endswith("other.json")


def test_load_config_missing_file_returns_defaults(tmp_path: Path) -> None:
    cfg = load_config(str(tmp_path))

    assert cfg == get_default_config(str(tmp_path))


def test_load_config_merges_project_file(tmp_path: Path) -> None:
    (tmp_path / CONFIG_FILE_NAME).write_text(
        json.dumps({"version": "1.0.0", "dist_dir": "public", "port": 8000}), encoding="utf-8"
    )

    cfg = load_config(str(tmp_path))

    assert cfg["dist_dir"] == "public"
    assert cfg["port"] == 8000
    assert cfg["data_dir"] == "src/data"
    assert "version" not in cfg


def test_load_config_corrupt_file_falls_back(tmp_path: Path) -> None:
    (tmp_path / CONFIG_FILE_NAME).write_text("{not json", encoding="utf-8")

    cfg = load_config(str(tmp_path))

    assert cfg["dist_dir"] == "dist"


def test_load_config_non_dict_falls_back(tmp_path: Path) -> None:
    (tmp_path / CONFIG_FILE_NAME).write_text("[1, 2]", encoding="utf-8")

    assert load_config(str(tmp_path))["dist_dir"] == "dist"


def test_load_config_explicit_path(tmp_path: Path) -> None:
    custom = tmp_path / "custom.json"
    custom.write_text(json.dumps({"production": True}), encoding="utf-8")

    cfg = load_config(str(tmp_path), str(custom))

    assert cfg["production"] is True
