from __future__ import annotations

"""
Unit tests for the Data File Discovery Service.

Verifies recursive discovery, suffix filtering, deterministic ordering and
path segmentation.
"""

from pathlib import Path

import pytest

from sitesmith.core.services.scanner import split_segments, yield_data_files
from sitesmith.domain.errors import ConfigurationError


@pytest.fixture
def data_dir(make_files) -> Path:
    return make_files({
        "b/second.json": "2",
        "a/first.json": "1",
        "a/deep/third.json": "3",
        "a/ignored.yaml": "x: 1",
        "top.json": "0",
    })


def test_yield_data_files_recurses_and_filters(data_dir: Path) -> None:
    rels = [f["rel_path"].replace("\\", "/") for f in yield_data_files(str(data_dir))]

    assert sorted(rels) == ["a/deep/third.json", "a/first.json", "b/second.json", "top.json"]


def test_yield_data_files_is_deterministic(data_dir: Path) -> None:
    first = [f["rel_path"] for f in yield_data_files(str(data_dir))]
    second = [f["rel_path"] for f in yield_data_files(str(data_dir))]

    assert first == second


def test_yield_data_files_metadata(data_dir: Path) -> None:
    files = {f["rel_path"].replace("\\", "/"): f for f in yield_data_files(str(data_dir))}
    meta = files["a/deep/third.json"]

    assert meta["segments"] == ("a", "deep", "third")
    assert Path(meta["file_path"]).is_absolute()
    assert Path(meta["file_path"]).read_text(encoding="utf-8") == "3"


def test_yield_data_files_missing_root(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError, match="does not exist"):
        list(yield_data_files(str(tmp_path / "missing")))


@pytest.mark.parametrize("rel, expected", [
    ("title.json", ("title",)),
    ("site/nav/items.json", ("site", "nav", "items")),
    ("site\\win\\path.json", ("site", "win", "path")),
    ("v1.2/data.min.json", ("v1.2", "data.min")),
])
def test_split_segments(rel: str, expected: tuple) -> None:
    assert split_segments(rel) == expected
