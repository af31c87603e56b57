from __future__ import annotations

"""
Unit tests for the Script and Style Bundling Stage.

Verifies entry concatenation, CSS import inlining, production minification
and the reporting of compilation errors.
"""

from pathlib import Path
from typing import Any, Dict

from sitesmith.core.bundle.assets import build_bundle, bundle_assets
from sitesmith.infra.output import MemoryOutput


def test_bundle_assets_writes_js_and_css(site_config: Dict[str, Any]) -> None:
    output = MemoryOutput()

    result = bundle_assets(site_config, output)

    assert result.ok
    assert sorted(result.written) == ["assets/css/app.css", "assets/js/app.js"]
    js = output.read("assets/js/app.js").decode("utf-8")
    assert "function greet(name)" in js
    css = output.read("assets/css/app.css").decode("utf-8")
    assert "margin: 0" in css
    assert "@import" not in css
    assert css.index("margin") < css.index(".app")


def test_production_bundles_are_minified(site_config: Dict[str, Any]) -> None:
    site_config["production"] = True
    output = MemoryOutput()

    bundle_assets(site_config, output)

    js = output.read("assets/js/app.js").decode("utf-8")
    css = output.read("assets/css/app.css").decode("utf-8")
    assert "\n    return" not in js
    assert "greet" in js
    assert "body{margin:0}" in css
    assert ".app{color:red}" in css


def test_multiple_js_entries_are_separated(make_files) -> None:
    root = make_files({"a.js": "var a = 1", "b.js": "var b = 2"}, name="proj")

    text, errors = build_bundle(str(root), "out.js", ["a.js", "b.js"])

    assert errors == []
    assert text.index("var a = 1") < text.index(";\n") < text.index("var b = 2")


def test_missing_entry_is_a_compilation_error(site_config: Dict[str, Any]) -> None:
    site_config["bundles"] = {"assets/js/app.js": ["src/assets/js/missing.js"]}
    output = MemoryOutput()

    result = bundle_assets(site_config, output)

    assert not result.ok
    assert output.list_paths() == []
    assert "not found" in result.issues[0].message


def test_circular_import_is_reported(make_files) -> None:
    root = make_files({
        "a.css": '@import "b.css";\n.a{}',
        "b.css": '@import url("a.css");\n.b{}',
    }, name="proj")

    text, errors = build_bundle(str(root), "out.css", ["a.css"])

    assert text is None
    assert any("Circular" in e.message for e in errors)


def test_remote_and_media_imports_are_kept(make_files) -> None:
    root = make_files({
        "a.css": '@import "https://fonts.example/x.css";\n@import "print.css" print;\n.a{}',
        "print.css": ".p{}",
    }, name="proj")

    text, errors = build_bundle(str(root), "out.css", ["a.css"])

    assert errors == []
    assert '@import "https://fonts.example/x.css";' in text
    assert '@import "print.css" print;' in text


def test_missing_import_target(make_files) -> None:
    root = make_files({"a.css": '@import "gone.css";'}, name="proj")

    _text, errors = build_bundle(str(root), "out.css", ["a.css"])

    assert "gone.css" in errors[0].message


def test_unsupported_bundle_type(tmp_path: Path) -> None:
    text, errors = build_bundle(str(tmp_path), "out.scss", ["x.scss"])

    assert text is None
    assert "Unsupported" in errors[0].message
