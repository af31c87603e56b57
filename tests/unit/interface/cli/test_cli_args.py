from __future__ import annotations

"""
Unit tests for CLI argument parsing and override mapping.
"""

import pytest

from sitesmith.interface.cli.args import args_to_overrides, build_parser


def test_defaults_produce_no_mode_overrides() -> None:
    args = build_parser().parse_args([])
    overrides = args_to_overrides(args)

    assert "production" not in overrides
    assert "serve" not in overrides
    assert "watch" not in overrides
    assert overrides["project_root"] is None
    assert overrides["port"] is None


def test_mode_flags_map_to_config_keys() -> None:
    args = build_parser().parse_args(["--production", "--server", "--watch"])
    overrides = args_to_overrides(args)

    assert overrides["production"] is True
    assert overrides["serve"] is True
    assert overrides["watch"] is True


def test_value_flags() -> None:
    args = build_parser().parse_args([
        "-p", "site", "-c", "cfg.json", "--dist", "public", "--host", "0.0.0.0",
        "--port", "8080", "--notify-webhook", "http://hook", "--log-file", "build.log",
    ])
    overrides = args_to_overrides(args)

    assert overrides == {
        "project_root": "site",
        "dist_dir": "public",
        "host": "0.0.0.0",
        "port": 8080,
        "notify_webhook": "http://hook",
        "log_file": "build.log",
    }
    assert args.config_path == "cfg.json"


def test_diagnostic_flags() -> None:
    args = build_parser().parse_args(["--debug", "--json", "--dump-config", "--use-defaults"])

    assert args.debug and args.json_output and args.dump_config and args.use_defaults


def test_port_must_be_an_integer() -> None:
    with pytest.raises(SystemExit):
        build_parser().parse_args(["--port", "abc"])
