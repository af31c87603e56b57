from __future__ import annotations

"""
CLI Argument Definition and Mapping.

Defines the command-line schema and translates the parsed namespace into
configuration overrides. Mode switches are plain booleans; they gate the
orchestration (minification, serving, watching), never the data model.
"""

import argparse
from typing import Any, Dict

from sitesmith.domain.constants import CONFIG_FILE_NAME

# -----------------------------------------------------------------------------
# ARGUMENT DEFINITION
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """Construct the argument parser for the sitesmith CLI."""
    p = argparse.ArgumentParser(
        prog="sitesmith",
        description="Build a static site: render pages with JSON data, bundle assets, serve and watch.",
    )

    # --- Project Location ---
    p.add_argument(
        "-p", "--project",
        dest="project_root",
        default=None,
        help="Project directory (defaults to the current directory).",
    )
    p.add_argument(
        "-c", "--config",
        dest="config_path",
        default=None,
        help=f"Configuration file (defaults to <project>/{CONFIG_FILE_NAME}).",
    )
    p.add_argument(
        "--dist",
        dest="dist_dir",
        default=None,
        help="Output directory, relative to the project.",
    )

    # --- Mode Switches ---
    p.add_argument("--production", action="store_true", help="Minify pages, scripts and styles; optimise images.")
    p.add_argument("--server", action="store_true", help="Serve the build from memory with live reload.")
    p.add_argument("--watch", action="store_true", help="Rebuild affected outputs when sources change.")

    # --- Dev Server ---
    p.add_argument("--host", default=None, help="Dev server bind address.")
    p.add_argument("--port", type=int, default=None, help="Dev server port.")

    # --- Diagnostics ---
    p.add_argument("--notify-webhook", dest="notify_webhook", default=None,
                   help="URL receiving build error notifications as JSON.")
    p.add_argument("--log-file", dest="log_file", default=None, help="Write a rotating build log to this path.")
    p.add_argument("--use-defaults", action="store_true", help="Ignore the project configuration file.")
    p.add_argument("--dump-config", action="store_true", help="Print the resolved configuration and exit.")
    p.add_argument("--debug", action="store_true", help="Elevate logging verbosity to DEBUG.")
    p.add_argument("--json", dest="json_output", action="store_true", help="Print the build result as JSON.")

    return p

# -----------------------------------------------------------------------------
# ARGUMENT MAPPING
# -----------------------------------------------------------------------------

def args_to_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Translate the argparse Namespace into configuration overrides.

    Flags that were not given map to None (or are omitted) so that the
    project file keeps precedence over parser defaults.
    """
    overrides: Dict[str, Any] = {
        "project_root": args.project_root,
        "dist_dir": args.dist_dir,
        "host": args.host,
        "port": args.port,
        "notify_webhook": args.notify_webhook,
        "log_file": args.log_file,
    }

    if args.production:
        overrides["production"] = True
    if args.server:
        overrides["serve"] = True
    if args.watch:
        overrides["watch"] = True

    return overrides
