from __future__ import annotations

"""
Command Line Interface (CLI) Application Controller.

Orchestrates the CLI lifecycle: logging bootstrap, configuration resolution
(defaults, project file, CLI overrides), the build itself and, in serve or
watch mode, the long-running development session.
"""

import json
import os
import sys
from dataclasses import asdict
from typing import Any, Dict, List, Optional

from sitesmith.core.pipeline.session import DevSession
from sitesmith.core.pipeline.stages.validator import validate_config
from sitesmith.domain.config import get_default_config, load_config
from sitesmith.domain.errors import ConfigurationError
from sitesmith.domain.pipeline_models import BuildResult
from sitesmith.infra.logging import LoggingConfig, configure_logging, get_logger
from sitesmith.infra.network import Notifier
from sitesmith.infra.network.common import DEFAULT_TIMEOUT
from sitesmith.infra.output import create_output_target
from sitesmith.interface.cli import args as cli_args

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_BUILD_FAILED = 1
EXIT_CONFIG_ERROR = 2
EXIT_INTERRUPTED = 130

# -----------------------------------------------------------------------------
# ENTRYPOINT ORCHESTRATOR
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    """
    Execute the CLI workflow.

    Args:
        argv: Optional list of command line arguments. Defaults to sys.argv.

    Returns:
        int: Process exit code.
    """
    parser = cli_args.build_parser()
    args = parser.parse_args(argv)

    log_level = "DEBUG" if args.debug else "INFO"
    configure_logging(LoggingConfig(level=log_level, console=True, log_file=args.log_file))

    # 1. Resolve configuration (defaults or project file, then CLI overrides)
    project_root = os.path.abspath(args.project_root or os.getcwd())
    if args.use_defaults:
        base_conf = get_default_config(project_root)
    else:
        base_conf = load_config(project_root, args.config_path)

    raw_conf = _merge_config(base_conf, cli_args.args_to_overrides(args))
    clean_conf, warnings = validate_config(raw_conf, strict=False)
    for w in warnings:
        logger.warning(f"Configuration Constraint: {w}")

    if clean_conf["log_file"] and not args.log_file:
        configure_logging(
            LoggingConfig(level=log_level, console=True, log_file=clean_conf["log_file"]), force=True
        )

    if args.dump_config:
        print(json.dumps(clean_conf, ensure_ascii=False, indent=2))
        return EXIT_OK

    # 2. Pre-flight project verification
    if not os.path.isdir(clean_conf["project_root"]):
        msg = f"Project directory does not exist: {clean_conf['project_root']}"
        logger.error(msg)
        print(f"ERROR: {msg}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    # 3. Build (and optionally serve / watch)
    output = create_output_target(clean_conf)
    notifier = Notifier(clean_conf["notify_webhook"])
    session = DevSession(clean_conf, output, notifier)

    try:
        result = session.start()
    except ConfigurationError as e:
        session.stop()
        logger.critical(f"Configuration error: {e}")
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR
    except KeyboardInterrupt:
        session.stop()
        logger.warning("Build interrupted by user.")
        return EXIT_INTERRUPTED

    if args.json_output:
        print(json.dumps(asdict(result), ensure_ascii=False, indent=2))
    else:
        _print_human_summary(result)

    if session.active:
        try:
            session.wait()
        except KeyboardInterrupt:
            logger.info("Stopping development session.")
        finally:
            session.stop()
        return EXIT_OK

    if not notifier.flush(timeout=DEFAULT_TIMEOUT):
        logger.warning("Some build notifications were not delivered before exit.")
    return EXIT_OK if result.ok else EXIT_BUILD_FAILED

# -----------------------------------------------------------------------------
# CONFIGURATION MERGING
# -----------------------------------------------------------------------------

def _merge_config(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """Shallow-merge the non-None overrides into the base configuration."""
    out = dict(base)
    for k, v in overrides.items():
        if v is not None:
            out[k] = v
    return out

# -----------------------------------------------------------------------------
# VIEW RENDERING (HUMAN READABLE)
# -----------------------------------------------------------------------------

def _print_human_summary(result: BuildResult) -> None:
    """Print the build outcome to stdout (issues go to stderr)."""
    if not result.ok:
        print(f"ERROR: {result.error}", file=sys.stderr)
        for issue in result.issues:
            print(f"  - {issue}", file=sys.stderr)
        if not result.stages:
            return

    print(f"Output: {result.output_location}")
    for stage in result.stages:
        status = "ok" if stage.ok else f"{len(stage.issues)} error(s)"
        print(f"  {stage.stage:<8} {len(stage.written):>4} file(s)  {status}")

    elapsed = result.summary.get("elapsed_seconds")
    if elapsed is not None:
        print(f"Finished in {elapsed}s")

# -----------------------------------------------------------------------------
# CLI ENTRYPOINT
# -----------------------------------------------------------------------------

if __name__ == "__main__":
    sys.exit(main())
