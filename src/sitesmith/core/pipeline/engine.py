from __future__ import annotations

"""
Core build orchestration.

This module coordinates a full site build:
1. Validates configuration and the project path.
2. Cleans the output target.
3. Runs the independent stages (pages, static, images, fonts, bundle) in
   parallel threads. Each stage owns a disjoint part of the output.
4. Reports every stage issue through the log and the notifier.

Stage failures are values, not exceptions: a broken template or JSON file
marks the build as failed but never stops the process. Only configuration
errors (such as a missing data directory) propagate to the caller.
"""

import logging
import os
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Dict, List, Optional

from sitesmith.core.assets.copy import copy_fonts, copy_images, copy_static
from sitesmith.core.bundle.assets import bundle_assets
from sitesmith.core.pipeline.stages.validator import validate_config
from sitesmith.core.render.pages import render_pages
from sitesmith.domain.constants import (
    BUILD_STAGES,
    STAGE_BUNDLE,
    STAGE_FONTS,
    STAGE_IMAGES,
    STAGE_PAGES,
    STAGE_STATIC,
)
from sitesmith.domain.errors import ConfigurationError, describe_error
from sitesmith.domain.pipeline_models import (
    BuildIssue,
    BuildResult,
    StageResult,
    create_error_result,
    create_success_result,
    stage_result,
)
from sitesmith.infra.network import DEFAULT_TITLE, Notifier
from sitesmith.infra.output import OutputTarget, create_output_target

logger = logging.getLogger(__name__)

StageRunner = Callable[[Dict[str, Any], OutputTarget], StageResult]

STAGE_RUNNERS: Dict[str, StageRunner] = {
    STAGE_PAGES: render_pages,
    STAGE_STATIC: copy_static,
    STAGE_IMAGES: copy_images,
    STAGE_FONTS: copy_fonts,
    STAGE_BUNDLE: bundle_assets,
}


def run_build(
        config: Optional[Dict[str, Any]],
        output: Optional[OutputTarget] = None,
        notifier: Optional[Notifier] = None,
        *,
        stages: Optional[List[str]] = None,
) -> BuildResult:
    """
    Execute a full build: clean, then all stages in parallel.

    Args:
        config: The configuration dictionary (raw or validated).
        output: Destination target. Derived from the config when omitted.
        notifier: Error side channel. A log-only notifier is used when omitted.
        stages: Subset of stage identifiers to run (defaults to all).

    Returns:
        BuildResult: Status, per-stage results and summary.

    Raises:
        ConfigurationError: If a stage finds the project layout unusable.
    """
    start = time.perf_counter()
    cfg, warnings = validate_config(config, strict=False)
    for warning in warnings:
        logger.warning(f"Configuration Warning: {warning}")

    notifier = notifier or Notifier(cfg.get("notify_webhook"))
    project_root = cfg["project_root"]

    if not os.path.isdir(project_root):
        msg = f"Invalid project directory: {project_root}"
        logger.error(msg)
        return create_error_result(msg, cfg, project_root)

    output = output or create_output_target(cfg)
    selected = stages or list(BUILD_STAGES)
    unknown = [s for s in selected if s not in STAGE_RUNNERS]
    if unknown:
        msg = f"Unknown build stage(s): {', '.join(unknown)}"
        logger.error(msg)
        return create_error_result(msg, cfg, project_root, output.describe())

    logger.info(f"Build started ({'production' if cfg['production'] else 'development'}): {project_root}")

    try:
        output.clean()
    except OSError as e:
        msg = f"Failed to clean output {output.describe()}: {e}"
        logger.critical(msg)
        notifier.notify(DEFAULT_TITLE, msg)
        return create_error_result(msg, cfg, project_root, output.describe())

    with ThreadPoolExecutor(max_workers=len(selected), thread_name_prefix="BuildStage") as executor:
        futures = [executor.submit(run_stage, name, cfg, output, notifier) for name in selected]
        results: List[StageResult] = []
        fatal: Optional[ConfigurationError] = None
        for future in futures:
            try:
                results.append(future.result())
            except ConfigurationError as e:
                fatal = fatal or e

    if fatal is not None:
        logger.critical(f"Build aborted: {fatal}")
        raise fatal

    elapsed = time.perf_counter() - start
    summary = {
        "output": output.describe(),
        "elapsed_seconds": round(elapsed, 3),
        "written": {r.stage: len(r.written) for r in results},
        "errors": sum(len(r.issues) for r in results),
        "production": cfg["production"],
    }

    result = create_success_result(cfg, project_root, output.describe(), results, summary)
    if result.ok:
        logger.info(f"Build completed in {elapsed:.2f}s -> {output.describe()}")
    else:
        logger.error(f"Build finished with {len(result.issues)} error(s) in {elapsed:.2f}s")
    return result


def run_stage(
        name: str,
        cfg: Dict[str, Any],
        output: OutputTarget,
        notifier: Optional[Notifier] = None,
) -> StageResult:
    """
    Run a single stage, converting unexpected failures into issues.

    Used by run_build and by watch-triggered rebuilds. Issues are reported
    through the notifier before the result is returned.

    Raises:
        ConfigurationError: Propagated unchanged; it is fatal for the caller.
    """
    runner = STAGE_RUNNERS[name]
    try:
        result = runner(cfg, output)
    except ConfigurationError:
        raise
    except Exception as e:
        logger.error(f"Stage '{name}' crashed: {e}", exc_info=True)
        result = stage_result(name, [], [BuildIssue(name, describe_error(e))])

    if notifier is not None:
        report_issues(result.issues, notifier)
    return result


def report_issues(issues: List[BuildIssue], notifier: Notifier) -> None:
    """Send each issue to the notifier (which never raises)."""
    for issue in issues:
        notifier.notify(DEFAULT_TITLE, str(issue))
