from __future__ import annotations

"""
Pipeline Domain Data Models.

Defines the data structures and factory functions used to communicate
stage and build outcomes between the pipeline engine and the interface
layer. Errors travel as BuildIssue values rather than callbacks so the
orchestrator can log, notify and continue.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

# -----------------------------------------------------------------------------
# CORE DATA MODELS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class BuildIssue:
    """
    A single non-fatal error reported by a stage.

    Attributes:
        stage: Identifier of the reporting stage.
        message: Human-readable description.
        path: Source file the issue relates to, if any.
    """
    stage: str
    message: str
    path: str = ""

    def __str__(self) -> str:
        if self.path:
            return f"[{self.stage}] {self.path}: {self.message}"
        return f"[{self.stage}] {self.message}"


@dataclass(frozen=True)
class StageResult:
    """
    Outcome of one build stage.

    Attributes:
        stage: Stage identifier.
        ok: True when the stage reported no issues.
        written: Output-relative paths produced by the stage.
        issues: Errors collected during the stage.
    """
    stage: str
    ok: bool
    written: List[str] = field(default_factory=list)
    issues: List[BuildIssue] = field(default_factory=list)


@dataclass(frozen=True)
class BuildResult:
    """
    Unified result object of a complete build.

    Attributes:
        ok: Flag indicating that every stage succeeded.
        error: Summary message in case of failure.
        project_root: Normalized project directory.
        output_location: Description of the output target.
        production: Whether production transforms were applied.
        stages: Per-stage results in execution order.
        issues: Flattened issue list across all stages.
        summary: Execution statistics.
    """
    ok: bool
    error: str

    project_root: str
    output_location: str
    production: bool

    stages: List[StageResult] = field(default_factory=list)
    issues: List[BuildIssue] = field(default_factory=list)
    summary: Dict[str, Any] = field(default_factory=dict)

# -----------------------------------------------------------------------------
# FACTORY FUNCTIONS
# -----------------------------------------------------------------------------

def stage_result(stage: str, written: List[str], issues: List[BuildIssue]) -> StageResult:
    """Build a StageResult whose status is derived from its issues."""
    return StageResult(stage=stage, ok=not issues, written=list(written), issues=list(issues))


def create_error_result(
        error: str,
        cfg: Dict[str, Any],
        project_root: str,
        output_location: str = "",
        stages: Optional[List[StageResult]] = None,
        summary_extra: Optional[Dict[str, Any]] = None
) -> BuildResult:
    """
    Create a failed build result instance.

    Args:
        error: Detailed error description.
        cfg: The configuration used during the failed run.
        project_root: The target project directory.
        output_location: Description of the output target.
        stages: Stage results gathered before the failure.
        summary_extra: Additional metadata for the summary payload.

    Returns:
        BuildResult: An immutable error result object.
    """
    stages = stages or []
    return BuildResult(
        ok=False,
        error=error,
        project_root=project_root,
        output_location=output_location,
        production=bool(cfg.get("production", False)),
        stages=stages,
        issues=[i for s in stages for i in s.issues],
        summary=summary_extra or {},
    )


def create_success_result(
        cfg: Dict[str, Any],
        project_root: str,
        output_location: str,
        stages: List[StageResult],
        summary_extra: Optional[Dict[str, Any]] = None
) -> BuildResult:
    """
    Create a build result from completed stages.

    The result is marked as failed if any stage reported issues, but the
    build itself ran to completion.
    """
    issues = [i for s in stages for i in s.issues]
    return BuildResult(
        ok=not issues,
        error="" if not issues else f"{len(issues)} build issue(s) reported.",
        project_root=project_root,
        output_location=output_location,
        production=bool(cfg.get("production", False)),
        stages=list(stages),
        issues=issues,
        summary=summary_extra or {},
    )
