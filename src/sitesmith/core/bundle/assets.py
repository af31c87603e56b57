from __future__ import annotations

"""
Script and Style Bundling Stage.

Concatenates the configured entry files of each bundle into one artifact.
Stylesheets have their local '@import' statements inlined. In production
mode scripts are minified with rjsmin and stylesheets with csscompressor.
Problems are collected as a list of compilation errors; a bundle with
errors is not written.
"""

import logging
import os
import re
from typing import Any, Dict, List, Optional, Tuple

import csscompressor
import rjsmin

from sitesmith.domain.constants import STAGE_BUNDLE
from sitesmith.domain.pipeline_models import BuildIssue, StageResult, stage_result
from sitesmith.infra.fs import resolve_in_project, to_posix
from sitesmith.infra.output import OutputTarget

logger = logging.getLogger(__name__)

_CSS_IMPORT_RX = re.compile(
    r"""@import\s+(?:url\(\s*)?["']([^"']+)["']\s*\)?\s*([^;]*);""",
    re.IGNORECASE,
)
_REMOTE_PREFIXES = ("http:", "https:", "//", "data:")

BundleOutcome = Tuple[Optional[str], List[BuildIssue]]


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def bundle_assets(cfg: Dict[str, Any], output: OutputTarget) -> StageResult:
    """
    Build every configured bundle and write the successful ones.

    Args:
        cfg: Validated build configuration ('bundles' maps output path to entries).
        output: Destination target.

    Returns:
        StageResult: Written bundles and compilation errors.
    """
    project_root = cfg["project_root"]
    production = bool(cfg.get("production"))
    written: List[str] = []
    issues: List[BuildIssue] = []

    for out_rel, entries in sorted(cfg["bundles"].items()):
        text, errors = build_bundle(project_root, out_rel, entries, production=production)
        if errors:
            for issue in errors:
                logger.error(str(issue))
            issues.extend(errors)
            continue

        output.write(out_rel, (text or "").encode("utf-8"))
        written.append(out_rel)
        logger.debug(f"Bundle written: {out_rel} ({len(entries)} entry file(s))")

    logger.info(f"Bundled {len(written)} artifact(s), {len(issues)} error(s)")
    return stage_result(STAGE_BUNDLE, written, issues)


def build_bundle(
        project_root: str,
        out_rel: str,
        entries: List[str],
        *,
        production: bool = False
) -> BundleOutcome:
    """
    Produce the text of a single bundle.

    The bundle type is taken from the output extension ('.js' or '.css').

    Returns:
        BundleOutcome: (bundle text or None, compilation errors).
    """
    ext = os.path.splitext(out_rel)[1].lower()
    if ext not in (".js", ".css"):
        return None, [BuildIssue(STAGE_BUNDLE, f"Unsupported bundle type '{ext}'", out_rel)]
    if not entries:
        return None, [BuildIssue(STAGE_BUNDLE, "Bundle has no entry files", out_rel)]

    parts: List[str] = []
    errors: List[BuildIssue] = []

    for entry in entries:
        entry_path = resolve_in_project(project_root, entry)
        if not os.path.isfile(entry_path):
            errors.append(BuildIssue(STAGE_BUNDLE, "Entry file not found", entry_path))
            continue
        try:
            if ext == ".css":
                content = _read_css(entry_path, (), errors)
            else:
                content = _read_text(entry_path)
        except (OSError, UnicodeDecodeError) as e:
            errors.append(BuildIssue(STAGE_BUNDLE, f"Cannot read entry: {e}", entry_path))
            continue
        label = to_posix(os.path.relpath(entry_path, project_root))
        parts.append(f"/* {label} */\n{content.rstrip()}\n")

    if errors:
        return None, errors

    if ext == ".js":
        text = ";\n".join(parts)
        return (rjsmin.jsmin(text) if production else text), []

    text = "\n".join(parts)
    return (csscompressor.compress(text) if production else text), []


# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _read_text(path: str) -> str:
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def _read_css(path: str, chain: Tuple[str, ...], errors: List[BuildIssue]) -> str:
    """Read a stylesheet, recursively inlining local '@import' statements."""
    chain = chain + (os.path.abspath(path),)
    source = _read_text(path)

    def _replace(match: "re.Match[str]") -> str:
        target, media = match.group(1).strip(), match.group(2).strip()
        if target.startswith(_REMOTE_PREFIXES) or media:
            return match.group(0)

        import_path = os.path.abspath(os.path.join(os.path.dirname(path), target))
        if import_path in chain:
            errors.append(BuildIssue(STAGE_BUNDLE, f"Circular @import of '{target}'", path))
            return ""
        if not os.path.isfile(import_path):
            errors.append(BuildIssue(STAGE_BUNDLE, f"@import target not found: '{target}'", path))
            return ""
        return _read_css(import_path, chain, errors)

    return _CSS_IMPORT_RX.sub(_replace, source)
