from __future__ import annotations

"""
Page Rendering Stage.

Renders every page template with Jinja2, using the DataTree built from the
data directory as context. A data error aborts the whole pass before any
page is written; a template error only drops the affected page.
"""

import logging
import os
from typing import Any, Dict, List

import minify_html
from jinja2 import Environment, FileSystemLoader, TemplateError, TemplateSyntaxError

from sitesmith.core.analysis.data_tree import get_data_from_files
from sitesmith.domain.constants import ROOT_URL, STAGE_PAGES
from sitesmith.domain.errors import DataTreeError, describe_error
from sitesmith.domain.pipeline_models import BuildIssue, StageResult, stage_result
from sitesmith.infra.fs import expand_globs, resolve_in_project, to_posix
from sitesmith.infra.output import OutputTarget

logger = logging.getLogger(__name__)


class DataEnvironment(Environment):
    """
    Jinja2 environment where mapping keys win over attributes.

    Data files are free to be named 'items.json' or 'keys.json'; with the
    default lookup 'data.nav.items' would resolve to dict.items.
    """

    def getattr(self, obj: Any, attribute: str) -> Any:
        if isinstance(obj, dict) and attribute in obj:
            return obj[attribute]
        return super().getattr(obj, attribute)


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def create_environment(project_root: str, src_dir: str) -> Environment:
    """
    Build the Jinja2 environment.

    Templates are looked up from the project root first and then from the
    source directory, so both 'src/layouts/base.njk' and 'layouts/base.njk'
    resolve.
    """
    search_path = [project_root, resolve_in_project(project_root, src_dir)]
    return DataEnvironment(
        loader=FileSystemLoader(search_path),
        autoescape=False,
        keep_trailing_newline=True,
    )


def build_render_context(cfg: Dict[str, Any]) -> Dict[str, Any]:
    """
    Assemble the template context: the site root URL plus the data tree.

    Raises:
        DataTreeError: If a data file is malformed.
        ConfigurationError: If the data directory is missing.
    """
    data_dir = resolve_in_project(cfg["project_root"], cfg["data_dir"])
    context: Dict[str, Any] = {"root": ROOT_URL}
    context.update(get_data_from_files(data_dir))
    return context


def render_pages(cfg: Dict[str, Any], output: OutputTarget) -> StageResult:
    """
    Render all pages matched by the configured page globs.

    Output paths mirror the page location below the glob base with the
    extension replaced by '.html'. In production mode the markup is
    minified before it is written; it is not re-indented afterwards.

    Any error raised while rendering a page (syntax, missing include or a
    runtime error inside an expression) is reported for that page only.

    Args:
        cfg: Validated build configuration.
        output: Destination for rendered pages.

    Returns:
        StageResult: Written pages and collected issues.
    """
    project_root = cfg["project_root"]
    written: List[str] = []
    issues: List[BuildIssue] = []

    try:
        context = build_render_context(cfg)
    except DataTreeError as e:
        logger.error(f"Data tree build failed, render pass aborted: {e}")
        return stage_result(STAGE_PAGES, [], [BuildIssue(STAGE_PAGES, e.message, e.path)])

    env = create_environment(project_root, cfg["src_dir"])
    pages = expand_globs(project_root, cfg["page_globs"])
    logger.debug(f"Rendering {len(pages)} page(s)")

    for abs_path, rel_path in pages:
        template_name = to_posix(os.path.relpath(abs_path, project_root))
        try:
            markup = env.get_template(template_name).render(context)
        except TemplateError as e:
            issue = BuildIssue(STAGE_PAGES, _describe_template_error(e), abs_path)
            logger.error(str(issue))
            issues.append(issue)
            continue
        except Exception as e:
            issue = BuildIssue(STAGE_PAGES, describe_error(e), abs_path)
            logger.error(str(issue), exc_info=True)
            issues.append(issue)
            continue

        if cfg.get("production"):
            markup = minify_markup(markup)

        out_rel = os.path.splitext(rel_path)[0] + ".html"
        output.write(out_rel, markup.encode("utf-8"))
        written.append(out_rel)

    logger.info(f"Rendered {len(written)} page(s), {len(issues)} error(s)")
    return stage_result(STAGE_PAGES, written, issues)


def minify_markup(markup: str) -> str:
    """Collapse whitespace and minify inline CSS/JS."""
    return minify_html.minify(markup, minify_css=True, minify_js=True)


# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _describe_template_error(exc: TemplateError) -> str:
    if isinstance(exc, TemplateSyntaxError):
        location = exc.filename or exc.name or "<template>"
        return f"{exc.message} ({location}, line {exc.lineno})"
    return str(exc) or type(exc).__name__
