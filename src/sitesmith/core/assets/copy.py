from __future__ import annotations

"""
Static Asset Copy Stages.

Mirrors images, fonts and static files into their output subtrees. Raster
images are re-encoded through Pillow when optimisation is enabled
(production or watch mode); everything else is copied byte for byte.
"""

import io
import logging
import os
from typing import Any, Dict, List

from PIL import Image, UnidentifiedImageError

from sitesmith.domain.constants import (
    FONTS_OUTPUT_DIR,
    IMAGES_OUTPUT_DIR,
    RASTER_IMAGE_EXTENSIONS,
    STAGE_FONTS,
    STAGE_IMAGES,
    STAGE_STATIC,
    STATIC_OUTPUT_DIR,
)
from sitesmith.domain.pipeline_models import BuildIssue, StageResult, stage_result
from sitesmith.infra.fs import expand_globs
from sitesmith.infra.output import OutputTarget

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def copy_images(cfg: Dict[str, Any], output: OutputTarget) -> StageResult:
    """Copy images to 'assets/images', optimising raster formats when enabled."""
    optimize = bool(cfg.get("production") or cfg.get("watch"))
    return _copy_matches(
        STAGE_IMAGES, cfg, output, cfg["image_globs"], IMAGES_OUTPUT_DIR, optimize_images=optimize
    )


def copy_fonts(cfg: Dict[str, Any], output: OutputTarget) -> StageResult:
    """Copy font files to 'assets/fonts'."""
    return _copy_matches(STAGE_FONTS, cfg, output, cfg["font_globs"], FONTS_OUTPUT_DIR)


def copy_static(cfg: Dict[str, Any], output: OutputTarget) -> StageResult:
    """Copy the static folder verbatim to 'static'."""
    return _copy_matches(STAGE_STATIC, cfg, output, cfg["static_globs"], STATIC_OUTPUT_DIR)


def optimize_image(data: bytes, ext: str) -> bytes:
    """
    Losslessly re-encode a raster image.

    Returns the original bytes when Pillow cannot decode the image or the
    re-encoded version is not smaller.

    Args:
        data: Raw image bytes.
        ext: Lower-case file extension including the dot.
    """
    try:
        with Image.open(io.BytesIO(data)) as img:
            fmt = img.format
            buf = io.BytesIO()
            if fmt == "JPEG":
                img.save(buf, format="JPEG", optimize=True, progressive=True, quality="keep")
            elif fmt == "PNG":
                img.save(buf, format="PNG", optimize=True)
            elif fmt == "GIF":
                img.save(buf, format="GIF", optimize=True, save_all=getattr(img, "is_animated", False))
            else:
                return data
    except (UnidentifiedImageError, OSError, ValueError) as e:
        logger.warning(f"Image optimisation skipped ({ext}): {e}")
        return data

    optimized = buf.getvalue()
    return optimized if 0 < len(optimized) < len(data) else data


# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _copy_matches(
        stage: str,
        cfg: Dict[str, Any],
        output: OutputTarget,
        globs: List[str],
        dest_dir: str,
        *,
        optimize_images: bool = False
) -> StageResult:
    written: List[str] = []
    issues: List[BuildIssue] = []

    for abs_path, rel_path in expand_globs(cfg["project_root"], globs):
        out_rel = f"{dest_dir}/{rel_path}"
        try:
            with open(abs_path, "rb") as f:
                data = f.read()
            ext = os.path.splitext(abs_path)[1].lower()
            if optimize_images and ext in RASTER_IMAGE_EXTENSIONS:
                data = optimize_image(data, ext)
            output.write(out_rel, data)
        except OSError as e:
            issue = BuildIssue(stage, f"Copy failed: {e}", abs_path)
            logger.error(str(issue))
            issues.append(issue)
            continue
        written.append(out_rel)

    logger.info(f"[{stage}] Copied {len(written)} file(s)")
    return stage_result(stage, written, issues)
