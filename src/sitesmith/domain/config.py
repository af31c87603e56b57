from __future__ import annotations

"""
Configuration Domain Management.

Produces the default build configuration and merges the optional project
file (sitesmith.json) over it. The resulting dictionary is the single
explicit value handed to the engine; no module-level mode switches exist.
"""

import json
import logging
import os
from typing import Any, Dict, Optional

from sitesmith.domain.constants import (
    CONFIG_FILE_NAME,
    DEFAULT_BUNDLES,
    DEFAULT_DATA_DIR,
    DEFAULT_DIST_DIR,
    DEFAULT_PORT,
    DEFAULT_SRC_DIR,
    FONT_GLOBS,
    IMAGE_GLOBS,
    PAGE_GLOBS,
    SCRIPT_WATCH_GLOBS,
    STATIC_GLOBS,
    STYLE_WATCH_GLOBS,
    TEMPLATE_WATCH_GLOBS,
)

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Configuration Models (Dict-based)
# -----------------------------------------------------------------------------
def get_default_config(project_root: Optional[str] = None) -> Dict[str, Any]:
    """
    Generate the default build configuration.

    Args:
        project_root: Project directory. Defaults to the current directory.

    Returns:
        Dict[str, Any]: Default configuration values.
    """
    root = project_root or os.getcwd()
    return {
        # IO Paths
        "project_root": root,
        "src_dir": DEFAULT_SRC_DIR,
        "data_dir": DEFAULT_DATA_DIR,
        "dist_dir": DEFAULT_DIST_DIR,

        # Source selection
        "page_globs": list(PAGE_GLOBS),
        "template_watch_globs": list(TEMPLATE_WATCH_GLOBS),
        "image_globs": list(IMAGE_GLOBS),
        "font_globs": list(FONT_GLOBS),
        "static_globs": list(STATIC_GLOBS),
        "script_watch_globs": list(SCRIPT_WATCH_GLOBS),
        "style_watch_globs": list(STYLE_WATCH_GLOBS),
        "bundles": {k: list(v) for k, v in DEFAULT_BUNDLES.items()},

        # Modes
        "production": False,
        "serve": False,
        "watch": False,

        # Dev server
        "host": "127.0.0.1",
        "port": DEFAULT_PORT,
        "watch_interval": 0.5,

        # Diagnostics
        "notify_webhook": "",
        "log_file": "",
    }


# -----------------------------------------------------------------------------
# Persistence Logic
# -----------------------------------------------------------------------------
def get_config_path(project_root: str, config_path: Optional[str] = None) -> str:
    """Resolve the project configuration file location."""
    if config_path:
        return os.path.abspath(config_path)
    return os.path.join(os.path.abspath(project_root), CONFIG_FILE_NAME)


def load_config(project_root: Optional[str] = None, config_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load the project configuration, merged over the defaults.

    A missing file is not an error. A corrupt file is logged and ignored so
    that the build can still proceed with defaults.

    Args:
        project_root: Project directory.
        config_path: Explicit configuration file, overriding discovery.

    Returns:
        Dict[str, Any]: The merged configuration dictionary.
    """
    defaults = get_default_config(project_root)
    path = get_config_path(defaults["project_root"], config_path)

    if not os.path.exists(path):
        logger.debug(f"Config file not found at {path}. Using defaults.")
        return defaults

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.error(f"Failed to load config '{path}': {e}. Using defaults.")
        return defaults

    if not isinstance(data, dict):
        logger.warning(f"Corrupted config file '{path}'. Using defaults.")
        return defaults

    data.pop("version", None)
    merged = dict(defaults)
    merged.update(data)
    logger.debug(f"Loaded project configuration from {path}")
    return merged
