from __future__ import annotations

"""
Domain Constants and Static Data Structures.

Centralizes the default project layout (source globs, output locations)
and the identifiers shared by the pipeline stages.
"""

from typing import Dict, List

CURRENT_CONFIG_VERSION = "1.0.0"
CONFIG_FILE_NAME = "sitesmith.json"

DATA_FILE_SUFFIX = ".json"
ROOT_URL = "/"

DEFAULT_SRC_DIR = "src"
DEFAULT_DATA_DIR = "src/data"
DEFAULT_DIST_DIR = "dist"
DEFAULT_PORT = 3000

# -----------------------------------------------------------------------------
# SOURCE GLOBS (relative to the project root)
# -----------------------------------------------------------------------------
PAGE_GLOBS: List[str] = ["src/pages/**/*.njk", "src/pages/**/*.htm", "src/pages/**/*.html"]

TEMPLATE_WATCH_GLOBS: List[str] = [
    "src/layouts/**/*.njk", "src/layouts/**/*.htm", "src/layouts/**/*.html",
    "src/pages/**/*.njk", "src/pages/**/*.htm", "src/pages/**/*.html",
    "src/partials/**/*.njk", "src/partials/**/*.htm", "src/partials/**/*.html",
    "src/components/**/*.njk", "src/components/**/*.htm", "src/components/**/*.html",
    "src/data/**/*.json",
]

IMAGE_GLOBS: List[str] = [
    "src/assets/images/**/*.gif", "src/assets/images/**/*.png",
    "src/assets/images/**/*.jpg", "src/assets/images/**/*.jpeg",
    "src/assets/images/**/*.svg",
]

FONT_GLOBS: List[str] = [
    "src/assets/fonts/**/*.eot", "src/assets/fonts/**/*.ttf",
    "src/assets/fonts/**/*.svg", "src/assets/fonts/**/*.woff",
    "src/assets/fonts/**/*.woff2",
]

STATIC_GLOBS: List[str] = ["src/static/**/*"]

SCRIPT_WATCH_GLOBS: List[str] = ["src/assets/js/**/*.js"]
STYLE_WATCH_GLOBS: List[str] = ["src/assets/css/**/*.css"]

# -----------------------------------------------------------------------------
# BUNDLES: output path -> ordered entry files
# -----------------------------------------------------------------------------
DEFAULT_BUNDLES: Dict[str, List[str]] = {
    "assets/js/app.js": ["src/assets/js/app.js"],
    "assets/css/app.css": ["src/assets/css/app.css"],
}

# -----------------------------------------------------------------------------
# STAGE IDENTIFIERS
# -----------------------------------------------------------------------------
STAGE_PAGES = "pages"
STAGE_STATIC = "static"
STAGE_IMAGES = "images"
STAGE_FONTS = "fonts"
STAGE_BUNDLE = "bundle"

BUILD_STAGES: List[str] = [STAGE_PAGES, STAGE_STATIC, STAGE_IMAGES, STAGE_FONTS, STAGE_BUNDLE]

# Output subtrees owned by each copy stage
IMAGES_OUTPUT_DIR = "assets/images"
FONTS_OUTPUT_DIR = "assets/fonts"
STATIC_OUTPUT_DIR = "static"

RASTER_IMAGE_EXTENSIONS = (".png", ".jpg", ".jpeg", ".gif")
