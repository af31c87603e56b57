from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. Factories for on-disk data directories and complete site projects.
"""

import io
import os
import sys
from pathlib import Path
from typing import Any, Callable, Dict

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)


# -----------------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------------
def write_files(root: Path, files: Dict[str, Any]) -> Path:
    """Create files below root. str values are written as UTF-8, bytes verbatim."""
    root.mkdir(parents=True, exist_ok=True)
    for rel, content in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content, encoding="utf-8")
    return root


def png_bytes(size: int = 32) -> bytes:
    """Render a small solid PNG with Pillow."""
    from PIL import Image

    buf = io.BytesIO()
    Image.new("RGB", (size, size), (200, 30, 30)).save(buf, format="PNG")
    return buf.getvalue()


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def make_files(tmp_path: Path) -> Callable[..., Path]:
    """Factory writing a {relative path: content} mapping under tmp_path/<name>."""

    def _make(files: Dict[str, Any], name: str = "data") -> Path:
        return write_files(tmp_path / name, files)

    return _make


@pytest.fixture
def site_project(tmp_path: Path) -> Path:
    """
    Create a complete sample project.

    Structure:
    /site
      /src
        /layouts/base.njk
        /partials/nav.njk
        /pages/index.njk, /pages/blog/post.html
        /data/site/title.json, /data/nav/items.json
        /assets/js/app.js, /assets/css/{app,base}.css
        /assets/images/logo.png, /assets/fonts/icons.woff2
        /static/robots.txt
    """
    root = tmp_path / "site"
    write_files(root, {
        "src/layouts/base.njk": (
            "<html>\n  <head><title>{{ data.site.title }}</title></head>\n"
            "  <body>\n{% block content %}{% endblock %}\n  </body>\n</html>\n"
        ),
        "src/partials/nav.njk": (
            "<ul>{% for item in data.nav.items %}<li>{{ item }}</li>{% endfor %}</ul>"
        ),
        "src/pages/index.njk": (
            '{% extends "layouts/base.njk" %}\n'
            "{% block content %}\n"
            '    {% include "partials/nav.njk" %}\n'
            '    <a href="{{ root }}">home</a>\n'
            "{% endblock %}\n"
        ),
        "src/pages/blog/post.html": "<p>{{ data.site.title }} post</p>\n",
        "src/data/site/title.json": '"Hello"',
        "src/data/nav/items.json": "[1, 2, 3]",
        "src/assets/js/app.js": "function greet(name) {\n    return 'hi ' + name;\n}\n",
        "src/assets/css/app.css": '@import "base.css";\n.app {  color : red ;  }\n',
        "src/assets/css/base.css": "body {\n    margin: 0;\n}\n",
        "src/assets/images/logo.png": png_bytes(),
        "src/assets/fonts/icons.woff2": b"wOF2fakefontdata",
        "src/static/robots.txt": "User-agent: *\n",
    })
    return root


@pytest.fixture
def site_config(site_project: Path) -> Dict[str, Any]:
    """Default build configuration bound to the sample project."""
    from sitesmith.domain.config import get_default_config

    return get_default_config(str(site_project))
