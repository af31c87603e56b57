from __future__ import annotations

"""
sitesmith: static site build pipeline.

Renders template pages with a data tree assembled from a directory of JSON
files, bundles scripts and styles, copies static assets, and serves the
result with live reload while watching sources.
"""

__version__ = "1.0.0"
