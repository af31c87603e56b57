from __future__ import annotations

"""
Data File Discovery Service.

Walks the data directory and yields every JSON document with its relative
path already split into the segments that address it in the DataTree.
"""

import logging
import os
from typing import Any, Dict, Iterable, Tuple

from sitesmith.domain.constants import DATA_FILE_SUFFIX
from sitesmith.domain.errors import ConfigurationError

logger = logging.getLogger(__name__)


# ==============================================================================
# PUBLIC API (DISCOVERY SERVICES)
# ==============================================================================

def yield_data_files(root_directory: str, suffix: str = DATA_FILE_SUFFIX) -> Iterable[Dict[str, Any]]:
    """
    Traverse the data directory and yield every file ending in the suffix.

    Directory and file names are visited in sorted order so repeated scans
    of an unchanged tree produce the same sequence.

    Args:
        root_directory: Directory to scan.
        suffix: Case-sensitive file suffix to accept.

    Yields:
        Dict[str, Any]: Metadata for each data file:
                        - file_path: Absolute path.
                        - rel_path: Relative path from root.
                        - segments: Directory names, then the leaf key.

    Raises:
        ConfigurationError: If the root does not exist or is not a directory.
    """
    root_abs = os.path.abspath(root_directory)
    if not os.path.isdir(root_abs):
        raise ConfigurationError(f"Data directory does not exist: {root_abs}")

    for root, dirs, files in os.walk(root_abs):
        dirs.sort()
        files.sort()

        for file_name in files:
            if not file_name.endswith(suffix):
                continue

            file_path = os.path.join(root, file_name)
            rel_path = os.path.relpath(file_path, root_abs)

            yield {
                "file_path": file_path,
                "rel_path": rel_path,
                "segments": split_segments(rel_path, suffix),
            }


def split_segments(rel_path: str, suffix: str = DATA_FILE_SUFFIX) -> Tuple[str, ...]:
    """
    Split a relative data file path into its DataTree address.

    Example: 'site/nav/items.json' -> ('site', 'nav', 'items').
    """
    parts = [p for p in rel_path.replace("\\", "/").split("/") if p]
    if not parts:
        raise ValueError("Empty relative path")
    leaf = parts[-1]
    if leaf.endswith(suffix):
        leaf = leaf[: -len(suffix)]
    return tuple(parts[:-1]) + (leaf,)
