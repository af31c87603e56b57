from __future__ import annotations

"""
Data Tree Builder.

Converts a directory of JSON documents into a single nested mapping used as
template rendering context. Directory names become intermediate keys and
file names (without '.json') become leaf keys holding the parsed document.

The tree is folded from immutable FileEntry values: every insertion returns
new sub-trees instead of moving a shared cursor, so the builder has no state
between calls and is rebuilt from scratch on every render pass.
"""

import json
import logging
import os
from functools import reduce
from typing import Any, Iterable, List, Set, Tuple

from sitesmith.core.services.scanner import yield_data_files
from sitesmith.domain.data_models import DataTree, FileEntry
from sitesmith.domain.errors import DataTreeError

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def build_data_tree(root_directory: str) -> DataTree:
    """
    Build the nested DataTree for every JSON file below a directory.

    Empty (or whitespace-only) files are skipped and contribute no key,
    although the directories leading to them still appear as empty nodes.

    Args:
        root_directory: Directory to scan. Must exist.

    Returns:
        DataTree: Mapping mirroring the directory structure.

    Raises:
        ConfigurationError: If the directory does not exist.
        DataTreeError: If a file is not valid UTF-8 JSON, or a file and a
                       directory claim the same key in one node.
    """
    entries = read_data_files(root_directory)
    _check_key_collisions(entries, root_directory)

    tree: DataTree = reduce(_fold_entry, entries, {})
    logger.debug(f"Data tree built from {len(entries)} file(s) in {root_directory}")
    return tree


def get_data_from_files(data_directory: str) -> DataTree:
    """
    Build the DataTree and wrap it under the data directory's name.

    Example: 'src/data' -> {'data': {...}}.
    """
    root_key = os.path.basename(os.path.normpath(os.path.abspath(data_directory)))
    return {root_key: build_data_tree(data_directory)}


def read_data_files(root_directory: str) -> List[FileEntry]:
    """
    Scan and parse every data file below a directory.

    Raises:
        DataTreeError: On the first file that fails to decode or parse.
    """
    return [_load_entry(meta) for meta in yield_data_files(root_directory)]


def parse_json_document(path: str) -> Tuple[Any, bool]:
    """
    Read and parse one JSON file.

    Returns:
        Tuple[Any, bool]: (parsed value, empty flag). Empty files return (None, True).

    Raises:
        DataTreeError: If the file cannot be read, decoded or parsed.
    """
    try:
        with open(path, "r", encoding="utf-8-sig") as f:
            raw = f.read()
    except UnicodeDecodeError as e:
        raise DataTreeError(path, f"Invalid UTF-8 content: {e.reason}") from e
    except OSError as e:
        raise DataTreeError(path, f"Unreadable file: {e.strerror or e}") from e

    if not raw.strip():
        return None, True

    try:
        return json.loads(raw), False
    except json.JSONDecodeError as e:
        raise DataTreeError(path, f"{e.msg} (line {e.lineno}, column {e.colno})") from e


# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _load_entry(meta: dict) -> FileEntry:
    content, empty = parse_json_document(meta["file_path"])
    if empty:
        logger.debug(f"Skipping empty data file: {meta['rel_path']}")
    return FileEntry(
        path=meta["file_path"],
        rel_path=meta["rel_path"],
        segments=tuple(meta["segments"]),
        content=content,
        empty=empty,
    )


def _fold_entry(tree: DataTree, entry: FileEntry) -> DataTree:
    return _insert(tree, entry.parents, entry)


def _insert(node: DataTree, path: Tuple[str, ...], entry: FileEntry) -> DataTree:
    """Return a copy of node with the entry placed at path."""
    if not path:
        if entry.empty:
            return node
        return {**node, entry.leaf_key: entry.content}

    head, rest = path[0], path[1:]
    child = node.get(head, {})
    return {**node, head: _insert(child, rest, entry)}


def _check_key_collisions(entries: Iterable[FileEntry], root_directory: str) -> None:
    """
    Reject a leaf key that is also used by a directory in the same node.

    'a.json' next to an 'a/' directory has no defined merge, so the pass is
    aborted instead of letting one silently overwrite the other.
    """
    directories: Set[Tuple[str, ...]] = set()
    leaves: dict = {}
    for entry in entries:
        for depth in range(1, len(entry.segments)):
            directories.add(entry.segments[:depth])
        if not entry.empty:
            leaves[entry.segments] = entry

    for segments, entry in leaves.items():
        if segments in directories:
            dir_path = os.path.join(os.path.abspath(root_directory), *segments)
            raise DataTreeError(
                entry.path,
                f"Key collision: '{segments[-1]}' is both a file and the directory {dir_path}",
            )
