from __future__ import annotations

"""
Data Tree Domain Models.

Provides the recursive type definitions used to represent a directory of
JSON documents as a single nested mapping for template rendering.
"""

from dataclasses import dataclass
from typing import Any, Dict, Tuple, Union

# -----------------------------------------------------------------------------
# STRUCTURAL COMPONENTS
# -----------------------------------------------------------------------------

DataTree = Dict[str, Union["DataTree", Any]]


@dataclass(frozen=True)
class FileEntry:
    """
    A discovered data file and its parsed payload.

    Created at scan time and discarded once the tree has been folded.

    Attributes:
        path: Absolute filesystem path to the file.
        rel_path: Path relative to the scanned root (OS separators).
        segments: Ordered directory names followed by the leaf key.
        content: Parsed JSON value.
        empty: True when the file had no content and yields no key.
    """
    path: str
    rel_path: str
    segments: Tuple[str, ...]
    content: Any = None
    empty: bool = False

    @property
    def leaf_key(self) -> str:
        return self.segments[-1]

    @property
    def parents(self) -> Tuple[str, ...]:
        return self.segments[:-1]
