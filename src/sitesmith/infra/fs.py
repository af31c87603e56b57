from __future__ import annotations

"""
FileSystem Infrastructure Layer.

Provides path normalization and glob expansion helpers shared by the
pipeline stages. Glob results are reported relative to the glob "base"
(the leading non-wildcard directories) so stages can mirror the source
layout into the output target.
"""

import glob
import os
import re
from typing import Iterable, List, Optional, Tuple

_GLOB_CHARS = re.compile(r"[*?\[]")


# -----------------------------------------------------------------------------
# PATH RESOLUTION API
# -----------------------------------------------------------------------------

def normalize_path(path: Optional[str], fallback: str) -> str:
    """
    Normalize a directory path string into an absolute filesystem path.

    Handles environment variable expansion ($VAR/%VAR%) and user home
    shortcuts (~/). Reverts to fallback if the input is empty.

    Args:
        path: Raw input path string.
        fallback: Default path to use if the input is empty.

    Returns:
        str: Normalized absolute path.
    """
    p = (path or "").strip()
    if not p:
        p = fallback
    p = os.path.expandvars(os.path.expanduser(p))
    return os.path.abspath(p)


def resolve_in_project(project_root: str, path: str) -> str:
    """Resolve a project-relative path to an absolute one."""
    if os.path.isabs(path):
        return os.path.normpath(path)
    return os.path.normpath(os.path.join(project_root, path))


def to_posix(rel_path: str) -> str:
    """Convert an OS-specific relative path to forward-slash form."""
    return rel_path.replace(os.sep, "/")

# -----------------------------------------------------------------------------
# GLOB EXPANSION API
# -----------------------------------------------------------------------------

def glob_base(pattern: str) -> str:
    """
    Return the leading directory of a glob pattern that has no wildcards.

    Example: 'src/static/**/*' -> 'src/static'.
    """
    parts = pattern.replace("\\", "/").split("/")
    base: List[str] = []
    for part in parts:
        if _GLOB_CHARS.search(part):
            break
        base.append(part)
    else:
        # No wildcard at all: the pattern names a file, its parent is the base
        base = base[:-1]
    return "/".join(base)


def expand_globs(project_root: str, patterns: Iterable[str]) -> List[Tuple[str, str]]:
    """
    Expand project-relative glob patterns into matching files.

    Args:
        project_root: Absolute project directory.
        patterns: Glob patterns, '**' matches any depth.

    Returns:
        List[Tuple[str, str]]: Sorted (absolute path, path relative to the
                               pattern's base) pairs, deduplicated by path.
    """
    seen = set()
    out: List[Tuple[str, str]] = []
    for pattern in patterns:
        base_dir = resolve_in_project(project_root, glob_base(pattern))
        full_pattern = resolve_in_project(project_root, pattern)
        for match in glob.glob(full_pattern, recursive=True):
            if not os.path.isfile(match):
                continue
            abs_path = os.path.abspath(match)
            if abs_path in seen:
                continue
            seen.add(abs_path)
            out.append((abs_path, to_posix(os.path.relpath(abs_path, base_dir))))
    out.sort(key=lambda item: item[1])
    return out


def safe_mkdir(path: str) -> Tuple[bool, Optional[str]]:
    """
    Attempt to recursively create a directory structure safely.

    Args:
        path: Target directory path.

    Returns:
        Tuple[bool, Optional[str]]: (Success flag, Error message if applicable).
    """
    try:
        os.makedirs(path, exist_ok=True)
        return True, None
    except OSError as e:
        return False, str(e)
