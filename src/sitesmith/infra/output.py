from __future__ import annotations

"""
Build Output Targets.

A build writes its artifacts to an explicit OutputTarget chosen once at
startup: the real filesystem for regular builds, or an in-memory store
served directly by the development server. Both targets tolerate
concurrent writers; the last complete write of a path wins and partially
written files are never observable.
"""

import logging
import os
import shutil
import tempfile
import threading
from typing import Dict, List, Optional

from sitesmith.infra.fs import safe_mkdir, to_posix

logger = logging.getLogger(__name__)


class OutputTarget:
    """Common interface for build destinations. Paths are POSIX, output-relative."""

    def write(self, rel_path: str, data: bytes) -> None:
        raise NotImplementedError

    def read(self, rel_path: str) -> Optional[bytes]:
        raise NotImplementedError

    def exists(self, rel_path: str) -> bool:
        return self.read(rel_path) is not None

    def clean(self) -> None:
        raise NotImplementedError

    def list_paths(self) -> List[str]:
        raise NotImplementedError

    def describe(self) -> str:
        raise NotImplementedError


def _normalize_rel(rel_path: str) -> str:
    rel = to_posix(rel_path).lstrip("/")
    parts = [p for p in rel.split("/") if p not in ("", ".")]
    if any(p == ".." for p in parts):
        raise ValueError(f"Output path escapes the target root: {rel_path}")
    return "/".join(parts)


# -----------------------------------------------------------------------------
# FILESYSTEM TARGET
# -----------------------------------------------------------------------------

class DiskOutput(OutputTarget):
    """Writes artifacts below a root directory using atomic replaces."""

    def __init__(self, root: str) -> None:
        self.root = os.path.abspath(root)

    def _full(self, rel_path: str) -> str:
        return os.path.join(self.root, *_normalize_rel(rel_path).split("/"))

    def write(self, rel_path: str, data: bytes) -> None:
        target = self._full(rel_path)
        parent = os.path.dirname(target)
        ok, err = safe_mkdir(parent)
        if not ok:
            raise OSError(f"Cannot create output directory {parent}: {err}")

        fd, tmp_path = tempfile.mkstemp(dir=parent, prefix=".tmp-", suffix=os.path.basename(target))
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            os.replace(tmp_path, target)
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise

    def read(self, rel_path: str) -> Optional[bytes]:
        target = self._full(rel_path)
        if not os.path.isfile(target):
            return None
        with open(target, "rb") as f:
            return f.read()

    def clean(self) -> None:
        """Delete everything inside the root, keeping the root itself."""
        if not os.path.isdir(self.root):
            os.makedirs(self.root, exist_ok=True)
            return
        for name in os.listdir(self.root):
            path = os.path.join(self.root, name)
            if os.path.isdir(path) and not os.path.islink(path):
                shutil.rmtree(path)
            else:
                os.unlink(path)
        logger.debug(f"Cleaned output directory {self.root}")

    def list_paths(self) -> List[str]:
        out: List[str] = []
        for root, _dirs, files in os.walk(self.root):
            for name in files:
                out.append(to_posix(os.path.relpath(os.path.join(root, name), self.root)))
        return sorted(out)

    def describe(self) -> str:
        return self.root


# -----------------------------------------------------------------------------
# IN-MEMORY TARGET
# -----------------------------------------------------------------------------

class MemoryOutput(OutputTarget):
    """Thread-safe in-memory artifact store used while serving."""

    def __init__(self) -> None:
        self._files: Dict[str, bytes] = {}
        self._lock = threading.Lock()

    def write(self, rel_path: str, data: bytes) -> None:
        key = _normalize_rel(rel_path)
        with self._lock:
            self._files[key] = bytes(data)

    def read(self, rel_path: str) -> Optional[bytes]:
        key = _normalize_rel(rel_path)
        with self._lock:
            return self._files.get(key)

    def clean(self) -> None:
        with self._lock:
            self._files.clear()

    def list_paths(self) -> List[str]:
        with self._lock:
            return sorted(self._files)

    def describe(self) -> str:
        return "(memory)"


def create_output_target(cfg: Dict[str, object]) -> OutputTarget:
    """
    Choose the output target from the build configuration.

    Serving keeps artifacts in memory; every other mode writes to dist.
    """
    if cfg.get("serve") and not cfg.get("production"):
        return MemoryOutput()
    project_root = str(cfg.get("project_root") or os.getcwd())
    dist = str(cfg.get("dist_dir") or "dist")
    if not os.path.isabs(dist):
        dist = os.path.join(project_root, dist)
    return DiskOutput(dist)
