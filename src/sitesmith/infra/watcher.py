from __future__ import annotations

"""
Polling File Watcher.

Detects source changes by comparing (mtime, size) snapshots of the files
matched by each rule's globs. A rule whose snapshot changed (file added,
removed or modified) has its callback invoked on the watcher thread.
Callbacks are not serialised against builds started elsewhere; every
rebuild is independent, so overlapping triggers are harmless.
"""

import logging
import os
import threading
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple

from sitesmith.infra.fs import expand_globs

logger = logging.getLogger(__name__)

Snapshot = Dict[str, Tuple[int, int]]


@dataclass
class WatchRule:
    """
    A set of globs and the action triggered when any matching file changes.

    Attributes:
        name: Label used in logs.
        globs: Project-relative glob patterns.
        callback: Invoked with the rule name after a change is detected.
        snapshot: Last observed file signatures.
    """
    name: str
    globs: List[str]
    callback: Callable[[str], None]
    snapshot: Snapshot = field(default_factory=dict)


class PollingWatcher:
    """Background thread polling the project tree for changes."""

    def __init__(self, project_root: str, interval: float = 0.5) -> None:
        self.project_root = os.path.abspath(project_root)
        self.interval = interval
        self.rules: List[WatchRule] = []
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    # -------------------------------------------------------------------------
    # Rule management
    # -------------------------------------------------------------------------
    def add(self, name: str, globs: List[str], callback: Callable[[str], None]) -> WatchRule:
        rule = WatchRule(name=name, globs=list(globs), callback=callback)
        rule.snapshot = self.take_snapshot(rule.globs)
        self.rules.append(rule)
        logger.debug(f"Watching '{name}': {len(rule.snapshot)} file(s)")
        return rule

    def take_snapshot(self, globs: List[str]) -> Snapshot:
        snap: Snapshot = {}
        for abs_path, _rel in expand_globs(self.project_root, globs):
            try:
                st = os.stat(abs_path)
            except FileNotFoundError:
                continue
            snap[abs_path] = (st.st_mtime_ns, st.st_size)
        return snap

    # -------------------------------------------------------------------------
    # Polling
    # -------------------------------------------------------------------------
    def poll_once(self) -> List[str]:
        """
        Check every rule once and fire callbacks for the changed ones.

        A failing callback is logged and does not stop the watcher.

        Returns:
            List[str]: Names of the rules that changed.
        """
        changed: List[str] = []
        for rule in self.rules:
            current = self.take_snapshot(rule.globs)
            if current == rule.snapshot:
                continue
            rule.snapshot = current
            changed.append(rule.name)
            logger.info(f"Change detected: {rule.name}")
            try:
                rule.callback(rule.name)
            except Exception as e:
                logger.error(f"Watch action '{rule.name}' failed: {e}", exc_info=True)
        return changed

    def _loop(self) -> None:
        while not self._stop.wait(self.interval):
            self.poll_once()

    def start(self) -> None:
        if self._thread and self._thread.is_alive():
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._loop, name="Watcher", daemon=True)
        self._thread.start()
        logger.info(f"Watching {len(self.rules)} source group(s) for changes...")

    def stop(self, timeout: Optional[float] = None) -> None:
        self._stop.set()
        if self._thread:
            self._thread.join(timeout)
            self._thread = None

    @property
    def running(self) -> bool:
        return bool(self._thread and self._thread.is_alive())
