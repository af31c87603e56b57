from __future__ import annotations

"""
Development Session.

Runs the initial build and then, depending on the mode flags, keeps the
development server and the file watcher alive. Each watched source group
re-runs only the stage it feeds and then triggers a browser reload.
"""

import logging
import threading
from typing import Any, Callable, Dict, List, Optional, Tuple

from sitesmith.core.pipeline.engine import run_build, run_stage
from sitesmith.domain.constants import (
    STAGE_BUNDLE,
    STAGE_FONTS,
    STAGE_IMAGES,
    STAGE_PAGES,
    STAGE_STATIC,
)
from sitesmith.domain.pipeline_models import BuildResult, StageResult
from sitesmith.infra.network import Notifier
from sitesmith.infra.output import OutputTarget
from sitesmith.infra.server import DevServer
from sitesmith.infra.watcher import PollingWatcher

logger = logging.getLogger(__name__)


def watch_groups(cfg: Dict[str, Any]) -> List[Tuple[str, List[str]]]:
    """Map each rebuildable stage to the source globs that feed it."""
    return [
        (STAGE_PAGES, cfg["template_watch_globs"]),
        (STAGE_FONTS, cfg["font_globs"]),
        (STAGE_IMAGES, cfg["image_globs"]),
        (STAGE_STATIC, cfg["static_globs"]),
        (STAGE_BUNDLE, cfg["script_watch_globs"] + cfg["style_watch_globs"]),
    ]


class DevSession:
    """
    Owns the server and watcher for one invocation.

    Attributes:
        cfg: Validated build configuration.
        output: Output target shared by the build, the server and rebuilds.
        notifier: Error side channel.
        server: Running DevServer, if serving.
        watcher: Running PollingWatcher, if watching.
    """

    def __init__(
            self,
            cfg: Dict[str, Any],
            output: OutputTarget,
            notifier: Notifier,
            server_factory: Callable[..., DevServer] = DevServer,
    ) -> None:
        self.cfg = cfg
        self.output = output
        self.notifier = notifier
        self.server_factory = server_factory
        self.server: Optional[DevServer] = None
        self.watcher: Optional[PollingWatcher] = None
        self._done = threading.Event()

    @property
    def serving(self) -> bool:
        return bool(self.cfg.get("serve")) and not self.cfg.get("production")

    def start(self) -> BuildResult:
        """Run the initial build, then bring up the server and watcher as configured."""
        result = run_build(self.cfg, self.output, self.notifier)

        if self.serving:
            self.server = self.server_factory(self.output, self.cfg["host"], self.cfg["port"])
            self.server.start()

        if self.cfg.get("watch"):
            self.watcher = PollingWatcher(self.cfg["project_root"], self.cfg["watch_interval"])
            for stage, globs in watch_groups(self.cfg):
                self.watcher.add(stage, globs, self.rebuild)
            self.watcher.start()

        return result

    def rebuild(self, stage: str) -> StageResult:
        """Re-run one stage and reload connected browsers."""
        result = run_stage(stage, self.cfg, self.output, self.notifier)
        logger.info(f"Rebuilt '{stage}': {len(result.written)} file(s), {len(result.issues)} error(s)")
        if self.server is not None:
            self.server.reload()
        return result

    @property
    def active(self) -> bool:
        return self.server is not None or self.watcher is not None

    def wait(self) -> None:
        """Block until stop() is called or the process is interrupted."""
        while not self._done.wait(0.5):
            pass

    def stop(self) -> None:
        self._done.set()
        if self.watcher is not None:
            self.watcher.stop()
            self.watcher = None
        if self.server is not None:
            self.server.stop()
            self.server = None
