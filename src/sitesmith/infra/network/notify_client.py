from __future__ import annotations

"""
Build Notification Client.

Best-effort side channel that surfaces build errors to a human. Every
notification is logged; when a webhook is configured it is also POSTed as
JSON from a background daemon thread, so stage workers and the watcher
never wait on the network. Delivery failures are logged and dropped so that
a broken channel can never interrupt a build or the watcher.
"""

import logging
import queue
import threading
from collections import deque
from typing import Any, Deque, Dict, Optional, Tuple

import requests

from sitesmith.infra.network.common import DEFAULT_TIMEOUT, USER_AGENT

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Error in console"

# Recent notifications kept for inspection
MAX_HISTORY = 100
# Undelivered webhook payloads; newer ones are dropped beyond this
MAX_PENDING = 100


class Notifier:
    """
    Fire-and-forget notifier.

    Attributes:
        webhook_url: Optional endpoint receiving {"title", "message"} JSON.
        sent: The most recent notifications (title, message), oldest first.
        delivered: Webhook deliveries accepted by the endpoint.
        failed: Webhook deliveries that were rejected or could not be sent.
    """

    def __init__(self, webhook_url: Optional[str] = None, timeout: float = DEFAULT_TIMEOUT) -> None:
        self.webhook_url = (webhook_url or "").strip() or None
        self.timeout = timeout
        self.sent: Deque[Tuple[str, str]] = deque(maxlen=MAX_HISTORY)
        self.delivered = 0
        self.failed = 0

        self._queue: queue.Queue[Dict[str, Any]] = queue.Queue()
        self._pending = 0
        self._cond = threading.Condition()
        self._worker: Optional[threading.Thread] = None

    def notify(self, title: str = DEFAULT_TITLE, message: str = "") -> bool:
        """
        Emit a notification. Never raises and never blocks on the network.

        Returns:
            bool: False only if the webhook backlog is full and the payload was dropped.
        """
        self.sent.append((title, message))
        logger.debug(f"Notification: {title}: {message}")

        if not self.webhook_url:
            return True

        with self._cond:
            if self._pending >= MAX_PENDING:
                logger.debug("Notification dropped: webhook backlog is full")
                return False
            self._pending += 1
            self._ensure_worker()

        self._queue.put({"title": title, "message": message})
        return True

    def flush(self, timeout: Optional[float] = None) -> bool:
        """
        Wait for queued webhook deliveries.

        Returns:
            bool: True if nothing is pending anymore.
        """
        with self._cond:
            return self._cond.wait_for(lambda: self._pending == 0, timeout)

    def _ensure_worker(self) -> None:
        if self._worker is None or not self._worker.is_alive():
            self._worker = threading.Thread(target=self._deliver_loop, name="Notifier", daemon=True)
            self._worker.start()

    def _deliver_loop(self) -> None:
        while True:
            payload = self._queue.get()
            ok, detail = _post_notification(self.webhook_url or "", payload, self.timeout)
            if not ok:
                logger.debug(f"Notification delivery failed: {detail}")
            with self._cond:
                if ok:
                    self.delivered += 1
                else:
                    self.failed += 1
                self._pending -= 1
                self._cond.notify_all()


def _post_notification(url: str, payload: Dict[str, Any], timeout: float) -> Tuple[bool, str]:
    """Execute a JSON POST, converting every transport failure into a status."""
    headers = {"User-Agent": USER_AGENT}
    try:
        response = requests.post(url, json=payload, headers=headers, timeout=timeout)
        return response.status_code in (200, 201, 202, 204), f"HTTP {response.status_code}"
    except Exception as e:
        return False, str(e)
