from __future__ import annotations

"""
Network Communication Infrastructure.

Outbound HTTP used by the build tool: error notifications only.
"""

from sitesmith.infra.network.notify_client import DEFAULT_TITLE, Notifier

__all__ = [
    "DEFAULT_TITLE",
    "Notifier",
]
