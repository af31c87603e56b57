from __future__ import annotations

USER_AGENT = "sitesmith/1.0.0"
DEFAULT_TIMEOUT = 5
