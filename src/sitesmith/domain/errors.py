from __future__ import annotations

"""
Domain Exception Hierarchy.

Separates fatal configuration problems (which abort the process) from
recoverable build failures (which abort a single pass and are reported
through the notification channel).
"""

from typing import Optional


class SiteBuildError(Exception):
    """Base class for every error raised by the build pipeline."""


class ConfigurationError(SiteBuildError):
    """
    Raised when the project layout or configuration cannot be used.

    Fatal for the caller: the builder does not attempt to recover.
    """


class DataTreeError(SiteBuildError):
    """
    Raised when a data file cannot be turned into a DataTree node.

    Attributes:
        path: Filesystem path of the offending file (or directory).
        message: Human-readable parser or structural message.
    """

    def __init__(self, path: str, message: str) -> None:
        self.path = path
        self.message = message
        super().__init__(f"{path}: {message}")


def describe_error(exc: BaseException, path: Optional[str] = None) -> str:
    """Render an exception as a one-line message suitable for notifications."""
    text = str(exc) or type(exc).__name__
    if path and path not in text:
        return f"{path}: {text}"
    return text
