from __future__ import annotations

"""
Integration tests for Logging Infrastructure.

Verifies the asynchronous QueueListener architecture, idempotency
of configuration, and log file rotation logic.
"""

import logging
import re
import time
from pathlib import Path

import pytest

from sitesmith.infra.logging import LoggingConfig, configure_logging, shutdown_logging
from sitesmith.infra.logging.core import _CONFIGURED_FLAG_ATTR, _QUEUE_LISTENER_ATTR
from sitesmith.infra.logging.handlers import _HANDLER_TAG_ATTR


@pytest.fixture(autouse=True)
def reset_logging() -> None:
    """Tear down our handlers before and after each test."""
    shutdown_logging()
    yield
    shutdown_logging()


def _our_handlers() -> list:
    return [h for h in logging.getLogger().handlers if getattr(h, _HANDLER_TAG_ATTR, False)]


def test_logging_idempotency() -> None:
    cfg = LoggingConfig(level="INFO", console=True)

    configure_logging(cfg)
    initial = len(_our_handlers())
    configure_logging(cfg)

    assert len(_our_handlers()) == initial == 1


def test_force_reconfigures(tmp_path: Path) -> None:
    configure_logging(LoggingConfig(level="INFO"))
    first_listener = getattr(logging.getLogger(), _QUEUE_LISTENER_ATTR)

    configure_logging(LoggingConfig(level="DEBUG", log_file=str(tmp_path / "b.log")), force=True)

    root = logging.getLogger()
    assert root.level == logging.DEBUG
    assert getattr(root, _QUEUE_LISTENER_ATTR) is not first_listener
    assert len(_our_handlers()) == 1


def test_log_file_receives_records(tmp_path: Path) -> None:
    log_file = tmp_path / "logs" / "build.log"
    configure_logging(LoggingConfig(level="DEBUG", console=False, log_file=str(log_file)))

    logging.getLogger("sitesmith.test").info("render pass finished")
    shutdown_logging()

    content = log_file.read_text(encoding="utf-8")
    assert "render pass finished" in content
    assert "sitesmith.test" in content


def test_log_rotation(tmp_path: Path) -> None:
    log_file = tmp_path / "test_rotate.log"
    cfg = LoggingConfig(level="DEBUG", console=False, log_file=str(log_file), max_bytes=100, backup_count=1)

    configure_logging(cfg)
    logger = logging.getLogger("test_rotate")
    for _ in range(10):
        logger.debug("This is a long log message to trigger rotation." * 5)

    time.sleep(0.2)
    shutdown_logging()

    assert log_file.exists()
    assert (tmp_path / "test_rotate.log.1").exists()


def test_queue_listener_architecture() -> None:
    configure_logging(LoggingConfig(level="INFO", console=True))

    root = logging.getLogger()
    assert _our_handlers()
    assert getattr(root, _QUEUE_LISTENER_ATTR) is not None
    assert getattr(root, _CONFIGURED_FLAG_ATTR) is True


def test_shutdown_detaches_handlers() -> None:
    configure_logging(LoggingConfig(level="INFO"))

    shutdown_logging()

    root = logging.getLogger()
    assert _our_handlers() == []
    assert getattr(root, _QUEUE_LISTENER_ATTR) is None
    assert getattr(root, _CONFIGURED_FLAG_ATTR) is False


def test_log_file_uses_configured_date_format(tmp_path: Path) -> None:
    log_file = tmp_path / "dated.log"
    configure_logging(LoggingConfig(level="INFO", console=False, log_file=str(log_file), datefmt="%Y/%m/%d"))

    logging.getLogger("sitesmith.test").info("dated record")
    shutdown_logging()

    first_line = log_file.read_text(encoding="utf-8").splitlines()[0]
    assert re.match(r"^\d{4}/\d{2}/\d{2} \| INFO \| sitesmith\.test \|", first_line)
