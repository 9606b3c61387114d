from __future__ import annotations

"""
Integration tests for Logging Infrastructure.

Verifies the QueueListener architecture, idempotency of configuration,
file persistence and teardown.
"""

import logging
from logging.handlers import QueueHandler, QueueListener
from pathlib import Path

import pytest

from rdu.infra.logging import (
    _CONFIGURED_FLAG_ATTR,
    _HANDLER_TAG_ATTR,
    _QUEUE_LISTENER_ATTR,
    LoggingConfig,
    configure_logging,
    stop_logging,
)


@pytest.fixture(autouse=True)
def reset_logging():
    """Clean up root logger handlers before and after each test."""
    root = logging.getLogger()
    previous_level = root.level
    stop_logging()
    yield
    stop_logging()
    root.setLevel(previous_level)


def _our_handlers():
    return [h for h in logging.getLogger().handlers if getattr(h, _HANDLER_TAG_ATTR, False)]


def test_logging_idempotency() -> None:
    cfg = LoggingConfig(level="INFO", console=True)

    configure_logging(cfg)
    first = _our_handlers()
    configure_logging(cfg)

    assert _our_handlers() == first
    assert len(first) == 1
    assert isinstance(first[0], QueueHandler)


def test_force_reconfigures_level() -> None:
    configure_logging(LoggingConfig(level="INFO"))
    configure_logging(LoggingConfig(level="DEBUG"), force=True)

    assert logging.getLogger().level == logging.DEBUG
    assert len(_our_handlers()) == 1


def test_unknown_level_defaults_to_warning() -> None:
    configure_logging(LoggingConfig(level="CHATTY"), force=True)
    assert logging.getLogger().level == logging.WARNING


def test_file_handler_persists_records(tmp_path: Path) -> None:
    log_file = tmp_path / "logs" / "rdu.log"
    configure_logging(LoggingConfig(level="DEBUG", console=False, log_file=str(log_file)), force=True)

    logging.getLogger("rdu.test").warning("Failed to read /nope: denied")
    stop_logging()

    content = log_file.read_text(encoding="utf-8")
    assert "WARNING" in content
    assert "[MainThread]" in content
    assert "Failed to read /nope: denied" in content


def test_stop_logging_detaches_everything() -> None:
    configure_logging(LoggingConfig(level="INFO"))
    root = logging.getLogger()
    listener = getattr(root, _QUEUE_LISTENER_ATTR)
    assert isinstance(listener, QueueListener)

    stop_logging()

    assert _our_handlers() == []
    assert getattr(root, _QUEUE_LISTENER_ATTR) is None
    assert not hasattr(root, _CONFIGURED_FLAG_ATTR)
    stop_logging()


def test_console_diagnostics_reach_stderr(capfd: pytest.CaptureFixture) -> None:
    configure_logging(LoggingConfig(level="WARNING", console=True), force=True)
    logging.getLogger("rdu.test").warning("Failed to get metadata for x")
    stop_logging()

    err = capfd.readouterr().err
    assert "rdu: WARNING | Failed to get metadata for x" in err
