"""
Tests for structlog setup
"""

import logging

import structlog

from taskhub.core.logging import NOISY_LOGGERS, setup_logging


def test_setup_quiets_noisy_loggers():
    setup_logging()

    for name in NOISY_LOGGERS:
        assert logging.getLogger(name).getEffectiveLevel() >= logging.WARNING


def test_request_context_is_merged(caplog):
    setup_logging()
    caplog.set_level(logging.INFO)
    structlog.contextvars.bind_contextvars(request_id="req-123")
    try:
        structlog.get_logger("taskhub.test").warning("Something happened")
    finally:
        structlog.contextvars.clear_contextvars()

    assert "req-123" in caplog.text
