"""
Tests for logging setup.
"""

import json
import logging

import structlog

from stepup_core.logging_config import setup_logging


def test_setup_logging_json(capsys):
    """Should emit JSON events carrying the service name."""
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    try:
        setup_logging("idp-stepup", level="debug")

        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1

        structlog.get_logger("stepup_core.test").info("Message sent successfully", message_id="abc")

        lines = [line for line in capsys.readouterr().out.splitlines() if line.strip()]
        event = json.loads(lines[-1])
        assert event["event"] == "Message sent successfully"
        assert event["message_id"] == "abc"
        assert event["service"] == "idp-stepup"
        assert event["level"] == "info"
    finally:
        structlog.contextvars.clear_contextvars()
        structlog.reset_defaults()
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)
