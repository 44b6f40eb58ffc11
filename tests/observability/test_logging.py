"""Tests for structured logging configuration."""

import json
import logging
from unittest.mock import patch

import pytest
import structlog

from hb2b_rest.observability.logging import configure_logging, get_logger, log_context


def _json_records(output: str) -> list[dict]:
    return [json.loads(line) for line in output.splitlines() if line.startswith("{")]


class TestConfigureLogging:
    """Tests for configure_logging function."""

    def test_configure_logging_respects_log_level(self) -> None:
        configure_logging(log_format="console", log_level="WARNING", force=True)

        assert logging.getLogger().level == logging.WARNING

    def test_configure_logging_with_json_format(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Test that JSON output carries the event name and its fields."""
        configure_logging(log_format="json", log_level="INFO", force=True)

        logging.getLogger("hb2b.test").info("plain stdlib record")
        get_logger("hb2b.test.json").info("hb2b.delivery.succeeded", status_code=202)

        records = _json_records(capsys.readouterr().out)
        assert records[0]["event"] == "plain stdlib record"
        assert records[-1]["event"] == "hb2b.delivery.succeeded"
        assert records[-1]["status_code"] == 202
        assert records[-1]["level"] == "info"

    def test_configure_logging_does_not_reconfigure_by_default(self) -> None:
        configure_logging(log_format="console", log_level="DEBUG", force=True)

        configure_logging(log_format="json", log_level="ERROR")

        assert logging.getLogger().level == logging.DEBUG

    def test_configure_logging_from_environment_variables(self) -> None:
        with patch.dict(
            "os.environ",
            {
                "HB2B_LOG_FORMAT": "json",
                "HB2B_LOG_LEVEL": "ERROR",
                "HB2B_SERVICE_NAME": "env-service",
            },
        ):
            configure_logging(force=True)

            assert logging.getLogger().level == logging.ERROR
            assert structlog.contextvars.get_contextvars()["service"] == "env-service"
        configure_logging(force=True)

    def test_single_handler_after_reconfiguration(self) -> None:
        configure_logging(force=True)
        configure_logging(force=True)

        assert len(logging.getLogger().handlers) == 1


class TestLogContext:
    """Tests for log_context."""

    def test_fields_are_added_inside_block(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging(log_format="json", log_level="INFO", force=True)
        logger = get_logger("hb2b.test.context")

        with log_context(message_id="msg-1", message_unit="Receipt"):
            logger.info("hb2b.delivery.sending")
        logger.info("hb2b.delivery.idle")

        inside, outside = _json_records(capsys.readouterr().out)[-2:]
        assert inside["message_id"] == "msg-1"
        assert inside["message_unit"] == "Receipt"
        assert "message_id" not in outside

    def test_outer_fields_are_restored(self) -> None:
        configure_logging(force=True)

        with log_context(message_id="outer"):
            with log_context(message_id="inner"):
                assert structlog.contextvars.get_contextvars()["message_id"] == "inner"
            assert structlog.contextvars.get_contextvars()["message_id"] == "outer"

        assert "message_id" not in structlog.contextvars.get_contextvars()

    def test_fields_are_removed_on_error(self) -> None:
        configure_logging(force=True)

        with pytest.raises(RuntimeError):
            with log_context(message_id="msg-1"):
                raise RuntimeError("boom")

        assert "message_id" not in structlog.contextvars.get_contextvars()
