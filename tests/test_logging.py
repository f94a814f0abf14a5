"""
Tests for the logging setup: level handling, quiet third-party loggers
and masking of credential values.
"""

import logging

import pytest

from wagerbridge.shared.logging import (
    QUIET_LOGGERS,
    RedactSecretsFilter,
    configure_logging,
    redact,
)


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


def _record(msg: str, *args) -> logging.LogRecord:
    return logging.LogRecord("wagerbridge", logging.WARNING, __file__, 1, msg, args, None)


class TestRedact:
    @pytest.mark.parametrize(
        "message, expected",
        [
            ("login failed password=hunter2", "login failed password=***"),
            ('{"password": "hunter2"}', '{"password": "***"}'),
            ("Authorization: Bearer abc.def", "Authorization: Bearer ***"),
            ("url?customerID=a1&token=xyz&x=1", "url?customerID=a1&token=***&x=1"),
            ("session_token=s3cret", "session_token=***"),
        ],
    )
    def test_masks_credentials(self, message: str, expected: str) -> None:
        assert redact(message) == expected

    def test_leaves_ordinary_messages_alone(self) -> None:
        message = "Session expired, logging in again as agent-7"
        assert redact(message) == message

    def test_filter_rewrites_formatted_message(self) -> None:
        record = _record("Fantasy402 login failed: %s", "password=hunter2")

        assert RedactSecretsFilter().filter(record) is True
        assert record.getMessage() == "Fantasy402 login failed: password=***"

    def test_filter_keeps_args_when_nothing_to_mask(self) -> None:
        record = _record("Bet %s placed", "bet-1")
        RedactSecretsFilter().filter(record)
        assert record.args == ("bet-1",)


class TestConfigureLogging:
    def test_level_and_quiet_loggers(self, restore_root_logger) -> None:
        configure_logging("debug")

        assert restore_root_logger.level == logging.DEBUG
        for name in QUIET_LOGGERS:
            assert logging.getLogger(name).level == logging.WARNING

    def test_unknown_level_falls_back_to_info(self, restore_root_logger) -> None:
        configure_logging("chatty")
        assert restore_root_logger.level == logging.INFO

    def test_root_handlers_mask_secrets(self, restore_root_logger) -> None:
        configure_logging()

        handler = restore_root_logger.handlers[0]
        assert any(isinstance(f, RedactSecretsFilter) for f in handler.filters)
