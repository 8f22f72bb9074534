"""Tests for core.utils."""

from __future__ import annotations

import logging
from unittest.mock import MagicMock

import pytest

from secrets_bootstrap.core.utils import mask_secret, safe_call


class TestSafeCall:
    """Tests for safe_call."""

    def test_calls_function(self) -> None:
        fn = MagicMock()
        safe_call(fn, logging.getLogger("test"), "msg")
        fn.assert_called_once()

    def test_swallows_exception(self) -> None:
        fn = MagicMock(side_effect=RuntimeError("boom"))
        safe_call(fn, logging.getLogger("test"), "msg")

    def test_logs_warning_on_exception(self) -> None:
        mock_logger = MagicMock()
        fn = MagicMock(side_effect=ValueError("oops"))

        safe_call(fn, mock_logger, "Audit sink %s failed", "FileAuditSink")

        mock_logger.warning.assert_called_once_with(
            "Audit sink %s failed",
            "FileAuditSink",
            exc_info=True,
        )

    def test_does_not_log_on_success(self) -> None:
        mock_logger = MagicMock()
        safe_call(lambda: None, mock_logger, "should not appear")
        mock_logger.warning.assert_not_called()


class TestMaskSecret:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (None, "****"),
            ("", "****"),
            ("abcd", "****"),
            ("abcde", "ab*de"),
            ("sk-1234567890", "sk*********90"),
        ],
    )
    def test_mask(self, value: str | None, expected: str) -> None:
        assert mask_secret(value) == expected
