"""Shared utility functions."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any


def safe_call(
    fn: Callable[[], None],
    call_logger: logging.Logger,
    message: str,
    *message_args: Any,
) -> None:
    """Invoke *fn*, logging exceptions as warnings instead of raising.

    Use this for audit sinks and other extension points where a failure
    must not interrupt secret resolution.

    Args:
        fn: Zero-argument callable to invoke.
        call_logger: Logger instance for warning output.
        message: Log message template (``%s``-style).
        *message_args: Arguments interpolated into *message*.
    """
    try:
        fn()
    except Exception:
        call_logger.warning(message, *message_args, exc_info=True)


def mask_secret(value: str | None) -> str:
    """Mask a secret for console display.

    Values of four characters or fewer are fully masked; longer values
    keep their first and last two characters.

    Example:
        >>> mask_secret("sk-1234567890")
        'sk*********90'
    """
    if not value or len(value) <= 4:
        return "****"
    return value[:2] + "*" * (len(value) - 4) + value[-2:]
