"""
Sanitize tool errors for safe user-facing responses.

Never echo tokens or Docker config JSON back to callers.
Log full details server-side; return generic messages only.
"""

from __future__ import annotations

import logging
from typing import Any

from docr_tools.exceptions import APIError

logger = logging.getLogger(__name__)


def sanitize_error(
    exc: BaseException,
    generic_message: str,
    *,
    log_level: str = "warning",
) -> str:
    """
    Log exception with exc_info and return a safe message.
    """
    log = getattr(logger, log_level, logger.warning)
    log("Tool error: %s", generic_message, exc_info=True)
    return generic_message


def error_response(
    exc: BaseException,
    generic_message: str,
    *,
    log_level: str = "warning",
) -> dict[str, Any]:
    """
    Log exception with full context and return {"error": generic_message}.

    API errors keep their status code and request id, which are safe to show.
    """
    msg = sanitize_error(exc, generic_message, log_level=log_level)
    payload: dict[str, Any] = {"error": msg}
    if isinstance(exc, APIError):
        payload["status_code"] = exc.status_code
        payload["details"] = exc.message
        if exc.request_id:
            payload["request_id"] = exc.request_id
    return payload
