"""Exceptions raised by the ADT client."""

import logging
from typing import Optional

import httpx

from .parsing import parse_exception

logger = logging.getLogger(__name__)


class AdtError(Exception):
    """A request to the ABAP system failed."""

    def __init__(
        self,
        message: str,
        status: Optional[int] = None,
        error_type: Optional[str] = None,
    ):
        self.status = status
        self.error_type = error_type
        super().__init__(message)


class AdtCsrfError(AdtError):
    """
    The server rejected the session.

    Raised both for CSRF-token validation failures (HTTP 403 with
    ``x-csrf-token: Required``) and for "Session timed out" responses: in
    either case the session has to be re-established before retrying.
    """


def is_csrf_error(error: object) -> bool:
    """True if ``error`` or any exception it was raised from is an AdtCsrfError."""
    seen = set()
    current = error
    while isinstance(current, BaseException) and id(current) not in seen:
        if isinstance(current, AdtCsrfError):
            return True
        seen.add(id(current))
        current = current.__cause__
    return False


def error_from_response(response: httpx.Response) -> AdtError:
    """Map a failed HTTP response to the matching AdtError."""
    status = response.status_code
    token_header = response.headers.get("x-csrf-token", "")
    if status == 403 and token_header.lower() == "required":
        return AdtCsrfError("CSRF token validation failed", status=status)

    body = response.text
    parsed = parse_exception(body)
    if parsed is not None:
        error_type, message = parsed
    else:
        error_type, message = None, body.strip()
    if not message:
        message = f"HTTP {status} {response.reason_phrase}"

    if status == 400 and "session timed out" in message.lower():
        return AdtCsrfError(message, status=status, error_type=error_type)

    return AdtError(message, status=status, error_type=error_type)
