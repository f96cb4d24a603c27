"""Standardized response envelopes for MCP tool calls.

Every tool call ends in exactly one CallToolResult:
- success: one text block holding the JSON-encoded result
- failure: one text block holding {"error": <message>, "code": <int>},
  with isError set
"""

import dataclasses
import json
import logging
import math
from datetime import date, datetime
from enum import Enum
from typing import Any, Optional

from mcp.shared.exceptions import McpError
from mcp.types import INTERNAL_ERROR, CallToolResult, ErrorData, TextContent
from pydantic import BaseModel

logger = logging.getLogger(__name__)

# Largest integer a JSON consumer using IEEE-754 doubles holds exactly
MAX_SAFE_INTEGER = 2**53 - 1

INTERNAL_ERROR_MESSAGE = "Internal server error"
SERIALIZATION_ERROR_MESSAGE = "Failed to serialize result"


def _text_result(text: str, is_error: bool = False) -> CallToolResult:
    return CallToolResult(
        content=[TextContent(type="text", text=text)],
        isError=is_error,
    )


def to_json_value(value: Any, _active: Optional[set] = None) -> Any:
    """
    Convert a result into plain JSON values.

    Integers beyond MAX_SAFE_INTEGER become decimal strings so that clients
    decoding numbers as doubles do not silently lose digits. NaN and
    infinities become null. Pydantic models, dataclasses, enums and dates
    are converted to their JSON forms.

    Raises:
        ValueError: On circular references
        TypeError: On values with no JSON form
    """
    if _active is None:
        _active = set()

    if isinstance(value, bool) or value is None or isinstance(value, str):
        return value
    if isinstance(value, float):
        # JSON has no NaN or Infinity
        return value if math.isfinite(value) else None
    if isinstance(value, int):
        return str(value) if abs(value) > MAX_SAFE_INTEGER else value
    if isinstance(value, Enum):
        return to_json_value(value.value, _active)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, BaseModel):
        return to_json_value(value.model_dump(mode="python"), _active)
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return to_json_value(dataclasses.asdict(value), _active)

    if isinstance(value, (dict, list, tuple, set, frozenset)):
        marker = id(value)
        if marker in _active:
            raise ValueError("Circular reference detected")
        _active.add(marker)
        try:
            if isinstance(value, dict):
                return {str(k): to_json_value(v, _active) for k, v in value.items()}
            return [to_json_value(item, _active) for item in value]
        finally:
            _active.discard(marker)

    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def success_result(result: Any) -> CallToolResult:
    """Create a successful response envelope.

    Never raises: if the result cannot be encoded the internal-error
    envelope is returned instead.
    """
    try:
        text = json.dumps(to_json_value(result), allow_nan=False)
    except Exception as e:
        logger.error(f"Failed to serialize result: {e}")
        return error_result(
            McpError(ErrorData(code=INTERNAL_ERROR, message=SERIALIZATION_ERROR_MESSAGE))
        )
    return _text_result(text)


def error_result(failure: object) -> CallToolResult:
    """Create an error response envelope.

    McpError message and code pass through unchanged. Anything else is
    reported as a generic internal error; details go to the log only.
    """
    error = failure if isinstance(failure, BaseException) else Exception(str(failure))

    if isinstance(error, McpError):
        payload = {"error": error.error.message, "code": error.error.code}
    else:
        logger.error(
            f"Unhandled tool failure: {type(error).__name__}: {error}",
            exc_info=(type(error), error, error.__traceback__),
        )
        payload = {"error": INTERNAL_ERROR_MESSAGE, "code": INTERNAL_ERROR}

    return _text_result(json.dumps(payload), is_error=True)
