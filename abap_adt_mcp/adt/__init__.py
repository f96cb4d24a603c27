"""
ADT REST client.

Provides the session-holding AdtClient and the errors it raises.
"""

from .client import AdtClient, SessionType
from .errors import (
    AdtCsrfError,
    AdtError,
    error_from_response,
    is_csrf_error,
)

__all__ = [
    'AdtClient',
    'SessionType',
    # Exceptions
    'AdtError',
    'AdtCsrfError',
    'error_from_response',
    'is_csrf_error',
]
