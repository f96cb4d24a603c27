"""
Core dispatch supervision for the ADT MCP server.

Usage:
    from abap_adt_mcp.core import SessionResilienceController, is_session_expired

    controller = SessionResilienceController(client, registry.dispatch)
    result = await controller.execute("lock", {"objectUrl": url})
"""

from .session_resilience import (
    MAX_ATTEMPTS,
    SESSION_EXPIRY_MARKERS,
    SessionResilienceController,
    is_session_expired,
)

__all__ = [
    'MAX_ATTEMPTS',
    'SESSION_EXPIRY_MARKERS',
    'SessionResilienceController',
    'is_session_expired',
]
