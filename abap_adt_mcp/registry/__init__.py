"""
Tool Registry for the ADT MCP server.

Provides the name-keyed catalog of tools and dispatch to their providers.
"""

from .tool_registry import (
    HEALTHCHECK_TOOL,
    HealthcheckTools,
    ToolRegistry,
    unknown_tool_error,
    # Exceptions
    DuplicateToolError,
    ToolRegistryError,
)

__all__ = [
    'HEALTHCHECK_TOOL',
    'HealthcheckTools',
    'ToolRegistry',
    'unknown_tool_error',
    # Exceptions
    'DuplicateToolError',
    'ToolRegistryError',
]
