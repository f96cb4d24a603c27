"""Startup configuration for the ADT MCP server."""

from .settings import (
    REQUIRED_ENV_VARS,
    AdtSettings,
    ConfigurationError,
    load_settings,
)

__all__ = [
    'REQUIRED_ENV_VARS',
    'AdtSettings',
    'ConfigurationError',
    'load_settings',
]
