"""
Tool Registry - flat, name-keyed catalog of every tool the server exposes.

Built once at startup from an ordered list of capability providers, plus the
synthetic ``healthcheck`` tool. After construction both the tool list and the
name -> provider table are read-only.

Provides:
- Tool listing in fixed provider order (healthcheck last)
- Uniqueness check of tool names at assembly time
- Keyed dispatch of a tool call to its owning provider
"""

import logging
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Sequence

from mcp import Tool
from mcp.shared.exceptions import McpError
from mcp.types import METHOD_NOT_FOUND, ErrorData

from ..tools.base import CapabilityProvider, Handler

logger = logging.getLogger(__name__)

HEALTHCHECK_TOOL = "healthcheck"


# ============================================================================
# Exceptions
# ============================================================================

class ToolRegistryError(Exception):
    """Base exception for registry errors."""
    pass


class DuplicateToolError(ToolRegistryError):
    """Two providers publish a tool with the same name."""
    pass


def unknown_tool_error(name: str) -> McpError:
    """Routing failure for a name no provider owns; never retried."""
    return McpError(ErrorData(code=METHOD_NOT_FOUND, message=f"Unknown tool: {name}"))


# ============================================================================
# Healthcheck
# ============================================================================

class HealthcheckTools(CapabilityProvider):
    """Always-available liveness probe; never touches the ADT session."""

    def get_tools(self) -> List[Tool]:
        return [
            Tool(
                name=HEALTHCHECK_TOOL,
                description="Check server health and connectivity",
                inputSchema={"type": "object", "properties": {}},
            )
        ]

    def _handlers(self) -> Dict[str, Handler]:
        return {HEALTHCHECK_TOOL: self._healthcheck}

    async def _healthcheck(self, args: dict) -> dict:
        return {
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }


# ============================================================================
# Tool Registry
# ============================================================================

class ToolRegistry:
    """
    Central registry of tools and their owning providers.

    Args:
        providers: Providers in listing order; the healthcheck provider is
            appended automatically

    Raises:
        DuplicateToolError: If a tool name is published twice
    """

    def __init__(self, providers: Sequence[CapabilityProvider]):
        self._providers = tuple(providers) + (HealthcheckTools(),)

        tools: List[Tool] = []
        owners: Dict[str, CapabilityProvider] = {}
        for provider in self._providers:
            for tool in provider.get_tools():
                if tool.name in owners:
                    raise DuplicateToolError(
                        f"Tool '{tool.name}' is published by both "
                        f"{type(owners[tool.name]).__name__} and {type(provider).__name__}"
                    )
                owners[tool.name] = provider
                tools.append(tool)

        self._tools = tuple(tools)
        self._owners: Mapping[str, CapabilityProvider] = MappingProxyType(owners)

        logger.info(
            f"ToolRegistry initialized: {len(self._tools)} tools "
            f"from {len(self._providers)} providers"
        )

    # ========================================================================
    # Retrieval
    # ========================================================================

    def list_tools(self) -> List[Tool]:
        """All tools in provider order, healthcheck last."""
        return list(self._tools)

    def exists(self, name: str) -> bool:
        """Check if a tool exists."""
        return name in self._owners

    def is_session_tool(self, name: str) -> bool:
        """True for tools owned by the session-managing provider."""
        provider = self._owners.get(name)
        return provider is not None and provider.manages_session

    # ========================================================================
    # Dispatch
    # ========================================================================

    async def dispatch(self, name: str, arguments: Optional[dict]) -> Any:
        """
        Execute a tool on its owning provider.

        No retry happens here; provider results and failures pass through
        unchanged.

        Raises:
            McpError: METHOD_NOT_FOUND if no provider owns ``name``
        """
        provider = self._owners.get(name)
        if provider is None:
            raise unknown_tool_error(name)
        return await provider.handle_tool(name, arguments or {})
