"""Base class for capability providers (groups of related ADT tools)."""

import logging
from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, Dict, List, Type, TypeVar

from mcp import Tool
from mcp.shared.exceptions import McpError
from mcp.types import INTERNAL_ERROR, INVALID_PARAMS, METHOD_NOT_FOUND, ErrorData
from pydantic import ValidationError

from ..models.arguments import ToolArgs

logger = logging.getLogger(__name__)

ArgsT = TypeVar("ArgsT", bound=ToolArgs)
Handler = Callable[[dict], Awaitable[Any]]


class CapabilityProvider(ABC):
    """
    A set of tools executed against the shared ADT session.

    Subclasses publish their tools through get_tools() and map each tool name
    to a coroutine in _handlers(). Providers hold no per-call state; all
    session state lives in the client.

    Handlers must let session-expiry failures surface (wrapping them with
    ``raise ... from`` is fine) so the caller can reconnect and retry.
    """

    #: True for the provider whose tools manage the session itself
    manages_session: bool = False

    def __init__(self, client=None):
        self.client = client

    @abstractmethod
    def get_tools(self) -> List[Tool]:
        """Return the tools this provider owns."""

    @abstractmethod
    def _handlers(self) -> Dict[str, Handler]:
        """Map tool name to handler coroutine."""

    async def handle_tool(self, name: str, arguments: dict) -> Any:
        """Route tool call to the matching handler.

        Raises:
            McpError: METHOD_NOT_FOUND if this provider does not own ``name``
        """
        handler = self._handlers().get(name)
        if not handler:
            raise McpError(ErrorData(code=METHOD_NOT_FOUND, message=f"Unknown tool: {name}"))
        return await handler(arguments or {})


def parse_arguments(model: Type[ArgsT], arguments: dict) -> ArgsT:
    """Validate raw tool arguments, raising INVALID_PARAMS on failure."""
    try:
        return model.model_validate(arguments or {})
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in error['loc']) or 'arguments'}: {error['msg']}"
            for error in e.errors()
        )
        raise McpError(ErrorData(code=INVALID_PARAMS, message=f"Invalid arguments: {problems}")) from e


def tool_error(action: str, error: Exception) -> McpError:
    """Wrap a backend failure for the caller; raise it ``from`` the original."""
    logger.error(f"Failed to {action}: {error}")
    return McpError(ErrorData(code=INTERNAL_ERROR, message=f"Failed to {action}: {error}"))
