"""Main MCP server implementation for the ABAP Development Tools API."""

import asyncio
import contextlib
import logging
import os
import signal
import sys
from typing import Any, Dict, List, Optional, Sequence

from dotenv import load_dotenv
from mcp import Tool
from mcp.server import NotificationOptions, Server
from mcp.server.models import InitializationOptions
from mcp.types import CallToolResult

from . import __version__
from .adt import AdtClient, SessionType
from .config import AdtSettings, ConfigurationError, load_settings
from .core import SessionResilienceController
from .registry import ToolRegistry, unknown_tool_error
from .tools.activation_tools import ObjectManagementTools
from .tools.auth_tools import AuthTools
from .tools.base import CapabilityProvider
from .tools.lock_tools import ObjectLockTools
from .tools.object_tools import ObjectTools
from .tools.source_tools import ObjectSourceTools
from .utils.response import error_result, success_result

logger = logging.getLogger(__name__)

SERVER_NAME = "mcp-abap-adt-api"


def build_default_providers(client: AdtClient) -> List[CapabilityProvider]:
    """All capability providers, in tool listing order."""
    return [
        AuthTools(client),
        ObjectTools(client),
        ObjectLockTools(client),
        ObjectSourceTools(client),
        ObjectManagementTools(client),
    ]


class AbapAdtMCPServer:
    """MCP Server routing tool calls to the ABAP system."""

    def __init__(
        self,
        settings: AdtSettings,
        client: Optional[AdtClient] = None,
        providers: Optional[Sequence[CapabilityProvider]] = None,
    ):
        """Wire client, providers, registry and session supervision.

        Args:
            settings: Connection settings
            client: Session client (default: built from settings)
            providers: Capability providers (default: build_default_providers)
        """
        self.settings = settings
        self.client = client if client is not None else AdtClient.from_settings(settings)
        self.client.stateful = SessionType.STATEFUL

        if providers is None:
            providers = build_default_providers(self.client)
        self.registry = ToolRegistry(providers)
        self.resilience = SessionResilienceController(
            self.client,
            self.registry.dispatch,
            single_flight=settings.single_flight_reconnect,
        )

        # Create MCP server instance
        self.server = Server(SERVER_NAME, version=__version__)

        # Register handlers
        self._register_handlers()

    def _register_handlers(self):
        """Register all MCP handlers."""

        @self.server.list_tools()
        async def handle_list_tools() -> list[Tool]:
            """List all available tools."""
            return self.registry.list_tools()

        # argument validation belongs to the providers
        @self.server.call_tool(validate_input=False)
        async def handle_call_tool(name: str, arguments: dict) -> CallToolResult:
            """Route tool calls to appropriate handlers."""
            return await self.call_tool(name, arguments)

    async def call_tool(self, name: str, arguments: Optional[Dict[str, Any]]) -> CallToolResult:
        """
        Execute one tool call and wrap the outcome in an envelope.

        Unknown names fail before any session handling. Session-management
        tools are dispatched directly; everything else goes through the
        reconnect-and-retry controller. Never raises.
        """
        arguments = arguments or {}
        try:
            if not self.registry.exists(name):
                raise unknown_tool_error(name)
            if self.registry.is_session_tool(name):
                result = await self.registry.dispatch(name, arguments)
            else:
                result = await self.resilience.execute(name, arguments)
        except Exception as e:
            logger.info(f"Tool {name} failed: {e}")
            return error_result(e)
        return success_result(result)

    async def run(self):
        """Run the MCP server on stdio."""
        from mcp.server.stdio import stdio_server

        async with stdio_server() as (read_stream, write_stream):
            logger.info("MCP ABAP ADT API server running on stdio")
            await self.server.run(
                read_stream,
                write_stream,
                InitializationOptions(
                    server_name=SERVER_NAME,
                    server_version=__version__,
                    capabilities=self.server.get_capabilities(
                        notification_options=NotificationOptions(),
                        experimental_capabilities={}
                    )
                ),
                raise_exceptions=False,
            )

    async def serve(self):
        """Run until the stream closes or SIGINT/SIGTERM arrives, then close the session client."""
        loop = asyncio.get_running_loop()
        task = asyncio.current_task()
        for signum in (signal.SIGINT, signal.SIGTERM):
            # add_signal_handler is unavailable on Windows event loops
            with contextlib.suppress(NotImplementedError):
                loop.add_signal_handler(signum, task.cancel)
        try:
            await self.run()
        except asyncio.CancelledError:
            logger.info("Shutdown signal received, closing connection")
        finally:
            await self.client.aclose()


def configure_logging():
    """Log to stderr; stdout carries the MCP stream."""
    logging.basicConfig(
        level=os.getenv("ADT_MCP_LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )


def main():
    """Main entry point for the MCP server."""
    load_dotenv()
    configure_logging()

    try:
        settings = load_settings()
    except ConfigurationError as e:
        logger.error(f"Failed to start MCP server: {e}")
        sys.exit(1)

    server = AbapAdtMCPServer(settings)
    try:
        asyncio.run(server.serve())
    except KeyboardInterrupt:
        pass
    except Exception:
        logger.exception("MCP server stopped with an error")
        sys.exit(1)
    sys.exit(0)


if __name__ == "__main__":
    main()
