"""Session management tools: login, logout, dropSession."""

import logging
from typing import Dict, List

from mcp import Tool

from ..adt import AdtError
from .base import CapabilityProvider, Handler, tool_error

logger = logging.getLogger(__name__)

EMPTY_SCHEMA = {"type": "object", "properties": {}}


class AuthTools(CapabilityProvider):
    """Handles the lifecycle of the shared ADT session.

    These tools are dispatched without automatic reconnect: they are the
    session lifecycle, so retrying them on session expiry would be circular.
    """

    manages_session = True

    def get_tools(self) -> List[Tool]:
        """Return all session management tools."""
        return [
            Tool(
                name="login",
                description="Authenticate with the ABAP system and open a session",
                inputSchema=EMPTY_SCHEMA,
            ),
            Tool(
                name="logout",
                description="Log off from the ABAP system",
                inputSchema=EMPTY_SCHEMA,
            ),
            Tool(
                name="dropSession",
                description="End the current server session; the next call logs in again",
                inputSchema=EMPTY_SCHEMA,
            ),
        ]

    def _handlers(self) -> Dict[str, Handler]:
        return {
            "login": self._login,
            "logout": self._logout,
            "dropSession": self._drop_session,
        }

    async def _login(self, args: dict) -> dict:
        try:
            await self.client.login()
        except AdtError as e:
            raise tool_error("log in", e) from e
        return {"status": "success", "loggedIn": True, "sessionType": self.client.stateful.value}

    async def _logout(self, args: dict) -> dict:
        try:
            await self.client.logout()
        except AdtError as e:
            raise tool_error("log out", e) from e
        return {"status": "success", "loggedIn": False}

    async def _drop_session(self, args: dict) -> dict:
        try:
            await self.client.drop_session()
        except AdtError as e:
            raise tool_error("drop session", e) from e
        return {"status": "success", "loggedIn": False}
