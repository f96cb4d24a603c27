"""Object lock tools: lock, unLock."""

import logging
from typing import Dict, List

from mcp import Tool

from ..adt import AdtError
from ..models.arguments import LockArgs, UnlockArgs
from .base import CapabilityProvider, Handler, parse_arguments, tool_error

logger = logging.getLogger(__name__)


class ObjectLockTools(CapabilityProvider):
    """Acquires and releases edit locks.

    Locks belong to the server-side session, so they only survive between
    calls while the session is stateful.
    """

    def get_tools(self) -> List[Tool]:
        return [
            Tool(
                name="lock",
                description="Lock an object for editing and return its lock handle",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "objectUrl": {
                            "type": "string",
                            "description": "ADT URL of the object to lock"
                        },
                        "accessMode": {
                            "type": "string",
                            "description": "Access mode",
                            "default": "MODIFY"
                        }
                    },
                    "required": ["objectUrl"]
                }
            ),
            Tool(
                name="unLock",
                description="Release a lock obtained with lock",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "objectUrl": {
                            "type": "string",
                            "description": "ADT URL of the locked object"
                        },
                        "lockHandle": {
                            "type": "string",
                            "description": "Handle returned by lock"
                        }
                    },
                    "required": ["objectUrl", "lockHandle"]
                }
            ),
        ]

    def _handlers(self) -> Dict[str, Handler]:
        return {
            "lock": self._lock,
            "unLock": self._unlock,
        }

    async def _lock(self, args: dict) -> dict:
        params = parse_arguments(LockArgs, args)
        try:
            lock = await self.client.lock(params.object_url, params.access_mode)
        except AdtError as e:
            raise tool_error("lock object", e) from e
        return {
            "status": "success",
            "lockHandle": lock.get("LOCK_HANDLE"),
            "transport": lock.get("CORRNR") or None,
            "details": lock,
        }

    async def _unlock(self, args: dict) -> dict:
        params = parse_arguments(UnlockArgs, args)
        try:
            await self.client.unlock(params.object_url, params.lock_handle)
        except AdtError as e:
            raise tool_error("unlock object", e) from e
        return {"status": "success", "unlocked": params.object_url}
