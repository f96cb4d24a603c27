"""Source code tools: getObjectSource, setObjectSource."""

import logging
from typing import Dict, List

from mcp import Tool

from ..adt import AdtError
from ..models.arguments import GetSourceArgs, SetSourceArgs
from .base import CapabilityProvider, Handler, parse_arguments, tool_error

logger = logging.getLogger(__name__)


class ObjectSourceTools(CapabilityProvider):
    """Reads and writes object source code."""

    def get_tools(self) -> List[Tool]:
        return [
            Tool(
                name="getObjectSource",
                description="Read the source code of an object",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "objectSourceUrl": {
                            "type": "string",
                            "description": "ADT source URL, e.g. .../source/main"
                        },
                        "version": {
                            "type": "string",
                            "enum": ["active", "inactive", "workingArea"],
                            "description": "Source version to read"
                        }
                    },
                    "required": ["objectSourceUrl"]
                }
            ),
            Tool(
                name="setObjectSource",
                description="Replace the source code of a locked object",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "objectSourceUrl": {
                            "type": "string",
                            "description": "ADT source URL"
                        },
                        "source": {
                            "type": "string",
                            "description": "Complete new source code"
                        },
                        "lockHandle": {
                            "type": "string",
                            "description": "Handle returned by lock"
                        },
                        "transport": {
                            "type": "string",
                            "description": "Optional transport request"
                        }
                    },
                    "required": ["objectSourceUrl", "source", "lockHandle"]
                }
            ),
        ]

    def _handlers(self) -> Dict[str, Handler]:
        return {
            "getObjectSource": self._get_source,
            "setObjectSource": self._set_source,
        }

    async def _get_source(self, args: dict) -> dict:
        params = parse_arguments(GetSourceArgs, args)
        try:
            source = await self.client.get_object_source(params.source_url, params.version)
        except AdtError as e:
            raise tool_error("read source", e) from e
        return {"status": "success", "source": source}

    async def _set_source(self, args: dict) -> dict:
        params = parse_arguments(SetSourceArgs, args)
        try:
            await self.client.set_object_source(
                params.source_url,
                params.source,
                params.lock_handle,
                params.transport,
            )
        except AdtError as e:
            raise tool_error("write source", e) from e
        logger.info(f"Source written: {params.source_url}")
        return {"status": "success", "updated": params.source_url}
