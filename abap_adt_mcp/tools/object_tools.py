"""Repository lookup tools: searchObject, findObjectPath."""

import logging
from typing import Dict, List

from mcp import Tool

from ..adt import AdtError
from ..models.arguments import ObjectUrlArgs, SearchObjectArgs
from .base import CapabilityProvider, Handler, parse_arguments, tool_error

logger = logging.getLogger(__name__)


class ObjectTools(CapabilityProvider):
    """Finds repository objects and their place in the package tree."""

    def get_tools(self) -> List[Tool]:
        return [
            Tool(
                name="searchObject",
                description="Quick search for repository objects by name pattern",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "query": {
                            "type": "string",
                            "description": "Name pattern, e.g. ZCL_DEMO*"
                        },
                        "objType": {
                            "type": "string",
                            "description": "Optional ADT object type filter, e.g. CLAS/OC"
                        },
                        "max": {
                            "type": "number",
                            "description": "Maximum number of results",
                            "default": 100
                        }
                    },
                    "required": ["query"]
                }
            ),
            Tool(
                name="findObjectPath",
                description="Find the package tree path of a repository object",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "objectUrl": {
                            "type": "string",
                            "description": "ADT URL of the object"
                        }
                    },
                    "required": ["objectUrl"]
                }
            ),
        ]

    def _handlers(self) -> Dict[str, Handler]:
        return {
            "searchObject": self._search_object,
            "findObjectPath": self._find_object_path,
        }

    async def _search_object(self, args: dict) -> dict:
        params = parse_arguments(SearchObjectArgs, args)
        try:
            results = await self.client.search_object(
                params.query, params.object_type, params.max_results
            )
        except AdtError as e:
            raise tool_error("search objects", e) from e
        return {"status": "success", "results": results, "count": len(results)}

    async def _find_object_path(self, args: dict) -> dict:
        params = parse_arguments(ObjectUrlArgs, args)
        try:
            path = await self.client.find_object_path(params.object_url)
        except AdtError as e:
            raise tool_error("find object path", e) from e
        return {"status": "success", "path": path}
