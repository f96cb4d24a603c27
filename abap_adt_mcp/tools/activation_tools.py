"""Activation tools: activateByName, inactiveObjects."""

import logging
from typing import Dict, List

from mcp import Tool

from ..adt import AdtError
from ..models.arguments import ActivateByNameArgs
from .base import CapabilityProvider, Handler, parse_arguments, tool_error

logger = logging.getLogger(__name__)


class ObjectManagementTools(CapabilityProvider):
    """Activates objects and lists what is still inactive."""

    def get_tools(self) -> List[Tool]:
        return [
            Tool(
                name="activateByName",
                description="Activate an object by name and URL",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "objectName": {
                            "type": "string",
                            "description": "Object name, e.g. ZCL_DEMO"
                        },
                        "objectUrl": {
                            "type": "string",
                            "description": "ADT URL of the object"
                        },
                        "mainInclude": {
                            "type": "string",
                            "description": "Optional main program context for includes"
                        }
                    },
                    "required": ["objectName", "objectUrl"]
                }
            ),
            Tool(
                name="inactiveObjects",
                description="List inactive objects of the current user",
                inputSchema={"type": "object", "properties": {}}
            ),
        ]

    def _handlers(self) -> Dict[str, Handler]:
        return {
            "activateByName": self._activate_by_name,
            "inactiveObjects": self._inactive_objects,
        }

    async def _activate_by_name(self, args: dict) -> dict:
        params = parse_arguments(ActivateByNameArgs, args)
        try:
            result = await self.client.activate(
                params.object_name, params.object_url, params.main_include
            )
        except AdtError as e:
            raise tool_error("activate object", e) from e
        if not result["success"]:
            logger.warning(f"Activation of {params.object_name} reported errors")
        return {"status": "success" if result["success"] else "error", **result}

    async def _inactive_objects(self, args: dict) -> dict:
        try:
            objects = await self.client.inactive_objects()
        except AdtError as e:
            raise tool_error("list inactive objects", e) from e
        return {"status": "success", "objects": objects, "count": len(objects)}
