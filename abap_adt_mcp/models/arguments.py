"""Pydantic validation schemas for tool arguments.

Tool input schemas are published in camelCase (the names MCP clients see);
the models accept those names through aliases and expose snake_case fields
to the providers.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ToolArgs(BaseModel):
    """Base for argument models: camelCase aliases, unknown keys ignored."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class SearchObjectArgs(ToolArgs):
    query: str = Field(..., min_length=1, description="Search pattern, wildcards allowed")
    object_type: Optional[str] = Field(None, alias="objType", description="ADT object type, e.g. PROG/P")
    max_results: int = Field(100, alias="max", ge=1, le=5000)


class ObjectUrlArgs(ToolArgs):
    object_url: str = Field(..., alias="objectUrl", min_length=1)


class LockArgs(ObjectUrlArgs):
    access_mode: str = Field("MODIFY", alias="accessMode")


class UnlockArgs(ObjectUrlArgs):
    lock_handle: str = Field(..., alias="lockHandle", min_length=1)


class GetSourceArgs(ToolArgs):
    source_url: str = Field(..., alias="objectSourceUrl", min_length=1)
    version: Optional[str] = Field(None, description="active, inactive or workingArea")


class SetSourceArgs(ToolArgs):
    source_url: str = Field(..., alias="objectSourceUrl", min_length=1)
    source: str = Field(..., description="Complete new source code")
    lock_handle: str = Field(..., alias="lockHandle", min_length=1)
    transport: Optional[str] = Field(None, description="Transport request number")


class ActivateByNameArgs(ToolArgs):
    object_name: str = Field(..., alias="objectName", min_length=1)
    object_url: str = Field(..., alias="objectUrl", min_length=1)
    main_include: Optional[str] = Field(None, alias="mainInclude")
