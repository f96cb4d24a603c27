"""Tests for capability providers - argument validation and error wrapping."""

from unittest.mock import AsyncMock

import pytest
from mcp.shared.exceptions import McpError
from mcp.types import INTERNAL_ERROR, INVALID_PARAMS, METHOD_NOT_FOUND

from abap_adt_mcp.adt import AdtCsrfError, AdtError, SessionType
from abap_adt_mcp.core import is_session_expired
from abap_adt_mcp.tools.activation_tools import ObjectManagementTools
from abap_adt_mcp.tools.auth_tools import AuthTools
from abap_adt_mcp.tools.lock_tools import ObjectLockTools
from abap_adt_mcp.tools.object_tools import ObjectTools
from abap_adt_mcp.tools.source_tools import ObjectSourceTools
from tests.fixtures.fake_adt import FakeAdtClient


@pytest.fixture
def client():
    client = FakeAdtClient()
    client.search_object = AsyncMock(return_value=[{"name": "ZDEMO", "type": "PROG/P"}])
    client.find_object_path = AsyncMock(return_value=[{"name": "$TMP"}, {"name": "ZDEMO"}])
    client.get_object_source = AsyncMock(return_value="REPORT zdemo.")
    client.set_object_source = AsyncMock(return_value=None)
    client.activate = AsyncMock(return_value={"success": True, "messages": [], "inactive": []})
    client.inactive_objects = AsyncMock(return_value=[])
    return client


ALL_PROVIDERS = [AuthTools, ObjectTools, ObjectLockTools, ObjectSourceTools, ObjectManagementTools]


@pytest.mark.parametrize("provider_class", ALL_PROVIDERS)
def test_every_tool_has_a_handler(provider_class, client):
    provider = provider_class(client)

    tool_names = {tool.name for tool in provider.get_tools()}

    assert tool_names == set(provider._handlers())
    for tool in provider.get_tools():
        assert tool.inputSchema["type"] == "object"
        assert tool.description


def test_only_auth_tools_manage_session(client):
    assert [cls.manages_session for cls in ALL_PROVIDERS] == [True, False, False, False, False]


@pytest.mark.asyncio
async def test_unknown_tool_on_provider(client):
    with pytest.raises(McpError) as exc_info:
        await ObjectLockTools(client).handle_tool("getObjectSource", {})

    assert exc_info.value.error.code == METHOD_NOT_FOUND


class TestAuthTools:

    @pytest.mark.asyncio
    async def test_login(self, client):
        client.stateful = SessionType.STATEFUL

        result = await AuthTools(client).handle_tool("login", {})

        assert result == {"status": "success", "loggedIn": True, "sessionType": "stateful"}
        client.login.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_logout_failure_is_wrapped(self, client):
        client.logout.side_effect = AdtError("HTTP 500 Internal Server Error", status=500)

        with pytest.raises(McpError) as exc_info:
            await AuthTools(client).handle_tool("logout", {})

        assert exc_info.value.error.code == INTERNAL_ERROR
        assert exc_info.value.error.message == "Failed to log out: HTTP 500 Internal Server Error"


class TestObjectLockTools:

    @pytest.mark.asyncio
    async def test_lock_returns_handle(self, client):
        client.lock.return_value = {"LOCK_HANDLE": "AB12", "CORRNR": "DEVK900001", "IS_LOCAL": ""}

        result = await ObjectLockTools(client).handle_tool("lock", {"objectUrl": "/x", "accessMode": "MODIFY"})

        assert result["lockHandle"] == "AB12"
        assert result["transport"] == "DEVK900001"
        assert result["details"]["IS_LOCAL"] == ""

    @pytest.mark.asyncio
    async def test_missing_object_url(self, client):
        with pytest.raises(McpError) as exc_info:
            await ObjectLockTools(client).handle_tool("lock", {})

        assert exc_info.value.error.code == INVALID_PARAMS
        assert "objectUrl" in exc_info.value.error.message
        client.lock.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_session_expiry_stays_observable(self, client):
        """Wrapped errors keep the expiry classification visible."""
        client.lock.side_effect = AdtCsrfError("CSRF token validation failed", status=403)

        with pytest.raises(McpError) as exc_info:
            await ObjectLockTools(client).handle_tool("lock", {"objectUrl": "/x"})

        assert isinstance(exc_info.value.__cause__, AdtCsrfError)
        assert is_session_expired(exc_info.value)

    @pytest.mark.asyncio
    async def test_unlock(self, client):
        result = await ObjectLockTools(client).handle_tool("unLock", {"objectUrl": "/x", "lockHandle": "AB12"})

        assert result == {"status": "success", "unlocked": "/x"}
        client.unlock.assert_awaited_once_with("/x", "AB12")


class TestObjectTools:

    @pytest.mark.asyncio
    async def test_search_object(self, client):
        result = await ObjectTools(client).handle_tool("searchObject", {"query": "ZDEMO*", "objType": "PROG/P", "max": 5})

        assert result["count"] == 1
        client.search_object.assert_awaited_once_with("ZDEMO*", "PROG/P", 5)

    @pytest.mark.asyncio
    async def test_search_object_defaults(self, client):
        await ObjectTools(client).handle_tool("searchObject", {"query": "Z*"})

        client.search_object.assert_awaited_once_with("Z*", None, 100)

    @pytest.mark.asyncio
    async def test_find_object_path(self, client):
        result = await ObjectTools(client).handle_tool("findObjectPath", {"objectUrl": "/x"})

        assert [node["name"] for node in result["path"]] == ["$TMP", "ZDEMO"]


class TestObjectSourceTools:

    @pytest.mark.asyncio
    async def test_get_source(self, client):
        result = await ObjectSourceTools(client).handle_tool(
            "getObjectSource", {"objectSourceUrl": "/x/source/main", "version": "active"}
        )

        assert result == {"status": "success", "source": "REPORT zdemo."}
        client.get_object_source.assert_awaited_once_with("/x/source/main", "active")

    @pytest.mark.asyncio
    async def test_set_source(self, client):
        args = {
            "objectSourceUrl": "/x/source/main",
            "source": "REPORT zdemo.",
            "lockHandle": "AB12",
            "transport": "DEVK900001",
        }

        result = await ObjectSourceTools(client).handle_tool("setObjectSource", args)

        assert result["updated"] == "/x/source/main"
        client.set_object_source.assert_awaited_once_with("/x/source/main", "REPORT zdemo.", "AB12", "DEVK900001")

    @pytest.mark.asyncio
    async def test_set_source_requires_lock_handle(self, client):
        with pytest.raises(McpError) as exc_info:
            await ObjectSourceTools(client).handle_tool(
                "setObjectSource", {"objectSourceUrl": "/x", "source": "REPORT z."}
            )

        assert exc_info.value.error.code == INVALID_PARAMS
        client.set_object_source.assert_not_awaited()


class TestObjectManagementTools:

    @pytest.mark.asyncio
    async def test_activate_success(self, client):
        result = await ObjectManagementTools(client).handle_tool(
            "activateByName", {"objectName": "ZDEMO", "objectUrl": "/x"}
        )

        assert result["status"] == "success"
        client.activate.assert_awaited_once_with("ZDEMO", "/x", None)

    @pytest.mark.asyncio
    async def test_activate_with_errors(self, client):
        client.activate.return_value = {
            "success": False,
            "messages": [{"type": "E", "shortText": "Syntax error"}],
            "inactive": [],
        }

        result = await ObjectManagementTools(client).handle_tool(
            "activateByName", {"objectName": "ZDEMO", "objectUrl": "/x"}
        )

        assert result["status"] == "error"
        assert result["messages"][0]["shortText"] == "Syntax error"

    @pytest.mark.asyncio
    async def test_inactive_objects(self, client):
        client.inactive_objects.return_value = [{"name": "ZDEMO"}]

        result = await ObjectManagementTools(client).handle_tool("inactiveObjects", {})

        assert result == {"status": "success", "objects": [{"name": "ZDEMO"}], "count": 1}
