"""
Async client for the ADT REST API.

One AdtClient instance is the server's session with the ABAP system: it
holds the credentials, the CSRF token, the session cookies and the
stateful/stateless mode. It is created once at startup and mutated only by
login(), logout() and drop_session().

Usage:
    from abap_adt_mcp.adt import AdtClient, SessionType

    client = AdtClient.from_settings(settings)
    client.stateful = SessionType.STATEFUL
    lock = await client.lock("/sap/bc/adt/programs/programs/zdemo")
"""

import asyncio
import logging
from enum import Enum
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx

from .errors import AdtError, error_from_response
from .parsing import (
    build_object_references,
    parse_activation_result,
    parse_inactive_objects,
    parse_lock_result,
    parse_node_path,
    parse_object_references,
)

logger = logging.getLogger(__name__)

LOGIN_PATH = "/sap/bc/adt/compatibility/graph"
LOGOFF_PATH = "/sap/public/bc/icf/logoff"
SESSION_TYPE_HEADER = "X-sap-adt-sessiontype"
CSRF_HEADER = "x-csrf-token"

LOCK_ACCEPT = (
    "application/*,application/vnd.sap.as+xml;charset=UTF-8;"
    "dataname=com.sap.adt.lock.result"
)


class SessionType(str, Enum):
    """Value sent in the X-sap-adt-sessiontype header."""
    STATEFUL = "stateful"
    STATELESS = "stateless"
    KEEP = ""


class AdtClient:
    """Session-holding HTTP client for one ABAP system."""

    def __init__(
        self,
        base_url: str,
        username: str,
        password: str,
        client: Optional[str] = None,
        language: Optional[str] = None,
        *,
        timeout: float = 60.0,
        verify: bool = True,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            base_url: System URL, e.g. https://host:44300
            username: Logon user
            password: Logon password
            client: SAP client, sent as sap-client on every request
            language: Logon language, sent as sap-language on every request
            timeout: HTTP timeout in seconds
            verify: Verify the TLS certificate
            transport: Optional httpx transport (tests use httpx.MockTransport)
        """
        self.base_url = base_url.rstrip("/")
        self.username = username
        self.sap_client = client
        self.language = language
        self.stateful = SessionType.STATELESS
        self.csrf_token: Optional[str] = None

        self._params: Dict[str, str] = {}
        if client:
            self._params["sap-client"] = client
        if language:
            self._params["sap-language"] = language

        self._http = httpx.AsyncClient(
            base_url=self.base_url,
            auth=httpx.BasicAuth(username, password),
            timeout=timeout,
            verify=verify,
            transport=transport,
        )
        self._login_lock = asyncio.Lock()

    @classmethod
    def from_settings(cls, settings, **kwargs) -> "AdtClient":
        """Create a client from AdtSettings."""
        return cls(
            settings.url,
            settings.user,
            settings.password.get_secret_value(),
            settings.client,
            settings.language,
            timeout=settings.timeout,
            verify=settings.verify_tls,
            **kwargs,
        )

    @property
    def logged_in(self) -> bool:
        return self.csrf_token is not None

    @property
    def is_stateful(self) -> bool:
        return self.stateful == SessionType.STATEFUL

    # ========================================================================
    # Session lifecycle
    # ========================================================================

    async def login(self) -> bool:
        """
        Open a session and fetch a CSRF token.

        Raises:
            AdtError: If the server refuses the logon or returns no token
        """
        self.csrf_token = None
        response = await self._send(
            "GET",
            LOGIN_PATH,
            headers={CSRF_HEADER: "fetch", "Accept": "*/*"},
        )
        token = response.headers.get(CSRF_HEADER)
        if not token or token.lower() == "required":
            raise AdtError("Login failed: no CSRF token returned", status=response.status_code)

        self.csrf_token = token
        logger.info(f"Logged in to {self.base_url} as {self.username} ({self.stateful.value or 'keep'})")
        return True

    async def logout(self) -> None:
        """Log off and forget the token and cookies."""
        try:
            await self._send("GET", LOGOFF_PATH)
        finally:
            self._forget_session()
        logger.info(f"Logged out from {self.base_url}")

    async def drop_session(self) -> None:
        """
        End the server-side session context.

        A stateful session is closed by a stateless request carrying its
        cookies; afterwards the local token and cookies are discarded either
        way, so the next request logs in again.
        """
        try:
            if self.is_stateful and self.logged_in:
                self.stateful = SessionType.STATELESS
                await self._send("GET", LOGIN_PATH, headers={"Accept": "*/*"})
        finally:
            self._forget_session()
        logger.info("Session dropped")

    async def aclose(self) -> None:
        await self._http.aclose()

    def _forget_session(self) -> None:
        self.csrf_token = None
        self._http.cookies.clear()

    # ========================================================================
    # Transport
    # ========================================================================

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
        content: Any = None,
    ) -> httpx.Response:
        """Send a request, logging in first if no session is open."""
        if not self.logged_in:
            async with self._login_lock:
                if not self.logged_in:
                    await self.login()
        return await self._send(method, path, params=params, headers=headers, content=content)

    async def _send(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
        content: Any = None,
    ) -> httpx.Response:
        request_headers = {}
        if self.stateful != SessionType.KEEP:
            request_headers[SESSION_TYPE_HEADER] = self.stateful.value
        if self.csrf_token:
            request_headers[CSRF_HEADER] = self.csrf_token
        request_headers.update(headers or {})

        query = dict(self._params)
        query.update({k: v for k, v in (params or {}).items() if v is not None})

        try:
            response = await self._http.request(
                method,
                path,
                params=query,
                headers=request_headers,
                content=content,
            )
        except httpx.RequestError as exc:
            raise AdtError(f"Request to {path} failed: {exc}") from exc

        if response.status_code >= 400:
            error = error_from_response(response)
            logger.debug(f"{method} {path} -> {response.status_code}: {error}")
            raise error
        return response

    # ========================================================================
    # Repository objects
    # ========================================================================

    async def search_object(
        self,
        query: str,
        object_type: Optional[str] = None,
        max_results: int = 100,
    ) -> List[Dict[str, str]]:
        response = await self.request(
            "GET",
            "/sap/bc/adt/repository/informationsystem/search",
            params={
                "operation": "quickSearch",
                "query": query,
                "maxResults": max_results,
                "objectType": object_type,
            },
        )
        return parse_object_references(response.text)

    async def find_object_path(self, object_url: str) -> List[Dict[str, str]]:
        response = await self.request(
            "POST",
            "/sap/bc/adt/repository/nodepath",
            params={"uri": object_url},
        )
        return parse_node_path(response.text)

    async def lock(self, object_url: str, access_mode: str = "MODIFY") -> Dict[str, str]:
        """Lock an object; only meaningful in a stateful session."""
        response = await self.request(
            "POST",
            object_url,
            params={"_action": "LOCK", "accessMode": access_mode},
            headers={"Accept": LOCK_ACCEPT},
        )
        return parse_lock_result(response.text)

    async def unlock(self, object_url: str, lock_handle: str) -> None:
        await self.request(
            "POST",
            object_url,
            params={"_action": "UNLOCK", "lockHandle": lock_handle},
        )

    async def get_object_source(self, source_url: str, version: Optional[str] = None) -> str:
        response = await self.request(
            "GET",
            source_url,
            params={"version": version},
            headers={"Accept": "text/plain"},
        )
        return response.text

    async def set_object_source(
        self,
        source_url: str,
        source: str,
        lock_handle: str,
        transport: Optional[str] = None,
    ) -> None:
        await self.request(
            "PUT",
            source_url,
            params={"lockHandle": lock_handle, "corrNr": transport},
            headers={"Content-Type": "text/plain; charset=utf-8"},
            content=source.encode("utf-8"),
        )

    # ========================================================================
    # Activation
    # ========================================================================

    async def activate(
        self,
        object_name: str,
        object_url: str,
        main_include: Optional[str] = None,
    ) -> Dict[str, Any]:
        reference = {"uri": object_url, "name": object_name}
        if main_include:
            reference["uri"] = f"{object_url}?context={quote(main_include, safe='')}"
        response = await self.request(
            "POST",
            "/sap/bc/adt/activation",
            params={"method": "activate", "preauditRequested": "true"},
            headers={"Content-Type": "application/xml", "Accept": "application/xml"},
            content=build_object_references([reference]),
        )
        return parse_activation_result(response.text)

    async def inactive_objects(self) -> List[Dict[str, str]]:
        response = await self.request(
            "GET",
            "/sap/bc/adt/activation/inactiveobjects",
            headers={"Accept": "application/vnd.sap.adt.inactivectsobjects.v1+xml, application/xml;q=0.8"},
        )
        return parse_inactive_objects(response.text)
