"""
Session Resilience - transparent reconnect when the ADT session expires.

Every tool call except the session-management tools runs through
SessionResilienceController.execute():

    attempt 1 -> success                      -> result
              -> failure, not session expiry  -> raise it
              -> failure, session expiry      -> reconnect
                   reconnect ok               -> attempt 2, result or failure as-is
                   reconnect failed           -> raise the attempt-1 failure

Expiry is a one-shot recoverable condition: at most two attempts per call,
no backoff.

Concurrency:
    Calls share one AdtClient. With ``single_flight=True`` callers that hit
    expiry while a reconnect is already running await that reconnect instead
    of starting their own. Every successful reconnect advances
    ``session_generation``; a caller whose failing attempt began before the
    current generation retries on the restored session without reconnecting
    again, so a late failure cannot discard a session (and its locks) that
    another caller just re-established.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional

from mcp.shared.exceptions import McpError
from mcp.types import METHOD_NOT_FOUND

from ..adt import SessionType, is_csrf_error

logger = logging.getLogger(__name__)

MAX_ATTEMPTS = 2

# Lower-cased message fragments that mean the server dropped the session
SESSION_EXPIRY_MARKERS = ("session timed out", "csrf token")

Dispatch = Callable[[str, dict], Awaitable[Any]]


def is_session_expired(error: object) -> bool:
    """
    Decide whether a failure means the session must be re-established.

    True when the failure (or an exception it was raised from) is an
    AdtCsrfError, or when its message mentions a session timeout or a CSRF
    token. Routing failures (unknown tool) never count, whatever the name.
    This is the only place expiry is classified.
    """
    if isinstance(error, McpError) and error.error.code == METHOD_NOT_FOUND:
        return False
    if is_csrf_error(error):
        return True
    if isinstance(error, BaseException):
        message = str(error).lower()
        return any(marker in message for marker in SESSION_EXPIRY_MARKERS)
    return False


class SessionResilienceController:
    """Wraps dispatch with one reconnect-and-retry on session expiry."""

    def __init__(self, client, dispatch: Dispatch, single_flight: bool = True):
        """
        Args:
            client: Shared AdtClient (drop_session/login/stateful)
            dispatch: Coroutine executing a tool by name, e.g. ToolRegistry.dispatch
            single_flight: Share one in-flight reconnect between concurrent callers
        """
        self.client = client
        self._dispatch = dispatch
        self.single_flight = single_flight
        self._reconnect_task: Optional[asyncio.Task] = None
        self.reconnect_count = 0
        self.session_generation = 0

    async def execute(self, name: str, arguments: dict) -> Any:
        """Dispatch a tool call, reconnecting and retrying once on expiry."""
        for attempt in range(MAX_ATTEMPTS):
            generation = self.session_generation
            try:
                return await self._dispatch(name, arguments)
            except Exception as error:
                if attempt + 1 >= MAX_ATTEMPTS or not is_session_expired(error):
                    raise
                if self.single_flight and generation != self.session_generation:
                    logger.info(f"Session already re-established, retrying '{name}'")
                    continue
                logger.warning(f"Session expired during '{name}', reconnecting...")
                if not await self._try_reconnect():
                    # the original failure is the actionable one
                    raise
        raise AssertionError("unreachable: retry loop exits by return or raise")

    async def _try_reconnect(self) -> bool:
        try:
            await self.reconnect()
        except Exception as reconnect_error:
            logger.error(f"Reconnect failed: {reconnect_error}")
            return False
        return True

    async def reconnect(self) -> None:
        """Run the reconnect sequence, joining one already in flight if enabled."""
        if not self.single_flight:
            await self._reconnect()
            return

        task = self._reconnect_task
        if task is None or task.done():
            task = asyncio.ensure_future(self._reconnect())
            self._reconnect_task = task
            task.add_done_callback(self._reconnect_finished)
        # shield: a cancelled caller must not cancel the reconnect others await
        await asyncio.shield(task)

    def _reconnect_finished(self, task: asyncio.Task) -> None:
        if self._reconnect_task is task:
            self._reconnect_task = None

    async def _reconnect(self) -> None:
        self.reconnect_count += 1
        try:
            await self.client.drop_session()
        except Exception as e:
            logger.debug(f"Ignoring dropSession failure during reconnect: {e}")
        self.client.stateful = SessionType.STATEFUL
        await self.client.login()
        self.session_generation += 1
        logger.info("Reconnected successfully")
