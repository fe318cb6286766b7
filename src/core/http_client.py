"""
Backend API client with transparent access-token refresh.

Every call is wrapped by the session gatekeeper: a 401 on a regular endpoint
triggers exactly one silent refresh of the access token followed by exactly
one replay of the original request. Auth endpoints (login, signup, refresh,
status) never trigger a refresh.
"""

import sqlite3
import time
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Callable

import httpx

from core.config import (
    BACKEND_URL,
    HTTP_TIMEOUT_SECONDS,
    NO_REFRESH_PATHS,
    REFRESH_PATH,
    REQUEST_LOG_ENABLED,
)
from core.errors import (
    ApiError,
    ApiStatusError,
    AuthenticationError,
    NetworkError,
    SessionExpiredError,
)
from core.request_log import RequestLog, log_request

SessionExpiredHandler = Callable[[SessionExpiredError], None]


@dataclass(frozen=True)
class RequestContext:
    """One logical request. A fresh context is created for every call."""

    method: str
    url: str
    json: dict | None = None
    params: dict | None = None
    retried: bool = False


def is_refresh_excluded(url: str) -> bool:
    """Check if a 401 from this URL must be propagated without a refresh."""
    return any(path in url for path in NO_REFRESH_PATHS)


def _error_message(response: httpx.Response, body: dict) -> str:
    """Extract the backend's 'message' field, falling back to the status line."""
    message = body.get("message") if isinstance(body, dict) else None
    if message:
        return str(message)
    return f"{response.status_code} {response.reason_phrase}".strip()


def _parse_body(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return None


class ApiClient:
    """
    Async client for the events backend.

    Session credentials live in the httpx cookie jar; the client never holds
    tokens itself, it only orchestrates the refresh-and-replay.
    """

    def __init__(
        self,
        base_url: str = BACKEND_URL,
        timeout: float = HTTP_TIMEOUT_SECONDS,
        transport: httpx.AsyncBaseTransport | None = None,
        request_log_enabled: bool = REQUEST_LOG_ENABLED,
        db_path: Path | None = None,
    ):
        self._http = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            headers={"Content-Type": "application/json"},
            transport=transport,
        )
        self._session_expired_handlers: list[SessionExpiredHandler] = []
        self.request_log_enabled = request_log_enabled
        self.db_path = db_path

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    # -------------------------------------------------------------------------
    # Session expiry subscription
    # -------------------------------------------------------------------------

    def on_session_expired(self, handler: SessionExpiredHandler) -> Callable[[], None]:
        """
        Subscribe to session expiry (refresh failed after a 401).

        The hosting application typically routes to its login screen here.
        Returns a function that removes the subscription.
        """
        self._session_expired_handlers.append(handler)

        def unsubscribe():
            if handler in self._session_expired_handlers:
                self._session_expired_handlers.remove(handler)

        return unsubscribe

    def _notify_session_expired(self, error: SessionExpiredError) -> None:
        for handler in list(self._session_expired_handlers):
            handler(error)

    # -------------------------------------------------------------------------
    # Public request API
    # -------------------------------------------------------------------------

    async def get(self, url: str, params: dict | None = None) -> Any:
        return await self.request("GET", url, params=params)

    async def post(self, url: str, json: dict | None = None) -> Any:
        return await self.request("POST", url, json=json)

    async def request(
        self, method: str, url: str, json: dict | None = None, params: dict | None = None
    ) -> Any:
        """Send a request and return the decoded JSON body."""
        ctx = RequestContext(method=method.upper(), url=url, json=json, params=params)
        return await self._execute(ctx)

    async def refresh_access_token(self) -> Any:
        """Exchange the refresh cookie for a new access cookie."""
        return await self._execute(RequestContext(method="GET", url=REFRESH_PATH))

    # -------------------------------------------------------------------------
    # Gatekeeper
    # -------------------------------------------------------------------------

    async def _execute(self, ctx: RequestContext) -> Any:
        try:
            return await self._send(ctx)
        except AuthenticationError:
            raise
        except ApiStatusError as e:
            # At most one refresh per logical request
            if e.status_code != 401 or ctx.retried:
                raise
            return await self._refresh_and_replay(ctx)

    async def _refresh_and_replay(self, ctx: RequestContext) -> Any:
        replay = replace(ctx, retried=True)
        try:
            await self.refresh_access_token()
        except ApiError as e:
            expired = SessionExpiredError("Session expired. Please log in again.")
            self._notify_session_expired(expired)
            raise expired from e
        return await self._execute(replay)

    async def _send(self, ctx: RequestContext) -> Any:
        """Perform one HTTP exchange and map failures onto the error types."""
        start_time = time.time()
        request_log = RequestLog(endpoint=ctx.url, method=ctx.method, retried=ctx.retried)

        try:
            try:
                response = await self._http.request(
                    ctx.method, ctx.url, json=ctx.json, params=ctx.params
                )
            except httpx.TransportError as e:
                raise NetworkError(f"Could not reach backend: {e}") from e

            request_log.status_code = response.status_code
            body = _parse_body(response)

            if response.is_success:
                return body

            body = body if isinstance(body, dict) else {}
            message = _error_message(response, body)
            if response.status_code == 401 and is_refresh_excluded(ctx.url):
                raise AuthenticationError(response.status_code, message, body)
            raise ApiStatusError(response.status_code, message, body)

        except ApiError as e:
            request_log.error_code = e.code
            request_log.error_message = e.message
            raise

        finally:
            request_log.processing_time_ms = int((time.time() - start_time) * 1000)
            if self.request_log_enabled:
                try:
                    log_request(request_log, self.db_path)
                except sqlite3.Error as e:
                    # Don't fail the request if logging fails
                    print(f"  Warning: could not write request log: {e}")


_api_client: ApiClient | None = None


def get_api_client() -> ApiClient:
    """Get or create the shared API client (lazy initialization)."""
    global _api_client
    if _api_client is None:
        _api_client = ApiClient()
    return _api_client
