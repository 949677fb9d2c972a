"""
Async HTTP client wrapper for Capital.com REST endpoints.

Purpose:
- Provide async I/O so REST calls can share an event loop with the stream client.
- Keep endpoint modules focused on URL paths and parameters.

Logic flow:
1) The caller instantiates CapitalAsyncHttpClient with base_url + api_key.
2) Endpoint methods await request(method, path, ...).
3) request() builds the full URL, injects auth headers, and delegates to aiohttp.
4) A 401 clears the stored tokens; any non-2xx raises CapitalAsyncAPIError.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping
import json
import logging

import aiohttp

from .errors import CapitalAsyncAPIError
from .http import DEFAULT_HEADERS, SESSION_PATH, build_auth_headers
from .models import SessionState
from .rate_limit import AsyncRateLimiter, async_session_limiter

logger = logging.getLogger(__name__)


def _decode(text: str) -> Any:
    if not text:
        return {}
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return text


@dataclass
class CapitalAsyncHttpClient:
    """
    Minimal async HTTP client that handles auth + base URL + session tokens.
    """

    base_url: str
    api_key: str | None = None
    timeout_seconds: int = 30
    requests_per_second: int | None = None
    debug_logging: bool = False
    session_state: SessionState = field(default_factory=SessionState)
    _session: aiohttp.ClientSession | None = None
    _rate_limiter: AsyncRateLimiter | None = None
    _login_limiter: AsyncRateLimiter | None = None

    async def __aenter__(self) -> "CapitalAsyncHttpClient":
        self._ensure_session()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self) -> None:
        if self._session is not None:
            await self._session.close()
            self._session = None

    def _ensure_session(self) -> None:
        if self._session is None:
            timeout = aiohttp.ClientTimeout(total=self.timeout_seconds)
            self._session = aiohttp.ClientSession(timeout=timeout, headers=DEFAULT_HEADERS)
        if self._rate_limiter is None and self.requests_per_second is not None:
            self._rate_limiter = AsyncRateLimiter(self.requests_per_second)
        if self._login_limiter is None:
            self._login_limiter = async_session_limiter()

    def set_api_key(self, api_key: str) -> None:
        self.api_key = api_key

    def set_session_tokens(
        self, cst: str, security_token: str, *, account_id: str | None = None
    ) -> None:
        self.session_state.cst = cst
        self.session_state.security_token = security_token
        if account_id is not None:
            self.session_state.account_id = account_id

    def clear_session(self) -> None:
        self.session_state.clear()

    def is_authenticated(self) -> bool:
        return self.session_state.is_authenticated()

    async def request_with_headers(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json_body: dict[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
        include_session: bool = True,
    ) -> tuple[Any, Mapping[str, str]]:
        """
        Send a single HTTP request and return (JSON payload, response headers).
        """

        self._ensure_session()
        method = method.upper()
        url = f"{self.base_url.rstrip('/')}{path}"
        request_headers = build_auth_headers(
            self.api_key,
            self.session_state,
            include_session=include_session,
            extra=headers,
        )

        if method == "POST" and path == SESSION_PATH and self._login_limiter:
            await self._login_limiter.wait()
        if self._rate_limiter:
            await self._rate_limiter.wait()
        if self.debug_logging:
            logger.info("HTTP %s %s", method, url)

        async with self._session.request(
            method=method,
            url=url,
            params=params,
            json=json_body,
            headers=request_headers,
        ) as response:
            payload = _decode(await response.text())
            if response.status == 401:
                logger.warning("HTTP 401 on %s %s; clearing session tokens", method, path)
                self.clear_session()
            if response.status >= 400:
                raise CapitalAsyncAPIError(
                    response.request_info,
                    response.history,
                    status=response.status,
                    payload=payload,
                    reason=response.reason,
                    headers=response.headers,
                )
            return payload, response.headers

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json_body: dict[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
        include_session: bool = True,
    ) -> Any:
        """
        Send a single HTTP request and return the JSON payload.
        """

        payload, _ = await self.request_with_headers(
            method,
            path,
            params=params,
            json_body=json_body,
            headers=headers,
            include_session=include_session,
        )
        return payload
