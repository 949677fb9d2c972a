"""
HTTP client wrapper for Capital.com REST endpoints.

Purpose:
- Provide a single place to manage auth headers, session tokens and base URL handling.
- Keep endpoint modules focused on URL paths and parameters.

Sources:
- base_url / api_key: resolved in config.py (defaults to the live or demo host).
- session tokens: set by endpoints/session.py after POST /api/v1/session.

Logic flow:
1) The caller instantiates CapitalHttpClient with base_url + api_key.
2) Endpoint methods call request(method, path, ...).
3) request() builds the full URL, injects X-CAP-API-KEY / CST / X-SECURITY-TOKEN,
   and delegates to requests.
4) A 401 clears the stored tokens; any non-2xx raises CapitalAPIError.
5) JSON response is returned to the caller for downstream processing.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping
import logging

import requests

from .errors import CapitalAPIError
from .models import SessionState
from .rate_limit import RateLimiter, session_limiter

logger = logging.getLogger(__name__)

SESSION_PATH = "/api/v1/session"
DEFAULT_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/json",
}


def build_auth_headers(
    api_key: str | None,
    state: SessionState,
    *,
    include_session: bool = True,
    extra: Mapping[str, str] | None = None,
) -> dict[str, str]:
    """
    Merge auth headers under any explicit per-call headers.

    Explicit headers win, the same way a request interceptor leaves
    already-set values alone.
    """

    headers: dict[str, str] = {}
    if api_key:
        headers["X-CAP-API-KEY"] = api_key
    if include_session:
        if state.cst:
            headers["CST"] = state.cst
        if state.security_token:
            headers["X-SECURITY-TOKEN"] = state.security_token
    if extra:
        headers.update(extra)
    return headers


@dataclass
class CapitalHttpClient:
    """
    Minimal HTTP client that handles auth + base URL + session tokens.
    """

    base_url: str
    api_key: str | None = None
    timeout_seconds: int = 30
    requests_per_second: int | None = None
    debug_logging: bool = False

    def __post_init__(self) -> None:
        self.session_state = SessionState()
        self._session = requests.Session()
        self._session.headers.update(DEFAULT_HEADERS)
        self._rate_limiter = (
            RateLimiter(self.requests_per_second)
            if self.requests_per_second is not None
            else None
        )
        self._login_limiter = session_limiter()

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

    def close(self) -> None:
        self._session.close()

    def request_with_headers(
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

        Inputs:
        - method: HTTP method (GET, POST, PUT, DELETE).
        - path: endpoint path (e.g., /api/v1/positions).
        - params/json_body: query/body payloads as needed.
        - headers: explicit headers that override the injected ones.
        - include_session: False for the login call, which must not carry old tokens.

        Outputs:
        - Parsed JSON body ({} when empty) and the case-insensitive header mapping.
        """

        method = method.upper()
        url = f"{self.base_url.rstrip('/')}{path}"
        request_headers = build_auth_headers(
            self.api_key,
            self.session_state,
            include_session=include_session,
            extra=headers,
        )

        if method == "POST" and path == SESSION_PATH:
            self._login_limiter.wait()
        if self._rate_limiter:
            self._rate_limiter.wait()
        if self.debug_logging:
            logger.info("HTTP %s %s", method, url)

        response = self._session.request(
            method=method,
            url=url,
            params=params,
            json=json_body,
            headers=request_headers,
            timeout=self.timeout_seconds,
        )
        if response.status_code == 401:
            logger.warning("HTTP 401 on %s %s; clearing session tokens", method, path)
            self.clear_session()
        if not response.ok:
            raise CapitalAPIError.from_response(response)
        payload = response.json() if response.content else {}
        return payload, response.headers

    def request(
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

        payload, _ = self.request_with_headers(
            method,
            path,
            params=params,
            json_body=json_body,
            headers=headers,
            include_session=include_session,
        )
        return payload
