"""
Facades that bundle one HTTP client with every endpoint group.

Purpose:
- Give callers one object per session: api.session.create_session(...),
  api.trading.create_position(...), api.markets.get_markets(...).
- Hand the session tokens to a stream client without the caller copying them.

Logic flow:
1) Build CapitalAPI (requests) or CapitalAsyncAPI (aiohttp) around a client.
2) Log in via api.session; tokens land on the shared client.
3) create_stream_client()/connect_stream() reuse those tokens for the WebSocket.
"""

from __future__ import annotations

from typing import Any

from .async_http import CapitalAsyncHttpClient
from .config import resolve_base_url
from .endpoints.accounts import AccountsAPI
from .endpoints.accounts_async import AccountsAsyncAPI
from .endpoints.general import GeneralAPI
from .endpoints.general_async import GeneralAsyncAPI
from .endpoints.markets import MarketsAPI
from .endpoints.markets_async import MarketsAsyncAPI
from .endpoints.session import SessionAPI
from .endpoints.session_async import SessionAsyncAPI
from .endpoints.trading import TradingAPI
from .endpoints.trading_async import TradingAsyncAPI
from .endpoints.watchlists import WatchlistsAPI
from .endpoints.watchlists_async import WatchlistsAsyncAPI
from .http import CapitalHttpClient
from .streaming import DEFAULT_PING_INTERVAL_SECONDS, CapitalStreamClient


class _StreamingMixin:
    """
    Session helpers and stream factory shared by both facades.
    """

    _client: Any
    _stream: CapitalStreamClient | None
    _stream_defaults: dict[str, Any]

    def is_authenticated(self) -> bool:
        return self._client.is_authenticated()

    def get_session_tokens(self) -> dict[str, str | None]:
        return self._client.session_state.tokens()

    def set_api_key(self, api_key: str) -> None:
        self._client.set_api_key(api_key)

    def create_stream_client(self, **overrides: Any) -> CapitalStreamClient:
        """
        Create (and remember) a stream client bound to the current tokens.

        overrides: streaming_url, reconnect_interval_seconds, max_reconnect_attempts.
        """

        state = self._client.session_state
        if not state.is_authenticated():
            raise ValueError(
                "Session tokens are required for WebSocket connection. "
                "Please authenticate first."
            )
        options = {**self._stream_defaults, **overrides}
        self._stream = CapitalStreamClient(
            cst=state.cst,
            security_token=state.security_token,
            **options,
        )
        return self._stream

    def get_stream_client(self) -> CapitalStreamClient | None:
        return self._stream

    async def connect_stream(
        self, *, ping_interval_seconds: float = DEFAULT_PING_INTERVAL_SECONDS
    ) -> CapitalStreamClient:
        """
        Connect the remembered stream client (creating it if needed) and start pinging.
        """

        stream = self._stream or self.create_stream_client()
        await stream.connect()
        stream.start_auto_ping(ping_interval_seconds)
        return stream

    async def disconnect_stream(self) -> None:
        if self._stream is not None:
            await self._stream.disconnect()
            self._stream = None


class CapitalAPI(_StreamingMixin):
    """
    Blocking REST facade (requests) with an async stream factory.
    """

    def __init__(
        self,
        client: CapitalHttpClient,
        *,
        streaming_url: str | None = None,
        reconnect_interval_seconds: float = 5.0,
        max_reconnect_attempts: int = 5,
    ) -> None:
        self._client = client
        self._stream = None
        self._stream_defaults = {
            "streaming_url": streaming_url,
            "reconnect_interval_seconds": reconnect_interval_seconds,
            "max_reconnect_attempts": max_reconnect_attempts,
        }
        self.general = GeneralAPI(client)
        self.session = SessionAPI(client)
        self.accounts = AccountsAPI(client)
        self.trading = TradingAPI(client)
        self.markets = MarketsAPI(client)
        self.watchlists = WatchlistsAPI(client)

    @classmethod
    def create(
        cls,
        api_key: str | None = None,
        *,
        base_url: str | None = None,
        demo_mode: bool = False,
        timeout_seconds: int = 30,
        requests_per_second: int | None = None,
    ) -> "CapitalAPI":
        client = CapitalHttpClient(
            base_url=resolve_base_url(base_url, demo_mode=demo_mode),
            api_key=api_key,
            timeout_seconds=timeout_seconds,
            requests_per_second=requests_per_second,
        )
        return cls(client)

    @property
    def http(self) -> CapitalHttpClient:
        return self._client

    def close(self) -> None:
        self._client.close()


class CapitalAsyncAPI(_StreamingMixin):
    """
    Fully async facade: aiohttp for REST, aiohttp WebSocket for streaming.
    """

    def __init__(
        self,
        client: CapitalAsyncHttpClient,
        *,
        streaming_url: str | None = None,
        reconnect_interval_seconds: float = 5.0,
        max_reconnect_attempts: int = 5,
    ) -> None:
        self._client = client
        self._stream = None
        self._stream_defaults = {
            "streaming_url": streaming_url,
            "reconnect_interval_seconds": reconnect_interval_seconds,
            "max_reconnect_attempts": max_reconnect_attempts,
        }
        self.general = GeneralAsyncAPI(client)
        self.session = SessionAsyncAPI(client)
        self.accounts = AccountsAsyncAPI(client)
        self.trading = TradingAsyncAPI(client)
        self.markets = MarketsAsyncAPI(client)
        self.watchlists = WatchlistsAsyncAPI(client)

    @classmethod
    def create(
        cls,
        api_key: str | None = None,
        *,
        base_url: str | None = None,
        demo_mode: bool = False,
        timeout_seconds: int = 30,
        requests_per_second: int | None = None,
    ) -> "CapitalAsyncAPI":
        client = CapitalAsyncHttpClient(
            base_url=resolve_base_url(base_url, demo_mode=demo_mode),
            api_key=api_key,
            timeout_seconds=timeout_seconds,
            requests_per_second=requests_per_second,
        )
        return cls(client)

    @property
    def http(self) -> CapitalAsyncHttpClient:
        return self._client

    async def __aenter__(self) -> "CapitalAsyncAPI":
        await self._client.__aenter__()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self) -> None:
        await self.disconnect_stream()
        await self._client.close()
