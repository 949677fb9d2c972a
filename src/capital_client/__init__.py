"""
Capital.com API client package.

The REST surface is split into small endpoint modules; the stream client lives
on its own. Import paths are exported here to keep the public surface area
obvious while the implementation remains editable in smaller files.
"""

from .config import (
    AccountEntry,
    AccountGroup,
    AppConfig,
    AppSettings,
    load_account_groups,
    resolve_account_credentials,
    resolve_base_url,
    select_account,
)
from .errors import (
    CapitalAPIError,
    CapitalAsyncAPIError,
    ReconnectExhaustedError,
    StreamParseError,
)
from .http import CapitalHttpClient
from .async_http import CapitalAsyncHttpClient
from .api import CapitalAPI, CapitalAsyncAPI
from .endpoints import (
    AccountsAPI,
    AccountsAsyncAPI,
    GeneralAPI,
    GeneralAsyncAPI,
    MarketsAPI,
    MarketsAsyncAPI,
    SessionAPI,
    SessionAsyncAPI,
    TradingAPI,
    TradingAsyncAPI,
    WatchlistsAPI,
    WatchlistsAsyncAPI,
)
from .endpoints.payloads import encode_password
from .streaming import CapitalStreamClient, ConnectionState
from .models import (
    OHLCEvent,
    QuoteEvent,
    SessionState,
    StreamEnvelope,
    parse_ohlc,
    parse_quote,
)
from .validation import validate_account_groups, validate_connectivity, validate_session
from .app import (
    build_api,
    build_api_async,
    build_http_client,
    build_stream_client,
    load_api,
    load_api_async,
    load_config,
    login,
    login_async,
    validate_account_connection,
)
from .logging_config import setup_logging

__all__ = [
    "AccountEntry",
    "AccountGroup",
    "AppConfig",
    "AppSettings",
    "load_account_groups",
    "resolve_account_credentials",
    "resolve_base_url",
    "select_account",
    "CapitalAPIError",
    "CapitalAsyncAPIError",
    "ReconnectExhaustedError",
    "StreamParseError",
    "CapitalHttpClient",
    "CapitalAsyncHttpClient",
    "CapitalAPI",
    "CapitalAsyncAPI",
    "AccountsAPI",
    "AccountsAsyncAPI",
    "GeneralAPI",
    "GeneralAsyncAPI",
    "MarketsAPI",
    "MarketsAsyncAPI",
    "SessionAPI",
    "SessionAsyncAPI",
    "TradingAPI",
    "TradingAsyncAPI",
    "WatchlistsAPI",
    "WatchlistsAsyncAPI",
    "encode_password",
    "CapitalStreamClient",
    "ConnectionState",
    "OHLCEvent",
    "QuoteEvent",
    "SessionState",
    "StreamEnvelope",
    "parse_ohlc",
    "parse_quote",
    "validate_account_groups",
    "validate_connectivity",
    "validate_session",
    "build_api",
    "build_api_async",
    "build_http_client",
    "build_stream_client",
    "load_api",
    "load_api_async",
    "load_config",
    "login",
    "login_async",
    "validate_account_connection",
    "setup_logging",
]
