"""
Endpoint groupings live here to keep API surface area segmented by domain.
"""

from .accounts import AccountsAPI
from .accounts_async import AccountsAsyncAPI
from .general import GeneralAPI
from .general_async import GeneralAsyncAPI
from .markets import MarketsAPI
from .markets_async import MarketsAsyncAPI
from .session import SessionAPI
from .session_async import SessionAsyncAPI
from .trading import TradingAPI
from .trading_async import TradingAsyncAPI
from .watchlists import WatchlistsAPI
from .watchlists_async import WatchlistsAsyncAPI

__all__ = [
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
]
