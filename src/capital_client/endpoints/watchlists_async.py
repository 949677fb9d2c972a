"""
Async watchlist endpoints.

Same routes and payloads as watchlists.py.
"""

from __future__ import annotations

from typing import Any

from ..async_http import CapitalAsyncHttpClient
from .payloads import watchlist_body


class WatchlistsAsyncAPI:
    def __init__(self, client: CapitalAsyncHttpClient) -> None:
        self._client = client

    async def get_all_watchlists(self) -> dict[str, Any]:
        return await self._client.request("GET", "/api/v1/watchlists")

    async def create_watchlist(
        self, name: str, *, epics: list[str] | None = None
    ) -> dict[str, Any]:
        """
        POST /api/v1/watchlists
        """

        return await self._client.request(
            "POST", "/api/v1/watchlists", json_body=watchlist_body(name, epics)
        )

    async def get_watchlist(self, watchlist_id: str) -> dict[str, Any]:
        return await self._client.request("GET", f"/api/v1/watchlists/{watchlist_id}")

    async def add_market_to_watchlist(self, watchlist_id: str, epic: str) -> dict[str, Any]:
        """
        PUT /api/v1/watchlists/{watchlistId}
        """

        return await self._client.request(
            "PUT", f"/api/v1/watchlists/{watchlist_id}", json_body={"epic": epic}
        )

    async def delete_watchlist(self, watchlist_id: str) -> dict[str, Any]:
        return await self._client.request("DELETE", f"/api/v1/watchlists/{watchlist_id}")

    async def remove_market_from_watchlist(
        self, watchlist_id: str, epic: str
    ) -> dict[str, Any]:
        """
        DELETE /api/v1/watchlists/{watchlistId}/{epic}
        """

        return await self._client.request(
            "DELETE", f"/api/v1/watchlists/{watchlist_id}/{epic}"
        )
