"""
Async market data endpoints.

Same routes and parameters as markets.py.
"""

from __future__ import annotations

from typing import Any

from ..async_http import CapitalAsyncHttpClient
from .payloads import compact_params, markets_params, price_params, sentiment_params


class MarketsAsyncAPI:
    """
    Async endpoint grouping for market navigation, details, prices and sentiment.
    """

    def __init__(self, client: CapitalAsyncHttpClient) -> None:
        self._client = client

    async def get_market_navigation(self) -> dict[str, Any]:
        return await self._client.request("GET", "/api/v1/marketnavigation")

    async def get_market_navigation_node(
        self, node_id: str, *, limit: int | None = None
    ) -> dict[str, Any]:
        """
        GET /api/v1/marketnavigation/{nodeId}
        """

        return await self._client.request(
            "GET",
            f"/api/v1/marketnavigation/{node_id}",
            params=compact_params({"limit": limit}),
        )

    async def get_markets(
        self,
        *,
        search_term: str | None = None,
        epics: list[str] | str | None = None,
    ) -> dict[str, Any]:
        """
        GET /api/v1/markets
        """

        return await self._client.request(
            "GET",
            "/api/v1/markets",
            params=markets_params(search_term=search_term, epics=epics),
        )

    async def get_market_details(self, epic: str) -> dict[str, Any]:
        return await self._client.request("GET", f"/api/v1/markets/{epic}")

    async def get_historical_prices(
        self,
        epic: str,
        *,
        resolution: str | None = None,
        max_bars: int | None = None,
        date_from: str | None = None,
        date_to: str | None = None,
    ) -> dict[str, Any]:
        """
        GET /api/v1/prices/{epic}
        """

        params = price_params(
            resolution=resolution,
            max_bars=max_bars,
            date_from=date_from,
            date_to=date_to,
        )
        return await self._client.request("GET", f"/api/v1/prices/{epic}", params=params)

    async def get_client_sentiment(
        self, *, market_ids: list[str] | str | None = None
    ) -> dict[str, Any]:
        """
        GET /api/v1/clientsentiment
        """

        return await self._client.request(
            "GET", "/api/v1/clientsentiment", params=sentiment_params(market_ids)
        )

    async def get_client_sentiment_for_market(self, market_id: str) -> dict[str, Any]:
        return await self._client.request("GET", f"/api/v1/clientsentiment/{market_id}")
