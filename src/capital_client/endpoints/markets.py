"""
Market data endpoints.

Included routes:
- GET /api/v1/marketnavigation
- GET /api/v1/marketnavigation/{nodeId}
- GET /api/v1/markets
- GET /api/v1/markets/{epic}
- GET /api/v1/prices/{epic}
- GET /api/v1/clientsentiment
- GET /api/v1/clientsentiment/{marketId}
"""

from __future__ import annotations

from typing import Any

from ..http import CapitalHttpClient
from .payloads import compact_params, markets_params, price_params, sentiment_params


class MarketsAPI:
    """
    Endpoint grouping for market navigation, details, prices and sentiment.
    """

    def __init__(self, client: CapitalHttpClient) -> None:
        self._client = client

    def get_market_navigation(self) -> dict[str, Any]:
        """
        GET /api/v1/marketnavigation

        Outputs: top-level asset groups as {"nodes": [{"id", "name"}, ...]}.
        """

        return self._client.request("GET", "/api/v1/marketnavigation")

    def get_market_navigation_node(
        self, node_id: str, *, limit: int | None = None
    ) -> dict[str, Any]:
        """
        GET /api/v1/marketnavigation/{nodeId}
        """

        return self._client.request(
            "GET",
            f"/api/v1/marketnavigation/{node_id}",
            params=compact_params({"limit": limit}),
        )

    def get_markets(
        self,
        *,
        search_term: str | None = None,
        epics: list[str] | str | None = None,
    ) -> dict[str, Any]:
        """
        GET /api/v1/markets

        search_term wins over epics on the server side when both are given.
        """

        return self._client.request(
            "GET",
            "/api/v1/markets",
            params=markets_params(search_term=search_term, epics=epics),
        )

    def get_market_details(self, epic: str) -> dict[str, Any]:
        """
        GET /api/v1/markets/{epic}
        """

        return self._client.request("GET", f"/api/v1/markets/{epic}")

    def get_historical_prices(
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

        Inputs:
        - resolution: MINUTE ... WEEK (validated locally).
        - max_bars: sent as "max" (vendor default 10, maximum 1000).
        """

        params = price_params(
            resolution=resolution,
            max_bars=max_bars,
            date_from=date_from,
            date_to=date_to,
        )
        return self._client.request("GET", f"/api/v1/prices/{epic}", params=params)

    def get_client_sentiment(
        self, *, market_ids: list[str] | str | None = None
    ) -> dict[str, Any]:
        """
        GET /api/v1/clientsentiment
        """

        return self._client.request(
            "GET", "/api/v1/clientsentiment", params=sentiment_params(market_ids)
        )

    def get_client_sentiment_for_market(self, market_id: str) -> dict[str, Any]:
        """
        GET /api/v1/clientsentiment/{marketId}
        """

        return self._client.request("GET", f"/api/v1/clientsentiment/{market_id}")
