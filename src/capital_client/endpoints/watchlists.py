"""
Watchlist endpoints.

Included routes:
- GET    /api/v1/watchlists
- POST   /api/v1/watchlists
- GET    /api/v1/watchlists/{watchlistId}
- PUT    /api/v1/watchlists/{watchlistId}
- DELETE /api/v1/watchlists/{watchlistId}
- DELETE /api/v1/watchlists/{watchlistId}/{epic}
"""

from __future__ import annotations

from typing import Any

from ..http import CapitalHttpClient
from .payloads import watchlist_body


class WatchlistsAPI:
    """
    Endpoint grouping for watchlist routes.
    """

    def __init__(self, client: CapitalHttpClient) -> None:
        self._client = client

    def get_all_watchlists(self) -> dict[str, Any]:
        return self._client.request("GET", "/api/v1/watchlists")

    def create_watchlist(
        self, name: str, *, epics: list[str] | None = None
    ) -> dict[str, Any]:
        """
        POST /api/v1/watchlists

        Outputs: {"watchlistId": ..., "status": ...}
        """

        return self._client.request(
            "POST", "/api/v1/watchlists", json_body=watchlist_body(name, epics)
        )

    def get_watchlist(self, watchlist_id: str) -> dict[str, Any]:
        return self._client.request("GET", f"/api/v1/watchlists/{watchlist_id}")

    def add_market_to_watchlist(self, watchlist_id: str, epic: str) -> dict[str, Any]:
        """
        PUT /api/v1/watchlists/{watchlistId}
        """

        return self._client.request(
            "PUT", f"/api/v1/watchlists/{watchlist_id}", json_body={"epic": epic}
        )

    def delete_watchlist(self, watchlist_id: str) -> dict[str, Any]:
        return self._client.request("DELETE", f"/api/v1/watchlists/{watchlist_id}")

    def remove_market_from_watchlist(self, watchlist_id: str, epic: str) -> dict[str, Any]:
        """
        DELETE /api/v1/watchlists/{watchlistId}/{epic}
        """

        return self._client.request(
            "DELETE", f"/api/v1/watchlists/{watchlist_id}/{epic}"
        )
