"""
General endpoints.

Included routes:
- GET /api/v1/time
- GET /api/v1/ping
"""

from __future__ import annotations

from typing import Any

from ..http import CapitalHttpClient


class GeneralAPI:
    """
    Server time and session keepalive.
    """

    def __init__(self, client: CapitalHttpClient) -> None:
        self._client = client

    def get_server_time(self) -> dict[str, Any]:
        """
        GET /api/v1/time

        Does not need a session; useful as a connectivity probe.
        """

        return self._client.request("GET", "/api/v1/time")

    def ping(self) -> dict[str, Any]:
        """
        GET /api/v1/ping

        Keeps the trading session alive (sessions expire after 10 idle minutes).
        """

        return self._client.request("GET", "/api/v1/ping")
