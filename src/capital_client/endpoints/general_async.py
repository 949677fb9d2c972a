"""
Async general endpoints.

Included routes:
- GET /api/v1/time
- GET /api/v1/ping
"""

from __future__ import annotations

from typing import Any

from ..async_http import CapitalAsyncHttpClient


class GeneralAsyncAPI:
    def __init__(self, client: CapitalAsyncHttpClient) -> None:
        self._client = client

    async def get_server_time(self) -> dict[str, Any]:
        """
        GET /api/v1/time
        """

        return await self._client.request("GET", "/api/v1/time")

    async def ping(self) -> dict[str, Any]:
        """
        GET /api/v1/ping
        """

        return await self._client.request("GET", "/api/v1/ping")
