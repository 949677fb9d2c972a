"""
Async trading endpoints: deal confirmations, positions and working orders.

Same routes and payloads as trading.py.
"""

from __future__ import annotations

from typing import Any

from ..async_http import CapitalAsyncHttpClient
from .payloads import (
    position_body,
    position_update_body,
    working_order_body,
    working_order_update_body,
)


class TradingAsyncAPI:
    """
    Async endpoint grouping for positions, working orders and confirmations.
    """

    def __init__(self, client: CapitalAsyncHttpClient) -> None:
        self._client = client

    async def get_deal_confirmation(self, deal_reference: str) -> dict[str, Any]:
        """
        GET /api/v1/confirms/{dealReference}
        """

        return await self._client.request("GET", f"/api/v1/confirms/{deal_reference}")

    async def get_all_positions(self) -> dict[str, Any]:
        return await self._client.request("GET", "/api/v1/positions")

    async def create_position(
        self, epic: str, direction: str, size: float, **risk: Any
    ) -> dict[str, Any]:
        """
        POST /api/v1/positions
        """

        return await self._client.request(
            "POST",
            "/api/v1/positions",
            json_body=position_body(epic, direction, size, **risk),
        )

    async def get_position(self, deal_id: str) -> dict[str, Any]:
        return await self._client.request("GET", f"/api/v1/positions/{deal_id}")

    async def update_position(self, deal_id: str, **risk: Any) -> dict[str, Any]:
        """
        PUT /api/v1/positions/{dealId}
        """

        return await self._client.request(
            "PUT",
            f"/api/v1/positions/{deal_id}",
            json_body=position_update_body(**risk),
        )

    async def close_position(self, deal_id: str) -> dict[str, Any]:
        return await self._client.request("DELETE", f"/api/v1/positions/{deal_id}")

    async def get_all_working_orders(self) -> dict[str, Any]:
        return await self._client.request("GET", "/api/v1/workingorders")

    async def create_working_order(
        self,
        epic: str,
        direction: str,
        size: float,
        level: float,
        order_type: str,
        **risk: Any,
    ) -> dict[str, Any]:
        """
        POST /api/v1/workingorders
        """

        return await self._client.request(
            "POST",
            "/api/v1/workingorders",
            json_body=working_order_body(epic, direction, size, level, order_type, **risk),
        )

    async def update_working_order(self, deal_id: str, **changes: Any) -> dict[str, Any]:
        """
        PUT /api/v1/workingorders/{dealId}
        """

        return await self._client.request(
            "PUT",
            f"/api/v1/workingorders/{deal_id}",
            json_body=working_order_update_body(**changes),
        )

    async def delete_working_order(self, deal_id: str) -> dict[str, Any]:
        return await self._client.request("DELETE", f"/api/v1/workingorders/{deal_id}")
