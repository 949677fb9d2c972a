"""
Trading endpoints: deal confirmations, positions and working orders.

Included routes:
- GET    /api/v1/confirms/{dealReference}
- GET    /api/v1/positions
- POST   /api/v1/positions
- GET    /api/v1/positions/{dealId}
- PUT    /api/v1/positions/{dealId}
- DELETE /api/v1/positions/{dealId}
- GET    /api/v1/workingorders
- POST   /api/v1/workingorders
- PUT    /api/v1/workingorders/{dealId}
- DELETE /api/v1/workingorders/{dealId}

Logic flow:
1) Create/update calls return {"dealReference": ...}.
2) get_deal_confirmation(dealReference) resolves it to a dealId and status.
3) dealId is what the position/order routes take.
"""

from __future__ import annotations

from typing import Any

from ..http import CapitalHttpClient
from .payloads import (
    position_body,
    position_update_body,
    working_order_body,
    working_order_update_body,
)


class TradingAPI:
    """
    Endpoint grouping for positions, working orders and confirmations.
    """

    def __init__(self, client: CapitalHttpClient) -> None:
        self._client = client

    def get_deal_confirmation(self, deal_reference: str) -> dict[str, Any]:
        """
        GET /api/v1/confirms/{dealReference}
        """

        return self._client.request("GET", f"/api/v1/confirms/{deal_reference}")

    def get_all_positions(self) -> dict[str, Any]:
        """
        GET /api/v1/positions
        """

        return self._client.request("GET", "/api/v1/positions")

    def create_position(
        self, epic: str, direction: str, size: float, **risk: Any
    ) -> dict[str, Any]:
        """
        POST /api/v1/positions

        Inputs:
        - epic: instrument identifier (ex: GOLD, BTCUSD).
        - direction: BUY or SELL.
        - size: deal size.
        - risk: optional guaranteed_stop, trailing_stop, stop_level, stop_distance,
          stop_amount, profit_level, profit_distance, profit_amount.

        Outputs:
        - {"dealReference": ...}
        """

        return self._client.request(
            "POST",
            "/api/v1/positions",
            json_body=position_body(epic, direction, size, **risk),
        )

    def get_position(self, deal_id: str) -> dict[str, Any]:
        """
        GET /api/v1/positions/{dealId}
        """

        return self._client.request("GET", f"/api/v1/positions/{deal_id}")

    def update_position(self, deal_id: str, **risk: Any) -> dict[str, Any]:
        """
        PUT /api/v1/positions/{dealId}

        Accepts the same risk keywords as create_position().
        """

        return self._client.request(
            "PUT",
            f"/api/v1/positions/{deal_id}",
            json_body=position_update_body(**risk),
        )

    def close_position(self, deal_id: str) -> dict[str, Any]:
        """
        DELETE /api/v1/positions/{dealId}
        """

        return self._client.request("DELETE", f"/api/v1/positions/{deal_id}")

    def get_all_working_orders(self) -> dict[str, Any]:
        """
        GET /api/v1/workingorders
        """

        return self._client.request("GET", "/api/v1/workingorders")

    def create_working_order(
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

        Inputs:
        - level: trigger price.
        - order_type: LIMIT or STOP.
        - risk: create_position() keywords plus good_till_date.
        """

        return self._client.request(
            "POST",
            "/api/v1/workingorders",
            json_body=working_order_body(epic, direction, size, level, order_type, **risk),
        )

    def update_working_order(self, deal_id: str, **changes: Any) -> dict[str, Any]:
        """
        PUT /api/v1/workingorders/{dealId}
        """

        return self._client.request(
            "PUT",
            f"/api/v1/workingorders/{deal_id}",
            json_body=working_order_update_body(**changes),
        )

    def delete_working_order(self, deal_id: str) -> dict[str, Any]:
        """
        DELETE /api/v1/workingorders/{dealId}
        """

        return self._client.request("DELETE", f"/api/v1/workingorders/{deal_id}")
