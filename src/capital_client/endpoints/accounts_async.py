"""
Async accounts and history endpoints.

Included routes:
- GET  /api/v1/accounts
- GET  /api/v1/accounts/preferences
- PUT  /api/v1/accounts/preferences
- GET  /api/v1/history/activity
- GET  /api/v1/history/transactions
- POST /api/v1/accounts/topUp
"""

from __future__ import annotations

from typing import Any

from ..async_http import CapitalAsyncHttpClient
from .payloads import activity_params, preferences_body, transaction_params


class AccountsAsyncAPI:
    """
    Async endpoint grouping for account-related routes.
    """

    def __init__(self, client: CapitalAsyncHttpClient) -> None:
        self._client = client

    async def get_all_accounts(self) -> dict[str, Any]:
        """
        GET /api/v1/accounts
        """

        return await self._client.request("GET", "/api/v1/accounts")

    async def get_account_preferences(self) -> dict[str, Any]:
        """
        GET /api/v1/accounts/preferences
        """

        return await self._client.request("GET", "/api/v1/accounts/preferences")

    async def update_account_preferences(
        self,
        *,
        leverages: dict[str, int] | None = None,
        hedging_mode: bool | None = None,
    ) -> dict[str, Any]:
        """
        PUT /api/v1/accounts/preferences
        """

        return await self._client.request(
            "PUT",
            "/api/v1/accounts/preferences",
            json_body=preferences_body(leverages, hedging_mode),
        )

    async def get_activity_history(
        self,
        *,
        date_from: str | None = None,
        date_to: str | None = None,
        last_period: int | None = None,
        detailed: bool | None = None,
        deal_id: str | None = None,
        filter: str | None = None,
    ) -> dict[str, Any]:
        """
        GET /api/v1/history/activity
        """

        params = activity_params(
            date_from=date_from,
            date_to=date_to,
            last_period=last_period,
            detailed=detailed,
            deal_id=deal_id,
            filter=filter,
        )
        return await self._client.request("GET", "/api/v1/history/activity", params=params)

    async def get_transaction_history(
        self,
        *,
        date_from: str | None = None,
        date_to: str | None = None,
        last_period: int | None = None,
        transaction_type: str | None = None,
    ) -> dict[str, Any]:
        """
        GET /api/v1/history/transactions
        """

        params = transaction_params(
            date_from=date_from,
            date_to=date_to,
            last_period=last_period,
            transaction_type=transaction_type,
        )
        return await self._client.request(
            "GET", "/api/v1/history/transactions", params=params
        )

    async def top_up_demo_account(self, amount: float) -> dict[str, Any]:
        """
        POST /api/v1/accounts/topUp
        """

        return await self._client.request(
            "POST", "/api/v1/accounts/topUp", json_body={"amount": amount}
        )
