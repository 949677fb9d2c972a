"""
Accounts and history endpoints.

Included routes:
- GET  /api/v1/accounts
- GET  /api/v1/accounts/preferences
- PUT  /api/v1/accounts/preferences
- GET  /api/v1/history/activity
- GET  /api/v1/history/transactions
- POST /api/v1/accounts/topUp

Logic flow (per method):
1) Build path and query/body.
2) Pass them to CapitalHttpClient (auth headers are injected there).
3) Return raw JSON for easy tracing.
"""

from __future__ import annotations

from typing import Any

from ..http import CapitalHttpClient
from .payloads import activity_params, preferences_body, transaction_params


class AccountsAPI:
    """
    Endpoint grouping for account-related routes.
    """

    def __init__(self, client: CapitalHttpClient) -> None:
        self._client = client

    def get_all_accounts(self) -> dict[str, Any]:
        """
        GET /api/v1/accounts

        Outputs: {"accounts": [...]} with balances per financial account.
        """

        return self._client.request("GET", "/api/v1/accounts")

    def get_account_preferences(self) -> dict[str, Any]:
        """
        GET /api/v1/accounts/preferences
        """

        return self._client.request("GET", "/api/v1/accounts/preferences")

    def update_account_preferences(
        self,
        *,
        leverages: dict[str, int] | None = None,
        hedging_mode: bool | None = None,
    ) -> dict[str, Any]:
        """
        PUT /api/v1/accounts/preferences

        Inputs:
        - leverages: partial map like {"CURRENCIES": 30, "SHARES": 5}.
        - hedging_mode: enable/disable hedging.
        """

        return self._client.request(
            "PUT",
            "/api/v1/accounts/preferences",
            json_body=preferences_body(leverages, hedging_mode),
        )

    def get_activity_history(
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

        Dates use the vendor format YYYY-MM-DDTHH:MM:SS; last_period is seconds.
        """

        params = activity_params(
            date_from=date_from,
            date_to=date_to,
            last_period=last_period,
            detailed=detailed,
            deal_id=deal_id,
            filter=filter,
        )
        return self._client.request("GET", "/api/v1/history/activity", params=params)

    def get_transaction_history(
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
        return self._client.request("GET", "/api/v1/history/transactions", params=params)

    def top_up_demo_account(self, amount: float) -> dict[str, Any]:
        """
        POST /api/v1/accounts/topUp

        Demo accounts only.
        """

        return self._client.request(
            "POST", "/api/v1/accounts/topUp", json_body={"amount": amount}
        )
