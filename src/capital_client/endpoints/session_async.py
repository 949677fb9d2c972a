"""
Async session endpoints.

Included routes:
- GET    /api/v1/session/encryptionKey
- POST   /api/v1/session
- GET    /api/v1/session
- PUT    /api/v1/session
- DELETE /api/v1/session
"""

from __future__ import annotations

from typing import Any

from ..async_http import CapitalAsyncHttpClient
from ..http import SESSION_PATH
from .payloads import encode_password, session_body
from .session import require_api_key, store_session_tokens


class SessionAsyncAPI:
    """
    Async endpoint grouping for login, logout and account switching.
    """

    def __init__(self, client: CapitalAsyncHttpClient) -> None:
        self._client = client

    async def get_encryption_key(self) -> dict[str, Any]:
        """
        GET /api/v1/session/encryptionKey
        """

        require_api_key(self._client, "get encryption key")
        return await self._client.request("GET", f"{SESSION_PATH}/encryptionKey")

    async def create_session(
        self,
        identifier: str,
        password: str,
        *,
        encrypted_password: bool | None = None,
    ) -> dict[str, Any]:
        """
        POST /api/v1/session
        """

        require_api_key(self._client, "create session")
        payload, headers = await self._client.request_with_headers(
            "POST",
            SESSION_PATH,
            json_body=session_body(identifier, password, encrypted_password),
            include_session=False,
        )
        store_session_tokens(self._client, payload, headers)
        return payload

    async def create_session_with_encryption(
        self, identifier: str, password: str
    ) -> dict[str, Any]:
        key = await self.get_encryption_key()
        encoded = encode_password(key["encryptionKey"], key["timeStamp"], password)
        return await self.create_session(identifier, encoded, encrypted_password=True)

    async def get_session_details(self) -> dict[str, Any]:
        """
        GET /api/v1/session
        """

        return await self._client.request("GET", SESSION_PATH)

    async def switch_account(self, account_id: str) -> dict[str, Any]:
        """
        PUT /api/v1/session
        """

        payload = await self._client.request(
            "PUT", SESSION_PATH, json_body={"accountId": account_id}
        )
        self._client.session_state.account_id = account_id
        return payload

    async def logout(self) -> dict[str, Any]:
        """
        DELETE /api/v1/session
        """

        payload = await self._client.request("DELETE", SESSION_PATH)
        self._client.clear_session()
        return payload
