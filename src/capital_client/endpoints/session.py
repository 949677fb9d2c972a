"""
Session endpoints.

Included routes:
- GET    /api/v1/session/encryptionKey
- POST   /api/v1/session
- GET    /api/v1/session
- PUT    /api/v1/session
- DELETE /api/v1/session

Logic flow (login):
1) POST identifier + password with only X-CAP-API-KEY attached.
2) Read CST and X-SECURITY-TOKEN from the response headers (not the body).
3) Store them on the HTTP client so every later call is authenticated.

Tracing notes:
- Tokens live on the client's SessionState; a 401 anywhere clears them.
"""

from __future__ import annotations

from typing import Any, Mapping
import logging

from ..http import SESSION_PATH, CapitalHttpClient
from .payloads import encode_password, session_body

logger = logging.getLogger(__name__)


def require_api_key(client: Any, action: str) -> None:
    if not client.api_key:
        raise ValueError(f"API key is required to {action}")


def store_session_tokens(client: Any, payload: Any, headers: Mapping[str, str]) -> None:
    """
    Copy the login tokens from response headers onto the client.
    """

    cst = headers.get("CST")
    security_token = headers.get("X-SECURITY-TOKEN")
    if not (cst and security_token):
        logger.warning("Session response did not include CST/X-SECURITY-TOKEN headers")
        return
    account_id = payload.get("currentAccountId") if isinstance(payload, dict) else None
    client.set_session_tokens(cst, security_token, account_id=account_id)


class SessionAPI:
    """
    Endpoint grouping for login, logout and account switching.
    """

    def __init__(self, client: CapitalHttpClient) -> None:
        self._client = client

    def get_encryption_key(self) -> dict[str, Any]:
        """
        GET /api/v1/session/encryptionKey

        Outputs: {"encryptionKey": ..., "timeStamp": ...}
        """

        require_api_key(self._client, "get encryption key")
        return self._client.request("GET", f"{SESSION_PATH}/encryptionKey")

    def create_session(
        self,
        identifier: str,
        password: str,
        *,
        encrypted_password: bool | None = None,
    ) -> dict[str, Any]:
        """
        POST /api/v1/session

        Inputs:
        - identifier: login e-mail.
        - password: API key custom password (or an encoded password).
        - encrypted_password: set when password came from encode_password().

        Outputs:
        - Session payload (accounts, currentAccountId, streamingHost, ...).

        Next:
        - The client is now authenticated; call any other endpoint.
        """

        require_api_key(self._client, "create session")
        payload, headers = self._client.request_with_headers(
            "POST",
            SESSION_PATH,
            json_body=session_body(identifier, password, encrypted_password),
            include_session=False,
        )
        store_session_tokens(self._client, payload, headers)
        return payload

    def create_session_with_encryption(
        self, identifier: str, password: str
    ) -> dict[str, Any]:
        """
        Fetch the encryption key, encode the password and log in.
        """

        key = self.get_encryption_key()
        encoded = encode_password(key["encryptionKey"], key["timeStamp"], password)
        return self.create_session(identifier, encoded, encrypted_password=True)

    def get_session_details(self) -> dict[str, Any]:
        """
        GET /api/v1/session
        """

        return self._client.request("GET", SESSION_PATH)

    def switch_account(self, account_id: str) -> dict[str, Any]:
        """
        PUT /api/v1/session

        Switches the active financial account for this session.
        """

        payload = self._client.request(
            "PUT", SESSION_PATH, json_body={"accountId": account_id}
        )
        self._client.session_state.account_id = account_id
        return payload

    def logout(self) -> dict[str, Any]:
        """
        DELETE /api/v1/session

        Tokens are cleared locally once the server confirms.
        """

        payload = self._client.request("DELETE", SESSION_PATH)
        self._client.clear_session()
        return payload
