"""
Pre-flight checks for accounts.yaml and for the Capital.com REST API.

Checks:
- validate_account_groups(): local structure only, no network.
- validate_connectivity(): GET /api/v1/time, which needs an API key but no session.
- validate_session(): POST then GET /api/v1/session to prove the login works.

The network checks never raise for HTTP or transport failures; they return a
result dict that is easy to log or print: ok, message and payload, plus the
HTTP status on failure (None for transport errors).
"""

from __future__ import annotations

from collections import Counter
from typing import Any

import requests

from .config import AccountGroup
from .endpoints.session import SessionAPI
from .errors import CapitalAPIError
from .http import CapitalHttpClient


def _repeated(values: list[str]) -> list[str]:
    return sorted(value for value, count in Counter(values).items() if value and count > 1)


def _group_warnings(name: str, group: AccountGroup) -> list[str]:
    found: list[str] = []
    prefix = f"Group '{name}'"
    if not (len(group.currency) == 3 and group.currency.isalpha()):
        found.append(f"{prefix} currency '{group.currency}' is not an ISO 4217 code.")

    repeated_names = _repeated([entry.name for entry in group.accounts])
    if repeated_names:
        found.append(f"{prefix} has duplicate account names: {repeated_names}.")
    repeated_ids = _repeated([entry.account_id for entry in group.accounts])
    if repeated_ids:
        found.append(f"{prefix} reuses account_id values: {repeated_ids}.")

    # Capital.com account IDs are plain digit strings.
    for entry in group.accounts:
        if not entry.account_id:
            found.append(f"{prefix} account '{entry.name}' has empty account_id.")
        elif not entry.account_id.isdigit():
            found.append(f"{prefix} account '{entry.name}' has nonstandard account_id.")
    return found


def validate_account_groups(groups: dict[str, AccountGroup]) -> list[str]:
    """
    Return human-readable warnings; an empty list means the file looks sane.
    """

    warnings: list[str] = []
    for name, group in groups.items():
        warnings.extend(_group_warnings(name, group))
    return warnings


def _result(payload: Any) -> dict[str, Any]:
    return {"ok": True, "message": "OK", "payload": payload}


def _failure(exc: requests.RequestException) -> dict[str, Any]:
    if isinstance(exc, CapitalAPIError):
        return {
            "ok": False,
            "status": exc.status_code,
            "message": str(exc),
            "payload": exc.payload,
        }
    return {"ok": False, "status": None, "message": f"Transport error: {exc}", "payload": None}


def validate_connectivity(client: CapitalHttpClient) -> dict[str, Any]:
    """
    GET /api/v1/time: proves DNS, TLS, host and API key header are all usable.
    """

    try:
        return _result(client.request("GET", "/api/v1/time"))
    except requests.RequestException as exc:
        return _failure(exc)


def validate_session(
    client: CapitalHttpClient, identifier: str, password: str
) -> dict[str, Any]:
    """
    Validate credentials: POST /api/v1/session then GET /api/v1/session.

    The session is left open so the caller can keep using the client.
    """

    session = SessionAPI(client)
    try:
        session.create_session(identifier, password)
        return _result(session.get_session_details())
    except requests.RequestException as exc:
        return _failure(exc)
