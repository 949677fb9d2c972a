from __future__ import annotations

import responses

from capital_client.config import AccountEntry, AccountGroup
from capital_client.http import CapitalHttpClient
from capital_client.validation import (
    validate_account_groups,
    validate_connectivity,
    validate_session,
)

BASE = "https://demo-api-capital.backend-capital.com"


def test_validate_account_groups_detects_duplicates() -> None:
    group = AccountGroup(
        key="demo",
        environment="demo",
        currency="USD",
        accounts=[
            AccountEntry(name="Primary", type="CFD", account_id="123456789"),
            AccountEntry(name="Primary", type="CFD", account_id="123456789"),
        ],
    )
    warnings = validate_account_groups({"demo": group})
    assert any("duplicate account names" in warning for warning in warnings)
    assert any("reuses account_id" in warning for warning in warnings)


def test_validate_account_groups_invalid_currency() -> None:
    group = AccountGroup(
        key="demo",
        environment="demo",
        currency="US",
        accounts=[AccountEntry(name="Primary", type="CFD", account_id="123456789")],
    )
    warnings = validate_account_groups({"demo": group})
    assert any("currency" in warning for warning in warnings)


def test_validate_account_groups_account_id_format() -> None:
    group = AccountGroup(
        key="demo",
        environment="demo",
        currency="USD",
        accounts=[
            AccountEntry(name="Primary", type="CFD", account_id="ABC123"),
            AccountEntry(name="Spread", type="SPREADBET", account_id=""),
        ],
    )
    warnings = validate_account_groups({"demo": group})
    assert any("nonstandard account_id" in warning for warning in warnings)
    assert any("empty account_id" in warning for warning in warnings)


def test_validate_account_groups_clean() -> None:
    group = AccountGroup(
        key="demo",
        environment="demo",
        currency="EUR",
        accounts=[AccountEntry(name="Primary", type="CFD", account_id="123456789")],
    )
    assert validate_account_groups({"demo": group}) == []


@responses.activate
def test_validate_connectivity_ok() -> None:
    responses.add(responses.GET, f"{BASE}/api/v1/time", json={"serverTime": 1}, status=200)
    result = validate_connectivity(CapitalHttpClient(base_url=BASE, api_key="key"))
    assert result["ok"] is True
    assert "status" not in result
    assert result["payload"] == {"serverTime": 1}


@responses.activate
def test_validate_connectivity_reports_api_error() -> None:
    responses.add(
        responses.GET,
        f"{BASE}/api/v1/time",
        json={"errorCode": "error.service.unavailable"},
        status=503,
    )
    result = validate_connectivity(CapitalHttpClient(base_url=BASE, api_key="key"))
    assert result["ok"] is False
    assert result["status"] == 503
    assert "error.service.unavailable" in result["message"]


@responses.activate
def test_validate_session_bad_credentials() -> None:
    responses.add(
        responses.POST,
        f"{BASE}/api/v1/session",
        json={"errorCode": "error.invalid.details"},
        status=401,
    )
    client = CapitalHttpClient(base_url=BASE, api_key="key")
    result = validate_session(client, "user@example.com", "wrong")
    assert result["ok"] is False
    assert result["status"] == 401
    assert result["message"].startswith("Authentication failed")
    assert not client.is_authenticated()
