from __future__ import annotations

import base64
import json

import pytest
import requests
import responses

from capital_client.api import CapitalAPI
from capital_client.errors import CapitalAPIError
from capital_client.http import CapitalHttpClient

BASE = "https://example.com"


def make_api() -> CapitalAPI:
    return CapitalAPI(CapitalHttpClient(base_url=BASE, api_key="key-1"))


def add_login(status: int = 200) -> None:
    responses.add(
        responses.POST,
        f"{BASE}/api/v1/session",
        json={"currentAccountId": "111", "accounts": []},
        headers={"CST": "cst-1", "X-SECURITY-TOKEN": "sec-1"},
        status=status,
    )


@responses.activate
def test_http_client_request_injects_api_key_header() -> None:
    client = CapitalHttpClient(base_url=BASE, api_key="secret")
    responses.add(responses.GET, f"{BASE}/api/v1/time", json={"serverTime": 1}, status=200)
    payload = client.request("GET", "/api/v1/time")
    assert payload == {"serverTime": 1}
    headers = responses.calls[0].request.headers
    assert headers["X-CAP-API-KEY"] == "secret"
    assert headers["Accept"] == "application/json"
    assert "CST" not in headers


@responses.activate
def test_create_session_reads_tokens_from_headers() -> None:
    api = make_api()
    api.http.set_session_tokens("stale-cst", "stale-sec")
    add_login()
    payload = api.session.create_session("me@example.com", "pw")

    assert payload["currentAccountId"] == "111"
    assert api.is_authenticated()
    assert api.get_session_tokens() == {"cst": "cst-1", "security_token": "sec-1"}
    assert api.http.session_state.account_id == "111"
    request = responses.calls[0].request
    assert json.loads(request.body) == {"identifier": "me@example.com", "password": "pw"}
    # The login call never carries the previous session's tokens.
    assert "CST" not in request.headers
    assert request.headers["X-CAP-API-KEY"] == "key-1"


@responses.activate
def test_session_headers_attached_after_login() -> None:
    api = make_api()
    add_login()
    responses.add(responses.GET, f"{BASE}/api/v1/accounts", json={"accounts": []}, status=200)
    api.session.create_session("me@example.com", "pw")
    api.accounts.get_all_accounts()
    headers = responses.calls[1].request.headers
    assert headers["CST"] == "cst-1"
    assert headers["X-SECURITY-TOKEN"] == "sec-1"
    assert headers["X-CAP-API-KEY"] == "key-1"


@responses.activate
def test_401_clears_session_tokens() -> None:
    api = make_api()
    api.http.set_session_tokens("cst-1", "sec-1", account_id="111")
    responses.add(
        responses.GET,
        f"{BASE}/api/v1/positions",
        json={"errorCode": "error.invalid.session.token"},
        status=401,
    )
    with pytest.raises(CapitalAPIError) as excinfo:
        api.trading.get_all_positions()

    assert excinfo.value.status_code == 401
    assert "Authentication failed" in str(excinfo.value)
    assert isinstance(excinfo.value, requests.HTTPError)
    assert not api.is_authenticated()
    assert api.get_session_tokens() == {"cst": None, "security_token": None}


@responses.activate
def test_vendor_error_code_is_surfaced() -> None:
    api = make_api()
    responses.add(
        responses.POST,
        f"{BASE}/api/v1/positions",
        json={"errorCode": "error.invalid.size.minvalue: 0.01"},
        status=400,
    )
    with pytest.raises(CapitalAPIError) as excinfo:
        api.trading.create_position("GOLD", "BUY", 0.0001)
    assert excinfo.value.error_code == "error.invalid.size.minvalue: 0.01"
    assert str(excinfo.value) == "API Error (400): error.invalid.size.minvalue: 0.01"


@responses.activate
def test_logout_clears_session_and_handles_empty_body() -> None:
    api = make_api()
    api.http.set_session_tokens("cst-1", "sec-1")
    responses.add(responses.DELETE, f"{BASE}/api/v1/session", body="", status=200)
    assert api.session.logout() == {}
    assert not api.is_authenticated()


@responses.activate
def test_create_session_without_header_tokens_stays_unauthenticated() -> None:
    api = make_api()
    responses.add(
        responses.POST,
        f"{BASE}/api/v1/session",
        json={"currentAccountId": "111"},
        status=200,
    )
    api.session.create_session("me@example.com", "pw")
    assert not api.is_authenticated()


def test_create_session_requires_api_key() -> None:
    api = CapitalAPI(CapitalHttpClient(base_url=BASE))
    with pytest.raises(ValueError, match="API key is required"):
        api.session.create_session("me@example.com", "pw")
    with pytest.raises(ValueError, match="API key is required"):
        api.session.get_encryption_key()


@responses.activate
def test_create_session_with_encryption_posts_encoded_password() -> None:
    api = make_api()
    responses.add(
        responses.GET,
        f"{BASE}/api/v1/session/encryptionKey",
        json={"encryptionKey": "PUBKEY", "timeStamp": 1700000000000},
        status=200,
    )
    add_login()
    api.session.create_session_with_encryption("me@example.com", "pw")
    body = json.loads(responses.calls[1].request.body)
    assert body["encryptedPassword"] is True
    assert body["password"] == base64.b64encode(b"pw|1700000000000").decode("ascii")
    assert api.is_authenticated()


@responses.activate
def test_switch_account_updates_account_id() -> None:
    api = make_api()
    api.http.set_session_tokens("cst-1", "sec-1", account_id="111")
    responses.add(responses.PUT, f"{BASE}/api/v1/session", json={"dealingEnabled": True}, status=200)
    api.session.switch_account("222")
    assert json.loads(responses.calls[0].request.body) == {"accountId": "222"}
    assert api.http.session_state.account_id == "222"


def test_create_uses_demo_host() -> None:
    api = CapitalAPI.create("key-1", demo_mode=True)
    assert api.http.base_url == "https://demo-api-capital.backend-capital.com"
    assert CapitalAPI.create().http.base_url == "https://api-capital.backend-capital.com"
