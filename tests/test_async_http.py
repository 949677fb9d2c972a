import json

import aiohttp
import pytest
from multidict import CIMultiDict, CIMultiDictProxy
from yarl import URL

from capital_client.api import CapitalAsyncAPI
from capital_client.async_http import CapitalAsyncHttpClient
from capital_client.errors import CapitalAsyncAPIError


class DummyResponse:
    def __init__(self, payload, *, status=200, headers=None, url="https://example.com"):
        self._payload = payload
        self.status = status
        self.reason = "Unauthorized" if status == 401 else "OK"
        self.headers = CIMultiDictProxy(CIMultiDict(headers or {}))
        self.history = ()
        self.request_info = aiohttp.RequestInfo(
            url=URL(url),
            method="GET",
            headers=CIMultiDictProxy(CIMultiDict()),
            real_url=URL(url),
        )

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return None

    async def text(self):
        if self._payload is None:
            return ""
        return json.dumps(self._payload)


class DummySession:
    def __init__(self, responses=None):
        self.calls = []
        self._responses = list(responses or [])

    def request(self, *, method, url, params=None, json=None, headers=None):
        self.calls.append(
            {"method": method, "url": url, "params": params, "json": json, "headers": headers}
        )
        if self._responses:
            return self._responses.pop(0)
        return DummyResponse({"ok": True})

    async def close(self):
        return None


def make_client(session):
    client = CapitalAsyncHttpClient(base_url="https://example.com", api_key="secret")
    client._session = session
    return client


@pytest.mark.asyncio
async def test_async_http_client_sets_headers():
    dummy = DummySession()
    client = make_client(dummy)
    client.set_session_tokens("cst-1", "sec-1")
    payload = await client.request("GET", "/api/v1/accounts")
    assert payload["ok"] is True
    headers = dummy.calls[0]["headers"]
    assert headers["X-CAP-API-KEY"] == "secret"
    assert headers["CST"] == "cst-1"
    assert headers["X-SECURITY-TOKEN"] == "sec-1"
    assert dummy.calls[0]["url"] == "https://example.com/api/v1/accounts"


@pytest.mark.asyncio
async def test_async_login_stores_tokens():
    dummy = DummySession(
        [
            DummyResponse(
                {"currentAccountId": "111"},
                headers={"cst": "cst-1", "x-security-token": "sec-1"},
            )
        ]
    )
    api = CapitalAsyncAPI(make_client(dummy))
    await api.session.create_session("me@example.com", "pw")
    assert api.is_authenticated()
    assert api.get_session_tokens() == {"cst": "cst-1", "security_token": "sec-1"}
    assert "CST" not in dummy.calls[0]["headers"]
    assert dummy.calls[0]["json"] == {"identifier": "me@example.com", "password": "pw"}


@pytest.mark.asyncio
async def test_async_401_clears_session():
    dummy = DummySession([DummyResponse({"errorCode": "error.null.client.token"}, status=401)])
    client = make_client(dummy)
    client.set_session_tokens("cst-1", "sec-1")
    with pytest.raises(CapitalAsyncAPIError) as excinfo:
        await client.request("GET", "/api/v1/positions")
    assert excinfo.value.status == 401
    assert excinfo.value.error_code == "error.null.client.token"
    assert "Authentication failed" in excinfo.value.message
    assert not client.is_authenticated()
    assert client.session_state.cst is None
    assert client.session_state.security_token is None


@pytest.mark.asyncio
async def test_async_empty_body_decodes_to_empty_dict():
    dummy = DummySession([DummyResponse(None)])
    client = make_client(dummy)
    assert await client.request("DELETE", "/api/v1/watchlists/1") == {}


@pytest.mark.asyncio
async def test_async_query_params_are_strings():
    dummy = DummySession()
    api = CapitalAsyncAPI(make_client(dummy))
    await api.accounts.get_activity_history(last_period=600, detailed=True)
    assert dummy.calls[0]["params"] == {"lastPeriod": 600, "detailed": "true"}
