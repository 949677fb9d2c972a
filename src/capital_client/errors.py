"""
Error types raised by the REST clients and reported by the stream client.

Capital.com reports failures as a JSON body like {"errorCode": "error.invalid.details"}.
Both HTTP clients raise subclasses of their transport library's own HTTP error so
callers can keep catching requests.HTTPError / aiohttp.ClientResponseError.
"""

from __future__ import annotations

from typing import Any

import aiohttp
import requests

AUTH_FAILED_MESSAGE = "Authentication failed - check your credentials and API key"


def extract_error_code(payload: Any) -> str | None:
    """
    Pull the vendor error code (or message) out of an error body.
    """

    if isinstance(payload, dict):
        code = payload.get("errorCode") or payload.get("message")
        return str(code) if code else None
    if isinstance(payload, str) and payload.strip():
        return payload.strip()
    return None


def describe_error(status: int | None, payload: Any, reason: str | None = None) -> str:
    code = extract_error_code(payload) or reason or "Unknown error"
    message = f"API Error ({status if status is not None else 'unknown'}): {code}"
    if status == 401:
        message = f"{AUTH_FAILED_MESSAGE}. {message}"
    return message


class CapitalAPIError(requests.HTTPError):
    """
    Raised by CapitalHttpClient when the API answers with a non-2xx status.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        error_code: str | None = None,
        payload: Any = None,
        response: requests.Response | None = None,
    ) -> None:
        super().__init__(message, response=response)
        self.status_code = status_code
        self.error_code = error_code
        self.payload = payload

    @classmethod
    def from_response(cls, response: requests.Response) -> "CapitalAPIError":
        try:
            payload: Any = response.json()
        except ValueError:
            payload = response.text
        return cls(
            describe_error(response.status_code, payload, response.reason),
            status_code=response.status_code,
            error_code=extract_error_code(payload),
            payload=payload,
            response=response,
        )


class CapitalAsyncAPIError(aiohttp.ClientResponseError):
    """
    Raised by CapitalAsyncHttpClient when the API answers with a non-2xx status.
    """

    def __init__(
        self,
        request_info: aiohttp.RequestInfo,
        history: tuple,
        *,
        status: int,
        payload: Any = None,
        reason: str | None = None,
        headers: Any = None,
    ) -> None:
        super().__init__(
            request_info,
            history,
            status=status,
            message=describe_error(status, payload, reason),
            headers=headers,
        )
        self.error_code = extract_error_code(payload)
        self.payload = payload


class StreamParseError(ValueError):
    """
    A stream frame that is not a JSON object. Reported, never fatal.
    """


class ReconnectExhaustedError(ConnectionError):
    """
    The stream gave up after max_reconnect_attempts consecutive failures.
    """
