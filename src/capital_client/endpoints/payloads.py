"""
Request body and query builders shared by the sync and async endpoint groups.

Keeping them here means both flavours send byte-identical requests; the
endpoint modules only choose the HTTP method and path.
"""

from __future__ import annotations

from typing import Any
import base64

from ..models import check_direction, check_order_type, check_resolutions

RISK_FIELDS = {
    "guaranteed_stop": "guaranteedStop",
    "trailing_stop": "trailingStop",
    "stop_level": "stopLevel",
    "stop_distance": "stopDistance",
    "stop_amount": "stopAmount",
    "profit_level": "profitLevel",
    "profit_distance": "profitDistance",
    "profit_amount": "profitAmount",
}
ORDER_FIELDS = {
    **RISK_FIELDS,
    "level": "level",
    "good_till_date": "goodTillDate",
}


def _query_value(value: Any) -> Any:
    # aiohttp rejects bool params, and the API expects lowercase literals anyway.
    if isinstance(value, bool):
        return str(value).lower()
    return value


def compact_params(values: dict[str, Any]) -> dict[str, Any] | None:
    params = {key: _query_value(value) for key, value in values.items() if value is not None}
    return params or None


def _camel_body(fields: dict[str, str], values: dict[str, Any]) -> dict[str, Any]:
    unknown = sorted(set(values) - set(fields))
    if unknown:
        raise TypeError(f"Unexpected field(s): {', '.join(unknown)}")
    return {fields[key]: value for key, value in values.items() if value is not None}


def encode_password(encryption_key: str, timestamp: int, password: str) -> str:
    """
    Encode the password for an encryptedPassword login.

    Only base64(password|timestamp) is produced; the vendor additionally
    expects RSA encryption with encryption_key, which is not done here.
    """

    raw = f"{password}|{timestamp}".encode("utf-8")
    return base64.b64encode(raw).decode("ascii")


def session_body(
    identifier: str, password: str, encrypted_password: bool | None = None
) -> dict[str, Any]:
    body: dict[str, Any] = {"identifier": identifier, "password": password}
    if encrypted_password is not None:
        body["encryptedPassword"] = encrypted_password
    return body


def preferences_body(
    leverages: dict[str, int] | None = None, hedging_mode: bool | None = None
) -> dict[str, Any]:
    body: dict[str, Any] = {}
    if leverages is not None:
        body["leverages"] = dict(leverages)
    if hedging_mode is not None:
        body["hedgingMode"] = hedging_mode
    if not body:
        raise ValueError("Provide leverages and/or hedging_mode to update preferences.")
    return body


def activity_params(
    *,
    date_from: str | None = None,
    date_to: str | None = None,
    last_period: int | None = None,
    detailed: bool | None = None,
    deal_id: str | None = None,
    filter: str | None = None,
) -> dict[str, Any] | None:
    return compact_params(
        {
            "from": date_from,
            "to": date_to,
            "lastPeriod": last_period,
            "detailed": detailed,
            "dealId": deal_id,
            "filter": filter,
        }
    )


def transaction_params(
    *,
    date_from: str | None = None,
    date_to: str | None = None,
    last_period: int | None = None,
    transaction_type: str | None = None,
) -> dict[str, Any] | None:
    return compact_params(
        {
            "from": date_from,
            "to": date_to,
            "lastPeriod": last_period,
            "type": transaction_type,
        }
    )


def position_body(epic: str, direction: str, size: float, **risk: Any) -> dict[str, Any]:
    body: dict[str, Any] = {
        "epic": epic,
        "direction": check_direction(direction),
        "size": size,
    }
    body.update(_camel_body(RISK_FIELDS, risk))
    return body


def position_update_body(**risk: Any) -> dict[str, Any]:
    return _camel_body(RISK_FIELDS, risk)


def working_order_body(
    epic: str,
    direction: str,
    size: float,
    level: float,
    order_type: str,
    **risk: Any,
) -> dict[str, Any]:
    body: dict[str, Any] = {
        "epic": epic,
        "direction": check_direction(direction),
        "size": size,
        "level": level,
        "type": check_order_type(order_type),
    }
    body.update(_camel_body(ORDER_FIELDS, risk))
    return body


def working_order_update_body(**changes: Any) -> dict[str, Any]:
    return _camel_body(ORDER_FIELDS, changes)


def markets_params(
    *, search_term: str | None = None, epics: list[str] | str | None = None
) -> dict[str, Any] | None:
    if isinstance(epics, (list, tuple)):
        epics = ",".join(epics)
    return compact_params({"searchTerm": search_term, "epics": epics})


def price_params(
    *,
    resolution: str | None = None,
    max_bars: int | None = None,
    date_from: str | None = None,
    date_to: str | None = None,
) -> dict[str, Any] | None:
    if resolution is not None:
        check_resolutions([resolution])
    return compact_params(
        {"resolution": resolution, "max": max_bars, "from": date_from, "to": date_to}
    )


def sentiment_params(market_ids: list[str] | str | None = None) -> dict[str, Any] | None:
    if isinstance(market_ids, (list, tuple)):
        market_ids = ",".join(market_ids)
    return compact_params({"marketIds": market_ids or None})


def watchlist_body(name: str, epics: list[str] | None = None) -> dict[str, Any]:
    body: dict[str, Any] = {"name": name}
    if epics:
        body["epics"] = list(epics)
    return body
