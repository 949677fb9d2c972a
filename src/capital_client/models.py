"""
Minimal models for session state and streaming messages.

Purpose:
- Give the session tokens and stream frames a typed shape.
- Keep parsing lightweight; REST payloads stay plain dicts.

Notes:
- Stream events keep the raw payload for forward compatibility.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

DIRECTIONS = frozenset({"BUY", "SELL"})
ORDER_TYPES = frozenset({"LIMIT", "STOP"})
RESOLUTIONS = (
    "MINUTE",
    "MINUTE_5",
    "MINUTE_15",
    "MINUTE_30",
    "HOUR",
    "HOUR_4",
    "DAY",
    "WEEK",
)
OHLC_TYPES = frozenset({"classic", "heikin-ashi"})

# Stream destinations.
MARKET_DATA_SUBSCRIBE = "marketData.subscribe"
MARKET_DATA_UNSUBSCRIBE = "marketData.unsubscribe"
OHLC_SUBSCRIBE = "OHLCMarketData.subscribe"
OHLC_UNSUBSCRIBE = "OHLCMarketData.unsubscribe"
PING = "ping"
QUOTE = "quote"
OHLC_EVENT = "ohlc.event"
SUBSCRIPTION_DESTINATIONS = frozenset(
    {MARKET_DATA_SUBSCRIBE, MARKET_DATA_UNSUBSCRIBE, OHLC_SUBSCRIBE, OHLC_UNSUBSCRIBE}
)


def check_direction(direction: str) -> str:
    value = direction.upper()
    if value not in DIRECTIONS:
        raise ValueError(f"Unsupported direction '{direction}'. Use BUY or SELL.")
    return value


def check_order_type(order_type: str) -> str:
    value = order_type.upper()
    if value not in ORDER_TYPES:
        raise ValueError(f"Unsupported order type '{order_type}'. Use LIMIT or STOP.")
    return value


def check_resolutions(resolutions: list[str]) -> list[str]:
    unknown = [value for value in resolutions if value not in RESOLUTIONS]
    if unknown:
        raise ValueError(
            f"Unsupported resolution(s) {unknown}. Use one of: {', '.join(RESOLUTIONS)}"
        )
    return list(resolutions)


def check_ohlc_types(types: list[str]) -> list[str]:
    unknown = [value for value in types if value not in OHLC_TYPES]
    if unknown:
        raise ValueError(f"Unsupported OHLC type(s) {unknown}. Use classic or heikin-ashi.")
    return list(types)


@dataclass
class SessionState:
    """
    Tokens returned by POST /api/v1/session plus the active account.

    Owned by one HTTP client. Never persisted.
    """

    cst: str | None = None
    security_token: str | None = None
    account_id: str | None = None

    def is_authenticated(self) -> bool:
        return bool(self.cst) and bool(self.security_token)

    def clear(self) -> None:
        self.cst = None
        self.security_token = None
        self.account_id = None

    def tokens(self) -> dict[str, str | None]:
        return {"cst": self.cst, "security_token": self.security_token}


@dataclass(frozen=True)
class StreamEnvelope:
    """
    One frame on the streaming socket, inbound or outbound.
    """

    destination: str
    correlation_id: str | None
    cst: str | None
    security_token: str | None
    payload: Any = None
    status: str | None = None

    def to_wire(self) -> dict[str, Any]:
        # Absent values are omitted from the frame, never sent as null.
        frame: dict[str, Any] = {
            "destination": self.destination,
            "correlationId": self.correlation_id,
            "cst": self.cst,
            "securityToken": self.security_token,
        }
        if self.payload is not None:
            frame["payload"] = self.payload
        return {key: value for key, value in frame.items() if value is not None}

    @classmethod
    def from_wire(cls, frame: dict[str, Any]) -> "StreamEnvelope":
        correlation_id = frame.get("correlationId")
        return cls(
            destination=str(frame.get("destination", "")),
            correlation_id=str(correlation_id) if correlation_id is not None else None,
            cst=frame.get("cst"),
            security_token=frame.get("securityToken"),
            payload=frame.get("payload"),
            status=frame.get("status"),
        )


@dataclass(frozen=True)
class QuoteEvent:
    epic: str | None
    product: str | None
    bid: float | None
    bid_qty: float | None
    offer: float | None
    offer_qty: float | None
    timestamp: int | None
    raw: dict[str, Any]


@dataclass(frozen=True)
class OHLCEvent:
    epic: str | None
    resolution: str | None
    type: str | None
    price_type: str | None
    time: int | None
    open: float | None
    high: float | None
    low: float | None
    close: float | None
    raw: dict[str, Any]


def _as_dict(payload: Any) -> dict[str, Any]:
    return payload if isinstance(payload, dict) else {}


def parse_quote(payload: Any) -> QuoteEvent:
    data = _as_dict(payload)
    return QuoteEvent(
        epic=data.get("epic"),
        product=data.get("product"),
        bid=data.get("bid"),
        bid_qty=data.get("bidQty"),
        offer=data.get("ofr"),
        offer_qty=data.get("ofrQty"),
        timestamp=data.get("timestamp"),
        raw=data,
    )


def parse_ohlc(payload: Any) -> OHLCEvent:
    data = _as_dict(payload)
    return OHLCEvent(
        epic=data.get("epic"),
        resolution=data.get("resolution"),
        type=data.get("type"),
        price_type=data.get("priceType"),
        time=data.get("t"),
        open=data.get("o"),
        high=data.get("h"),
        low=data.get("l"),
        close=data.get("c"),
        raw=data,
    )
