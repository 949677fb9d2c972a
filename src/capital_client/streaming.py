"""
Streaming client for the Capital.com WebSocket API (quotes + OHLC bars).

Notes:
- One socket per client instance, authenticated with the CST/X-SECURITY-TOKEN
  pair obtained from POST /api/v1/session.
- Every outbound frame is a JSON envelope:
  {destination, correlationId, cst, securityToken, payload?}.

Logic flow:
1) connect() opens the socket; on open it replays every stored subscription
   and starts a reader task.
2) The reader decodes frames and dispatches them by "destination" to the
   registered listeners (quote, ohlc, pong, subscription, message).
3) On an unexpected close it waits reconnect_interval_seconds and reconnects,
   at most max_reconnect_attempts times in a row, then reports a terminal error.
4) disconnect() tears everything down and forgets all subscriptions.

State machine:
disconnected -> connecting -> open -> (disconnected | closing -> disconnected)
"""

from __future__ import annotations

from contextlib import suppress
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable
import asyncio
import copy
import json
import logging

import aiohttp

from .config import DEFAULT_STREAMING_URL
from .errors import ReconnectExhaustedError, StreamParseError
from .models import (
    MARKET_DATA_SUBSCRIBE,
    MARKET_DATA_UNSUBSCRIBE,
    OHLC_EVENT,
    OHLC_SUBSCRIBE,
    OHLC_UNSUBSCRIBE,
    PING,
    QUOTE,
    SUBSCRIPTION_DESTINATIONS,
    OHLCEvent,
    QuoteEvent,
    StreamEnvelope,
    check_ohlc_types,
    check_resolutions,
    parse_ohlc,
    parse_quote,
)

logger = logging.getLogger(__name__)

# The vendor caps a single subscription at 40 instruments.
MAX_EPICS_PER_SUBSCRIPTION = 40
DEFAULT_PING_INTERVAL_SECONDS = 540.0
EVENTS = ("quote", "ohlc", "pong", "subscription", "message", "error", "connect", "disconnect")
# Failures that mean "the socket is gone" rather than a bug in this module.
TRANSPORT_ERRORS = (aiohttp.ClientError, asyncio.TimeoutError, OSError)

SubscriptionKey = tuple


class ConnectionState(str, Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    OPEN = "open"
    CLOSING = "closing"


def _epic_list(epics: list[str]) -> list[str]:
    values = [str(epic) for epic in epics]
    if not values:
        raise ValueError("At least one epic is required.")
    if len(values) > MAX_EPICS_PER_SUBSCRIPTION:
        raise ValueError(
            f"At most {MAX_EPICS_PER_SUBSCRIPTION} epics per subscription, got {len(values)}."
        )
    return values


def market_data_key(epics: list[str]) -> SubscriptionKey:
    return ("marketData", tuple(epics))


def ohlc_key(
    epics: list[str], resolutions: list[str] | None, types: list[str] | None
) -> SubscriptionKey:
    return (
        "ohlc",
        tuple(epics),
        tuple(resolutions) if resolutions else ("default",),
        tuple(types) if types else ("classic",),
    )


@dataclass
class CapitalStreamClient:
    """
    Async WebSocket client with subscription replay and bounded reconnects.
    """

    cst: str = field(repr=False)
    security_token: str = field(repr=False)
    streaming_url: str | None = None
    reconnect_interval_seconds: float = 5.0
    max_reconnect_attempts: int = 5
    user_agent: str = "Capital API Client"
    _session: aiohttp.ClientSession | None = field(default=None, repr=False)

    def __post_init__(self) -> None:
        if not self.cst or not self.security_token:
            raise ValueError("cst and security_token are required for the stream client.")
        if not self.streaming_url:
            self.streaming_url = DEFAULT_STREAMING_URL
        self._owns_session = self._session is None
        self._ws: Any = None
        self._state = ConnectionState.DISCONNECTED
        self._correlation_counter = 0
        self._reconnect_attempts = 0
        self._exhausted = False
        self._subscriptions: dict[SubscriptionKey, tuple[str, dict[str, Any]]] = {}
        self._listeners: dict[str, list[Callable[..., Any]]] = {name: [] for name in EVENTS}
        self._reader_task: asyncio.Task | None = None
        self._reconnect_task: asyncio.Task | None = None
        self._ping_task: asyncio.Task | None = None
        # Bumped by disconnect(); an _open() started under an older value is stale.
        self._generation = 0
        self._connect_lock = asyncio.Lock()

    async def __aenter__(self) -> "CapitalStreamClient":
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.disconnect()

    # Listener registration. Each returns a callable that removes the listener.

    def on_quote(self, callback: Callable[[QuoteEvent], Any]) -> Callable[[], None]:
        return self._add_listener("quote", callback)

    def on_ohlc(self, callback: Callable[[OHLCEvent], Any]) -> Callable[[], None]:
        return self._add_listener("ohlc", callback)

    def on_pong(self, callback: Callable[[StreamEnvelope], Any]) -> Callable[[], None]:
        return self._add_listener("pong", callback)

    def on_subscription(
        self, callback: Callable[[StreamEnvelope], Any]
    ) -> Callable[[], None]:
        return self._add_listener("subscription", callback)

    def on_message(self, callback: Callable[[StreamEnvelope], Any]) -> Callable[[], None]:
        return self._add_listener("message", callback)

    def on_error(self, callback: Callable[[Exception], Any]) -> Callable[[], None]:
        return self._add_listener("error", callback)

    def on_connect(self, callback: Callable[[], Any]) -> Callable[[], None]:
        return self._add_listener("connect", callback)

    def on_disconnect(self, callback: Callable[[], Any]) -> Callable[[], None]:
        return self._add_listener("disconnect", callback)

    def _add_listener(self, event: str, callback: Callable[..., Any]) -> Callable[[], None]:
        listeners = self._listeners[event]
        listeners.append(callback)

        def remove() -> None:
            if callback in listeners:
                listeners.remove(callback)

        return remove

    def _emit(self, event: str, *args: Any) -> None:
        listeners = list(self._listeners[event])
        if event == "error" and not listeners:
            logger.error("Stream error with no listener: %s", args[0] if args else None)
            return
        for callback in listeners:
            try:
                callback(*args)
            except Exception:
                # Listener failures are logged; dispatch continues.
                logger.exception("Stream '%s' listener failed", event)

    # Introspection.

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def reconnect_attempts(self) -> int:
        return self._reconnect_attempts

    @property
    def subscriptions(self) -> dict[SubscriptionKey, dict[str, Any]]:
        return {key: copy.deepcopy(payload) for key, (_, payload) in self._subscriptions.items()}

    def is_connected(self) -> bool:
        return (
            self._state is ConnectionState.OPEN
            and self._ws is not None
            and not self._ws.closed
        )

    def update_tokens(self, cst: str, security_token: str) -> None:
        """
        Swap credentials for the next frame or connect.

        An open socket is not re-authenticated.
        """

        self.cst = cst
        self.security_token = security_token

    # Connection lifecycle.

    def _ensure_session(self) -> aiohttp.ClientSession:
        if self._session is None:
            self._session = aiohttp.ClientSession()
            self._owns_session = True
        return self._session

    async def connect(self) -> None:
        """
        Open the socket and replay stored subscriptions.

        Returns once the socket is open. A failed attempt is reported through
        on_error, schedules a reconnect, and is re-raised to the caller.
        Overlapping calls share one socket: later callers wait for the first.
        """

        async with self._connect_lock:
            if self.is_connected():
                return
            if self._exhausted:
                raise RuntimeError(
                    "Max reconnection attempts reached; create a new stream client to resume"
                )
            if self._reconnect_task is not None:
                self._reconnect_task.cancel()
                self._reconnect_task = None
            await self._open()

    async def _open(self) -> None:
        generation = self._generation
        self._state = ConnectionState.CONNECTING
        session = self._ensure_session()
        headers = {
            "CST": self.cst,
            "X-SECURITY-TOKEN": self.security_token,
            "User-Agent": self.user_agent,
        }
        try:
            ws = await session.ws_connect(self.streaming_url, headers=headers)
        except TRANSPORT_ERRORS as exc:
            if generation != self._generation:
                logger.debug("Stream connect failed after disconnect: %s", exc)
                raise
            logger.warning("Stream connect to %s failed: %s", self.streaming_url, exc)
            self._emit("error", exc)
            self._handle_close()
            raise

        if generation != self._generation:
            logger.info("Stream disconnected during handshake; closing new socket")
            await ws.close()
            return

        self._ws = ws
        self._state = ConnectionState.OPEN
        self._reconnect_attempts = 0
        logger.info("Stream connected to %s", self.streaming_url)
        self._emit("connect")
        self._reader_task = asyncio.create_task(self._read_loop(ws))
        await self._replay_subscriptions()

    async def _replay_subscriptions(self) -> None:
        if self._subscriptions:
            logger.info("Replaying %d stream subscription(s)", len(self._subscriptions))
        for destination, payload in list(self._subscriptions.values()):
            try:
                await self._send(self._envelope(destination, payload))
            except (RuntimeError, *TRANSPORT_ERRORS) as exc:
                # The reader notices the dead socket and schedules a reconnect.
                self._emit("error", exc)
                return

    async def _read_loop(self, ws: Any) -> None:
        try:
            async for msg in ws:
                if msg.type in (aiohttp.WSMsgType.TEXT, aiohttp.WSMsgType.BINARY):
                    self.handle_message(msg.data)
                elif msg.type == aiohttp.WSMsgType.ERROR:
                    self._emit("error", ws.exception() or ConnectionError("WebSocket error"))
        except TRANSPORT_ERRORS as exc:
            self._emit("error", exc)
        if self._ws is ws and self._state is not ConnectionState.CLOSING:
            logger.warning("Stream closed by peer (code=%s)", getattr(ws, "close_code", None))
            self._handle_close()

    def _handle_close(self) -> None:
        self._ws = None
        self._reader_task = None
        self._state = ConnectionState.DISCONNECTED
        self._emit("disconnect")
        if self._reconnect_attempts < self.max_reconnect_attempts:
            self._reconnect_attempts += 1
            logger.info(
                "Stream reconnect %d/%d in %.1fs",
                self._reconnect_attempts,
                self.max_reconnect_attempts,
                self.reconnect_interval_seconds,
            )
            self._reconnect_task = asyncio.create_task(self._reconnect_after_delay())
        else:
            logger.error(
                "Stream gave up after %d reconnect attempts", self.max_reconnect_attempts
            )
            self._reconnect_task = None
            self._exhausted = True
            self.stop_auto_ping()
            self._emit("error", ReconnectExhaustedError("Max reconnection attempts reached"))

    async def _reconnect_after_delay(self) -> None:
        await asyncio.sleep(self.reconnect_interval_seconds)
        try:
            async with self._connect_lock:
                if not self.is_connected():
                    await self._open()
        except TRANSPORT_ERRORS as exc:
            # Already reported by _open(), which also scheduled the next attempt.
            logger.debug("Stream reconnect attempt failed: %s", exc)

    async def disconnect(self) -> None:
        """
        Close the socket, stop timers and forget every subscription.
        """

        self._state = ConnectionState.CLOSING
        self._generation += 1
        current = asyncio.current_task()
        for task in (self._reconnect_task, self._ping_task):
            if task is not None and task is not current:
                task.cancel()
        self._reconnect_task = None
        self._ping_task = None

        ws, self._ws = self._ws, None
        reader, self._reader_task = self._reader_task, None
        if ws is not None:
            await ws.close()
        if reader is not None and reader is not current:
            reader.cancel()
            with suppress(asyncio.CancelledError):
                await reader

        self._subscriptions.clear()
        self._state = ConnectionState.DISCONNECTED
        if ws is not None:
            self._emit("disconnect")
        if self._owns_session and self._session is not None:
            await self._session.close()
            self._session = None
        logger.info("Stream disconnected")

    # Frames.

    def _next_correlation_id(self) -> str:
        self._correlation_counter += 1
        return str(self._correlation_counter)

    def _envelope(self, destination: str, payload: dict[str, Any] | None = None) -> StreamEnvelope:
        return StreamEnvelope(
            destination=destination,
            correlation_id=self._next_correlation_id(),
            cst=self.cst,
            security_token=self.security_token,
            payload=payload,
        )

    async def _send(self, envelope: StreamEnvelope) -> None:
        if not self.is_connected():
            raise RuntimeError("WebSocket is not connected")
        await self._ws.send_str(json.dumps(envelope.to_wire()))

    def handle_message(self, data: str | bytes) -> None:
        """
        Decode one inbound frame and dispatch it to listeners.

        Bad frames are reported through on_error and dropped.
        """

        try:
            frame = json.loads(data)
        except (TypeError, ValueError) as exc:
            logger.warning("Dropping malformed stream frame: %s", exc)
            self._emit("error", StreamParseError(f"Failed to parse WebSocket message: {exc}"))
            return
        if not isinstance(frame, dict):
            self._emit(
                "error",
                StreamParseError(
                    "Failed to parse WebSocket message: expected an object, "
                    f"got {type(frame).__name__}"
                ),
            )
            return

        envelope = StreamEnvelope.from_wire(frame)
        destination = envelope.destination
        if destination == QUOTE:
            self._emit("quote", parse_quote(envelope.payload))
        elif destination == OHLC_EVENT:
            self._emit("ohlc", parse_ohlc(envelope.payload))
        elif destination == PING:
            self._emit("pong", envelope)
        elif destination in SUBSCRIPTION_DESTINATIONS:
            self._emit("subscription", envelope)
        else:
            self._emit("message", envelope)

    # Subscriptions. The table is updated before sending, so a subscription
    # made while disconnected raises now and is still replayed on connect.

    async def subscribe_to_market_data(self, epics: list[str]) -> None:
        values = _epic_list(epics)
        payload = {"epics": values}
        envelope = self._envelope(MARKET_DATA_SUBSCRIBE, payload)
        self._subscriptions[market_data_key(values)] = (MARKET_DATA_SUBSCRIBE, payload)
        await self._send(envelope)

    async def unsubscribe_from_market_data(self, epics: list[str]) -> None:
        values = _epic_list(epics)
        envelope = self._envelope(MARKET_DATA_UNSUBSCRIBE, {"epics": values})
        self._subscriptions.pop(market_data_key(values), None)
        await self._send(envelope)

    async def subscribe_to_ohlc_data(
        self,
        epics: list[str],
        resolutions: list[str] | None = None,
        bar_type: str | None = None,
    ) -> None:
        """
        Subscribe to OHLC bars.

        Inputs:
        - resolutions: MINUTE ... WEEK; the server defaults to MINUTE.
        - bar_type: classic (default) or heikin-ashi.
        """

        values = _epic_list(epics)
        payload: dict[str, Any] = {"epics": values}
        if resolutions:
            payload["resolutions"] = check_resolutions(resolutions)
        if bar_type:
            check_ohlc_types([bar_type])
            payload["type"] = bar_type
        envelope = self._envelope(OHLC_SUBSCRIBE, payload)
        key = ohlc_key(values, resolutions, [bar_type] if bar_type else None)
        self._subscriptions[key] = (OHLC_SUBSCRIBE, payload)
        await self._send(envelope)

    async def unsubscribe_from_ohlc_data(
        self,
        epics: list[str],
        resolutions: list[str] | None = None,
        types: list[str] | None = None,
    ) -> None:
        values = _epic_list(epics)
        payload: dict[str, Any] = {"epics": values}
        if resolutions:
            payload["resolutions"] = check_resolutions(resolutions)
        if types:
            payload["types"] = check_ohlc_types(types)
        envelope = self._envelope(OHLC_UNSUBSCRIBE, payload)
        self._subscriptions.pop(ohlc_key(values, resolutions, types), None)
        await self._send(envelope)

    # Keepalive.

    async def ping(self) -> None:
        await self._send(self._envelope(PING))

    def start_auto_ping(self, interval_seconds: float = DEFAULT_PING_INTERVAL_SECONDS) -> None:
        """
        Ping every interval_seconds while connected (vendor idle timeout is 10 minutes).
        """

        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be > 0")
        self.stop_auto_ping()
        self._ping_task = asyncio.create_task(self._auto_ping(interval_seconds))

    def stop_auto_ping(self) -> None:
        if self._ping_task is not None:
            self._ping_task.cancel()
            self._ping_task = None

    async def _auto_ping(self, interval_seconds: float) -> None:
        while True:
            await asyncio.sleep(interval_seconds)
            if not self.is_connected():
                continue
            try:
                await self.ping()
            except (RuntimeError, *TRANSPORT_ERRORS) as exc:
                self._emit("error", exc)
