"""
Stream quotes (and optionally OHLC bars) to stdout as JSONL.

Usage:
    python scripts/stream_quotes.py EPIC [EPIC ...]

Env:
- CAPITAL_GROUP / CAPITAL_ACCOUNT: accounts.yaml selection (default demo/Primary).
- CAPITAL_STREAM_SECONDS: stop after N seconds (default 30, 0 = run forever).
- CAPITAL_STREAM_OHLC: also subscribe to MINUTE bars when set to 1.
"""

from __future__ import annotations

import asyncio
import json
import os
import sys
import time

from capital_client.app import build_api_async, load_config, login_async
from capital_client.logging_config import setup_logging


def _env(name: str, default: str) -> str:
    value = os.getenv(name)
    return value if value else default


def _emit(kind: str, payload: dict) -> None:
    print(json.dumps({"kind": kind, "received_ts": time.time(), **payload}), flush=True)


async def stream(epics: list[str]) -> None:
    config = load_config(
        "accounts.yaml", _env("CAPITAL_GROUP", "demo"), _env("CAPITAL_ACCOUNT", "Primary")
    )
    seconds = float(_env("CAPITAL_STREAM_SECONDS", "30"))

    async with build_api_async(config) as api:
        await login_async(api, config)
        client = api.create_stream_client()
        client.on_quote(lambda quote: _emit("quote", quote.raw))
        client.on_ohlc(lambda bar: _emit("ohlc", bar.raw))
        client.on_subscription(
            lambda ack: _emit("subscription", {"status": ack.status, "payload": ack.payload})
        )
        client.on_error(lambda exc: _emit("error", {"error": str(exc)}))

        await api.connect_stream(ping_interval_seconds=config.settings.ping_interval_seconds)
        await client.subscribe_to_market_data(epics)
        if _env("CAPITAL_STREAM_OHLC", "0") == "1":
            await client.subscribe_to_ohlc_data(epics, ["MINUTE"])

        if seconds > 0:
            await asyncio.sleep(seconds)
        else:
            await asyncio.Event().wait()
        await api.session.logout()


def main() -> None:
    setup_logging("INFO")
    epics = sys.argv[1:] or ["GOLD"]
    asyncio.run(stream(epics))


if __name__ == "__main__":
    main()
