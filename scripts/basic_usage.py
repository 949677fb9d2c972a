"""
Log in, print accounts and look up a market.

Usage:
    python scripts/basic_usage.py [--group demo] [--account Primary] [--search GOLD]

Reads accounts.yaml plus DEMO_/LIVE_CAPITAL_API_KEY, CAPITAL_IDENTIFIER and
CAPITAL_PASSWORD from the environment (or .env).
"""

from __future__ import annotations

import argparse
import time

from capital_client.app import load_config, build_api, login
from capital_client.logging_config import setup_logging


def timed(func):
    start = time.perf_counter()
    result = func()
    return result, (time.perf_counter() - start) * 1000.0


def run(group: str, account_name: str, search_term: str) -> dict:
    config = load_config("accounts.yaml", group, account_name)
    api = build_api(config)
    try:
        server_time, time_ms = timed(api.general.get_server_time)
        session, login_ms = timed(lambda: login(api, config))
        accounts, accounts_ms = timed(api.accounts.get_all_accounts)
        markets, markets_ms = timed(lambda: api.markets.get_markets(search_term=search_term))

        found = markets.get("markets", [])
        details = api.markets.get_market_details(found[0]["epic"]) if found else None
        positions = api.trading.get_all_positions().get("positions", [])
        orders = api.trading.get_all_working_orders().get("workingOrders", [])
        api.session.logout()
    finally:
        api.close()

    return {
        "server_time": server_time.get("serverTime"),
        "current_account": session.get("currentAccountId"),
        "accounts": [
            (item.get("accountName"), item.get("currency"), item.get("balance", {}).get("balance"))
            for item in accounts.get("accounts", [])
        ],
        "markets_found": len(found),
        "first_market": details.get("snapshot") if details else None,
        "positions_count": len(positions),
        "orders_count": len(orders),
        "latency_ms": {
            "time": time_ms,
            "login": login_ms,
            "accounts": accounts_ms,
            "markets": markets_ms,
        },
    }


def main() -> None:
    parser = argparse.ArgumentParser()
    parser.add_argument("--group", default="demo")
    parser.add_argument("--account", default="Primary")
    parser.add_argument("--search", default="GOLD")
    parser.add_argument("--json-logs", action="store_true")
    args = parser.parse_args()
    setup_logging("INFO", json_output=args.json_logs)
    search_term = args.search

    row = run(args.group, args.account, search_term)
    print(f"server_time\t{row['server_time']}")
    print(f"current_account\t{row['current_account']}")
    for name, currency, balance in row["accounts"]:
        print(f"account\t{name}\t{currency}\t{balance}")
    print(f"markets\t{search_term}\t{row['markets_found']}\t{row['first_market']}")
    print(f"positions\t{row['positions_count']}\torders\t{row['orders_count']}")
    ms = row["latency_ms"]
    print(
        f"ms_time\t{ms['time']:.2f}\tms_login\t{ms['login']:.2f}\t"
        f"ms_accounts\t{ms['accounts']:.2f}\tms_markets\t{ms['markets']:.2f}"
    )


if __name__ == "__main__":
    main()
