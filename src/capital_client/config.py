"""
Account metadata, credentials and client tuning, resolved into one AppConfig.

Sources:
- accounts.yaml (local, gitignored): groups of Capital.com accounts, each group
  bound to the demo or live environment.
- environment variables, optionally seeded from a .env file: API keys, login
  identifier/password, host overrides and stream/REST tuning.

Logic flow:
1) load_account_groups() parses accounts.yaml into AccountGroup/AccountEntry.
2) select_account() picks one entry by group name + account name.
3) resolve_account_credentials() turns that entry into an AppConfig:
   - "DEMO"/"LIVE" style labels become "demo"/"live"
   - the API key comes from DEMO_CAPITAL_API_KEY or LIVE_CAPITAL_API_KEY
   - base URL, streaming URL and AppSettings come from CAPITAL_* variables
4) app.py hands AppConfig to http.py, async_http.py and streaming.py.

Missing values raise ValueError naming the YAML path or variable at fault.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable
import os

import yaml

DEFAULT_LIVE_URL = "https://api-capital.backend-capital.com"
DEFAULT_DEMO_URL = "https://demo-api-capital.backend-capital.com"
DEFAULT_STREAMING_URL = "wss://api-streaming-capital.backend-capital.com/connect"
_ENV_LOADED = False


@dataclass(frozen=True)
class AccountEntry:
    """
    accounts.yaml: accounts.<group>.accounts[i]
    """

    name: str
    type: str
    account_id: str


@dataclass(frozen=True)
class AccountGroup:
    """
    accounts.yaml: accounts.<group>, with environment normalized to demo/live.
    """

    key: str
    environment: str
    currency: str
    accounts: list[AccountEntry]


@dataclass(frozen=True)
class AppSettings:
    """
    Runtime tuning knobs for the REST and streaming clients.
    """

    request_timeout_seconds: int
    requests_per_second: int | None
    reconnect_interval_seconds: float
    max_reconnect_attempts: int
    ping_interval_seconds: float
    debug_logging: bool


@dataclass(frozen=True)
class AppConfig:
    """
    Everything needed to build clients for one account: YAML entry, secrets, URLs.
    """

    group_name: str
    environment: str
    currency: str
    account_name: str
    account_type: str
    account_id: str
    api_key: str
    identifier: str | None
    password: str | None
    base_url: str
    streaming_url: str
    settings: AppSettings


def resolve_base_url(base_url: str | None = None, *, demo_mode: bool = False) -> str:
    """
    Pick the REST base URL.

    demo_mode always wins so a stray override cannot point demo credentials
    at the live host.
    """

    if demo_mode:
        return DEFAULT_DEMO_URL
    return base_url or DEFAULT_LIVE_URL


def _normalize_environment(value: str) -> str:
    env = value.strip().lower()
    if env in {"demo", "practice", "sandbox", "paper"}:
        return "demo"
    if env in {"live", "real", "production", "prod"}:
        return "live"
    raise ValueError(f"Unsupported environment '{value}'. Use 'demo' or 'live'.")


def _default_api_key_env(environment: str) -> str:
    # API keys are generated separately for demo and live accounts.
    return "DEMO_CAPITAL_API_KEY" if environment == "demo" else "LIVE_CAPITAL_API_KEY"


def _read_env(var_name: str, *, required: bool) -> str | None:
    value = os.getenv(var_name) or None
    if value is None and required:
        raise ValueError(f"Environment variable '{var_name}' is required but not set.")
    return value


def _read_typed(var_name: str, default: Any, cast: Callable[[str], Any]) -> Any:
    raw = os.getenv(var_name, "").strip()
    if not raw:
        return default
    try:
        return cast(raw)
    except ValueError as exc:
        raise ValueError(f"Environment variable '{var_name}' has invalid value {raw!r}.") from exc


def _as_bool(raw: str) -> bool:
    return raw.lower() in {"1", "true", "yes", "on"}


def _read_rate(var_name: str, default: int) -> int | None:
    # 0 disables client-side throttling.
    value = _read_typed(var_name, default, int)
    return value if value > 0 else None


def _parse_env_line(line: str) -> tuple[str, str] | None:
    text = line.strip()
    if text.startswith("export "):
        text = text[len("export "):]
    if not text or text.startswith("#"):
        return None
    key, sep, value = text.partition("=")
    key, value = key.strip(), value.strip()
    if not sep or not key:
        return None
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "'\"":
        value = value[1:-1]
    return key, value


def _load_env_file(path: str = ".env") -> None:
    """
    Populate os.environ from a KEY=VALUE file, once per process.

    Variables already present in the environment are left untouched.
    """

    global _ENV_LOADED
    if _ENV_LOADED:
        return
    _ENV_LOADED = True
    if not os.path.isfile(path):
        return
    with open(path, "r", encoding="utf-8") as handle:
        pairs = [pair for pair in map(_parse_env_line, handle) if pair is not None]
    for key, value in pairs:
        if value:
            os.environ.setdefault(key, value)


def _parse_entry(group_key: str, idx: int, entry: Any) -> AccountEntry:
    if not isinstance(entry, dict):
        raise ValueError(f"accounts.{group_key}.accounts[{idx}] must be a mapping.")
    missing = [field for field in ("name", "account_id") if field not in entry]
    if missing:
        raise ValueError(
            f"accounts.{group_key}.accounts[{idx}] is missing: {', '.join(missing)}"
        )
    # Capital account IDs are long digit strings; keep them as text.
    return AccountEntry(
        name=str(entry["name"]),
        type=str(entry.get("type") or "CFD"),
        account_id=str(entry["account_id"]),
    )


def _parse_group(key: str, group: Any) -> AccountGroup:
    if not isinstance(group, dict):
        raise ValueError(f"accounts.{key} must be a mapping.")
    missing = [field for field in ("environment", "currency", "accounts") if field not in group]
    if missing:
        raise ValueError(f"accounts.{key} is missing: {', '.join(missing)}")
    entries = group["accounts"]
    if not isinstance(entries, list):
        raise ValueError(f"accounts.{key}.accounts must be a list.")
    return AccountGroup(
        key=key,
        environment=_normalize_environment(str(group["environment"])),
        currency=str(group["currency"]).upper(),
        accounts=[_parse_entry(key, idx, entry) for idx, entry in enumerate(entries)],
    )


def _parse_groups(raw: Any) -> dict[str, AccountGroup]:
    groups = raw.get("accounts") if isinstance(raw, dict) else None
    if not isinstance(groups, dict):
        raise ValueError("accounts.yaml needs a top-level 'accounts' mapping of groups.")
    return {str(key): _parse_group(str(key), group) for key, group in groups.items()}


def load_account_groups(path: str) -> dict[str, AccountGroup]:
    """
    Parse accounts.yaml into {group name: AccountGroup}.

    An empty file is reported the same way as a missing "accounts" key.
    """

    with open(path, "r", encoding="utf-8") as handle:
        raw = yaml.safe_load(handle) or {}
    return _parse_groups(raw)


def select_account(
    groups: dict[str, AccountGroup], group_name: str, account_name: str
) -> tuple[AccountGroup, AccountEntry]:
    """
    Look up one account entry; names must be unique inside a group.
    """

    if group_name not in groups:
        raise ValueError(
            f"Group '{group_name}' not found. Known groups: {', '.join(sorted(groups))}"
        )
    group = groups[group_name]

    matches = [entry for entry in group.accounts if entry.name == account_name]
    if len(matches) == 1:
        return group, matches[0]
    if matches:
        raise ValueError(f"Group '{group_name}' lists account '{account_name}' more than once.")
    known = ", ".join(entry.name for entry in group.accounts) or "none"
    raise ValueError(
        f"Account '{account_name}' not found in group '{group_name}'. Known accounts: {known}"
    )


def load_settings() -> AppSettings:
    """
    Read tuning knobs from the environment, falling back to vendor-friendly defaults.
    """

    return AppSettings(
        request_timeout_seconds=_read_typed("CAPITAL_REQUEST_TIMEOUT_SECONDS", 30, int),
        # Capital.com allows 10 requests per second per user.
        requests_per_second=_read_rate("CAPITAL_REQUESTS_PER_SECOND", 10),
        reconnect_interval_seconds=_read_typed(
            "CAPITAL_STREAM_RECONNECT_INTERVAL_SECONDS", 5.0, float
        ),
        max_reconnect_attempts=_read_typed("CAPITAL_STREAM_MAX_RECONNECT_ATTEMPTS", 5, int),
        # Sessions expire after 10 minutes of inactivity.
        ping_interval_seconds=_read_typed("CAPITAL_STREAM_PING_INTERVAL_SECONDS", 540.0, float),
        debug_logging=_read_typed("CAPITAL_DEBUG_LOGGING", False, _as_bool),
    )


def resolve_account_credentials(
    group: AccountGroup, entry: AccountEntry
) -> AppConfig:
    """
    Combine a selected accounts.yaml entry with environment secrets.

    The .env file is read on first use; real environment variables win.

    Outputs:
    - AppConfig with API key, login identity and URLs ready for the clients.

    Next:
    - Feed AppConfig into app.build_api() or app.build_stream_client().
    """

    _load_env_file()

    api_key = _read_env(_default_api_key_env(group.environment), required=True)

    # Identifier/password are only needed for create_session, so they stay optional here.
    identifier = _read_env("CAPITAL_IDENTIFIER", required=False)
    password = _read_env("CAPITAL_PASSWORD", required=False)

    override = _read_env(
        "CAPITAL_API_BASE_DEMO" if group.environment == "demo" else "CAPITAL_API_BASE_LIVE",
        required=False,
    )
    if override:
        base_url = override
    else:
        base_url = resolve_base_url(demo_mode=group.environment == "demo")

    streaming_url = _read_env("CAPITAL_STREAMING_URL", required=False) or DEFAULT_STREAMING_URL

    return AppConfig(
        group_name=group.key,
        environment=group.environment,
        currency=group.currency,
        account_name=entry.name,
        account_type=entry.type,
        account_id=entry.account_id,
        api_key=api_key,
        identifier=identifier,
        password=password,
        base_url=base_url,
        streaming_url=streaming_url,
        settings=load_settings(),
    )
