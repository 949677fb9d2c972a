"""
Wiring from accounts.yaml to a logged-in facade and a stream client.

Logic flow:
1) load_config() parses accounts.yaml and refuses to continue on warnings.
2) select_account() picks the group + account entry by name.
3) resolve_account_credentials() adds API key, login and URLs from the env.
4) build_api() creates the HTTP client and the CapitalAPI facade.
5) login() opens a session and switches to the configured account.
6) The caller invokes endpoint groups or connects the stream.
"""

from __future__ import annotations

import logging

from .api import CapitalAPI, CapitalAsyncAPI
from .async_http import CapitalAsyncHttpClient
from .config import (
    AppConfig,
    load_account_groups,
    resolve_account_credentials,
    select_account,
)
from .http import CapitalHttpClient
from .models import SessionState
from .streaming import CapitalStreamClient
from .validation import validate_account_groups, validate_connectivity

logger = logging.getLogger(__name__)


def load_config(accounts_path: str, group_name: str, account_name: str) -> AppConfig:
    """
    accounts.yaml + environment -> AppConfig, failing fast on validation warnings.
    """

    groups = load_account_groups(accounts_path)
    warnings = validate_account_groups(groups)
    if warnings:
        raise ValueError("accounts.yaml validation warnings: " + "; ".join(warnings))
    group, entry = select_account(groups, group_name, account_name)
    return resolve_account_credentials(group, entry)


def build_http_client(config: AppConfig) -> CapitalHttpClient:
    return CapitalHttpClient(
        base_url=config.base_url,
        api_key=config.api_key,
        timeout_seconds=config.settings.request_timeout_seconds,
        requests_per_second=config.settings.requests_per_second,
        debug_logging=config.settings.debug_logging,
    )


def build_api(config: AppConfig) -> CapitalAPI:
    """
    Create a CapitalAPI facade for a resolved account configuration.
    """

    return CapitalAPI(
        build_http_client(config),
        streaming_url=config.streaming_url,
        reconnect_interval_seconds=config.settings.reconnect_interval_seconds,
        max_reconnect_attempts=config.settings.max_reconnect_attempts,
    )


def build_api_async(config: AppConfig) -> CapitalAsyncAPI:
    """
    Create a CapitalAsyncAPI facade for a resolved account configuration.
    """

    http_client = CapitalAsyncHttpClient(
        base_url=config.base_url,
        api_key=config.api_key,
        timeout_seconds=config.settings.request_timeout_seconds,
        requests_per_second=config.settings.requests_per_second,
        debug_logging=config.settings.debug_logging,
    )
    return CapitalAsyncAPI(
        http_client,
        streaming_url=config.streaming_url,
        reconnect_interval_seconds=config.settings.reconnect_interval_seconds,
        max_reconnect_attempts=config.settings.max_reconnect_attempts,
    )


def build_stream_client(config: AppConfig, session: SessionState) -> CapitalStreamClient:
    """
    Create a stream client from config + tokens of an existing session.
    """

    if not session.is_authenticated():
        raise ValueError("An authenticated session is required to build a stream client.")
    return CapitalStreamClient(
        cst=session.cst,
        security_token=session.security_token,
        streaming_url=config.streaming_url,
        reconnect_interval_seconds=config.settings.reconnect_interval_seconds,
        max_reconnect_attempts=config.settings.max_reconnect_attempts,
    )


def _require_login(config: AppConfig) -> tuple[str, str]:
    if not config.identifier or not config.password:
        raise ValueError(
            "Missing required environment variable 'CAPITAL_IDENTIFIER' or 'CAPITAL_PASSWORD'."
        )
    return config.identifier, config.password


def _needs_switch(config: AppConfig, payload: object) -> bool:
    current = payload.get("currentAccountId") if isinstance(payload, dict) else None
    return bool(config.account_id) and current != config.account_id


def login(api: CapitalAPI, config: AppConfig) -> dict[str, object]:
    """
    Open a session and make the configured account the active one.
    """

    identifier, password = _require_login(config)
    payload = api.session.create_session(identifier, password)
    if _needs_switch(config, payload):
        logger.info("Switching active account to %s", config.account_name)
        api.session.switch_account(config.account_id)
    return payload


async def login_async(api: CapitalAsyncAPI, config: AppConfig) -> dict[str, object]:
    identifier, password = _require_login(config)
    payload = await api.session.create_session(identifier, password)
    if _needs_switch(config, payload):
        logger.info("Switching active account to %s", config.account_name)
        await api.session.switch_account(config.account_id)
    return payload


def load_api(accounts_path: str, group_name: str, account_name: str) -> CapitalAPI:
    """
    Find an account by group name + account name and return a CapitalAPI facade.
    """

    return build_api(load_config(accounts_path, group_name, account_name))


def load_api_async(
    accounts_path: str, group_name: str, account_name: str
) -> CapitalAsyncAPI:
    return build_api_async(load_config(accounts_path, group_name, account_name))


def validate_account_connection(
    accounts_path: str, group_name: str, account_name: str
) -> dict[str, object]:
    """
    Validate accounts.yaml + host reachability by calling GET /api/v1/time.
    """

    config = load_config(accounts_path, group_name, account_name)
    return validate_connectivity(build_http_client(config))
