import os

import pytest

from capital_client import config


@pytest.fixture(autouse=True)
def clear_env(monkeypatch: pytest.MonkeyPatch):
    keys = [
        "DEMO_CAPITAL_API_KEY",
        "LIVE_CAPITAL_API_KEY",
        "CAPITAL_IDENTIFIER",
        "CAPITAL_PASSWORD",
        "CAPITAL_API_BASE_DEMO",
        "CAPITAL_API_BASE_LIVE",
        "CAPITAL_STREAMING_URL",
        "CAPITAL_REQUEST_TIMEOUT_SECONDS",
        "CAPITAL_REQUESTS_PER_SECOND",
        "CAPITAL_STREAM_RECONNECT_INTERVAL_SECONDS",
        "CAPITAL_STREAM_MAX_RECONNECT_ATTEMPTS",
        "CAPITAL_STREAM_PING_INTERVAL_SECONDS",
        "CAPITAL_DEBUG_LOGGING",
    ]
    original = {key: os.getenv(key) for key in keys}
    for key in keys:
        if key in os.environ:
            del os.environ[key]
    # Never pick up a developer's real .env during tests.
    monkeypatch.setattr(config, "_ENV_LOADED", True)
    yield
    for key, value in original.items():
        if value is None:
            os.environ.pop(key, None)
        else:
            os.environ[key] = value
