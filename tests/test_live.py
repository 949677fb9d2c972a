import os
import subprocess
import sys

import pytest


pytestmark = pytest.mark.live


def require_live() -> None:
    if os.getenv("RUN_LIVE_TESTS") != "1":
        pytest.skip("RUN_LIVE_TESTS=1 required for live integration tests")


def test_basic_usage_script() -> None:
    require_live()
    result = subprocess.run(
        [sys.executable, "scripts/basic_usage.py"],
        capture_output=True,
        text=True,
        check=False,
    )
    assert result.returncode == 0
    assert "server_time" in result.stdout


def test_stream_quotes_script() -> None:
    require_live()
    result = subprocess.run(
        [sys.executable, "scripts/stream_quotes.py", "GOLD"],
        capture_output=True,
        text=True,
        check=False,
        env={**os.environ, "CAPITAL_STREAM_SECONDS": "5"},
    )
    assert result.returncode == 0
    assert '"kind": "subscription"' in result.stdout
