from __future__ import annotations

from pathlib import Path

import pytest

from capital_client import config


def write_accounts_yaml(path: Path, *, environment: str = "DEMO") -> None:
    content = f"""
accounts:
  demo:
    environment: {environment}
    currency: USD
    accounts:
      - name: Primary
        type: CFD
        account_id: "250118930029744"
"""
    path.write_text(content.strip(), encoding="utf-8")


def test_load_account_groups_parses_yaml(tmp_path: Path) -> None:
    yaml_path = tmp_path / "accounts.yaml"
    write_accounts_yaml(yaml_path)
    groups = config.load_account_groups(str(yaml_path))
    assert "demo" in groups
    assert groups["demo"].environment == "demo"
    assert groups["demo"].accounts[0].name == "Primary"


def test_select_account_finds_entry(tmp_path: Path) -> None:
    yaml_path = tmp_path / "accounts.yaml"
    write_accounts_yaml(yaml_path)
    groups = config.load_account_groups(str(yaml_path))
    group, entry = config.select_account(groups, "demo", "Primary")
    assert entry.account_id == "250118930029744"
    assert group.currency == "USD"


def test_select_account_unknown_group(tmp_path: Path) -> None:
    yaml_path = tmp_path / "accounts.yaml"
    write_accounts_yaml(yaml_path)
    groups = config.load_account_groups(str(yaml_path))
    with pytest.raises(ValueError, match="Group 'live' not found"):
        config.select_account(groups, "live", "Primary")


def test_resolve_account_credentials_reads_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    yaml_path = tmp_path / "accounts.yaml"
    write_accounts_yaml(yaml_path)
    monkeypatch.setenv("DEMO_CAPITAL_API_KEY", "key-demo")
    monkeypatch.setenv("CAPITAL_IDENTIFIER", "me@example.com")
    groups = config.load_account_groups(str(yaml_path))
    group, entry = config.select_account(groups, "demo", "Primary")
    resolved = config.resolve_account_credentials(group, entry)
    assert resolved.api_key == "key-demo"
    assert resolved.identifier == "me@example.com"
    assert resolved.password is None
    assert resolved.base_url == config.DEFAULT_DEMO_URL
    assert resolved.streaming_url == config.DEFAULT_STREAMING_URL
    assert resolved.settings.max_reconnect_attempts == 5
    assert resolved.settings.reconnect_interval_seconds == 5.0
    assert resolved.settings.ping_interval_seconds == 540.0
    assert resolved.settings.requests_per_second == 10


def test_resolve_account_credentials_overrides(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    yaml_path = tmp_path / "accounts.yaml"
    write_accounts_yaml(yaml_path, environment="live")
    monkeypatch.setenv("LIVE_CAPITAL_API_KEY", "key-live")
    monkeypatch.setenv("CAPITAL_API_BASE_LIVE", "https://proxy.example.com")
    monkeypatch.setenv("CAPITAL_STREAMING_URL", "wss://stream.example.com/connect")
    monkeypatch.setenv("CAPITAL_REQUESTS_PER_SECOND", "0")
    monkeypatch.setenv("CAPITAL_STREAM_MAX_RECONNECT_ATTEMPTS", "2")
    groups = config.load_account_groups(str(yaml_path))
    resolved = config.resolve_account_credentials(*config.select_account(groups, "demo", "Primary"))
    assert resolved.environment == "live"
    assert resolved.base_url == "https://proxy.example.com"
    assert resolved.streaming_url == "wss://stream.example.com/connect"
    assert resolved.settings.requests_per_second is None
    assert resolved.settings.max_reconnect_attempts == 2


def test_missing_api_key_raises(tmp_path: Path) -> None:
    yaml_path = tmp_path / "accounts.yaml"
    write_accounts_yaml(yaml_path)
    groups = config.load_account_groups(str(yaml_path))
    group, entry = config.select_account(groups, "demo", "Primary")
    with pytest.raises(ValueError, match="DEMO_CAPITAL_API_KEY"):
        config.resolve_account_credentials(group, entry)


def test_invalid_environment_raises(tmp_path: Path) -> None:
    yaml_path = tmp_path / "accounts.yaml"
    write_accounts_yaml(yaml_path, environment="BADENV")
    with pytest.raises(ValueError):
        config.load_account_groups(str(yaml_path))


def test_resolve_base_url() -> None:
    assert config.resolve_base_url() == config.DEFAULT_LIVE_URL
    assert config.resolve_base_url("https://x.example.com") == "https://x.example.com"
    assert config.resolve_base_url("https://x.example.com", demo_mode=True) == config.DEFAULT_DEMO_URL


def test_env_file_loader(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    env_path = tmp_path / ".env"
    env_path.write_text(
        "# comment\nexport CAPITAL_IDENTIFIER='me@example.com'\nCAPITAL_PASSWORD=\"pw\"\n",
        encoding="utf-8",
    )
    monkeypatch.setattr(config, "_ENV_LOADED", False)
    config._load_env_file(str(env_path))
    assert config.os.environ["CAPITAL_IDENTIFIER"] == "me@example.com"
    assert config.os.environ["CAPITAL_PASSWORD"] == "pw"
