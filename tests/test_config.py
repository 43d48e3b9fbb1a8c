from __future__ import annotations

import pytest

from inventory_insights.config import ConfigError, load_config

_ENV_KEYS = (
    "INVENTORY_ENV",
    "INVENTORY_API_BASE_URL",
    "INVENTORY_API_BASE_URL_DEV",
    "INVENTORY_API_BASE_URL_STAGING",
    "INVENTORY_TIMEOUT_SECONDS",
    "INVENTORY_CONNECT_TIMEOUT_SECONDS",
    "INVENTORY_READ_TIMEOUT_SECONDS",
    "INVENTORY_MAX_CONNECTIONS",
    "INVENTORY_RECENT_WINDOW_DAYS",
    "INVENTORY_REPORT_WINDOW_DAYS",
    "INVENTORY_LOG_LEVEL",
    "INVENTORY_VERIFY_SSL",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def test_load_config_requires_base_url(tmp_path) -> None:
    with pytest.raises(ConfigError, match="INVENTORY_API_BASE_URL"):
        load_config(str(tmp_path / "missing.env"))


def test_load_config_defaults(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    monkeypatch.setenv("INVENTORY_API_BASE_URL", "https://api.example.com/api/")
    cfg = load_config(str(tmp_path / "missing.env"))
    assert cfg.env_name == "dev"
    assert cfg.api_base_url == "https://api.example.com/api"
    assert cfg.recent_window_days == 7
    assert cfg.report_window_days == 30
    assert cfg.max_connections == 20
    assert cfg.verify_ssl is True
    assert cfg.log_level == "INFO"


def test_load_config_profile_wins_over_generic(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    monkeypatch.setenv("INVENTORY_ENV", "staging")
    monkeypatch.setenv("INVENTORY_API_BASE_URL", "https://generic.example.com")
    monkeypatch.setenv("INVENTORY_API_BASE_URL_STAGING", "https://staging.example.com")
    cfg = load_config(str(tmp_path / "missing.env"))
    assert cfg.api_base_url == "https://staging.example.com"
    assert cfg.normalized_env == "staging"


def test_load_config_reads_env_file(tmp_path) -> None:
    env_file = tmp_path / ".env"
    env_file.write_text("INVENTORY_API_BASE_URL=https://file.example.com\nINVENTORY_REPORT_WINDOW_DAYS=14\n")
    cfg = load_config(str(env_file))
    assert cfg.api_base_url == "https://file.example.com"
    assert cfg.report_window_days == 14


@pytest.mark.parametrize(
    ("key", "value"),
    [
        ("INVENTORY_TIMEOUT_SECONDS", "0"),
        ("INVENTORY_CONNECT_TIMEOUT_SECONDS", "0"),
        ("INVENTORY_READ_TIMEOUT_SECONDS", "-1"),
        ("INVENTORY_MAX_CONNECTIONS", "0"),
        ("INVENTORY_RECENT_WINDOW_DAYS", "-1"),
        ("INVENTORY_REPORT_WINDOW_DAYS", "-5"),
        ("INVENTORY_MAX_CONNECTIONS", "abc"),
        ("INVENTORY_TIMEOUT_SECONDS", "abc"),
        ("INVENTORY_LOG_LEVEL", "chatty"),
    ],
)
def test_load_config_rejects_invalid_values(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path,
    key: str,
    value: str,
) -> None:
    monkeypatch.setenv("INVENTORY_API_BASE_URL", "https://api.example.com")
    monkeypatch.setenv(key, value)

    with pytest.raises(ConfigError, match=key):
        load_config(str(tmp_path / "missing.env"))


def test_verify_ssl_can_be_disabled(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    monkeypatch.setenv("INVENTORY_API_BASE_URL", "https://api.example.com")
    monkeypatch.setenv("INVENTORY_VERIFY_SSL", "false")
    assert load_config(str(tmp_path / "missing.env")).verify_ssl is False
