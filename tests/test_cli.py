from __future__ import annotations

import json
import sys
from datetime import date
from pathlib import Path

import pytest

from inventory_insights import cli
from inventory_insights.app import InventoryApp
from inventory_insights.auth_store import TokenStore
from inventory_insights.config import ClientConfig
from inventory_insights.models import SessionData
from tests.inventory_helpers import ADMIN_PROFILE, BASE_URL, FakeInventoryService, build_http, summary_row_payload


@pytest.fixture
def wired(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> tuple[FakeInventoryService, TokenStore]:
    service = FakeInventoryService()
    store = TokenStore(base_dir=tmp_path)

    def build_app(config: ClientConfig) -> InventoryApp:
        return InventoryApp(config, http=build_http(service, config), token_store=store, today=lambda: date(2024, 3, 15))

    monkeypatch.setenv("INVENTORY_API_BASE_URL", BASE_URL)
    monkeypatch.setattr(cli, "InventoryApp", build_app)
    monkeypatch.setattr(cli, "configure_logging", lambda level: None)
    return service, store


def _run(monkeypatch: pytest.MonkeyPatch, *argv: str) -> None:
    monkeypatch.setattr(sys, "argv", ["inventory-insights", *argv])
    cli.main()


def test_cli_login_then_whoami(wired, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    service, store = wired
    service.allow_login(ADMIN_PROFILE)

    _run(monkeypatch, "login", "--username", "admin", "--password", "secret")
    login_out = json.loads(capsys.readouterr().out)
    _run(monkeypatch, "whoami")
    whoami_out = json.loads(capsys.readouterr().out)

    assert login_out["user"]["username"] == "admin"
    assert whoami_out["admin"] is True
    assert whoami_out["display_name"] == "Ada Admin"
    assert store.load() is not None


def test_cli_dashboard_prints_stats(wired, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    service, store = wired
    service.allow_login(ADMIN_PROFILE, token="persisted")
    service.seed_dashboard()
    store.save(SessionData(token="persisted"))

    _run(monkeypatch, "dashboard")
    out = json.loads(capsys.readouterr().out)

    assert out["stats"] == {
        "total_products": 2,
        "total_suppliers": 1,
        "low_stock_count": 1,
        "recent_transaction_count": 3,
    }
    assert out["state"]["status"] == "success"


def test_cli_summary_uses_requested_range(wired, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    service, store = wired
    service.allow_login(ADMIN_PROFILE, token="persisted")
    service.json("GET", "/reports/stock", [])
    service.json("GET", "/reports/summary", [summary_row_payload("2024-03-01", total_in="10", total_out="4")])
    store.save(SessionData(token="persisted"))

    _run(monkeypatch, "summary", "--start", "2024-03-01", "--end", "2024-03-07")
    out = json.loads(capsys.readouterr().out)

    assert out["date_range"] == {"startDate": "2024-03-01", "endDate": "2024-03-07"}
    assert out["combined"]["net_value"] == "6"


def test_cli_reports_api_errors(wired, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    service, _ = wired
    service.json("POST", "/auth/signin", {"message": "Bad credentials"}, status=401)

    with pytest.raises(SystemExit) as excinfo:
        _run(monkeypatch, "login", "--username", "admin", "--password", "wrong")

    assert excinfo.value.code == 1
    out = json.loads(capsys.readouterr().out)
    assert out["message"] == "Bad credentials"


def test_cli_requires_session_for_reports(wired, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit):
        _run(monkeypatch, "stock-report")

    out = json.loads(capsys.readouterr().out)
    assert out["error"] == "AUTHENTICATION_REQUIRED"


def test_cli_rejects_malformed_summary_date(wired, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    service, _ = wired

    with pytest.raises(SystemExit) as excinfo:
        _run(monkeypatch, "summary", "--start", "2024-13-45")

    assert excinfo.value.code == 1
    out = json.loads(capsys.readouterr().out)
    assert out["error"] == "VALIDATION_ERROR"
    assert [issue["field"] for issue in out["issues"]] == ["start"]
    assert service.requests == []
