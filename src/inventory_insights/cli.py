from __future__ import annotations

import argparse
import asyncio
import json
from dataclasses import asdict
from datetime import date
from typing import Any, Awaitable, Callable

from .aggregation import combine_summaries
from .app import InventoryApp
from .config import load_config
from .exceptions import ApiError
from .log import configure_logging
from .validation import ValidationError, ValidationIssue
from .views import BaseView

Command = Callable[[InventoryApp, argparse.Namespace], Awaitable[dict[str, Any]]]


def _dump(payload: Any) -> str:
    return json.dumps(payload, indent=2, default=str)


def _raise_for_view(view: BaseView) -> None:
    if view.last_failure is not None:
        raise view.last_failure


def _parse_date(field: str, value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise ValidationError([ValidationIssue(field, f"must be an ISO date (YYYY-MM-DD), got {value!r}")]) from exc


async def _resume(app: InventoryApp, action: str) -> None:
    await app.start()
    app.session.require_authenticated(action)


async def cmd_login(app: InventoryApp, args: argparse.Namespace) -> dict[str, Any]:
    result = await app.login(args.username, args.password)
    if not result.success and result.error is not None:
        raise result.error
    identity = result.identity
    return {"message": result.message, "user": identity.model_dump(mode="json") if identity else None}


async def cmd_logout(app: InventoryApp, args: argparse.Namespace) -> dict[str, Any]:
    app.logout()
    return {"message": "Logged out"}


async def cmd_whoami(app: InventoryApp, args: argparse.Namespace) -> dict[str, Any]:
    await _resume(app, "show the current user")
    identity = app.session.identity
    return {
        "user": identity.model_dump(mode="json") if identity else None,
        "display_name": identity.display_name if identity else None,
        "admin": app.session.is_admin(),
    }


async def cmd_dashboard(app: InventoryApp, args: argparse.Namespace) -> dict[str, Any]:
    await _resume(app, "view the dashboard")
    view = app.dashboard
    state = await view.load()
    _raise_for_view(view)
    return {
        "state": state.render(),
        "stats": asdict(view.stats) if view.stats else None,
        "recent_transactions": [item.model_dump(mode="json") for item in view.recent_transactions],
        "low_stock_products": [item.model_dump(mode="json") for item in view.low_stock_products],
        "anomalies": [asdict(anomaly) for anomaly in view.anomalies],
    }


async def cmd_stock_report(app: InventoryApp, args: argparse.Namespace) -> dict[str, Any]:
    await _resume(app, "view reports")
    view = app.reports
    state = await view.load()
    _raise_for_view(view)
    return {
        "state": state.render(),
        "totals": asdict(view.totals) if view.totals else None,
        "top_products": [row.model_dump(mode="json") for row in view.top_products],
        "categories": [asdict(category) for category in view.categories],
        "low_stock": [row.model_dump(mode="json") for row in view.low_stock],
        "anomalies": [asdict(anomaly) for anomaly in view.anomalies],
    }


async def cmd_summary(app: InventoryApp, args: argparse.Namespace) -> dict[str, Any]:
    start = _parse_date("start", args.start) if args.start else None
    end = _parse_date("end", args.end) if args.end else None
    await _resume(app, "view reports")
    view = app.reports
    if start or end:
        state = await view.set_date_range(start or view.date_range.start, end or view.date_range.end)
    else:
        state = await view.load()
    _raise_for_view(view)
    return {
        "state": state.render(),
        "date_range": view.date_range.to_params(),
        "rows": [row.model_dump(mode="json") for row in view.summary_rows],
        "combined": asdict(combine_summaries(view.summary_rows)),
    }


async def _run(command: Command, args: argparse.Namespace) -> dict[str, Any]:
    config = load_config(args.env_file)
    configure_logging(config.log_level)
    app = InventoryApp(config)
    try:
        return await command(app, args)
    finally:
        await app.aclose()


def main() -> None:
    parser = argparse.ArgumentParser(description="Inventory insights client")
    parser.add_argument("--env-file", default=None)
    subparsers = parser.add_subparsers(dest="command", required=True)

    login_parser = subparsers.add_parser("login")
    login_parser.add_argument("--username", required=True)
    login_parser.add_argument("--password", required=True)
    login_parser.set_defaults(func=cmd_login)

    logout_parser = subparsers.add_parser("logout")
    logout_parser.set_defaults(func=cmd_logout)

    whoami_parser = subparsers.add_parser("whoami")
    whoami_parser.set_defaults(func=cmd_whoami)

    dashboard_parser = subparsers.add_parser("dashboard")
    dashboard_parser.set_defaults(func=cmd_dashboard)

    stock_parser = subparsers.add_parser("stock-report")
    stock_parser.set_defaults(func=cmd_stock_report)

    summary_parser = subparsers.add_parser("summary")
    summary_parser.add_argument("--start", default=None, help="ISO date, e.g. 2024-01-01")
    summary_parser.add_argument("--end", default=None, help="ISO date, e.g. 2024-01-31")
    summary_parser.set_defaults(func=cmd_summary)

    args = parser.parse_args()
    try:
        print(_dump(asyncio.run(_run(args.func, args))))
    except ApiError as exc:
        print(_dump({"error": exc.code, "message": exc.message, "trace_id": exc.trace_id}))
        raise SystemExit(1) from exc
    except ValidationError as exc:
        issues = [asdict(issue) for issue in exc.issues]
        print(_dump({"error": "VALIDATION_ERROR", "message": str(exc), "issues": issues}))
        raise SystemExit(1) from exc


if __name__ == "__main__":
    main()
