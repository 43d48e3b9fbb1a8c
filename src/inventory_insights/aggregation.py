"""Pure derived-view computations over fetched entity lists.

Nothing here performs I/O or consults the session. Every function accepts empty
input and returns an empty or zeroed result. Values supplied by the service
(``stock_value``, ``low_stock``, ``net_value``) are used as given; when a local
recomputation disagrees, the disagreement is reported as a ``DataIntegrityAnomaly``
next to the upstream value instead of replacing it.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal
from enum import Enum
from typing import Any, TypeVar

from .models import (
    DateRange,
    StockReportRow,
    Transaction,
    TransactionSummaryRow,
    TransactionType,
    TypeFilter,
)

UNCATEGORIZED = "Uncategorized"
ZERO = Decimal("0")

T = TypeVar("T")


class AnomalyKind(str, Enum):
    LOW_STOCK_FLAG_MISMATCH = "low_stock_flag_mismatch"
    NET_VALUE_MISMATCH = "net_value_mismatch"


@dataclass(frozen=True)
class DataIntegrityAnomaly:
    kind: AnomalyKind
    subject: str
    expected: object
    actual: object
    message: str


@dataclass(frozen=True)
class DashboardStats:
    total_products: int
    total_suppliers: int
    low_stock_count: int
    recent_transaction_count: int


@dataclass(frozen=True)
class CategoryAggregate:
    category: str
    total_value: Decimal
    product_count: int


@dataclass(frozen=True)
class TransactionTrend:
    rows: tuple[TransactionSummaryRow, ...]
    anomalies: tuple[DataIntegrityAnomaly, ...] = ()

    @property
    def discrepancy_count(self) -> int:
        return len(self.anomalies)


@dataclass(frozen=True)
class SummaryTotals:
    total_transactions: int
    in_transactions: int
    out_transactions: int
    total_in_value: Decimal
    total_out_value: Decimal
    net_value: Decimal
    anomalies: tuple[DataIntegrityAnomaly, ...] = ()


@dataclass(frozen=True)
class StockReportTotals:
    total_stock_value: Decimal
    total_products: int
    low_stock_count: int
    total_transaction_value: Decimal


def is_low_stock(stock: int, minimum_stock: int) -> bool:
    """A product is low on stock when it is at or below its minimum (zero minimum included)."""
    return stock <= minimum_stock


def compute_dashboard_stats(
    products: Sequence[Any],
    suppliers: Sequence[Any],
    low_stock_products: Sequence[Any],
    recent_transactions: Sequence[Any],
) -> DashboardStats:
    # recent_transactions is already restricted to the trailing window by the caller
    return DashboardStats(
        total_products=len(products),
        total_suppliers=len(suppliers),
        low_stock_count=len(low_stock_products),
        recent_transaction_count=len(recent_transactions),
    )


def top_n_by_stock_value(rows: Iterable[StockReportRow], n: int) -> list[StockReportRow]:
    # sorted() stays stable with reverse=True: equal values keep their input order
    ranked = sorted(rows, key=lambda row: row.stock_value, reverse=True)
    return ranked[: max(n, 0)]


def category_distribution(rows: Iterable[StockReportRow]) -> list[CategoryAggregate]:
    totals: dict[str, Decimal] = {}
    counts: dict[str, int] = {}
    for row in rows:
        key = row.category or UNCATEGORIZED
        totals[key] = totals.get(key, ZERO) + row.stock_value
        counts[key] = counts.get(key, 0) + 1
    return [
        CategoryAggregate(category=key, total_value=total, product_count=counts[key])
        for key, total in totals.items()
    ]


def low_stock_slice(rows: Iterable[StockReportRow]) -> list[StockReportRow]:
    return [row for row in rows if row.low_stock]


def stock_flag_anomalies(rows: Iterable[StockReportRow]) -> list[DataIntegrityAnomaly]:
    anomalies = []
    for row in rows:
        expected = is_low_stock(row.current_stock, row.minimum_stock)
        if expected != row.low_stock:
            anomalies.append(
                DataIntegrityAnomaly(
                    kind=AnomalyKind.LOW_STOCK_FLAG_MISMATCH,
                    subject=f"product:{row.product_id}",
                    expected=expected,
                    actual=row.low_stock,
                    message=(
                        f"{row.product_name}: stock {row.current_stock} vs minimum {row.minimum_stock} "
                        f"implies low_stock={expected}, service reported {row.low_stock}"
                    ),
                )
            )
    return anomalies


def transaction_trend(summary_rows: Iterable[TransactionSummaryRow]) -> TransactionTrend:
    rows = tuple(summary_rows)
    anomalies = tuple(anomaly for anomaly in map(_net_value_anomaly, rows) if anomaly is not None)
    return TransactionTrend(rows=rows, anomalies=anomalies)


def combine_summaries(summary_rows: Iterable[TransactionSummaryRow]) -> SummaryTotals:
    trend = transaction_trend(summary_rows)
    rows = trend.rows
    return SummaryTotals(
        total_transactions=sum(row.total_transactions for row in rows),
        in_transactions=sum(row.in_transactions for row in rows),
        out_transactions=sum(row.out_transactions for row in rows),
        total_in_value=sum((row.total_in_value for row in rows), ZERO),
        total_out_value=sum((row.total_out_value for row in rows), ZERO),
        net_value=sum((row.net_value for row in rows), ZERO),
        anomalies=trend.anomalies,
    )


def stock_report_totals(
    stock_rows: Sequence[StockReportRow],
    summary_rows: Sequence[TransactionSummaryRow] = (),
) -> StockReportTotals:
    return StockReportTotals(
        total_stock_value=sum((row.stock_value for row in stock_rows), ZERO),
        total_products=len(stock_rows),
        low_stock_count=len(low_stock_slice(stock_rows)),
        total_transaction_value=sum((row.total_in_value + row.total_out_value for row in summary_rows), ZERO),
    )


def daily_summaries(transactions: Iterable[Transaction]) -> list[TransactionSummaryRow]:
    """Bucket raw transactions per calendar day, ascending.

    IN transactions count toward the inbound value and OUT transactions toward the
    outbound value; the net value is inbound minus outbound.
    """
    buckets: dict[date, list[Transaction]] = {}
    for transaction in transactions:
        buckets.setdefault(transaction.transaction_date.date(), []).append(transaction)

    summaries = []
    for day in sorted(buckets):
        entries = buckets[day]
        inbound = [entry for entry in entries if entry.type is TransactionType.IN]
        outbound = [entry for entry in entries if entry.type is TransactionType.OUT]
        in_value = sum((entry.total_price for entry in inbound), ZERO)
        out_value = sum((entry.total_price for entry in outbound), ZERO)
        summaries.append(
            TransactionSummaryRow(
                date=day,
                period="DAILY",
                total_transactions=len(entries),
                in_transactions=len(inbound),
                out_transactions=len(outbound),
                total_in_value=in_value,
                total_out_value=out_value,
                net_value=in_value - out_value,
            )
        )
    return summaries


def filter_by_type(transactions: Iterable[Transaction], type_filter: TypeFilter | str) -> list[Transaction]:
    selected = TypeFilter(type_filter)
    if selected is TypeFilter.ALL:
        return list(transactions)
    return [transaction for transaction in transactions if transaction.type.value == selected.value]


def filter_by_text_query(entities: Iterable[T], query: str | None, fields: Sequence[str]) -> list[T]:
    if not query:
        return list(entities)
    needle = query.lower()
    return [
        entity
        for entity in entities
        if any(needle in value.lower() for value in _string_fields(entity, fields))
    ]


def trailing_window(today: date, days: int) -> DateRange:
    return DateRange(start=today - timedelta(days=days), end=today)


def _string_fields(entity: Any, fields: Sequence[str]) -> Iterator[str]:
    for name in fields:
        if isinstance(entity, Mapping):
            value = entity.get(name)
        else:
            value = getattr(entity, name, None)
        if isinstance(value, str):
            yield value


def _net_value_anomaly(row: TransactionSummaryRow) -> DataIntegrityAnomaly | None:
    expected = row.total_in_value - row.total_out_value
    if expected == row.net_value:
        return None
    return DataIntegrityAnomaly(
        kind=AnomalyKind.NET_VALUE_MISMATCH,
        subject=f"summary:{row.date.isoformat()}",
        expected=expected,
        actual=row.net_value,
        message=(
            f"{row.date.isoformat()}: in {row.total_in_value} - out {row.total_out_value} = {expected}, "
            f"service reported net {row.net_value}"
        ),
    )
