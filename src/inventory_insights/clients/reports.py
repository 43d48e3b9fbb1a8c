from __future__ import annotations

from dataclasses import dataclass

from ..exceptions import BadRequestError
from ..models import DateRange, StockReportRow, TransactionSummaryRow
from .base import BaseClient


@dataclass
class ReportsClient(BaseClient):
    module: str = "reports"

    async def stock_report(self) -> list[StockReportRow]:
        return await self._get_list("/reports/stock", StockReportRow, operation="stock_report")

    async def transaction_summary(self, date_range: DateRange) -> list[TransactionSummaryRow]:
        try:
            return await self._get_list(
                "/reports/summary",
                TransactionSummaryRow,
                operation="transaction_summary",
                params=date_range.to_params(),
            )
        except BadRequestError as exc:
            raise BadRequestError(
                code="REPORT_INVALID_DATE_RANGE",
                message=exc.message,
                details=exc.details,
                trace_id=exc.trace_id,
                status_code=exc.status_code,
                raw_payload=exc.raw_payload,
            ) from exc
