"""GetRevenueReport Use Case

Aggregates the current user's invoices over an issue date range into the
figures shown on the reports page.
"""

import calendar
import logging
from collections import defaultdict
from datetime import date, timedelta
from decimal import Decimal
from typing import Dict, Iterator, List, Optional, Tuple
from src.libs.result import Result, Return, Error
from src.app.repositories.invoice_repository import InvoiceRepository, InvoiceRow
from src.app.services.auth_service import AuthService
from src.domain.calculations import ZERO, as_decimal, round_money
from .dtos import (
    ChartPointDTO,
    MonthlyBreakdownDTO,
    ReportPreset,
    RevenueReportDTO,
    RevenueSummaryDTO,
)

logger = logging.getLogger(__name__)

LAST_DAYS_WINDOW = 30


def start_of_month(day: date) -> date:
    return day.replace(day=1)


def end_of_month(day: date) -> date:
    return day.replace(day=calendar.monthrange(day.year, day.month)[1])


def previous_month(day: date) -> date:
    """Any day of the month before the month of ``day``"""
    return start_of_month(day) - timedelta(days=1)


def resolve_report_period(
    preset: Optional[ReportPreset], today: date
) -> Tuple[date, date]:
    """
    Date range for a preset

    Without a preset the range is the start of last month through the end
    of this month.
    """
    if preset == ReportPreset.LAST_30_DAYS:
        return today - timedelta(days=LAST_DAYS_WINDOW), today
    if preset == ReportPreset.THIS_MONTH:
        return start_of_month(today), end_of_month(today)
    if preset == ReportPreset.LAST_MONTH:
        last_month = previous_month(today)
        return start_of_month(last_month), end_of_month(last_month)
    return start_of_month(previous_month(today)), end_of_month(today)


def iter_months(start_date: date, end_date: date) -> Iterator[Tuple[int, int]]:
    year, month = start_date.year, start_date.month
    while (year, month) <= (end_date.year, end_date.month):
        yield year, month
        year, month = (year + 1, 1) if month == 12 else (year, month + 1)


def average(total: Decimal, count: int) -> Decimal:
    return round_money(total / count) if count else ZERO


class GetRevenueReport:
    """
    Use Case: Revenue report

    Business Rules:
    1. A signed-in session is required
    2. Invoices are selected by issue date, both ends inclusive
    3. Every month from the start month to the end month appears in the
       breakdown and the chart, including months without invoices
    """

    def __init__(self, auth_service: AuthService, invoice_repo: InvoiceRepository):
        self.auth_service = auth_service
        self.invoice_repo = invoice_repo

    async def execute(self, start_date: date, end_date: date) -> Result[RevenueReportDTO]:
        """
        Execute revenue report

        Args:
            start_date: First issue date included
            end_date: Last issue date included

        Returns:
            Result[RevenueReportDTO]: Success with the report or error
        """
        session = self.auth_service.get_session()
        if session is None:
            return Return.err(
                Error(code="NO_ACTIVE_SESSION", message="Please sign in to view reports")
            )

        if start_date > end_date:
            return Return.err(
                Error(
                    code="INVALID_DATE_RANGE",
                    message="Start date must be on or before end date",
                    reason=f"{start_date} is after {end_date}",
                )
            )

        try:
            rows = await self.invoice_repo.list_rows_for_period(
                session.user_id, start_date, end_date
            )
        except Exception as e:
            logger.error(f"Failed to load invoices for revenue report: {e}")
            return Return.err(
                Error(code="REPORT_FAILED", message="Failed to build report", reason=str(e))
            )

        return Return.ok(self._build(start_date, end_date, rows))

    def _build(self, start_date: date, end_date: date, rows: List[InvoiceRow]) -> RevenueReportDTO:
        total_revenue = ZERO
        tax_collected = ZERO
        revenue_by_month: Dict[Tuple[int, int], Decimal] = defaultdict(lambda: ZERO)
        count_by_month: Dict[Tuple[int, int], int] = defaultdict(int)

        for row in rows:
            total = as_decimal(row.get("total") or 0)
            issue_date = row["issue_date"]
            key = (issue_date.year, issue_date.month)

            total_revenue += total
            tax_collected += as_decimal(row.get("tax_amount") or 0)
            revenue_by_month[key] += total
            count_by_month[key] += 1

        chart = []
        breakdown = []
        for year, month in iter_months(start_date, end_date):
            first_day = date(year, month, 1)
            revenue = round_money(revenue_by_month[(year, month)])
            count = count_by_month[(year, month)]

            chart.append(
                ChartPointDTO(label=first_day.strftime("%b %Y"), revenue=revenue, invoice_count=count)
            )
            breakdown.append(
                MonthlyBreakdownDTO(
                    month=first_day.strftime("%B %Y"),
                    revenue=revenue,
                    invoice_count=count,
                    average_invoice=average(revenue, count),
                )
            )
        breakdown.reverse()

        return RevenueReportDTO(
            start_date=start_date,
            end_date=end_date,
            summary=RevenueSummaryDTO(
                total_revenue=round_money(total_revenue),
                invoice_count=len(rows),
                average_invoice=average(total_revenue, len(rows)),
                tax_collected=round_money(tax_collected),
            ),
            monthly_breakdown=breakdown,
            chart=chart,
        )
