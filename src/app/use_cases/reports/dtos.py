"""Data Transfer Objects for Report Use Cases"""

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import List
from pydantic import BaseModel, Field


class ReportPreset(str, Enum):
    LAST_30_DAYS = "last_30_days"
    THIS_MONTH = "this_month"
    LAST_MONTH = "last_month"


class RevenueSummaryDTO(BaseModel):
    total_revenue: Decimal = Field(..., description="Sum of invoice totals")
    invoice_count: int
    average_invoice: Decimal = Field(..., description="0 when there are no invoices")
    tax_collected: Decimal


class MonthlyBreakdownDTO(BaseModel):
    month: str = Field(..., description="e.g. 'June 2024'")
    revenue: Decimal
    invoice_count: int
    average_invoice: Decimal


class ChartPointDTO(BaseModel):
    label: str = Field(..., description="e.g. 'Jun 2024'")
    revenue: Decimal
    invoice_count: int


class RevenueReportDTO(BaseModel):
    """Revenue figures for an inclusive issue date range"""

    start_date: date
    end_date: date
    summary: RevenueSummaryDTO
    monthly_breakdown: List[MonthlyBreakdownDTO] = Field(
        default_factory=list, description="Most recent month first"
    )
    chart: List[ChartPointDTO] = Field(default_factory=list, description="Chronological")
