"""Report use cases"""
from .revenue_report import GetRevenueReport, resolve_report_period
from .dtos import (
    ReportPreset,
    RevenueSummaryDTO,
    MonthlyBreakdownDTO,
    ChartPointDTO,
    RevenueReportDTO,
)

__all__ = [
    "GetRevenueReport",
    "resolve_report_period",
    "ReportPreset",
    "RevenueSummaryDTO",
    "MonthlyBreakdownDTO",
    "ChartPointDTO",
    "RevenueReportDTO",
]
