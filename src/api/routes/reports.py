"""Report API Routes"""

from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlmodel.ext.asyncio.session import AsyncSession

from src.adapter.repositories.invoice_repository import SqlAlchemyInvoiceRepository
from src.api.error import raise_for_error
from src.app.services.auth_service import AuthService
from src.app.use_cases.reports import (
    GetRevenueReport,
    ReportPreset,
    RevenueReportDTO,
    resolve_report_period,
)
from src.depends import get_auth_service, get_session

router = APIRouter(prefix="/reports", tags=["Reports"])


@router.get(
    "/revenue",
    response_model=RevenueReportDTO,
    responses={
        400: {
            "description": "Invalid date range",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "INVALID_DATE_RANGE",
                            "message": "Start date must be on or before end date"
                        }
                    }
                }
            }
        }
    }
)
async def revenue_report(
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    preset: Optional[ReportPreset] = Query(None),
    session: AsyncSession = Depends(get_session),
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    Revenue summary, monthly breakdown and chart series.

    **Query parameters:**
    - `preset` (optional): `last_30_days`, `this_month` or `last_month`
    - `start_date` / `end_date` (optional): override either end of the range

    Without any parameter the range is the start of last month through the
    end of this month.
    """
    default_start, default_end = resolve_report_period(preset, date.today())

    use_case = GetRevenueReport(auth_service, SqlAlchemyInvoiceRepository(session))
    result = await use_case.execute(start_date or default_start, end_date or default_end)

    if result.is_err():
        raise_for_error(result.error)
    return result.value
