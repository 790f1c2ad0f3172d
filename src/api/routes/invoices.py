"""Invoice API Routes

FastAPI routes for the invoice dashboard and invoice form: listing and
search, create / edit / duplicate / delete, inline status and remark edits,
invoice numbers, live totals and PDF export.
"""

from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import Response
from sqlmodel.ext.asyncio.session import AsyncSession

from src.adapter.repositories.invoice_repository import SqlAlchemyInvoiceRepository
from src.adapter.repositories.payment_setting_repository import SqlAlchemyPaymentSettingRepository
from src.adapter.services.pdf_service import ReportLabPdfService
from src.api.error import raise_for_error
from src.api.schemas.invoice_request import (
    InvoiceRequestSchema,
    RemarkRequestSchema,
    StatusRequestSchema,
)
from src.app.services.auth_service import AuthService
from src.app.services.invoice_number_service import InvoiceNumberService
from src.app.state import InvoiceContext, InvoiceFilters
from src.app.use_cases.invoices import (
    CalculateInvoiceTotals,
    CheckInvoiceNumber,
    DuplicateInvoiceResultDTO,
    ExportInvoicePdf,
    GetNextInvoiceNumber,
    InvoiceDTO,
    InvoiceNumberAvailabilityDTO,
    InvoiceNumberDTO,
    InvoicePdfDTO,
    InvoiceSearchResultDTO,
    InvoiceTotalsDTO,
)
from src.depends import (
    company_profile,
    default_payment_info,
    get_auth_service,
    get_config,
    get_invoice_context,
    get_session,
)

router = APIRouter(prefix="/invoices", tags=["Invoices"])

NOT_FOUND_RESPONSE = {
    "description": "Invoice not found",
    "content": {
        "application/json": {
            "example": {
                "error": {
                    "code": "INVOICE_NOT_FOUND",
                    "message": "Invoice with ID 3f1c... not found"
                }
            }
        }
    }
}

VALIDATION_RESPONSE = {
    "description": "Invoice failed validation",
    "content": {
        "application/json": {
            "example": {
                "error": {
                    "code": "VALIDATION_FAILED",
                    "message": "Client name is required; At least one line item is required",
                    "details": [
                        {"field": "client.name", "message": "Client name is required"},
                        {"field": "items", "message": "At least one line item is required"}
                    ]
                }
            }
        }
    }
}


def pdf_response(pdf: InvoicePdfDTO) -> Response:
    return Response(
        content=pdf.content,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{pdf.filename}"'},
    )


def export_use_case(session: AsyncSession, auth_service: AuthService, config) -> ExportInvoicePdf:
    return ExportInvoicePdf(
        auth_service,
        SqlAlchemyInvoiceRepository(session),
        SqlAlchemyPaymentSettingRepository(session),
        ReportLabPdfService(),
        company_profile(config),
        default_payment_info(config),
    )


@router.get("", response_model=InvoiceSearchResultDTO)
async def list_invoices(
    query: str = Query("", description="Invoice number or client name fragment"),
    page: int = Query(1, ge=1),
    page_size: Optional[int] = Query(None, ge=1, le=100),
    start_date: Optional[date] = Query(None, description="Earliest issue date (inclusive)"),
    end_date: Optional[date] = Query(None, description="Latest issue date (inclusive)"),
    status_filter: Optional[str] = Query(None, alias="status", pattern="^(All|Paid|Unpaid)$"),
    payment_type: Optional[str] = Query(None, pattern="^(All|Advance|Full Payment)$"),
    context: InvoiceContext = Depends(get_invoice_context),
):
    """
    List the current user's invoices, newest first.

    A numeric `query` matches invoice numbers; any other query matches client
    names, falling back to invoice numbers when no client matches.

    **Returns:**
    - 200: One page of invoices; `strategy` is `fallback` when the joined
      query failed and separate queries were used
    - 401: Not signed in
    """
    if page_size is not None:
        context.state.pagination.page_size = page_size

    filters = InvoiceFilters(
        search_query=query.strip().lower(),
        start_date=start_date,
        end_date=end_date,
        status=status_filter,
        payment_type=payment_type,
    )
    result = await context.load_invoices(page, filters)

    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.get("/next-number", response_model=InvoiceNumberDTO)
async def next_invoice_number(
    session: AsyncSession = Depends(get_session),
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    Suggest the next invoice number (`INV{YYYYMM}{NNNN}`).

    `strategy` is `fallback` (`INV{YYYYMMDD}{NNN}`) when the sequence could
    not be read.
    """
    numbering = InvoiceNumberService(SqlAlchemyInvoiceRepository(session), auth_service)
    result = await GetNextInvoiceNumber(numbering).execute()
    return result.value


@router.get("/number-availability", response_model=InvoiceNumberAvailabilityDTO)
async def invoice_number_availability(
    invoice_number: str = Query(..., min_length=1),
    exclude_id: Optional[str] = Query(None, description="ID of the invoice being edited"),
    session: AsyncSession = Depends(get_session),
    auth_service: AuthService = Depends(get_auth_service),
):
    numbering = InvoiceNumberService(SqlAlchemyInvoiceRepository(session), auth_service)
    result = await CheckInvoiceNumber(numbering).execute(invoice_number, exclude_id=exclude_id)

    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.post("/calculate", response_model=InvoiceTotalsDTO)
async def calculate_totals(request: InvoiceRequestSchema):
    """
    Compute subtotal, discount, tax, total and the GST lines of a draft.

    Nothing is saved; no sign-in is required.
    """
    result = CalculateInvoiceTotals().execute(request.to_command())

    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.post(
    "/pdf",
    responses={
        200: {"content": {"application/pdf": {}}, "description": "PDF document"},
        422: VALIDATION_RESPONSE,
    },
)
async def export_draft_pdf(
    request: InvoiceRequestSchema,
    session: AsyncSession = Depends(get_session),
    auth_service: AuthService = Depends(get_auth_service),
    config=Depends(get_config),
):
    """Render an unsaved invoice from the form as PDF."""
    result = await export_use_case(session, auth_service, config).execute_draft(request.to_command())

    if result.is_err():
        raise_for_error(result.error)
    return pdf_response(result.value)


@router.post(
    "",
    response_model=InvoiceDTO,
    status_code=status.HTTP_201_CREATED,
    responses={422: VALIDATION_RESPONSE},
)
async def create_invoice(
    request: InvoiceRequestSchema,
    context: InvoiceContext = Depends(get_invoice_context),
):
    """
    Create an invoice.

    Totals are recomputed from the items. A new client row is created and
    the current payment info is copied onto the invoice.

    **Returns:**
    - 201: Invoice created
    - 401: Not signed in
    - 422: Validation failed (all problems are listed in `details`)
    """
    result = await context.add_invoice(request.to_command())

    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.get("/{invoice_id}", response_model=InvoiceDTO, responses={404: NOT_FOUND_RESPONSE})
async def get_invoice(
    invoice_id: str,
    context: InvoiceContext = Depends(get_invoice_context),
):
    result = await context.fetch_invoice(invoice_id)

    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.put(
    "/{invoice_id}",
    response_model=InvoiceDTO,
    responses={404: NOT_FOUND_RESPONSE, 422: VALIDATION_RESPONSE},
)
async def update_invoice(
    invoice_id: str,
    request: InvoiceRequestSchema,
    context: InvoiceContext = Depends(get_invoice_context),
):
    """
    Replace an invoice's fields and items.

    Items carrying an existing `id` are updated, items without one are
    added, and items missing from the list are deleted.
    """
    result = await context.update_invoice(invoice_id, request.to_command())

    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.delete(
    "/{invoice_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: NOT_FOUND_RESPONSE},
)
async def delete_invoice(
    invoice_id: str,
    context: InvoiceContext = Depends(get_invoice_context),
):
    result = await context.delete_invoice(invoice_id)

    if result.is_err():
        raise_for_error(result.error)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{invoice_id}/duplicate",
    response_model=DuplicateInvoiceResultDTO,
    status_code=status.HTTP_201_CREATED,
    responses={404: NOT_FOUND_RESPONSE},
)
async def duplicate_invoice(
    invoice_id: str,
    context: InvoiceContext = Depends(get_invoice_context),
):
    """
    Copy an invoice under a new invoice number.

    `number_verified_unique` is false when no free number was confirmed
    within three attempts; the copy is saved with the last generated number.
    """
    result = await context.duplicate_invoice(invoice_id)

    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.patch("/{invoice_id}/status", response_model=InvoiceDTO, responses={404: NOT_FOUND_RESPONSE})
async def set_invoice_status(
    invoice_id: str,
    request: StatusRequestSchema,
    context: InvoiceContext = Depends(get_invoice_context),
):
    result = await context.set_status(invoice_id, request.status)

    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.post(
    "/{invoice_id}/status/toggle",
    response_model=InvoiceDTO,
    responses={404: NOT_FOUND_RESPONSE},
)
async def toggle_invoice_status(
    invoice_id: str,
    context: InvoiceContext = Depends(get_invoice_context),
):
    """Flip an invoice between Paid and Unpaid."""
    result = await context.toggle_status(invoice_id)

    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.patch("/{invoice_id}/remark", response_model=InvoiceDTO, responses={404: NOT_FOUND_RESPONSE})
async def update_invoice_remark(
    invoice_id: str,
    request: RemarkRequestSchema,
    context: InvoiceContext = Depends(get_invoice_context),
):
    result = await context.update_remark(invoice_id, request.remark)

    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.get(
    "/{invoice_id}/pdf",
    responses={
        200: {"content": {"application/pdf": {}}, "description": "PDF document"},
        404: NOT_FOUND_RESPONSE,
    },
)
async def download_invoice_pdf(
    invoice_id: str,
    session: AsyncSession = Depends(get_session),
    auth_service: AuthService = Depends(get_auth_service),
    config=Depends(get_config),
):
    """
    Download a saved invoice as PDF.

    Totals are recomputed before rendering. The file is named
    `Invoice-{invoice_number}.pdf`.
    """
    result = await export_use_case(session, auth_service, config).execute(invoice_id)

    if result.is_err():
        raise_for_error(result.error)
    return pdf_response(result.value)
