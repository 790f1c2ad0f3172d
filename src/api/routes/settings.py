"""Settings API Routes"""

from fastapi import APIRouter, Depends

from src.api.error import raise_for_error
from src.api.schemas.invoice_request import PaymentInfoRequestSchema
from src.app.state import InvoiceContext
from src.app.use_cases.invoices import PaymentInfoDTO
from src.depends import get_invoice_context

router = APIRouter(prefix="/settings", tags=["Settings"])


@router.get("/payment-info", response_model=PaymentInfoDTO)
async def get_payment_info(context: InvoiceContext = Depends(get_invoice_context)):
    """Bank details printed on new invoices (configured defaults until saved)."""
    result = await context.load_payment_info()

    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.put("/payment-info", response_model=PaymentInfoDTO)
async def update_payment_info(
    request: PaymentInfoRequestSchema,
    context: InvoiceContext = Depends(get_invoice_context),
):
    """
    Replace the bank details printed on invoices.

    Invoices already saved keep the details they were saved with.
    """
    result = await context.update_payment_info(request.to_dto())

    if result.is_err():
        raise_for_error(result.error)
    return result.value
