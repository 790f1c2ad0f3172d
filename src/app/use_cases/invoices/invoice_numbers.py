"""Invoice number use cases backing the invoice form"""

from typing import Optional
from src.libs.result import Result, Return, Error
from src.app.services.invoice_number_service import InvoiceNumberService
from .dtos import InvoiceNumberAvailabilityDTO, InvoiceNumberDTO


class GetNextInvoiceNumber:
    """
    Use Case: Suggest the next invoice number

    Never fails; without a session or a readable store the fallback format
    is returned and flagged as such.
    """

    def __init__(self, numbering: InvoiceNumberService):
        self.numbering = numbering

    async def execute(self) -> Result[InvoiceNumberDTO]:
        generated = await self.numbering.generate_invoice_number()
        return Return.ok(
            InvoiceNumberDTO(invoice_number=generated.value, strategy=generated.strategy.value)
        )


class CheckInvoiceNumber:
    """Use Case: Check whether an invoice number is still free"""

    def __init__(self, numbering: InvoiceNumberService):
        self.numbering = numbering

    async def execute(
        self, invoice_number: str, exclude_id: Optional[str] = None
    ) -> Result[InvoiceNumberAvailabilityDTO]:
        number = invoice_number.strip()
        if not number:
            return Return.err(
                Error(code="VALIDATION_FAILED", message="Invoice number is required")
            )

        unique = await self.numbering.is_invoice_number_unique(number, exclude_id=exclude_id)
        return Return.ok(InvoiceNumberAvailabilityDTO(invoice_number=number, unique=unique))
