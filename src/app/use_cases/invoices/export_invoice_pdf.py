"""ExportInvoicePdf Use Case

Renders a saved invoice, or an unsaved draft from the invoice form, as PDF.
Totals are recomputed right before rendering so the printed amounts always
match the printed items.
"""

import logging
from src.libs.result import Result, Return, Error
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.repositories.payment_setting_repository import PaymentSettingRepository
from src.app.services.auth_service import AuthService
from src.app.services.pdf_service import PdfService
from .builders import resolve_payment_info, totals_for
from .document import CompanyProfile, build_invoice_document
from .dtos import InvoiceCommandDTO, InvoiceDTO, InvoicePdfDTO, PaymentInfoDTO
from .mappers import invoice_from_row, tax_breakdown_for
from .validation import validate_invoice_fields, validation_error

logger = logging.getLogger(__name__)

DRAFT_INVOICE_ID = "draft"


def with_recomputed_totals(invoice: InvoiceDTO) -> InvoiceDTO:
    totals = totals_for(invoice.to_command())
    return invoice.model_copy(
        update={
            "subtotal": totals.subtotal,
            "discount_amount": totals.discount_amount,
            "tax_amount": totals.tax_amount,
            "total": totals.total,
            "tax_breakdown": tax_breakdown_for(totals.tax_amount, invoice.tax_mode, invoice.tax_rate),
        }
    )


class ExportInvoicePdf:
    """
    Use Case: Export an invoice as PDF

    Business Rules:
    1. A signed-in session is required
    2. Totals are recomputed from the items before rendering
    3. The invoice must pass field validation
    4. Saved invoices print their payment snapshot (current payment info
       fills missing fields); drafts print the current payment info
    """

    def __init__(
        self,
        auth_service: AuthService,
        invoice_repo: InvoiceRepository,
        payment_repo: PaymentSettingRepository,
        pdf_service: PdfService,
        company: CompanyProfile,
        default_payment_info: PaymentInfoDTO,
    ):
        self.auth_service = auth_service
        self.invoice_repo = invoice_repo
        self.payment_repo = payment_repo
        self.pdf_service = pdf_service
        self.company = company
        self.default_payment_info = default_payment_info

    async def execute(self, invoice_id: str) -> Result[InvoicePdfDTO]:
        """
        Export a saved invoice

        Args:
            invoice_id: ID of the invoice to render

        Returns:
            Result[InvoicePdfDTO]: Success with the PDF or error
        """
        session = self.auth_service.get_session()
        if session is None:
            return Return.err(
                Error(code="NO_ACTIVE_SESSION", message="Please sign in to download the invoice")
            )

        try:
            row = await self.invoice_repo.get_row_by_id(session.user_id, invoice_id)
            if row is None:
                return Return.err(
                    Error(
                        code="INVOICE_NOT_FOUND",
                        message=f"Invoice with ID {invoice_id} not found",
                        reason="Invoice does not exist",
                    )
                )

            current_info = await resolve_payment_info(
                self.payment_repo, session.user_id, self.default_payment_info
            )
            invoice = invoice_from_row(row, current_info)
        except Exception as e:
            logger.error(f"Failed to load invoice {invoice_id} for PDF export: {e}")
            return Return.err(
                Error(code="EXPORT_PDF_FAILED", message="Failed to generate PDF", reason=str(e))
            )

        return self._render(invoice, invoice.payment_info)

    async def execute_draft(self, command: InvoiceCommandDTO) -> Result[InvoicePdfDTO]:
        """
        Export an unsaved invoice straight from the form

        Args:
            command: Current form values

        Returns:
            Result[InvoicePdfDTO]: Success with the PDF or error
        """
        session = self.auth_service.get_session()
        if session is None:
            return Return.err(
                Error(code="NO_ACTIVE_SESSION", message="Please sign in to download the invoice")
            )

        try:
            payment_info = await resolve_payment_info(
                self.payment_repo, session.user_id, self.default_payment_info
            )
        except Exception as e:
            logger.error(f"Failed to load payment info for draft PDF export: {e}")
            return Return.err(
                Error(code="EXPORT_PDF_FAILED", message="Failed to generate PDF", reason=str(e))
            )

        totals = totals_for(command)
        invoice = InvoiceDTO(
            id=DRAFT_INVOICE_ID,
            **command.model_dump(),
            subtotal=totals.subtotal,
            discount_amount=totals.discount_amount,
            tax_amount=totals.tax_amount,
            total=totals.total,
            payment_info=payment_info,
        )
        return self._render(invoice, payment_info)

    def _render(self, invoice: InvoiceDTO, payment_info) -> Result[InvoicePdfDTO]:
        invoice = with_recomputed_totals(invoice)

        issues = validate_invoice_fields(invoice.to_command())
        if issues:
            return Return.err(validation_error(issues))

        try:
            document = build_invoice_document(invoice, self.company, payment_info)
            content = self.pdf_service.render_invoice(document)
        except Exception as e:
            logger.error(f"Failed to render PDF for invoice {invoice.invoice_number}: {e}")
            return Return.err(
                Error(code="EXPORT_PDF_FAILED", message="Failed to generate PDF", reason=str(e))
            )

        logger.info(f"Rendered PDF for invoice {invoice.invoice_number}")
        return Return.ok(InvoicePdfDTO(filename=document.filename, content=content))
