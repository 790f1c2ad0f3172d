"""Inline Invoice Edit Use Cases

Status and remark changes made straight from the dashboard table. Only the
changed column is written: the rest of the invoice is neither validated nor
recomputed, so an invoice saved with a shared number (an unverified
duplicate) can still be marked paid or annotated.
"""

import logging
from typing import Callable, Optional
from src.libs.result import Result, Return, Error
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.repositories.payment_setting_repository import PaymentSettingRepository
from src.app.services.auth_service import AuthService
from src.app.services.unit_of_work import UnitOfWork
from src.domain.invoice import Invoice, InvoiceStatus
from .builders import resolve_payment_info
from .dtos import InvoiceDTO, PaymentInfoDTO
from .mappers import invoice_from_row

logger = logging.getLogger(__name__)


class InlineInvoiceEdit:
    """Shared flow: load the user's invoice, change one column, commit, reload"""

    def __init__(
        self,
        uow: UnitOfWork,
        auth_service: AuthService,
        invoice_repo: InvoiceRepository,
        payment_repo: PaymentSettingRepository,
        default_payment_info: PaymentInfoDTO,
    ):
        self.uow = uow
        self.auth_service = auth_service
        self.invoice_repo = invoice_repo
        self.payment_repo = payment_repo
        self.default_payment_info = default_payment_info

    async def _apply(
        self, invoice_id: str, change: Callable[[Invoice], None], what: str
    ) -> Result[InvoiceDTO]:
        session = self.auth_service.get_session()
        if session is None:
            return Return.err(
                Error(code="NO_ACTIVE_SESSION", message="Please sign in to update the invoice")
            )

        try:
            invoice = await self.invoice_repo.get_by_id(session.user_id, invoice_id)
            if invoice is None:
                return Return.err(
                    Error(
                        code="INVOICE_NOT_FOUND",
                        message=f"Invoice with ID {invoice_id} not found",
                        reason="Invoice does not exist",
                    )
                )

            change(invoice)
            await self.invoice_repo.update(invoice)
            await self.uow.commit()
            logger.info(f"Invoice {invoice.invoice_number} {what} updated for user {session.user_id}")

            row = await self.invoice_repo.get_row_by_id(session.user_id, invoice_id)
            payment_info = await resolve_payment_info(
                self.payment_repo, session.user_id, self.default_payment_info
            )
            return Return.ok(invoice_from_row(row, payment_info))

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to update {what} of invoice {invoice_id}: {e}")
            return Return.err(
                Error(
                    code="UPDATE_INVOICE_FAILED",
                    message="Failed to update invoice",
                    reason=str(e),
                )
            )


class SetInvoiceStatus(InlineInvoiceEdit):
    """Use Case: Mark an invoice Paid or Unpaid"""

    async def execute(self, invoice_id: str, status: InvoiceStatus) -> Result[InvoiceDTO]:
        def apply(invoice: Invoice):
            invoice.status = InvoiceStatus(status).value

        return await self._apply(invoice_id, apply, "status")


class UpdateInvoiceRemark(InlineInvoiceEdit):
    """Use Case: Replace an invoice's remark; an empty remark clears it"""

    async def execute(self, invoice_id: str, remark: Optional[str]) -> Result[InvoiceDTO]:
        def apply(invoice: Invoice):
            invoice.remark = remark.strip() if remark and remark.strip() else None

        return await self._apply(invoice_id, apply, "remark")
