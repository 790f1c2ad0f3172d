"""GetInvoice Use Case"""

import logging
from src.libs.result import Result, Return, Error
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.repositories.payment_setting_repository import PaymentSettingRepository
from src.app.services.auth_service import AuthService
from .builders import resolve_payment_info
from .dtos import InvoiceDTO, PaymentInfoDTO
from .mappers import invoice_from_row

logger = logging.getLogger(__name__)


class GetInvoice:
    """
    Use Case: Load one invoice of the current user with its client and items
    """

    def __init__(
        self,
        auth_service: AuthService,
        invoice_repo: InvoiceRepository,
        payment_repo: PaymentSettingRepository,
        default_payment_info: PaymentInfoDTO,
    ):
        self.auth_service = auth_service
        self.invoice_repo = invoice_repo
        self.payment_repo = payment_repo
        self.default_payment_info = default_payment_info

    async def execute(self, invoice_id: str) -> Result[InvoiceDTO]:
        session = self.auth_service.get_session()
        if session is None:
            return Return.err(
                Error(code="NO_ACTIVE_SESSION", message="Please sign in to view the invoice")
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

            payment_info = await resolve_payment_info(
                self.payment_repo, session.user_id, self.default_payment_info
            )
            return Return.ok(invoice_from_row(row, payment_info))

        except Exception as e:
            logger.error(f"Failed to load invoice {invoice_id}: {e}")
            return Return.err(
                Error(
                    code="GET_INVOICE_FAILED",
                    message="Failed to load invoice",
                    reason=str(e),
                )
            )
