"""DeleteInvoice Use Case"""

import logging
from src.libs.result import Result, Return, Error
from src.app.repositories.invoice_item_repository import InvoiceItemRepository
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.services.auth_service import AuthService
from src.app.services.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


class DeleteInvoice:
    """
    Use Case: Delete an invoice

    Items are deleted first, then the invoice. The client row is left in
    place.
    """

    def __init__(
        self,
        uow: UnitOfWork,
        auth_service: AuthService,
        invoice_repo: InvoiceRepository,
        item_repo: InvoiceItemRepository,
    ):
        self.uow = uow
        self.auth_service = auth_service
        self.invoice_repo = invoice_repo
        self.item_repo = item_repo

    async def execute(self, invoice_id: str) -> Result[str]:
        """
        Execute invoice deletion

        Args:
            invoice_id: ID of the invoice to delete

        Returns:
            Result[str]: Success with the deleted invoice ID or error
        """
        session = self.auth_service.get_session()
        if session is None:
            return Return.err(
                Error(code="NO_ACTIVE_SESSION", message="Please sign in to delete the invoice")
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

            await self.item_repo.delete_by_invoice_id(invoice.id)
            await self.invoice_repo.delete(invoice)
            await self.uow.commit()

            logger.info(f"Invoice {invoice.invoice_number} deleted for user {session.user_id}")
            return Return.ok(invoice_id)

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to delete invoice {invoice_id}: {e}")
            return Return.err(
                Error(
                    code="DELETE_INVOICE_FAILED",
                    message="Failed to delete invoice",
                    reason=str(e),
                )
            )
