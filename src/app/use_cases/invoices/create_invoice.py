"""CreateInvoice Use Case

Saves a new invoice submitted from the invoice form.
"""

import logging
from src.libs.result import Result, Return, Error
from src.app.repositories.client_repository import ClientRepository
from src.app.repositories.invoice_item_repository import InvoiceItemRepository
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.repositories.payment_setting_repository import PaymentSettingRepository
from src.app.services.auth_service import AuthService
from src.app.services.invoice_number_service import InvoiceNumberService
from src.app.services.unit_of_work import UnitOfWork
from .builders import (
    build_client,
    build_invoice,
    build_items,
    resolve_payment_info,
    row_from_entities,
    totals_for,
)
from .dtos import InvoiceCommandDTO, InvoiceDTO, PaymentInfoDTO
from .mappers import invoice_from_row
from .validation import validate_invoice, validation_error

logger = logging.getLogger(__name__)


class CreateInvoice:
    """
    Use Case: Create an invoice

    Business Rules:
    1. A signed-in session is required
    2. Totals are recomputed from the items; submitted totals are never trusted
    3. Invoice must pass validation, including invoice number uniqueness
    4. A new client row is created for every invoice
    5. Current payment info is snapshotted onto the invoice

    Flow:
    1. Check session
    2. Recompute totals and validate
    3. Insert client, then invoice, then items
    4. Commit transaction (all three or none)
    5. Return the saved invoice
    """

    def __init__(
        self,
        uow: UnitOfWork,
        auth_service: AuthService,
        invoice_repo: InvoiceRepository,
        client_repo: ClientRepository,
        item_repo: InvoiceItemRepository,
        payment_repo: PaymentSettingRepository,
        numbering: InvoiceNumberService,
        default_payment_info: PaymentInfoDTO,
    ):
        self.uow = uow
        self.auth_service = auth_service
        self.invoice_repo = invoice_repo
        self.client_repo = client_repo
        self.item_repo = item_repo
        self.payment_repo = payment_repo
        self.numbering = numbering
        self.default_payment_info = default_payment_info

    async def execute(self, command: InvoiceCommandDTO) -> Result[InvoiceDTO]:
        """
        Execute invoice creation

        Args:
            command: InvoiceCommandDTO from the invoice form

        Returns:
            Result[InvoiceDTO]: Success with the saved invoice or error
        """
        session = self.auth_service.get_session()
        if session is None:
            return Return.err(
                Error(code="NO_ACTIVE_SESSION", message="Please sign in to add an invoice")
            )

        try:
            # Step 1: Recompute and validate
            totals = totals_for(command)
            issues = await validate_invoice(command, self.numbering)
            if issues:
                return Return.err(validation_error(issues))

            payment_info = await resolve_payment_info(
                self.payment_repo, session.user_id, self.default_payment_info
            )

            # Step 2: Client, invoice, items
            client = await self.client_repo.create(build_client(session.user_id, command.client))
            invoice = await self.invoice_repo.create(
                build_invoice(session.user_id, client.id, command, totals, payment_info)
            )
            items = await self.item_repo.create_many(build_items(invoice.id, command.items))

            # Step 3: Commit transaction
            await self.uow.commit()
            logger.info(f"Invoice {invoice.invoice_number} created for user {session.user_id}")

            return Return.ok(invoice_from_row(row_from_entities(invoice, client, items)))

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to create invoice {command.invoice_number}: {e}")
            return Return.err(
                Error(
                    code="CREATE_INVOICE_FAILED",
                    message="Failed to create invoice",
                    reason=str(e),
                )
            )
