"""DuplicateInvoice Use Case

Copies an existing invoice under a freshly generated invoice number.
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
from .dtos import DuplicateInvoiceResultDTO, PaymentInfoDTO
from .mappers import invoice_from_row

logger = logging.getLogger(__name__)

MAX_NUMBER_ATTEMPTS = 3


class DuplicateInvoice:
    """
    Use Case: Duplicate an invoice

    Business Rules:
    1. A signed-in session is required; the source invoice must belong to the user
    2. Every field is copied; client, invoice and items get new IDs
    3. A new invoice number is generated and checked for uniqueness up to
       MAX_NUMBER_ATTEMPTS times, regenerating after each collision
    4. When no attempt confirms uniqueness the last generated number is used
       and the result reports number_verified_unique=False
    5. Current payment info is snapshotted onto the copy
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

    async def execute(self, invoice_id: str) -> Result[DuplicateInvoiceResultDTO]:
        """
        Execute invoice duplication

        Args:
            invoice_id: ID of the invoice to copy

        Returns:
            Result[DuplicateInvoiceResultDTO]: Success with the new invoice or error
        """
        session = self.auth_service.get_session()
        if session is None:
            return Return.err(
                Error(code="NO_ACTIVE_SESSION", message="Please sign in to duplicate the invoice")
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

            command = invoice_from_row(row).to_command()
            command.invoice_number, verified = await self._unique_number()

            totals = totals_for(command)
            payment_info = await resolve_payment_info(
                self.payment_repo, session.user_id, self.default_payment_info
            )

            client = await self.client_repo.create(build_client(session.user_id, command.client))
            invoice = await self.invoice_repo.create(
                build_invoice(session.user_id, client.id, command, totals, payment_info)
            )
            items = await self.item_repo.create_many(build_items(invoice.id, command.items))

            await self.uow.commit()

            if not verified:
                logger.warning(
                    f"Invoice {invoice_id} duplicated as {invoice.invoice_number} "
                    f"without a confirmed unique number"
                )
            else:
                logger.info(f"Invoice {invoice_id} duplicated as {invoice.invoice_number}")

            return Return.ok(
                DuplicateInvoiceResultDTO(
                    invoice=invoice_from_row(row_from_entities(invoice, client, items)),
                    number_verified_unique=verified,
                )
            )

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to duplicate invoice {invoice_id}: {e}")
            return Return.err(
                Error(
                    code="DUPLICATE_INVOICE_FAILED",
                    message="Failed to duplicate invoice",
                    reason=str(e),
                )
            )

    async def _unique_number(self):
        generated = await self.numbering.generate_invoice_number()
        for attempt in range(MAX_NUMBER_ATTEMPTS):
            if await self.numbering.is_invoice_number_unique(generated.value):
                return generated.value, True
            if attempt < MAX_NUMBER_ATTEMPTS - 1:
                generated = await self.numbering.generate_invoice_number()
        return generated.value, False
