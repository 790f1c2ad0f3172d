"""UpdateInvoice Use Case

Saves full form edits to an existing invoice. Inline status and remark
changes go through the inline edit use cases instead.
"""

import logging
from typing import Dict, List
from src.libs.result import Result, Return, Error
from src.app.repositories.client_repository import ClientRepository
from src.app.repositories.invoice_item_repository import InvoiceItemRepository
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.repositories.payment_setting_repository import PaymentSettingRepository
from src.app.services.auth_service import AuthService
from src.app.services.invoice_number_service import InvoiceNumberService
from src.app.services.unit_of_work import UnitOfWork
from src.domain.client import Client
from src.domain.invoice_item import InvoiceItem
from .builders import apply_command, build_client, resolve_payment_info, row_from_entities, totals_for
from .dtos import InvoiceCommandDTO, InvoiceDTO, PaymentInfoDTO
from .mappers import invoice_from_row
from .validation import validate_invoice, validation_error

logger = logging.getLogger(__name__)


class UpdateInvoice:
    """
    Use Case: Update an invoice

    Business Rules:
    1. A signed-in session is required; the invoice must belong to the user
    2. Totals are recomputed and the invoice is validated; the invoice's own
       number does not count as a duplicate
    3. The client row is updated in place
    4. Items with a known ID are updated, new ones inserted, and items no
       longer present are deleted
    5. Current payment info is snapshotted onto the invoice
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

    async def execute(self, invoice_id: str, command: InvoiceCommandDTO) -> Result[InvoiceDTO]:
        """
        Execute invoice update

        Args:
            invoice_id: ID of the invoice to update
            command: New field values

        Returns:
            Result[InvoiceDTO]: Success with the updated invoice or error
        """
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

            totals = totals_for(command)
            issues = await validate_invoice(command, self.numbering, exclude_id=invoice_id)
            if issues:
                return Return.err(validation_error(issues))

            payment_info = await resolve_payment_info(
                self.payment_repo, session.user_id, self.default_payment_info
            )

            client = await self._save_client(session.user_id, invoice.client_id, command)
            invoice.client_id = client.id

            apply_command(invoice, command, totals, payment_info)
            invoice = await self.invoice_repo.update(invoice)

            items = await self._save_items(invoice.id, command)

            await self.uow.commit()
            logger.info(f"Invoice {invoice.invoice_number} updated for user {session.user_id}")

            return Return.ok(invoice_from_row(row_from_entities(invoice, client, items)))

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to update invoice {invoice_id}: {e}")
            return Return.err(
                Error(
                    code="UPDATE_INVOICE_FAILED",
                    message="Failed to update invoice",
                    reason=str(e),
                )
            )

    async def _save_client(self, user_id: str, client_id, command: InvoiceCommandDTO) -> Client:
        client = None
        if client_id:
            client = await self.client_repo.get_by_id(user_id, client_id)

        # Invoices whose client row went missing get a fresh one
        if client is None:
            return await self.client_repo.create(build_client(user_id, command.client))

        client.name = command.client.name.strip()
        client.address = command.client.address
        client.gstin = command.client.gstin or None
        return await self.client_repo.update(client)

    async def _save_items(self, invoice_id: str, command: InvoiceCommandDTO) -> List[InvoiceItem]:
        existing: Dict[str, InvoiceItem] = {
            item.id: item for item in await self.item_repo.get_by_invoice_id(invoice_id)
        }

        saved: List[InvoiceItem] = []
        for position, item in enumerate(command.items):
            row = InvoiceItem(
                invoice_id=invoice_id,
                description=item.description.strip(),
                quantity=item.quantity,
                unit_price=item.unit_price,
                position=position,
            )
            # IDs from another invoice are not trusted; those become new rows
            if item.id and item.id in existing:
                row.id = item.id
            saved.append(await self.item_repo.upsert(row))

        kept_ids = {item.id for item in saved}
        removed_ids = [item_id for item_id in existing if item_id not in kept_ids]
        if removed_ids:
            await self.item_repo.delete_by_ids(removed_ids)

        return saved
