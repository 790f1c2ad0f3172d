"""Entity builders shared by the invoice write use cases"""

from typing import List

from src.app.repositories.payment_setting_repository import PaymentSettingRepository
from src.domain.calculations import InvoiceTotals, compute_totals
from src.domain.base import utc_now
from src.domain.client import Client
from src.domain.invoice import Invoice
from src.domain.invoice_item import InvoiceItem
from .dtos import ClientDTO, InvoiceCommandDTO, LineItemDTO, PaymentInfoDTO


async def resolve_payment_info(
    repo: PaymentSettingRepository, user_id: str, defaults: PaymentInfoDTO
) -> PaymentInfoDTO:
    """Stored payment info of the user, or the configured defaults"""
    setting = await repo.get_by_user_id(user_id)
    if setting is None:
        return defaults.model_copy()
    return PaymentInfoDTO(
        account_name=setting.account_name,
        account_number=setting.account_number,
        ifsc=setting.ifsc,
    )


def totals_for(command: InvoiceCommandDTO) -> InvoiceTotals:
    return compute_totals(
        command.items,
        command.discount_type,
        command.discount_value,
        command.tax_mode,
        command.tax_rate,
    )


def build_client(user_id: str, client: ClientDTO) -> Client:
    return Client(
        user_id=user_id,
        name=client.name.strip(),
        address=client.address,
        gstin=client.gstin or None,
    )


def apply_command(
    invoice: Invoice,
    command: InvoiceCommandDTO,
    totals: InvoiceTotals,
    payment_info: PaymentInfoDTO,
) -> Invoice:
    """Copy editable fields, computed totals and the payment snapshot onto an invoice"""
    invoice.invoice_number = command.invoice_number.strip()
    invoice.issue_date = command.issue_date
    invoice.due_date = command.due_date
    invoice.status = command.status.value
    invoice.payment_type = command.payment_type.value
    invoice.discount_type = command.discount_type.value
    invoice.discount_value = command.discount_value
    invoice.tax_mode = command.tax_mode.value
    invoice.tax_rate = command.tax_rate
    invoice.remark = command.remark
    invoice.subtotal = totals.subtotal
    invoice.discount_amount = totals.discount_amount
    invoice.tax_amount = totals.tax_amount
    invoice.total = totals.total
    invoice.payment_info_account_name = payment_info.account_name
    invoice.payment_info_account_number = payment_info.account_number
    invoice.payment_info_ifsc = payment_info.ifsc
    invoice.updated_at = utc_now()
    return invoice


def build_invoice(
    user_id: str,
    client_id: str,
    command: InvoiceCommandDTO,
    totals: InvoiceTotals,
    payment_info: PaymentInfoDTO,
) -> Invoice:
    invoice = Invoice(
        user_id=user_id,
        client_id=client_id,
        invoice_number=command.invoice_number.strip(),
        issue_date=command.issue_date,
        due_date=command.due_date,
    )
    return apply_command(invoice, command, totals, payment_info)


def build_items(invoice_id: str, items: List[LineItemDTO]) -> List[InvoiceItem]:
    """New item rows for an invoice; incoming item IDs are ignored"""
    return [
        InvoiceItem(
            invoice_id=invoice_id,
            description=item.description.strip(),
            quantity=item.quantity,
            unit_price=item.unit_price,
            position=position,
        )
        for position, item in enumerate(items)
    ]


def row_from_entities(invoice: Invoice, client: Client, items: List[InvoiceItem]) -> dict:
    """Raw row equivalent of freshly written entities, for the row mapper"""
    row = invoice.model_dump()
    row["clients"] = client.model_dump() if client is not None else None
    row["invoice_items"] = [item.model_dump() for item in items]
    return row
