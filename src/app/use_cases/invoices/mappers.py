"""Store Row Normalization

Single boundary between raw store rows and invoice DTOs.

Embedded relations arrive in more than one shape depending on the query
path: the client may be a bare object, a one-element list, or missing with
only ``client_id`` known; items may be missing altogether. Everything is
normalized here instead of at each call site.
"""

from typing import Any, Dict, List, Optional

from src.domain.calculations import split_tax
from .dtos import ClientDTO, InvoiceDTO, LineItemDTO, PaymentInfoDTO, TaxLineDTO

Row = Dict[str, Any]


def normalize_relation(value: Any) -> Optional[Row]:
    """Return the embedded object, unwrapping a list, or None"""
    if isinstance(value, (list, tuple)):
        return value[0] if value else None
    if isinstance(value, dict):
        return value
    return None


def client_from_row(row: Row) -> ClientDTO:
    client_row = normalize_relation(row.get("clients"))

    if client_row is None:
        return ClientDTO(id=row.get("client_id") or "")

    return ClientDTO(
        id=client_row.get("id") or "",
        name=client_row.get("name") or "",
        address=client_row.get("address") or "",
        gstin=client_row.get("gstin") or None,
    )


def items_from_row(row: Row) -> List[LineItemDTO]:
    item_rows = row.get("invoice_items")
    if not isinstance(item_rows, (list, tuple)):
        return []

    ordered = sorted(item_rows, key=lambda item: item.get("position") or 0)
    return [
        LineItemDTO(
            id=item.get("id"),
            description=item.get("description") or "",
            quantity=item.get("quantity") or 0,
            unit_price=item.get("unit_price") or 0,
        )
        for item in ordered
    ]


def payment_info_from_row(
    row: Row, fallback: Optional[PaymentInfoDTO] = None
) -> Optional[PaymentInfoDTO]:
    """Payment snapshot of the invoice; missing fields come from fallback"""
    account_name = row.get("payment_info_account_name") or (fallback.account_name if fallback else None)
    account_number = row.get("payment_info_account_number") or (fallback.account_number if fallback else None)
    ifsc = row.get("payment_info_ifsc") or (fallback.ifsc if fallback else None)

    if not (account_name or account_number or ifsc):
        return None

    return PaymentInfoDTO(
        account_name=account_name or "",
        account_number=account_number or "",
        ifsc=ifsc or "",
    )


def tax_breakdown_for(tax_amount, tax_mode, tax_rate) -> List[TaxLineDTO]:
    return [
        TaxLineDTO(label=line.label, rate=line.rate, amount=line.amount)
        for line in split_tax(tax_amount, tax_mode, tax_rate)
    ]


def invoice_from_row(row: Row, fallback_payment_info: Optional[PaymentInfoDTO] = None) -> InvoiceDTO:
    """
    Map a raw invoice row to an InvoiceDTO

    Args:
        row: Invoice row, optionally with "clients" and "invoice_items" embedded
        fallback_payment_info: Used for payment snapshot fields the row lacks

    Returns:
        InvoiceDTO
    """
    tax_breakdown = tax_breakdown_for(
        row.get("tax_amount") or 0, row["tax_mode"], row.get("tax_rate") or 0
    )

    return InvoiceDTO(
        id=row["id"],
        invoice_number=row.get("invoice_number") or "",
        issue_date=row["issue_date"],
        due_date=row["due_date"],
        client=client_from_row(row),
        items=items_from_row(row),
        status=row["status"],
        payment_type=row["payment_type"],
        discount_type=row["discount_type"],
        discount_value=row.get("discount_value") or 0,
        tax_mode=row["tax_mode"],
        tax_rate=row.get("tax_rate") or 0,
        remark=row.get("remark"),
        subtotal=row.get("subtotal") or 0,
        discount_amount=row.get("discount_amount") or 0,
        tax_amount=row.get("tax_amount") or 0,
        total=row.get("total") or 0,
        tax_breakdown=tax_breakdown,
        payment_info=payment_info_from_row(row, fallback_payment_info),
        created_at=row.get("created_at"),
    )
