"""Invoice Document Assembly

Turns an invoice into the structured, already formatted InvoiceDocument that
a PdfService renders. Amounts use Indian digit grouping (12,34,567.00) and
dates are printed as dd/mm/yyyy.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional

from src.app.services.pdf_service import (
    DocumentClientBlock,
    DocumentHeader,
    DocumentItemRow,
    DocumentPaymentBlock,
    DocumentSummary,
    InvoiceDocument,
)
from src.domain.calculations import ZERO, as_decimal, calculate_item_total, round_money, split_tax
from .dtos import InvoiceDTO, PaymentInfoDTO

# The standard PDF fonts have no rupee glyph
CURRENCY_SYMBOL = "Rs. "
DATE_FORMAT = "%d/%m/%Y"
FOOTER_TEXT = "Looking forward to doing business with you again."


@dataclass
class CompanyProfile:
    """Issuer details printed in the invoice header"""

    name: str
    lines: List[str] = field(default_factory=list)


def group_indian(digits: str) -> str:
    """Group an integer digit string as 12,34,567"""
    if len(digits) <= 3:
        return digits

    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups + [tail])


def format_currency(amount) -> str:
    value = round_money(amount)
    sign = "-" if value < ZERO else ""
    whole, fraction = f"{abs(value):.2f}".split(".")
    return f"{sign}{CURRENCY_SYMBOL}{group_indian(whole)}.{fraction}"


def format_date(value: date) -> str:
    return value.strftime(DATE_FORMAT)


def format_rate(rate) -> str:
    """18.00 -> '18', 2.50 -> '2.5'"""
    return format(as_decimal(rate).normalize(), "f")


def build_summary(invoice: InvoiceDTO) -> DocumentSummary:
    rows = [("Subtotal:", format_currency(invoice.subtotal))]

    if invoice.discount_amount > 0:
        rows.append(("Discount:", f"-{format_currency(invoice.discount_amount)}"))

    for line in split_tax(invoice.tax_amount, invoice.tax_mode, invoice.tax_rate):
        rows.append((f"{line.label} ({format_rate(line.rate)}%):", format_currency(line.amount)))

    return DocumentSummary(rows=rows, grand_total=format_currency(invoice.total))


def build_invoice_document(
    invoice: InvoiceDTO,
    company: CompanyProfile,
    payment_info: Optional[PaymentInfoDTO] = None,
) -> InvoiceDocument:
    """
    Assemble the printable document for an invoice

    Args:
        invoice: Invoice with totals already computed
        company: Issuer details for the header
        payment_info: Bank details; the payment block is omitted when None

    Returns:
        InvoiceDocument
    """
    header = DocumentHeader(
        company_name=f"Invoice from {company.name}",
        company_lines=list(company.lines),
        invoice_number=invoice.invoice_number,
        issue_date=format_date(invoice.issue_date),
        due_date=format_date(invoice.due_date),
        payment_type=invoice.payment_type.value,
    )

    client = DocumentClientBlock(
        name=invoice.client.name,
        address=invoice.client.address,
        gstin=invoice.client.gstin or None,
    )

    items = [
        DocumentItemRow(
            description=item.description,
            quantity=str(item.quantity),
            unit_price=format_currency(item.unit_price),
            total=format_currency(calculate_item_total(item)),
        )
        for item in invoice.items
    ]

    payment = None
    if payment_info is not None:
        payment = DocumentPaymentBlock(
            account_name=payment_info.account_name,
            account_number=payment_info.account_number,
            ifsc=payment_info.ifsc,
        )

    return InvoiceDocument(
        header=header,
        client=client,
        items=items,
        payment=payment,
        summary=build_summary(invoice),
        remark=invoice.remark or None,
        footer=FOOTER_TEXT,
    )
