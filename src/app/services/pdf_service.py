"""PDF Generation Service Interface

Defines the contract for PDF generation operations and the structured
document description the renderer consumes.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional, Tuple


@dataclass
class DocumentHeader:
    company_name: str
    company_lines: List[str]
    invoice_number: str
    issue_date: str
    due_date: str
    payment_type: str


@dataclass
class DocumentClientBlock:
    name: str
    address: str
    gstin: Optional[str] = None


@dataclass
class DocumentItemRow:
    description: str
    quantity: str
    unit_price: str
    total: str


@dataclass
class DocumentPaymentBlock:
    account_name: str
    account_number: str
    ifsc: str


@dataclass
class DocumentSummary:
    rows: List[Tuple[str, str]] = field(default_factory=list)
    grand_total: str = ""


@dataclass
class InvoiceDocument:
    """Everything printed on an invoice, already formatted as text"""

    header: DocumentHeader
    client: DocumentClientBlock
    items: List[DocumentItemRow]
    payment: Optional[DocumentPaymentBlock]
    summary: DocumentSummary
    remark: Optional[str] = None
    footer: str = ""

    @property
    def filename(self) -> str:
        return f"Invoice-{self.header.invoice_number}.pdf"


class PdfService(ABC):
    """
    Service interface for PDF generation

    Provides PDF generation capabilities for invoices.
    """

    @abstractmethod
    def render_invoice(self, document: InvoiceDocument) -> bytes:
        """
        Render an invoice PDF

        Args:
            document: Structured invoice description

        Returns:
            PDF document as bytes
        """
        pass
