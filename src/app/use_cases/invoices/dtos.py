"""Data Transfer Objects for Invoice Use Cases

Pydantic models for command inputs and response outputs.
"""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, Field

from src.domain.invoice import DiscountType, InvoiceStatus, PaymentType, TaxMode


class ClientDTO(BaseModel):
    """Billing party of an invoice"""

    id: str = Field(default="", description="Client ID (empty for a new client)")
    name: str = Field(default="", description="Client name")
    address: str = Field(default="", description="Postal address")
    gstin: Optional[str] = Field(default=None, description="GST identification number")


class LineItemDTO(BaseModel):
    """Invoice line item"""

    id: Optional[str] = Field(default=None, description="Item ID (None for a new item)")
    description: str = Field(default="", description="Item description")
    quantity: int = Field(default=1, description="Quantity")
    unit_price: Decimal = Field(default=Decimal("0"), description="Price per unit")


class PaymentInfoDTO(BaseModel):
    """Bank details printed on invoices"""

    account_name: str = Field(..., description="Bank account holder name")
    account_number: str = Field(..., description="Bank account number")
    ifsc: str = Field(..., description="IFSC branch code")

    class Config:
        json_schema_extra = {
            "example": {
                "account_name": "PRIMARKETLUBE LLP",
                "account_number": "924020005981756",
                "ifsc": "UTIB0002932",
            }
        }


class TaxLineDTO(BaseModel):
    """One displayed GST line (IGST, or CGST and SGST)"""

    label: str
    rate: Decimal
    amount: Decimal


class InvoiceTotalsDTO(BaseModel):
    """Computed monetary fields of an invoice"""

    subtotal: Decimal
    discount_amount: Decimal
    tax_amount: Decimal
    total: Decimal
    tax_breakdown: List[TaxLineDTO] = Field(default_factory=list)


class InvoiceCommandDTO(BaseModel):
    """
    Command DTO for creating or updating an invoice

    Monetary fields are not accepted: they are always recomputed from the
    items, discount and tax configuration.
    """

    invoice_number: str = Field(default="", description="Invoice number")
    issue_date: date = Field(..., description="Issue date")
    due_date: date = Field(..., description="Due date (>= issue date)")
    client: ClientDTO = Field(default_factory=ClientDTO)
    items: List[LineItemDTO] = Field(default_factory=list)
    status: InvoiceStatus = Field(default=InvoiceStatus.UNPAID)
    payment_type: PaymentType = Field(default=PaymentType.FULL_PAYMENT)
    discount_type: DiscountType = Field(default=DiscountType.PERCENTAGE)
    discount_value: Decimal = Field(default=Decimal("0"))
    tax_mode: TaxMode = Field(default=TaxMode.IGST)
    tax_rate: Decimal = Field(default=Decimal("18"))
    remark: Optional[str] = Field(default=None)

    class Config:
        json_schema_extra = {
            "example": {
                "invoice_number": "INV2024060004",
                "issue_date": "2024-06-10",
                "due_date": "2024-06-25",
                "client": {
                    "name": "Acme Traders",
                    "address": "12 MG Road, Kochi, Kerala 682001",
                    "gstin": "32AAACA1234A1Z5",
                },
                "items": [
                    {"description": "Social media management", "quantity": 2, "unit_price": "100.00"},
                    {"description": "Ad creatives", "quantity": 1, "unit_price": "50.00"},
                ],
                "status": "Unpaid",
                "payment_type": "Full Payment",
                "discount_type": "fixed",
                "discount_value": "30",
                "tax_mode": "IGST",
                "tax_rate": "18",
                "remark": None,
            }
        }


class InvoiceDTO(BaseModel):
    """Invoice with embedded client, items and payment snapshot"""

    id: str
    invoice_number: str
    issue_date: date
    due_date: date
    client: ClientDTO
    items: List[LineItemDTO]
    status: InvoiceStatus
    payment_type: PaymentType
    discount_type: DiscountType
    discount_value: Decimal
    tax_mode: TaxMode
    tax_rate: Decimal
    remark: Optional[str] = None
    subtotal: Decimal
    discount_amount: Decimal
    tax_amount: Decimal
    total: Decimal
    tax_breakdown: List[TaxLineDTO] = Field(default_factory=list)
    payment_info: Optional[PaymentInfoDTO] = None
    created_at: Optional[datetime] = None

    def to_command(self) -> InvoiceCommandDTO:
        """Editable fields of this invoice, e.g. to apply an inline change"""
        return InvoiceCommandDTO(
            invoice_number=self.invoice_number,
            issue_date=self.issue_date,
            due_date=self.due_date,
            client=self.client.model_copy(),
            items=[item.model_copy() for item in self.items],
            status=self.status,
            payment_type=self.payment_type,
            discount_type=self.discount_type,
            discount_value=self.discount_value,
            tax_mode=self.tax_mode,
            tax_rate=self.tax_rate,
            remark=self.remark,
        )


class InvoiceSearchFiltersDTO(BaseModel):
    """Filters applied on top of the free-text query"""

    start_date: Optional[date] = None
    end_date: Optional[date] = None
    status: Optional[InvoiceStatus] = None
    payment_type: Optional[PaymentType] = None


class SearchStrategy(str, Enum):
    """Which query path produced a search result"""
    JOINED = "joined"
    FALLBACK = "fallback"


class InvoiceSearchResultDTO(BaseModel):
    """One page of invoices matching a search"""

    invoices: List[InvoiceDTO]
    count: int = Field(..., description="Total number of matching invoices")
    total_pages: int
    current_page: int
    page_size: int
    strategy: SearchStrategy = Field(
        default=SearchStrategy.JOINED,
        description="'fallback' when the joined query failed and separate queries were used",
    )


class DuplicateInvoiceResultDTO(BaseModel):
    """Result of duplicating an invoice"""

    invoice: InvoiceDTO
    number_verified_unique: bool = Field(
        ...,
        description="False when no unique invoice number was confirmed within the attempt limit",
    )


class InvoiceNumberDTO(BaseModel):
    """Generated invoice number"""

    invoice_number: str
    strategy: str = Field(..., description="'sequential' or 'fallback'")


class InvoiceNumberAvailabilityDTO(BaseModel):
    invoice_number: str
    unique: bool


class ValidationIssueDTO(BaseModel):
    """One reason an invoice cannot be saved or exported"""

    field: str
    message: str


class InvoicePdfDTO(BaseModel):
    """Rendered invoice PDF"""

    filename: str
    content: bytes
