"""Request schemas for Invoice API

Pydantic models for validating incoming HTTP requests. Business validation
(required fields, dates, uniqueness) happens in the use cases so that the
API reports every problem at once.
"""

from datetime import date
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator

from src.app.use_cases.invoices.dtos import ClientDTO, InvoiceCommandDTO, LineItemDTO, PaymentInfoDTO
from src.domain.invoice import DiscountType, InvoiceStatus, PaymentType, TaxMode


class ClientRequestSchema(BaseModel):
    name: str = Field(default="", max_length=255, description="Client name")
    address: str = Field(default="", description="Postal address")
    gstin: Optional[str] = Field(default=None, max_length=15, description="GSTIN (optional)")

    @field_validator("gstin")
    @classmethod
    def normalize_gstin(cls, v):
        if v is None:
            return None
        v = v.strip().upper()
        return v or None


class LineItemRequestSchema(BaseModel):
    id: Optional[str] = Field(default=None, description="Existing item ID when editing")
    description: str = Field(default="", max_length=500)
    quantity: int = Field(default=1)
    unit_price: Decimal = Field(default=Decimal("0"))


class InvoiceRequestSchema(BaseModel):
    """
    Request schema for creating or updating an invoice

    Used for POST /invoices, PUT /invoices/{id} and POST /invoices/pdf.
    Monetary totals are not accepted; they are always recomputed.
    """

    invoice_number: str = Field(default="", max_length=50)
    issue_date: date
    due_date: date
    client: ClientRequestSchema = Field(default_factory=ClientRequestSchema)
    items: List[LineItemRequestSchema] = Field(default_factory=list)
    status: InvoiceStatus = InvoiceStatus.UNPAID
    payment_type: PaymentType = PaymentType.FULL_PAYMENT
    discount_type: DiscountType = DiscountType.PERCENTAGE
    discount_value: Decimal = Field(default=Decimal("0"), ge=0)
    tax_mode: TaxMode = TaxMode.IGST
    tax_rate: Decimal = Field(default=Decimal("18"), ge=0, le=100)
    remark: Optional[str] = None

    def to_command(self) -> InvoiceCommandDTO:
        return InvoiceCommandDTO(
            invoice_number=self.invoice_number.strip(),
            issue_date=self.issue_date,
            due_date=self.due_date,
            client=ClientDTO(**self.client.model_dump()),
            items=[LineItemDTO(**item.model_dump()) for item in self.items],
            status=self.status,
            payment_type=self.payment_type,
            discount_type=self.discount_type,
            discount_value=self.discount_value,
            tax_mode=self.tax_mode,
            tax_rate=self.tax_rate,
            remark=self.remark,
        )


class StatusRequestSchema(BaseModel):
    status: InvoiceStatus


class RemarkRequestSchema(BaseModel):
    remark: Optional[str] = Field(default=None, description="New remark; null or empty clears it")

    @field_validator("remark")
    @classmethod
    def empty_to_none(cls, v):
        if v is None or not v.strip():
            return None
        return v


class PaymentInfoRequestSchema(BaseModel):
    """Request schema for PUT /settings/payment-info"""

    account_name: str = Field(..., min_length=1, max_length=255)
    account_number: str = Field(..., min_length=1, max_length=34)
    ifsc: str = Field(..., min_length=1, max_length=11)

    @field_validator("account_name", "account_number")
    @classmethod
    def strip_value(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Value must not be blank")
        return v

    @field_validator("ifsc")
    @classmethod
    def normalize_ifsc(cls, v):
        v = v.strip().upper()
        if not v:
            raise ValueError("IFSC must not be blank")
        return v

    def to_dto(self) -> PaymentInfoDTO:
        return PaymentInfoDTO(
            account_name=self.account_name,
            account_number=self.account_number,
            ifsc=self.ifsc,
        )
