"""Invoice Domain Entity

GST invoice issued by the user to a client, with its computed monetary
fields and a snapshot of the payment details at the time of saving.
"""

from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import List, Optional
from sqlmodel import Field, Column, Index, Relationship
from sqlalchemy import Date, ForeignKey, Numeric, String, Text
from src.domain.base import BaseModel, generate_uuid, timestamp_column, utc_now
from src.domain.client import Client
from src.domain.invoice_item import InvoiceItem


class InvoiceStatus(str, Enum):
    """Invoice payment status"""
    PAID = "Paid"
    UNPAID = "Unpaid"


class PaymentType(str, Enum):
    """Invoice payment type"""
    ADVANCE = "Advance"
    FULL_PAYMENT = "Full Payment"


class DiscountType(str, Enum):
    """How discount_value is interpreted"""
    PERCENTAGE = "percentage"
    FIXED = "fixed"


class TaxMode(str, Enum):
    """GST mode: single combined rate, split rate, or none"""
    IGST = "IGST"
    CGST_SGST = "CGST-SGST"
    NO_GST = "No GST"


class Invoice(BaseModel, table=True):
    """
    Invoice - GST invoice for a client

    Domain Rules:
    - invoice_number is unique within a user's invoices (checked before save)
    - due_date >= issue_date (checked before save)
    - total = subtotal - discount_amount + tax_amount
    - Monetary fields are recomputed from the items before every save
    - payment_info_* columns are a snapshot, not a live link
    """

    __tablename__ = "invoices"
    __table_args__ = (
        Index('ix_invoices_user_id', 'user_id'),
        Index('ix_invoices_user_id_invoice_number', 'user_id', 'invoice_number'),
        Index('ix_invoices_issue_date', 'issue_date'),
    )

    id: str = Field(
        default_factory=generate_uuid,
        sa_column=Column(String(36), primary_key=True),
        description="Unique invoice identifier (UUID)"
    )

    user_id: str = Field(
        sa_column=Column(String(64), nullable=False),
        description="Owner of the row"
    )

    invoice_number: str = Field(
        sa_column=Column(String(50), nullable=False),
        description="Human-facing invoice number (e.g., INV2024060001)"
    )

    issue_date: date = Field(
        sa_column=Column(Date, nullable=False),
        description="Issue date"
    )

    due_date: date = Field(
        sa_column=Column(Date, nullable=False),
        description="Payment due date"
    )

    client_id: Optional[str] = Field(
        default=None,
        sa_column=Column(String(36), ForeignKey("clients.id", ondelete="SET NULL"), nullable=True),
        description="Foreign key to Client"
    )

    status: str = Field(
        default=InvoiceStatus.UNPAID.value,
        sa_column=Column(String(20), nullable=False),
        description="Paid or Unpaid"
    )

    payment_type: str = Field(
        default=PaymentType.FULL_PAYMENT.value,
        sa_column=Column(String(20), nullable=False),
        description="Advance or Full Payment"
    )

    discount_type: str = Field(
        default=DiscountType.PERCENTAGE.value,
        sa_column=Column(String(20), nullable=False),
        description="percentage or fixed"
    )

    discount_value: Decimal = Field(
        default=Decimal("0"),
        sa_column=Column(Numeric(18, 2), nullable=False),
        description="Discount percentage or fixed amount"
    )

    tax_mode: str = Field(
        default=TaxMode.IGST.value,
        sa_column=Column(String(20), nullable=False),
        description="IGST, CGST-SGST or No GST"
    )

    tax_rate: Decimal = Field(
        default=Decimal("18"),
        sa_column=Column(Numeric(5, 2), nullable=False),
        description="GST rate in percent"
    )

    remark: Optional[str] = Field(
        default=None,
        sa_column=Column(Text, nullable=True),
        description="Free-text remark"
    )

    subtotal: Decimal = Field(
        default=Decimal("0"),
        sa_column=Column(Numeric(18, 2), nullable=False),
        description="Sum of item totals"
    )

    discount_amount: Decimal = Field(
        default=Decimal("0"),
        sa_column=Column(Numeric(18, 2), nullable=False),
        description="Discount applied to the subtotal"
    )

    tax_amount: Decimal = Field(
        default=Decimal("0"),
        sa_column=Column(Numeric(18, 2), nullable=False),
        description="GST on the taxable base"
    )

    total: Decimal = Field(
        default=Decimal("0"),
        sa_column=Column(Numeric(18, 2), nullable=False),
        description="Grand total"
    )

    payment_info_account_name: Optional[str] = Field(
        default=None,
        sa_column=Column(String(255), nullable=True),
        description="Snapshot of the bank account name"
    )

    payment_info_account_number: Optional[str] = Field(
        default=None,
        sa_column=Column(String(34), nullable=True),
        description="Snapshot of the bank account number"
    )

    payment_info_ifsc: Optional[str] = Field(
        default=None,
        sa_column=Column(String(11), nullable=True),
        description="Snapshot of the IFSC code"
    )

    created_at: datetime = Field(
        default_factory=utc_now,
        sa_column=timestamp_column(),
        description="Invoice creation timestamp"
    )

    updated_at: datetime = Field(
        default_factory=utc_now,
        sa_column=timestamp_column(),
        description="Last update timestamp"
    )

    # Only populated by explicit eager loading (see the joined search query)
    client: Optional[Client] = Relationship(
        sa_relationship_kwargs={"lazy": "noload"}
    )

    items: List[InvoiceItem] = Relationship(
        sa_relationship_kwargs={
            "lazy": "noload",
            "passive_deletes": True,
            "order_by": "InvoiceItem.position",
        }
    )
