"""Invoice Item Domain Entity

Tracks individual line items within an invoice.
"""

from datetime import datetime
from decimal import Decimal
from sqlmodel import Field, Column, Index
from sqlalchemy import ForeignKey, Integer, Numeric, String
from src.domain.base import BaseModel, generate_uuid, timestamp_column, utc_now


class InvoiceItem(BaseModel, table=True):
    """
    Invoice Item - Individual line item within an invoice

    Domain Rules:
    - Each item belongs to exactly one invoice and is deleted with it
    - item total = quantity * unit_price (never stored)
    - position keeps the display order of the form
    """

    __tablename__ = "invoice_items"
    __table_args__ = (
        Index('ix_invoice_items_invoice_id', 'invoice_id'),
    )

    id: str = Field(
        default_factory=generate_uuid,
        sa_column=Column(String(36), primary_key=True),
        description="Unique item identifier (UUID)"
    )

    invoice_id: str = Field(
        sa_column=Column(String(36), ForeignKey("invoices.id", ondelete="CASCADE"), nullable=False),
        description="Foreign key to Invoice"
    )

    description: str = Field(
        sa_column=Column(String(500), nullable=False),
        description="Line item description"
    )

    quantity: int = Field(
        sa_column=Column(Integer, nullable=False),
        description="Quantity (whole units)"
    )

    unit_price: Decimal = Field(
        sa_column=Column(Numeric(18, 2), nullable=False),
        description="Price per unit"
    )

    position: int = Field(
        default=0,
        sa_column=Column(Integer, nullable=False, default=0),
        description="Display order within the invoice"
    )

    created_at: datetime = Field(
        default_factory=utc_now,
        sa_column=timestamp_column(),
        description="Line item creation timestamp"
    )
