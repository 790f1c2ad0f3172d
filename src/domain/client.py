"""Client Domain Entity

Billing party printed in the "Bill To" block of an invoice.
"""

from datetime import datetime
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import String, Text
from src.domain.base import BaseModel, generate_uuid, timestamp_column, utc_now


class Client(BaseModel, table=True):
    """
    Client - Billing party of a single invoice

    Domain Rules:
    - A fresh client row is created for every new or duplicated invoice
    - gstin is optional (unregistered clients)
    """

    __tablename__ = "clients"
    __table_args__ = (
        Index('ix_clients_user_id', 'user_id'),
    )

    id: str = Field(
        default_factory=generate_uuid,
        sa_column=Column(String(36), primary_key=True),
        description="Unique client identifier (UUID)"
    )

    user_id: str = Field(
        sa_column=Column(String(64), nullable=False),
        description="Owner of the row"
    )

    name: str = Field(
        sa_column=Column(String(255), nullable=False),
        description="Client (business) name"
    )

    address: str = Field(
        default="",
        sa_column=Column(Text, nullable=False),
        description="Postal address"
    )

    gstin: Optional[str] = Field(
        default=None,
        sa_column=Column(String(15), nullable=True),
        description="GST identification number"
    )

    created_at: datetime = Field(
        default_factory=utc_now,
        sa_column=timestamp_column(),
        description="Creation timestamp"
    )
