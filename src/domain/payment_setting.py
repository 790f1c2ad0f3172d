"""Payment Setting Domain Entity

Bank details printed on invoices. One row per user; a snapshot is copied onto
each invoice when it is saved.
"""

from datetime import datetime
from sqlmodel import Field, Column
from sqlalchemy import String
from src.domain.base import BaseModel, timestamp_column, utc_now


class PaymentSetting(BaseModel, table=True):
    """
    Payment Setting - Per-user bank account configuration

    Domain Rules:
    - At most one row per user (user_id is the primary key)
    - Missing row means the configured defaults apply
    """

    __tablename__ = "payment_settings"

    user_id: str = Field(
        sa_column=Column(String(64), primary_key=True),
        description="Owner of the setting"
    )

    account_name: str = Field(
        sa_column=Column(String(255), nullable=False),
        description="Bank account holder name"
    )

    account_number: str = Field(
        sa_column=Column(String(34), nullable=False),
        description="Bank account number"
    )

    ifsc: str = Field(
        sa_column=Column(String(11), nullable=False),
        description="IFSC branch code"
    )

    updated_at: datetime = Field(
        default_factory=utc_now,
        sa_column=timestamp_column(),
        description="Last update timestamp"
    )
