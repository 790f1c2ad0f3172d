"""Shared fixtures for unit tests"""

from datetime import date, datetime, timezone
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.app.services.auth_service import AuthSession
from src.app.use_cases.invoices.dtos import (
    ClientDTO,
    InvoiceCommandDTO,
    LineItemDTO,
    PaymentInfoDTO,
)
from src.domain.invoice import DiscountType, TaxMode

USER_ID = "user_123"


@pytest.fixture
def mock_uow():
    """Mock unit of work"""
    uow = MagicMock()
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()
    return uow


@pytest.fixture
def auth_session():
    return AuthSession(user_id=USER_ID, access_token="token-abc", email="owner@example.com")


@pytest.fixture
def mock_auth_service(auth_session):
    """Auth service reporting a signed-in user"""
    service = MagicMock()
    service.get_session = MagicMock(return_value=auth_session)
    service.sign_out = AsyncMock()
    return service


@pytest.fixture
def signed_out_auth_service():
    """Auth service without a session"""
    service = MagicMock()
    service.get_session = MagicMock(return_value=None)
    service.sign_out = AsyncMock()
    return service


@pytest.fixture
def default_payment_info():
    return PaymentInfoDTO(
        account_name="PRIMARKETLUBE LLP",
        account_number="924020005981756",
        ifsc="UTIB0002932",
    )


@pytest.fixture
def sample_command():
    """Two items (2 x 100, 1 x 50), fixed discount 30, IGST 18%"""
    return InvoiceCommandDTO(
        invoice_number="INV2024060004",
        issue_date=date(2024, 6, 10),
        due_date=date(2024, 6, 25),
        client=ClientDTO(
            name="Acme Traders",
            address="12 MG Road, Kochi",
            gstin="32AAACA1234A1Z5",
        ),
        items=[
            LineItemDTO(description="Social media management", quantity=2, unit_price=Decimal("100")),
            LineItemDTO(description="Ad creatives", quantity=1, unit_price=Decimal("50")),
        ],
        discount_type=DiscountType.FIXED,
        discount_value=Decimal("30"),
        tax_mode=TaxMode.IGST,
        tax_rate=Decimal("18"),
    )


@pytest.fixture
def invoice_row_factory():
    """Build raw invoice rows the way the store returns them"""

    def build(**overrides):
        row = {
            "id": "inv_1",
            "user_id": USER_ID,
            "invoice_number": "INV2024060004",
            "issue_date": date(2024, 6, 10),
            "due_date": date(2024, 6, 25),
            "client_id": "client_1",
            "status": "Unpaid",
            "payment_type": "Full Payment",
            "discount_type": "fixed",
            "discount_value": Decimal("30.00"),
            "tax_mode": "IGST",
            "tax_rate": Decimal("18.00"),
            "remark": None,
            "subtotal": Decimal("250.00"),
            "discount_amount": Decimal("30.00"),
            "tax_amount": Decimal("39.60"),
            "total": Decimal("259.60"),
            "payment_info_account_name": "PRIMARKETLUBE LLP",
            "payment_info_account_number": "924020005981756",
            "payment_info_ifsc": "UTIB0002932",
            "created_at": datetime(2024, 6, 10, 9, 30, tzinfo=timezone.utc),
            "updated_at": datetime(2024, 6, 10, 9, 30, tzinfo=timezone.utc),
            "clients": {
                "id": "client_1",
                "user_id": USER_ID,
                "name": "Acme Traders",
                "address": "12 MG Road, Kochi",
                "gstin": "32AAACA1234A1Z5",
            },
            "invoice_items": [
                {
                    "id": "item_2",
                    "invoice_id": "inv_1",
                    "description": "Ad creatives",
                    "quantity": 1,
                    "unit_price": Decimal("50.00"),
                    "position": 1,
                },
                {
                    "id": "item_1",
                    "invoice_id": "inv_1",
                    "description": "Social media management",
                    "quantity": 2,
                    "unit_price": Decimal("100.00"),
                    "position": 0,
                },
            ],
        }
        row.update(overrides)
        return row

    return build
