"""Unit tests for payment info use cases"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from src.app.use_cases.invoices.dtos import PaymentInfoDTO
from src.app.use_cases.settings.payment_info import GetPaymentInfo, UpdatePaymentInfo
from src.domain.payment_setting import PaymentSetting


@pytest.fixture
def mock_payment_repo():
    repo = MagicMock()
    repo.get_by_user_id = AsyncMock(return_value=None)
    repo.save = AsyncMock(side_effect=lambda setting: setting)
    return repo


@pytest.fixture
def new_info():
    return PaymentInfoDTO(account_name="Acme Studio", account_number="000111222", ifsc="HDFC0000123")


@pytest.mark.asyncio
class TestGetPaymentInfo:
    async def test_defaults_until_saved(self, mock_auth_service, mock_payment_repo, default_payment_info):
        result = await GetPaymentInfo(mock_auth_service, mock_payment_repo, default_payment_info).execute()

        assert result.value == default_payment_info

    async def test_stored_setting(self, mock_auth_service, mock_payment_repo, default_payment_info):
        mock_payment_repo.get_by_user_id = AsyncMock(
            return_value=PaymentSetting(
                user_id="user_123", account_name="Acme Studio", account_number="000111222", ifsc="HDFC0000123"
            )
        )

        result = await GetPaymentInfo(mock_auth_service, mock_payment_repo, default_payment_info).execute()

        assert result.value.account_name == "Acme Studio"
        mock_payment_repo.get_by_user_id.assert_awaited_once_with("user_123")

    async def test_requires_session(self, signed_out_auth_service, mock_payment_repo, default_payment_info):
        result = await GetPaymentInfo(signed_out_auth_service, mock_payment_repo, default_payment_info).execute()

        assert result.error.code == "NO_ACTIVE_SESSION"


@pytest.mark.asyncio
class TestUpdatePaymentInfo:
    async def test_saves_and_commits(self, mock_uow, mock_auth_service, mock_payment_repo, new_info):
        """
        Given: New bank details
        When: Payment info is updated
        Then: The user's setting is saved and committed
        """
        # Act
        result = await UpdatePaymentInfo(mock_uow, mock_auth_service, mock_payment_repo).execute(new_info)

        # Assert
        assert result.value == new_info
        saved = mock_payment_repo.save.await_args.args[0]
        assert saved.user_id == "user_123"
        assert saved.ifsc == "HDFC0000123"
        mock_uow.commit.assert_awaited_once()

    async def test_rolls_back_on_failure(self, mock_uow, mock_auth_service, mock_payment_repo, new_info):
        mock_payment_repo.save = AsyncMock(side_effect=Exception("constraint"))

        result = await UpdatePaymentInfo(mock_uow, mock_auth_service, mock_payment_repo).execute(new_info)

        assert result.error.code == "UPDATE_PAYMENT_INFO_FAILED"
        mock_uow.rollback.assert_awaited_once()
