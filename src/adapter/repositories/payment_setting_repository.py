"""SQLAlchemy Payment Setting Repository Implementation"""

from typing import Optional
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.payment_setting_repository import PaymentSettingRepository
from src.domain.payment_setting import PaymentSetting


class SqlAlchemyPaymentSettingRepository(PaymentSettingRepository):
    """SQLAlchemy implementation of PaymentSettingRepository"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_user_id(self, user_id: str) -> Optional[PaymentSetting]:
        return await self.session.get(PaymentSetting, user_id)

    async def save(self, setting: PaymentSetting) -> PaymentSetting:
        """
        Insert or replace the user's payment setting

        Args:
            setting: New values; user_id selects the row

        Returns:
            Stored PaymentSetting
        """
        stored = await self.session.merge(setting)
        await self.session.flush()
        return stored
