"""Payment Setting Repository Interface"""

from abc import ABC, abstractmethod
from typing import Optional
from src.domain.payment_setting import PaymentSetting


class PaymentSettingRepository(ABC):
    """Repository interface for the per-user payment setting"""

    @abstractmethod
    async def get_by_user_id(self, user_id: str) -> Optional[PaymentSetting]:
        pass

    @abstractmethod
    async def save(self, setting: PaymentSetting) -> PaymentSetting:
        """Insert or replace the user's payment setting"""
        pass
