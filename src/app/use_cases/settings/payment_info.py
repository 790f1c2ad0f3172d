"""Payment Info Use Cases

Read and update the per-user bank details printed on invoices.
"""

import logging
from src.libs.result import Result, Return, Error
from src.app.repositories.payment_setting_repository import PaymentSettingRepository
from src.app.services.auth_service import AuthService
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.invoices.builders import resolve_payment_info
from src.app.use_cases.invoices.dtos import PaymentInfoDTO
from src.domain.base import utc_now
from src.domain.payment_setting import PaymentSetting

logger = logging.getLogger(__name__)


class GetPaymentInfo:
    """Use Case: Read the payment info of the current user"""

    def __init__(
        self,
        auth_service: AuthService,
        payment_repo: PaymentSettingRepository,
        defaults: PaymentInfoDTO,
    ):
        self.auth_service = auth_service
        self.payment_repo = payment_repo
        self.defaults = defaults

    async def execute(self) -> Result[PaymentInfoDTO]:
        session = self.auth_service.get_session()
        if session is None:
            return Return.err(
                Error(code="NO_ACTIVE_SESSION", message="Please sign in to view payment info")
            )

        try:
            info = await resolve_payment_info(self.payment_repo, session.user_id, self.defaults)
            return Return.ok(info)
        except Exception as e:
            return Return.err(
                Error(
                    code="GET_PAYMENT_INFO_FAILED",
                    message="Failed to load payment info",
                    reason=str(e),
                )
            )


class UpdatePaymentInfo:
    """
    Use Case: Replace the payment info of the current user

    Existing invoices keep their snapshot; only invoices saved afterwards
    pick up the new values.
    """

    def __init__(
        self,
        uow: UnitOfWork,
        auth_service: AuthService,
        payment_repo: PaymentSettingRepository,
    ):
        self.uow = uow
        self.auth_service = auth_service
        self.payment_repo = payment_repo

    async def execute(self, info: PaymentInfoDTO) -> Result[PaymentInfoDTO]:
        session = self.auth_service.get_session()
        if session is None:
            return Return.err(
                Error(code="NO_ACTIVE_SESSION", message="Please sign in to update payment info")
            )

        try:
            await self.payment_repo.save(
                PaymentSetting(
                    user_id=session.user_id,
                    account_name=info.account_name,
                    account_number=info.account_number,
                    ifsc=info.ifsc,
                    updated_at=utc_now(),
                )
            )
            await self.uow.commit()
            logger.info(f"Payment info updated for user {session.user_id}")
            return Return.ok(info)

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="UPDATE_PAYMENT_INFO_FAILED",
                    message="Failed to update payment info",
                    reason=str(e),
                )
            )
