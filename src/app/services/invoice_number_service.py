"""Invoice Number Service

Generates per-user, per-month sequential invoice numbers and checks
invoice number uniqueness.

Format: INV{YYYYMM}{NNNN} (e.g., INV2024060004)
Fallback format: INV{YYYYMMDD}{NNN} with a random 3-digit suffix
"""

import logging
import random
import re
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Callable, Optional

from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.services.auth_service import AuthService

logger = logging.getLogger(__name__)

INVOICE_PREFIX = "INV"
RECENT_NUMBERS_WINDOW = 20
SEQUENCE_DIGITS = 4


class NumberingStrategy(str, Enum):
    SEQUENTIAL = "sequential"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class GeneratedInvoiceNumber:
    """Invoice number together with the strategy that produced it"""

    value: str
    strategy: NumberingStrategy

    @property
    def is_fallback(self) -> bool:
        return self.strategy == NumberingStrategy.FALLBACK


class InvoiceNumberService:
    """
    Invoice numbering for the current user

    The sequence is derived from the user's most recent invoice numbers
    only (RECENT_NUMBERS_WINDOW), so an old number outside that window is
    not considered. Concurrent creation can produce the same number; the
    uniqueness check before saving is what catches it.
    """

    def __init__(
        self,
        invoice_repo: InvoiceRepository,
        auth_service: AuthService,
        clock: Optional[Callable[[], datetime]] = None,
        rng: Optional[random.Random] = None,
    ):
        self.invoice_repo = invoice_repo
        self.auth_service = auth_service
        self.clock = clock or datetime.now
        self.rng = rng or random.Random()

    async def generate_invoice_number(self) -> GeneratedInvoiceNumber:
        """
        Generate the next invoice number for the current month

        Returns:
            GeneratedInvoiceNumber with strategy=sequential, or strategy=fallback
            when there is no session or the store could not be read
        """
        now = self.clock()

        try:
            session = self.auth_service.get_session()
            if session is None:
                logger.info("No active session, using fallback invoice number")
                return self._fallback_number(now)

            year_month = now.strftime("%Y%m")
            recent_numbers = await self.invoice_repo.get_recent_invoice_numbers(
                session.user_id, limit=RECENT_NUMBERS_WINDOW
            )

            pattern = re.compile(rf"^{INVOICE_PREFIX}{year_month}(\d{{{SEQUENCE_DIGITS}}})$")
            highest = 0
            for number in recent_numbers:
                match = pattern.match(number or "")
                if match:
                    highest = max(highest, int(match.group(1)))

            sequence = str(highest + 1).zfill(SEQUENCE_DIGITS)
            return GeneratedInvoiceNumber(
                value=f"{INVOICE_PREFIX}{year_month}{sequence}",
                strategy=NumberingStrategy.SEQUENTIAL,
            )

        except Exception as e:
            logger.warning(f"Sequential invoice numbering failed, using fallback: {e}")
            return self._fallback_number(now)

    async def is_invoice_number_unique(
        self, invoice_number: str, exclude_id: Optional[str] = None
    ) -> bool:
        """
        Check that no other invoice of the current user has this number

        Without a session the number is reported unique; on a store error it
        is reported not unique, which blocks saving.

        Args:
            invoice_number: Number to check
            exclude_id: Invoice ID to ignore (the invoice being edited)

        Returns:
            True if the number is free
        """
        session = self.auth_service.get_session()
        if session is None:
            logger.info("No active session, treating invoice number as unique")
            return True

        try:
            exists = await self.invoice_repo.invoice_number_exists(
                session.user_id, invoice_number, exclude_id=exclude_id
            )
            return not exists
        except Exception as e:
            logger.error(f"Invoice number uniqueness check failed for {invoice_number}: {e}")
            return False

    def _fallback_number(self, now: datetime) -> GeneratedInvoiceNumber:
        suffix = str(self.rng.randint(0, 999)).zfill(3)
        return GeneratedInvoiceNumber(
            value=f"{INVOICE_PREFIX}{now.strftime('%Y%m%d')}{suffix}",
            strategy=NumberingStrategy.FALLBACK,
        )
