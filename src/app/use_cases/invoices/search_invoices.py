"""SearchInvoices Use Case

Free-text search, filtering and pagination of the current user's invoices.

Two query paths exist. The joined path loads invoices with their client and
items in one go. If it fails for any reason, the fallback path loads the page
of bare invoices and then the clients and items separately, joining them in
memory. The result records which path produced it.
"""

import logging
import math
import re
from typing import Any, Dict, List, Optional, Tuple
from src.libs.result import Result, Return, Error
from src.app.repositories.client_repository import ClientRepository
from src.app.repositories.invoice_item_repository import InvoiceItemRepository
from src.app.repositories.invoice_repository import (
    InvoiceQueryCriteria,
    InvoiceRepository,
    InvoiceRow,
)
from src.app.repositories.payment_setting_repository import PaymentSettingRepository
from src.app.services.auth_service import AuthService
from .builders import resolve_payment_info
from .dtos import (
    InvoiceSearchFiltersDTO,
    InvoiceSearchResultDTO,
    PaymentInfoDTO,
    SearchStrategy,
)
from .mappers import invoice_from_row

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 10


NUMERIC_QUERY = re.compile(
    r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?"
    r"|[+-]?Infinity"
    r"|0[xX][0-9a-fA-F]+|0[oO][0-7]+|0[bB][01]+",
    re.ASCII,
)


def is_numeric_query(query: str) -> bool:
    """
    True when the query is a numeric literal: decimal with optional sign and
    exponent, "Infinity", or unsigned hex, octal or binary. Digit separators,
    "inf" and "nan" spellings do not count.
    """
    return NUMERIC_QUERY.fullmatch(query.strip()) is not None


def total_pages_for(count: int, page_size: int) -> int:
    return math.ceil(count / page_size) if page_size > 0 else 0


class SearchInvoices:
    """
    Use Case: Search invoices

    Business Rules:
    1. A signed-in session is required
    2. A numeric query matches invoice numbers only
    3. Any other query matches client names (case-insensitive substring); when
       no client matches, it matches invoice numbers instead
    4. Date range (inclusive, on issue date), status and payment type filters
       are combined with the query
    5. Results are ordered newest first and paginated
    """

    def __init__(
        self,
        auth_service: AuthService,
        invoice_repo: InvoiceRepository,
        client_repo: ClientRepository,
        item_repo: InvoiceItemRepository,
        payment_repo: PaymentSettingRepository,
        default_payment_info: PaymentInfoDTO,
    ):
        self.auth_service = auth_service
        self.invoice_repo = invoice_repo
        self.client_repo = client_repo
        self.item_repo = item_repo
        self.payment_repo = payment_repo
        self.default_payment_info = default_payment_info

    async def execute(
        self,
        query: str = "",
        page: int = 1,
        page_size: int = DEFAULT_PAGE_SIZE,
        filters: Optional[InvoiceSearchFiltersDTO] = None,
    ) -> Result[InvoiceSearchResultDTO]:
        """
        Execute invoice search

        Args:
            query: Free-text query (empty for no text filter)
            page: 1-based page number
            page_size: Invoices per page
            filters: Date range, status and payment type filters

        Returns:
            Result[InvoiceSearchResultDTO]: Success with one page of invoices or error
        """
        session = self.auth_service.get_session()
        if session is None:
            return Return.err(
                Error(code="NO_ACTIVE_SESSION", message="Please sign in to view invoices")
            )

        page = max(page, 1)
        offset = (page - 1) * page_size
        criteria = await self._build_criteria(session.user_id, query.strip(), filters)

        try:
            rows, count = await self.invoice_repo.search_page_joined(
                session.user_id, criteria, offset, page_size
            )
            strategy = SearchStrategy.JOINED
        except Exception as e:
            logger.warning(f"Joined invoice search failed, using separate queries: {e}")
            try:
                rows, count = await self._search_separately(
                    session.user_id, criteria, offset, page_size
                )
                strategy = SearchStrategy.FALLBACK
            except Exception as fallback_error:
                logger.error(f"Invoice search failed: {fallback_error}")
                return Return.err(
                    Error(
                        code="SEARCH_FAILED",
                        message="Failed to load invoices",
                        reason=str(fallback_error),
                    )
                )

        try:
            payment_info = await resolve_payment_info(
                self.payment_repo, session.user_id, self.default_payment_info
            )
            invoices = [invoice_from_row(row, payment_info) for row in rows]
        except Exception as e:
            logger.error(f"Failed to map invoice search results: {e}")
            return Return.err(
                Error(code="SEARCH_FAILED", message="Failed to load invoices", reason=str(e))
            )

        return Return.ok(
            InvoiceSearchResultDTO(
                invoices=invoices,
                count=count,
                total_pages=total_pages_for(count, page_size),
                current_page=page,
                page_size=page_size,
                strategy=strategy,
            )
        )

    async def _build_criteria(
        self, user_id: str, query: str, filters: Optional[InvoiceSearchFiltersDTO]
    ) -> InvoiceQueryCriteria:
        filters = filters or InvoiceSearchFiltersDTO()
        criteria = InvoiceQueryCriteria(
            start_date=filters.start_date,
            end_date=filters.end_date,
            status=filters.status.value if filters.status else None,
            payment_type=filters.payment_type.value if filters.payment_type else None,
        )

        if not query:
            return criteria

        if is_numeric_query(query):
            criteria.invoice_number_contains = query
            return criteria

        client_ids = await self._client_ids_matching(user_id, query)
        if client_ids:
            criteria.client_ids = client_ids
        else:
            criteria.invoice_number_contains = query
        return criteria

    async def _client_ids_matching(self, user_id: str, query: str) -> List[str]:
        try:
            return await self.client_repo.find_ids_by_name(user_id, query)
        except Exception as e:
            logger.error(f"Client name lookup failed for query {query!r}: {e}")
            return []

    async def _search_separately(
        self, user_id: str, criteria: InvoiceQueryCriteria, offset: int, limit: int
    ) -> Tuple[List[InvoiceRow], int]:
        rows, count = await self.invoice_repo.search_page(user_id, criteria, offset, limit)
        if not rows:
            return rows, count

        clients_by_id: Dict[str, Dict[str, Any]] = {}
        client_ids = list({row["client_id"] for row in rows if row.get("client_id")})
        if client_ids:
            try:
                for client_row in await self.client_repo.get_rows_by_ids(client_ids):
                    clients_by_id[client_row["id"]] = client_row
            except Exception as e:
                logger.error(f"Failed to load clients for invoice search: {e}")

        items_by_invoice: Dict[str, List[Dict[str, Any]]] = {row["id"]: [] for row in rows}
        try:
            for item_row in await self.item_repo.get_rows_by_invoice_ids(list(items_by_invoice)):
                items_by_invoice.setdefault(item_row["invoice_id"], []).append(item_row)
        except Exception as e:
            logger.error(f"Failed to load invoice items for invoice search: {e}")

        joined = []
        for row in rows:
            row = dict(row)
            row["clients"] = clients_by_id.get(row.get("client_id"))
            row["invoice_items"] = items_by_invoice.get(row["id"], [])
            joined.append(row)
        return joined, count
