"""Invoice Context

Facade over the invoice use cases that keeps a user's workspace state in
sync. Every mutation runs its use case and then reloads the current page
from the store; there are no optimistic updates. A failed operation only
sets ``state.error`` and leaves the rest of the state as it was.
"""

import asyncio
import logging
from dataclasses import dataclass, replace
from typing import Awaitable, Callable, Optional

from src.libs.result import Result, Return, Error
from src.app.services.auth_service import AuthService
from src.app.use_cases.invoices import (
    CreateInvoice,
    DeleteInvoice,
    DuplicateInvoice,
    GetInvoice,
    SearchInvoices,
    SetInvoiceStatus,
    UpdateInvoice,
    UpdateInvoiceRemark,
)
from src.app.use_cases.invoices.dtos import (
    DuplicateInvoiceResultDTO,
    InvoiceCommandDTO,
    InvoiceDTO,
    InvoiceSearchResultDTO,
    PaymentInfoDTO,
)
from src.app.use_cases.settings import GetPaymentInfo, UpdatePaymentInfo
from src.domain.invoice import InvoiceStatus
from .debounce import Debouncer
from .invoice_state import InvoiceFilters, InvoiceWorkspaceState, PaginationState

logger = logging.getLogger(__name__)

DEFAULT_FILTER_DEBOUNCE_SECONDS = 0.5


@dataclass
class InvoiceUseCases:
    """Use cases the context delegates to, bound to one store session"""

    search: SearchInvoices
    get: GetInvoice
    create: CreateInvoice
    update: UpdateInvoice
    delete: DeleteInvoice
    duplicate: DuplicateInvoice
    set_status: SetInvoiceStatus
    update_remark: UpdateInvoiceRemark
    get_payment_info: GetPaymentInfo
    update_payment_info: UpdatePaymentInfo


class InvoiceContext:
    """
    Invoice workspace of the current user

    Args:
        state: Workspace state to read and update
        use_cases: Use cases bound to the current store session
        auth_service: Session lookup
        filter_debounce_seconds: Quiet period before a filter change reloads
    """

    def __init__(
        self,
        state: InvoiceWorkspaceState,
        use_cases: InvoiceUseCases,
        auth_service: AuthService,
        filter_debounce_seconds: float = DEFAULT_FILTER_DEBOUNCE_SECONDS,
    ):
        self.state = state
        self.use_cases = use_cases
        self.auth_service = auth_service
        if state.filter_debouncer is None:
            state.filter_debouncer = Debouncer(filter_debounce_seconds)

    # Reads

    async def load_invoices(
        self, page: int = 1, filters: Optional[InvoiceFilters] = None
    ) -> Result[InvoiceSearchResultDTO]:
        """
        Load one page of invoices into the state

        Args:
            page: 1-based page number
            filters: New active filters; the current ones are kept when None

        Returns:
            Result of the underlying search
        """
        state = self.state
        state.loading = True
        state.error = None

        try:
            if self.auth_service.get_session() is None:
                state.is_authenticated = False
                return Return.err(
                    Error(code="NO_ACTIVE_SESSION", message="Please sign in to view invoices")
                )
            state.is_authenticated = True

            active = filters if filters is not None else state.filters
            result = await self.use_cases.search.execute(
                active.search_query,
                page,
                state.pagination.page_size,
                active.to_search_filters(),
            )

            if result.is_err():
                state.error = result.error.message
                return result

            page_result = result.value
            state.filters = active
            state.invoices = page_result.invoices
            state.search_strategy = page_result.strategy
            state.pagination = PaginationState(
                current_page=page_result.current_page,
                total_pages=page_result.total_pages,
                total_count=page_result.count,
                page_size=page_result.page_size,
            )
            return result
        finally:
            state.loading = False

    async def change_page(self, page: int) -> Result[InvoiceSearchResultDTO]:
        return await self.load_invoices(page, self.state.filters)

    async def search_invoices(self, query: str) -> Result[InvoiceSearchResultDTO]:
        normalized = query.strip().lower()
        if not normalized:
            return await self.clear_search()
        return await self.load_invoices(1, replace(self.state.filters, search_query=normalized))

    async def clear_search(self) -> Result[InvoiceSearchResultDTO]:
        return await self.load_invoices(1, replace(self.state.filters, search_query=""))

    def set_filters(self, filters: InvoiceFilters) -> asyncio.Task:
        """
        Schedule a reload of page 1 with new filters

        Calls within the debounce window replace each other; only the last
        one reloads. The reload runs with this context's use cases, so it is
        only useful while their store session stays open: close() cancels it.
        Request handlers apply filters with load_invoices instead.
        """
        return self.state.filter_debouncer.call(lambda: self.load_invoices(1, filters))

    def close(self) -> None:
        """Cancel a pending debounced reload before the store session closes"""
        self.state.filter_debouncer.cancel()

    def get_invoice(self, invoice_id: str) -> Optional[InvoiceDTO]:
        """Invoice from the currently loaded page, if present"""
        for invoice in self.state.invoices:
            if invoice.id == invoice_id:
                return invoice
        return None

    async def fetch_invoice(self, invoice_id: str) -> Result[InvoiceDTO]:
        """Invoice from the loaded page, or from the store when not on it"""
        cached = self.get_invoice(invoice_id)
        if cached is not None:
            return Return.ok(cached)

        result = await self.use_cases.get.execute(invoice_id)
        if result.is_err():
            self.state.error = result.error.message
        return result

    # Mutations

    async def add_invoice(self, command: InvoiceCommandDTO) -> Result[InvoiceDTO]:
        return await self._mutate(lambda: self.use_cases.create.execute(command))

    async def update_invoice(self, invoice_id: str, command: InvoiceCommandDTO) -> Result[InvoiceDTO]:
        return await self._mutate(lambda: self.use_cases.update.execute(invoice_id, command))

    async def delete_invoice(self, invoice_id: str) -> Result[str]:
        return await self._mutate(lambda: self.use_cases.delete.execute(invoice_id))

    async def duplicate_invoice(self, invoice_id: str) -> Result[DuplicateInvoiceResultDTO]:
        return await self._mutate(lambda: self.use_cases.duplicate.execute(invoice_id))

    # Inline edits write a single column and skip form validation

    async def set_status(self, invoice_id: str, status: InvoiceStatus) -> Result[InvoiceDTO]:
        signed_out = self._signed_out()
        if signed_out is not None:
            return signed_out
        return await self._mutate(lambda: self.use_cases.set_status.execute(invoice_id, status))

    async def toggle_status(self, invoice_id: str) -> Result[InvoiceDTO]:
        signed_out = self._signed_out()
        if signed_out is not None:
            return signed_out

        current = await self.fetch_invoice(invoice_id)
        if current.is_err():
            return current

        status = InvoiceStatus.UNPAID if current.value.status == InvoiceStatus.PAID else InvoiceStatus.PAID
        return await self.set_status(invoice_id, status)

    async def update_remark(self, invoice_id: str, remark: Optional[str]) -> Result[InvoiceDTO]:
        signed_out = self._signed_out()
        if signed_out is not None:
            return signed_out
        return await self._mutate(lambda: self.use_cases.update_remark.execute(invoice_id, remark))

    async def load_payment_info(self) -> Result[PaymentInfoDTO]:
        result = await self.use_cases.get_payment_info.execute()
        if result.is_err():
            self.state.error = result.error.message
        else:
            self.state.payment_info = result.value
        return result

    async def update_payment_info(self, info: PaymentInfoDTO) -> Result[PaymentInfoDTO]:
        result = await self.use_cases.update_payment_info.execute(info)
        if result.is_err():
            self.state.error = result.error.message
        else:
            self.state.payment_info = result.value
        return result

    def _signed_out(self) -> Optional[Result]:
        """Error result when nobody is signed in, otherwise None"""
        if self.auth_service.get_session() is not None:
            return None
        self.state.error = "Please sign in to update the invoice"
        return Return.err(Error(code="NO_ACTIVE_SESSION", message=self.state.error))

    async def _mutate(self, action: Callable[[], Awaitable[Result]]) -> Result:
        self.state.error = None
        result = await action()
        if result.is_err():
            self.state.error = result.error.message
            logger.info(f"Invoice operation failed: {result.error.code}")
            return result

        reload = await self.load_invoices(self.state.pagination.current_page, self.state.filters)
        if reload.is_err():
            logger.warning(f"Reload after invoice operation failed: {reload.error.message}")
        return result
