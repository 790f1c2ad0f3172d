"""Unit tests for InvoiceContext

Tests cover:
- Loading pages into the workspace state
- Reload after every successful mutation, untouched state on failure
- Search query normalization and debounced filter changes
- Inline status and remark edits
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.app.state import InvoiceContext, InvoiceFilters, InvoiceUseCases, InvoiceWorkspaceState
from src.app.use_cases.invoices.dtos import InvoiceSearchResultDTO, SearchStrategy
from src.app.use_cases.invoices.mappers import invoice_from_row
from src.domain.invoice import InvoiceStatus
from src.libs.result import Error, Return


def search_page(invoices, count=None, page=1, strategy=SearchStrategy.JOINED):
    count = len(invoices) if count is None else count
    return Return.ok(
        InvoiceSearchResultDTO(
            invoices=invoices,
            count=count,
            total_pages=max(1, -(-count // 10)),
            current_page=page,
            page_size=10,
            strategy=strategy,
        )
    )


@pytest.fixture
def stored_invoice(invoice_row_factory):
    return invoice_from_row(invoice_row_factory())


@pytest.fixture
def use_cases(stored_invoice):
    mocks = {name: MagicMock() for name in InvoiceUseCases.__dataclass_fields__}
    mocks["search"].execute = AsyncMock(return_value=search_page([stored_invoice]))
    mocks["get"].execute = AsyncMock(return_value=Return.ok(stored_invoice))
    for name in ("create", "update", "delete", "duplicate", "set_status", "update_remark"):
        mocks[name].execute = AsyncMock(return_value=Return.ok(stored_invoice))
    return InvoiceUseCases(**mocks)


@pytest.fixture
def state():
    return InvoiceWorkspaceState()


@pytest.fixture
def context(state, use_cases, mock_auth_service):
    return InvoiceContext(state, use_cases, mock_auth_service, filter_debounce_seconds=0.01)


@pytest.mark.asyncio
class TestLoadInvoices:
    async def test_load_updates_state(self, context, state, use_cases, stored_invoice):
        """
        Given: A signed-in user
        When: Invoices are loaded
        Then: The page, pagination and strategy are stored in the state
        """
        # Arrange
        use_cases.search.execute = AsyncMock(
            return_value=search_page([stored_invoice], count=23, page=2, strategy=SearchStrategy.FALLBACK)
        )

        # Act
        result = await context.load_invoices(2)

        # Assert
        assert result.is_ok()
        assert state.invoices == [stored_invoice]
        assert state.pagination.current_page == 2
        assert state.pagination.total_pages == 3
        assert state.pagination.total_count == 23
        assert state.search_strategy == SearchStrategy.FALLBACK
        assert state.is_authenticated is True
        assert state.loading is False
        assert state.error is None

    async def test_load_without_session(self, context, state, use_cases, mock_auth_service):
        mock_auth_service.get_session = MagicMock(return_value=None)

        result = await context.load_invoices()

        assert result.error.code == "NO_ACTIVE_SESSION"
        assert state.is_authenticated is False
        assert state.loading is False
        use_cases.search.execute.assert_not_awaited()

    async def test_failed_load_keeps_previous_page(self, context, state, use_cases, stored_invoice):
        await context.load_invoices()
        use_cases.search.execute = AsyncMock(
            return_value=Return.err(Error(code="SEARCH_FAILED", message="Failed to load invoices"))
        )

        await context.load_invoices(2, InvoiceFilters(status="Paid"))

        assert state.invoices == [stored_invoice]
        assert state.filters == InvoiceFilters()
        assert state.error == "Failed to load invoices"

    async def test_filters_are_passed_to_search(self, context, use_cases):
        await context.load_invoices(1, InvoiceFilters(search_query="acme", status="Paid", payment_type="All"))

        query, page, page_size, filters = use_cases.search.execute.await_args.args
        assert (query, page, page_size) == ("acme", 1, 10)
        assert filters.status == InvoiceStatus.PAID
        assert filters.payment_type is None

    async def test_search_is_trimmed_and_lowercased(self, context, state, use_cases):
        await context.search_invoices("  ACME Traders ")

        assert use_cases.search.execute.await_args.args[0] == "acme traders"
        assert state.filters.search_query == "acme traders"

    async def test_blank_search_clears_query(self, context, state, use_cases):
        state.filters = InvoiceFilters(search_query="acme", status="Unpaid")

        await context.search_invoices("   ")

        assert use_cases.search.execute.await_args.args[0] == ""
        assert state.filters.status == "Unpaid"

    async def test_change_page_keeps_filters(self, context, state, use_cases):
        state.filters = InvoiceFilters(search_query="acme")

        await context.change_page(3)

        assert use_cases.search.execute.await_args.args[:2] == ("acme", 3)

    async def test_set_filters_is_debounced(self, context, use_cases):
        """
        Given: Three filter changes in quick succession
        When: The debounce delay passes
        Then: Only the last change triggers a reload
        """
        # Act
        context.set_filters(InvoiceFilters(status="Paid"))
        context.set_filters(InvoiceFilters(status="Unpaid"))
        task = context.set_filters(InvoiceFilters(payment_type="Advance"))
        await task

        # Assert
        use_cases.search.execute.assert_awaited_once()
        filters = use_cases.search.execute.await_args.args[3]
        assert filters.payment_type.value == "Advance"
        assert filters.status is None

    async def test_close_cancels_pending_filter_reload(self, context, state, use_cases):
        """
        Given: A filter change waiting out its debounce delay
        When: The context is closed
        Then: The reload never runs
        """
        # Arrange
        task = context.set_filters(InvoiceFilters(status="Paid"))

        # Act
        context.close()

        # Assert
        with pytest.raises(asyncio.CancelledError):
            await task
        use_cases.search.execute.assert_not_awaited()
        assert state.filter_debouncer.pending is False


@pytest.mark.asyncio
class TestMutations:
    async def test_add_reloads_current_page(self, context, state, use_cases, sample_command):
        state.pagination.current_page = 2

        result = await context.add_invoice(sample_command)

        assert result.is_ok()
        use_cases.create.execute.assert_awaited_once_with(sample_command)
        assert use_cases.search.execute.await_args.args[1] == 2

    async def test_failed_mutation_sets_error_without_reload(
        self, context, state, use_cases, sample_command
    ):
        """
        Given: The create use case fails validation
        When: An invoice is added
        Then: The error is set and the page is not reloaded
        """
        # Arrange
        use_cases.create.execute = AsyncMock(
            return_value=Return.err(Error(code="VALIDATION_FAILED", message="Client name is required"))
        )

        # Act
        result = await context.add_invoice(sample_command)

        # Assert
        assert result.is_err()
        assert state.error == "Client name is required"
        use_cases.search.execute.assert_not_awaited()

    async def test_delete_reloads(self, context, use_cases):
        await context.delete_invoice("inv_1")

        use_cases.delete.execute.assert_awaited_once_with("inv_1")
        use_cases.search.execute.assert_awaited_once()

    async def test_duplicate_reloads(self, context, use_cases):
        await context.duplicate_invoice("inv_1")

        use_cases.duplicate.execute.assert_awaited_once_with("inv_1")
        use_cases.search.execute.assert_awaited_once()

    async def test_toggle_status_uses_loaded_invoice(self, context, use_cases):
        """
        Given: An unpaid invoice on the loaded page
        When: Its status is toggled
        Then: Only the status is written, as Paid, without fetching the invoice again
        """
        # Arrange
        await context.load_invoices()

        # Act
        await context.toggle_status("inv_1")

        # Assert
        use_cases.set_status.execute.assert_awaited_once_with("inv_1", InvoiceStatus.PAID)
        use_cases.update.execute.assert_not_awaited()
        use_cases.get.execute.assert_not_awaited()

    async def test_update_remark_writes_only_the_remark(self, context, use_cases):
        await context.update_remark("inv_1", "Paid by cheque")

        use_cases.update_remark.execute.assert_awaited_once_with("inv_1", "Paid by cheque")
        use_cases.update.execute.assert_not_awaited()
        use_cases.search.execute.assert_awaited_once()

    async def test_set_status(self, context, use_cases):
        await context.set_status("inv_1", InvoiceStatus.PAID)

        use_cases.set_status.execute.assert_awaited_once_with("inv_1", InvoiceStatus.PAID)
        use_cases.update.execute.assert_not_awaited()

    async def test_failed_inline_edit_keeps_page(self, context, state, use_cases, stored_invoice):
        await context.load_invoices()
        use_cases.set_status.execute = AsyncMock(
            return_value=Return.err(Error(code="UPDATE_INVOICE_FAILED", message="Failed to update invoice"))
        )

        result = await context.set_status("inv_1", InvoiceStatus.PAID)

        assert result.is_err()
        assert state.error == "Failed to update invoice"
        assert state.invoices == [stored_invoice]
        use_cases.search.execute.assert_awaited_once()

    async def test_inline_edit_requires_session(self, context, state, use_cases, mock_auth_service):
        mock_auth_service.get_session = MagicMock(return_value=None)

        result = await context.toggle_status("inv_1")
        remark = await context.update_remark("inv_1", "note")

        assert result.error.code == "NO_ACTIVE_SESSION"
        assert remark.error.code == "NO_ACTIVE_SESSION"
        assert state.error == "Please sign in to update the invoice"
        use_cases.set_status.execute.assert_not_awaited()
        use_cases.update_remark.execute.assert_not_awaited()

    async def test_inline_edit_of_missing_invoice(self, context, state, use_cases):
        use_cases.get.execute = AsyncMock(
            return_value=Return.err(Error(code="INVOICE_NOT_FOUND", message="Invoice with ID x not found"))
        )

        result = await context.toggle_status("x")

        assert result.error.code == "INVOICE_NOT_FOUND"
        assert state.error == "Invoice with ID x not found"
        use_cases.set_status.execute.assert_not_awaited()


@pytest.mark.asyncio
class TestPaymentInfo:
    async def test_load_payment_info(self, context, state, use_cases, default_payment_info):
        use_cases.get_payment_info.execute = AsyncMock(return_value=Return.ok(default_payment_info))

        await context.load_payment_info()

        assert state.payment_info == default_payment_info

    async def test_failed_update_keeps_previous_info(self, context, state, use_cases, default_payment_info):
        state.payment_info = default_payment_info
        use_cases.update_payment_info.execute = AsyncMock(
            return_value=Return.err(Error(code="UPDATE_PAYMENT_INFO_FAILED", message="Failed to update payment info"))
        )

        await context.update_payment_info(default_payment_info.model_copy(update={"ifsc": "HDFC0000123"}))

        assert state.payment_info == default_payment_info
        assert state.error == "Failed to update payment info"
