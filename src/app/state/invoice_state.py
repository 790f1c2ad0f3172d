"""Invoice workspace state

Per-user snapshot of what the dashboard shows: the current page of
invoices, pagination, active filters and payment info.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional

from src.app.use_cases.invoices.dtos import (
    InvoiceDTO,
    InvoiceSearchFiltersDTO,
    PaymentInfoDTO,
    SearchStrategy,
)
from src.domain.invoice import InvoiceStatus, PaymentType
from .debounce import Debouncer

ALL = "All"
DEFAULT_PAGE_SIZE = 10


def _choice(value, enum_type):
    if value is None or value == "" or value == ALL:
        return None
    return enum_type(value)


@dataclass
class InvoiceFilters:
    """
    Active dashboard filters

    status and payment_type accept "All" (or None) for no filter.
    """

    search_query: str = ""
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    status: Optional[str] = None
    payment_type: Optional[str] = None

    def to_search_filters(self) -> InvoiceSearchFiltersDTO:
        return InvoiceSearchFiltersDTO(
            start_date=self.start_date,
            end_date=self.end_date,
            status=_choice(self.status, InvoiceStatus),
            payment_type=_choice(self.payment_type, PaymentType),
        )


@dataclass
class PaginationState:
    current_page: int = 1
    total_pages: int = 1
    total_count: int = 0
    page_size: int = DEFAULT_PAGE_SIZE


@dataclass
class InvoiceWorkspaceState:
    invoices: List[InvoiceDTO] = field(default_factory=list)
    pagination: PaginationState = field(default_factory=PaginationState)
    filters: InvoiceFilters = field(default_factory=InvoiceFilters)
    payment_info: Optional[PaymentInfoDTO] = None
    loading: bool = False
    error: Optional[str] = None
    is_authenticated: bool = False
    search_strategy: Optional[SearchStrategy] = None
    filter_debouncer: Optional[Debouncer] = field(default=None, repr=False, compare=False)
