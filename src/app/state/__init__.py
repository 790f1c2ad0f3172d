"""Invoice workspace state and context"""
from .debounce import Debouncer
from .invoice_state import InvoiceFilters, PaginationState, InvoiceWorkspaceState
from .invoice_context import InvoiceContext, InvoiceUseCases
from .registry import WorkspaceRegistry

__all__ = [
    "Debouncer",
    "InvoiceFilters",
    "PaginationState",
    "InvoiceWorkspaceState",
    "InvoiceContext",
    "InvoiceUseCases",
    "WorkspaceRegistry",
]
