"""Invoice Repository Interface

Defines the contract for invoice persistence operations.

Search methods return raw store rows (plain dicts keyed by column name, with
optional embedded "clients" and "invoice_items" entries) which the
application layer normalizes into domain DTOs.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional, Tuple
from src.domain.invoice import Invoice

InvoiceRow = Dict[str, Any]


@dataclass
class InvoiceQueryCriteria:
    """
    Conjunctive filters for invoice queries

    invoice_number_contains and client_ids are mutually exclusive in practice:
    the search use case picks one depending on the free-text query.
    """

    invoice_number_contains: Optional[str] = None
    client_ids: List[str] = field(default_factory=list)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    status: Optional[str] = None
    payment_type: Optional[str] = None


class InvoiceRepository(ABC):
    """
    Repository interface for Invoice persistence

    All reads are scoped to the owning user.
    """

    @abstractmethod
    async def create(self, invoice: Invoice) -> Invoice:
        """
        Create a new invoice

        Args:
            invoice: Invoice entity to persist

        Returns:
            Created Invoice
        """
        pass

    @abstractmethod
    async def get_by_id(self, user_id: str, invoice_id: str) -> Optional[Invoice]:
        """
        Retrieve invoice by ID

        Args:
            user_id: Owner of the invoice
            invoice_id: Invoice ID

        Returns:
            Invoice if found, None otherwise
        """
        pass

    @abstractmethod
    async def get_row_by_id(self, user_id: str, invoice_id: str) -> Optional[InvoiceRow]:
        """
        Retrieve one invoice row with its client and items embedded

        Returns:
            Raw invoice row if found, None otherwise
        """
        pass

    @abstractmethod
    async def update(self, invoice: Invoice) -> Invoice:
        """
        Update an existing invoice

        Args:
            invoice: Invoice entity with updated values

        Returns:
            Updated Invoice
        """
        pass

    @abstractmethod
    async def delete(self, invoice: Invoice) -> None:
        """Delete an invoice row"""
        pass

    @abstractmethod
    async def get_recent_invoice_numbers(self, user_id: str, limit: int = 20) -> List[str]:
        """
        Retrieve the user's most recent invoice numbers, newest first

        Args:
            user_id: Owner of the invoices
            limit: Maximum number of invoice numbers to return

        Returns:
            List of invoice numbers
        """
        pass

    @abstractmethod
    async def invoice_number_exists(
        self, user_id: str, invoice_number: str, exclude_id: Optional[str] = None
    ) -> bool:
        """
        Check whether the user already has an invoice with this number

        Args:
            user_id: Owner of the invoices
            invoice_number: Number to look for
            exclude_id: Invoice ID to ignore (the invoice being edited)

        Returns:
            True if another invoice carries the number
        """
        pass

    @abstractmethod
    async def search_page_joined(
        self, user_id: str, criteria: InvoiceQueryCriteria, offset: int, limit: int
    ) -> Tuple[List[InvoiceRow], int]:
        """
        Fetch one page of invoices with client and items embedded

        Rows are ordered by creation time, newest first.

        Returns:
            Tuple of (rows, total count of matching invoices)
        """
        pass

    @abstractmethod
    async def search_page(
        self, user_id: str, criteria: InvoiceQueryCriteria, offset: int, limit: int
    ) -> Tuple[List[InvoiceRow], int]:
        """
        Fetch one page of bare invoice rows (no embedded relations)

        Returns:
            Tuple of (rows, total count of matching invoices)
        """
        pass

    @abstractmethod
    async def list_rows_for_period(
        self, user_id: str, start_date: date, end_date: date
    ) -> List[InvoiceRow]:
        """
        Retrieve bare invoice rows issued within an inclusive date range

        Used by revenue reports.
        """
        pass
