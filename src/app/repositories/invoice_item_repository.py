"""Invoice Item Repository Interface

Defines the contract for invoice line item persistence operations.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List
from src.domain.invoice_item import InvoiceItem


class InvoiceItemRepository(ABC):
    """
    Repository interface for InvoiceItem persistence

    Provides access to line items of an invoice.
    """

    @abstractmethod
    async def get_by_invoice_id(self, invoice_id: str) -> List[InvoiceItem]:
        """
        Retrieve all line items for an invoice, in display order

        Args:
            invoice_id: Invoice ID

        Returns:
            List of InvoiceItem
        """
        pass

    @abstractmethod
    async def get_rows_by_invoice_ids(self, invoice_ids: List[str]) -> List[Dict[str, Any]]:
        """Retrieve raw item rows for several invoices, in display order"""
        pass

    @abstractmethod
    async def create_many(self, items: List[InvoiceItem]) -> List[InvoiceItem]:
        """
        Create line items

        Args:
            items: InvoiceItem entities to persist

        Returns:
            Created items
        """
        pass

    @abstractmethod
    async def upsert(self, item: InvoiceItem) -> InvoiceItem:
        """Insert the item or overwrite the row with the same ID"""
        pass

    @abstractmethod
    async def delete_by_ids(self, item_ids: List[str]) -> None:
        pass

    @abstractmethod
    async def delete_by_invoice_id(self, invoice_id: str) -> None:
        pass
