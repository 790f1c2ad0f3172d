"""SQLAlchemy Invoice Item Repository Implementation

Implements invoice line item persistence using SQLAlchemy async session.
"""

from typing import Any, Dict, List
from sqlalchemy import delete
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.invoice_item_repository import InvoiceItemRepository
from src.domain.invoice_item import InvoiceItem


class SqlAlchemyInvoiceItemRepository(InvoiceItemRepository):
    """
    SQLAlchemy implementation of InvoiceItemRepository

    Uses async session for database operations.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_invoice_id(self, invoice_id: str) -> List[InvoiceItem]:
        """
        Retrieve all line items for an invoice, in display order

        Args:
            invoice_id: Invoice ID

        Returns:
            List of InvoiceItem
        """
        statement = (
            select(InvoiceItem)
            .where(InvoiceItem.invoice_id == invoice_id)
            .order_by(InvoiceItem.position)
        )
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def get_rows_by_invoice_ids(self, invoice_ids: List[str]) -> List[Dict[str, Any]]:
        if not invoice_ids:
            return []
        statement = (
            select(InvoiceItem)
            .where(InvoiceItem.invoice_id.in_(invoice_ids))
            .order_by(InvoiceItem.invoice_id, InvoiceItem.position)
        )
        result = await self.session.execute(statement)
        return [item.model_dump() for item in result.scalars().all()]

    async def create_many(self, items: List[InvoiceItem]) -> List[InvoiceItem]:
        """
        Create line items

        Args:
            items: InvoiceItem entities to persist

        Returns:
            Created items
        """
        self.session.add_all(items)
        await self.session.flush()
        for item in items:
            await self.session.refresh(item)
        return items

    async def upsert(self, item: InvoiceItem) -> InvoiceItem:
        existing = await self.session.get(InvoiceItem, item.id)
        if existing is None:
            self.session.add(item)
            await self.session.flush()
            await self.session.refresh(item)
            return item

        existing.invoice_id = item.invoice_id
        existing.description = item.description
        existing.quantity = item.quantity
        existing.unit_price = item.unit_price
        existing.position = item.position
        self.session.add(existing)
        await self.session.flush()
        await self.session.refresh(existing)
        return existing

    async def delete_by_ids(self, item_ids: List[str]) -> None:
        if not item_ids:
            return
        await self.session.execute(delete(InvoiceItem).where(InvoiceItem.id.in_(item_ids)))
        await self.session.flush()

    async def delete_by_invoice_id(self, invoice_id: str) -> None:
        await self.session.execute(delete(InvoiceItem).where(InvoiceItem.invoice_id == invoice_id))
        await self.session.flush()
