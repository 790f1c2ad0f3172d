"""SQLAlchemy Invoice Repository Implementation

Implements invoice persistence using SQLAlchemy async session.
"""

from typing import List, Optional, Tuple
from datetime import date
from sqlalchemy import delete
from sqlalchemy.orm import selectinload
from sqlmodel import select, func
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.invoice_repository import (
    InvoiceQueryCriteria,
    InvoiceRepository,
    InvoiceRow,
)
from src.domain.base import utc_now
from src.domain.invoice import Invoice
from .patterns import LIKE_ESCAPE, contains_pattern


def invoice_row(invoice: Invoice, embed: bool = False) -> InvoiceRow:
    """
    Raw row of an invoice

    With embed=True the eagerly loaded client and items are included under
    "clients" and "invoice_items".
    """
    row = invoice.model_dump()
    if embed:
        row["clients"] = invoice.client.model_dump() if invoice.client is not None else None
        row["invoice_items"] = [item.model_dump() for item in invoice.items]
    return row


class SqlAlchemyInvoiceRepository(InvoiceRepository):
    """
    SQLAlchemy implementation of InvoiceRepository

    Uses async session for database operations. Writes are flushed, never
    committed; the unit of work owns the transaction.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, invoice: Invoice) -> Invoice:
        """
        Create a new invoice

        Args:
            invoice: Invoice entity to persist

        Returns:
            Created Invoice
        """
        self.session.add(invoice)
        await self.session.flush()
        await self.session.refresh(invoice)
        return invoice

    async def get_by_id(self, user_id: str, invoice_id: str) -> Optional[Invoice]:
        """
        Retrieve invoice by ID

        Args:
            user_id: Owner of the invoice
            invoice_id: Invoice ID

        Returns:
            Invoice if found, None otherwise
        """
        statement = (
            select(Invoice)
            .where(Invoice.id == invoice_id)
            .where(Invoice.user_id == user_id)
        )
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def get_row_by_id(self, user_id: str, invoice_id: str) -> Optional[InvoiceRow]:
        statement = (
            select(Invoice)
            .options(selectinload(Invoice.client), selectinload(Invoice.items))
            .execution_options(populate_existing=True)
            .where(Invoice.id == invoice_id)
            .where(Invoice.user_id == user_id)
        )
        result = await self.session.execute(statement)
        invoice = result.scalar_one_or_none()
        return invoice_row(invoice, embed=True) if invoice is not None else None

    async def update(self, invoice: Invoice) -> Invoice:
        """
        Update an existing invoice

        Args:
            invoice: Invoice entity with updated values

        Returns:
            Updated Invoice
        """
        invoice.updated_at = utc_now()
        self.session.add(invoice)
        await self.session.flush()
        await self.session.refresh(invoice)
        return invoice

    async def delete(self, invoice: Invoice) -> None:
        # Statement delete: items are removed separately, no relationship bookkeeping
        await self.session.execute(delete(Invoice).where(Invoice.id == invoice.id))
        await self.session.flush()

    async def get_recent_invoice_numbers(self, user_id: str, limit: int = 20) -> List[str]:
        """
        Retrieve the user's most recent invoice numbers, newest first

        Args:
            user_id: Owner of the invoices
            limit: Maximum number of invoice numbers to return

        Returns:
            List of invoice numbers
        """
        statement = (
            select(Invoice.invoice_number)
            .where(Invoice.user_id == user_id)
            .order_by(Invoice.created_at.desc())
            .limit(limit)
        )
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def invoice_number_exists(
        self, user_id: str, invoice_number: str, exclude_id: Optional[str] = None
    ) -> bool:
        statement = (
            select(func.count())
            .select_from(Invoice)
            .where(Invoice.user_id == user_id)
            .where(Invoice.invoice_number == invoice_number)
        )
        if exclude_id:
            statement = statement.where(Invoice.id != exclude_id)

        result = await self.session.execute(statement)
        count = result.scalar_one()
        return count > 0

    async def search_page_joined(
        self, user_id: str, criteria: InvoiceQueryCriteria, offset: int, limit: int
    ) -> Tuple[List[InvoiceRow], int]:
        """
        Fetch one page of invoices with client and items embedded

        Args:
            user_id: Owner of the invoices
            criteria: Filters to apply
            offset: Rows to skip
            limit: Page size

        Returns:
            Tuple of (rows, total count of matching invoices)
        """
        statement = (
            select(Invoice)
            .options(selectinload(Invoice.client), selectinload(Invoice.items))
            .execution_options(populate_existing=True)
            .where(*self._conditions(user_id, criteria))
            .order_by(Invoice.created_at.desc(), Invoice.id)
            .offset(offset)
            .limit(limit)
        )
        result = await self.session.execute(statement)
        rows = [invoice_row(invoice, embed=True) for invoice in result.scalars().all()]
        return rows, await self._count(user_id, criteria)

    async def search_page(
        self, user_id: str, criteria: InvoiceQueryCriteria, offset: int, limit: int
    ) -> Tuple[List[InvoiceRow], int]:
        statement = (
            select(Invoice)
            .where(*self._conditions(user_id, criteria))
            .order_by(Invoice.created_at.desc(), Invoice.id)
            .offset(offset)
            .limit(limit)
        )
        result = await self.session.execute(statement)
        rows = [invoice_row(invoice) for invoice in result.scalars().all()]
        return rows, await self._count(user_id, criteria)

    async def list_rows_for_period(
        self, user_id: str, start_date: date, end_date: date
    ) -> List[InvoiceRow]:
        statement = (
            select(Invoice)
            .where(Invoice.user_id == user_id)
            .where(Invoice.issue_date >= start_date)
            .where(Invoice.issue_date <= end_date)
            .order_by(Invoice.issue_date)
        )
        result = await self.session.execute(statement)
        return [invoice_row(invoice) for invoice in result.scalars().all()]

    async def _count(self, user_id: str, criteria: InvoiceQueryCriteria) -> int:
        statement = (
            select(func.count())
            .select_from(Invoice)
            .where(*self._conditions(user_id, criteria))
        )
        result = await self.session.execute(statement)
        return result.scalar_one()

    @staticmethod
    def _conditions(user_id: str, criteria: InvoiceQueryCriteria) -> list:
        conditions = [Invoice.user_id == user_id]

        if criteria.invoice_number_contains:
            conditions.append(
                Invoice.invoice_number.ilike(
                    contains_pattern(criteria.invoice_number_contains), escape=LIKE_ESCAPE
                )
            )
        if criteria.client_ids:
            conditions.append(Invoice.client_id.in_(criteria.client_ids))
        if criteria.start_date:
            conditions.append(Invoice.issue_date >= criteria.start_date)
        if criteria.end_date:
            conditions.append(Invoice.issue_date <= criteria.end_date)
        if criteria.status:
            conditions.append(Invoice.status == criteria.status)
        if criteria.payment_type:
            conditions.append(Invoice.payment_type == criteria.payment_type)

        return conditions
