"""SQLAlchemy Invoice Repository Implementation

Implements invoice persistence using SQLAlchemy async session.
"""

from typing import Optional, List
from datetime import date
from sqlalchemy.exc import IntegrityError
from sqlmodel import select, func
from sqlmodel.ext.asyncio.session import AsyncSession
from invoice_engine.app.repositories.invoice_repository import InvoiceRepository
from invoice_engine.domain.exceptions import DuplicateInvoiceError
from invoice_engine.domain.invoice import Invoice, InvoiceType
from invoice_engine.domain.invoice_line import InvoiceLine


class SqlAlchemyInvoiceRepository(InvoiceRepository):
    """
    SQLAlchemy implementation of InvoiceRepository

    Uses async session for database operations. Writes are flushed, never
    committed; the unit of work owns the transaction.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, invoice: Invoice, lines: List[InvoiceLine]) -> Invoice:
        """
        Create a new invoice with its line items

        Args:
            invoice: Invoice entity to persist
            lines: Line items referencing the invoice

        Returns:
            Created Invoice

        Raises:
            DuplicateInvoiceError: A unique constraint rejected the insert
        """
        try:
            self.session.add(invoice)
            await self.session.flush()
            self.session.add_all(lines)
            await self.session.flush()
        except IntegrityError as e:
            # CHECK violations are data errors, not duplicates
            if "unique" not in str(e.orig).lower():
                raise
            raise DuplicateInvoiceError(
                f"Invoice already exists for {invoice.invoice_type.value} "
                f"subject {invoice.subject_id}"
            ) from e

        await self.session.refresh(invoice)
        return invoice

    async def get_by_id(self, invoice_id: str) -> Optional[Invoice]:
        """
        Retrieve invoice by ID

        Args:
            invoice_id: Invoice ID

        Returns:
            Invoice if found, None otherwise
        """
        statement = select(Invoice).where(Invoice.id == invoice_id)
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def get_lines(self, invoice_id: str) -> List[InvoiceLine]:
        statement = (
            select(InvoiceLine)
            .where(InvoiceLine.invoice_id == invoice_id)
            .order_by(InvoiceLine.sort_order)
        )
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def find_subscription_invoice(
        self, client_subscription_id: str, period_start: date, period_end: date
    ) -> Optional[Invoice]:
        statement = (
            select(Invoice)
            .where(Invoice.client_subscription_id == client_subscription_id)
            .where(Invoice.billing_period_start == period_start)
            .where(Invoice.billing_period_end == period_end)
        )
        result = await self.session.execute(statement)
        return result.scalars().first()

    async def find_case_invoice(
        self,
        matter_id: str,
        period_start: Optional[date] = None,
        period_end: Optional[date] = None,
    ) -> Optional[Invoice]:
        statement = (
            select(Invoice)
            .where(Invoice.matter_id == matter_id)
            .where(Invoice.invoice_type == InvoiceType.CASE_BILLING)
        )

        if period_start is None:
            statement = statement.where(Invoice.billing_period_start.is_(None))
        else:
            statement = statement.where(Invoice.billing_period_start == period_start)

        if period_end is None:
            statement = statement.where(Invoice.billing_period_end.is_(None))
        else:
            statement = statement.where(Invoice.billing_period_end == period_end)

        statement = statement.order_by(Invoice.created_at.desc())

        result = await self.session.execute(statement)
        return result.scalars().first()

    async def find_installment_invoice(
        self, payment_plan_id: str, installment_number: int
    ) -> Optional[Invoice]:
        statement = (
            select(Invoice)
            .where(Invoice.payment_plan_id == payment_plan_id)
            .where(Invoice.installment_number == installment_number)
        )
        result = await self.session.execute(statement)
        return result.scalars().first()

    async def get_last_installment_number(self, payment_plan_id: str) -> int:
        statement = (
            select(func.max(Invoice.installment_number))
            .where(Invoice.payment_plan_id == payment_plan_id)
        )
        result = await self.session.execute(statement)
        return result.scalar_one_or_none() or 0
