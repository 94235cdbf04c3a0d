"""SQLAlchemy Invoice Number Allocator

Allocates invoice numbers from a per (prefix, year) counter row. The row is
locked with SELECT ... FOR UPDATE inside the caller's transaction, so two
concurrent generators never receive the same number and a rolled back
invoice releases its number with the transaction.
"""

import logging
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from invoice_engine.app.services.invoice_number_allocator import (
    InvoiceNumberAllocator,
    format_invoice_number,
)
from invoice_engine.domain.invoice_sequence import InvoiceSequence

logger = logging.getLogger(__name__)


class SqlAlchemyInvoiceNumberAllocator(InvoiceNumberAllocator):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def next_number(self, prefix: str, year: int) -> str:
        statement = (
            select(InvoiceSequence)
            .where(InvoiceSequence.prefix == prefix)
            .where(InvoiceSequence.year == year)
            .with_for_update()
        )
        result = await self.session.execute(statement)
        sequence = result.scalar_one_or_none()

        if sequence is None:
            logger.info(f"Starting invoice sequence {prefix}-{year}")
            sequence = InvoiceSequence(prefix=prefix, year=year, last_value=0)

        sequence.last_value += 1
        self.session.add(sequence)
        await self.session.flush()

        return format_invoice_number(prefix, year, sequence.last_value)
