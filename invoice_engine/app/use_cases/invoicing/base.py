"""Shared persistence and mapping steps of the invoice generators"""

import logging
from decimal import Decimal
from typing import List, Optional

from libs.result import Result, Return
from invoice_engine.app.calculators.rate import ZERO, round_money
from invoice_engine.app.repositories.invoice_repository import InvoiceRepository
from invoice_engine.app.services.clock import Clock
from invoice_engine.app.services.invoice_number_allocator import InvoiceNumberAllocator
from invoice_engine.app.services.unit_of_work import UnitOfWork
from invoice_engine.domain.exceptions import DuplicateInvoiceError
from invoice_engine.domain.invoice import Invoice
from invoice_engine.domain.invoice_line import InvoiceLine, LineType
from .dtos import InvoiceLineDTO, InvoiceResponseDTO
from .errors import duplicate_invoice, persistence_error

logger = logging.getLogger(__name__)

DEFAULT_CURRENCY = "BRL"


class InvoiceGenerator:
    """
    Base for the subscription, case and payment plan generators

    Subclasses compute charges; this class allocates the number, writes
    the invoice and its lines in one unit of work, and maps the result.
    """

    invoice_prefix: str = ""

    def __init__(
        self,
        uow: UnitOfWork,
        invoice_repo: InvoiceRepository,
        number_allocator: InvoiceNumberAllocator,
        clock: Clock,
        currency: str = DEFAULT_CURRENCY,
    ):
        self.uow = uow
        self.invoice_repo = invoice_repo
        self.number_allocator = number_allocator
        self.clock = clock
        self.currency = currency

    @staticmethod
    def _line(
        line_type: LineType,
        description: str,
        total_price: Decimal,
        quantity: Decimal = Decimal("1"),
        unit_price: Optional[Decimal] = None,
        time_entry_id: Optional[str] = None,
    ) -> InvoiceLine:
        return InvoiceLine(
            line_type=line_type,
            description=description[:255],
            quantity=round_money(quantity),
            unit_price=round_money(unit_price if unit_price is not None else total_price),
            total_price=round_money(total_price),
            time_entry_id=time_entry_id,
        )

    @staticmethod
    def _sum_lines(lines: List[InvoiceLine]) -> Decimal:
        return round_money(sum((line.total_price for line in lines), ZERO))

    async def _save(self, invoice: Invoice, lines: List[InvoiceLine]) -> Result[InvoiceResponseDTO]:
        """
        Allocate the invoice number, insert and commit

        A uniqueness violation on insert means a concurrent request billed
        the same key first; it is reported as a duplicate, not a failure of
        the store.
        """
        invoice.invoice_number = await self.number_allocator.next_number(
            self.invoice_prefix, invoice.issue_date.year
        )

        for order, line in enumerate(lines, start=1):
            line.sort_order = order
            line.invoice_id = invoice.id

        try:
            created = await self.invoice_repo.create(invoice, lines)
        except DuplicateInvoiceError as e:
            await self.uow.rollback()
            logger.info(f"Duplicate invoice rejected on insert: {e.message}")
            return Return.err(duplicate_invoice(e.message))

        await self.uow.commit()

        logger.info(
            f"Created {created.invoice_type.value} invoice {created.invoice_number} "
            f"for client {created.client_id}: total {created.total_amount} {created.currency}"
        )
        return Return.ok(to_response_dto(created, lines))

    async def _fail(self, exc: Exception, context: str) -> Result[InvoiceResponseDTO]:
        await self.uow.rollback()
        logger.error(f"Invoice generation failed for {context}: {exc}")
        return Return.err(persistence_error(exc))


def to_response_dto(invoice: Invoice, lines: List[InvoiceLine]) -> InvoiceResponseDTO:
    return InvoiceResponseDTO(
        invoice_id=invoice.id,
        law_firm_id=invoice.law_firm_id,
        client_id=invoice.client_id,
        invoice_number=invoice.invoice_number,
        invoice_type=invoice.invoice_type.value,
        invoice_status=invoice.invoice_status.value,
        issue_date=invoice.issue_date,
        due_date=invoice.due_date,
        subtotal=invoice.subtotal,
        tax_amount=invoice.tax_amount,
        discount_amount=invoice.discount_amount,
        total_amount=invoice.total_amount,
        currency=invoice.currency,
        payment_terms=invoice.payment_terms,
        client_subscription_id=invoice.client_subscription_id,
        matter_id=invoice.matter_id,
        payment_plan_id=invoice.payment_plan_id,
        billing_period_start=invoice.billing_period_start,
        billing_period_end=invoice.billing_period_end,
        installment_number=invoice.installment_number,
        description=invoice.description,
        line_items=[
            InvoiceLineDTO(
                id=line.id,
                line_type=line.line_type.value,
                description=line.description,
                quantity=line.quantity,
                unit_price=line.unit_price,
                total_price=line.total_price,
                sort_order=line.sort_order,
                time_entry_id=line.time_entry_id,
            )
            for line in sorted(lines, key=lambda l: l.sort_order)
        ],
        created_at=invoice.created_at,
    )
