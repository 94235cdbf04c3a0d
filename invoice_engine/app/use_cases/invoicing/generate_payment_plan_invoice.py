"""GeneratePaymentPlanInvoice Use Case

Bills one installment of a payment plan, adding a late fee when the
installment is invoiced after its grace period.
"""

import logging
from decimal import Decimal

from libs.result import Result, Return
from invoice_engine.app.calculators.rate import round_money
from invoice_engine.app.calculators.schedule import days_late, installment_due_date
from invoice_engine.app.repositories.invoice_repository import InvoiceRepository
from invoice_engine.app.repositories.payment_plan_repository import PaymentPlanRepository
from invoice_engine.app.services.clock import Clock
from invoice_engine.app.services.invoice_number_allocator import InvoiceNumberAllocator
from invoice_engine.app.services.unit_of_work import UnitOfWork
from invoice_engine.domain.invoice import Invoice, InvoiceStatus, InvoiceType
from invoice_engine.domain.invoice_line import LineType
from invoice_engine.domain.matter import PaymentTerms
from invoice_engine.domain.payment_plan import PaymentPlan, PaymentPlanStatus
from .base import DEFAULT_CURRENCY, InvoiceGenerator
from .dtos import GeneratePaymentPlanInvoiceCommandDTO, InvoiceResponseDTO
from .errors import (
    duplicate_invoice,
    installment_out_of_range,
    not_found,
    subject_not_active,
)

logger = logging.getLogger(__name__)


def compute_late_fee(plan: PaymentPlan, base: Decimal, days_past_due: int) -> Decimal:
    """base * late_fee_rate / 100 once the grace period is exceeded, else 0"""
    if days_past_due <= plan.grace_period_days:
        return round_money(0)
    return round_money(Decimal(base) * Decimal(plan.late_fee_rate) / Decimal(100))


class GeneratePaymentPlanInvoice(InvoiceGenerator):
    """
    Use Case: Generate the invoice of one payment plan installment

    Business Rules:
    1. At most one invoice per (payment plan, installment number)
    2. Installment numbers run from 1 to installment_count
    3. Without an explicit number the next unbilled installment is used
    4. A late fee applies only when the reference date is more than
       grace_period_days after the installment due date
    5. Invoice number prefix PLAN; due date = installment due date

    Flow:
    1. Load payment plan
    2. Resolve installment number
    3. Check for duplicate invoice
    4. Compute base and late fee
    5. Persist and commit
    """

    invoice_prefix = "PLAN"

    def __init__(
        self,
        uow: UnitOfWork,
        payment_plan_repo: PaymentPlanRepository,
        invoice_repo: InvoiceRepository,
        number_allocator: InvoiceNumberAllocator,
        clock: Clock,
        currency: str = DEFAULT_CURRENCY,
    ):
        super().__init__(uow, invoice_repo, number_allocator, clock, currency)
        self.payment_plan_repo = payment_plan_repo

    async def execute(self, command: GeneratePaymentPlanInvoiceCommandDTO) -> Result[InvoiceResponseDTO]:
        """
        Execute installment invoice generation

        Args:
            command: GeneratePaymentPlanInvoiceCommandDTO

        Returns:
            Result[InvoiceResponseDTO]: Success with the draft invoice or error
        """
        try:
            # Step 1: Load payment plan
            plan = await self.payment_plan_repo.get_by_id(command.payment_plan_id)

            if not plan or plan.law_firm_id != command.law_firm_id:
                return Return.err(not_found("payment_plan", command.payment_plan_id))

            if plan.status == PaymentPlanStatus.CANCELLED:
                return Return.err(
                    subject_not_active(f"Payment plan {plan.id} is cancelled")
                )

            # Step 2: Resolve installment number
            installment_number = command.installment_number
            if installment_number is None:
                installment_number = await self.invoice_repo.get_last_installment_number(plan.id) + 1

            if installment_number > plan.installment_count:
                return Return.err(installment_out_of_range(installment_number, plan.installment_count))

            # Step 3: Duplicate guard
            existing = await self.invoice_repo.find_installment_invoice(plan.id, installment_number)
            if existing:
                return Return.err(
                    duplicate_invoice(
                        f"Invoice {existing.invoice_number} already exists for installment "
                        f"{installment_number} of payment plan {plan.id}",
                        existing_invoice_number=existing.invoice_number,
                    )
                )

            # Step 4: Base and late fee
            due_date = installment_due_date(plan.first_payment_date, plan.frequency, installment_number)
            reference_date = command.scheduled_date or self.clock.today()
            base = round_money(plan.installment_amount)
            late_fee = compute_late_fee(plan, base, days_late(due_date, reference_date))

            label = f"Installment {installment_number}/{plan.installment_count}"
            lines = [self._line(LineType.INSTALLMENT, label, base)]
            if late_fee > 0:
                lines.append(
                    self._line(
                        LineType.LATE_FEE,
                        f"Late fee ({round_money(plan.late_fee_rate)}%) - {label}",
                        late_fee,
                    )
                )
                logger.info(
                    f"Late fee {late_fee} on plan {plan.id} installment {installment_number}: "
                    f"due {due_date}, billed {reference_date}"
                )

            # Step 5: Persist
            subtotal = self._sum_lines(lines)
            invoice = Invoice(
                law_firm_id=plan.law_firm_id,
                client_id=plan.client_id,
                invoice_type=InvoiceType.PAYMENT_PLAN,
                invoice_status=InvoiceStatus.DRAFT,
                issue_date=self.clock.today(),
                due_date=due_date,
                subtotal=subtotal,
                tax_amount=round_money(0),
                discount_amount=round_money(0),
                total_amount=subtotal,
                currency=self.currency,
                payment_terms=PaymentTerms.DAYS_7.value,
                payment_plan_id=plan.id,
                installment_number=installment_number,
                description=f"Payment plan - {label}",
            )

            return await self._save(invoice, lines)

        except Exception as e:
            return await self._fail(e, f"payment plan {command.payment_plan_id}")
