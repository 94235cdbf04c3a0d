"""GenerateCaseInvoice Use Case

Bills a matter under its configured fee model (hourly, fixed, percentage,
contingency, hybrid or retainer) with the minimum fee floor applied.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import List

from libs.result import Result, Return
from invoice_engine.app.calculators.rate import (
    ZERO,
    apply_minimum_fee,
    compute_hourly_charge,
    compute_percentage_fee,
    entry_amount,
    entry_hours,
    is_chargeable,
    round_money,
)
from invoice_engine.app.calculators.schedule import payment_terms_due_date
from invoice_engine.app.repositories.invoice_repository import InvoiceRepository
from invoice_engine.app.repositories.matter_repository import MatterRepository
from invoice_engine.app.repositories.time_entry_repository import TimeEntryRepository
from invoice_engine.app.services.clock import Clock
from invoice_engine.app.services.invoice_number_allocator import InvoiceNumberAllocator
from invoice_engine.app.services.unit_of_work import UnitOfWork
from invoice_engine.domain.invoice import Invoice, InvoiceStatus, InvoiceType
from invoice_engine.domain.invoice_line import InvoiceLine, LineType
from invoice_engine.domain.matter import BillingMethod, CaseBillingConfig, Matter, PaymentTerms
from invoice_engine.domain.time_entry import EntryStatus, TimeEntry
from .base import DEFAULT_CURRENCY, InvoiceGenerator
from .dtos import GenerateCaseInvoiceCommandDTO, InvoiceResponseDTO
from .errors import (
    duplicate_invoice,
    missing_billing_config,
    missing_outcome_data,
    not_found,
)


@dataclass
class CaseFee:
    """Fee computed by one billing method, before the minimum floor"""

    amount: Decimal
    lines: List[InvoiceLine] = field(default_factory=list)


class GenerateCaseInvoice(InvoiceGenerator):
    """
    Use Case: Generate a case billing invoice for a matter

    Business Rules:
    1. A matter without a billing configuration is reported as not found;
       a configuration lacking the fields of its method is MISSING_BILLING_CONFIG
    2. Only approved billable time entries are charged
    3. Percentage, contingency and hybrid methods require a case outcome;
       a missing outcome fails the request instead of billing zero
    4. total_amount >= minimum_fee whenever one is configured
    5. Approved expenses are passed through on top of the fee when requested
    6. One invoice per matter and period unless force_regenerate is set
    7. Invoice number prefix CASE; due date = issue date + payment terms

    Flow:
    1. Load matter and billing config
    2. Check for duplicate invoice
    3. Compute the fee with the handler of the billing method
    4. Apply the minimum fee floor
    5. Add expenses, persist, commit
    """

    invoice_prefix = "CASE"

    def __init__(
        self,
        uow: UnitOfWork,
        matter_repo: MatterRepository,
        time_entry_repo: TimeEntryRepository,
        invoice_repo: InvoiceRepository,
        number_allocator: InvoiceNumberAllocator,
        clock: Clock,
        currency: str = DEFAULT_CURRENCY,
    ):
        super().__init__(uow, invoice_repo, number_allocator, clock, currency)
        self.matter_repo = matter_repo
        self.time_entry_repo = time_entry_repo
        self._fee_handlers = {
            BillingMethod.HOURLY: self._hourly_fee,
            BillingMethod.FIXED: self._fixed_fee,
            BillingMethod.PERCENTAGE: self._percentage_fee,
            BillingMethod.CONTINGENCY: self._percentage_fee,
            BillingMethod.HYBRID: self._hybrid_fee,
            BillingMethod.RETAINER: self._retainer_fee,
        }

    async def execute(self, command: GenerateCaseInvoiceCommandDTO) -> Result[InvoiceResponseDTO]:
        """
        Execute case invoice generation

        Args:
            command: GenerateCaseInvoiceCommandDTO with matter and options

        Returns:
            Result[InvoiceResponseDTO]: Success with the draft invoice or error
        """
        try:
            # Step 1: Load matter and billing configuration
            matter = await self.matter_repo.get_by_id(command.matter_id)

            if not matter or matter.law_firm_id != command.law_firm_id:
                return Return.err(not_found("matter", command.matter_id))

            config = await self.matter_repo.get_billing_config(matter.id)

            if not config:
                return Return.err(not_found("matter", command.matter_id))

            # Step 2: Duplicate guard
            if not command.force_regenerate:
                existing = await self.invoice_repo.find_case_invoice(
                    matter.id, command.billing_period_start, command.billing_period_end
                )
                if existing:
                    return Return.err(
                        duplicate_invoice(
                            f"Invoice {existing.invoice_number} already exists for matter "
                            f"{matter.id} for this billing period",
                            existing_invoice_number=existing.invoice_number,
                        )
                    )

            # Step 3: Fee by billing method
            handler = self._fee_handlers.get(BillingMethod(config.billing_method))
            if handler is None:
                raise ValueError(f"Unsupported billing method: {config.billing_method}")

            fee_result = await handler(command, matter, config)
            if fee_result.is_err():
                return fee_result

            fee: CaseFee = fee_result.value
            lines = list(fee.lines)

            # Step 4: Minimum fee floor
            amount = apply_minimum_fee(fee.amount, config.minimum_fee)
            if amount > fee.amount:
                lines.append(
                    self._line(
                        LineType.ADJUSTMENT,
                        f"Minimum fee adjustment (minimum {round_money(config.minimum_fee)})",
                        amount - fee.amount,
                    )
                )

            # Step 5: Expenses pass-through
            if command.include_expenses:
                expenses = await self.matter_repo.get_approved_expenses(
                    matter.id, command.billing_period_start, command.billing_period_end
                )
                for expense in expenses:
                    lines.append(
                        self._line(LineType.EXPENSE, expense.description, expense.amount)
                    )

            subtotal = self._sum_lines(lines) if lines else amount
            issue_date = self.clock.today()
            payment_terms = PaymentTerms(config.payment_terms)

            invoice = Invoice(
                law_firm_id=matter.law_firm_id,
                client_id=matter.client_id,
                invoice_type=InvoiceType.CASE_BILLING,
                invoice_status=InvoiceStatus.DRAFT,
                issue_date=issue_date,
                due_date=payment_terms_due_date(issue_date, payment_terms),
                subtotal=subtotal,
                tax_amount=round_money(0),
                discount_amount=round_money(0),
                total_amount=subtotal,
                currency=self.currency,
                payment_terms=payment_terms.value,
                matter_id=matter.id,
                billing_period_start=command.billing_period_start,
                billing_period_end=command.billing_period_end,
                description=f"Case invoice - {matter.title}",
            )

            return await self._save(invoice, lines)

        except Exception as e:
            return await self._fail(e, f"matter {command.matter_id}")

    async def _load_time_entries(self, command: GenerateCaseInvoiceCommandDTO) -> List[TimeEntry]:
        if not command.include_time_entries:
            return []
        return await self.time_entry_repo.get_for_matter(
            command.matter_id,
            status=EntryStatus.APPROVED,
            period_start=command.billing_period_start,
            period_end=command.billing_period_end,
        )

    def _time_entry_lines(self, entries: List[TimeEntry], config: CaseBillingConfig) -> List[InvoiceLine]:
        lines = []
        for entry in entries:
            if not is_chargeable(entry):
                continue
            hours = entry_hours(entry)
            amount = entry_amount(entry, config.hourly_rate)
            rate = entry.billable_rate if entry.billable_rate is not None else config.hourly_rate
            lines.append(
                self._line(
                    LineType.TIME_ENTRY,
                    f"{entry.description or 'Legal services'} ({round_money(hours)}h)",
                    amount,
                    quantity=hours,
                    unit_price=rate if rate is not None else amount,
                    time_entry_id=entry.id,
                )
            )
        return lines

    def _outcome_lines(self, outcome, rate: Decimal) -> List[InvoiceLine]:
        lines = []
        percentage_fee = compute_percentage_fee(outcome, rate)
        if percentage_fee > 0:
            lines.append(
                self._line(
                    LineType.CASE_FEE,
                    f"Outcome fee ({round_money(rate)}% of {round_money(outcome.amount_recovered)})",
                    percentage_fee,
                )
            )
        success_fee = round_money(outcome.success_fee or 0)
        if success_fee > 0:
            lines.append(self._line(LineType.SUCCESS_FEE, "Success fee", success_fee))
        return lines

    async def _hourly_fee(self, command, matter: Matter, config: CaseBillingConfig) -> Result[CaseFee]:
        entries = await self._load_time_entries(command)
        amount = compute_hourly_charge(entries, default_rate=config.hourly_rate)
        return Return.ok(CaseFee(amount=amount, lines=self._time_entry_lines(entries, config)))

    async def _fixed_fee(self, command, matter: Matter, config: CaseBillingConfig) -> Result[CaseFee]:
        if config.fixed_fee is None:
            return Return.err(missing_billing_config(matter.id, "Fixed billing requires fixed_fee"))
        amount = round_money(config.fixed_fee)
        return Return.ok(
            CaseFee(amount=amount, lines=[self._line(LineType.CASE_FEE, "Case fee - fixed", amount)])
        )

    async def _percentage_fee(self, command, matter: Matter, config: CaseBillingConfig) -> Result[CaseFee]:
        method = BillingMethod(config.billing_method)
        if config.percentage_rate is None:
            return Return.err(
                missing_billing_config(matter.id, f"{method.value} billing requires percentage_rate")
            )

        outcome = await self.matter_repo.get_case_outcome(matter.id)
        if not outcome:
            return Return.err(missing_outcome_data(matter.id, method.value))

        lines = self._outcome_lines(outcome, config.percentage_rate)
        return Return.ok(CaseFee(amount=self._sum_lines(lines) if lines else ZERO, lines=lines))

    async def _hybrid_fee(self, command, matter: Matter, config: CaseBillingConfig) -> Result[CaseFee]:
        if config.percentage_rate is None:
            return Return.err(missing_billing_config(matter.id, "hybrid billing requires percentage_rate"))

        outcome = await self.matter_repo.get_case_outcome(matter.id)
        if not outcome:
            return Return.err(missing_outcome_data(matter.id, BillingMethod.HYBRID.value))

        entries = await self._load_time_entries(command)
        lines = self._time_entry_lines(entries, config) + self._outcome_lines(outcome, config.percentage_rate)
        return Return.ok(CaseFee(amount=self._sum_lines(lines) if lines else ZERO, lines=lines))

    async def _retainer_fee(self, command, matter: Matter, config: CaseBillingConfig) -> Result[CaseFee]:
        if config.retainer_amount is None:
            return Return.err(missing_billing_config(matter.id, "Retainer billing requires retainer_amount"))
        amount = round_money(config.retainer_amount)
        return Return.ok(
            CaseFee(amount=amount, lines=[self._line(LineType.CASE_FEE, "Retainer", amount)])
        )
