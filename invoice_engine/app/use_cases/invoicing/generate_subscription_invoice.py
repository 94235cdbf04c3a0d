"""GenerateSubscriptionInvoice Use Case

Bills one subscription for one billing period: the (prorated) base fee plus
overage for usage beyond each included service quantity.
"""

from libs.result import Result, Return
from invoice_engine.app.calculators.proration import compute_proration, is_active_in_period
from invoice_engine.app.calculators.rate import round_money
from invoice_engine.app.calculators.schedule import subscription_due_date
from invoice_engine.app.calculators.usage import aggregate_subscription_usage
from invoice_engine.app.repositories.invoice_repository import InvoiceRepository
from invoice_engine.app.repositories.subscription_repository import SubscriptionRepository
from invoice_engine.app.repositories.time_entry_repository import TimeEntryRepository
from invoice_engine.app.services.clock import Clock
from invoice_engine.app.services.invoice_number_allocator import InvoiceNumberAllocator
from invoice_engine.app.services.unit_of_work import UnitOfWork
from invoice_engine.domain.invoice import Invoice, InvoiceStatus, InvoiceType
from invoice_engine.domain.invoice_line import LineType
from invoice_engine.domain.matter import PaymentTerms
from .base import DEFAULT_CURRENCY, InvoiceGenerator
from .dtos import GenerateSubscriptionInvoiceCommandDTO, InvoiceResponseDTO
from .errors import duplicate_invoice, not_found, subject_not_active


class GenerateSubscriptionInvoice(InvoiceGenerator):
    """
    Use Case: Generate a subscription invoice for a billing period

    Business Rules:
    1. One invoice per subscription and billing period
    2. Base fee is prorated when the subscription starts or ends inside the period
    3. A subscription not active at all in the period is rejected, never
       billed at zero
    4. Overage per included service = max(0, used - included) * overage_rate
    5. Invoice number prefix SUB; created with status=draft

    Flow:
    1. Load subscription
    2. Check for duplicate invoice (same subscription, same period)
    3. Prorate base fee
    4. Aggregate usage and compute overage per inclusion
    5. Build invoice and lines, allocate number, persist, commit
    """

    invoice_prefix = "SUB"

    def __init__(
        self,
        uow: UnitOfWork,
        subscription_repo: SubscriptionRepository,
        time_entry_repo: TimeEntryRepository,
        invoice_repo: InvoiceRepository,
        number_allocator: InvoiceNumberAllocator,
        clock: Clock,
        currency: str = DEFAULT_CURRENCY,
    ):
        super().__init__(uow, invoice_repo, number_allocator, clock, currency)
        self.subscription_repo = subscription_repo
        self.time_entry_repo = time_entry_repo

    async def execute(self, command: GenerateSubscriptionInvoiceCommandDTO) -> Result[InvoiceResponseDTO]:
        """
        Execute subscription invoice generation

        Args:
            command: GenerateSubscriptionInvoiceCommandDTO with subscription and period

        Returns:
            Result[InvoiceResponseDTO]: Success with the draft invoice or error
        """
        try:
            # Step 1: Load subscription
            subscription = await self.subscription_repo.get_by_id(command.client_subscription_id)

            if not subscription or subscription.law_firm_id != command.law_firm_id:
                return Return.err(not_found("subscription", command.client_subscription_id))

            # Step 2: Duplicate guard
            existing = await self.invoice_repo.find_subscription_invoice(
                subscription.id, command.period_start, command.period_end
            )

            if existing:
                return Return.err(
                    duplicate_invoice(
                        f"Invoice {existing.invoice_number} already exists for subscription "
                        f"{subscription.id} for period {command.period_start} to "
                        f"{command.period_end}",
                        existing_invoice_number=existing.invoice_number,
                    )
                )

            # Step 3: Prorated base fee
            if not is_active_in_period(
                command.period_start,
                command.period_end,
                subscription.start_date,
                subscription.end_date,
            ):
                return Return.err(
                    subject_not_active(
                        f"Subscription {subscription.id} is not active between "
                        f"{command.period_start} and {command.period_end}"
                    )
                )

            base_charge = compute_proration(
                command.period_start,
                command.period_end,
                subscription.start_date,
                subscription.monthly_fee,
                subscription.end_date,
            )
            is_prorated = base_charge != round_money(subscription.monthly_fee)

            fee_description = f"Subscription fee - {subscription.plan_name}"
            if is_prorated:
                fee_description += " (prorated)"
            lines = [self._line(LineType.SUBSCRIPTION_FEE, fee_description, base_charge)]

            # Step 4: Usage overage
            entries = await self.time_entry_repo.get_for_subscription(
                subscription.id, command.period_start, command.period_end
            )
            usage = aggregate_subscription_usage(
                entries,
                subscription.service_inclusions,
                command.period_start,
                command.period_end,
            )

            for record in usage:
                if record.overage <= 0:
                    continue
                lines.append(
                    self._line(
                        LineType.SERVICE_OVERAGE,
                        f"Overage - {record.service_type} "
                        f"({record.overage} {record.unit.value} above {record.included})",
                        record.overage_charge,
                        quantity=record.overage,
                        unit_price=record.overage_rate,
                    )
                )

            # Step 5: Build and persist
            subtotal = self._sum_lines(lines)
            issue_date = self.clock.today()

            invoice = Invoice(
                law_firm_id=subscription.law_firm_id,
                client_id=subscription.client_id,
                invoice_type=InvoiceType.SUBSCRIPTION,
                invoice_status=InvoiceStatus.DRAFT,
                issue_date=issue_date,
                due_date=subscription_due_date(issue_date, subscription.billing_cycle),
                subtotal=subtotal,
                tax_amount=round_money(0),
                discount_amount=round_money(0),
                total_amount=subtotal,
                currency=self.currency,
                payment_terms=PaymentTerms.DAYS_30.value,
                client_subscription_id=subscription.id,
                billing_period_start=command.period_start,
                billing_period_end=command.period_end,
                description=f"Subscription invoice - {subscription.plan_name} "
                            f"({command.period_start} to {command.period_end})",
            )

            return await self._save(invoice, lines)

        except Exception as e:
            return await self._fail(e, f"subscription {command.client_subscription_id}")
