"""GenerateRemainingInstallments Use Case"""

import logging
import uuid

from libs.result import Result, Return
from invoice_engine.app.repositories.invoice_repository import InvoiceRepository
from invoice_engine.app.repositories.payment_plan_repository import PaymentPlanRepository
from .dtos import (
    BatchInvoiceResultDTO,
    BatchItemErrorDTO,
    GeneratePaymentPlanInvoiceCommandDTO,
    GenerateRemainingInstallmentsCommandDTO,
)
from .errors import not_found, persistence_error
from .generate_payment_plan_invoice import GeneratePaymentPlanInvoice

logger = logging.getLogger(__name__)


class GenerateRemainingInstallments:
    """
    Use Case: Invoice every remaining installment of a payment plan

    Each installment goes through GeneratePaymentPlanInvoice on its own
    transaction; one failing installment never aborts the others. Results
    are reported in installment order.
    """

    def __init__(
        self,
        payment_plan_repo: PaymentPlanRepository,
        invoice_repo: InvoiceRepository,
        generator: GeneratePaymentPlanInvoice,
    ):
        self.payment_plan_repo = payment_plan_repo
        self.invoice_repo = invoice_repo
        self.generator = generator

    async def execute(self, command: GenerateRemainingInstallmentsCommandDTO) -> Result[BatchInvoiceResultDTO]:
        try:
            plan = await self.payment_plan_repo.get_by_id(command.payment_plan_id)
            if not plan or plan.law_firm_id != command.law_firm_id:
                return Return.err(not_found("payment_plan", command.payment_plan_id))

            # plain values: a rolled back installment expires the loaded plan
            plan_id, installment_count = plan.id, plan.installment_count

            start = command.start_from_installment
            if start is None:
                start = await self.invoice_repo.get_last_installment_number(plan_id) + 1
        except Exception as e:
            logger.error(f"Failed to load payment plan {command.payment_plan_id}: {e}")
            return Return.err(persistence_error(e))

        result = BatchInvoiceResultDTO(
            batch_id=str(uuid.uuid4()),
            total_requested=max(0, installment_count - start + 1),
            successful_generations=0,
            failed_generations=0,
        )

        for installment_number in range(start, installment_count + 1):
            outcome = await self.generator.execute(
                GeneratePaymentPlanInvoiceCommandDTO(
                    law_firm_id=command.law_firm_id,
                    payment_plan_id=plan_id,
                    installment_number=installment_number,
                )
            )
            if outcome.is_ok():
                result.successful_generations += 1
                result.invoices.append(outcome.value)
            else:
                result.failed_generations += 1
                result.errors.append(
                    BatchItemErrorDTO(
                        subject_id=plan_id,
                        installment_number=installment_number,
                        code=outcome.error.code,
                        message=outcome.error.message,
                    )
                )

        logger.info(
            f"Batch {result.batch_id} for payment plan {plan_id}: "
            f"{result.successful_generations} created, {result.failed_generations} failed"
        )
        return Return.ok(result)
