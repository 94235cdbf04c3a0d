"""Batch invoice generation for subscriptions and matters

Both batches run their items sequentially; each item is its own
transaction and failures are collected instead of aborting the run.
"""

import logging
import uuid
from typing import List

from libs.result import Result, Return
from invoice_engine.app.repositories.subscription_repository import SubscriptionRepository
from .dtos import (
    BatchInvoiceResultDTO,
    BatchItemErrorDTO,
    GenerateCaseBatchCommandDTO,
    GenerateCaseInvoiceCommandDTO,
    GenerateSubscriptionBatchCommandDTO,
    GenerateSubscriptionInvoiceCommandDTO,
    InvoiceResponseDTO,
)
from .errors import persistence_error
from .generate_case_invoice import GenerateCaseInvoice
from .generate_subscription_invoice import GenerateSubscriptionInvoice

logger = logging.getLogger(__name__)


def _new_batch(total_requested: int) -> BatchInvoiceResultDTO:
    return BatchInvoiceResultDTO(
        batch_id=str(uuid.uuid4()),
        total_requested=total_requested,
        successful_generations=0,
        failed_generations=0,
    )


def _record(batch: BatchInvoiceResultDTO, subject_id: str, outcome: Result[InvoiceResponseDTO]) -> None:
    if outcome.is_ok():
        batch.successful_generations += 1
        batch.invoices.append(outcome.value)
        return

    batch.failed_generations += 1
    batch.errors.append(
        BatchItemErrorDTO(
            subject_id=subject_id,
            code=outcome.error.code,
            message=outcome.error.message,
        )
    )


class GenerateSubscriptionInvoiceBatch:
    """
    Use Case: Bill every billable subscription of a law firm for one period

    Billable means active and started on or before the period end,
    optionally narrowed to a set of clients or subscriptions. Subscriptions
    already billed for the period are reported as DUPLICATE_INVOICE items.
    """

    def __init__(self, subscription_repo: SubscriptionRepository, generator: GenerateSubscriptionInvoice):
        self.subscription_repo = subscription_repo
        self.generator = generator

    async def execute(self, command: GenerateSubscriptionBatchCommandDTO) -> Result[BatchInvoiceResultDTO]:
        try:
            subscriptions = await self.subscription_repo.get_billable_subscriptions(
                command.law_firm_id,
                command.period_end,
                client_ids=command.client_ids,
                subscription_ids=command.subscription_ids,
            )
        except Exception as e:
            logger.error(f"Failed to load subscriptions for law firm {command.law_firm_id}: {e}")
            return Return.err(persistence_error(e))

        # ids are read up front: a rolled back item expires the loaded rows
        subscription_ids = [subscription.id for subscription in subscriptions]
        batch = _new_batch(len(subscription_ids))

        for subscription_id in subscription_ids:
            outcome = await self.generator.execute(
                GenerateSubscriptionInvoiceCommandDTO(
                    law_firm_id=command.law_firm_id,
                    client_subscription_id=subscription_id,
                    period_start=command.period_start,
                    period_end=command.period_end,
                )
            )
            _record(batch, subscription_id, outcome)

        logger.info(
            f"Subscription batch {batch.batch_id} for law firm {command.law_firm_id} "
            f"({command.period_start} - {command.period_end}): "
            f"{batch.successful_generations} created, {batch.failed_generations} failed"
        )
        return Return.ok(batch)


class GenerateCaseInvoiceBatch:
    """Use Case: Generate one case invoice per requested matter"""

    def __init__(self, generator: GenerateCaseInvoice):
        self.generator = generator

    async def execute(self, command: GenerateCaseBatchCommandDTO) -> Result[BatchInvoiceResultDTO]:
        matter_ids: List[str] = list(dict.fromkeys(command.matter_ids))
        batch = _new_batch(len(matter_ids))

        for matter_id in matter_ids:
            outcome = await self.generator.execute(
                GenerateCaseInvoiceCommandDTO(
                    law_firm_id=command.law_firm_id,
                    matter_id=matter_id,
                    include_time_entries=command.include_time_entries,
                    include_expenses=command.include_expenses,
                    billing_period_start=command.billing_period_start,
                    billing_period_end=command.billing_period_end,
                )
            )
            _record(batch, matter_id, outcome)

        logger.info(
            f"Case batch {batch.batch_id} for law firm {command.law_firm_id}: "
            f"{batch.successful_generations} created, {batch.failed_generations} failed"
        )
        return Return.ok(batch)
