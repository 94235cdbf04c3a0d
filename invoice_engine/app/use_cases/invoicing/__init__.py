from .dtos import (
    BatchInvoiceResultDTO,
    BatchItemErrorDTO,
    GenerateCaseBatchCommandDTO,
    GenerateCaseInvoiceCommandDTO,
    GeneratePaymentPlanInvoiceCommandDTO,
    GenerateRemainingInstallmentsCommandDTO,
    GenerateSubscriptionBatchCommandDTO,
    GenerateSubscriptionInvoiceCommandDTO,
    InvoiceGenerationRunResultDTO,
    InvoiceLineDTO,
    InvoiceResponseDTO,
)
from .errors import InvoiceErrorCode
from .generate_batch_invoices import GenerateCaseInvoiceBatch, GenerateSubscriptionInvoiceBatch
from .generate_case_invoice import GenerateCaseInvoice
from .generate_payment_plan_invoice import GeneratePaymentPlanInvoice
from .generate_remaining_installments import GenerateRemainingInstallments
from .generate_subscription_invoice import GenerateSubscriptionInvoice
from .get_invoice import GetInvoice

__all__ = [
    "BatchInvoiceResultDTO",
    "BatchItemErrorDTO",
    "GenerateCaseBatchCommandDTO",
    "GenerateCaseInvoiceCommandDTO",
    "GeneratePaymentPlanInvoiceCommandDTO",
    "GenerateRemainingInstallmentsCommandDTO",
    "GenerateSubscriptionBatchCommandDTO",
    "GenerateSubscriptionInvoiceCommandDTO",
    "InvoiceGenerationRunResultDTO",
    "InvoiceLineDTO",
    "InvoiceResponseDTO",
    "InvoiceErrorCode",
    "GenerateCaseInvoice",
    "GenerateCaseInvoiceBatch",
    "GeneratePaymentPlanInvoice",
    "GenerateRemainingInstallments",
    "GenerateSubscriptionInvoice",
    "GenerateSubscriptionInvoiceBatch",
    "GetInvoice",
]
