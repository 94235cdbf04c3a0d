"""Data Transfer Objects for Invoice Generation Use Cases

Pydantic models for command inputs and response outputs.
"""

from datetime import datetime, date
from decimal import Decimal
from typing import Optional, List
from pydantic import BaseModel, Field, model_validator


class GenerateSubscriptionInvoiceCommandDTO(BaseModel):
    """
    Command DTO for generating one subscription invoice

    Used as input to GenerateSubscriptionInvoice use case.
    """

    law_firm_id: str = Field(
        ...,
        description="Law firm issuing the invoice"
    )

    client_subscription_id: str = Field(
        ...,
        description="Subscription to bill"
    )

    period_start: date = Field(
        ...,
        description="First day of the billing period (inclusive)"
    )

    period_end: date = Field(
        ...,
        description="Last day of the billing period (inclusive)"
    )

    @model_validator(mode="after")
    def check_period(self):
        if self.period_end < self.period_start:
            raise ValueError("period_end must not be before period_start")
        return self

    class Config:
        json_schema_extra = {
            "example": {
                "law_firm_id": "firm_001",
                "client_subscription_id": "5b0f7a52-7d1c-4c4e-9a55-1c2f3f0e9d11",
                "period_start": "2025-01-01",
                "period_end": "2025-01-31",
            }
        }


class GenerateCaseInvoiceCommandDTO(BaseModel):
    """
    Command DTO for generating a case (matter) invoice

    Used as input to GenerateCaseInvoice use case.
    """

    law_firm_id: str = Field(..., description="Law firm issuing the invoice")

    matter_id: str = Field(..., description="Matter to bill")

    include_time_entries: bool = Field(
        default=True,
        description="Charge approved billable time entries (hourly and hybrid methods)"
    )

    include_expenses: bool = Field(
        default=False,
        description="Pass approved case expenses through to the invoice"
    )

    billing_period_start: Optional[date] = Field(
        default=None,
        description="Only bill time entries and expenses from this date"
    )

    billing_period_end: Optional[date] = Field(
        default=None,
        description="Only bill time entries and expenses up to this date"
    )

    force_regenerate: bool = Field(
        default=False,
        description="Issue a new invoice even if one exists for the matter and period"
    )

    @model_validator(mode="after")
    def check_period(self):
        if (
            self.billing_period_start is not None
            and self.billing_period_end is not None
            and self.billing_period_end < self.billing_period_start
        ):
            raise ValueError("billing_period_end must not be before billing_period_start")
        return self


class GeneratePaymentPlanInvoiceCommandDTO(BaseModel):
    """
    Command DTO for generating one payment plan installment invoice

    installment_number defaults to the next unbilled installment.
    scheduled_date defaults to today and drives the late fee check.
    """

    law_firm_id: str = Field(..., description="Law firm issuing the invoice")

    payment_plan_id: str = Field(..., description="Payment plan to bill")

    installment_number: Optional[int] = Field(
        default=None,
        ge=1,
        description="Installment to bill (1-based)"
    )

    scheduled_date: Optional[date] = Field(
        default=None,
        description="Date the installment is billed on"
    )


class GenerateRemainingInstallmentsCommandDTO(BaseModel):
    """Command DTO for billing every remaining installment of a plan"""

    law_firm_id: str = Field(..., description="Law firm issuing the invoices")

    payment_plan_id: str = Field(..., description="Payment plan to bill")

    start_from_installment: Optional[int] = Field(
        default=None,
        ge=1,
        description="First installment to bill (defaults to the next unbilled one)"
    )


class GenerateSubscriptionBatchCommandDTO(BaseModel):
    """Command DTO for billing all active subscriptions of a law firm for a period"""

    law_firm_id: str = Field(..., description="Law firm issuing the invoices")

    period_start: date = Field(..., description="First day of the billing period")

    period_end: date = Field(..., description="Last day of the billing period")

    client_ids: Optional[List[str]] = Field(
        default=None,
        description="Only bill subscriptions of these clients"
    )

    subscription_ids: Optional[List[str]] = Field(
        default=None,
        description="Only bill these subscriptions"
    )

    @model_validator(mode="after")
    def check_period(self):
        if self.period_end < self.period_start:
            raise ValueError("period_end must not be before period_start")
        return self


class GenerateCaseBatchCommandDTO(BaseModel):
    """Command DTO for billing several matters at once"""

    law_firm_id: str = Field(..., description="Law firm issuing the invoices")

    matter_ids: List[str] = Field(..., min_length=1, description="Matters to bill")

    include_time_entries: bool = Field(default=True)

    include_expenses: bool = Field(default=False)

    billing_period_start: Optional[date] = Field(default=None)

    billing_period_end: Optional[date] = Field(default=None)


class InvoiceLineDTO(BaseModel):
    """Invoice line item"""

    id: str
    line_type: str
    description: str
    quantity: Decimal
    unit_price: Decimal
    total_price: Decimal
    sort_order: int
    time_entry_id: Optional[str] = None


class InvoiceResponseDTO(BaseModel):
    """
    Response DTO for generated invoices

    Returned by every generator.
    """

    invoice_id: str = Field(..., description="Invoice ID")
    law_firm_id: str = Field(..., description="Issuing law firm")
    client_id: str = Field(..., description="Billed client")
    invoice_number: str = Field(..., description="Invoice number (e.g., SUB-2025-000001)")
    invoice_type: str = Field(..., description="subscription, case_billing or payment_plan")
    invoice_status: str = Field(..., description="Invoice status (always draft on creation)")
    issue_date: date
    due_date: date
    subtotal: Decimal
    tax_amount: Decimal
    discount_amount: Decimal
    total_amount: Decimal
    currency: str
    payment_terms: str
    client_subscription_id: Optional[str] = None
    matter_id: Optional[str] = None
    payment_plan_id: Optional[str] = None
    billing_period_start: Optional[date] = None
    billing_period_end: Optional[date] = None
    installment_number: Optional[int] = None
    description: Optional[str] = None
    line_items: List[InvoiceLineDTO] = Field(default_factory=list)
    created_at: datetime

    class Config:
        json_schema_extra = {
            "example": {
                "invoice_id": "9c1f4c44-5f0e-4b7e-9df5-8d3c8cc0b0a2",
                "law_firm_id": "firm_001",
                "client_id": "client_042",
                "invoice_number": "SUB-2025-000001",
                "invoice_type": "subscription",
                "invoice_status": "draft",
                "issue_date": "2025-02-01",
                "due_date": "2025-03-03",
                "subtotal": "2100.00",
                "tax_amount": "0.00",
                "discount_amount": "0.00",
                "total_amount": "2100.00",
                "currency": "BRL",
                "payment_terms": "30_days",
                "client_subscription_id": "5b0f7a52-7d1c-4c4e-9a55-1c2f3f0e9d11",
                "billing_period_start": "2025-01-01",
                "billing_period_end": "2025-01-31",
                "line_items": [],
                "created_at": "2025-02-01T00:00:00Z",
            }
        }


class BatchItemErrorDTO(BaseModel):
    """Failure of one item in a batch"""

    subject_id: str = Field(..., description="Subscription, matter or payment plan ID")
    installment_number: Optional[int] = Field(default=None)
    code: str
    message: str


class BatchInvoiceResultDTO(BaseModel):
    """
    Response DTO for batch invoice generation

    Items succeed or fail independently. invoices and errors keep the order
    in which items were processed (installment order for payment plans).
    """

    batch_id: str
    total_requested: int
    successful_generations: int
    failed_generations: int
    invoices: List[InvoiceResponseDTO] = Field(default_factory=list)
    errors: List[BatchItemErrorDTO] = Field(default_factory=list)


class InvoiceGenerationRunResultDTO(BaseModel):
    """Summary of one invoice generation worker run"""

    billing_period_start: date
    billing_period_end: date
    law_firms_processed: int
    subscription_invoices_created: int
    subscription_failures: int
    installment_invoices_created: int
    installment_failures: int
    duplicates_skipped: int = 0
    execution_time_ms: int
