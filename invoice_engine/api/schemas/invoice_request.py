"""Request schemas for Invoice API

Pydantic models for validating incoming HTTP requests.
"""

from datetime import date
from typing import List, Optional
from pydantic import BaseModel, Field


class LawFirmScopedSchema(BaseModel):
    law_firm_id: str = Field(
        ...,
        min_length=1,
        description="Law firm issuing the invoice (required, non-empty)"
    )


class SubscriptionInvoiceRequestSchema(LawFirmScopedSchema):
    """
    Request schema for generating a subscription invoice

    Used for POST /billing/invoices/subscription endpoint.
    """

    client_subscription_id: str = Field(..., min_length=1)

    period_start: date = Field(..., description="First day of the billing period")

    period_end: date = Field(..., description="Last day of the billing period")


class CaseInvoiceRequestSchema(LawFirmScopedSchema):
    """
    Request schema for generating a case invoice

    Used for POST /billing/invoices/case endpoint.
    """

    matter_id: str = Field(..., min_length=1)

    include_time_entries: bool = Field(default=True)

    include_expenses: bool = Field(default=False)

    billing_period_start: Optional[date] = Field(default=None)

    billing_period_end: Optional[date] = Field(default=None)

    force_regenerate: bool = Field(
        default=False,
        description="Bill again even if the matter already has an invoice for the period"
    )


class PaymentPlanInvoiceRequestSchema(LawFirmScopedSchema):
    """
    Request schema for generating an installment invoice

    Used for POST /billing/invoices/payment-plan endpoint.
    """

    payment_plan_id: str = Field(..., min_length=1)

    installment_number: Optional[int] = Field(
        default=None,
        ge=1,
        description="Installment to bill; next unbilled installment when omitted"
    )

    scheduled_date: Optional[date] = Field(
        default=None,
        description="Reference date for the late fee; today when omitted"
    )


class RemainingInstallmentsRequestSchema(LawFirmScopedSchema):
    """Used for POST /billing/invoices/payment-plan/{payment_plan_id}/remaining"""

    start_from_installment: Optional[int] = Field(default=None, ge=1)


class SubscriptionBatchRequestSchema(LawFirmScopedSchema):
    """Used for POST /billing/invoices/subscription/batch"""

    period_start: date

    period_end: date

    client_ids: Optional[List[str]] = Field(default=None)

    subscription_ids: Optional[List[str]] = Field(default=None)


class CaseBatchRequestSchema(LawFirmScopedSchema):
    """Used for POST /billing/invoices/case/batch"""

    matter_ids: List[str] = Field(..., min_length=1)

    include_time_entries: bool = Field(default=True)

    include_expenses: bool = Field(default=False)

    billing_period_start: Optional[date] = Field(default=None)

    billing_period_end: Optional[date] = Field(default=None)
