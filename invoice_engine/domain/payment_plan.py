"""Payment Plan Domain Entity

Splits a matter's fees into scheduled installments.
"""

from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import CheckConstraint, Numeric, Date, DateTime
from invoice_engine.domain.base import BaseModel, generate_uuid, utc_now


class PaymentPlanStatus(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class PaymentFrequency(str, Enum):
    """Spacing between installments"""
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"


class PaymentPlan(BaseModel, table=True):
    """
    Payment Plan - installment schedule for a client

    Domain Rules:
    - Installment n is due first_payment_date + (n - 1) frequency steps
    - Installments billed more than grace_period_days after their due date
      carry a late fee of late_fee_rate percent
    - auto_generate_invoices lets the worker bill installments as they come due
    """

    __tablename__ = "payment_plans"
    __table_args__ = (
        Index('ix_payment_plans_law_firm_id', 'law_firm_id'),
        CheckConstraint('installment_count > 0', name='installment_count_positive'),
    )

    id: str = Field(
        default_factory=generate_uuid,
        primary_key=True,
        description="Unique payment plan identifier"
    )

    law_firm_id: str = Field(
        description="Owning law firm"
    )

    client_id: str = Field(
        index=True,
        description="Paying client"
    )

    matter_id: Optional[str] = Field(
        default=None,
        description="Matter whose fees the plan covers"
    )

    status: PaymentPlanStatus = Field(
        default=PaymentPlanStatus.ACTIVE,
    )

    total_amount: Decimal = Field(
        sa_column=Column(Numeric(12, 2), nullable=False),
        description="Total amount financed"
    )

    installment_count: int = Field(
        description="Number of installments"
    )

    installment_amount: Decimal = Field(
        sa_column=Column(Numeric(12, 2), nullable=False),
        description="Amount of each installment"
    )

    frequency: PaymentFrequency = Field(
        default=PaymentFrequency.MONTHLY,
    )

    first_payment_date: date = Field(
        sa_column=Column(Date, nullable=False),
        description="Due date of installment 1"
    )

    grace_period_days: int = Field(
        default=5,
        description="Days after the due date before a late fee applies"
    )

    late_fee_rate: Decimal = Field(
        default=Decimal("0"),
        sa_column=Column(Numeric(5, 2), nullable=False, default=0),
        description="Late fee as a percentage of the installment"
    )

    auto_generate_invoices: bool = Field(
        default=False,
        description="Bill installments automatically as they come due"
    )

    created_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )
