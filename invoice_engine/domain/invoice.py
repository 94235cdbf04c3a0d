"""Invoice Domain Entity

The single output of the invoice generation engine.
"""

from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import CheckConstraint, Numeric, String, Date, Text, UniqueConstraint, DateTime
from invoice_engine.domain.base import BaseModel, generate_uuid, utc_now


class InvoiceType(str, Enum):
    """Which generator produced the invoice"""
    SUBSCRIPTION = "subscription"
    CASE_BILLING = "case_billing"
    PAYMENT_PLAN = "payment_plan"


class InvoiceStatus(str, Enum):
    """Invoice status types"""
    DRAFT = "draft"
    SENT = "sent"
    PAID = "paid"
    OVERDUE = "overdue"
    CANCELLED = "cancelled"


class Invoice(BaseModel, table=True):
    """
    Invoice - Billing invoice for a subscription period, matter or installment

    Domain Rules:
    - invoice_number must be unique
    - Created in draft status; later transitions belong to the billing workflow
    - total_amount = subtotal + tax_amount - discount_amount, never negative
    - Exactly one of client_subscription_id, matter_id, payment_plan_id is set
    - One invoice per (subscription, billing period) and per
      (payment plan, installment_number)
    """

    __tablename__ = "invoices"
    __table_args__ = (
        Index('ix_invoices_law_firm_id', 'law_firm_id'),
        Index('ix_invoices_invoice_status', 'invoice_status'),
        Index('ix_invoices_matter_id', 'matter_id'),
        UniqueConstraint(
            'client_subscription_id', 'billing_period_start', 'billing_period_end',
            name='uq_invoices_subscription_period',
        ),
        UniqueConstraint(
            'payment_plan_id', 'installment_number',
            name='uq_invoices_payment_plan_installment',
        ),
        CheckConstraint('total_amount >= 0', name='total_amount_non_negative'),
        CheckConstraint(
            'total_amount = subtotal + tax_amount - discount_amount',
            name='total_amount_identity',
        ),
        CheckConstraint(
            '(CASE WHEN client_subscription_id IS NULL THEN 0 ELSE 1 END)'
            ' + (CASE WHEN matter_id IS NULL THEN 0 ELSE 1 END)'
            ' + (CASE WHEN payment_plan_id IS NULL THEN 0 ELSE 1 END) = 1',
            name='single_billing_subject',
        ),
    )

    id: str = Field(
        default_factory=generate_uuid,
        primary_key=True,
        description="Unique invoice identifier"
    )

    law_firm_id: str = Field(
        description="Issuing law firm"
    )

    client_id: str = Field(
        index=True,
        description="Billed client"
    )

    invoice_number: str = Field(
        sa_column=Column(String(50), nullable=False, unique=True),
        description="Unique invoice number (e.g., SUB-2025-000001)"
    )

    invoice_type: InvoiceType = Field(
        description="Invoice type (subscription, case_billing, payment_plan)"
    )

    invoice_status: InvoiceStatus = Field(
        default=InvoiceStatus.DRAFT,
        description="Invoice status"
    )

    issue_date: date = Field(
        sa_column=Column(Date, nullable=False),
    )

    due_date: date = Field(
        sa_column=Column(Date, nullable=False),
    )

    subtotal: Decimal = Field(
        sa_column=Column(Numeric(12, 2), nullable=False),
    )

    tax_amount: Decimal = Field(
        default=Decimal("0.00"),
        sa_column=Column(Numeric(12, 2), nullable=False, default=0),
    )

    discount_amount: Decimal = Field(
        default=Decimal("0.00"),
        sa_column=Column(Numeric(12, 2), nullable=False, default=0),
    )

    total_amount: Decimal = Field(
        sa_column=Column(Numeric(12, 2), nullable=False),
    )

    currency: str = Field(
        default="BRL",
        sa_column=Column(String(3), nullable=False),
        description="Currency code (ISO 4217)"
    )

    payment_terms: str = Field(
        sa_column=Column(String(20), nullable=False),
    )

    client_subscription_id: Optional[str] = Field(
        default=None,
        description="Set on subscription invoices"
    )

    matter_id: Optional[str] = Field(
        default=None,
        description="Set on case invoices"
    )

    payment_plan_id: Optional[str] = Field(
        default=None,
        description="Set on payment plan invoices"
    )

    billing_period_start: Optional[date] = Field(
        default=None,
        sa_column=Column(Date, nullable=True),
    )

    billing_period_end: Optional[date] = Field(
        default=None,
        sa_column=Column(Date, nullable=True),
    )

    installment_number: Optional[int] = Field(
        default=None,
        description="Installment billed (payment plan invoices only)"
    )

    description: Optional[str] = Field(
        default=None,
        sa_column=Column(Text, nullable=True),
    )

    created_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False),
        description="Invoice creation timestamp"
    )

    updated_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False),
        description="Last update timestamp"
    )

    @property
    def subject_id(self) -> Optional[str]:
        return self.client_subscription_id or self.matter_id or self.payment_plan_id
