"""Matter and Case Billing Configuration Domain Entities"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import ForeignKey, Numeric, String, DateTime
from invoice_engine.domain.base import BaseModel, generate_uuid, utc_now


class BillingMethod(str, Enum):
    """Fee models a matter can be billed under"""
    HOURLY = "hourly"
    FIXED = "fixed"
    PERCENTAGE = "percentage"
    CONTINGENCY = "contingency"
    HYBRID = "hybrid"
    RETAINER = "retainer"


class PaymentTerms(str, Enum):
    """Invoice payment terms"""
    IMMEDIATE = "immediate"
    DAYS_7 = "7_days"
    DAYS_15 = "15_days"
    DAYS_30 = "30_days"
    DAYS_45 = "45_days"
    DAYS_60 = "60_days"

    @property
    def days(self) -> int:
        if self is PaymentTerms.IMMEDIATE:
            return 0
        return int(self.value.split("_")[0])


class Matter(BaseModel, table=True):
    """Matter - a legal case handled for a client"""

    __tablename__ = "matters"
    __table_args__ = (
        Index('ix_matters_law_firm_id', 'law_firm_id'),
    )

    id: str = Field(
        default_factory=generate_uuid,
        primary_key=True,
        description="Unique matter identifier"
    )

    law_firm_id: str = Field(
        description="Owning law firm"
    )

    client_id: str = Field(
        index=True,
        description="Client the matter belongs to"
    )

    title: str = Field(
        sa_column=Column(String(255), nullable=False),
        description="Matter title"
    )

    created_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False),
        description="Matter creation timestamp"
    )


class CaseBillingConfig(BaseModel, table=True):
    """
    Case Billing Config - how a matter is charged

    Domain Rules:
    - One config per matter
    - The fields required depend on billing_method:
      hourly -> hourly_rate, fixed -> fixed_fee,
      percentage/contingency -> percentage_rate,
      hybrid -> hourly_rate + percentage_rate, retainer -> retainer_amount
    - minimum_fee, when set, is a floor on the computed fee
    """

    __tablename__ = "case_billing_configs"

    id: str = Field(
        default_factory=generate_uuid,
        primary_key=True,
    )

    matter_id: str = Field(
        sa_column=Column(
            String(36),
            ForeignKey("matters.id", ondelete="CASCADE"),
            nullable=False,
            unique=True,
        ),
        description="Foreign key to Matter (one config per matter)"
    )

    billing_method: BillingMethod = Field(
        description="Fee model"
    )

    hourly_rate: Optional[Decimal] = Field(
        default=None,
        sa_column=Column(Numeric(12, 2), nullable=True),
        description="Default rate per hour"
    )

    fixed_fee: Optional[Decimal] = Field(
        default=None,
        sa_column=Column(Numeric(12, 2), nullable=True),
        description="Flat fee for the matter"
    )

    percentage_rate: Optional[Decimal] = Field(
        default=None,
        sa_column=Column(Numeric(5, 2), nullable=True),
        description="Percentage of the amount recovered (0-100)"
    )

    minimum_fee: Optional[Decimal] = Field(
        default=None,
        sa_column=Column(Numeric(12, 2), nullable=True),
        description="Floor applied to the computed fee"
    )

    retainer_amount: Optional[Decimal] = Field(
        default=None,
        sa_column=Column(Numeric(12, 2), nullable=True),
        description="Amount billed per invoice under the retainer method"
    )

    payment_terms: PaymentTerms = Field(
        default=PaymentTerms.DAYS_30,
        description="Payment terms for case invoices"
    )


class CaseOutcome(BaseModel, table=True):
    """Case Outcome - recovery figures used by percentage-based fees"""

    __tablename__ = "case_outcomes"

    id: str = Field(
        default_factory=generate_uuid,
        primary_key=True,
    )

    matter_id: str = Field(
        sa_column=Column(
            String(36),
            ForeignKey("matters.id", ondelete="CASCADE"),
            nullable=False,
            unique=True,
        ),
        description="Foreign key to Matter"
    )

    amount_recovered: Decimal = Field(
        sa_column=Column(Numeric(14, 2), nullable=False),
        description="Amount recovered for the client"
    )

    success_fee: Decimal = Field(
        default=Decimal("0"),
        sa_column=Column(Numeric(12, 2), nullable=False, default=0),
        description="Flat success fee added on top of the percentage"
    )
