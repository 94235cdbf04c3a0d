"""Client Subscription Domain Entities

A client subscribes to a plan with a monthly fee and a set of included
services. Usage beyond the included quantity is billed as overage.
"""

from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import List, Optional
from sqlmodel import Field, Column, Index, Relationship
from sqlalchemy import ForeignKey, Numeric, String, Date, DateTime
from invoice_engine.domain.base import BaseModel, generate_uuid, utc_now


class SubscriptionStatus(str, Enum):
    """Subscription status types"""
    ACTIVE = "active"
    PAUSED = "paused"
    CANCELLED = "cancelled"


class BillingCycle(str, Enum):
    """How often a subscription is invoiced"""
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"


class UsageUnit(str, Enum):
    """Unit in which an included service is measured"""
    SESSIONS = "sessions"
    DOCUMENTS = "documents"
    CONTRACTS = "contracts"
    HOURS = "hours"


class ClientSubscription(BaseModel, table=True):
    """
    Client Subscription - recurring legal services plan

    Domain Rules:
    - start_date marks the first billable day
    - end_date is optional (None = ongoing)
    - monthly_fee is prorated for periods partially covered
    - Each service inclusion may generate overage charges
    """

    __tablename__ = "client_subscriptions"
    __table_args__ = (
        Index('ix_client_subscriptions_law_firm_id', 'law_firm_id'),
        Index('ix_client_subscriptions_status', 'status'),
    )

    id: str = Field(
        default_factory=generate_uuid,
        primary_key=True,
        description="Unique subscription identifier"
    )

    law_firm_id: str = Field(
        description="Owning law firm"
    )

    client_id: str = Field(
        index=True,
        description="Subscribed client"
    )

    plan_name: str = Field(
        sa_column=Column(String(100), nullable=False),
        description="Name of the subscription plan"
    )

    status: SubscriptionStatus = Field(
        default=SubscriptionStatus.ACTIVE,
        description="Subscription status (active, paused, cancelled)"
    )

    start_date: date = Field(
        sa_column=Column(Date, nullable=False),
        description="Subscription start date"
    )

    end_date: Optional[date] = Field(
        default=None,
        sa_column=Column(Date, nullable=True),
        description="Subscription end date (None = ongoing)"
    )

    monthly_fee: Decimal = Field(
        sa_column=Column(Numeric(12, 2), nullable=False),
        description="Base fee per billing period"
    )

    billing_cycle: BillingCycle = Field(
        default=BillingCycle.MONTHLY,
        description="Billing cycle (monthly, quarterly, yearly)"
    )

    created_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False),
        description="Subscription creation timestamp"
    )

    updated_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False),
        description="Last update timestamp"
    )

    service_inclusions: List["ServiceInclusion"] = Relationship(
        sa_relationship_kwargs={"lazy": "selectin", "cascade": "all, delete-orphan"}
    )


class ServiceInclusion(BaseModel, table=True):
    """
    Service Inclusion - quantity of a service covered by the monthly fee

    Usage above quantity_included is billed at overage_rate per unit.
    """

    __tablename__ = "service_inclusions"

    id: str = Field(
        default_factory=generate_uuid,
        primary_key=True,
    )

    client_subscription_id: str = Field(
        sa_column=Column(
            String(36),
            ForeignKey("client_subscriptions.id", ondelete="CASCADE"),
            nullable=False,
        ),
        description="Foreign key to ClientSubscription"
    )

    service_type: str = Field(
        sa_column=Column(String(50), nullable=False),
        description="Service type (e.g., legal_consultation, legal_research)"
    )

    quantity_included: Decimal = Field(
        sa_column=Column(Numeric(12, 2), nullable=False),
        description="Quantity covered by the base fee"
    )

    unit: UsageUnit = Field(
        default=UsageUnit.SESSIONS,
        description="Unit of measure for usage"
    )

    overage_rate: Decimal = Field(
        default=Decimal("0"),
        sa_column=Column(Numeric(12, 2), nullable=False, default=0),
        description="Price per unit above the included quantity"
    )
