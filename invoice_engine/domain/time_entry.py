"""Time Entry Domain Entity

Time recorded by lawyers, either against a matter (hourly billing) or
against a subscription (usage tracking for service inclusions).
"""

from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import Numeric, String, Date, DateTime
from invoice_engine.domain.base import BaseModel, generate_uuid, utc_now


class EntryStatus(str, Enum):
    """Time entry review status"""
    DRAFT = "draft"
    SUBMITTED = "submitted"
    APPROVED = "approved"
    REJECTED = "rejected"
    BILLED = "billed"


class TimeEntry(BaseModel, table=True):
    """
    Time Entry - a block of work time

    Domain Rules:
    - Only approved, billable entries are charged on case invoices
    - billable_amount is stored when the entry is approved; when absent the
      amount is derived from effective_minutes and the applicable rate
    - Entries tagged with client_subscription_id + service_type count as
      subscription usage
    """

    __tablename__ = "time_entries"
    __table_args__ = (
        Index('ix_time_entries_matter_date', 'matter_id', 'entry_date'),
        Index('ix_time_entries_subscription_date', 'client_subscription_id', 'entry_date'),
    )

    id: str = Field(
        default_factory=generate_uuid,
        primary_key=True,
    )

    law_firm_id: str = Field(
        description="Owning law firm"
    )

    matter_id: Optional[str] = Field(
        default=None,
        description="Matter the time was spent on"
    )

    client_subscription_id: Optional[str] = Field(
        default=None,
        description="Subscription the time counts against"
    )

    service_type: Optional[str] = Field(
        default=None,
        sa_column=Column(String(50), nullable=True),
        description="Subscription service type (e.g., legal_consultation)"
    )

    description: str = Field(
        default="",
        sa_column=Column(String(500), nullable=False, default=""),
    )

    effective_minutes: int = Field(
        default=0,
        description="Billable duration in minutes"
    )

    is_billable: bool = Field(
        default=True,
    )

    billable_rate: Optional[Decimal] = Field(
        default=None,
        sa_column=Column(Numeric(12, 2), nullable=True),
        description="Rate per hour for this entry"
    )

    billable_amount: Optional[Decimal] = Field(
        default=None,
        sa_column=Column(Numeric(12, 2), nullable=True),
        description="Stored amount for this entry"
    )

    entry_status: EntryStatus = Field(
        default=EntryStatus.DRAFT,
    )

    entry_date: date = Field(
        sa_column=Column(Date, nullable=False),
    )

    created_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )
