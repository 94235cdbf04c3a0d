"""Invoice Line Domain Entity

Tracks individual line items within an invoice.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import ForeignKey, Numeric, String, DateTime
from invoice_engine.domain.base import BaseModel, generate_uuid, utc_now


class LineType(str, Enum):
    SUBSCRIPTION_FEE = "subscription_fee"
    SERVICE_OVERAGE = "service_overage"
    CASE_FEE = "case_fee"
    SUCCESS_FEE = "success_fee"
    TIME_ENTRY = "time_entry"
    EXPENSE = "expense"
    ADJUSTMENT = "adjustment"
    INSTALLMENT = "installment"
    LATE_FEE = "late_fee"


class InvoiceLine(BaseModel, table=True):
    """
    Invoice Line - Individual line item within an invoice

    Domain Rules:
    - Each line item belongs to exactly one invoice
    - total_price is the charged amount of the line; lines sum to the
      invoice subtotal
    - Immutable once written
    """

    __tablename__ = "invoice_lines"
    __table_args__ = (
        Index('ix_invoice_lines_invoice_id', 'invoice_id'),
    )

    id: str = Field(
        default_factory=generate_uuid,
        primary_key=True,
    )

    invoice_id: str = Field(
        sa_column=Column(String(36), ForeignKey("invoices.id", ondelete="CASCADE"), nullable=False),
        description="Foreign key to Invoice"
    )

    line_type: LineType = Field(
        description="Kind of charge"
    )

    description: str = Field(
        sa_column=Column(String(255), nullable=False),
        description="Line item description (e.g., 'Late fee (3%)')"
    )

    quantity: Decimal = Field(
        sa_column=Column(Numeric(12, 2), nullable=False),
        description="Quantity (hours, units, sessions)"
    )

    unit_price: Decimal = Field(
        sa_column=Column(Numeric(12, 2), nullable=False),
    )

    total_price: Decimal = Field(
        sa_column=Column(Numeric(12, 2), nullable=False),
    )

    sort_order: int = Field(
        default=0,
    )

    time_entry_id: Optional[str] = Field(
        default=None,
        description="Time entry this line was derived from"
    )

    created_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )
