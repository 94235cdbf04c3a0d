"""Case Expense Domain Entity"""

from datetime import date
from decimal import Decimal
from enum import Enum
from sqlmodel import Field, Column, Index
from sqlalchemy import ForeignKey, Numeric, String, Date
from invoice_engine.domain.base import BaseModel, generate_uuid


class ExpenseStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class CaseExpense(BaseModel, table=True):
    """Case Expense - a cost incurred on a matter and passed through to the client"""

    __tablename__ = "case_expenses"
    __table_args__ = (
        Index('ix_case_expenses_matter_date', 'matter_id', 'expense_date'),
    )

    id: str = Field(
        default_factory=generate_uuid,
        primary_key=True,
    )

    matter_id: str = Field(
        sa_column=Column(
            String(36),
            ForeignKey("matters.id", ondelete="CASCADE"),
            nullable=False,
        ),
    )

    description: str = Field(
        sa_column=Column(String(255), nullable=False),
    )

    amount: Decimal = Field(
        sa_column=Column(Numeric(12, 2), nullable=False),
    )

    expense_date: date = Field(
        sa_column=Column(Date, nullable=False),
    )

    status: ExpenseStatus = Field(
        default=ExpenseStatus.PENDING,
    )

    is_reimbursable: bool = Field(
        default=True,
    )
