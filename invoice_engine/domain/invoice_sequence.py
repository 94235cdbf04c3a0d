"""Invoice Sequence Domain Entity

Per (prefix, year) counter backing invoice number allocation.
"""

from sqlmodel import Field, Column
from sqlalchemy import String, UniqueConstraint
from invoice_engine.domain.base import BaseModel, generate_uuid


class InvoiceSequence(BaseModel, table=True):
    """Last issued sequence value for an invoice number prefix and year"""

    __tablename__ = "invoice_sequences"
    __table_args__ = (
        UniqueConstraint('prefix', 'year', name='uq_invoice_sequences_prefix_year'),
    )

    id: str = Field(
        default_factory=generate_uuid,
        primary_key=True,
    )

    prefix: str = Field(
        sa_column=Column(String(10), nullable=False),
    )

    year: int = Field()

    last_value: int = Field(
        default=0,
    )
