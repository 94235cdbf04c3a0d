"""Invoice Number Allocator Interface

Defines the contract for assigning invoice numbers.
"""

from abc import ABC, abstractmethod


class InvoiceNumberAllocator(ABC):
    """
    Assigns unique, sequential, type-prefixed invoice numbers

    Numbers are monotonically increasing per (prefix, year).
    """

    @abstractmethod
    async def next_number(self, prefix: str, year: int) -> str:
        """
        Allocate the next invoice number

        Args:
            prefix: Invoice type prefix (SUB, CASE, PLAN)
            year: Issue year

        Returns:
            Invoice number formatted {PREFIX}-{YYYY}-{NNNNNN}
        """
        pass


def format_invoice_number(prefix: str, year: int, sequence: int) -> str:
    return f"{prefix}-{year:04d}-{sequence:06d}"
