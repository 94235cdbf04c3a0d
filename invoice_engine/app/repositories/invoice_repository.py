"""Invoice Repository Interface

Defines the contract for invoice persistence operations.
"""

from abc import ABC, abstractmethod
from typing import Optional, List
from datetime import date
from invoice_engine.domain.invoice import Invoice
from invoice_engine.domain.invoice_line import InvoiceLine


class InvoiceRepository(ABC):
    """
    Repository interface for Invoice persistence

    Invoices are insert-only from the generators' point of view.
    """

    @abstractmethod
    async def create(self, invoice: Invoice, lines: List[InvoiceLine]) -> Invoice:
        """
        Create a new invoice with its line items

        Args:
            invoice: Invoice entity to persist
            lines: Line items, linked to the invoice on insert

        Returns:
            Created Invoice

        Raises:
            DuplicateInvoiceError: If a uniqueness constraint rejects the insert
        """
        pass

    @abstractmethod
    async def get_by_id(self, invoice_id: str) -> Optional[Invoice]:
        """
        Retrieve invoice by ID

        Args:
            invoice_id: Invoice ID

        Returns:
            Invoice if found, None otherwise
        """
        pass

    @abstractmethod
    async def get_lines(self, invoice_id: str) -> List[InvoiceLine]:
        """
        Retrieve the line items of an invoice in sort order
        """
        pass

    @abstractmethod
    async def find_subscription_invoice(
        self, client_subscription_id: str, period_start: date, period_end: date
    ) -> Optional[Invoice]:
        """
        Find the invoice covering a subscription billing period

        Used by the duplicate guard.
        """
        pass

    @abstractmethod
    async def find_case_invoice(
        self,
        matter_id: str,
        period_start: Optional[date] = None,
        period_end: Optional[date] = None,
    ) -> Optional[Invoice]:
        """
        Find a case invoice for a matter and period

        A None bound matches invoices created without that bound.
        """
        pass

    @abstractmethod
    async def find_installment_invoice(
        self, payment_plan_id: str, installment_number: int
    ) -> Optional[Invoice]:
        """
        Find the invoice of a payment plan installment

        Used by the duplicate guard.
        """
        pass

    @abstractmethod
    async def get_last_installment_number(self, payment_plan_id: str) -> int:
        """
        Highest installment number invoiced for a plan

        Returns:
            Installment number, 0 if none has been invoiced
        """
        pass
