from .unit_of_work import UnitOfWork
from .clock import Clock
from .invoice_number_allocator import InvoiceNumberAllocator, format_invoice_number

__all__ = [
    "UnitOfWork",
    "Clock",
    "InvoiceNumberAllocator",
    "format_invoice_number",
]
