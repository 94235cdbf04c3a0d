from .unit_of_work import SqlAlchemyUnitOfWork
from .invoice_number_allocator import SqlAlchemyInvoiceNumberAllocator
from .clock import SystemClock

__all__ = [
    "SqlAlchemyUnitOfWork",
    "SqlAlchemyInvoiceNumberAllocator",
    "SystemClock",
]
