import pytest
from datetime import date
from unittest.mock import AsyncMock, MagicMock

from invoice_engine.app.services.invoice_number_allocator import format_invoice_number
from tests.fixtures.clock import FixedClock


@pytest.fixture
def mock_uow():
    """Mock unit of work"""
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock()
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()
    return uow


@pytest.fixture
def clock():
    return FixedClock(date(2025, 2, 1))


@pytest.fixture
def mock_allocator():
    """Allocator handing out 1, 2, 3... per prefix and year"""
    counters = {}

    async def next_number(prefix, year):
        counters[(prefix, year)] = counters.get((prefix, year), 0) + 1
        return format_invoice_number(prefix, year, counters[(prefix, year)])

    allocator = MagicMock()
    allocator.next_number = AsyncMock(side_effect=next_number)
    return allocator


@pytest.fixture
def mock_invoice_repo():
    """Invoice repository with no existing invoices; create echoes the invoice"""
    repo = MagicMock()
    repo.create = AsyncMock(side_effect=lambda invoice, lines: invoice)
    repo.find_subscription_invoice = AsyncMock(return_value=None)
    repo.find_case_invoice = AsyncMock(return_value=None)
    repo.find_installment_invoice = AsyncMock(return_value=None)
    repo.get_last_installment_number = AsyncMock(return_value=0)
    repo.get_by_id = AsyncMock(return_value=None)
    repo.get_lines = AsyncMock(return_value=[])
    return repo
