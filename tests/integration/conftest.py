import pytest_asyncio
from datetime import date
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

import invoice_engine.domain  # noqa: F401  registers tables on SQLModel.metadata
from invoice_engine.adapter.repositories import (
    SqlAlchemyInvoiceRepository,
    SqlAlchemyMatterRepository,
    SqlAlchemyPaymentPlanRepository,
    SqlAlchemySubscriptionRepository,
    SqlAlchemyTimeEntryRepository,
)
from invoice_engine.adapter.services import SqlAlchemyInvoiceNumberAllocator, SqlAlchemyUnitOfWork
from invoice_engine.app.use_cases.invoicing import (
    GenerateCaseInvoice,
    GeneratePaymentPlanInvoice,
    GenerateSubscriptionInvoice,
)
from invoice_engine.depends import get_session
from tests.fixtures.clock import FixedClock


@pytest_asyncio.fixture(scope="function")
async def engine():
    """In-memory SQLite database shared by every connection of one test"""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        echo=False,
        future=True,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(engine):
    """Create a new database session for each test"""
    Session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)
    async with Session() as session:
        yield session


@pytest_asyncio.fixture
def clock():
    return FixedClock(date(2025, 2, 1))


@pytest_asyncio.fixture
def subscription_generator(db_session, clock):
    return GenerateSubscriptionInvoice(
        uow=SqlAlchemyUnitOfWork(db_session),
        subscription_repo=SqlAlchemySubscriptionRepository(db_session),
        time_entry_repo=SqlAlchemyTimeEntryRepository(db_session),
        invoice_repo=SqlAlchemyInvoiceRepository(db_session),
        number_allocator=SqlAlchemyInvoiceNumberAllocator(db_session),
        clock=clock,
    )


@pytest_asyncio.fixture
def case_generator(db_session, clock):
    return GenerateCaseInvoice(
        uow=SqlAlchemyUnitOfWork(db_session),
        matter_repo=SqlAlchemyMatterRepository(db_session),
        time_entry_repo=SqlAlchemyTimeEntryRepository(db_session),
        invoice_repo=SqlAlchemyInvoiceRepository(db_session),
        number_allocator=SqlAlchemyInvoiceNumberAllocator(db_session),
        clock=clock,
    )


@pytest_asyncio.fixture
def payment_plan_generator(db_session, clock):
    return GeneratePaymentPlanInvoice(
        uow=SqlAlchemyUnitOfWork(db_session),
        payment_plan_repo=SqlAlchemyPaymentPlanRepository(db_session),
        invoice_repo=SqlAlchemyInvoiceRepository(db_session),
        number_allocator=SqlAlchemyInvoiceNumberAllocator(db_session),
        clock=clock,
    )


@pytest_asyncio.fixture
async def client(db_session):
    """Create test client with database session override"""
    from invoice_engine.api.app import create_app
    from config import ApplicationConfig

    app = create_app(ApplicationConfig)

    # Override the session dependency to use test session
    async def override_get_session():
        yield db_session

    app.dependency_overrides[get_session] = override_get_session

    # Use ASGITransport for httpx AsyncClient
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
