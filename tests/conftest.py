"""
Pytest fixtures: a throwaway SQLite database per test, the sale service
wired to it, and an HTTP client driving the FastAPI app in-process.
"""
from datetime import datetime
from decimal import Decimal
from typing import AsyncGenerator, Generator, List

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from app.core.events import DomainEvent, EventPublisher
from app.storage.database.db_connector import get_db
from app.v1_0.models import Base
from app.v1_0.repositories import SaleItemRepository, SaleRepository
from app.v1_0.schemas import SaleCreate, SaleItemInput
from app.v1_0.services import SaleService


@pytest.fixture
def database_url(tmp_path) -> str:
    """File-backed SQLite so concurrent sessions get their own connections."""
    return f"sqlite+aiosqlite:///{tmp_path / 'sales_test.db'}"


@pytest_asyncio.fixture
async def session_factory(database_url) -> AsyncGenerator[async_sessionmaker, None]:
    engine = create_async_engine(database_url, poolclass=NullPool)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(bind=engine, expire_on_commit=False, autoflush=False, class_=AsyncSession)

    await engine.dispose()


@pytest_asyncio.fixture
async def db(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture
def recorded_events() -> List[DomainEvent]:
    return []


@pytest.fixture
def event_publisher(recorded_events) -> EventPublisher:
    publisher = EventPublisher()
    publisher.subscribe(recorded_events.append)
    return publisher


@pytest.fixture
def sale_service(event_publisher) -> SaleService:
    return SaleService(
        sale_repository=SaleRepository(),
        sale_item_repository=SaleItemRepository(),
        event_publisher=event_publisher,
    )


@pytest.fixture
def make_payload():
    """Build a SaleCreate; items are (product_name, quantity, unit_price) tuples."""
    def _make(items=(), sale_number="S1", customer_name="Alice", branch="Downtown"):
        return SaleCreate(
            sale_number=sale_number,
            sale_date=datetime(2024, 5, 1, 10, 30),
            customer_name=customer_name,
            branch=branch,
            items=[
                SaleItemInput(product_name=name, quantity=qty, unit_price=Decimal(price))
                for name, qty, price in items
            ],
        )
    return _make


@pytest_asyncio.fixture
async def client(session_factory) -> AsyncGenerator[httpx.AsyncClient, None]:
    from app.main import app

    async def _get_test_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = _get_test_db
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def app_events() -> Generator[List[DomainEvent], None, None]:
    """Events published by the app's own container while a test runs."""
    from app.main import app

    publisher: EventPublisher = app.state.container.api_container.event_publisher()
    events: List[DomainEvent] = []
    publisher.subscribe(events.append)
    yield events
    publisher.unsubscribe(events.append)
