# pylint: disable=redefined-outer-name
"""pytest fixtures: a throwaway SQLite database per test and an HTTP client bound to it."""
from typing import AsyncIterator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from brewery_api.crud.beer_repository import BeerRepository
from brewery_api.crud.customer_repository import CustomerRepository
from brewery_api.db import create_tables, get_session_factory, make_session_factory
from brewery_api.services.beer_service import BeerService
from brewery_api.services.customer_service import CustomerService
from function_app import app


@pytest.fixture
async def engine(tmp_path) -> AsyncIterator[AsyncEngine]:
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'brewery.db'}")
    await create_tables(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
async def empty_engine(tmp_path) -> AsyncIterator[AsyncEngine]:
    """An engine whose database has no tables, for exercising store failures."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'empty.db'}")
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return make_session_factory(engine)


@pytest.fixture
def beer_repository(session_factory) -> BeerRepository:
    return BeerRepository(session_factory)


@pytest.fixture
def customer_repository(session_factory) -> CustomerRepository:
    return CustomerRepository(session_factory)


@pytest.fixture
def beer_service(beer_repository: BeerRepository) -> BeerService:
    return BeerService(beer_repository)


@pytest.fixture
def customer_service(customer_repository: CustomerRepository) -> CustomerService:
    return CustomerService(customer_repository)


async def _client_for(factory: async_sessionmaker[AsyncSession]) -> AsyncIterator[AsyncClient]:
    app.dependency_overrides[get_session_factory] = lambda: factory
    try:
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            yield client
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
async def client(session_factory) -> AsyncIterator[AsyncClient]:
    """HTTP client against the app; lifespan bootstrap is skipped, tables come from ``engine``."""
    async for client in _client_for(session_factory):
        yield client


@pytest.fixture
async def broken_client(empty_engine: AsyncEngine) -> AsyncIterator[AsyncClient]:
    async for client in _client_for(make_session_factory(empty_engine)):
        yield client
