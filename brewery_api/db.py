from typing import Optional
import os

from sqlalchemy import text
from sqlalchemy.engine import URL, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from brewery_api.logging_config import get_child_logger
from brewery_api.models.entities import Base

logger = get_child_logger("db")


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


DATABASE_URL = os.environ.get("DATABASE_URL", "sqlite+aiosqlite:///./brewery.db")
DATABASE_DROP = _env_flag("DATABASE_DROP")
DATABASE_INITIALIZE = _env_flag("DATABASE_INITIALIZE", default=True)
DATABASE_ECHO = _env_flag("DATABASE_ECHO")
DATABASE_POOL_SIZE = int(os.environ.get("DATABASE_POOL_SIZE", "5"))

# PostgreSQL maintenance database used to issue CREATE/DROP DATABASE
SERVER_DATABASE = "postgres"

_engine: Optional[AsyncEngine] = None
_session_factory: Optional[async_sessionmaker[AsyncSession]] = None


def create_engine(url: str = DATABASE_URL) -> AsyncEngine:
    options = {"echo": DATABASE_ECHO}
    if make_url(url).get_backend_name() != "sqlite":
        options.update(pool_size=DATABASE_POOL_SIZE, pool_pre_ping=True)
    return create_async_engine(url, **options)


def make_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, expire_on_commit=False, autoflush=False)


def get_engine() -> AsyncEngine:
    global _engine
    if _engine is None:
        logger.info(
            "Creating database engine",
            extra={"backend": make_url(DATABASE_URL).get_backend_name()},
        )
        _engine = create_engine()
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """
    Shared session factory bound to the process-wide engine.

    Used as a FastAPI dependency, so tests can swap in a factory bound to
    their own engine through ``app.dependency_overrides``.
    """
    global _session_factory
    if _session_factory is None:
        _session_factory = make_session_factory(get_engine())
    return _session_factory


async def dispose_engine() -> None:
    global _engine, _session_factory
    if _engine is not None:
        await _engine.dispose()
    _engine = None
    _session_factory = None


def _server_url(url: URL) -> URL:
    return url.set(database=SERVER_DATABASE)


async def _run_on_server(url: URL, statement: str) -> None:
    # CREATE/DROP DATABASE cannot run inside a transaction block
    server = create_async_engine(_server_url(url), isolation_level="AUTOCOMMIT")
    try:
        async with server.connect() as conn:
            await conn.execute(text(statement))
    finally:
        await server.dispose()


async def _database_exists(url: URL) -> bool:
    server = create_async_engine(_server_url(url), isolation_level="AUTOCOMMIT")
    try:
        async with server.connect() as conn:
            result = await conn.execute(
                text("SELECT 1 FROM pg_database WHERE datname = :name"),
                {"name": url.database},
            )
            return result.scalar() is not None
    finally:
        await server.dispose()


async def drop_database(engine: AsyncEngine) -> None:
    """
    Drop the configured database.

    PostgreSQL databases are dropped outright. Other backends keep their
    database file and have every table dropped instead.
    """
    url = engine.url
    logger.info("Starting database drop...", extra={"database": url.database})

    if url.get_backend_name() == "postgresql":
        quoted = engine.dialect.identifier_preparer.quote(url.database)
        await _run_on_server(url, f"DROP DATABASE IF EXISTS {quoted}")
    else:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)

    logger.info(f"Dropped existing database: {url.database}")


async def create_database(engine: AsyncEngine) -> None:
    url = engine.url
    if url.get_backend_name() != "postgresql":
        logger.debug(f"Backend {url.get_backend_name()} creates its database on connect")
        return

    if await _database_exists(url):
        logger.info(f"Database {url.database} already exists")
        return

    quoted = engine.dialect.identifier_preparer.quote(url.database)
    await _run_on_server(url, f"CREATE DATABASE {quoted}")
    logger.info(f"Created new database: {url.database}")


async def create_tables(engine: AsyncEngine) -> None:
    logger.info("Creating database tables...")

    async with engine.begin() as conn:
        for table in Base.metadata.sorted_tables:
            try:
                await conn.run_sync(table.create, checkfirst=True)
            except SQLAlchemyError:
                logger.error(f"Failed to create table: {table.name}", exc_info=True)
                raise
            logger.debug(f"Created table: {table.name}")

    logger.info("All tables created successfully")


async def initialize_database(
    engine: AsyncEngine,
    drop: bool = DATABASE_DROP,
    initialize: bool = DATABASE_INITIALIZE,
) -> None:
    """
    Bootstrap the schema on startup.

    Any failure is logged and re-raised so that the application refuses to
    start against a half-initialised store.
    """
    try:
        if drop:
            await drop_database(engine)
            # pooled connections may point at the database that was just dropped
            await engine.dispose()

        if initialize:
            logger.info("Starting database initialize...")
            await create_database(engine)
            await create_tables(engine)
            logger.info("Database initialize completed successfully")
    except Exception:
        logger.error("Failed to initialize database", exc_info=True)
        raise
