import shlex
from collections.abc import AsyncGenerator, AsyncIterator
from contextlib import asynccontextmanager
from functools import lru_cache
from typing import Any

from sqlalchemy import MetaData, event
from sqlalchemy.engine import URL
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncConnection,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from baseentity.config import settings
from baseentity.db._params import SessionFactoryParams
from baseentity.exceptions import DatabaseError
from baseentity.logging import get_logger

logger = get_logger(__name__)

# Naming conventions for database constraints.
# Without these, Alembic can't autogenerate consistent constraint names across migrations.
NAMING_CONVENTION: dict[str, str] = {
    "ix": "ix_%(column_0_label)s",  # Index
    "uq": "uq_%(table_name)s_%(column_0_name)s",  # Unique constraint
    "ck": "ck_%(table_name)s_%(constraint_name)s",  # Check constraint
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",  # Foreign key
    "pk": "pk_%(table_name)s",  # Primary key
}

# Dialect name prefix (lower-cased) -> SQLAlchemy async driver.
# "MsSql2008", "MsSql2012" ... all map to the same driver.
DIALECT_DRIVERS: tuple[tuple[str, str], ...] = (
    ("mssql", "mssql+aioodbc"),
    ("postgresql", "postgresql+asyncpg"),
    ("sqlite", "sqlite+aiosqlite"),
)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models.

    The naming_convention ensures all constraints have predictable names,
    which is critical for Alembic migrations to work correctly.
    """

    metadata = MetaData(naming_convention=NAMING_CONVENTION)


def driver_for(dialect: str) -> str:
    """Return the SQLAlchemy driver name for a dialect such as ``MsSql2008``."""
    name = dialect.strip().lower()
    for prefix, driver in DIALECT_DRIVERS:
        if name.startswith(prefix):
            return driver
    raise DatabaseError(f"Unsupported dialect [{dialect}]")


def _parse_key_values(connection_string: str) -> dict[str, str]:
    """Parse a libpq style ``host=db port=5432 dbname=x`` string."""
    parts: dict[str, str] = {}
    for token in shlex.split(connection_string):
        key, sep, value = token.partition("=")
        if not sep or not key:
            raise DatabaseError(f"Invalid connection string token [{token}]")
        parts[key.strip().lower()] = value
    return parts


def build_url(params: SessionFactoryParams) -> URL:
    """Translate session factory parameters into a SQLAlchemy URL.

    MsSql: the connection string is an ODBC string passed through as
    ``odbc_connect``; the password is appended as ``PWD``.
    PostgreSQL: the connection string is a libpq ``key=value`` string.
    SQLite: the connection string is the database file path (empty = in-memory).
    """
    driver = driver_for(params.dialect)

    if driver.startswith("mssql"):
        odbc = params.connection_string.strip().rstrip(";")
        if params.password:
            odbc = f"{odbc};PWD={{{params.password}}}"
        return URL.create(driver, query={"odbc_connect": odbc})

    if driver.startswith("postgresql"):
        parts = _parse_key_values(params.connection_string)
        port = parts.pop("port", None)
        database = parts.pop("dbname", None)
        if database is None:
            database = parts.pop("database", None)
        try:
            port_number = int(port) if port else None
        except ValueError as exc:
            raise DatabaseError(f"Invalid port [{port}] in connection string", exc) from exc
        return URL.create(
            driver,
            username=parts.pop("user", None),
            password=params.password or None,
            host=parts.pop("host", None),
            port=port_number,
            database=database,
            query=parts,
        )

    return URL.create(driver, database=params.connection_string or None)


def _connect_args(driver: str, command_timeout: int) -> dict[str, Any]:
    # 0 keeps the provider default
    if command_timeout <= 0:
        return {}
    if driver.startswith("postgresql"):
        return {"command_timeout": command_timeout}
    return {"timeout": command_timeout}


class SessionFactory:
    """Opens database sessions from a SessionFactoryParams record.

    Owns the async engine (and its connection pool) plus the sessionmaker.
    Extra keyword arguments go straight to create_async_engine, e.g. pool
    sizing from Settings.engine_options() or ``poolclass=NullPool`` in tests.

    Usage:
        factory = SessionFactory(settings.session_factory_params())
        async with factory.session() as session:
            session.add(entity)
        # committed here; SQLAlchemy failures surface as DatabaseError
    """

    def __init__(self, params: SessionFactoryParams, **engine_options: Any) -> None:
        self.params = params
        self.url = build_url(params)
        driver = self.url.drivername

        if params.app_role_name and driver.startswith("sqlite"):
            raise DatabaseError(
                f"Application roles are not supported by dialect [{params.dialect}]"
            )

        if params.default_schema:
            execution_options = dict(engine_options.pop("execution_options", {}))
            execution_options["schema_translate_map"] = {None: params.default_schema}
            engine_options["execution_options"] = execution_options

        try:
            self.engine = create_async_engine(
                self.url,
                connect_args=_connect_args(driver, params.command_timeout),
                **engine_options,
            )
        except (SQLAlchemyError, ImportError) as exc:
            message = f"Cannot create engine for dialect [{params.dialect}]: {exc}"
            raise DatabaseError(message, exc) from exc

        if params.app_role_name:
            event.listen(self.engine.sync_engine, "connect", self._activate_app_role)

        # expire_on_commit=False keeps objects usable after commit without re-querying.
        self._sessionmaker = async_sessionmaker(self.engine, expire_on_commit=False)
        logger.info(
            "session_factory_created",
            dialect=params.dialect,
            driver=driver,
            default_schema=params.default_schema or None,
            command_timeout=params.command_timeout,
        )

    def _activate_app_role(self, dbapi_connection: Any, _connection_record: Any) -> None:
        """Activate the application role on a new DBAPI connection."""
        dialect = self.engine.dialect
        role = self.params.app_role_name
        cursor = dbapi_connection.cursor()
        try:
            if dialect.name == "mssql":
                cursor.execute("EXEC sp_setapprole ?, ?", (role, self.params.app_role_password))
            else:
                cursor.execute(f"SET ROLE {dialect.identifier_preparer.quote(role)}")
        finally:
            cursor.close()
        logger.debug("app_role_activated", role=role, dialect=dialect.name)

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Yield a session; commit on success, roll back on exception.

        This is the single place where transaction boundaries are managed.
        Services and repositories never call commit() or rollback() directly.
        """
        async with self._sessionmaker() as session:
            try:
                yield session
                await session.commit()
            except SQLAlchemyError as exc:
                await session.rollback()
                logger.warning("session_rolled_back", error=str(exc))
                raise DatabaseError(f"Commit failed: {exc}", exc) from exc
            except Exception:
                await session.rollback()
                raise

    @asynccontextmanager
    async def connect(self) -> AsyncIterator[AsyncConnection]:
        """Yield a raw connection outside the ORM (migrations, bulk SQL)."""
        try:
            async with self.engine.connect() as connection:
                yield connection
        except SQLAlchemyError as exc:
            raise DatabaseError(f"Connection failed: {exc}", exc) from exc

    async def dispose(self) -> None:
        """Close all pooled connections."""
        await self.engine.dispose()


@lru_cache
def get_session_factory() -> SessionFactory:
    """Process-wide session factory built from Settings on first use."""
    return SessionFactory(settings.session_factory_params(), **settings.engine_options())


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency that provides a database session per request.

    Usage in endpoints:
        @router.get("/entities/{object_id}")
        async def read(object_id: int, db: AsyncSession = Depends(get_db)): ...
    """
    async with get_session_factory().session() as session:
        yield session


async def shutdown() -> None:
    """Graceful shutdown: close pooled connections if the factory was ever built."""
    if get_session_factory.cache_info().currsize:
        await get_session_factory().dispose()
        get_session_factory.cache_clear()
