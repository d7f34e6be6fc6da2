"""Alembic environment configuration for async SQLAlchemy.

Connects through the same SessionFactory the application uses, so the
dialect, credentials, default schema and application role from Settings
apply to migrations too.
"""

import asyncio
from logging.config import fileConfig

from alembic import context
from sqlalchemy import pool
from sqlalchemy.engine import Connection

import baseentity.models  # noqa: F401 (registers models with Base.metadata for autogenerate)
from baseentity.config import settings
from baseentity.db.session import Base, SessionFactory, build_url

config = context.config

params = settings.session_factory_params()
url = build_url(params).render_as_string(hide_password=False)
config.set_main_option("sqlalchemy.url", url.replace("%", "%%"))

# Set up Python logging from alembic.ini [loggers] section
if config.config_file_name is not None:
    fileConfig(config.config_file_name, disable_existing_loggers=False)

target_metadata = Base.metadata


def run_migrations_offline() -> None:
    """Run migrations in 'offline' mode: generate SQL without connecting.

    Usage: alembic upgrade head --sql > migration.sql
    """
    context.configure(
        url=config.get_main_option("sqlalchemy.url"),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        version_table_schema=params.default_schema or None,
    )

    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection: Connection) -> None:
    """Execute migrations within a transaction."""
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
        render_as_batch=connection.dialect.name == "sqlite",
        version_table_schema=params.default_schema or None,
    )

    with context.begin_transaction():
        context.run_migrations()


async def run_async_migrations() -> None:
    """Run migrations over a NullPool factory; a migration run is one-shot."""
    factory = SessionFactory(params, poolclass=pool.NullPool)

    async with factory.connect() as connection:
        await connection.run_sync(do_run_migrations)

    await factory.dispose()


def run_migrations_online() -> None:
    asyncio.run(run_async_migrations())


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
