from datetime import date

from pydantic_settings import BaseSettings, SettingsConfigDict

from baseentity.db._params import SessionFactoryParams
from baseentity.pricing import PricingEnvironment


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Pydantic Settings automatically reads env vars matching field names (case-insensitive).
    In development, it also reads from .env file if present.
    In production, set environment variables directly (Docker, k8s, etc.).
    """

    # Session factory parameters (see db/_params.py)
    # - MsSql*: ODBC string, e.g. "Driver={ODBC Driver 18 for SQL Server};Server=db;Database=entities;UID=svc"
    # - PostgreSQL*: libpq string, e.g. "host=localhost port=5432 dbname=entities user=svc"
    # - SQLite: path to the database file
    db_connection_string: str = ""
    db_password: str = ""
    db_dialect: str = "MsSql2008"
    db_default_schema: str = ""
    db_command_timeout: int = 0  # Seconds; 0 keeps the driver default
    db_app_role_name: str = ""
    db_app_role_password: str = ""

    # Connection pool settings
    db_pool_size: int = 5  # Number of persistent connections to keep open
    db_max_overflow: int = 10  # Extra connections allowed beyond pool_size under load
    db_pool_timeout: int = 30  # Seconds to wait for available connection before error
    db_pool_recycle: int = 3600  # Recreate connections older than this (seconds)
    db_pool_pre_ping: bool = True  # Test connection with SELECT 1 before using
    db_echo: bool = False  # Log all SQL statements (True for debugging)

    # Pricing environment advertised by this process
    pricing_date: date | None = None  # None means today
    calc_env: str = "Default"

    model_config = SettingsConfigDict(
        env_file=".env",  # Load from .env in development
        env_file_encoding="utf-8",
        extra="ignore",  # Ignore unknown env vars
    )

    def session_factory_params(self) -> SessionFactoryParams:
        """Build the internal record the session factory is initialized from."""
        return SessionFactoryParams(
            connection_string=self.db_connection_string,
            password=self.db_password,
            dialect=self.db_dialect,
            default_schema=self.db_default_schema,
            command_timeout=self.db_command_timeout,
            app_role_name=self.db_app_role_name,
            app_role_password=self.db_app_role_password,
        )

    def engine_options(self) -> dict[str, object]:
        """Pool and echo options passed through to create_async_engine."""
        return {
            "pool_size": self.db_pool_size,
            "max_overflow": self.db_max_overflow,
            "pool_timeout": self.db_pool_timeout,
            "pool_recycle": self.db_pool_recycle,
            "pool_pre_ping": self.db_pool_pre_ping,
            "echo": self.db_echo,
        }

    def pricing_environment(self) -> PricingEnvironment:
        return PricingEnvironment(
            pricing_date=self.pricing_date or date.today(),
            calc_env=self.calc_env,
        )


settings = Settings()
