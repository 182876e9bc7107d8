"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - All connection parameters come from environment variables or .env
    - get_settings() is cached (lru_cache), one instance per process
    - sqlalchemy_url always names the asyncpg driver for PostgreSQL

Design Decisions:
    - DB_SOCKET_PATH replaces DB_HOST with a unix socket directory and turns TLS off
    - DATABASE_URL, when set, wins over the individual DB_* parts
"""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env", case_sensitive=False, extra="ignore",
    )

    # HTTP
    host: str = "0.0.0.0"
    port: int = 3000

    # Database
    db_host: str = "localhost"
    db_port: int = 5432
    db_name: str = "users_db"
    db_user: str = "postgres"
    db_password: str = "password"
    db_socket_path: str | None = None
    database_url: str | None = None

    # Pool
    db_pool_max: int = 20
    db_idle_timeout_seconds: float = 30.0
    db_connection_timeout_seconds: float = 2.0
    db_schema_init_fatal: bool = False

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str | None) -> str | None:
        """Plain postgresql:// URLs are rewritten to postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v or None

    @property
    def sqlalchemy_url(self) -> str:
        """Async SQLAlchemy URL assembled from DATABASE_URL or the DB_* parts."""
        if self.database_url:
            return self.database_url
        if self.db_socket_path:
            # asyncpg takes the socket directory from the host query argument
            url = URL.create(
                "postgresql+asyncpg",
                username=self.db_user,
                password=self.db_password,
                database=self.db_name,
                query={"host": self.db_socket_path},
            )
        else:
            url = URL.create(
                "postgresql+asyncpg",
                username=self.db_user,
                password=self.db_password,
                host=self.db_host,
                port=self.db_port,
                database=self.db_name,
            )
        return url.render_as_string(hide_password=False)

    @property
    def connect_args(self) -> dict:
        """Keyword arguments handed to asyncpg.connect()."""
        if not self.sqlalchemy_url.startswith("postgresql+asyncpg"):
            return {}
        args: dict = {"timeout": self.db_connection_timeout_seconds}
        if self.db_socket_path:
            args["ssl"] = False
        return args


@lru_cache
def get_settings() -> Settings:
    return Settings()
