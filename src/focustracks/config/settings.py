"""Application settings loaded from environment variables and .env files."""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """Database connection settings."""

    model_config = SettingsConfigDict(
        env_prefix="DATABASE_", env_file=".env", extra="ignore"
    )

    url: str = Field(
        default="sqlite+aiosqlite:///./focustracks.db",
        description="SQLAlchemy async database URL",
    )
    echo: bool = Field(default=False, description="Log every SQL statement")
    pool_pre_ping: bool = Field(default=True)
    pool_size: int = Field(default=5, ge=1)
    max_overflow: int = Field(default=10, ge=0)
    pool_timeout: int = Field(default=30, ge=1)
    pool_recycle: int = Field(default=1800, ge=-1)
    # Hey future me - production schemas come from `alembic upgrade head`.
    # auto_create_tables is for dev boxes and the test suite only.
    auto_create_tables: bool = Field(default=True)


class ObservabilitySettings(BaseSettings):
    """Logging and request tracing settings."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    log_json_format: bool = Field(default=False)
    log_request_body: bool = Field(default=False)


class MembershipSettings(BaseSettings):
    """Playlist membership write settings.

    Every add/remove/move is one read-modify-write unit. When SQLite reports a
    lock, the whole unit is retried with exponential backoff.
    """

    model_config = SettingsConfigDict(
        env_prefix="MEMBERSHIP_", env_file=".env", extra="ignore"
    )

    max_write_attempts: int = Field(default=3, ge=1, le=10)
    retry_initial_delay: float = Field(default=0.2, ge=0.0)


class YouTubeSettings(BaseSettings):
    """YouTube oEmbed lookup settings (no API key required)."""

    model_config = SettingsConfigDict(
        env_prefix="YOUTUBE_", env_file=".env", extra="ignore"
    )

    oembed_url: str = Field(default="https://www.youtube.com/oembed")
    timeout: float = Field(default=10.0, gt=0)


class Settings(BaseSettings):
    """Top-level application settings."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_name: str = Field(default="focustracks")
    debug: bool = Field(default=False)
    log_level: str = Field(default="INFO")
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000, ge=1, le=65535)

    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)
    membership: MembershipSettings = Field(default_factory=MembershipSettings)
    youtube: YouTubeSettings = Field(default_factory=YouTubeSettings)

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unsupported log level: {value}")
        return level

    def get_sqlite_db_path(self) -> Path | None:
        """Return the SQLite file path, or None for other backends / in-memory DBs."""
        url = self.database.url
        if not url.startswith("sqlite"):
            return None
        _, _, path = url.partition(":///")
        if not path or path == ":memory:":
            return None
        return Path(path)


# Hey future me - cached so every Depends(get_settings) shares one instance.
# Tests that need different settings call get_settings.cache_clear() first.
@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
