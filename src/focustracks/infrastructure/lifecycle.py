"""Application lifecycle management for startup and shutdown tasks.

Startup order: logging, SQLite path check, database, membership transaction
runner, YouTube oEmbed client. Shutdown closes them in reverse.
"""

import logging
from collections.abc import AsyncGenerator, Callable
from contextlib import AbstractAsyncContextManager, asynccontextmanager

from fastapi import FastAPI

from focustracks.application.services.playlist_transactions import (
    MembershipTransactionRunner,
)
from focustracks.config import Settings
from focustracks.domain.exceptions import ConfigurationError
from focustracks.infrastructure.integrations.youtube_oembed_client import (
    YouTubeOEmbedClient,
)
from focustracks.infrastructure.observability.logging import configure_logging
from focustracks.infrastructure.persistence.database import Database
from focustracks.infrastructure.persistence.write_scopes import sqlalchemy_write_scope

logger = logging.getLogger(__name__)


# Hey future me, this runs BEFORE the engine exists. SQLite needs to create -journal/-wal
# files next to the .db file, so the directory must be writable, not just the file. We
# don't pre-create the .db file - SQLite initializes it on first connect.
def _validate_sqlite_path(settings: Settings) -> None:
    """Ensure the SQLite database directory exists and is writable.

    Raises:
        ConfigurationError: If the directory cannot be created or written to
    """
    db_path = settings.get_sqlite_db_path()
    if db_path is None:
        return

    try:
        if db_path.parent and str(db_path.parent) != ".":
            db_path.parent.mkdir(parents=True, exist_ok=True)
            logger.debug("Ensured SQLite parent directory exists: %s", db_path.parent)
    except OSError as exc:
        raise ConfigurationError(
            f"Unable to create SQLite database directory '{db_path.parent}': {exc}. "
            "Update DATABASE_URL or adjust directory permissions."
        ) from exc

    try:
        test_file = db_path.parent / f".{db_path.stem}_write_test"
        test_file.write_bytes(b"test")
        test_file.unlink()
    except OSError as exc:
        raise ConfigurationError(
            f"Unable to write files in database directory '{db_path.parent}': {exc}. "
            "SQLite requires write permissions to create database and journal files."
        ) from exc


def build_lifespan(
    settings: Settings,
) -> Callable[[FastAPI], AbstractAsyncContextManager[None]]:
    """Create the lifespan context manager for an app built from `settings`."""

    # Listen future me, everything before `yield` is startup, everything after is
    # shutdown. Resources live on app.state so dependencies can reach them. The ONE
    # membership runner per process is what makes the per-playlist locks mean anything.
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        configure_logging(
            log_level=settings.log_level,
            json_format=settings.observability.log_json_format,
            app_name=settings.app_name,
        )
        logger.info("Starting application: %s", settings.app_name)

        _validate_sqlite_path(settings)
        db = Database(settings)
        app.state.db = db
        logger.info("Database initialized: %s", settings.database.url)

        youtube_client = YouTubeOEmbedClient(settings.youtube)
        app.state.youtube_client = youtube_client
        try:
            if settings.database.auto_create_tables:
                await db.create_tables()
                logger.info("Database tables ensured")

            app.state.membership_runner = MembershipTransactionRunner(
                sqlalchemy_write_scope(db),
                max_attempts=settings.membership.max_write_attempts,
                initial_delay=settings.membership.retry_initial_delay,
            )
            yield
        finally:
            logger.info("Shutting down application")
            await youtube_client.close()
            await db.close()
            logger.info("Application shutdown complete")

    return lifespan
