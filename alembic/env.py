# alembic/env.py
import logging
import os
import sys
from logging.config import fileConfig

from sqlalchemy import create_engine

from alembic import context

# Put the project root on sys.path so that 'formbook' imports from here
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

# formbook.config loads the .env from the project root
from formbook import models  # noqa: E402,F401  registers the tables
from formbook.config import DATABASE_URL  # noqa: E402
from formbook.database import Base  # noqa: E402

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

logger = logging.getLogger("alembic.env")

target_metadata = Base.metadata


def sync_database_url() -> str:
    """Alembic migrates synchronously, so drop the async driver suffix."""
    url = DATABASE_URL
    for async_driver in ("+asyncpg", "+aiosqlite"):
        url = url.replace(async_driver, "")
    return url


def run_migrations_offline() -> None:
    """Run migrations in 'offline' mode.

    Configures the context with just a URL, so no DBAPI is needed; calls to
    context.execute() emit the SQL to the script output.
    """
    url = sync_database_url()
    logger.info("Running offline migrations against %s", url)
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        compare_type=True,
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Run migrations in 'online' mode with a synchronous engine."""
    connectable = create_engine(sync_database_url())

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
