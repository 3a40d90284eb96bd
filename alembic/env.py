"""Alembic environment for the TaskFlow schema.

The database URL comes from ``sqlalchemy.url`` when the caller sets it on the
Alembic config, otherwise from ``DATABASE_URL`` via the application settings.
"""

import sys
from logging.config import fileConfig
from pathlib import Path

from dotenv import load_dotenv
from sqlalchemy import create_engine, pool

from alembic import context

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

load_dotenv()

from taskflow.config import get_settings
from taskflow.database import Base

# Register every table on Base.metadata
from taskflow.models.comment import Comment  # noqa: F401
from taskflow.models.task import Task  # noqa: F401
from taskflow.models.user import User  # noqa: F401

config = context.config

# Callers that already configured logging (the test suite) opt out
if config.config_file_name is not None and config.attributes.get("configure_logger", True):
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def database_url() -> str:
    return config.get_main_option("sqlalchemy.url") or get_settings().DATABASE_URL


def configure_options(url: str) -> dict:
    """SQLite cannot ALTER most columns in place, so it migrates in batch mode."""
    return {
        "target_metadata": target_metadata,
        "compare_type": True,
        "render_as_batch": url.startswith("sqlite"),
    }


def run_migrations_offline() -> None:
    """Emit SQL for the migrations without a live connection."""
    url = database_url()
    context.configure(
        url=url,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **configure_options(url),
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    url = database_url()
    connectable = create_engine(
        url,
        poolclass=pool.NullPool,
        connect_args={"check_same_thread": False} if url.startswith("sqlite") else {},
    )
    with connectable.connect() as connection:
        context.configure(connection=connection, **configure_options(url))
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
