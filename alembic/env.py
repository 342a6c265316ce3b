"""Alembic env: migrates the database the app itself is configured for.

The URL comes from ALEMBIC_DATABASE_URL, then MENTORQUEST_DATABASE_URL (via
settings), then sqlalchemy.url in alembic.ini. Online runs build the engine
with the app's make_engine so SQLite gets the same busy timeout and BEGIN
handling as the server.
"""
from logging.config import fileConfig
import os

from alembic import context
from sqlalchemy import event, pool

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

from mentorquest.core.config import get_settings  # noqa: E402
from mentorquest.db.base import Base  # noqa: E402
from mentorquest.db.session import make_engine  # noqa: E402

target_metadata = Base.metadata


def get_url() -> str:
    return (
        os.getenv("ALEMBIC_DATABASE_URL")
        or get_settings().database_url
        or config.get_main_option("sqlalchemy.url")
    )


def _configure(**kwargs) -> None:
    context.configure(target_metadata=target_metadata, compare_type=True, **kwargs)


def run_migrations_offline() -> None:
    """Emit SQL to stdout instead of connecting."""
    url = get_url()
    _configure(
        url=url,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        render_as_batch=url.startswith("sqlite"),
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    engine = make_engine(get_url(), poolclass=pool.NullPool)
    if engine.dialect.name == "sqlite":
        # batch mode copies and drops tables; with foreign keys on, the drop would cascade
        @event.listens_for(engine, "connect")
        def _foreign_keys_off(dbapi_connection, connection_record):
            dbapi_connection.execute("PRAGMA foreign_keys = OFF")

    try:
        with engine.connect() as connection:
            _configure(connection=connection, render_as_batch=engine.dialect.name == "sqlite")
            with context.begin_transaction():
                context.run_migrations()
    finally:
        engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
