"""Alembic environment: builds the database URL from tracklog's config."""

import sys
from logging.config import fileConfig
from pathlib import Path

from sqlalchemy import URL, create_engine, pool

from alembic import context

sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

from tracklog.config import _reset_config, get_config  # noqa: E402
from tracklog.db import Base  # noqa: E402

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name, disable_existing_loggers=False)

target_metadata = Base.metadata


def _database_url() -> URL:
    # Credentials may have just been loaded into the environment by run_migrations()
    _reset_config()
    app_config = get_config()
    return URL.create(
        "postgresql+psycopg",
        username=app_config.aurora_user,
        password=app_config.aurora_password,
        host=app_config.aurora_host,
        port=app_config.aurora_port,
        database=app_config.aurora_database,
    )


def run_migrations_offline() -> None:
    context.configure(
        url=_database_url().render_as_string(hide_password=False),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    engine = create_engine(_database_url(), poolclass=pool.NullPool)
    with engine.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata)
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
