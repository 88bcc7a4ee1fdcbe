"""Alembic environment for the broadcast schedule cache.

- The database URL comes from Settings (DATABASE_URL)
- The async driver is swapped for the sync one (aiosqlite -> pysqlite)
- SQLite migrations run in batch mode so ALTERs work
"""

from logging.config import fileConfig

from sqlalchemy import engine_from_config, pool

from alembic import context
from broadcast_schedule_db.config import get_settings
from broadcast_schedule_db.db.models import Base

# Alembic Config object
config = context.config

# Migrations run synchronously; drop the async driver from the URL
db_url = get_settings().database_url.replace("+aiosqlite", "")
config.set_main_option("sqlalchemy.url", db_url)

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def run_migrations_offline() -> None:
    """Emit SQL without connecting to the database."""
    url = config.get_main_option("sqlalchemy.url")
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        render_as_batch=url is not None and url.startswith("sqlite"),
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Connect to the database and apply migrations."""
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
            render_as_batch=connection.dialect.name == "sqlite",
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
