"""
Alembic environment for the finance ledger schema.

The database URL comes from the application settings, so the
same DATABASE_URL that selects the store at runtime selects
the store that gets migrated.
"""

from logging.config import fileConfig

from alembic import context
from finance_ledger.config import get_settings
from finance_ledger.models import Base
from finance_ledger.models.base import build_engine

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# Importing finance_ledger.models registers every table on Base.metadata
target_metadata = Base.metadata

settings = get_settings()
config.set_main_option("sqlalchemy.url", settings.DATABASE_URL)


def _is_sqlite(url: str) -> bool:
    return url.startswith("sqlite")


def run_migrations_offline() -> None:
    """Emit the migration as SQL without connecting."""
    url = config.get_main_option("sqlalchemy.url")
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        render_as_batch=_is_sqlite(url),
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """
    Apply the migration to the configured store.

    Uses the same engine setup as the application (SQLite foreign
    keys, PostgreSQL timeouts). SQLite cannot ALTER most things
    in place, so changes there are batched.
    """
    url = config.get_main_option("sqlalchemy.url")
    connectable = build_engine(url)

    try:
        with connectable.connect() as connection:
            context.configure(
                connection=connection,
                target_metadata=target_metadata,
                render_as_batch=_is_sqlite(url),
            )

            with context.begin_transaction():
                context.run_migrations()
    finally:
        connectable.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
