from logging.config import fileConfig
from alembic import context
from sqlalchemy import engine_from_config, pool
from drawreg.db.models import Base
from drawreg.settings import get_settings

config = context.config
if config.config_file_name:
    fileConfig(config.config_file_name)
target_metadata = Base.metadata

# Migrations run over the sync driver; the app itself uses DATABASE_URL (asyncpg).
DATABASE_SYNC_URL = get_settings().DATABASE_SYNC_URL


def run_migrations_offline() -> None:
    context.configure(
        url=DATABASE_SYNC_URL,
        target_metadata=target_metadata,
        literal_binds=True,
        compare_type=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    section = config.get_section(config.config_ini_section, {})
    section["sqlalchemy.url"] = DATABASE_SYNC_URL
    connectable = engine_from_config(section, prefix="sqlalchemy.", poolclass=pool.NullPool)
    with connectable.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata, compare_type=True)
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
