# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

from logging.config import fileConfig

from alembic import context

import common.config
import common.db.database as db

# Register the tables on the metadata
import certificate_registry.db.records  # noqa: F401

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name, disable_existing_loggers=False)

target_metadata = db.Base.metadata


def run_migrations_offline() -> None:
    db_config = common.config.DBConfig()
    context.configure(
        url=db_config.SQLALCHEMY_DATABASE_URL,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Runs the migrations on the engine shared with the application (including the schema search path)"""
    db_config = common.config.DBConfig()
    connectable = db.engine(db_config.SQLALCHEMY_DATABASE_URL, db_config.SQLALCHEMY_DATABASE_SCHEMA)

    with connectable.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata)
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
