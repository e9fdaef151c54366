# migrations/env.py
"""Alembic environment bound to the sogas_rh app; the DB URL always comes from Flask config."""
from __future__ import annotations

from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool

from sogas_rh.extensions import db
from sogas_rh.wsgi import app

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name, disable_existing_loggers=False)

DB_URL = app.config["SQLALCHEMY_DATABASE_URI"]
# configparser interpolation
config.set_main_option("sqlalchemy.url", DB_URL.replace("%", "%%"))


def _configure(**kw):
    # SQLite cannot ALTER constraints in place
    context.configure(
        target_metadata=db.metadata,
        compare_type=True,
        render_as_batch=DB_URL.startswith("sqlite"),
        **kw,
    )


def run_offline():
    _configure(url=DB_URL, literal_binds=True)
    with context.begin_transaction():
        context.run_migrations()


def run_online():
    engine = engine_from_config(
        config.get_section(config.config_ini_section),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    with engine.connect() as connection, app.app_context():
        _configure(connection=connection)
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_offline()
else:
    run_online()
