# alembic/env.py
from __future__ import annotations
import os, sys
from logging.config import fileConfig
from alembic import context
from sqlalchemy import pool
from dotenv import load_dotenv

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
sys.path.insert(0, os.path.join(PROJECT_ROOT, "src"))
load_dotenv(dotenv_path=os.path.join(PROJECT_ROOT, ".env"))

# todo modelo com tabela precisa estar importado aqui para entrar no metadata
from infrastructure.database import Base, DATABASE_URL, build_engine, is_sqlite
from domain.entities.user_entity import User  # noqa: F401
from domain.entities.client_entity import Client  # noqa: F401

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata

def _options(url: str) -> dict:
    # sqlite não tem ALTER TABLE completo: usa o modo batch
    return {
        "target_metadata": target_metadata,
        "compare_type": True,
        "render_as_batch": is_sqlite(url),
    }

def run_migrations_offline() -> None:
    context.configure(url=DATABASE_URL, literal_binds=True, **_options(DATABASE_URL))
    with context.begin_transaction():
        context.run_migrations()

def run_migrations_online() -> None:
    connectable = build_engine(DATABASE_URL, poolclass=pool.NullPool)
    with connectable.connect() as connection:
        context.configure(connection=connection, **_options(DATABASE_URL))
        with context.begin_transaction():
            context.run_migrations()

if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
