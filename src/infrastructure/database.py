import os
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, declarative_base
from dotenv import load_dotenv

load_dotenv()

DATABASE_URL = os.environ.get("DATABASE_URL", "sqlite:///./database.sqlite")

def is_sqlite(url: str) -> bool:
    return url.startswith("sqlite")

def enable_sqlite_foreign_keys(engine: Engine) -> None:
    """sqlite ignora FKs (e o ON DELETE SET NULL de clients) sem este pragma."""

    @event.listens_for(engine, "connect")
    def _set_pragma(dbapi_connection, _connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

def build_engine(url: str = DATABASE_URL, **kwargs) -> Engine:
    if is_sqlite(url):
        # a sessão atravessa threads do pool do FastAPI
        kwargs.setdefault("connect_args", {"check_same_thread": False})
    else:
        kwargs.setdefault("pool_recycle", 1800)
    engine = create_engine(url, pool_pre_ping=True, **kwargs)
    if is_sqlite(url):
        enable_sqlite_foreign_keys(engine)
    return engine

engine = build_engine()

SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)
Base = declarative_base()

def get_db():
    """Uma sessão por requisição."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
