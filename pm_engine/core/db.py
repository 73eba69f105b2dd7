from collections.abc import Callable
from typing import Any

from sqlalchemy import Engine, event
from sqlalchemy.orm import sessionmaker
from sqlmodel import Session, SQLModel, create_engine

from pm_engine.core.config import settings


def create_db_engine(database_url: str | None = None, echo: bool | None = None) -> Engine:
    """
    Build an engine for the PM engine's database.

    SQLite connections open every transaction with BEGIN IMMEDIATE so that
    concurrent writers queue on the database lock instead of interleaving
    their read-then-write sequences.
    """
    url = database_url or settings.SQLALCHEMY_DATABASE_URI
    engine_kwargs: dict[str, Any] = {
        "echo": settings.DATABASE_ECHO if echo is None else echo,
        "pool_pre_ping": settings.DATABASE_POOL_PRE_PING,
    }

    if url.startswith("sqlite"):
        engine_kwargs["connect_args"] = {
            "check_same_thread": False,
            "timeout": settings.SQLITE_BUSY_TIMEOUT_SECONDS,
        }

    engine = create_engine(url, **engine_kwargs)

    if engine.dialect.name == "sqlite":
        _configure_sqlite(engine)

    return engine


def _configure_sqlite(engine: Engine) -> None:
    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        # Hand transaction control to SQLAlchemy's "begin" event below
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def create_session_factory(engine: Engine) -> Callable[[], Session]:
    return sessionmaker(bind=engine, class_=Session, expire_on_commit=False)


def init_db(engine: Engine) -> None:
    # Tables should be created with migrations in deployed environments;
    # local runs and tests create them directly from the SQLModel metadata.
    from pm_engine.models import maintenance  # noqa: F401

    SQLModel.metadata.create_all(engine)


def drop_db(engine: Engine) -> None:
    SQLModel.metadata.drop_all(engine)
