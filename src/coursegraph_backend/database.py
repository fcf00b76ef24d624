import logging
from typing import Generator
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker, Session

from coursegraph_backend.settings import settings

logger = logging.getLogger(__name__)

_database_options = {
    "pool_pre_ping": True,
    "pool_size": 10,
    "max_overflow": 5,
    "pool_timeout": 30,
    "pool_recycle": 300
}

def create_db_engine(url: str, **options) -> Engine:
    """
    Create an engine for the given URL.

    SQLite is used for local development and tests. pysqlite does not emit
    BEGIN on its own, which breaks SAVEPOINT handling, so the transaction is
    started explicitly on that dialect.
    """
    if url.startswith("sqlite"):
        engine = create_engine(url, connect_args={"check_same_thread": False}, **options)

        @event.listens_for(engine, "connect")
        def _disable_pysqlite_transactions(dbapi_connection, connection_record):
            dbapi_connection.isolation_level = None

        @event.listens_for(engine, "connect")
        def _enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        @event.listens_for(engine, "begin")
        def _begin(conn):
            conn.exec_driver_sql("BEGIN")

        return engine

    return create_engine(url, **{**_database_options, **options})

_engine = None
_SessionLocal = None

def get_engine() -> Engine:
    global _engine
    if _engine is None:
        _engine = create_db_engine(settings.DATABASE_URL)
    return _engine

def get_session_factory() -> sessionmaker:
    global _SessionLocal
    if _SessionLocal is None:
        _SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=get_engine())
    return _SessionLocal

def get_db() -> Generator[Session, None, None]:

    db = get_session_factory()()

    try:
        yield db
    except OperationalError:
        logger.error("Database connection failed")
        db.rollback()
        raise
    finally:
        db.close()

def init_db(engine: Engine | None = None) -> None:
    from coursegraph_backend.model import Base

    Base.metadata.create_all(bind=engine or get_engine())
