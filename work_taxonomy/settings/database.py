from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, declarative_base

from work_taxonomy.settings.config import get_settings

Base = declarative_base()

_engine = None
_session_factory = None


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_db_engine(url=None, **kwargs) -> Engine:
    """Create an engine for the given URL (defaults to the configured one).

    SQLite does not enforce foreign keys unless asked to on every connection.
    """
    settings = get_settings()
    engine = create_engine(url or settings.sqlalchemy_url, echo=settings.db_echo, **kwargs)
    if engine.dialect.name == "sqlite":
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    return engine


def get_engine() -> Engine:
    global _engine
    if _engine is None:
        _engine = create_db_engine()
    return _engine


def get_session_factory() -> sessionmaker:
    global _session_factory
    if _session_factory is None:
        _session_factory = sessionmaker(autocommit=False, autoflush=False, bind=get_engine())
    return _session_factory
