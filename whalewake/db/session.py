from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker

from whalewake.core.config import settings


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_db_engine(url: str):
    if url.startswith("sqlite"):
        engine = create_engine(
            url,
            connect_args={"check_same_thread": False}
        )
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
        return engine

    return create_engine(url, pool_pre_ping=True)


def create_session_factory(engine):
    # results outlive the session that loaded them
    return sessionmaker(
        bind=engine,
        autoflush=False,
        expire_on_commit=False
    )


engine = create_db_engine(settings.SQLALCHEMY_DATABASE_URL)
SessionLocal = create_session_factory(engine)
