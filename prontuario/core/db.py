from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from sqlalchemy import MetaData, event, text
from sqlalchemy import create_engine as sa_create_engine
from sqlalchemy.engine import URL, Engine, make_url
from sqlalchemy.orm import DeclarativeBase, Session
from sqlalchemy.pool import NullPool

from prontuario.core.settings import Settings
from prontuario.domain.exceptions import ConfigurationError

logger = logging.getLogger("prontuario.db")


def _create_naming_convention() -> dict[str, str]:
    return {
        "ix": "ix_%(column_0_label)s",
        "uq": "uq_%(table_name)s_%(column_0_name)s",
        "ck": "ck_%(table_name)s_%(constraint_name)s",
        "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
        "pk": "pk_%(table_name)s",
    }


metadata_obj = MetaData(naming_convention=_create_naming_convention())


class Base(DeclarativeBase):
    metadata = metadata_obj


# Primary and foreign keys are INT columns.
ID_MIN = -(2**31)
ID_MAX = 2**31 - 1


def is_storable_id(value: int | None) -> bool:
    return value is not None and ID_MIN <= value <= ID_MAX


def _load_models() -> None:
    # Table classes register themselves on Base.metadata when imported.
    from prontuario.patients import models as _patients_models  # noqa: F401
    from prontuario.patients.exams import models as _exams_models  # noqa: F401


def _mysql_url(*, settings: Settings, database: str | None) -> URL:
    return URL.create(
        "mysql+pymysql",
        username=settings.db_user,
        password=settings.db_password,
        host=settings.db_address,
        port=settings.db_port,
        database=database,
    )


def build_database_url(*, settings: Settings) -> URL:
    if settings.database_url:
        return make_url(settings.database_url)

    missing = settings.missing_connection_keys()
    if missing:
        raise ConfigurationError(missing)
    return _mysql_url(settings=settings, database=settings.db_name)


def _enable_sqlite_foreign_keys(dbapi_connection: Any, _connection_record: Any) -> None:
    # SQLite ignores ON DELETE CASCADE unless enforcement is switched on per connection.
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_engine(*, database_url: URL | str) -> Engine:
    # NullPool: every session gets its own DBAPI connection, closed on release.
    engine = sa_create_engine(database_url, poolclass=NullPool)
    if engine.dialect.name == "sqlite":
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    return engine


def ensure_database(*, settings: Settings) -> None:
    """Create the configured MySQL database if it does not exist yet."""
    server_engine = create_engine(database_url=_mysql_url(settings=settings, database=None))
    try:
        preparer = server_engine.dialect.identifier_preparer
        database = preparer.quote_identifier(settings.db_name or "")
        with server_engine.begin() as conn:
            conn.execute(text(f"CREATE DATABASE IF NOT EXISTS {database}"))
    finally:
        server_engine.dispose()


def create_tables(*, engine: Engine) -> None:
    _load_models()
    Base.metadata.create_all(engine, checkfirst=True)


class ConnectionProvider:
    """Hands out one open session per call; swap or fake it in tests."""

    def acquire(self) -> Session:
        raise NotImplementedError

    def release(self, session: Session | None) -> None:
        raise NotImplementedError

    @contextmanager
    def session(self) -> Iterator[Session]:
        session: Session | None = None
        try:
            session = self.acquire()
            yield session
        finally:
            self.release(session)


class SqlAlchemyConnectionProvider(ConnectionProvider):
    """
    Connection provider backed by a SQLAlchemy engine.

    Every acquisition re-checks the schema ("if not exists" semantics on the
    database and both tables). Errors reaching the engine propagate to the caller.
    """

    def __init__(self, *, settings: Settings):
        self._settings = settings
        self._engine: Engine | None = None

    @property
    def url(self) -> URL:
        return build_database_url(settings=self._settings)

    def _get_engine(self) -> Engine:
        if self._engine is None:
            self._engine = create_engine(database_url=self.url)
        return self._engine

    def acquire(self) -> Session:
        engine = self._get_engine()
        if engine.dialect.name == "mysql" and not self._settings.database_url:
            ensure_database(settings=self._settings)
        create_tables(engine=engine)
        return Session(engine, expire_on_commit=False)

    def release(self, session: Session | None) -> None:
        if session is None:
            return
        # Session.close() is safe to repeat; it rolls back anything uncommitted.
        session.close()

    def dispose(self) -> None:
        if self._engine is None:
            return
        self._engine.dispose()
        self._engine = None
