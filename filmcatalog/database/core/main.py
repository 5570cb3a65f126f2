# filmcatalog/database/core/main.py
from __future__ import annotations

import time
from typing import Any, Dict, List

from sqlalchemy import MetaData, create_engine, event, text, Column, Table
from sqlalchemy.exc import OperationalError
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker
from sqlalchemy.pool import StaticPool

from filmcatalog.common.settings import get_settings

_settings = get_settings()

NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

_serviceobject_first = ("id", "version", "created_at", "updated_at")


class Base(DeclarativeBase):
    metadata = MetaData(
        schema=_settings.db_schema,
        naming_convention=NAMING_CONVENTION,
    )

    @classmethod
    def __table_cls__(cls, *args, **kw):
        """Reorder columns so ServiceObject fields come first."""
        if not args:
            return super().__table_cls__(*args, **kw)

        # Positional args are (name, metadata, *columns_and_constraints)
        name, metadata, *rest = args

        cols: List[Column] = [x for x in rest if isinstance(x, Column)]
        others = [x for x in rest if not isinstance(x, Column)]

        # Stable ordering: ServiceObject fields first, then everything else in their original order
        priority = {n: i for i, n in enumerate(_serviceobject_first)}
        original_index = {c: i for i, c in enumerate(cols)}
        cols.sort(key=lambda c: (priority.get(c.name, 10_000), original_index[c]))

        return Table(name, metadata, *(cols + others), **kw)


def is_sqlite(url: str) -> bool:
    return url.startswith("sqlite")


def _unicode_lower(value):
    return value.lower() if isinstance(value, str) else value


def configure_sqlite(engine: Engine) -> None:
    """
    Turn on FK enforcement and let SQLAlchemy own BEGIN so that SAVEPOINT
    (Session.begin_nested) works with the pysqlite driver.

    The built-in lower() only folds ASCII; it is replaced with Python's
    str.lower so case-insensitive title search matches "Ärger" for "ärger".
    """

    @event.listens_for(engine, "connect")
    def _sqlite_connect(dbapi_conn, _):
        dbapi_conn.isolation_level = None
        dbapi_conn.create_function("lower", 1, _unicode_lower, deterministic=True)
        cur = dbapi_conn.cursor()
        cur.execute("PRAGMA foreign_keys=ON")
        cur.close()

    @event.listens_for(engine, "begin")
    def _sqlite_begin(conn):
        conn.exec_driver_sql("BEGIN")


def make_engine(url: str, *, echo: bool = False) -> Engine:
    kwargs: Dict[str, Any] = {"echo": echo, "future": True}
    if is_sqlite(url):
        # one shared connection; requests run in a worker thread
        kwargs.update(connect_args={"check_same_thread": False}, poolclass=StaticPool)
    else:
        kwargs.update(
            pool_size=_settings.db.pool_size,
            max_overflow=_settings.db.max_overflow,
            pool_pre_ping=_settings.db.pool_pre_ping,
            pool_recycle=_settings.db.pool_recycle,
        )
    eng = create_engine(url, **kwargs)
    if is_sqlite(url):
        configure_sqlite(eng)
    return eng


def wait_for_database(engine: Engine, timeout_sec: float, interval_sec: float = 0.5) -> None:
    """Retry `SELECT 1` until the database answers; re-raise once `timeout_sec` has passed."""
    deadline = time.monotonic() + timeout_sec
    while True:
        try:
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return
        except OperationalError:
            if time.monotonic() >= deadline:
                raise
            time.sleep(interval_sec)


engine = make_engine(_settings.database_url, echo=_settings.db.echo)

# Ensure the app schema is first, then public
if _settings.db_schema:
    @event.listens_for(engine, "connect")
    def _set_search_path(dbapi_conn, _):
        with dbapi_conn.cursor() as cur:
            cur.execute(f'SET search_path TO "{_settings.db_schema}", public')


SessionLocal = sessionmaker(bind=engine, expire_on_commit=False, future=True, autoflush=False)


def create_schema(bind: Engine | None = None) -> None:
    """Create all tables for the registered models (dev/test convenience)."""
    import filmcatalog.database.models  # noqa: F401  (registers the mappers)

    Base.metadata.create_all(bind=bind or engine)
