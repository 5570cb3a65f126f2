# tests/conftest.py
from __future__ import annotations
import os

# must be set before filmcatalog is imported anywhere
os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("MAIL__ENABLED", "false")

from decimal import Decimal
from typing import List, Tuple

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from filmcatalog.common.settings import get_settings
from filmcatalog.database.core.main import make_engine, wait_for_database
from filmcatalog.database.models import Base, Film, Title, CastMember
from filmcatalog.domain.enums import FilmGenre

SQLITE_URL = "sqlite+pysqlite:///:memory:"


@pytest.fixture(scope="session")
def _database_url():
    cfg = get_settings()
    if not cfg.use_testcontainers:
        yield SQLITE_URL
        return

    from testcontainers.postgres import PostgresContainer

    with PostgresContainer(cfg.test_db_image) as pg:
        # Force psycopg (v3) driver in the URL returned by testcontainers (it defaults to psycopg2)
        url = pg.get_connection_url().replace("psycopg2", "psycopg")
        ready_engine = create_engine(url, future=True)
        try:
            wait_for_database(ready_engine, cfg.test_db_wait_timeout_sec)
        finally:
            ready_engine.dispose()
        yield url


@pytest.fixture(scope="session")
def db_engine(_database_url) -> Engine:
    engine = make_engine(_database_url)
    # Skip migrations here; just create tables from models
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def file_engine(tmp_path) -> Engine:
    """
    Engine on a throwaway SQLite file. Sessions on it commit for real, so
    tests can check what a fresh session sees afterwards.
    """
    engine = make_engine(f"sqlite+pysqlite:///{tmp_path / 'films.db'}")
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture()
def db(db_engine) -> Session:
    """
    Per-test Session inside an outer transaction that is rolled back afterwards.
    Session-level commits/rollbacks only touch SAVEPOINTs.
    """
    connection = db_engine.connect()
    trans = connection.begin()
    session = Session(bind=connection, join_transaction_mode="create_savepoint")
    try:
        yield session
    finally:
        session.close()
        trans.rollback()
        connection.close()


class RecordingMailer:
    """MailPort that keeps every message in memory."""

    def __init__(self) -> None:
        self.sent: List[Tuple[str, str]] = []

    def send(self, subject: str, body: str) -> None:
        self.sent.append((subject, body))


class FailingMailer:
    def send(self, subject: str, body: str) -> None:
        raise ConnectionError("mail server unreachable")


@pytest.fixture()
def mail_outbox() -> RecordingMailer:
    return RecordingMailer()


def _mk_film(
    session: Session,
    *,
    isan: str = "978-0-007-00644-1",
    title: str = "Alpha",
    subtitle: str | None = None,
    rating: int = 4,
    genre: FilmGenre | None = FilmGenre.ACTION,
    price: str = "9.99",
    discount: str | None = "0.1",
    available: bool = True,
    keywords: list[str] | None = None,
    cast: list[tuple[str, str]] | None = None,
) -> Film:
    """Insert a film aggregate straight through the ORM (flush, no commit)."""
    f = Film(
        isan=isan,
        rating=rating,
        genre=genre,
        price=Decimal(price),
        discount=Decimal(discount) if discount is not None else None,
        available=available,
        homepage="https://film.example/",
        keywords=keywords if keywords is not None else ["JAVASCRIPT"],
        title=Title(title=title, subtitle=subtitle),
        cast_members=[CastMember(first_name=a, last_name=b) for a, b in (cast or [])],
    )
    session.add(f)
    session.flush()
    return f


@pytest.fixture()
def make_film(db):
    """Factory bound to the per-test session: make_film(isan=..., title=...)."""

    def _make(**kwargs) -> Film:
        return _mk_film(db, **kwargs)

    return _make


@pytest.fixture()
def failing_mailer() -> FailingMailer:
    return FailingMailer()
