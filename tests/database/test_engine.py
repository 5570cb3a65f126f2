# tests/database/test_engine.py
from __future__ import annotations

import time

import pytest
from sqlalchemy import text
from sqlalchemy.exc import OperationalError

from filmcatalog.database.core.main import make_engine, wait_for_database


def test_wait_for_database_returns_once_reachable(file_engine):
    wait_for_database(file_engine, timeout_sec=1)


def test_wait_for_database_gives_up_after_timeout(tmp_path):
    # parent directory does not exist, so every connect fails
    engine = make_engine(f"sqlite+pysqlite:///{tmp_path / 'missing' / 'films.db'}")
    started = time.monotonic()
    try:
        with pytest.raises(OperationalError):
            wait_for_database(engine, timeout_sec=0.3, interval_sec=0.05)
    finally:
        engine.dispose()
    assert time.monotonic() - started >= 0.3


def test_sqlite_lower_folds_non_ascii(file_engine):
    with file_engine.connect() as conn:
        assert conn.execute(text("SELECT lower('ÄRGER Über')")).scalar_one() == "ärger über"
        assert conn.execute(text("SELECT lower(NULL)")).scalar_one() is None
