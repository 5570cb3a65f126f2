# tests/database/test_film_query.py
from __future__ import annotations

import pytest
from sqlalchemy.dialects import postgresql, sqlite

from filmcatalog.database.repos.film_query import FilmQueryBuilder
from filmcatalog.domain.errors import InvalidCriteriaError


def _sql(stmt, dialect) -> str:
    return str(stmt.compile(dialect=dialect)).upper()


# ---------------------------- statement shape ---------------------------------

def test_unfiltered_select_joins_title_without_where():
    sql = _sql(FilmQueryBuilder("sqlite").build(), sqlite.dialect())
    assert "JOIN TITLE" in sql
    assert "WHERE" not in sql
    assert "ORDER BY FILM.ID" in sql


def test_title_uses_ilike_on_postgres():
    sql = _sql(FilmQueryBuilder("postgresql").build({"title": "a"}), postgresql.dialect())
    assert "ILIKE" in sql


def test_title_folds_case_elsewhere():
    sql = _sql(FilmQueryBuilder("sqlite").build({"title": "A"}), sqlite.dialect())
    assert "LOWER(TITLE.TITLE) LIKE" in sql


def test_predicates_are_anded():
    stmt = FilmQueryBuilder("sqlite").build({"title": "a", "javascript": "true", "rating": "4"})
    sql = _sql(stmt, sqlite.dialect())
    where = sql.split("WHERE", 1)[1]
    assert where.count(" AND ") == 2


def test_build_id_with_cast_outer_joins_cast_members():
    sql = _sql(FilmQueryBuilder("sqlite").build_id(1, include_cast=True), sqlite.dialect())
    assert "LEFT OUTER JOIN CAST_MEMBER" in sql
    sql = _sql(FilmQueryBuilder("sqlite").build_id(1), sqlite.dialect())
    assert "CAST_MEMBER" not in sql


def test_unknown_key_raises():
    with pytest.raises(InvalidCriteriaError):
        FilmQueryBuilder("sqlite").build({"rating": "4", "bogus": "1"})


# ---------------------------- execution ---------------------------------------

def _ids(db, criteria) -> list[int]:
    qb = FilmQueryBuilder(db.get_bind().dialect.name)
    return [f.id for f in db.execute(qb.build(criteria)).unique().scalars().all()]


def test_title_match_is_case_insensitive(db, make_film):
    a = make_film(isan="1", title="Alpha")
    make_film(isan="2", title="Beta")
    assert _ids(db, {"title": "ALP"}) == [a.id]


def test_keyword_flag_matches_serialized_keywords(db, make_film):
    make_film(isan="1", title="Alpha", keywords=["JAVASCRIPT"])
    b = make_film(isan="2", title="Beta", keywords=["JAVASCRIPT", "TYPESCRIPT"])
    assert _ids(db, {"typescript": "true"}) == [b.id]
    assert len(_ids(db, {"javascript": "true"})) == 2


def test_combined_criteria(db, make_film):
    a = make_film(isan="1", title="Alpha", rating=5, keywords=["JAVASCRIPT"])
    make_film(isan="2", title="Alpine", rating=3, keywords=["JAVASCRIPT"])
    make_film(isan="3", title="Gamma", rating=5, keywords=["JAVASCRIPT"])
    assert _ids(db, {"title": "al", "rating": "5", "javascript": "true"}) == [a.id]


def test_equality_on_coerced_values(db, make_film):
    a = make_film(isan="1", title="Alpha", available=False, genre=None)
    b = make_film(isan="2", title="Beta", available=True)
    assert _ids(db, {"available": "false"}) == [a.id]
    assert _ids(db, {"genre": "ACTION"}) == [b.id]
    assert _ids(db, {"price": "9.99"}) == [a.id, b.id]


def test_title_match_folds_non_ascii(db, make_film):
    if db.get_bind().dialect.name != "sqlite":
        pytest.skip("folding on PostgreSQL follows the server locale")
    a = make_film(isan="1", title="Ärger im Paradies")
    make_film(isan="2", title="Beta")
    assert _ids(db, {"title": "ärger"}) == [a.id]
    assert _ids(db, {"title": "PARADIES"}) == [a.id]
