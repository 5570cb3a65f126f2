from __future__ import annotations

import pytest

from filmcatalog.domain.errors import InvalidCriteriaError, NotFoundError
from filmcatalog.services.film.read_service import FilmReadService


def test_find_by_id_loads_title(db, make_film):
    f = make_film(title="Alpha", subtitle="One")
    got = FilmReadService(db).find_by_id(f.id)
    assert got.id == f.id
    assert got.title.title == "Alpha"
    assert got.title.subtitle == "One"


def test_find_by_id_with_cast(db, make_film):
    f = make_film(cast=[("Ada", "Lovelace"), ("Alan", "Turing")])
    db.expunge_all()
    got = FilmReadService(db).find_by_id(f.id, include_cast=True)
    assert [m.last_name for m in got.cast_members] == ["Lovelace", "Turing"]


def test_find_by_id_unknown(db):
    with pytest.raises(NotFoundError) as ei:
        FilmReadService(db).find_by_id(999_999)
    assert "999999" in ei.value.message


def test_find_without_criteria_returns_everything(db, make_film):
    svc = FilmReadService(db)
    assert svc.find() == []
    make_film(isan="1", title="Alpha")
    make_film(isan="2", title="Beta")
    assert [f.title.title for f in svc.find({})] == ["Alpha", "Beta"]


def test_find_with_criteria(db, make_film):
    make_film(isan="1", title="Alpha")
    b = make_film(isan="2", title="Beta")
    assert [f.id for f in FilmReadService(db).find({"isan": "2"})] == [b.id]


def test_find_with_no_match_is_not_found(db, make_film):
    make_film(isan="1", title="Alpha")
    with pytest.raises(NotFoundError):
        FilmReadService(db).find({"title": "zzz"})


def test_find_unknown_key(db, make_film):
    make_film()
    with pytest.raises(InvalidCriteriaError):
        FilmReadService(db).find({"director": "x"})
