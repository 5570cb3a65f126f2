# tests/database/test_film_models.py
from __future__ import annotations

from decimal import Decimal

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from filmcatalog.database.core.transaction import transactional
from filmcatalog.database.models import Film, Title, CastMember


def test_new_film_starts_at_version_zero(db, make_film):
    f = make_film(cast=[("Ada", "Lovelace")])
    db.refresh(f)
    assert f.version == 0
    assert f.id is not None
    assert f.created_at is not None
    assert f.title.film_id == f.id
    assert [m.film_id for m in f.cast_members] == [f.id]


def test_keywords_round_trip_in_order_without_repeats(db, make_film):
    f = make_film(keywords=["TYPESCRIPT", "JAVASCRIPT", "TYPESCRIPT"])
    db.expire(f)
    assert f.keywords == ["TYPESCRIPT", "JAVASCRIPT"]

    raw = db.execute(select(func.length(Film.keywords)).where(Film.id == f.id)).scalar_one()
    assert raw == len("TYPESCRIPT,JAVASCRIPT")


def test_title_is_unique(db, make_film):
    make_film(isan="1", title="Same")
    with pytest.raises(IntegrityError):
        with transactional(db):
            make_film(isan="2", title="Same")
    # outer work survives the failed nested write
    assert db.execute(select(func.count()).select_from(Title)).scalar_one() == 1


def test_version_counter_guards_updates(db, make_film):
    f = make_film()
    f.rating = 1
    f.version = f.version + 1
    db.flush()
    db.expire(f)
    assert f.version == 1
    assert f.rating == 1


def test_price_is_stored_as_decimal(db, make_film):
    f = make_film(price="12.50")
    db.expire(f)
    assert f.price == Decimal("12.50")


def test_cast_members_ordered_by_id(db):
    f = Film(
        isan="x",
        price=Decimal("1.00"),
        title=Title(title="Ordered"),
        cast_members=[CastMember(first_name="B", last_name="B"), CastMember(first_name="A", last_name="A")],
    )
    db.add(f)
    db.flush()
    db.expire(f)
    assert [m.first_name for m in f.cast_members] == ["B", "A"]
