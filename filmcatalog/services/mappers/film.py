# filmcatalog/services/mappers/film.py
from __future__ import annotations

from typing import Dict

from filmcatalog.database.models import Film, Title, CastMember
from filmcatalog.services.schemas.film import (
    FilmCreate, FilmUpdate, FilmRead, TitleRead, CastMemberRead, Link,
)


def to_orm_from_create(s: FilmCreate) -> Film:
    """The whole aggregate, ready to be added as one unit."""
    return Film(
        isan=s.isan,
        rating=s.rating,
        genre=s.genre,
        price=s.price,
        discount=s.discount,
        available=bool(s.available),
        release_date=s.release_date,
        homepage=s.homepage,
        keywords=list(s.keywords),
        title=Title(title=s.title.title, subtitle=s.title.subtitle),
        cast_members=[CastMember(first_name=m.first_name, last_name=m.last_name) for m in s.cast_members],
    )


def to_orm_from_update(s: FilmUpdate) -> Film:
    """Scalar fields only; title and cast stay unset."""
    return Film(
        isan=s.isan,
        rating=s.rating,
        genre=s.genre,
        price=s.price,
        discount=s.discount,
        available=bool(s.available),
        release_date=s.release_date,
        homepage=s.homepage,
        keywords=list(s.keywords),
    )


def film_links(base_uri: str, film_id: int, *, full: bool = True) -> Dict[str, Link]:
    self_href = f"{base_uri}/{film_id}"
    if not full:
        return {"self": Link(href=self_href)}
    return {
        "self": Link(href=self_href),
        "list": Link(href=base_uri),
        "add": Link(href=base_uri),
        "update": Link(href=self_href),
        "remove": Link(href=self_href),
    }


def to_read_schema(row: Film, *, base_uri: str = "", full_links: bool = True, include_cast: bool = False) -> FilmRead:
    return FilmRead(
        id=row.id,
        isan=row.isan,
        rating=row.rating,
        genre=row.genre,
        price=row.price,
        discount=row.discount,
        available=row.available,
        release_date=row.release_date,
        homepage=row.homepage,
        keywords=list(row.keywords or []),
        title=TitleRead.model_validate(row.title) if row.title is not None else None,
        cast_members=[CastMemberRead.model_validate(m) for m in row.cast_members] if include_cast else None,
        links=film_links(base_uri, row.id, full=full_links),
    )
