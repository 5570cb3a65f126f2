# filmcatalog/database/repos/film_query.py
from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

from sqlalchemy import Select, String, and_, func, select, type_coerce
from sqlalchemy.orm import contains_eager
from sqlalchemy.sql.elements import ColumnElement

from filmcatalog.common.logging import get_logger
from filmcatalog.database.models import Film as DBFilm, Title as DBTitle
from filmcatalog.domain.criteria import (
    AttributeEquals,
    FilmFilter,
    KeywordFlag,
    TitleContains,
    parse_criteria,
)

logger = get_logger(__name__)


class FilmQueryBuilder:
    """
    Builds (never executes) SELECTs over the Film aggregate.

    Every statement inner-joins Title and eagerly populates Film.title from
    that join; a Film without its Title is never returned.
    """

    def __init__(self, dialect_name: str = "postgresql") -> None:
        self.dialect_name = dialect_name

    def _base(self) -> Select:
        return (
            select(DBFilm)
            .join(DBFilm.title)
            .options(contains_eager(DBFilm.title))
        )

    def build_id(self, film_id: int, *, include_cast: bool = False) -> Select:
        stmt = self._base()
        if include_cast:
            stmt = stmt.outerjoin(DBFilm.cast_members).options(contains_eager(DBFilm.cast_members))
        return stmt.where(DBFilm.id == film_id)

    def build(self, criteria: Optional[Mapping[str, Any]] = None) -> Select:
        """
        e.g. {"title": "a", "rating": 5, "javascript": "true"}

        Raises InvalidCriteriaError for keys outside the allow-list.
        """
        filters = parse_criteria(criteria)
        logger.debug("build: criteria=%s filters=%s", criteria, filters)
        return self.build_filters(filters)

    def build_filters(self, filters: Sequence[FilmFilter]) -> Select:
        stmt = self._base()

        # first predicate is the base clause, each later one is ANDed onto it
        clause: Optional[ColumnElement[bool]] = None
        for f in filters:
            pred = self._predicate(f)
            clause = pred if clause is None else and_(clause, pred)

        if clause is not None:
            stmt = stmt.where(clause)
        stmt = stmt.order_by(DBFilm.id.asc())
        logger.debug("build: sql=%s", stmt)
        return stmt

    # ------------------------------------------------------------------
    # predicates
    # ------------------------------------------------------------------
    def _predicate(self, f: FilmFilter) -> ColumnElement[bool]:
        if isinstance(f, TitleContains):
            return self._title_contains(f.text)
        if isinstance(f, KeywordFlag):
            return type_coerce(DBFilm.keywords, String).like(f"%{f.token}%")
        if isinstance(f, AttributeEquals):
            return getattr(DBFilm, f.attribute) == f.value
        raise TypeError(f"unsupported filter {f!r}")

    def _title_contains(self, text: str) -> ColumnElement[bool]:
        pattern = f"%{text}%"
        if self.dialect_name == "postgresql":
            return DBTitle.title.ilike(pattern)
        # no native ILIKE: fold both sides (SQLite lower() is str.lower, see configure_sqlite)
        return func.lower(DBTitle.title).like(pattern.lower())
