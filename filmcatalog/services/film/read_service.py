from __future__ import annotations

from typing import Any, List, Mapping, Optional

from sqlalchemy.orm import Session

from filmcatalog.common.logging import get_logger
from filmcatalog.database.models import Film as DBFilm
from filmcatalog.database.repos.film_query import FilmQueryBuilder
from filmcatalog.domain.criteria import check_keys
from filmcatalog.domain.errors import NotFoundError

logger = get_logger(__name__)


class FilmReadService:
    """
    Read side for films. Reads run without an explicit transaction.

    `find` turns "no matches" into NotFoundError whenever criteria were given;
    only an unfiltered listing may come back empty.
    """

    def __init__(self, db: Session) -> None:
        self.db = db
        self.queries = FilmQueryBuilder(dialect_name=db.get_bind().dialect.name)

    def find_by_id(self, film_id: int, *, include_cast: bool = False) -> DBFilm:
        logger.debug("find_by_id: id=%s include_cast=%s", film_id, include_cast)
        stmt = self.queries.build_id(film_id, include_cast=include_cast)
        film = self.db.execute(stmt).unique().scalars().first()
        if film is None:
            raise NotFoundError.for_id(film_id)
        logger.debug("find_by_id: film=%r title=%r", film, film.title)
        return film

    def find(self, criteria: Optional[Mapping[str, Any]] = None) -> List[DBFilm]:
        logger.debug("find: criteria=%s", criteria)
        if not criteria:
            return list(self.db.execute(self.queries.build()).unique().scalars().all())

        check_keys(criteria)
        films = list(self.db.execute(self.queries.build(criteria)).unique().scalars().all())
        logger.debug("find: %d film(s)", len(films))
        if not films:
            raise NotFoundError.for_criteria(criteria)
        return films
