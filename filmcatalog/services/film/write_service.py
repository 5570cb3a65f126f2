from __future__ import annotations

from typing import Optional

from sqlalchemy import delete as sa_delete, inspect
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from filmcatalog.common.logging import get_logger
from filmcatalog.database.core.transaction import transactional
from filmcatalog.database.models import (
    Film as DBFilm,
    Title as DBTitle,
    CastMember as DBCastMember,
    UPDATABLE_FIELDS,
)
from filmcatalog.domain.errors import (
    IsanExistsError,
    NotFoundError,
    TitleExistsError,
    VersionOutdatedError,
)
from filmcatalog.domain.ports.notification import MailPort
from filmcatalog.domain.version import parse_version_token
from filmcatalog.services.film.read_service import FilmReadService

logger = get_logger(__name__)


class FilmWriteService:
    """
    Write side for films: create, update (optimistic concurrency), delete.

    Every multi-statement write runs inside `transactional()`, which nests as a
    SAVEPOINT when the caller already holds a transaction.
    """

    def __init__(
        self,
        db: Session,
        *,
        read_service: Optional[FilmReadService] = None,
        mailer: Optional[MailPort] = None,
    ) -> None:
        self.db = db
        self.read = read_service or FilmReadService(db)
        self.mailer = mailer

    # ------------------------------------------------------------------
    # create
    # ------------------------------------------------------------------
    def create(self, film: DBFilm) -> int:
        """
        Persist a new Film with its Title and CastMembers in one unit and
        return its id. Raises IsanExistsError / TitleExistsError.
        """
        logger.debug("create: film=%r title=%r", film, film.title)

        try:
            with transactional(self.db):
                # the ISAN check and the insert share one transaction
                self._validate_create(film)
                self.db.add(film)
                self.db.flush()
        except IntegrityError as e:
            logger.debug("create: integrity error %s", e.orig)
            title = film.title.title if film.title is not None else None
            raise TitleExistsError(title) from e

        logger.debug("create: id=%s", film.id)
        self._send_mail(film)
        return film.id

    def _validate_create(self, film: DBFilm) -> None:
        try:
            self.read.find({"isan": film.isan})
        except NotFoundError:
            return
        raise IsanExistsError(film.isan)

    def _send_mail(self, film: DBFilm) -> None:
        if self.mailer is None:
            return
        subject = f"New film {film.id}"
        title = film.title.title if film.title is not None else "N/A"
        body = f"The film titled <strong>{title}</strong> has been created"
        try:
            self.mailer.send(subject, body)
        except Exception:
            # best effort: the film is already stored
            logger.exception("create: notification for film %s failed", film.id)

    # ------------------------------------------------------------------
    # update
    # ------------------------------------------------------------------
    def update(self, film_id: int, changes: DBFilm, version: Optional[str]) -> int:
        """
        Apply the scalar fields of `changes` to film `film_id` and return the
        new version.

        `version` is the raw If-Match token ("<digits>" with the quotes).
        A token lower than the stored version is outdated; equal or higher
        is accepted.
        """
        logger.debug("update: id=%s changes=%r version=%s", film_id, changes, version)
        expected = parse_version_token(version)

        try:
            with transactional(self.db):
                current = self.read.find_by_id(film_id)
                if expected < current.version:
                    logger.debug("update: outdated version=%s stored=%s", expected, current.version)
                    raise VersionOutdatedError(expected)

                merge_scalars(current, changes)
                current.version = current.version + 1
                self.db.flush()
        except StaleDataError as e:
            # another writer bumped the row between our read and our UPDATE
            raise VersionOutdatedError(expected) from e

        logger.debug("update: new version=%s", current.version)
        return current.version

    # ------------------------------------------------------------------
    # delete
    # ------------------------------------------------------------------
    def delete(self, film_id: int) -> bool:
        """
        Remove the title, the cast members and the film, in that order, in one
        transaction. Raises NotFoundError for an unknown id.
        """
        logger.debug("delete: id=%s", film_id)
        with transactional(self.db):
            film = self.read.find_by_id(film_id, include_cast=True)
            title_id = film.title.id if film.title is not None else None
            cast_ids = [m.id for m in film.cast_members]

            if title_id is not None:
                self.db.execute(sa_delete(DBTitle).where(DBTitle.id == title_id))
            for member_id in cast_ids:
                self.db.execute(sa_delete(DBCastMember).where(DBCastMember.id == member_id))
            result = self.db.execute(sa_delete(DBFilm).where(DBFilm.id == film_id))

        deleted = (result.rowcount or 0) > 0
        logger.debug("delete: deleted=%s", deleted)
        return deleted


def merge_scalars(target: DBFilm, source: DBFilm) -> DBFilm:
    """
    Copy the updatable scalar columns that were set on `source`; title and
    cast stay untouched. An attribute never assigned keeps its stored value,
    one explicitly set to None is cleared.
    """
    unset = inspect(source).unloaded
    for field in UPDATABLE_FIELDS:
        if field in unset:
            continue
        setattr(target, field, getattr(source, field))
    return target
