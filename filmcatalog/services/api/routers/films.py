# filmcatalog/services/api/routers/films.py
from __future__ import annotations

from http import HTTPStatus
from typing import Optional

from fastapi import APIRouter, Depends, Header, Path, Request, Response
from sqlalchemy.orm import Session

from filmcatalog.common.logging import get_logger
from filmcatalog.common.settings import get_settings
from filmcatalog.domain.errors import VersionMissingError
from filmcatalog.domain.ports.notification import MailPort
from filmcatalog.domain.version import to_version_token
from filmcatalog.services.api.deps import get_mailer, transactional_session
from filmcatalog.services.film.read_service import FilmReadService
from filmcatalog.services.film.write_service import FilmWriteService
from filmcatalog.services.mappers.film import (
    to_orm_from_create, to_orm_from_update, to_read_schema,
)
from filmcatalog.services.schemas.film import (
    FilmCreate, FilmUpdate, FilmRead, FilmsPage, FilmsEmbedded,
)

cfg = get_settings()
router = APIRouter(prefix=f"{cfg.api.prefix}/films", tags=["films"])
logger = get_logger(__name__)


# ---- helpers ----

def _base_uri(request: Request) -> str:
    return f"{str(request.base_url).rstrip('/')}{router.prefix}"


# ---- reads ----

@router.get("/{film_id}", response_model=FilmRead, response_model_by_alias=True)
def get_film(
    request: Request,
    response: Response,
    film_id: int = Path(..., ge=1),
    if_none_match: Optional[str] = Header(None),
    db: Session = Depends(transactional_session),
):
    film = FilmReadService(db).find_by_id(film_id)

    etag = to_version_token(film.version)
    if if_none_match == etag:
        logger.debug("get_film: not modified id=%s", film_id)
        return Response(status_code=HTTPStatus.NOT_MODIFIED, headers={"ETag": etag})

    response.headers["ETag"] = etag
    return to_read_schema(film, base_uri=_base_uri(request))


@router.get("", response_model=FilmsPage, response_model_by_alias=True)
def search_films(
    request: Request,
    db: Session = Depends(transactional_session),
) -> FilmsPage:
    # every query parameter is a search criterion
    criteria = dict(request.query_params)
    logger.debug("search_films: criteria=%s", criteria)
    films = FilmReadService(db).find(criteria)
    base = _base_uri(request)
    return FilmsPage(
        embedded=FilmsEmbedded(films=[to_read_schema(f, base_uri=base, full_links=False) for f in films])
    )


# ---- writes ----

@router.post("", status_code=HTTPStatus.CREATED)
def create_film(
    request: Request,
    payload: FilmCreate,
    db: Session = Depends(transactional_session),
    mailer: Optional[MailPort] = Depends(get_mailer),
) -> Response:
    film_id = FilmWriteService(db, mailer=mailer).create(to_orm_from_create(payload))
    location = f"{_base_uri(request)}/{film_id}"
    logger.debug("create_film: location=%s", location)
    return Response(status_code=HTTPStatus.CREATED, headers={"Location": location})


@router.put("/{film_id}", status_code=HTTPStatus.NO_CONTENT)
def update_film(
    payload: FilmUpdate,
    film_id: int = Path(..., ge=1),
    if_match: Optional[str] = Header(None),
    db: Session = Depends(transactional_session),
) -> Response:
    if if_match is None:
        raise VersionMissingError()
    version = FilmWriteService(db).update(film_id, to_orm_from_update(payload), if_match)
    return Response(status_code=HTTPStatus.NO_CONTENT, headers={"ETag": to_version_token(version)})


@router.delete("/{film_id}", status_code=HTTPStatus.NO_CONTENT)
def delete_film(
    film_id: int = Path(..., ge=1),
    db: Session = Depends(transactional_session),
) -> Response:
    FilmWriteService(db).delete(film_id)
    return Response(status_code=HTTPStatus.NO_CONTENT)
