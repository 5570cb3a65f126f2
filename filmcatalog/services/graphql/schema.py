# filmcatalog/services/graphql/schema.py
from __future__ import annotations

from datetime import date
from typing import List, Optional

import strawberry
from fastapi import Depends
from sqlalchemy.orm import Session
from strawberry.fastapi import GraphQLRouter
from strawberry.types import Info

from filmcatalog.common.logging import get_logger
from filmcatalog.common.settings import get_settings
from filmcatalog.database.models import Film as DBFilm
from filmcatalog.domain.ports.notification import MailPort
from filmcatalog.domain.version import to_version_token
from filmcatalog.services.api.deps import get_mailer, transactional_session
from filmcatalog.services.film.read_service import FilmReadService
from filmcatalog.services.film.write_service import FilmWriteService
from filmcatalog.services.mappers.film import to_orm_from_create, to_orm_from_update
from filmcatalog.services.schemas.film import FilmCreate, FilmUpdate

logger = get_logger(__name__)


# ---------- output types ----------

@strawberry.type
class TitleType:
    title: str
    subtitle: Optional[str] = None


@strawberry.type
class CastMemberType:
    id: int
    first_name: str
    last_name: str


@strawberry.type
class FilmType:
    id: int
    version: int
    isan: str
    rating: int
    price: float
    available: bool
    genre: Optional[str] = None
    discount: Optional[float] = None
    release_date: Optional[date] = None
    homepage: Optional[str] = None
    keywords: List[str] = strawberry.field(default_factory=list)
    title: Optional[TitleType] = None
    cast_members: List[CastMemberType] = strawberry.field(default_factory=list)

    @strawberry.field
    def discount_label(self, short: bool = True) -> str:
        """Discount as a percentage, e.g. "12.30 %"."""
        pct = (self.discount or 0.0) * 100
        return f"{pct:.2f} {'%' if short else 'percent'}"


@strawberry.type
class CreatePayload:
    id: int


@strawberry.type
class UpdatePayload:
    version: int


# ---------- input types ----------

@strawberry.input
class TitleInput:
    title: str
    subtitle: Optional[str] = None


@strawberry.input
class CastMemberInput:
    first_name: str
    last_name: str


@strawberry.input
class FilmInput:
    isan: str
    price: float
    title: TitleInput
    rating: int = 0
    genre: Optional[str] = None
    discount: Optional[float] = None
    available: bool = False
    release_date: Optional[date] = None
    homepage: Optional[str] = None
    keywords: List[str] = strawberry.field(default_factory=list)
    cast_members: List[CastMemberInput] = strawberry.field(default_factory=list)


@strawberry.input
class FilmUpdateInput:
    id: strawberry.ID
    version: int
    isan: str
    price: float
    rating: int = 0
    genre: Optional[str] = None
    discount: Optional[float] = None
    available: bool = False
    release_date: Optional[date] = None
    homepage: Optional[str] = None
    keywords: List[str] = strawberry.field(default_factory=list)


# ---------- mapping ----------

def to_film_type(row: DBFilm, *, include_cast: bool = False) -> FilmType:
    return FilmType(
        id=row.id,
        version=row.version,
        isan=row.isan,
        rating=row.rating,
        genre=row.genre.value if row.genre is not None else None,
        price=float(row.price),
        discount=float(row.discount) if row.discount is not None else None,
        available=row.available,
        release_date=row.release_date,
        homepage=row.homepage,
        keywords=list(row.keywords or []),
        title=TitleType(title=row.title.title, subtitle=row.title.subtitle) if row.title is not None else None,
        cast_members=(
            [CastMemberType(id=m.id, first_name=m.first_name, last_name=m.last_name) for m in row.cast_members]
            if include_cast else []
        ),
    )


def _scalars(i: FilmInput | FilmUpdateInput) -> dict:
    return dict(
        isan=i.isan,
        rating=i.rating,
        genre=i.genre,
        price=str(i.price),
        discount=str(i.discount) if i.discount is not None else None,
        available=i.available,
        release_date=i.release_date,
        homepage=i.homepage,
        keywords=list(i.keywords),
    )


def _db(info: Info) -> Session:
    return info.context["db"]


# ---------- resolvers ----------

@strawberry.type
class Query:
    @strawberry.field
    def film(self, info: Info, id: strawberry.ID, with_cast: bool = False) -> FilmType:
        logger.debug("film: id=%s", id)
        row = FilmReadService(_db(info)).find_by_id(int(id), include_cast=with_cast)
        return to_film_type(row, include_cast=with_cast)

    @strawberry.field
    def films(self, info: Info, title: Optional[str] = None) -> List[FilmType]:
        criteria = {} if title is None else {"title": title}
        logger.debug("films: criteria=%s", criteria)
        return [to_film_type(r) for r in FilmReadService(_db(info)).find(criteria)]


@strawberry.type
class Mutation:
    @strawberry.mutation
    def create(self, info: Info, input: FilmInput) -> CreatePayload:
        payload = FilmCreate(
            **_scalars(input),
            title={"title": input.title.title, "subtitle": input.title.subtitle},
            cast_members=[{"first_name": m.first_name, "last_name": m.last_name} for m in input.cast_members],
        )
        service = FilmWriteService(_db(info), mailer=info.context.get("mailer"))
        film_id = service.create(to_orm_from_create(payload))
        logger.debug("create: id=%s", film_id)
        return CreatePayload(id=film_id)

    @strawberry.mutation
    def update(self, info: Info, input: FilmUpdateInput) -> UpdatePayload:
        payload = FilmUpdate(**_scalars(input))
        version = FilmWriteService(_db(info)).update(
            int(input.id), to_orm_from_update(payload), to_version_token(input.version)
        )
        logger.debug("update: version=%s", version)
        return UpdatePayload(version=version)

    @strawberry.mutation
    def delete(self, info: Info, id: strawberry.ID) -> bool:
        result = FilmWriteService(_db(info)).delete(int(id))
        logger.debug("delete: result=%s", result)
        return result


schema = strawberry.Schema(query=Query, mutation=Mutation)


def get_context(
    db: Session = Depends(transactional_session),
    mailer: Optional[MailPort] = Depends(get_mailer),
) -> dict:
    return {"db": db, "mailer": mailer}


def create_graphql_router() -> GraphQLRouter:
    cfg = get_settings()
    return GraphQLRouter(
        schema,
        context_getter=get_context,
        graphql_ide="graphiql" if cfg.graphql.ide else None,
    )
