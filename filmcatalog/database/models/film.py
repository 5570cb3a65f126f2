# filmcatalog/database/models/film.py
from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional, List

from sqlalchemy import (
    Boolean, Date, Enum as SAEnum, ForeignKey, Integer, Numeric, String,
    CheckConstraint, Index, text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from filmcatalog.database.core.main import Base
from filmcatalog.database.core.service_object import ServiceObject
from filmcatalog.database.core.types import KeywordList
from filmcatalog.domain.enums import FilmGenre

# Scalar columns a write may change. Title, cast, id, version and the
# timestamps are never copied from caller input.
UPDATABLE_FIELDS = (
    "isan",
    "rating",
    "genre",
    "price",
    "discount",
    "available",
    "release_date",
    "homepage",
    "keywords",
)


class Film(ServiceObject, Base):
    """
    Aggregate root. Owns exactly one Title and any number of CastMembers;
    the children only carry a film_id foreign key.

    `version` is SQLAlchemy's version counter: every UPDATE is issued with
    `WHERE version = <loaded value>` and the service bumps it explicitly.
    """
    __tablename__ = "film"
    __table_args__ = (
        CheckConstraint("rating BETWEEN 0 AND 5", name="rating_0_5"),
        CheckConstraint("price > 0", name="price_positive"),
        CheckConstraint("discount BETWEEN 0 AND 1", name="discount_0_1"),
        Index("ix_film_isan", "isan"),
    )

    version: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default=text("0"))

    isan: Mapped[str] = mapped_column(String(32), nullable=False)
    rating: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    genre: Mapped[Optional[FilmGenre]] = mapped_column(
        SAEnum(
            FilmGenre,
            name="film_genre",
            values_callable=lambda e: [m.value for m in e],
            length=16,
        )
    )
    price: Mapped[Decimal] = mapped_column(Numeric(8, 2), nullable=False)
    discount: Mapped[Optional[Decimal]] = mapped_column(Numeric(4, 3))
    available: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    release_date: Mapped[Optional[date]] = mapped_column(Date)
    homepage: Mapped[Optional[str]] = mapped_column(String(40))
    keywords: Mapped[List[str]] = mapped_column(KeywordList(256), nullable=False, default=lambda: [])

    title: Mapped[Optional["Title"]] = relationship(
        uselist=False, cascade="save-update, merge", lazy="select"
    )
    cast_members: Mapped[List["CastMember"]] = relationship(
        cascade="save-update, merge", lazy="select", order_by="CastMember.id"
    )

    __mapper_args__ = {
        "version_id_col": version,
        "version_id_generator": False,
    }

    def __repr__(self) -> str:
        return f"<Film id={self.id} version={self.version} isan={self.isan!r}>"


class Title(ServiceObject, Base):
    __tablename__ = "title"

    title: Mapped[str] = mapped_column(String(40), nullable=False, unique=True)
    subtitle: Mapped[Optional[str]] = mapped_column(String(40))
    film_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("film.id"), nullable=False, unique=True
    )

    def __repr__(self) -> str:
        return f"<Title id={self.id} title={self.title!r}>"


class CastMember(ServiceObject, Base):
    __tablename__ = "cast_member"
    __table_args__ = (Index("ix_cast_member_film_id", "film_id"),)

    first_name: Mapped[str] = mapped_column(String(32), nullable=False)
    last_name: Mapped[str] = mapped_column(String(32), nullable=False)
    film_id: Mapped[int] = mapped_column(Integer, ForeignKey("film.id"), nullable=False)

    def __repr__(self) -> str:
        return f"<CastMember id={self.id} name={self.first_name!r} {self.last_name!r}>"
