# filmcatalog/services/schemas/film.py
from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from filmcatalog.domain.enums import FilmGenre

ISAN_PATTERN = r"^[^S]+$"
MAX_RATING = 5


# ---------- Title / Cast (nested) ----------
class TitleIn(BaseModel):
    title: str = Field(..., max_length=40, pattern=r"^\w.*")
    subtitle: Optional[str] = Field(None, max_length=40)


class TitleRead(TitleIn):
    model_config = ConfigDict(from_attributes=True)

    # stored titles are not re-validated on the way out
    title: str
    subtitle: Optional[str] = None


class CastMemberIn(BaseModel):
    first_name: str = Field(..., min_length=1, max_length=32)
    last_name: str = Field(..., min_length=1, max_length=32)


class CastMemberRead(CastMemberIn):
    model_config = ConfigDict(from_attributes=True)

    id: int


# ---------- Film ----------
class FilmBase(BaseModel):
    isan: str = Field(..., pattern=ISAN_PATTERN, max_length=32)
    rating: int = Field(0, ge=0, le=MAX_RATING)
    genre: Optional[FilmGenre] = None
    price: Decimal = Field(..., gt=0, max_digits=8, decimal_places=2)
    discount: Optional[Decimal] = Field(None, ge=0, le=1, max_digits=4, decimal_places=3)
    available: bool = False
    release_date: Optional[date] = None
    homepage: Optional[str] = Field(None, max_length=40, pattern=r"^https?://\S+$")
    keywords: List[str] = Field(default_factory=list)

    @field_validator("keywords")
    @classmethod
    def _unique_keywords(cls, v: List[str]) -> List[str]:
        if any("," in k for k in v):
            raise ValueError("keywords must not contain commas")
        if len(set(v)) != len(v):
            raise ValueError("keywords must be unique")
        return v


class FilmCreate(FilmBase):
    title: TitleIn
    cast_members: List[CastMemberIn] = Field(default_factory=list)


class FilmUpdate(FilmBase):
    # title and cast are not changed through an update
    pass


class Link(BaseModel):
    href: str


class FilmRead(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int
    isan: str
    rating: int
    genre: Optional[FilmGenre] = None
    price: Decimal
    discount: Optional[Decimal] = None
    available: bool
    release_date: Optional[date] = None
    homepage: Optional[str] = None
    keywords: List[str] = []
    title: Optional[TitleRead] = None
    cast_members: Optional[List[CastMemberRead]] = None
    links: Dict[str, Link] = Field(default_factory=dict, alias="_links")


class FilmsEmbedded(BaseModel):
    films: List[FilmRead]


class FilmsPage(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    embedded: FilmsEmbedded = Field(..., alias="_embedded")
