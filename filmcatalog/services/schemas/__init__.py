from filmcatalog.services.schemas.film import (
    TitleIn,
    TitleRead,
    CastMemberIn,
    CastMemberRead,
    FilmCreate,
    FilmUpdate,
    FilmRead,
    FilmsPage,
    FilmsEmbedded,
    Link,
)

__all__ = [
    "TitleIn",
    "TitleRead",
    "CastMemberIn",
    "CastMemberRead",
    "FilmCreate",
    "FilmUpdate",
    "FilmRead",
    "FilmsPage",
    "FilmsEmbedded",
    "Link",
]
