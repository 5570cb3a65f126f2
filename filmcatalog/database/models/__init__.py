# filmcatalog/database/models/__init__.py

from filmcatalog.database.models.film import (
    Base,
    Film,
    Title,
    CastMember,
    UPDATABLE_FIELDS,
)

__all__ = [
    "Base",
    "Film",
    "Title",
    "CastMember",
    "UPDATABLE_FIELDS",
]
