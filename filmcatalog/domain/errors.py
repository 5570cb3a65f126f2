# filmcatalog/domain/errors.py
"""
Business-rule rejections raised by the film services.

They are raised where they are detected and travel unchanged up to the
transport layer (REST exception handler, GraphQL error list). ``status_code``
is the HTTP status the REST layer answers with.
"""
from __future__ import annotations

from http import HTTPStatus
from typing import Any, Mapping, Optional


class FilmCatalogError(Exception):
    status_code: HTTPStatus = HTTPStatus.BAD_REQUEST

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(FilmCatalogError):
    status_code = HTTPStatus.NOT_FOUND

    @classmethod
    def for_id(cls, film_id: int) -> "NotFoundError":
        return cls(f"There is no film with id {film_id}.")

    @classmethod
    def for_criteria(cls, criteria: Mapping[str, Any]) -> "NotFoundError":
        return cls(f"No films found for criteria {dict(criteria)!r}.")


class InvalidCriteriaError(FilmCatalogError):
    status_code = HTTPStatus.BAD_REQUEST

    def __init__(self, key: str, reason: str = "unknown search criterion") -> None:
        super().__init__(f"Invalid search criteria: {reason} {key!r}.")
        self.key = key


class IsanExistsError(FilmCatalogError):
    status_code = HTTPStatus.UNPROCESSABLE_ENTITY

    def __init__(self, isan: str) -> None:
        super().__init__(f"The ISAN {isan} already exists.")
        self.isan = isan


class TitleExistsError(FilmCatalogError):
    status_code = HTTPStatus.UNPROCESSABLE_ENTITY

    def __init__(self, title: Optional[str]) -> None:
        super().__init__(f"The title {title!r} already exists.")
        self.title = title


class VersionMissingError(FilmCatalogError):
    status_code = HTTPStatus.PRECONDITION_REQUIRED

    def __init__(self) -> None:
        super().__init__("Header If-Match is missing.")


class VersionInvalidError(FilmCatalogError):
    status_code = HTTPStatus.PRECONDITION_FAILED

    def __init__(self, version: Optional[str]) -> None:
        super().__init__(f"The version {version} is invalid.")
        self.version = version


class VersionOutdatedError(FilmCatalogError):
    status_code = HTTPStatus.PRECONDITION_FAILED

    def __init__(self, version: int) -> None:
        super().__init__(f"The version {version} is outdated.")
        self.version = version
