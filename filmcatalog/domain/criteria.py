# filmcatalog/domain/criteria.py
"""
Typed search criteria for films.

A caller hands in a loose mapping (query string, GraphQL args) such as
``{"title": "a", "rating": "5", "javascript": "true"}``. ``parse_criteria``
turns it into an ordered list of filters drawn from a closed set:

    TitleContains    case-insensitive substring of Title.title
    KeywordFlag      the serialized keyword list contains a fixed token
    AttributeEquals  equality on a scalar Film column

Order is fixed: title first, then the keyword flags in declaration order, then
every remaining attribute in the order the mapping yields it. Any key outside
the allow-list raises InvalidCriteriaError for the whole request.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from filmcatalog.domain.enums import FilmGenre
from filmcatalog.domain.errors import InvalidCriteriaError

TITLE_KEY = "title"

# flag name -> token looked up in the keyword list
KEYWORD_FLAGS: Dict[str, str] = {
    "javascript": "JAVASCRIPT",
    "typescript": "TYPESCRIPT",
}


@dataclass(frozen=True)
class TitleContains:
    text: str


@dataclass(frozen=True)
class KeywordFlag:
    token: str


@dataclass(frozen=True)
class AttributeEquals:
    attribute: str
    value: Any


FilmFilter = Union[TitleContains, KeywordFlag, AttributeEquals]


def _to_bool(v: Any) -> bool:
    if isinstance(v, bool):
        return v
    s = str(v).strip().lower()
    if s in {"1", "true", "yes", "y", "on"}:
        return True
    if s in {"0", "false", "no", "n", "off"}:
        return False
    raise ValueError(f"not a boolean: {v!r}")


def _to_date(v: Any) -> date:
    if isinstance(v, date):
        return v
    return date.fromisoformat(str(v))


def _to_decimal(v: Any) -> Decimal:
    try:
        return Decimal(str(v))
    except InvalidOperation as e:
        raise ValueError(f"not a number: {v!r}") from e


# Scalar Film attributes a caller may filter on, with the coercion applied to
# string input coming from query strings.
FILM_ATTRIBUTES: Dict[str, Callable[[Any], Any]] = {
    "isan": str,
    "rating": int,
    "genre": FilmGenre,
    "price": _to_decimal,
    "discount": _to_decimal,
    "available": _to_bool,
    "release_date": _to_date,
    "homepage": str,
}


def is_known_key(key: str) -> bool:
    return key == TITLE_KEY or key in KEYWORD_FLAGS or key in FILM_ATTRIBUTES


def check_keys(criteria: Mapping[str, Any]) -> None:
    for key in criteria:
        if not is_known_key(key):
            raise InvalidCriteriaError(key)


def _flag_set(value: Any) -> bool:
    # only the literal "true" switches a flag on
    return value is True or value == "true"


def parse_criteria(criteria: Optional[Mapping[str, Any]]) -> List[FilmFilter]:
    if not criteria:
        return []
    check_keys(criteria)

    filters: List[FilmFilter] = []

    title = criteria.get(TITLE_KEY)
    if isinstance(title, str):
        filters.append(TitleContains(text=title))

    for flag, token in KEYWORD_FLAGS.items():
        if _flag_set(criteria.get(flag)):
            filters.append(KeywordFlag(token=token))

    for key, raw in criteria.items():
        if key == TITLE_KEY or key in KEYWORD_FLAGS:
            continue
        try:
            value = FILM_ATTRIBUTES[key](raw)
        except (TypeError, ValueError) as e:
            raise InvalidCriteriaError(key, reason=f"bad value {raw!r} for") from e
        filters.append(AttributeEquals(attribute=key, value=value))

    return filters
