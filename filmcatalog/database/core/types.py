# filmcatalog/database/core/types.py
from __future__ import annotations

from typing import Iterable, List, Optional

from sqlalchemy import String
from sqlalchemy.types import TypeDecorator

from filmcatalog.common.strings.splitters import csv_to_list, list_to_csv


class KeywordList(TypeDecorator):
    """
    A set of keywords stored as one comma-separated string, e.g.
    ["JAVASCRIPT", "TYPESCRIPT"] <-> "JAVASCRIPT,TYPESCRIPT".

    The serialized form is what containment searches run against.
    """

    impl = String
    cache_ok = True

    def process_bind_param(self, value: Optional[Iterable[str]], dialect) -> str:
        return list_to_csv(value)

    def process_result_value(self, value: Optional[str], dialect) -> List[str]:
        return csv_to_list(value)

    def coerce_compared_value(self, op, value):
        # LIKE patterns compare against the raw string, not a list
        if isinstance(value, str):
            return String()
        return self
