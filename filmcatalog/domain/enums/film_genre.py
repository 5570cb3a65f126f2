from __future__ import annotations
from enum import StrEnum


class FilmGenre(StrEnum):
    FANTASY = "FANTASY"
    HORROR = "HORROR"
    ACTION = "ACTION"
    SCIENCE_FICTION = "SCIENCE-FICTION"
