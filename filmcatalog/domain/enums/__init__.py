from filmcatalog.domain.enums.film_genre import FilmGenre

__all__ = [
    "FilmGenre",
]
