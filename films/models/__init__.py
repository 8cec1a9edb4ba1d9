from .films import Film, Actor, FilmActor, FilmSummary, RATINGS
from .dto import ActorDTO, FilmDTO, FilmCategory, categorize_length

__all__ = [
    "Film",
    "Actor",
    "FilmActor",
    "FilmSummary",
    "RATINGS",
    "ActorDTO",
    "FilmDTO",
    "FilmCategory",
    "categorize_length",
]
