"""
Response models for the JSON API.

DTOs are built from table models inside the request session, so lazy
relationships are resolved before the session closes.
"""

from decimal import Decimal
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, computed_field, field_validator

from .films import Actor, Film


class FilmCategory(str, Enum):
    UNKNOWN = "UNKNOWN"
    SHORT = "SHORT"
    FEATURE = "FEATURE"
    LONG = "LONG"
    EPIC = "EPIC"

    @property
    def display_name(self) -> str:
        return _CATEGORY_NAMES[self]


_CATEGORY_NAMES = {
    FilmCategory.UNKNOWN: "Unknown Length",
    FilmCategory.SHORT: "Short Film",
    FilmCategory.FEATURE: "Feature Film",
    FilmCategory.LONG: "Long Film",
    FilmCategory.EPIC: "Epic Film",
}


def categorize_length(length: Optional[int]) -> FilmCategory:
    """Bucket a running time in minutes into a film category."""
    if length is None:
        return FilmCategory.UNKNOWN
    if length < 40:
        return FilmCategory.SHORT
    if length < 120:
        return FilmCategory.FEATURE
    if length < 180:
        return FilmCategory.LONG
    return FilmCategory.EPIC


class ActorDTO(BaseModel):
    actor_id: Optional[int] = None
    first_name: str
    last_name: str

    @field_validator("first_name", "last_name")
    @classmethod
    def not_blank(cls, value: str, info) -> str:
        if not value or not value.strip():
            label = info.field_name.replace("_", " ").capitalize()
            raise ValueError(f"{label} cannot be blank")
        return value

    @classmethod
    def from_entity(cls, actor: Actor) -> "ActorDTO":
        return cls(
            actor_id=actor.actor_id,
            first_name=actor.first_name,
            last_name=actor.last_name,
        )

    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def initials(self) -> str:
        return f"{self.first_name[0]}.{self.last_name[0]}."


class FilmDTO(BaseModel):
    film_id: Optional[int] = None
    title: str
    description: Optional[str] = None
    release_year: Optional[int] = None
    length: Optional[int] = None
    rental_rate: Optional[Decimal] = None
    replacement_cost: Optional[Decimal] = None
    rating: Optional[str] = None
    actors: List[ActorDTO] = []

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("Title cannot be blank")
        return value

    @field_validator("actors", mode="before")
    @classmethod
    def actors_default(cls, value):
        return [] if value is None else value

    @classmethod
    def from_entity(cls, film: Film) -> "FilmDTO":
        return cls(
            **cls._entity_fields(film),
            actors=[ActorDTO.from_entity(actor) for actor in film.actors or []],
        )

    @classmethod
    def summary_from_entity(cls, film: Film) -> "FilmDTO":
        return cls(**cls._entity_fields(film))

    @staticmethod
    def _entity_fields(film: Film) -> dict:
        return {
            "film_id": film.film_id,
            "title": film.title,
            "description": film.description,
            "release_year": film.release_year,
            "length": film.length,
            "rental_rate": film.rental_rate,
            "replacement_cost": film.replacement_cost,
            "rating": film.rating,
        }

    @computed_field
    @property
    def category(self) -> FilmCategory:
        return categorize_length(self.length)

    def formatted_display(self) -> str:
        """One-line description whose shape depends on the number of actors."""
        if not self.actors:
            rate = self.rental_rate if self.rental_rate is not None else Decimal("0")
            return f"{self.title} ({self.length} min) - ${rate:.2f}"
        if len(self.actors) == 1:
            return f"{self.title} ({self.length} min) starring {self.actors[0].full_name()}"
        return f"{self.title} ({self.length} min) with {len(self.actors)} actors"

    def calculate_rental_cost(self, days: int) -> Decimal:
        if self.rental_rate is None:
            return Decimal("0")
        return self.rental_rate * days

    def is_feature_length(self) -> bool:
        return self.length is not None and self.length >= 40
