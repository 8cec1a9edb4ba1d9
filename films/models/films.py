from sqlmodel import SQLModel, Field, Relationship
from sqlalchemy import Column, Enum
from datetime import datetime
from decimal import Decimal
from typing import Optional, List

RATINGS = ("G", "PG", "PG-13", "R", "NC-17")


class FilmActor(SQLModel, table=True):
    __tablename__ = "film_actor"

    film_id: int = Field(foreign_key="film.film_id", primary_key=True)
    actor_id: int = Field(foreign_key="actor.actor_id", primary_key=True)
    last_update: datetime = Field(default_factory=datetime.utcnow)


class Actor(SQLModel, table=True):
    __tablename__ = "actor"

    actor_id: Optional[int] = Field(default=None, primary_key=True)
    first_name: str = Field(max_length=45)
    last_name: str = Field(max_length=45, index=True)
    last_update: datetime = Field(default_factory=datetime.utcnow)


class Film(SQLModel, table=True):
    """Owning side of the film/actor association.

    Actors hold no collection of their own; films for an actor are looked up
    through the ``film_actor`` table.
    """
    __tablename__ = "film"

    film_id: Optional[int] = Field(default=None, primary_key=True)
    title: str = Field(max_length=255, index=True)
    description: Optional[str] = None
    release_year: Optional[int] = None
    language_id: int = Field(default=1)
    rental_duration: int = Field(default=3)
    length: Optional[int] = Field(default=None, index=True)
    rental_rate: Decimal = Field(default=Decimal("4.99"), max_digits=4, decimal_places=2)
    replacement_cost: Decimal = Field(default=Decimal("19.99"), max_digits=5, decimal_places=2)
    rating: Optional[str] = Field(
        default="G",
        sa_column=Column(Enum(*RATINGS, name="mpaa_rating"))
    )
    special_features: Optional[str] = None
    last_update: datetime = Field(default_factory=datetime.utcnow)

    actors: List[Actor] = Relationship(
        link_model=FilmActor,
        sa_relationship_kwargs={"order_by": "Actor.actor_id"}
    )


class FilmSummary(SQLModel):
    film_id: int
    title: str
    length: Optional[int] = None
