"""
Film queries against the Sakila catalog.

Every read is a single SELECT built from column expressions; the rental rate
update is a single UPDATE statement.
"""

from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import List, Optional
import logging

from fastapi import Depends
from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import selectinload
from sqlmodel import Session, select

from films import config
from films.database.db import get_session
from films.models import Actor, Film, FilmActor, FilmSummary

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


class StoreError(Exception):
    """The datastore rejected a write."""


def round_rental_rate(rate: Decimal) -> Decimal:
    """Round a rate to cents. Raises decimal.InvalidOperation when the rate
    has too many digits to be represented."""
    return Decimal(rate).quantize(CENT, rounding=ROUND_HALF_UP)


class FilmRepository:

    def __init__(self, session: Session):
        self._session = session

    def find_by_id(self, film_id: int) -> Optional[Film]:
        return self._session.get(Film, film_id)

    def _minimum_length_query(self, min_length: int):
        return (
            select(Film)
            .where(Film.length > min_length)
            .order_by(Film.length.asc(), Film.film_id.asc())
        )

    def find_by_minimum_length(self, min_length: int, limit: Optional[int] = None) -> List[Film]:
        """Films longer than ``min_length``, shortest first.

        The result is unbounded unless ``limit`` is given.
        """
        query = self._minimum_length_query(min_length)
        if limit is not None:
            query = query.limit(limit)
        return list(self._session.exec(query).all())

    def find_by_minimum_length_paged(
            self,
            page: int,
            min_length: int,
            page_size: int = config.DEFAULT_PAGE_SIZE
    ) -> List[FilmSummary]:
        query = (
            select(Film.film_id, Film.title, Film.length)
            .where(Film.length > min_length)
            .order_by(Film.length.asc(), Film.film_id.asc())
            .offset(page * page_size)
            .limit(page_size)
        )
        rows = self._session.exec(query).all()
        return [
            FilmSummary(film_id=film_id, title=title, length=length)
            for film_id, title, length in rows
        ]

    def find_by_title_prefix_with_actors(self, prefix: str, min_length: int) -> List[Film]:
        query = (
            select(Film)
            .options(selectinload(Film.actors))
            .where(Film.length > min_length)
            .order_by(Film.length.desc(), Film.film_id.asc())
        )
        if prefix:
            query = query.where(Film.title.startswith(prefix, autoescape=True))
        films = list(self._session.exec(query).all())
        # LIKE is case-insensitive on some backends
        return [film for film in films if film.title.startswith(prefix)]

    def find_by_actor(self, actor_id: int) -> List[Film]:
        query = (
            select(Film)
            .join(FilmActor, FilmActor.film_id == Film.film_id)
            .where(FilmActor.actor_id == actor_id)
            .order_by(Film.title.asc())
        )
        return list(self._session.exec(query).all())

    def get_actor(self, actor_id: int) -> Optional[Actor]:
        return self._session.get(Actor, actor_id)

    def update_rental_rate(self, min_length: int, new_rate: Decimal) -> int:
        """Set the rental rate of every film longer than ``min_length``.

        Returns the number of updated rows. Raises StoreError after rolling
        back if the statement fails.
        """
        try:
            rate = round_rental_rate(new_rate)
            statement = (
                update(Film)
                .where(Film.length > min_length)
                .values(rental_rate=rate, last_update=datetime.utcnow())
                .execution_options(synchronize_session=False)
            )
            updated = self._session.execute(statement).rowcount
            self._session.commit()
        except (SQLAlchemyError, InvalidOperation) as e:
            self._session.rollback()
            logger.error(f"Rental rate update failed for length > {min_length}: {str(e)}")
            raise StoreError(str(e)) from e

        logger.info(f"Rental rate set to {rate} for {updated} films longer than {min_length} min")
        return updated


def get_film_repository(session: Session = Depends(get_session)) -> FilmRepository:
    return FilmRepository(session)
