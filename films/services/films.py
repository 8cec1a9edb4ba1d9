from collections import defaultdict
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, List, Optional, Union
import logging

from fastapi import Depends
from pydantic import BaseModel

from films import config
from films.models import FilmCategory, FilmDTO, FilmSummary
from films.repository.films import (
    FilmRepository,
    StoreError,
    get_film_repository,
    round_rental_rate,
)

logger = logging.getLogger(__name__)

MAX_RENTAL_RATE = Decimal(config.MAX_RENTAL_RATE)
UPDATED_FILMS_LIMIT = 100
STATISTICS_LIMIT = 1000


class PaginatedResult(BaseModel):
    items: List[FilmSummary]
    current_page: int
    page_size: int
    has_more: bool


class SearchResult(BaseModel):
    films: List[FilmDTO]
    total_count: int
    by_category: Dict[FilmCategory, List[FilmDTO]]


class FilmStatistics(BaseModel):
    total_films: int
    average_rental_rate: Decimal
    max_rental_rate: Decimal
    min_length: int
    max_length: int


class RentalRateUpdateSuccess(BaseModel):
    films_updated: int
    new_rate: Decimal
    films: List[FilmDTO]


class RentalRateUpdateFailed(BaseModel):
    reason: str


RentalRateUpdateResult = Union[RentalRateUpdateSuccess, RentalRateUpdateFailed]


def validate_rental_rate(rate: Optional[Decimal]) -> Optional[str]:
    """Return the reason a rental rate is unacceptable, or None if it is valid."""
    if rate is None:
        return "Rental rate cannot be null"
    if rate <= 0:
        return "Rental rate must be positive"
    if rate > MAX_RENTAL_RATE:
        return "Rental rate too high"
    # the stored value is rounded to cents
    if round_rental_rate(rate) <= 0:
        return "Rental rate must be positive"
    return None


class FilmService:
    """Business logic on top of the film queries: DTO mapping, rate updates
    and aggregate views."""

    def __init__(self, repository: FilmRepository):
        self._repository = repository

    def find_film_by_id(self, film_id: int) -> Optional[FilmDTO]:
        film = self._repository.find_by_id(film_id)
        if film is None:
            return None
        return FilmDTO.from_entity(film)

    def get_films_paginated(self, page: int, min_length: int, page_size: int) -> PaginatedResult:
        items = self._repository.find_by_minimum_length_paged(page, min_length, page_size)
        return PaginatedResult(
            items=items,
            current_page=page,
            page_size=page_size,
            has_more=len(items) == page_size,
        )

    def search_films(self, title_prefix: str, min_length: int) -> SearchResult:
        films = [
            FilmDTO.from_entity(film)
            for film in self._repository.find_by_title_prefix_with_actors(title_prefix, min_length)
        ]
        by_category = defaultdict(list)
        for film in films:
            by_category[film.category].append(film)
        return SearchResult(films=films, total_count=len(films), by_category=dict(by_category))

    def update_rental_rates(self, min_length: int, rate: Optional[Decimal]) -> RentalRateUpdateResult:
        reason = validate_rental_rate(rate)
        if reason is not None:
            logger.warning(f"Rejected rental rate {rate}: {reason}")
            return RentalRateUpdateFailed(reason=reason)

        try:
            updated = self._repository.update_rental_rate(min_length, rate)
        except StoreError as e:
            return RentalRateUpdateFailed(reason=f"Update failed: {e}")

        films = [
            FilmDTO.summary_from_entity(film)
            for film in self._repository.find_by_minimum_length(min_length, limit=UPDATED_FILMS_LIMIT)
        ]
        return RentalRateUpdateSuccess(
            films_updated=updated,
            new_rate=round_rental_rate(rate),
            films=films,
        )

    def get_statistics(self, min_length: int) -> FilmStatistics:
        films = self._repository.find_by_minimum_length(min_length, limit=STATISTICS_LIMIT)
        if not films:
            return FilmStatistics(
                total_films=0,
                average_rental_rate=Decimal("0"),
                max_rental_rate=Decimal("0"),
                min_length=0,
                max_length=0,
            )

        rates = sorted(film.rental_rate for film in films if film.rental_rate is not None)
        lengths = [film.length for film in films]
        average = Decimal("0")
        if rates:
            average = (sum(rates, Decimal("0")) / len(rates)).quantize(
                Decimal("0.01"), rounding=ROUND_HALF_UP
            )
        return FilmStatistics(
            total_films=len(films),
            average_rental_rate=average,
            max_rental_rate=rates[-1] if rates else Decimal("0"),
            min_length=min(lengths),
            max_length=max(lengths),
        )


def get_film_service(repository: FilmRepository = Depends(get_film_repository)) -> FilmService:
    return FilmService(repository)
