from decimal import Decimal, InvalidOperation
from typing import Optional
import logging

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import PlainTextResponse

from films import config
from films.api.formatting import (
    format_film_with_actors,
    format_film_with_length,
    format_film_with_rental_rate,
)
from films.repository.films import (
    FilmRepository,
    StoreError,
    get_film_repository,
    round_rental_rate,
)

logger = logging.getLogger(__name__)

router = APIRouter(default_response_class=PlainTextResponse)


@router.get("/paged",
            summary="Films longer than minLength, one page at a time")
def get_films_paged(
        page: int = Query(0, description="Zero-based page number"),
        min_length: int = Query(0, alias="minLength", description="Minimum length in minutes"),
        repository: FilmRepository = Depends(get_film_repository)
):
    if page < 0:
        logger.warning(f"Rejected negative page {page}")
        return PlainTextResponse("Page must be non-negative", status_code=status.HTTP_400_BAD_REQUEST)
    if page > config.MAX_PAGE:
        logger.warning(f"Rejected page {page} beyond {config.MAX_PAGE}")
        return PlainTextResponse(
            f"Page must not exceed {config.MAX_PAGE}",
            status_code=status.HTTP_400_BAD_REQUEST
        )

    films = repository.find_by_minimum_length_paged(page, min_length)
    logger.info(f"Page {page} of films longer than {min_length} min: {len(films)} entries")
    return "\n".join(format_film_with_length(film) for film in films)


@router.get("/search",
            summary="Films by title prefix, with their actors")
def search_films_by_title_with_actors(
        title_prefix: str = Query("", alias="titlePrefix"),
        min_length: int = Query(0, alias="minLength"),
        repository: FilmRepository = Depends(get_film_repository)
):
    films = repository.find_by_title_prefix_with_actors(title_prefix, min_length)
    logger.info(f"Search for '{title_prefix}' longer than {min_length} min: {len(films)} entries")
    return "\n".join(format_film_with_actors(film) for film in films)


@router.put("/rental-rate",
            summary="Set the rental rate of every film longer than minLength",
            responses={
                400: {"description": "The rate is missing or not positive"}
            })
def update_rental_rate(
        min_length: int = Query(0, alias="minLength"),
        rate: Optional[Decimal] = Query(None),
        repository: FilmRepository = Depends(get_film_repository)
):
    try:
        rejected = rate is None or rate <= 0 or round_rental_rate(rate) <= 0
    except InvalidOperation:
        logger.warning(f"Rejected rental rate {rate}: out of range")
        return PlainTextResponse(
            "Rental rate is out of range",
            status_code=status.HTTP_400_BAD_REQUEST
        )
    if rejected:
        logger.warning(f"Rejected rental rate {rate}")
        return PlainTextResponse(
            "Rental rate must be a positive value",
            status_code=status.HTTP_400_BAD_REQUEST
        )

    try:
        repository.update_rental_rate(min_length, rate)
    except StoreError as e:
        return PlainTextResponse(
            f"Update failed: {e}",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
        )

    films = repository.find_by_minimum_length(min_length)
    return "\n".join(format_film_with_rental_rate(film) for film in films)


@router.get("/{film_id}",
            summary="Get a film title by ID",
            responses={
                404: {"description": "The film was not found"}
            })
def get_film_by_id(film_id: int, repository: FilmRepository = Depends(get_film_repository)):
    film = repository.find_by_id(film_id)
    if not film:
        logger.warning(f"A non-existent film ID was requested {film_id}")
        return PlainTextResponse(
            f"Film not found with ID: {film_id}",
            status_code=status.HTTP_404_NOT_FOUND
        )
    logger.info(f"Film ID requested {film_id}: {film.title}")
    return film.title
