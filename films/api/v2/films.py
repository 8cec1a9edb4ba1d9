from decimal import Decimal
from typing import Any, List, Optional
import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel

from films import config
from films.api.formatting import format_film
from films.models import FilmDTO
from films.repository.films import FilmRepository, get_film_repository
from films.services.films import (
    FilmService,
    FilmStatistics,
    PaginatedResult,
    RentalRateUpdateFailed,
    SearchResult,
    get_film_service,
)

logger = logging.getLogger(__name__)

router = APIRouter()
actors_router = APIRouter()


class ErrorResponse(BaseModel):
    message: str
    details: Any = None


class UpdateSuccessResponse(BaseModel):
    message: str
    films_updated: int
    new_rate: Decimal
    films: List[FilmDTO]


def _error(status_code: int, message: str, details: Any = None) -> HTTPException:
    return HTTPException(
        status_code=status_code,
        detail=ErrorResponse(message=message, details=details).model_dump(mode="json")
    )


@router.get("",
            response_model=PaginatedResult,
            summary="Films longer than minLength, paginated")
def get_films_paginated(
        page: int = Query(0),
        min_length: int = Query(0, alias="minLength"),
        page_size: int = Query(config.DEFAULT_PAGE_SIZE, alias="pageSize", ge=1, le=100),
        film_service: FilmService = Depends(get_film_service)
):
    if page < 0:
        logger.warning(f"Rejected negative page {page}")
        raise _error(status.HTTP_400_BAD_REQUEST, "Page must be non-negative", page)
    if page > config.MAX_PAGE:
        logger.warning(f"Rejected page {page} beyond {config.MAX_PAGE}")
        raise _error(status.HTTP_400_BAD_REQUEST, f"Page must not exceed {config.MAX_PAGE}", page)
    return film_service.get_films_paginated(page, min_length, page_size)


@router.get("/search",
            response_model=SearchResult,
            summary="Films by title prefix, grouped by length category")
def search_films(
        title_prefix: str = Query("", alias="titlePrefix"),
        min_length: int = Query(0, alias="minLength"),
        film_service: FilmService = Depends(get_film_service)
):
    return film_service.search_films(title_prefix, min_length)


@router.put("/rental-rate",
            response_model=UpdateSuccessResponse,
            summary="Set the rental rate of every film longer than minLength",
            responses={
                400: {"description": "The rate was rejected or the update failed"}
            })
def update_rental_rate(
        min_length: int = Query(0, alias="minLength"),
        rate: Optional[Decimal] = Query(None),
        film_service: FilmService = Depends(get_film_service)
):
    result = film_service.update_rental_rates(min_length, rate)
    if isinstance(result, RentalRateUpdateFailed):
        raise _error(status.HTTP_400_BAD_REQUEST, result.reason, str(rate) if rate is not None else None)

    return UpdateSuccessResponse(
        message=f"Successfully updated {result.films_updated} films",
        films_updated=result.films_updated,
        new_rate=result.new_rate,
        films=result.films,
    )


@router.get("/statistics",
            response_model=FilmStatistics,
            summary="Rental rate and length statistics")
def get_statistics(
        min_length: int = Query(0, alias="minLength"),
        film_service: FilmService = Depends(get_film_service)
):
    return film_service.get_statistics(min_length)


@router.get("/{film_id}",
            response_model=FilmDTO,
            summary="Get a film with its actors",
            responses={
                404: {"description": "The film was not found"}
            })
def get_film_by_id(film_id: int, film_service: FilmService = Depends(get_film_service)):
    film = film_service.find_film_by_id(film_id)
    if film is None:
        logger.warning(f"A non-existent film ID was requested {film_id}")
        raise _error(status.HTTP_404_NOT_FOUND, "Film not found", film_id)
    return film


@router.get("/{film_id}/formatted",
            response_class=PlainTextResponse,
            summary="Get a film rendered as text")
def get_film_formatted(
        film_id: int,
        fmt: str = Query("standard", alias="format"),
        film_service: FilmService = Depends(get_film_service)
):
    film = film_service.find_film_by_id(film_id)
    if film is None:
        return PlainTextResponse("Film not found", status_code=status.HTTP_404_NOT_FOUND)
    return format_film(film, fmt)


@actors_router.get("/{actor_id}/films",
                   response_model=List[FilmDTO],
                   summary="Films an actor appears in",
                   responses={
                       404: {"description": "The actor was not found"}
                   })
def get_actor_films(actor_id: int, repository: FilmRepository = Depends(get_film_repository)):
    if repository.get_actor(actor_id) is None:
        raise _error(status.HTTP_404_NOT_FOUND, "Actor not found", actor_id)
    films = repository.find_by_actor(actor_id)
    logger.info(f"Films requested for actor ID {actor_id}: {len(films)} entries")
    return [FilmDTO.summary_from_entity(film) for film in films]
