"""
Plain-text renderings of films.
"""

from films.models import Actor, Film, FilmDTO


def format_film_with_length(film) -> str:
    return f"{film.title} ({film.length} min)"


def format_actor_name(actor: Actor) -> str:
    return f"{actor.first_name} {actor.last_name}"


def format_film_with_actors(film: Film) -> str:
    actor_names = ", ".join(format_actor_name(actor) for actor in film.actors)
    return f"{format_film_with_length(film)} - Actors: {actor_names}"


def format_film_with_rental_rate(film: Film) -> str:
    return f"{format_film_with_length(film)} - ${film.rental_rate:.2f}"


def format_film(film: FilmDTO, fmt: str) -> str:
    """Render a film DTO as ``short``, ``detailed``, ``json`` or the
    default actor-dependent display."""
    fmt = fmt.lower()
    if fmt == "short":
        return format_film_with_length(film)
    if fmt == "detailed":
        rate = film.rental_rate if film.rental_rate is not None else 0
        return (
            f"Title: {film.title}\n"
            f"Length: {film.length} minutes\n"
            f"Rental Rate: ${rate:.2f}\n"
            f"Category: {film.category.display_name}\n"
            f"Actors: {len(film.actors)}\n"
        )
    if fmt == "json":
        return film.model_dump_json()
    return film.formatted_display()
