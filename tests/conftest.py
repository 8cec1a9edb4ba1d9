"""Fixtures: an in-memory Sakila catalog and a client bound to it."""
from decimal import Decimal

from fastapi.testclient import TestClient
from sqlmodel import SQLModel, Session
import pytest

from films.database.db import build_engine, create_db_and_tables, get_session
from films.main import app
from films.models import Actor, Film

ACTORS = [
    {"actor_id": 1, "first_name": "PENELOPE", "last_name": "GUINESS"},
    {"actor_id": 2, "first_name": "NICK", "last_name": "WAHLBERG"},
    {"actor_id": 3, "first_name": "ED", "last_name": "CHASE"},
    {"actor_id": 4, "first_name": "JENNIFER", "last_name": "DAVIS"},
]

# film_id, title, length, rental_rate, rating, actor ids
FILMS = [
    (1, "ACADEMY DINOSAUR", 86, "0.99", "PG", [1, 2]),
    (2, "ACE GOLDFINGER", 48, "4.99", "G", [3]),
    (3, "ADAPTATION HOLES", 50, "2.99", "NC-17", []),
    (4, "AFFAIR PREJUDICE", 117, "2.99", "G", [1, 3]),
    (5, "BEAR GRACELAND", 160, "2.99", "R", [2]),
    (6, "CHICAGO NORTH", 185, "4.99", "PG-13", [1]),
    (7, "ZORRO ARK", 50, "4.99", "NC-17", []),
    (8, "SHORT CUT", 30, "0.99", "G", []),
    (9, "academy lowercase", 100, "0.99", "PG", []),
]

FILLER_COUNT = 20


def all_films():
    films = [
        {"film_id": film_id, "title": title, "length": length}
        for film_id, title, length, _, _, _ in FILMS
    ]
    films += [
        {"film_id": 100 + i, "title": f"FILLER {i:02d}", "length": 61 + i}
        for i in range(FILLER_COUNT)
    ]
    return films


@pytest.fixture(name="engine")
def engine_fixture():
    engine = build_engine("sqlite://")
    create_db_and_tables(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture(name="session")
def session_fixture(engine):
    with Session(engine) as session:
        actors = {data["actor_id"]: Actor(**data) for data in ACTORS}
        session.add_all(actors.values())
        for film_id, title, length, rate, rating, actor_ids in FILMS:
            session.add(Film(
                film_id=film_id,
                title=title,
                description=f"A story called {title.title()}",
                release_year=2006,
                length=length,
                rental_rate=Decimal(rate),
                replacement_cost=Decimal("19.99"),
                rating=rating,
                actors=[actors[actor_id] for actor_id in actor_ids],
            ))
        for i in range(FILLER_COUNT):
            session.add(Film(
                film_id=100 + i,
                title=f"FILLER {i:02d}",
                length=61 + i,
                rental_rate=Decimal("1.99"),
            ))
        session.commit()
        yield session


@pytest.fixture(name="client")
def client_fixture(session):
    def get_session_override():
        return session

    app.dependency_overrides[get_session] = get_session_override
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()
