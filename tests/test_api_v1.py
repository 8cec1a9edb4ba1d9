"""Plain-text API: /api/films."""
from decimal import Decimal

from sqlalchemy.exc import OperationalError
import pytest

from films.models import Film
from tests.conftest import all_films

BASE_PATH = "/api/films"


def test_get_film_by_id(client):
    response = client.get(f"{BASE_PATH}/1")
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/plain")
    assert response.text == "ACADEMY DINOSAUR"


def test_get_film_by_id_not_found(client):
    response = client.get(f"{BASE_PATH}/999999")
    assert response.status_code == 404
    assert "Film not found" in response.text


def test_get_film_by_invalid_id(client):
    response = client.get(f"{BASE_PATH}/invalid")
    assert response.status_code in (400, 404, 422)


def test_paged_default_params(client):
    response = client.get(f"{BASE_PATH}/paged")
    assert response.status_code == 200
    lines = response.text.split("\n")
    assert len(lines) == 20
    assert lines[0] == "SHORT CUT (30 min)"


def test_paged_rejects_negative_page(client):
    response = client.get(f"{BASE_PATH}/paged", params={"page": -1})
    assert response.status_code == 400


def test_paged_different_pages_differ(client):
    first = client.get(f"{BASE_PATH}/paged", params={"page": 0, "minLength": 40}).text
    second = client.get(f"{BASE_PATH}/paged", params={"page": 1, "minLength": 40}).text

    assert first and second
    assert not set(first.split("\n")) & set(second.split("\n"))


def test_paged_higher_threshold_returns_fewer(client):
    low = client.get(f"{BASE_PATH}/paged", params={"minLength": 50}).text
    high = client.get(f"{BASE_PATH}/paged", params={"minLength": 180}).text

    assert high == "CHICAGO NORTH (185 min)"
    assert len(low.split("\n")) > 1


def test_paged_past_the_end_is_empty(client):
    response = client.get(f"{BASE_PATH}/paged", params={"page": 50})
    assert response.status_code == 200
    assert response.text == ""


def test_search_with_actors(client):
    response = client.get(f"{BASE_PATH}/search", params={"titlePrefix": "A", "minLength": 60})
    assert response.status_code == 200
    assert response.text.split("\n") == [
        "AFFAIR PREJUDICE (117 min) - Actors: PENELOPE GUINESS, ED CHASE",
        "ACADEMY DINOSAUR (86 min) - Actors: PENELOPE GUINESS, NICK WAHLBERG",
    ]


def test_search_default_params_returns_every_film(client):
    response = client.get(f"{BASE_PATH}/search")
    assert response.status_code == 200
    assert len(response.text.split("\n")) == len(all_films())


def test_search_non_matching_prefix(client):
    response = client.get(f"{BASE_PATH}/search", params={"titlePrefix": "ZZZZZ", "minLength": 60})
    assert response.status_code == 200
    assert response.text == ""


def test_update_rental_rate(client):
    response = client.put(f"{BASE_PATH}/rental-rate", params={"minLength": 150, "rate": "9.99"})
    assert response.status_code == 200
    assert response.text.split("\n") == [
        "BEAR GRACELAND (160 min) - $9.99",
        "CHICAGO NORTH (185 min) - $9.99",
    ]


def test_update_rental_rate_leaves_shorter_films(client):
    client.put(f"{BASE_PATH}/rental-rate", params={"minLength": 180, "rate": "4.5"})
    response = client.put(f"{BASE_PATH}/rental-rate", params={"minLength": 150, "rate": "1"})

    assert "CHICAGO NORTH (185 min) - $1.00" in response.text


def test_update_rental_rate_without_rate(client):
    response = client.put(f"{BASE_PATH}/rental-rate", params={"minLength": 120})
    assert response.status_code == 400


@pytest.mark.parametrize("rate", ["0", "-5.00"])
def test_update_rental_rate_rejects_non_positive(client, rate):
    response = client.put(f"{BASE_PATH}/rental-rate", params={"minLength": 120, "rate": rate})
    assert response.status_code == 400
    assert response.headers["content-type"].startswith("text/plain")
    assert "positive" in response.text


def test_update_rental_rate_store_failure(client, session, monkeypatch):
    def fail(*args, **kwargs):
        raise OperationalError("UPDATE film", {}, Exception("database is locked"))

    monkeypatch.setattr(session, "execute", fail)

    response = client.put(f"{BASE_PATH}/rental-rate", params={"minLength": 120, "rate": "2.99"})
    assert response.status_code == 500
    assert response.text.startswith("Update failed")


def test_paged_rejects_page_beyond_limit(client):
    response = client.get(f"{BASE_PATH}/paged", params={"page": 10 ** 18})
    assert response.status_code == 400
    assert "Page must not exceed" in response.text


@pytest.mark.parametrize("rate", ["0.001", "0.004"])
def test_update_rental_rate_rejects_rate_rounding_to_zero(client, session, rate):
    response = client.put(f"{BASE_PATH}/rental-rate", params={"minLength": 180, "rate": rate})

    assert response.status_code == 400
    assert "positive" in response.text
    assert session.get(Film, 6).rental_rate == Decimal("4.99")


def test_update_rental_rate_rounds_half_cent_up(client):
    response = client.put(f"{BASE_PATH}/rental-rate", params={"minLength": 180, "rate": "0.005"})
    assert response.status_code == 200
    assert response.text == "CHICAGO NORTH (185 min) - $0.01"


def test_update_rental_rate_rejects_out_of_range_rate(client, session):
    response = client.put(f"{BASE_PATH}/rental-rate", params={"minLength": 180, "rate": "1e30"})

    assert response.status_code == 400
    assert response.text == "Rental rate is out of range"
    assert session.get(Film, 6).rental_rate == Decimal("4.99")
