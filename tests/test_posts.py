# tests/test_posts.py
"""Tests for post-related endpoints."""

from datetime import timedelta

import pytest
from fastapi import status
from sqlalchemy.exc import OperationalError

from huddle.core.settings import settings
from huddle.models import Post
from tests.conftest import LONDON, LOS_ANGELES, post_body

POSTS_URL = "/api/v1/posts/"


def _list(client, latitude=LOS_ANGELES[0], longitude=LOS_ANGELES[1]):
    return client.get(POSTS_URL, params={"latitude": latitude, "longitude": longitude})


def test_create_post_success(client, db_session) -> None:
    """Creating a post returns the visible list including it."""
    response = client.post(POSTS_URL, json=post_body())
    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert len(data) == 1
    created = data[0]
    assert created["name"] == "Sam"
    assert created["activity"] == "Pickup basketball"
    assert created["hours"] == 2
    assert created["owned"] is True
    assert created["place"] is None
    assert created["created_at"] == created["start_time"]
    assert "session_id" not in created

    stored = db_session.get(Post, created["id"])
    assert stored is not None
    assert stored.session_id


def test_create_post_strips_whitespace(client) -> None:
    response = client.post(POSTS_URL, json=post_body(name="  Sam  "))
    assert response.status_code == status.HTTP_201_CREATED
    assert response.json()[0]["name"] == "Sam"


@pytest.mark.parametrize("hours", [1, 24])
def test_create_post_hours_bounds_accepted(client, hours) -> None:
    response = client.post(POSTS_URL, json=post_body(hours=hours))
    assert response.status_code == status.HTTP_201_CREATED
    assert response.json()[0]["hours"] == hours


@pytest.mark.parametrize("hours", [0, 25, -3, 2.5])
def test_create_post_hours_out_of_range(client, db_session, hours) -> None:
    response = client.post(POSTS_URL, json=post_body(hours=hours))
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert "hours" in response.json()["errors"]
    assert db_session.query(Post).count() == 0


@pytest.mark.parametrize("field", ["name", "activity", "location"])
def test_create_post_requires_text_fields(client, db_session, field) -> None:
    response = client.post(POSTS_URL, json=post_body(**{field: "   "}))
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert field in response.json()["errors"]
    assert db_session.query(Post).count() == 0


def test_create_post_rejects_non_numeric_coordinates(client) -> None:
    response = client.post(POSTS_URL, json=post_body(latitude="north", longitude=500))
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    errors = response.json()["errors"]
    assert "latitude" in errors
    assert "longitude" in errors


def test_create_post_queues_notification(client, dispatcher) -> None:
    response = client.post(POSTS_URL, json=post_body())
    assert response.status_code == status.HTTP_201_CREATED
    assert len(dispatcher.jobs) == 1
    job = dispatcher.jobs[0]
    assert job.title == "New activity nearby"
    assert job.body == "Sam: Pickup basketball @ Pan Pacific Park"
    assert job.url == "/"


def test_failed_validation_queues_nothing(client, dispatcher) -> None:
    client.post(POSTS_URL, json=post_body(hours=0))
    assert dispatcher.jobs == []


def test_session_cookie_issued_and_reused(client) -> None:
    first = client.post(POSTS_URL, json=post_body())
    cookie = first.cookies.get(settings.session_cookie_name)
    assert cookie

    second = _list(client)
    # An existing valid cookie is not replaced.
    assert settings.session_cookie_name not in second.cookies
    assert second.json()[0]["owned"] is True


def test_other_session_sees_but_does_not_own(client, other_client) -> None:
    client.post(POSTS_URL, json=post_body())
    data = _list(other_client).json()
    assert len(data) == 1
    assert data[0]["owned"] is False


def test_list_posts_filters_by_distance(client) -> None:
    client.post(POSTS_URL, json=post_body())
    assert len(_list(client).json()) == 1
    assert _list(client, *LONDON).json() == []


def test_list_posts_excludes_expired(client, make_post) -> None:
    make_post(hours=1, age=timedelta(hours=2))
    active = make_post(hours=2, age=timedelta(hours=1))
    data = _list(client).json()
    assert [p["id"] for p in data] == [active.id]


def test_list_posts_requires_coordinates(client) -> None:
    response = client.get(POSTS_URL)
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_list_posts_rejects_out_of_range_observer(client) -> None:
    response = _list(client, 95.0, 0.0)
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert "latitude" in response.json()["errors"]


def test_delete_own_post(client, db_session) -> None:
    post_id = client.post(POSTS_URL, json=post_body()).json()[0]["id"]

    response = client.delete(f"{POSTS_URL}{post_id}")
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == []
    assert db_session.get(Post, post_id) is None
    assert _list(client).json() == []


def test_delete_returns_remaining_posts(client) -> None:
    keep = client.post(POSTS_URL, json=post_body(name="Keep")).json()[0]["id"]
    drop = client.post(POSTS_URL, json=post_body(name="Drop")).json()[0]["id"]

    response = client.delete(
        f"{POSTS_URL}{drop}",
        params={"latitude": LOS_ANGELES[0], "longitude": LOS_ANGELES[1]},
    )
    assert response.status_code == status.HTTP_200_OK
    assert [p["id"] for p in response.json()] == [keep]


def test_delete_someone_elses_post_is_forbidden(client, other_client, db_session) -> None:
    post_id = client.post(POSTS_URL, json=post_body()).json()[0]["id"]

    response = other_client.delete(f"{POSTS_URL}{post_id}")
    assert response.status_code == status.HTTP_403_FORBIDDEN
    assert db_session.get(Post, post_id) is not None
    assert len(_list(client).json()) == 1


def test_delete_expired_post_by_owner(client, make_post, db_session) -> None:
    # Ownership alone authorizes deletion, even after the window has closed.
    cookie = client.get("/health").cookies.get(settings.session_cookie_name)
    assert cookie
    owner_session = _session_id_from_cookie(cookie)
    post = make_post(hours=1, age=timedelta(hours=5), session_id=owner_session)

    response = client.delete(f"{POSTS_URL}{post.id}")
    assert response.status_code == status.HTTP_200_OK
    assert db_session.get(Post, post.id) is None


def test_delete_missing_post(client) -> None:
    response = client.delete(f"{POSTS_URL}999999")
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["detail"] == "Post not found"


def test_delete_malformed_id(client) -> None:
    response = client.delete(f"{POSTS_URL}not-a-number")
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_delete_twice_reports_not_found(client) -> None:
    post_id = client.post(POSTS_URL, json=post_body()).json()[0]["id"]
    assert client.delete(f"{POSTS_URL}{post_id}").status_code == status.HTTP_200_OK
    assert client.delete(f"{POSTS_URL}{post_id}").status_code == status.HTTP_404_NOT_FOUND


def _session_id_from_cookie(cookie: str) -> str:
    from huddle.services.identity import decode_session_token

    session_id = decode_session_token(cookie)
    assert session_id is not None
    return session_id


def _storage_error() -> OperationalError:
    return OperationalError("COMMIT", {}, Exception("disk I/O error"))


def test_create_post_storage_failure(client, db_session, dispatcher, mocker) -> None:
    """A failed write answers with a generic 500, persists nothing and queues nothing."""
    mocker.patch.object(db_session, "commit", side_effect=_storage_error())
    log = mocker.patch("huddle.repositories.post_repo.logger")

    response = client.post(POSTS_URL, json=post_body())
    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert response.json() == {"detail": "Something went wrong, please try again"}
    assert db_session.query(Post).count() == 0
    assert dispatcher.jobs == []
    log.exception.assert_called_once()


def test_delete_post_storage_failure(client, db_session, dispatcher, mocker) -> None:
    post_id = client.post(POSTS_URL, json=post_body()).json()[0]["id"]
    assert len(dispatcher.jobs) == 1

    mocker.patch.object(db_session, "commit", side_effect=_storage_error())
    log = mocker.patch("huddle.repositories.post_repo.logger")

    response = client.delete(f"{POSTS_URL}{post_id}")
    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert response.json() == {"detail": "Something went wrong, please try again"}
    assert db_session.get(Post, post_id) is not None
    assert len(dispatcher.jobs) == 1
    log.exception.assert_called_once()


def test_delete_with_partial_observer_is_rejected(client, db_session) -> None:
    post_id = client.post(POSTS_URL, json=post_body()).json()[0]["id"]

    response = client.delete(f"{POSTS_URL}{post_id}", params={"latitude": LOS_ANGELES[0]})
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert "longitude" in response.json()["errors"]
    assert db_session.get(Post, post_id) is not None
