"""Tests for push subscription endpoints."""

from fastapi import status

from huddle.core.settings import settings
from huddle.models import NotificationSubscription

SUBSCRIBE_URL = "/api/v1/notifications/subscribe"
UNSUBSCRIBE_URL = "/api/v1/notifications/unsubscribe"
PUBLIC_KEY_URL = "/api/v1/notifications/vapid-public-key"
ENDPOINT = "https://push.example.com/send/abc"


def _subscription(endpoint=ENDPOINT, p256dh="key-1", auth="auth-1"):
    return {"endpoint": endpoint, "keys": {"p256dh": p256dh, "auth": auth}}


def test_subscribe_creates_record(client, db_session) -> None:
    response = client.post(SUBSCRIBE_URL, json=_subscription())
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"success": True}

    record = db_session.get(NotificationSubscription, ENDPOINT)
    assert record is not None
    assert record.p256dh == "key-1"
    assert record.session_id


def test_subscribe_twice_keeps_latest_keys(client, db_session) -> None:
    client.post(SUBSCRIBE_URL, json=_subscription())
    client.post(SUBSCRIBE_URL, json=_subscription(p256dh="key-2", auth="auth-2"))

    records = db_session.query(NotificationSubscription).all()
    assert len(records) == 1
    db_session.refresh(records[0])
    assert records[0].p256dh == "key-2"
    assert records[0].auth == "auth-2"


def test_subscribe_missing_fields(client, db_session) -> None:
    for body in (
        {"keys": {"p256dh": "a", "auth": "b"}},
        {"endpoint": ENDPOINT},
        {"endpoint": ENDPOINT, "keys": {"p256dh": "a"}},
        {"endpoint": "", "keys": {"p256dh": "a", "auth": "b"}},
    ):
        response = client.post(SUBSCRIBE_URL, json=body)
        assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert db_session.query(NotificationSubscription).count() == 0


def test_unsubscribe_removes_record(client, db_session) -> None:
    client.post(SUBSCRIBE_URL, json=_subscription())
    response = client.post(UNSUBSCRIBE_URL, json={"endpoint": ENDPOINT})
    assert response.status_code == status.HTTP_200_OK
    assert db_session.get(NotificationSubscription, ENDPOINT) is None


def test_unsubscribe_unknown_endpoint_succeeds(client) -> None:
    response = client.post(UNSUBSCRIBE_URL, json={"endpoint": "https://nowhere.example"})
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"success": True}


def test_unsubscribe_requires_endpoint(client) -> None:
    response = client.post(UNSUBSCRIBE_URL, json={})
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_public_key_unconfigured(client, monkeypatch) -> None:
    monkeypatch.setattr(settings, "vapid_public_key", None)
    response = client.get(PUBLIC_KEY_URL)
    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR


def test_public_key_configured(client, monkeypatch) -> None:
    monkeypatch.setattr(settings, "vapid_public_key", "BPublicKey")
    response = client.get(PUBLIC_KEY_URL)
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"publicKey": "BPublicKey"}
