from http import HTTPStatus
from unittest import mock

import pytest
import redis
from django.db import DatabaseError
from django.db import connection as dj_conn


@pytest.fixture
def redis_up():
    with mock.patch("config.health.redis.Redis.ping", return_value=True) as ping:
        yield ping


@pytest.mark.django_db
def test_health_ok(client, redis_up):
    resp = client.get("/health/")

    assert resp.status_code == HTTPStatus.OK
    data = resp.json()
    assert data["status"] == "ok"
    assert data["components"]["db"]["ok"] is True
    assert data["components"]["uploads"] == {"ok": True, "exists": False}


@pytest.mark.django_db
def test_health_degraded_when_redis_fails(client):
    with mock.patch(
        "config.health.redis.Redis.ping",
        side_effect=redis.ConnectionError("redis timeout"),
    ):
        resp = client.get("/health/")

    assert resp.status_code == HTTPStatus.SERVICE_UNAVAILABLE
    data = resp.json()
    assert data["components"]["redis"]["ok"] is False
    assert data["status"] == "degraded"


@pytest.mark.django_db
def test_health_degraded_when_db_fails(client, monkeypatch, redis_up):
    msg = "db down"

    def raise_cursor():
        raise DatabaseError(msg)

    monkeypatch.setattr(dj_conn, "cursor", raise_cursor, raising=True)
    resp = client.get("/health/")

    assert resp.status_code == HTTPStatus.SERVICE_UNAVAILABLE
    data = resp.json()
    assert data["components"]["db"] == {"ok": False, "error": "db down"}
