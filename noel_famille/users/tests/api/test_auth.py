from http import HTTPStatus

import pytest
from django.conf import settings
from rest_framework.test import APIClient

from noel_famille.events.models import EventUser
from noel_famille.users.api.auth_views import REFRESH_MISSING
from noel_famille.users.api.auth_views import REFRESH_REVOKED
from noel_famille.users.api.auth_views import TOO_MANY_ATTEMPTS
from noel_famille.users.models import RefreshToken
from tests.shared.factories import create_code
from tests.shared.factories import create_event

pytestmark = pytest.mark.django_db

REFRESH_COOKIE = settings.JWT_AUTH_REFRESH_COOKIE
ACCESS_COOKIE = settings.JWT_AUTH_COOKIE


@pytest.fixture
def code_event():
    event = create_event()
    create_code("NOEL-2025-SOIR", event)
    return event


def _login(client, name="Marie", code="NOEL-2025-SOIR"):
    return client.post(
        "/api/auth/login",
        {"name": name, "eventCode": code},
        format="json",
    )


def test_login_sets_both_cookies_and_links_the_event(code_event):
    client = APIClient()
    resp = _login(client)

    assert resp.status_code == HTTPStatus.OK
    assert resp.data["user"]["name"] == "Marie"
    assert resp.data["accessToken"]
    assert resp.cookies[REFRESH_COOKIE]["httponly"]
    assert resp.cookies[ACCESS_COOKIE].value == resp.data["accessToken"]
    assert EventUser.objects.filter(
        user_id=resp.data["user"]["id"],
        event=code_event,
    ).exists()


def test_login_validation_messages_are_joined(code_event):
    resp = APIClient().post("/api/auth/login", {"name": "M", "eventCode": "AB"}, format="json")

    assert resp.status_code == HTTPStatus.BAD_REQUEST
    assert resp.data["error"] == (
        "Le nom doit contenir au moins 2 caractères | "
        "Le code doit contenir au moins 4 caractères"
    )


def test_wrong_code_is_401(code_event):
    resp = _login(APIClient(), code="INCONNU")

    assert resp.status_code == HTTPStatus.UNAUTHORIZED
    assert resp.data["error"] == "Code d'événement invalide ou expiré"


def test_me_with_access_cookie(code_event):
    client = APIClient()
    _login(client)

    resp = client.get("/api/auth/me")

    assert resp.status_code == HTTPStatus.OK
    assert resp.data["user"]["name"] == "Marie"


def test_me_without_session_is_401():
    resp = APIClient().get("/api/auth/me")

    assert resp.status_code == HTTPStatus.UNAUTHORIZED
    assert resp.data == {"error": "Non authentifié"}


def test_refresh_rotates_and_spent_token_cannot_be_reused(code_event):
    client = APIClient()
    _login(client)
    first = client.cookies[REFRESH_COOKIE].value

    rotated = client.post("/api/auth/refresh")
    assert rotated.status_code == HTTPStatus.OK
    second = client.cookies[REFRESH_COOKIE].value
    assert second != first

    replay = APIClient()
    replay.cookies[REFRESH_COOKIE] = first
    resp = replay.post("/api/auth/refresh")

    assert resp.status_code == HTTPStatus.UNAUTHORIZED
    assert resp.data["error"] == REFRESH_REVOKED
    # The rotated token is still good
    assert client.post("/api/auth/refresh").status_code == HTTPStatus.OK


def test_refresh_without_cookie():
    resp = APIClient().post("/api/auth/refresh")

    assert resp.status_code == HTTPStatus.UNAUTHORIZED
    assert resp.data["error"] == REFRESH_MISSING


def test_logout_revokes_the_refresh_token(code_event):
    client = APIClient()
    _login(client)
    token = client.cookies[REFRESH_COOKIE].value

    resp = client.post("/api/auth/logout")

    assert resp.status_code == HTTPStatus.OK
    assert resp.data == {"success": True}
    assert RefreshToken.objects.get(token=token).revoked_at is not None


def test_login_is_throttled(code_event):
    client = APIClient()
    for _ in range(10):
        _login(client, code="INCONNU")

    resp = _login(client)

    assert resp.status_code == HTTPStatus.TOO_MANY_REQUESTS
    assert resp.data["error"] == TOO_MANY_ATTEMPTS
