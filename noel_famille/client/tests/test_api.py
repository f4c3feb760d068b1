from unittest import mock

import pytest
import requests

from noel_famille.client.api import ApiClient
from noel_famille.client.api import ApiError


def _response(status, payload=None, *, text=""):
    response = mock.Mock(spec=requests.Response)
    response.status_code = status
    response.ok = status < 400
    response.reason = "Reason"
    if payload is None:
        response.headers = {"Content-Type": "text/plain"}
        response.text = text
    else:
        response.headers = {"Content-Type": "application/json; charset=utf-8"}
        response.json.return_value = payload
    return response


@pytest.fixture
def session():
    session = mock.Mock(spec=requests.Session)
    session.cookies = requests.cookies.RequestsCookieJar()
    return session


def test_login_posts_name_and_code(session):
    session.request.return_value = _response(200, {"accessToken": "a", "user": {"id": 1}})
    client = ApiClient("http://noel.test/", session=session)

    assert client.login("Marie", "NOEL-2025") == {"id": 1}
    session.request.assert_called_once_with(
        "POST",
        "http://noel.test/api/auth/login",
        json={"name": "Marie", "eventCode": "NOEL-2025"},
        timeout=10,
    )


def test_access_token_comes_from_the_cookie(session):
    session.cookies.set("access_token", "jwt")

    assert ApiClient("http://noel.test", session=session).access_token == "jwt"


def test_expired_session_is_refreshed_once(session):
    session.request.side_effect = [
        _response(401, {"error": "Non authentifié"}),
        _response(200, {"ok": 1}),
    ]
    session.post.return_value = _response(200, {"accessToken": "b"})
    client = ApiClient("http://noel.test", session=session)

    assert client.get("/api/events") == {"ok": 1}
    session.post.assert_called_once_with("http://noel.test/api/auth/refresh", timeout=10)
    assert session.request.call_count == 2


def test_refused_refresh_raises_the_original_error(session):
    session.request.return_value = _response(401, {"error": "Non authentifié"})
    session.post.return_value = _response(401, {"error": "Token révoqué ou expiré"})
    client = ApiClient("http://noel.test", session=session)

    with pytest.raises(ApiError) as excinfo:
        client.get("/api/events")

    assert excinfo.value.status_code == 401
    assert excinfo.value.message == "Non authentifié"
    assert session.request.call_count == 1


def test_auth_endpoints_are_not_retried(session):
    session.request.return_value = _response(
        401, {"error": "Code d'événement invalide ou expiré"}
    )
    client = ApiClient("http://noel.test", session=session)

    with pytest.raises(ApiError, match="Code d'événement invalide"):
        client.login("Marie", "FAUX")
    session.post.assert_not_called()


def test_text_responses_are_returned_as_text(session):
    session.request.return_value = _response(200, text="BEGIN:VCALENDAR")

    assert ApiClient("http://noel.test", session=session).get("/api/tasks/1/ical") == (
        "BEGIN:VCALENDAR"
    )
