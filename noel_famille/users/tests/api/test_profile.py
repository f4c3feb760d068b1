from http import HTTPStatus

import pytest

from tests.shared.factories import api_client_for
from tests.shared.factories import create_user

pytestmark = pytest.mark.django_db


def test_profile_update(member):
    resp = api_client_for(member).patch(
        "/api/profile",
        {"name": "Marie-Claire", "email": "marie@famille.fr", "avatar": "👩"},
        format="json",
    )

    assert resp.status_code == HTTPStatus.OK
    assert resp.data["user"]["name"] == "Marie-Claire"
    member.refresh_from_db()
    assert member.email == "marie@famille.fr"


def test_blank_email_is_stored_as_null(member):
    member.email = "marie@famille.fr"
    member.save()

    resp = api_client_for(member).patch("/api/profile", {"email": ""}, format="json")

    assert resp.status_code == HTTPStatus.OK
    member.refresh_from_db()
    assert member.email is None


def test_email_of_someone_else_is_refused(member):
    create_user("Pierre", email="pierre@famille.fr")

    resp = api_client_for(member).patch(
        "/api/profile",
        {"email": "Pierre@famille.fr"},
        format="json",
    )

    assert resp.status_code == HTTPStatus.BAD_REQUEST
    assert resp.data["error"] == "Cet email est déjà utilisé"
