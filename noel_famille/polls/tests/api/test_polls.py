from datetime import timedelta
from http import HTTPStatus

import pytest
from django.core.files.base import ContentFile
from django.core.files.storage import default_storage
from django.utils import timezone

from noel_famille.polls.models import Poll
from tests.shared.factories import api_client_for
from tests.shared.factories import create_poll
from tests.shared.factories import create_user

pytestmark = pytest.mark.django_db

CRON_HEADER = "Bearer test-cron-secret"


def test_member_creates_a_poll(member, event):
    resp = api_client_for(member).post(
        "/api/polls",
        {
            "eventId": event.pk,
            "title": "Quel dessert ?",
            "type": "MULTIPLE",
            "options": ["Bûche", "Tarte", "Paris-Brest"],
        },
        format="json",
    )

    assert resp.status_code == HTTPStatus.CREATED
    poll = resp.data["poll"]
    assert poll["createdBy"]["name"] == "Marie"
    assert [o["label"] for o in poll["options"]] == ["Bûche", "Tarte", "Paris-Brest"]
    assert poll["hasVoted"] is False


def test_poll_needs_two_options(member, event):
    resp = api_client_for(member).post(
        "/api/polls",
        {"eventId": event.pk, "title": "Quel dessert ?", "options": ["Bûche"]},
        format="json",
    )

    assert resp.status_code == HTTPStatus.BAD_REQUEST
    assert resp.data["error"] == "Au moins 2 options sont requises"


def test_vote_shows_the_user_ballot(
    member, event, django_capture_on_commit_callbacks, realtime_emit
):
    poll = create_poll(event)
    tarte = poll.options.get(label="Tarte")

    with django_capture_on_commit_callbacks(execute=True):
        resp = api_client_for(member).post(
            f"/api/polls/{poll.pk}/vote",
            {"optionIds": [tarte.pk]},
            format="json",
        )

    assert resp.status_code == HTTPStatus.OK
    data = resp.data["poll"]
    assert data["hasVoted"] is True
    assert data["userVotes"] == [tarte.pk]
    counts = {o["label"]: o["voteCount"] for o in data["options"]}
    assert counts == {"Bûche": 0, "Tarte": 1}
    realtime_emit.assert_called_once_with(
        event.pk,
        "poll-update",
        {"eventId": event.pk, "action": "updated", "id": poll.pk},
    )


def test_vote_is_checked_for_event_access_first(outsider, event):
    poll = create_poll(event, is_closed=True)

    resp = api_client_for(outsider).post(
        f"/api/polls/{poll.pk}/vote",
        {"optionIds": []},
        format="json",
    )

    assert resp.status_code == HTTPStatus.FORBIDDEN


def test_withdraw_vote(member, event):
    poll = create_poll(event)
    client = api_client_for(member)
    client.post(
        f"/api/polls/{poll.pk}/vote",
        {"optionIds": [poll.options.first().pk]},
        format="json",
    )

    resp = client.delete(f"/api/polls/{poll.pk}/vote")

    assert resp.data == {"success": True}
    assert not poll.votes.exists()


def test_only_admins_close_polls(member, admin_user, event):
    poll = create_poll(event)
    tarte = poll.options.get(label="Tarte")
    api_client_for(member).post(
        f"/api/polls/{poll.pk}/vote",
        {"optionIds": [tarte.pk]},
        format="json",
    )

    assert api_client_for(member).post(f"/api/polls/{poll.pk}/close").status_code == (
        HTTPStatus.FORBIDDEN
    )

    resp = api_client_for(admin_user).post(f"/api/polls/{poll.pk}/close")

    assert resp.status_code == HTTPStatus.OK
    assert resp.data["poll"]["isClosed"] is True
    assert [c["title"] for c in resp.data["createdContributions"]] == ["Tarte"]
    assert resp.data["message"] == "Sondage fermé. 1 contribution(s) ajoutée(s) automatiquement."


def test_only_creator_or_admin_edits(member, event):
    poll = create_poll(event, created_by=create_user("Pierre"))

    resp = api_client_for(member).patch(f"/api/polls/{poll.pk}", {"title": "Autre"}, format="json")

    assert resp.status_code == HTTPStatus.FORBIDDEN
    assert resp.data["error"] == "Vous n'êtes pas autorisé à modifier ce sondage"


def test_edit_replaces_options_and_old_picture(member, event, django_capture_on_commit_callbacks):
    name = default_storage.save("ancienne.webp", ContentFile(b"webp"))
    poll = create_poll(event, created_by=member, image_url=f"/uploads/{name}")

    with django_capture_on_commit_callbacks(execute=True):
        resp = api_client_for(member).patch(
            f"/api/polls/{poll.pk}",
            {
                "title": "Quel plat ?",
                "imageUrl": "https://images.example.com/dinde.jpg",
                "options": [{"label": "Dinde"}, {"label": "Chapon"}],
            },
            format="json",
        )

    assert resp.status_code == HTTPStatus.OK
    assert resp.data["poll"]["title"] == "Quel plat ?"
    assert [o["label"] for o in resp.data["poll"]["options"]] == ["Dinde", "Chapon"]
    assert not default_storage.exists(name)


def test_creator_deletes_poll(member, event):
    poll = create_poll(event, created_by=member)

    resp = api_client_for(member).delete(f"/api/polls/{poll.pk}")

    assert resp.data == {"message": "Sondage supprimé avec succès"}
    assert not Poll.objects.exists()


@pytest.mark.parametrize("header", [None, "Bearer wrong", "test-cron-secret"])
def test_auto_close_requires_the_cron_secret(header):
    client = api_client_for(None)
    if header:
        client.credentials(HTTP_AUTHORIZATION=header)

    resp = client.get("/api/polls/auto-close")

    assert resp.status_code == HTTPStatus.UNAUTHORIZED
    assert resp.data == {"error": "Non autorisé"}


def test_auto_close_endpoint(event):
    poll = create_poll(event, auto_close=timezone.now() - timedelta(minutes=5))
    client = api_client_for(None)
    client.credentials(HTTP_AUTHORIZATION=CRON_HEADER)

    resp = client.get("/api/polls/auto-close")

    assert resp.status_code == HTTPStatus.OK
    assert resp.data == {
        "success": True,
        "closed": 1,
        "polls": [{"id": poll.pk, "title": poll.title, "eventId": event.pk}],
    }


def test_auto_close_is_closed_without_configured_secret(settings, event):
    settings.CRON_SECRET = ""
    client = api_client_for(None)
    client.credentials(HTTP_AUTHORIZATION="Bearer ")

    assert client.get("/api/polls/auto-close").status_code == HTTPStatus.UNAUTHORIZED
