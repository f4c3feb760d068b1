from http import HTTPStatus

import pytest
from django.utils import timezone

from noel_famille.events.models import Event
from noel_famille.events.models import EventUser
from tests.shared.factories import api_client_for
from tests.shared.factories import create_contribution
from tests.shared.factories import create_event
from tests.shared.factories import create_poll
from tests.shared.factories import create_task

pytestmark = pytest.mark.django_db

SECTIONS = ["minimal", "participants", "contributions", "menu", "polls", "tasks", "messages"]


def test_list_shows_only_joined_events_with_counts(member, event):
    create_event("Autre famille")
    create_contribution(event)
    create_task(event)

    resp = api_client_for(member).get("/api/events")

    assert resp.status_code == HTTPStatus.OK
    [listed] = resp.data["events"]
    assert listed["id"] == event.pk
    assert listed["participantCount"] == 2
    assert listed["contributionCount"] == 1
    assert listed["taskCount"] == 1


def test_admin_lists_every_event(admin_user, event):
    create_event("Autre famille")

    resp = api_client_for(admin_user).get("/api/events")

    assert len(resp.data["events"]) == 2


def test_anonymous_list_is_401():
    resp = api_client_for(None).get("/api/events")

    assert resp.status_code == HTTPStatus.UNAUTHORIZED


@pytest.mark.parametrize("section", SECTIONS)
def test_non_member_is_refused_on_every_section(outsider, event, section):
    resp = api_client_for(outsider).get(f"/api/events/{event.pk}/{section}")

    assert resp.status_code == HTTPStatus.FORBIDDEN
    assert resp.data["error"] == "Accès non autorisé à cet événement"


def test_missing_event_is_403_for_members_and_404_for_admins(member, admin_user):
    assert api_client_for(member).get("/api/events/999").status_code == HTTPStatus.FORBIDDEN

    resp = api_client_for(admin_user).get("/api/events/999")

    assert resp.status_code == HTTPStatus.NOT_FOUND
    assert resp.data["error"] == "Événement non trouvé"


def test_minimal_returns_section_counts(member, event):
    create_contribution(event)
    create_poll(event)

    resp = api_client_for(member).get(f"/api/events/{event.pk}/minimal")

    assert resp.status_code == HTTPStatus.OK
    assert resp.data["event"]["name"] == event.name
    assert resp.data["event"]["counts"] == {
        "eventUsers": 2,
        "contributions": 1,
        "polls": 1,
        "tasks": 0,
        "chatMessages": 0,
        "menuRecipes": 0,
    }


def test_task_counts_skip_private_tasks_of_others(member, admin_user, event):
    create_task(event, "Acheter le pain")
    create_task(event, "Cadeau surprise", is_private=True, created_by=admin_user)
    client = api_client_for(member)

    minimal = client.get(f"/api/events/{event.pk}/minimal")
    tab = client.get(f"/api/events/{event.pk}/tasks")
    [listed] = client.get("/api/events").data["events"]

    assert minimal.data["event"]["counts"]["tasks"] == 1
    assert tab.data["count"] == 1
    assert listed["taskCount"] == 1
    admin_minimal = api_client_for(admin_user).get(f"/api/events/{event.pk}/minimal")
    assert admin_minimal.data["event"]["counts"]["tasks"] == 2


def test_retrieve_with_include(member, event):
    create_contribution(event)

    resp = api_client_for(member).get(
        f"/api/events/{event.pk}",
        {"include": "contributions,codes"},
    )

    data = resp.data["event"]
    assert [c["title"] for c in data["contributions"]] == ["Champagne"]
    assert "participants" not in data
    # Codes are only shown to admins
    assert "eventCodes" not in data


def test_participants_section(member, event):
    resp = api_client_for(member).get(f"/api/events/{event.pk}/participants")

    assert resp.data["count"] == 2
    assert {p["name"] for p in resp.data["participants"]} == {"Marie", "Admin Famille"}


def test_only_admins_create_events(member, admin_user):
    payload = {"name": "Galette des rois", "date": timezone.now().isoformat()}

    assert (
        api_client_for(member).post("/api/events", payload, format="json").status_code
        == HTTPStatus.FORBIDDEN
    )

    resp = api_client_for(admin_user).post("/api/events", payload, format="json")

    assert resp.status_code == HTTPStatus.CREATED
    created = Event.objects.get(pk=resp.data["event"]["id"])
    assert EventUser.objects.filter(user=admin_user, event=created).exists()


def test_admin_updates_and_deletes(admin_user, event):
    client = api_client_for(admin_user)

    resp = client.patch(f"/api/events/{event.pk}", {"location": "Chez Mamie"}, format="json")
    assert resp.data["event"]["location"] == "Chez Mamie"

    resp = client.delete(f"/api/events/{event.pk}")
    assert resp.data == {"success": True}
    assert not Event.objects.filter(pk=event.pk).exists()


def test_put_is_not_allowed(admin_user, event):
    resp = api_client_for(admin_user).put(f"/api/events/{event.pk}", {}, format="json")

    assert resp.status_code == HTTPStatus.METHOD_NOT_ALLOWED


def test_messages_pagination(member, event):
    from noel_famille.chat.models import ChatMessage

    for i in range(5):
        ChatMessage.objects.create(event=event, user=member, content=f"Message {i}")

    resp = api_client_for(member).get(
        f"/api/events/{event.pk}/messages",
        {"limit": 2, "skip": 1},
    )

    assert resp.data["pagination"] == {"total": 5, "limit": 2, "skip": 1, "hasMore": True}
    assert len(resp.data["messages"]) == 2
