from http import HTTPStatus

import pytest
from django.core.files.base import ContentFile
from django.core.files.storage import default_storage

from noel_famille.chat.models import ChatMessage
from noel_famille.chat.models import ChatMessageMedia
from noel_famille.contributions.models import Contribution
from noel_famille.events.models import Event
from noel_famille.events.models import EventCode
from noel_famille.users.models import User
from tests.shared.factories import api_client_for
from tests.shared.factories import create_contribution
from tests.shared.factories import create_event
from tests.shared.factories import create_poll

pytestmark = pytest.mark.django_db

ADMIN_ENDPOINTS = [
    "/api/admin/codes",
    "/api/admin/events",
    "/api/admin/users",
    "/api/admin/messages",
    "/api/admin/polls",
    "/api/admin/metrics",
]


@pytest.mark.parametrize("path", ADMIN_ENDPOINTS)
def test_members_are_refused(member, path):
    resp = api_client_for(member).get(path)

    assert resp.status_code == HTTPStatus.FORBIDDEN
    assert resp.data == {"error": "Accès non autorisé"}


@pytest.mark.parametrize("path", ADMIN_ENDPOINTS)
def test_admin_reads_every_endpoint(admin_user, event, path):
    assert api_client_for(admin_user).get(path).status_code == HTTPStatus.OK


def test_create_and_delete_code(admin_user, event):
    client = api_client_for(admin_user)

    resp = client.post(
        "/api/admin/codes",
        {"code": "noel-2025-soir", "eventIds": [event.pk]},
        format="json",
    )
    assert resp.status_code == HTTPStatus.CREATED
    assert resp.data["code"]["code"] == "NOEL-2025-SOIR"
    assert resp.data["code"]["eventIds"] == [event.pk]

    resp = client.post(
        "/api/admin/codes",
        {"code": "NOEL-2025-SOIR", "eventIds": [event.pk]},
        format="json",
    )
    assert resp.status_code == HTTPStatus.BAD_REQUEST
    assert resp.data["error"] == "Ce code existe déjà"

    code = EventCode.objects.get()
    assert client.delete(f"/api/admin/codes/{code.pk}").data == {"success": True}


def test_code_needs_an_event(admin_user):
    resp = api_client_for(admin_user).post(
        "/api/admin/codes",
        {"code": "NOEL-2025", "eventIds": []},
        format="json",
    )

    assert resp.data["error"] == "Sélectionnez au moins un événement"


def test_admin_event_list_has_counts(admin_user, event, member):
    create_poll(event)
    ChatMessage.objects.create(event=event, user=member, content="Coucou")
    create_event("Sans moi")

    resp = api_client_for(admin_user).get("/api/admin/events")

    events = {e["name"]: e for e in resp.data["events"]}
    assert set(events) == {event.name, "Sans moi"}
    assert events[event.name]["pollCount"] == 1
    assert events[event.name]["messageCount"] == 1
    assert events[event.name]["participantCount"] == 2


def test_admin_deletes_event(admin_user, event):
    resp = api_client_for(admin_user).delete(f"/api/admin/events/{event.pk}")

    assert resp.data == {"message": "Événement supprimé avec succès"}
    assert not Event.objects.exists()


def test_user_management(admin_user, member, event):
    client = api_client_for(admin_user)

    resp = client.get("/api/admin/users")
    marie = next(u for u in resp.data if u["name"] == "Marie")
    assert marie["events"] == [{"id": event.pk, "name": event.name}]

    resp = client.post(
        "/api/admin/users",
        {"name": "Tonton Paul", "email": "paul@famille.fr"},
        format="json",
    )
    assert resp.status_code == HTTPStatus.CREATED
    assert resp.data["role"] == User.Role.USER

    resp = client.patch(
        f"/api/admin/users/{member.pk}",
        {"email": "PAUL@famille.fr"},
        format="json",
    )
    assert resp.data["error"] == "Cet email est déjà utilisé"

    resp = client.patch(f"/api/admin/users/{member.pk}", {"role": "ADMIN"}, format="json")
    assert resp.data["role"] == "ADMIN"


def test_staff_flag_follows_the_role(admin_user, member):
    client = api_client_for(admin_user)

    client.patch(f"/api/admin/users/{member.pk}", {"role": "ADMIN"}, format="json")
    member.refresh_from_db()
    assert member.is_staff

    client.patch(f"/api/admin/users/{member.pk}", {"role": "USER"}, format="json")
    member.refresh_from_db()
    assert member.role == User.Role.USER
    assert not member.is_staff


def test_admin_cannot_demote_or_delete_themselves(admin_user):
    client = api_client_for(admin_user)

    resp = client.patch(f"/api/admin/users/{admin_user.pk}", {"role": "USER"}, format="json")
    assert resp.status_code == HTTPStatus.BAD_REQUEST
    assert resp.data["error"] == "Vous ne pouvez pas modifier votre propre rôle"

    resp = client.delete(f"/api/admin/users/{admin_user.pk}")
    assert resp.status_code == HTTPStatus.BAD_REQUEST
    assert resp.data["error"] == "Vous ne pouvez pas supprimer votre propre compte"


def test_message_moderation(admin_user, member, event):
    ChatMessage.objects.create(event=event, user=member, content="Premier")
    last = ChatMessage.objects.create(event=event, user=member, content="Dernier")
    client = api_client_for(admin_user)

    resp = client.get("/api/admin/messages", {"eventId": event.pk, "limit": 1})
    assert [m["content"] for m in resp.data] == ["Dernier"]
    assert resp.data[0]["event"] == {"id": event.pk, "name": event.name}

    resp = client.delete(f"/api/admin/messages/{last.pk}")
    assert resp.data["message"] == "Message supprimé avec succès"
    assert resp.data["deletedMessage"]["content"] == "Dernier"
    assert ChatMessage.objects.count() == 1


@pytest.mark.parametrize(
    "path",
    ["/api/admin/messages", "/api/admin/polls", "/api/chat", "/api/menu"],
)
def test_non_numeric_event_id_is_a_bad_request(admin_user, path):
    resp = api_client_for(admin_user).get(path, {"eventId": "abc"})

    assert resp.status_code == HTTPStatus.BAD_REQUEST
    assert resp.data["error"] == "ID d'événement invalide"


def test_admin_reopens_a_poll(admin_user, event):
    poll = create_poll(event)
    client = api_client_for(admin_user)

    resp = client.patch(f"/api/admin/polls/{poll.pk}", {"isClosed": True}, format="json")
    assert resp.data["poll"]["isClosed"] is True
    assert resp.data["poll"]["closedAt"] is not None

    resp = client.patch(f"/api/admin/polls/{poll.pk}", {"isClosed": False}, format="json")
    assert resp.data["poll"]["isClosed"] is False
    assert resp.data["poll"]["closedAt"] is None

    resp = client.get("/api/admin/polls", {"eventId": event.pk + 1})
    assert resp.data == {"polls": []}


@pytest.mark.parametrize(
    ("payload", "message"),
    [
        ({}, "Paramètres manquants"),
        ({"action": "delete-file"}, "Paramètres manquants"),
        ({"action": "explode", "url": "/uploads/a.webp"}, "Action inconnue"),
        ({"action": "delete-file", "url": "https://example.com/a.webp"}, "URL invalide"),
    ],
)
def test_uploads_action_validation(admin_user, payload, message):
    resp = api_client_for(admin_user).post("/api/admin/uploads", payload, format="json")

    assert resp.status_code == HTTPStatus.BAD_REQUEST
    assert resp.data["error"] == message


def test_delete_file(admin_user):
    name = default_storage.save("photo.webp", ContentFile(b"webp"))
    client = api_client_for(admin_user)

    resp = client.post(
        "/api/admin/uploads",
        {"action": "delete-file", "url": f"/uploads/{name}"},
        format="json",
    )

    assert resp.data == {"success": True, "deleted": True}
    assert not default_storage.exists(name)


def test_moderate_image_clears_every_reference(
    admin_user,
    member,
    event,
    django_capture_on_commit_callbacks,
):
    name = default_storage.save("douteuse.webp", ContentFile(b"webp"))
    url = f"/uploads/{name}"
    message = ChatMessage.objects.create(event=event, user=member, content="Regardez")
    ChatMessageMedia.objects.create(message=message, image_url=url)
    contribution = create_contribution(event, image_url=url)
    Event.objects.filter(pk=event.pk).update(banner_image=url)

    with django_capture_on_commit_callbacks(execute=True):
        resp = api_client_for(admin_user).post(
            "/api/admin/uploads",
            {"action": "moderate-image", "url": url},
            format="json",
        )

    assert resp.data == {
        "success": True,
        "chatMediaDeleted": 1,
        "contributionsUpdated": 1,
        "pollsUpdated": 0,
        "eventsUpdated": 1,
    }
    contribution.refresh_from_db()
    assert contribution.image_url is None
    assert ChatMessage.objects.filter(pk=message.pk).exists()
    assert not default_storage.exists(name)


def test_delete_orphans_keeps_referenced_files(admin_user, event):
    kept = default_storage.save("gardee.webp", ContentFile(b"webp"))
    orphan = default_storage.save("orpheline.webp", ContentFile(b"webp"))
    create_contribution(event, image_url=f"/uploads/{kept}")

    resp = api_client_for(admin_user).post(
        "/api/admin/uploads",
        {"action": "delete-orphans"},
        format="json",
    )

    assert resp.data == {
        "success": True,
        "deletedCount": 1,
        "deleted": [f"/uploads/{orphan}"],
    }
    assert default_storage.exists(kept)
    assert Contribution.objects.count() == 1
