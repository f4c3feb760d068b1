from datetime import timedelta
from http import HTTPStatus

import pytest
from django.core.files.base import ContentFile
from django.core.files.storage import default_storage
from django.utils import timezone

from noel_famille.chat.models import ChatMessage
from noel_famille.chat.models import ChatMessageMedia
from tests.shared.factories import api_client_for

pytestmark = pytest.mark.django_db


def test_post_message_with_pictures(
    member, event, django_capture_on_commit_callbacks, realtime_emit
):
    with django_capture_on_commit_callbacks(execute=True):
        resp = api_client_for(member).post(
            "/api/chat",
            {
                "eventId": event.pk,
                "content": "Joyeux Noël ! 🎄",
                "imageUrls": ["/uploads/sapin.webp"],
            },
            format="json",
        )

    assert resp.status_code == HTTPStatus.CREATED
    message = resp.data["message"]
    assert message["user"]["name"] == "Marie"
    assert [m["imageUrl"] for m in message["media"]] == ["/uploads/sapin.webp"]

    realtime_emit.assert_called_once()
    event_id, name, payload = realtime_emit.call_args.args
    assert (event_id, name) == (event.pk, "new-message")
    assert payload["message"]["media"][0]["imageUrl"] == "/uploads/sapin.webp"


def test_empty_message_is_refused(member, event):
    resp = api_client_for(member).post(
        "/api/chat",
        {"eventId": event.pk, "content": ""},
        format="json",
    )

    assert resp.status_code == HTTPStatus.BAD_REQUEST


def test_outsider_cannot_post(outsider, event):
    resp = api_client_for(outsider).post(
        "/api/chat",
        {"eventId": event.pk, "content": "Coucou"},
        format="json",
    )

    assert resp.status_code == HTTPStatus.FORBIDDEN
    assert not ChatMessage.objects.exists()


def test_history_is_oldest_first(member, event):
    start = timezone.now() - timedelta(hours=1)
    for i in range(3):
        message = ChatMessage.objects.create(event=event, user=member, content=f"Message {i}")
        ChatMessage.objects.filter(pk=message.pk).update(created_at=start + timedelta(minutes=i))

    resp = api_client_for(member).get("/api/chat", {"eventId": event.pk})

    assert resp.status_code == HTTPStatus.OK
    assert [m["content"] for m in resp.data["messages"]] == [
        "Message 0",
        "Message 1",
        "Message 2",
    ]


def test_history_requires_event_id(member):
    resp = api_client_for(member).get("/api/chat")

    assert resp.status_code == HTTPStatus.BAD_REQUEST
    assert resp.data["error"] == "ID d'événement requis"


def test_deleting_a_message_removes_its_pictures(member, event, django_capture_on_commit_callbacks):
    name = default_storage.save("photo.webp", ContentFile(b"webp"))
    message = ChatMessage.objects.create(event=event, user=member, content="Regardez !")
    ChatMessageMedia.objects.create(message=message, image_url=f"/uploads/{name}")

    with django_capture_on_commit_callbacks(execute=True):
        message.delete()

    assert not default_storage.exists(name)
