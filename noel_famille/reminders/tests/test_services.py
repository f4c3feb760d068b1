from datetime import timedelta
from unittest import mock

import pytest
from django.core import mail
from django.utils import timezone

from noel_famille.events.models import Event
from noel_famille.reminders.services import email_configured
from noel_famille.reminders.services import send_due_reminders
from noel_famille.reminders.tasks import send_due_reminders as send_due_reminders_task
from noel_famille.tasks.models import Task
from tests.shared.factories import create_event
from tests.shared.factories import create_task
from tests.shared.factories import create_user

pytestmark = pytest.mark.django_db


@pytest.fixture
def now():
    return timezone.now()


def test_task_due_tomorrow_is_sent_to_its_assignee(now):
    pierre = create_user("Pierre", email="pierre@famille.fr")
    event = create_event("Réveillon", date=now + timedelta(days=5), location="Chez Mamie")
    task = create_task(
        event,
        "Acheter le pain",
        assignee=pierre,
        due_date=now + timedelta(hours=3),
    )

    results = send_due_reminders(now)

    assert results == [{"type": "task", "taskId": task.pk, "recipient": "pierre@famille.fr"}]
    [sent] = mail.outbox
    assert sent.to == ["pierre@famille.fr"]
    assert sent.subject == "🎄 Rappel : Acheter le pain"
    assert "Bonjour Pierre," in sent.body
    assert "📍 Lieu : Chez Mamie" in sent.body
    html, mimetype = sent.alternatives[0]
    assert mimetype == "text/html"
    assert "Acheter le pain" in html


def test_tasks_outside_the_window_done_or_without_email_are_skipped(now):
    pierre = create_user("Pierre", email="pierre@famille.fr")
    event = create_event(date=now + timedelta(days=5))
    create_task(event, "Trop tard", assignee=pierre, due_date=now - timedelta(hours=1))
    create_task(event, "Trop tôt", assignee=pierre, due_date=now + timedelta(days=2))
    create_task(
        event,
        "Déjà fait",
        assignee=pierre,
        due_date=now + timedelta(hours=2),
        status=Task.Status.DONE,
    )
    create_task(event, "Personne", due_date=now + timedelta(hours=2))
    create_task(
        event,
        "Sans email",
        assignee=create_user("Lucas"),
        due_date=now + timedelta(hours=2),
    )

    assert send_due_reminders(now) == []
    assert mail.outbox == []


def test_event_starting_tomorrow_is_sent_to_members_with_email(now):
    mamie = create_user("Mamie", email="mamie@famille.fr")
    lucas = create_user("Lucas")
    event = create_event("Réveillon", members=[mamie, lucas], date=now + timedelta(hours=20))
    create_event(
        "Brouillon",
        members=[mamie],
        date=now + timedelta(hours=20),
        status=Event.Status.DRAFT,
    )

    results = send_due_reminders(now)

    assert results == [{"type": "event", "eventId": event.pk, "recipient": "mamie@famille.fr"}]
    assert mail.outbox[0].subject == "🎄 Rappel : Réveillon"


def test_nothing_is_sent_without_sender(settings, now):
    settings.DEFAULT_FROM_EMAIL = ""
    pierre = create_user("Pierre", email="pierre@famille.fr")
    create_task(create_event(), assignee=pierre, due_date=now + timedelta(hours=1))

    assert not email_configured()
    assert send_due_reminders(now) == []


def test_smtp_backend_needs_a_host(settings):
    settings.EMAIL_BACKEND = "django.core.mail.backends.smtp.EmailBackend"
    settings.EMAIL_HOST = ""

    assert not email_configured()


def test_failed_delivery_is_not_reported(now):
    pierre = create_user("Pierre", email="pierre@famille.fr")
    create_task(create_event(), assignee=pierre, due_date=now + timedelta(hours=1))

    with mock.patch(
        "noel_famille.reminders.services.send_mail",
        side_effect=ConnectionRefusedError,
    ):
        assert send_due_reminders(now) == []


def test_celery_task_returns_the_number_sent():
    pierre = create_user("Pierre", email="pierre@famille.fr")
    create_task(create_event(), assignee=pierre, due_date=timezone.now() + timedelta(hours=1))

    assert send_due_reminders_task() == 1
