from datetime import timedelta
from http import HTTPStatus

import pytest
from django.utils import timezone

from tests.shared.factories import api_client_for
from tests.shared.factories import create_event
from tests.shared.factories import create_task
from tests.shared.factories import create_user

pytestmark = pytest.mark.django_db


def test_requires_the_cron_secret(member):
    resp = api_client_for(member).get("/api/reminders/send")

    assert resp.status_code == HTTPStatus.UNAUTHORIZED
    assert resp.data == {"error": "Non autorisé"}


def test_sends_due_reminders():
    pierre = create_user("Pierre", email="pierre@famille.fr")
    task = create_task(
        create_event(),
        assignee=pierre,
        due_date=timezone.now() + timedelta(hours=2),
    )
    client = api_client_for(None)
    client.credentials(HTTP_AUTHORIZATION="Bearer test-cron-secret")

    resp = client.get("/api/reminders/send")

    assert resp.status_code == HTTPStatus.OK
    assert resp.data == {
        "success": True,
        "sent": 1,
        "results": [{"type": "task", "taskId": task.pk, "recipient": "pierre@famille.fr"}],
    }
