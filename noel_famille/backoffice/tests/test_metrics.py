from datetime import timedelta

import pytest
from django.core.files.base import ContentFile
from django.core.files.storage import default_storage
from django.utils import timezone

from noel_famille.backoffice.metrics import collect_metrics
from noel_famille.backoffice.metrics import format_bytes
from noel_famille.backoffice.metrics import recent_activity
from noel_famille.chat.models import ChatMessage
from noel_famille.contributions.models import Contribution
from noel_famille.users.models import RefreshToken
from noel_famille.users.tokens import issue_token_pair
from tests.shared.factories import create_contribution
from tests.shared.factories import create_poll
from tests.shared.factories import create_task


@pytest.mark.parametrize(
    ("size", "expected"),
    [
        (0, "0 B"),
        (-5, "0 B"),
        (512, "512 B"),
        (1024, "1 KB"),
        (1536, "1.5 KB"),
        (5 * 1024**2, "5 MB"),
        (3 * 1024**4, "3072 GB"),
    ],
)
def test_format_bytes(size, expected):
    assert format_bytes(size) == expected


@pytest.mark.django_db
def test_collect_metrics(member, event):
    create_contribution(event, status=Contribution.Status.BROUGHT, image_url="/uploads/a.webp")
    create_contribution(event, "Huîtres")
    create_poll(event, is_closed=True)
    create_task(event)
    default_storage.save("a.webp", ContentFile(b"x" * 2048))

    expired = issue_token_pair(member)
    RefreshToken.objects.filter(token=expired.refresh).update(
        expires_at=timezone.now() - timedelta(days=1),
    )
    issue_token_pair(member)

    metrics = collect_metrics()

    stats = metrics["databaseStats"]
    assert stats["totalEvents"] == 1
    assert stats["activeEvents"] == 1
    assert stats["totalUsers"] == 2
    assert stats["totalContributions"] == 2
    assert stats["confirmedContributions"] == 1
    assert stats["closedPolls"] == 1
    assert stats["totalPollOptions"] == 2
    # The expired token was purged before counting
    assert stats["totalRefreshTokens"] == 1
    assert stats["activeRefreshTokens"] == 1

    system = metrics["system"]
    assert system["uploadsSizeBytes"] == 2048
    assert system["uploadsSize"] == "2 KB"
    assert system["totalImages"] == 1
    assert system["imagesBreakdown"] == {
        "chatImages": 0,
        "contributionImages": 1,
        "pollBanners": 0,
    }
    assert system["database"]["vendor"]


@pytest.mark.django_db
def test_recent_activity_is_newest_first_and_capped(member, event):
    now = timezone.now()
    for i in range(12):
        message = ChatMessage.objects.create(event=event, user=member, content="x" * 100)
        ChatMessage.objects.filter(pk=message.pk).update(created_at=now - timedelta(minutes=i))
    for i in range(8):
        contribution = create_contribution(event, f"Plat {i}")
        Contribution.objects.filter(pk=contribution.pk).update(
            created_at=now - timedelta(minutes=i, seconds=30),
        )

    activity = recent_activity()

    assert len(activity) == 15
    timestamps = [item["timestamp"] for item in activity]
    assert timestamps == sorted(timestamps, reverse=True)
    chat = activity[0]
    assert chat["type"] == "CHAT"
    assert chat["preview"] == "x" * 80 + "..."
    assert chat["user"] == "Marie"
    assert chat["event"] == event.name
