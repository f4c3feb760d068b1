"""Figures for the admin dashboard."""

from __future__ import annotations

import logging
import math
from pathlib import Path

from django.db import DatabaseError
from django.db import connection
from django.utils import timezone

from noel_famille.chat.models import ChatMessage
from noel_famille.chat.models import ChatMessageMedia
from noel_famille.contributions.models import Contribution
from noel_famille.events.models import Event
from noel_famille.events.models import EventCode
from noel_famille.events.models import EventCodeEvent
from noel_famille.events.models import EventUser
from noel_famille.menu.models import MenuIngredient
from noel_famille.menu.models import MenuRecipe
from noel_famille.polls.models import Poll
from noel_famille.polls.models import PollOption
from noel_famille.polls.models import PollVote
from noel_famille.tasks.models import Task
from noel_famille.uploads.storage import uploads_size
from noel_famille.users.models import RefreshToken
from noel_famille.users.models import User
from noel_famille.users.tokens import purge_stale_refresh_tokens

logger = logging.getLogger(__name__)

BYTE_UNITS = ["B", "KB", "MB", "GB"]
RECENT_PER_SOURCE = 10
RECENT_ACTIVITY_SIZE = 15
PREVIEW_LENGTH = 80


def format_bytes(size: int) -> str:
    """Human readable size with 1024 steps: ``1536`` gives ``"1.5 KB"``."""
    if size <= 0:
        return "0 B"
    exponent = min(int(math.log(size, 1024)), len(BYTE_UNITS) - 1)
    value = round(size / 1024**exponent, 2)
    return f"{value:g} {BYTE_UNITS[exponent]}"


def database_size() -> int | None:
    vendor = connection.vendor
    try:
        if vendor == "postgresql":
            with connection.cursor() as cursor:
                cursor.execute("SELECT pg_database_size(current_database())")
                return int(cursor.fetchone()[0])
        if vendor == "sqlite":
            name = connection.settings_dict.get("NAME")
            path = Path(str(name))
            return path.stat().st_size if path.is_file() else None
    except (DatabaseError, OSError):
        logger.warning("Could not measure the database size", exc_info=True)
    return None


def table_counts() -> dict[str, int]:
    now = timezone.now()
    tokens = RefreshToken.objects
    counts = {
        "totalEvents": Event.objects.count(),
        "activeEvents": Event.objects.filter(status=Event.Status.OPEN).count(),
        "totalUsers": User.objects.count(),
        "totalContributions": Contribution.objects.count(),
        "confirmedContributions": Contribution.objects.filter(
            status=Contribution.Status.BROUGHT,
        ).count(),
        "totalPolls": Poll.objects.count(),
        "closedPolls": Poll.objects.filter(is_closed=True).count(),
        "totalPollOptions": PollOption.objects.count(),
        "totalPollVotes": PollVote.objects.count(),
        "totalTasks": Task.objects.count(),
        "completedTasks": Task.objects.filter(status=Task.Status.DONE).count(),
        "totalMessages": ChatMessage.objects.count(),
        "totalMenuRecipes": MenuRecipe.objects.count(),
        "totalIngredients": MenuIngredient.objects.count(),
        "totalEventCodes": EventCode.objects.count(),
        "totalEventCodeEvents": EventCodeEvent.objects.count(),
        "totalEventUsers": EventUser.objects.count(),
        "totalRefreshTokens": tokens.count(),
        "activeRefreshTokens": tokens.live().count(),
        "expiredRefreshTokens": tokens.filter(expires_at__lt=now).count(),
        "revokedRefreshTokens": tokens.filter(revoked_at__isnull=False).count(),
        "totalChatMessageMedia": ChatMessageMedia.objects.count(),
    }
    counts["totalEntries"] = sum(
        counts[key]
        for key in (
            "totalEvents",
            "totalUsers",
            "totalContributions",
            "totalPolls",
            "totalPollOptions",
            "totalPollVotes",
            "totalTasks",
            "totalMessages",
            "totalChatMessageMedia",
            "totalMenuRecipes",
            "totalIngredients",
            "totalEventCodes",
            "totalEventCodeEvents",
            "totalEventUsers",
            "totalRefreshTokens",
        )
    )
    return counts


def _preview(text: str) -> str:
    if len(text) > PREVIEW_LENGTH:
        return f"{text[:PREVIEW_LENGTH]}..."
    return text


def _name(user) -> str | None:
    return user.name if user is not None else None


def recent_activity() -> list[dict]:
    """Newest chat messages, contributions, polls and tasks, merged."""
    activity = [
        {
            "type": "CHAT",
            "timestamp": message.created_at,
            "event": message.event.name,
            "user": _name(message.user),
            "title": "Message",
            "preview": _preview(message.content),
        }
        for message in ChatMessage.objects.select_related("event", "user").order_by(
            "-created_at",
        )[:RECENT_PER_SOURCE]
    ]
    activity.extend(
        {
            "type": "CONTRIBUTION",
            "timestamp": contribution.created_at,
            "event": contribution.event.name,
            "user": _name(contribution.assignee),
            "title": contribution.title,
            "preview": f"Statut: {contribution.status}",
        }
        for contribution in Contribution.objects.select_related(
            "event",
            "assignee",
        ).order_by("-created_at")[:RECENT_PER_SOURCE]
    )
    activity.extend(
        {
            "type": "POLL",
            "timestamp": poll.created_at,
            "event": poll.event.name,
            "user": _name(poll.created_by),
            "title": poll.title,
            "preview": "Fermé" if poll.is_closed else "Ouvert",
        }
        for poll in Poll.objects.select_related("event", "created_by").order_by(
            "-created_at",
        )[:RECENT_PER_SOURCE]
    )
    activity.extend(
        {
            "type": "TASK",
            "timestamp": task.created_at,
            "event": task.event.name,
            "user": _name(task.assignee) or _name(task.created_by),
            "title": task.title,
            "preview": f"Statut: {task.status}",
        }
        for task in Task.objects.select_related(
            "event",
            "assignee",
            "created_by",
        ).order_by("-created_at")[:RECENT_PER_SOURCE]
    )
    activity.sort(key=lambda item: item["timestamp"], reverse=True)
    return activity[:RECENT_ACTIVITY_SIZE]


def image_stats() -> dict:
    chat_images = ChatMessageMedia.objects.count()
    contribution_images = Contribution.objects.filter(image_url__isnull=False).count()
    poll_images = Poll.objects.filter(image_url__isnull=False).count()
    return {
        "totalImages": chat_images + contribution_images + poll_images,
        "imagesBreakdown": {
            "chatImages": chat_images,
            "contributionImages": contribution_images,
            "pollBanners": poll_images,
        },
    }


def collect_metrics() -> dict:
    purge_stale_refresh_tokens()
    counts = table_counts()
    uploads_bytes = uploads_size()
    db_bytes = database_size()
    return {
        "system": {
            "uploadsSize": format_bytes(uploads_bytes),
            "uploadsSizeBytes": uploads_bytes,
            "database": {
                "name": str(connection.settings_dict.get("NAME") or "") or None,
                "vendor": connection.vendor,
                "size": "—" if db_bytes is None else format_bytes(db_bytes),
                "sizeBytes": db_bytes,
            },
            **image_stats(),
            "timestamp": timezone.now().isoformat(),
        },
        "databaseStats": counts,
        "recentActivity": recent_activity(),
    }
