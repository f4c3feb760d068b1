"""Event-scoped authorization.

A user may read or change anything that belongs to an event when an
EventUser row links them to it, or when they are an admin.
"""

from __future__ import annotations

from rest_framework.exceptions import NotFound
from rest_framework.exceptions import PermissionDenied

from noel_famille.events.models import Event
from noel_famille.events.models import EventUser

EVENT_FORBIDDEN = "Accès non autorisé à cet événement"
EVENT_NOT_FOUND = "Événement non trouvé"


def has_event_access(user, event_id) -> bool:
    if getattr(user, "is_admin", False):
        return True
    if not getattr(user, "is_authenticated", False):
        return False
    try:
        event_id = int(event_id)
    except (TypeError, ValueError):
        return False
    return EventUser.objects.filter(user=user, event_id=event_id).exists()


def ensure_event_access(user, event_id) -> None:
    if not has_event_access(user, event_id):
        raise PermissionDenied(EVENT_FORBIDDEN)


def get_accessible_event(user, event_id) -> Event:
    """Load an event the user may access: 403 before 404, like membership."""
    ensure_event_access(user, event_id)
    try:
        return Event.objects.get(pk=event_id)
    except (Event.DoesNotExist, ValueError, TypeError) as exc:
        raise NotFound(EVENT_NOT_FOUND) from exc


def visible_events(user):
    if getattr(user, "is_admin", False):
        return Event.objects.all()
    # Subquery so that later Count annotations see every membership
    return Event.objects.filter(
        pk__in=EventUser.objects.filter(user=user).values("event_id"),
    )
