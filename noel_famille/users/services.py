"""Invite-code sign-in.

There are no passwords: presenting a valid, active, unexpired event code is
enough to claim a display name. The user is found by name (case-insensitive)
or created, and linked to the events the code grants.
"""

from __future__ import annotations

import logging

from django.db import transaction
from rest_framework.exceptions import AuthenticationFailed

from noel_famille.events.models import EventCode
from noel_famille.events.models import EventUser
from noel_famille.users.models import User

logger = logging.getLogger(__name__)

INVALID_EVENT_CODE = "Code d'événement invalide ou expiré"
EXPIRED_EVENT_CODE = "Ce code d'événement a expiré"


def get_or_create_user_by_name(name: str) -> User:
    user = User.objects.filter(name__iexact=name).order_by("id").first()
    if user is None:
        user = User(name=name, role=User.Role.USER)
        user.set_unusable_password()
        user.save()
        logger.info("Created user %s on first sign-in", user.pk)
    return user


def link_user_to_events(user: User, events) -> int:
    """Create the missing memberships; returns how many events were granted."""
    rows = [EventUser(user=user, event=event) for event in events]
    EventUser.objects.bulk_create(rows, ignore_conflicts=True)
    return len(rows)


@transaction.atomic
def login_with_event_code(name: str, code: str) -> User:
    event_code = (
        EventCode.objects.filter(code=code.strip().upper(), is_active=True)
        .prefetch_related("events")
        .first()
    )
    if event_code is None:
        raise AuthenticationFailed(INVALID_EVENT_CODE)
    if event_code.is_expired:
        raise AuthenticationFailed(EXPIRED_EVENT_CODE)

    user = get_or_create_user_by_name(name.strip())
    granted = link_user_to_events(user, event_code.granted_events())
    logger.info(
        "User %s signed in with code %s (%s events)",
        user.pk,
        event_code.code,
        granted,
    )
    return user
