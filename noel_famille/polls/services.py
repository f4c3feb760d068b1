"""Voting and closing rules for polls.

Closing a poll turns its most popular answers into planned contributions:
options are ranked by vote count (ties keep creation order), the first two
are kept and any of those without a single vote is dropped.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from dataclasses import field

from django.db import transaction
from django.db.models import Count
from django.utils import timezone
from rest_framework.exceptions import ValidationError

from noel_famille.contributions.models import Contribution
from noel_famille.polls.models import Poll
from noel_famille.polls.models import PollOption
from noel_famille.polls.models import PollVote
from noel_famille.realtime.events.event_updates import UPDATED
from noel_famille.realtime.events.event_updates import publish_poll_update

logger = logging.getLogger(__name__)

OPTION_REQUIRED = "Au moins une option est requise"
POLL_CLOSED = "Ce sondage est fermé"
POLL_ALREADY_CLOSED = "Ce sondage est déjà fermé"
SINGLE_CHOICE_ONLY = "Une seule option autorisée pour ce sondage"
INVALID_OPTION = "Option invalide"

CONTRIBUTIONS_PER_CLOSE = 2


@dataclass
class ClosedPoll:
    poll: Poll
    contributions: list[Contribution] = field(default_factory=list)

    @property
    def message(self) -> str:
        if self.contributions:
            return (
                f"Sondage fermé. {len(self.contributions)} contribution(s) "
                "ajoutée(s) automatiquement."
            )
        return "Sondage fermé. Aucune contribution ajoutée (pas de votes)."


def ranked_options(poll: Poll) -> list[PollOption]:
    """Options by vote count, highest first; equal counts keep option order."""
    options = list(
        poll.options.annotate(vote_count=Count("votes")).order_by("id"),
    )
    # sorted() is stable, so creation order survives among ties
    return sorted(options, key=lambda option: option.vote_count, reverse=True)


def winning_options(poll: Poll) -> list[PollOption]:
    top = ranked_options(poll)[:CONTRIBUTIONS_PER_CLOSE]
    return [option for option in top if option.vote_count > 0]


@transaction.atomic
def close_poll(poll: Poll) -> ClosedPoll:
    poll = Poll.objects.select_for_update().get(pk=poll.pk)
    if poll.is_closed:
        raise ValidationError(POLL_ALREADY_CLOSED)

    contributions = [
        Contribution.objects.create(
            event_id=poll.event_id,
            title=option.label,
            description=f'Ajouté automatiquement depuis le sondage: "{poll.title}"',
            category=Contribution.Category.AUTRE,
            quantity=1,
            status=Contribution.Status.PLANNED,
            from_poll=poll,
        )
        for option in winning_options(poll)
    ]

    poll.is_closed = True
    poll.closed_at = timezone.now()
    poll.save(update_fields=["is_closed", "closed_at"])
    logger.info(
        "Closed poll %s with %s generated contribution(s)",
        poll.pk,
        len(contributions),
    )
    return ClosedPoll(poll=poll, contributions=contributions)


def auto_close_due_polls(now=None) -> list[Poll]:
    """Mark every open poll whose auto-close moment has passed as closed."""
    now = now or timezone.now()
    due = list(Poll.objects.due_for_auto_close(now).only("id", "title", "event_id"))
    if not due:
        return []
    Poll.objects.filter(pk__in=[poll.pk for poll in due], is_closed=False).update(
        is_closed=True,
        closed_at=now,
    )
    for poll in due:
        transaction.on_commit(
            lambda p=poll: publish_poll_update(p.event_id, p.pk, UPDATED),
        )
    logger.info("Auto-closed %s poll(s)", len(due))
    return due


def _ensure_open(poll: Poll) -> None:
    if poll.is_closed:
        raise ValidationError(POLL_CLOSED)


@transaction.atomic
def cast_vote(poll: Poll, user, option_ids) -> list[int]:
    """Replace the user's ballot on ``poll`` with ``option_ids``."""
    if not option_ids or not isinstance(option_ids, (list, tuple)):
        raise ValidationError(OPTION_REQUIRED)
    _ensure_open(poll)
    if poll.type == Poll.Type.SINGLE and len(option_ids) > 1:
        raise ValidationError(SINGLE_CHOICE_ONLY)

    try:
        wanted = list(dict.fromkeys(int(option_id) for option_id in option_ids))
    except (TypeError, ValueError) as exc:
        raise ValidationError(INVALID_OPTION) from exc
    valid = set(poll.options.filter(pk__in=wanted).values_list("pk", flat=True))
    if any(option_id not in valid for option_id in wanted):
        raise ValidationError(INVALID_OPTION)

    PollVote.objects.filter(poll=poll, user=user).delete()
    PollVote.objects.bulk_create(
        [PollVote(poll=poll, option_id=option_id, user=user) for option_id in wanted],
    )
    return wanted


def remove_votes(poll: Poll, user) -> int:
    _ensure_open(poll)
    deleted, _ = PollVote.objects.filter(poll=poll, user=user).delete()
    return deleted


@transaction.atomic
def replace_options(poll: Poll, labels: list[str]) -> None:
    """Swap every option of ``poll``; existing votes go with the old options."""
    poll.options.all().delete()
    PollOption.objects.bulk_create(
        [PollOption(poll=poll, label=label) for label in labels],
    )
