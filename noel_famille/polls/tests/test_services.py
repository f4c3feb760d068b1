from datetime import timedelta

import pytest
from django.utils import timezone
from rest_framework.exceptions import ValidationError

from noel_famille.contributions.models import Contribution
from noel_famille.polls.models import Poll
from noel_famille.polls.models import PollVote
from noel_famille.polls.services import INVALID_OPTION
from noel_famille.polls.services import OPTION_REQUIRED
from noel_famille.polls.services import POLL_ALREADY_CLOSED
from noel_famille.polls.services import POLL_CLOSED
from noel_famille.polls.services import SINGLE_CHOICE_ONLY
from noel_famille.polls.services import auto_close_due_polls
from noel_famille.polls.services import cast_vote
from noel_famille.polls.services import close_poll
from noel_famille.polls.services import ranked_options
from noel_famille.polls.tasks import auto_close_due_polls as auto_close_task
from tests.shared.factories import create_event
from tests.shared.factories import create_poll
from tests.shared.factories import create_user

pytestmark = pytest.mark.django_db


@pytest.fixture
def family():
    return [create_user(name) for name in ("Marie", "Pierre", "Lucas", "Emma")]


def _vote(poll, label, *users):
    option = poll.options.get(label=label)
    for user in users:
        PollVote.objects.create(poll=poll, option=option, user=user)


def test_ranking_keeps_option_order_among_ties(family):
    poll = create_poll(create_event(), labels=("Bûche", "Tarte", "Paris-Brest"))
    _vote(poll, "Paris-Brest", family[0], family[1])
    _vote(poll, "Tarte", family[2])
    _vote(poll, "Bûche", family[3])

    assert [o.label for o in ranked_options(poll)] == ["Paris-Brest", "Bûche", "Tarte"]


def test_close_turns_the_two_best_options_into_contributions(family):
    poll = create_poll(create_event(), labels=("Bûche", "Tarte", "Paris-Brest"))
    _vote(poll, "Tarte", *family[:3])
    _vote(poll, "Paris-Brest", family[3])
    _vote(poll, "Bûche", family[0])

    result = close_poll(poll)

    assert [c.title for c in result.contributions] == ["Tarte", "Bûche"]
    contribution = result.contributions[0]
    assert contribution.from_poll_id == poll.pk
    assert contribution.status == Contribution.Status.PLANNED
    assert contribution.category == Contribution.Category.AUTRE
    assert contribution.description == 'Ajouté automatiquement depuis le sondage: "Quel dessert ?"'
    assert result.poll.is_closed
    assert result.poll.closed_at is not None
    assert result.message == "Sondage fermé. 2 contribution(s) ajoutée(s) automatiquement."


def test_options_without_votes_are_not_kept(family):
    poll = create_poll(create_event())
    _vote(poll, "Tarte", family[0])

    assert [c.title for c in close_poll(poll).contributions] == ["Tarte"]


def test_closing_a_poll_without_votes(family):
    result = close_poll(create_poll(create_event()))

    assert result.contributions == []
    assert result.message == "Sondage fermé. Aucune contribution ajoutée (pas de votes)."


def test_poll_cannot_be_closed_twice():
    poll = create_poll(create_event())
    close_poll(poll)

    with pytest.raises(ValidationError) as excinfo:
        close_poll(poll)

    assert excinfo.value.detail == [POLL_ALREADY_CLOSED]


def test_vote_replaces_previous_ballot(member):
    poll = create_poll(create_event(), labels=("A", "B", "C"), type=Poll.Type.MULTIPLE)
    a, b, c = poll.options.all()

    cast_vote(poll, member, [a.pk, b.pk])
    cast_vote(poll, member, [c.pk, c.pk])

    assert list(PollVote.objects.filter(user=member).values_list("option_id", flat=True)) == [
        c.pk,
    ]


@pytest.mark.parametrize(
    ("option_ids", "message"),
    [
        ([], OPTION_REQUIRED),
        (None, OPTION_REQUIRED),
        ("1", OPTION_REQUIRED),
        (["x"], INVALID_OPTION),
        ([999_999], INVALID_OPTION),
    ],
)
def test_invalid_ballots(member, option_ids, message):
    poll = create_poll(create_event())

    with pytest.raises(ValidationError) as excinfo:
        cast_vote(poll, member, option_ids)

    assert excinfo.value.detail == [message]


def test_single_choice_poll_accepts_one_option(member):
    poll = create_poll(create_event())

    with pytest.raises(ValidationError) as excinfo:
        cast_vote(poll, member, list(poll.options.values_list("pk", flat=True)))

    assert excinfo.value.detail == [SINGLE_CHOICE_ONLY]


def test_closed_poll_refuses_votes(member):
    poll = create_poll(create_event(), is_closed=True)

    with pytest.raises(ValidationError) as excinfo:
        cast_vote(poll, member, [poll.options.first().pk])

    assert excinfo.value.detail == [POLL_CLOSED]


def test_auto_close_only_touches_due_polls():
    event = create_event()
    now = timezone.now()
    due = create_poll(event, auto_close=now - timedelta(minutes=1))
    later = create_poll(event, auto_close=now + timedelta(hours=1))
    manual = create_poll(event)

    closed = auto_close_due_polls(now)

    assert [poll.pk for poll in closed] == [due.pk]
    due.refresh_from_db()
    assert due.is_closed
    assert due.closed_at == now
    assert not Contribution.objects.exists()
    for poll in (later, manual):
        poll.refresh_from_db()
        assert not poll.is_closed


def test_celery_task_reports_closed_polls():
    event = create_event()
    create_poll(event, auto_close=timezone.now() - timedelta(minutes=5))
    create_poll(event)

    assert auto_close_task() == 1
    assert Poll.objects.filter(is_closed=True).count() == 1
