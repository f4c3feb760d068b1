from unittest import mock

import pytest
from django.core.cache import cache

from tests.shared.factories import create_admin
from tests.shared.factories import create_event
from tests.shared.factories import create_user


@pytest.fixture(autouse=True)
def _media_storage(settings, tmp_path):
    settings.MEDIA_ROOT = str(tmp_path / "uploads")


@pytest.fixture(autouse=True)
def _clear_cache():
    # Login throttling counts live in the cache
    cache.clear()
    yield
    cache.clear()


@pytest.fixture(autouse=True)
def realtime_emit():
    with mock.patch(
        "noel_famille.realtime.events.event_updates.emit_event_to_event_room",
    ) as emit:
        yield emit


@pytest.fixture
def member(db):
    return create_user("Marie")


@pytest.fixture
def outsider(db):
    return create_user("Voisin")


@pytest.fixture
def admin_user(db):
    return create_admin()


@pytest.fixture
def event(member, admin_user):
    return create_event(members=[member, admin_user])
