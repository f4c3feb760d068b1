"""Housekeeping of the uploads directory."""

from __future__ import annotations

import logging
from dataclasses import asdict
from dataclasses import dataclass

from django.db import transaction

from noel_famille.chat.models import ChatMessageMedia
from noel_famille.contributions.models import Contribution
from noel_famille.events.models import Event
from noel_famille.polls.models import Poll
from noel_famille.uploads.storage import delete_image_file
from noel_famille.uploads.storage import list_uploaded_files
from noel_famille.uploads.storage import url_for

logger = logging.getLogger(__name__)


@dataclass
class ModerationResult:
    chatMediaDeleted: int  # noqa: N815
    contributionsUpdated: int  # noqa: N815
    pollsUpdated: int  # noqa: N815
    eventsUpdated: int  # noqa: N815

    def as_dict(self) -> dict[str, int]:
        return asdict(self)


def referenced_upload_urls() -> set[str]:
    urls: set[str] = set()
    urls.update(ChatMessageMedia.objects.values_list("image_url", flat=True))
    urls.update(
        Contribution.objects.exclude(image_url__isnull=True).values_list(
            "image_url",
            flat=True,
        ),
    )
    urls.update(
        Poll.objects.exclude(image_url__isnull=True).values_list("image_url", flat=True),
    )
    urls.update(
        Event.objects.exclude(banner_image__isnull=True).values_list(
            "banner_image",
            flat=True,
        ),
    )
    return {url for url in urls if url}


@transaction.atomic
def moderate_image(url: str) -> ModerationResult:
    """Drop every reference to ``url`` but keep the content around it."""
    chat_media_deleted, _ = ChatMessageMedia.objects.filter(image_url=url).delete()
    result = ModerationResult(
        chatMediaDeleted=chat_media_deleted,
        contributionsUpdated=Contribution.objects.filter(image_url=url).update(
            image_url=None,
        ),
        pollsUpdated=Poll.objects.filter(image_url=url).update(image_url=None),
        eventsUpdated=Event.objects.filter(banner_image=url).update(banner_image=None),
    )
    transaction.on_commit(lambda: delete_image_file(url))
    logger.info("Moderated image %s: %s", url, result)
    return result


def delete_orphans() -> list[str]:
    """Remove uploaded files nothing in the database points at."""
    referenced = referenced_upload_urls()
    deleted = []
    for filename in list_uploaded_files():
        url = url_for(filename)
        if url not in referenced and delete_image_file(url):
            deleted.append(url)
    if deleted:
        logger.info("Deleted %s orphan upload(s)", len(deleted))
    return deleted
