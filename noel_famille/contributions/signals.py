from django.db import transaction
from django.db.models.signals import post_delete
from django.db.models.signals import post_save
from django.dispatch import receiver

from noel_famille.realtime.events.event_updates import CREATED
from noel_famille.realtime.events.event_updates import DELETED
from noel_famille.realtime.events.event_updates import UPDATED
from noel_famille.realtime.events.event_updates import publish_contribution_update
from noel_famille.uploads.storage import delete_image_file

from .models import Contribution


@receiver(post_save, sender=Contribution)
def announce_contribution_saved(sender, instance, created, **kwargs):
    action = CREATED if created else UPDATED
    event_id, contribution_id = instance.event_id, instance.pk
    transaction.on_commit(
        lambda: publish_contribution_update(event_id, contribution_id, action),
    )


@receiver(post_delete, sender=Contribution)
def contribution_deleted(sender, instance, **kwargs):
    event_id, contribution_id = instance.event_id, instance.pk
    image_url = instance.image_url

    def after_commit():
        if image_url:
            delete_image_file(image_url)
        publish_contribution_update(event_id, contribution_id, DELETED)

    transaction.on_commit(after_commit)
