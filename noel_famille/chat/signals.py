from django.db import transaction
from django.db.models.signals import post_delete
from django.db.models.signals import post_save
from django.dispatch import receiver

from noel_famille.realtime.events.event_updates import publish_new_message
from noel_famille.uploads.storage import delete_image_file

from .models import ChatMessage
from .models import ChatMessageMedia


@receiver(post_save, sender=ChatMessage)
def announce_new_message(sender, instance, created, **kwargs):
    if created:
        # Serialised after commit so the media rows are included
        transaction.on_commit(lambda: publish_new_message(instance))


@receiver(post_delete, sender=ChatMessageMedia)
def media_deleted(sender, instance, **kwargs):
    image_url = instance.image_url
    transaction.on_commit(lambda: delete_image_file(image_url))
