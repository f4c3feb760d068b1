from django.db import transaction
from django.db.models.signals import post_delete
from django.db.models.signals import post_save
from django.dispatch import receiver

from noel_famille.realtime.events.event_updates import CREATED
from noel_famille.realtime.events.event_updates import DELETED
from noel_famille.realtime.events.event_updates import UPDATED
from noel_famille.realtime.events.event_updates import publish_task_update

from .models import Task


@receiver(post_save, sender=Task)
def announce_task_saved(sender, instance, created, **kwargs):
    action = CREATED if created else UPDATED
    event_id, task_id = instance.event_id, instance.pk
    transaction.on_commit(lambda: publish_task_update(event_id, task_id, action))


@receiver(post_delete, sender=Task)
def announce_task_deleted(sender, instance, **kwargs):
    event_id, task_id = instance.event_id, instance.pk
    transaction.on_commit(lambda: publish_task_update(event_id, task_id, DELETED))
