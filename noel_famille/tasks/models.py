from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _


class TaskQuerySet(models.QuerySet):
    def visible_to(self, user):
        """Private tasks only show up for admins, their creator and assignee."""
        if getattr(user, "is_admin", False):
            return self
        return self.filter(
            models.Q(is_private=False)
            | models.Q(created_by=user)
            | models.Q(assignee=user),
        )


class Task(models.Model):
    class Status(models.TextChoices):
        TODO = "TODO", _("À faire")
        IN_PROGRESS = "IN_PROGRESS", _("En cours")
        DONE = "DONE", _("Terminé")

    event = models.ForeignKey(
        "events.Event",
        on_delete=models.CASCADE,
        related_name="tasks",
    )
    title = models.CharField(max_length=100)
    description = models.TextField(blank=True, null=True)
    is_private = models.BooleanField(
        default=False,
        help_text=_("Only visible to admins, the creator and the assignee"),
    )
    status = models.CharField(max_length=15, choices=Status.choices, default=Status.TODO)
    due_date = models.DateTimeField(blank=True, null=True)
    assignee = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="assigned_tasks",
    )
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="created_tasks",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = TaskQuerySet.as_manager()

    class Meta:
        ordering = ["-created_at"]

    def __str__(self):
        return self.title

    def is_involved(self, user) -> bool:
        """Admin, creator or assignee."""
        if getattr(user, "is_admin", False):
            return True
        return user.pk is not None and user.pk in (self.created_by_id, self.assignee_id)
