from django.conf import settings
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


class Event(models.Model):
    class Status(models.TextChoices):
        DRAFT = "DRAFT", _("Brouillon")
        OPEN = "OPEN", _("Ouvert")
        CLOSED = "CLOSED", _("Fermé")

    name = models.CharField(max_length=100)
    description = models.TextField(blank=True, null=True)
    date = models.DateTimeField()
    end_date = models.DateTimeField(blank=True, null=True)
    location = models.CharField(max_length=200, blank=True, null=True)
    map_url = models.URLField(max_length=500, blank=True, null=True)
    banner_image = models.CharField(max_length=255, blank=True, null=True)
    status = models.CharField(
        max_length=10,
        choices=Status.choices,
        default=Status.OPEN,
    )
    participants = models.ManyToManyField(
        settings.AUTH_USER_MODEL,
        through="EventUser",
        related_name="events",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["date"]

    def __str__(self):
        return self.name

    @property
    def room(self) -> str:
        return f"event:{self.pk}"


class EventCode(models.Model):
    """Invite code granting access to one or more events."""

    code = models.CharField(max_length=30, unique=True)
    is_master = models.BooleanField(
        default=False,
        help_text=_("Grants access to every event that is not closed"),
    )
    is_active = models.BooleanField(default=True)
    expires_at = models.DateTimeField(blank=True, null=True)
    events = models.ManyToManyField(
        Event,
        through="EventCodeEvent",
        related_name="event_codes",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self):
        return self.code

    def save(self, *args, **kwargs):
        self.code = (self.code or "").strip().upper()
        super().save(*args, **kwargs)

    @property
    def is_expired(self) -> bool:
        return self.expires_at is not None and self.expires_at < timezone.now()

    def granted_events(self):
        """Events a user signing in with this code gets linked to."""
        if self.is_master:
            return Event.objects.exclude(status=Event.Status.CLOSED)
        return self.events.all()


class EventCodeEvent(models.Model):
    event_code = models.ForeignKey(
        EventCode,
        on_delete=models.CASCADE,
        related_name="event_links",
    )
    event = models.ForeignKey(
        Event,
        on_delete=models.CASCADE,
        related_name="code_links",
    )

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["event_code", "event"],
                name="unique_event_code_event",
            ),
        ]

    def __str__(self):  # pragma: no cover - trivial
        return f"{self.event_code_id} -> {self.event_id}"


class EventUser(models.Model):
    """Membership row: its existence grants a user access to an event."""

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="event_memberships",
    )
    event = models.ForeignKey(
        Event,
        on_delete=models.CASCADE,
        related_name="memberships",
    )
    joined_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["joined_at"]
        constraints = [
            models.UniqueConstraint(fields=["user", "event"], name="unique_event_user"),
        ]

    def __str__(self):  # pragma: no cover - trivial
        return f"{self.user_id} @ {self.event_id}"
