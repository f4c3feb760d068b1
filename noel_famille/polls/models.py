from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _


class PollQuerySet(models.QuerySet):
    def open(self):
        return self.filter(is_closed=False)

    def due_for_auto_close(self, now):
        return self.open().filter(auto_close__isnull=False, auto_close__lte=now)

    def with_vote_details(self):
        return self.select_related("created_by").prefetch_related(
            "options__votes__user",
            "votes",
        )


class Poll(models.Model):
    class Type(models.TextChoices):
        SINGLE = "SINGLE", _("Choix unique")
        MULTIPLE = "MULTIPLE", _("Choix multiple")

    event = models.ForeignKey(
        "events.Event",
        on_delete=models.CASCADE,
        related_name="polls",
    )
    title = models.CharField(max_length=200)
    description = models.TextField(blank=True, null=True)
    type = models.CharField(max_length=10, choices=Type.choices, default=Type.SINGLE)
    image_url = models.CharField(max_length=500, blank=True, null=True)
    is_closed = models.BooleanField(default=False)
    closed_at = models.DateTimeField(blank=True, null=True)
    auto_close = models.DateTimeField(
        blank=True,
        null=True,
        help_text=_("Close automatically once this moment has passed"),
    )
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="created_polls",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    objects = PollQuerySet.as_manager()

    class Meta:
        ordering = ["-created_at"]

    def __str__(self):
        return self.title


class PollOption(models.Model):
    poll = models.ForeignKey(Poll, on_delete=models.CASCADE, related_name="options")
    label = models.CharField(max_length=100)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        # Creation order breaks ties when tallying
        ordering = ["id"]

    def __str__(self):
        return self.label


class PollVote(models.Model):
    poll = models.ForeignKey(Poll, on_delete=models.CASCADE, related_name="votes")
    option = models.ForeignKey(
        PollOption,
        on_delete=models.CASCADE,
        related_name="votes",
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="poll_votes",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at"]
        constraints = [
            models.UniqueConstraint(fields=["option", "user"], name="unique_poll_vote"),
        ]

    def __str__(self):  # pragma: no cover - trivial
        return f"{self.user_id} -> {self.option_id}"
