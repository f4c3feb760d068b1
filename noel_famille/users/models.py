from uuid import uuid4

from django.contrib.auth.models import AbstractUser
from django.db import models
from django.db.models import CharField
from django.db.models import EmailField
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


class User(AbstractUser):
    """
    Family member. Users sign in with a display name and an event invite
    code, so ``username`` is only an internal handle and no password is set.
    """

    class Role(models.TextChoices):
        USER = "USER", _("Utilisateur")
        ADMIN = "ADMIN", _("Administrateur")

    name = CharField(_("Display name"), max_length=50)
    email = EmailField(_("email address"), unique=True, null=True, blank=True)
    # Emoji avatar
    avatar = CharField(_("Avatar"), max_length=10, null=True, blank=True)
    role = CharField(max_length=10, choices=Role.choices, default=Role.USER)
    first_name = None  # type: ignore[assignment]
    last_name = None  # type: ignore[assignment]
    # Audit timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]

    def __str__(self) -> str:
        return self.name or self.username

    def save(self, *args, **kwargs):
        if not self.username:
            self.username = f"user-{uuid4().hex[:12]}"
        # Empty strings would collide on the unique constraint
        if not self.email:
            self.email = None
        # Django admin access follows the role; superusers keep it
        self.is_staff = self.is_superuser or self.role == self.Role.ADMIN
        super().save(*args, **kwargs)

    @property
    def is_admin(self) -> bool:
        return self.role == self.Role.ADMIN


class RefreshTokenQuerySet(models.QuerySet):
    def live(self):
        return self.filter(revoked_at__isnull=True, expires_at__gt=timezone.now())

    def stale(self):
        return self.filter(
            models.Q(expires_at__lt=timezone.now()) | models.Q(revoked_at__isnull=False)
        )


class RefreshToken(models.Model):
    """Server-side record of an issued refresh token."""

    token = models.CharField(max_length=1024, unique=True)
    user = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name="refresh_tokens",
    )
    expires_at = models.DateTimeField()
    revoked_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    objects = RefreshTokenQuerySet.as_manager()

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["user", "expires_at"], name="refresh_token_user_exp_idx"),
        ]

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"RefreshToken({self.user_id}, revoked={self.revoked_at is not None})"
