from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _


class Contribution(models.Model):
    """Something a family member brings: a dish, drinks, decorations..."""

    class Category(models.TextChoices):
        PLAT = "plat", _("Plat")
        BOISSON = "boisson", _("Boisson")
        DECOR = "décor", _("Décor")
        AUTRE = "autre", _("Autre")
        INGREDIENT = "ingredient", _("Ingrédient")

    class Status(models.TextChoices):
        PLANNED = "PLANNED", _("Prévu")
        CONFIRMED = "CONFIRMED", _("Confirmé")
        BROUGHT = "BROUGHT", _("Apporté")

    event = models.ForeignKey(
        "events.Event",
        on_delete=models.CASCADE,
        related_name="contributions",
    )
    title = models.CharField(max_length=200)
    description = models.TextField(blank=True, null=True)
    category = models.CharField(
        max_length=20,
        choices=Category.choices,
        blank=True,
        null=True,
    )
    quantity = models.PositiveIntegerField(default=1)
    budget = models.DecimalField(max_digits=10, decimal_places=2, blank=True, null=True)
    status = models.CharField(
        max_length=10,
        choices=Status.choices,
        default=Status.PLANNED,
    )
    image_url = models.CharField(max_length=500, blank=True, null=True)
    assignee = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="contributions",
    )
    from_poll = models.ForeignKey(
        "polls.Poll",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="generated_contributions",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self):
        return self.title
