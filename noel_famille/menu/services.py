from django.db import transaction

from noel_famille.contributions.models import Contribution
from noel_famille.core.exceptions import ConflictError
from noel_famille.menu.models import MenuIngredient
from noel_famille.menu.models import MenuRecipe

ALREADY_CLAIMED = "Déjà pris"


def recipes_for_event(event_id):
    """Recipes oldest first, with ingredients and who brings them."""
    return (
        MenuRecipe.objects.filter(event_id=event_id)
        .order_by("created_at", "id")
        .prefetch_related("ingredients__contribution__assignee")
    )


def claim_description(ingredient: MenuIngredient) -> str:
    if ingredient.details:
        return f"{ingredient.recipe.title} — {ingredient.details}"
    return ingredient.recipe.title


@transaction.atomic
def claim_ingredient(ingredient: MenuIngredient, user) -> Contribution:
    """Make ``user`` responsible for bringing ``ingredient``."""
    ingredient = (
        MenuIngredient.objects.select_for_update()
        .select_related("recipe", "contribution")
        .get(pk=ingredient.pk)
    )
    current = ingredient.contribution
    if current is not None and current.assignee_id is not None:
        raise ConflictError(ALREADY_CLAIMED)

    contribution = Contribution.objects.create(
        event_id=ingredient.recipe.event_id,
        title=ingredient.name,
        description=claim_description(ingredient),
        category=Contribution.Category.INGREDIENT,
        quantity=1,
        status=Contribution.Status.CONFIRMED,
        assignee=user,
    )
    ingredient.contribution = contribution
    ingredient.save(update_fields=["contribution"])
    return contribution
