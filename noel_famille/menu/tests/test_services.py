import pytest

from noel_famille.contributions.models import Contribution
from noel_famille.core.exceptions import ConflictError
from noel_famille.menu.models import MenuRecipe
from noel_famille.menu.services import claim_ingredient
from tests.shared.factories import create_event
from tests.shared.factories import create_user

pytestmark = pytest.mark.django_db


@pytest.fixture
def recipe():
    return MenuRecipe.objects.create(event=create_event(), title="Bûche pâtissière")


def test_claim_creates_a_confirmed_ingredient_contribution(recipe, member):
    ingredient = recipe.ingredients.create(name="Chocolat noir", details="200 g")

    contribution = claim_ingredient(ingredient, member)

    assert contribution.event_id == recipe.event_id
    assert contribution.title == "Chocolat noir"
    assert contribution.description == "Bûche pâtissière — 200 g"
    assert contribution.category == Contribution.Category.INGREDIENT
    assert contribution.status == Contribution.Status.CONFIRMED
    assert contribution.assignee == member
    ingredient.refresh_from_db()
    assert ingredient.contribution == contribution


def test_claim_without_details_uses_recipe_title(recipe, member):
    ingredient = recipe.ingredients.create(name="Marrons glacés")

    assert claim_ingredient(ingredient, member).description == "Bûche pâtissière"


def test_already_claimed_ingredient_is_a_conflict(recipe, member):
    ingredient = recipe.ingredients.create(name="Crème liquide")
    claim_ingredient(ingredient, create_user("Pierre"))

    with pytest.raises(ConflictError):
        claim_ingredient(ingredient, member)

    assert Contribution.objects.count() == 1


def test_claim_is_free_again_once_the_contribution_is_gone(recipe, member):
    ingredient = recipe.ingredients.create(name="Crème liquide")
    claim_ingredient(ingredient, create_user("Pierre")).delete()

    contribution = claim_ingredient(ingredient, member)

    assert contribution.assignee == member
