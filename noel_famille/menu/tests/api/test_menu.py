from http import HTTPStatus

import pytest

from noel_famille.menu.models import MenuIngredient
from noel_famille.menu.models import MenuRecipe
from tests.shared.factories import api_client_for
from tests.shared.factories import create_user

pytestmark = pytest.mark.django_db


@pytest.fixture
def recipe(event):
    recipe = MenuRecipe.objects.create(event=event, title="Bûche pâtissière")
    recipe.ingredients.create(name="Chocolat noir", details="200 g")
    return recipe


def test_create_recipe_and_add_ingredient(member, event):
    client = api_client_for(member)

    resp = client.post(
        "/api/menu",
        {"eventId": event.pk, "title": "Dinde aux marrons"},
        format="json",
    )
    assert resp.status_code == HTTPStatus.CREATED
    recipe_id = resp.data["recipe"]["id"]

    resp = client.post(
        f"/api/menu/{recipe_id}/ingredients",
        {"name": "Marrons", "details": "1 kg"},
        format="json",
    )
    assert resp.status_code == HTTPStatus.CREATED
    assert resp.data["ingredient"]["recipeId"] == recipe_id
    assert resp.data["ingredient"]["contribution"] is None


def test_list_requires_access(outsider, recipe, event):
    resp = api_client_for(outsider).get("/api/menu", {"eventId": event.pk})

    assert resp.status_code == HTTPStatus.FORBIDDEN


def test_event_menu_section(member, recipe, event):
    resp = api_client_for(member).get(f"/api/events/{event.pk}/menu")

    assert resp.data["count"] == 1
    [listed] = resp.data["menuRecipes"]
    assert [i["name"] for i in listed["ingredients"]] == ["Chocolat noir"]


def test_claim_then_conflict(member, recipe):
    ingredient = recipe.ingredients.get()

    resp = api_client_for(member).post(f"/api/menu/ingredients/{ingredient.pk}/claim")

    assert resp.status_code == HTTPStatus.OK
    assert resp.data["contribution"]["category"] == "ingredient"
    assert resp.data["ingredient"]["contribution"]["assignee"]["name"] == "Marie"

    resp = api_client_for(create_user("Pierre")).post(
        f"/api/menu/ingredients/{ingredient.pk}/claim",
    )
    assert resp.status_code == HTTPStatus.FORBIDDEN

    resp = api_client_for(member).post(f"/api/menu/ingredients/{ingredient.pk}/claim")
    assert resp.status_code == HTTPStatus.CONFLICT
    assert resp.data == {"error": "Déjà pris"}


def test_rename_and_delete_ingredient(member, recipe):
    ingredient = recipe.ingredients.get()
    client = api_client_for(member)

    resp = client.patch(
        f"/api/menu/ingredients/{ingredient.pk}",
        {"details": "250 g"},
        format="json",
    )
    assert resp.data["ingredient"]["details"] == "250 g"

    assert client.delete(f"/api/menu/ingredients/{ingredient.pk}").data == {"ok": True}
    assert not MenuIngredient.objects.exists()


def test_unknown_recipe(member):
    resp = api_client_for(member).get("/api/menu/404")

    assert resp.status_code == HTTPStatus.NOT_FOUND
    assert resp.data["error"] == "Recette introuvable"
