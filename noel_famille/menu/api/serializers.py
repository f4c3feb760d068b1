from rest_framework import serializers

from noel_famille.contributions.api.serializers import ContributionSerializer
from noel_famille.events.models import Event
from noel_famille.menu.models import MenuIngredient
from noel_famille.menu.models import MenuRecipe


class MenuIngredientSerializer(serializers.ModelSerializer):
    recipeId = serializers.IntegerField(source="recipe_id", read_only=True)  # noqa: N815
    name = serializers.CharField(min_length=1, max_length=200)
    details = serializers.CharField(
        max_length=500,
        required=False,
        allow_blank=True,
        allow_null=True,
    )
    contributionId = serializers.IntegerField(  # noqa: N815
        source="contribution_id",
        read_only=True,
    )
    contribution = ContributionSerializer(read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)  # noqa: N815

    class Meta:
        model = MenuIngredient
        fields = [
            "id",
            "recipeId",
            "name",
            "details",
            "contributionId",
            "contribution",
            "createdAt",
        ]


class MenuRecipeSerializer(serializers.ModelSerializer):
    eventId = serializers.PrimaryKeyRelatedField(  # noqa: N815
        source="event",
        queryset=Event.objects.all(),
    )
    title = serializers.CharField(min_length=2, max_length=200)
    description = serializers.CharField(
        max_length=1000,
        required=False,
        allow_blank=True,
        allow_null=True,
    )
    ingredients = MenuIngredientSerializer(many=True, read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)  # noqa: N815
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)  # noqa: N815

    class Meta:
        model = MenuRecipe
        fields = [
            "id",
            "eventId",
            "title",
            "description",
            "ingredients",
            "createdAt",
            "updatedAt",
        ]


class MenuRecipeUpdateSerializer(MenuRecipeSerializer):
    eventId = serializers.IntegerField(source="event_id", read_only=True)  # noqa: N815
