from drf_spectacular.utils import OpenApiParameter
from drf_spectacular.utils import extend_schema
from drf_spectacular.utils import extend_schema_view
from rest_framework import mixins
from rest_framework import status
from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from noel_famille.contributions.api.serializers import ContributionSerializer
from noel_famille.core.views import ResourceViewSetMixin
from noel_famille.core.views import require_event_id
from noel_famille.events.access import ensure_event_access
from noel_famille.menu.models import MenuIngredient
from noel_famille.menu.models import MenuRecipe
from noel_famille.menu.services import claim_ingredient
from noel_famille.menu.services import recipes_for_event

from .serializers import MenuIngredientSerializer
from .serializers import MenuRecipeSerializer
from .serializers import MenuRecipeUpdateSerializer


@extend_schema_view(
    list=extend_schema(
        tags=["Menu"],
        parameters=[OpenApiParameter("eventId", int, required=True)],
    ),
    retrieve=extend_schema(tags=["Menu"]),
    create=extend_schema(tags=["Menu"]),
    partial_update=extend_schema(tags=["Menu"]),
    destroy=extend_schema(tags=["Menu"]),
    ingredients=extend_schema(tags=["Menu"], request=MenuIngredientSerializer),
)
class MenuRecipeViewSet(ResourceViewSetMixin, viewsets.ModelViewSet):
    queryset = MenuRecipe.objects.prefetch_related("ingredients__contribution__assignee")
    serializer_class = MenuRecipeSerializer
    permission_classes = [IsAuthenticated]
    not_found_message = "Recette introuvable"
    envelope = "recipe"

    def get_serializer_class(self):
        if self.action == "partial_update":
            return MenuRecipeUpdateSerializer
        if self.action == "ingredients":
            return MenuIngredientSerializer
        return MenuRecipeSerializer

    def get_object(self):
        recipe = super().get_object()
        ensure_event_access(self.request.user, recipe.event_id)
        return recipe

    def list(self, request, *args, **kwargs):
        event_id = require_event_id(request)
        ensure_event_access(request.user, event_id)
        recipes = recipes_for_event(event_id)
        return Response({"recipes": self.get_serializer(recipes, many=True).data})

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        ensure_event_access(request.user, serializer.validated_data["event"].pk)
        serializer.save()
        return Response(self.wrap(serializer.data), status=status.HTTP_201_CREATED)

    def retrieve(self, request, *args, **kwargs):
        return Response(self.wrap(self.get_serializer(self.get_object()).data))

    def partial_update(self, request, *args, **kwargs):
        serializer = self.get_serializer(
            self.get_object(),
            data=request.data,
            partial=True,
        )
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(self.wrap(serializer.data))

    def destroy(self, request, *args, **kwargs):
        self.get_object().delete()
        return Response({"ok": True})

    @action(detail=True, methods=["post"])
    def ingredients(self, request, pk=None):
        recipe = self.get_object()
        serializer = MenuIngredientSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        serializer.save(recipe=recipe)
        return Response({"ingredient": serializer.data}, status=status.HTTP_201_CREATED)


@extend_schema_view(
    partial_update=extend_schema(tags=["Menu"]),
    destroy=extend_schema(tags=["Menu"]),
    claim=extend_schema(tags=["Menu"], request=None),
)
class MenuIngredientViewSet(
    ResourceViewSetMixin,
    mixins.UpdateModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet,
):
    queryset = MenuIngredient.objects.select_related(
        "recipe",
        "contribution__assignee",
    )
    serializer_class = MenuIngredientSerializer
    permission_classes = [IsAuthenticated]
    not_found_message = "Ingrédient introuvable"
    envelope = "ingredient"

    def get_object(self):
        ingredient = super().get_object()
        ensure_event_access(self.request.user, ingredient.recipe.event_id)
        return ingredient

    def partial_update(self, request, *args, **kwargs):
        serializer = self.get_serializer(
            self.get_object(),
            data=request.data,
            partial=True,
        )
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(self.wrap(serializer.data))

    def destroy(self, request, *args, **kwargs):
        self.get_object().delete()
        return Response({"ok": True})

    @action(detail=True, methods=["post"])
    def claim(self, request, pk=None):
        ingredient = self.get_object()
        contribution = claim_ingredient(ingredient, request.user)
        ingredient.refresh_from_db()
        return Response(
            {
                "contribution": ContributionSerializer(contribution).data,
                "ingredient": self.get_serializer(ingredient).data,
            },
        )
