from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import OpenApiParameter
from drf_spectacular.utils import extend_schema
from drf_spectacular.utils import extend_schema_view
from rest_framework import mixins
from rest_framework import status
from rest_framework import viewsets
from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from noel_famille.contributions.models import Contribution
from noel_famille.core.views import ResourceViewSetMixin
from noel_famille.core.views import require_event_id
from noel_famille.events.access import ensure_event_access
from noel_famille.uploads.views import EventImageUploadView

from .filters import ContributionFilter
from .serializers import ContributionSerializer
from .serializers import ContributionUpdateSerializer

ACCESS_DENIED = "Accès non autorisé"


@extend_schema_view(
    list=extend_schema(
        tags=["Contributions"],
        parameters=[OpenApiParameter("eventId", int, required=True)],
    ),
    retrieve=extend_schema(tags=["Contributions"]),
    create=extend_schema(tags=["Contributions"]),
    partial_update=extend_schema(tags=["Contributions"]),
    destroy=extend_schema(tags=["Contributions"]),
)
class ContributionViewSet(
    ResourceViewSetMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.CreateModelMixin,
    mixins.UpdateModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet,
):
    queryset = Contribution.objects.select_related("assignee")
    serializer_class = ContributionSerializer
    permission_classes = [IsAuthenticated]
    filter_backends = [DjangoFilterBackend]
    filterset_class = ContributionFilter
    not_found_message = "Contribution non trouvée"
    envelope = "contribution"

    def get_serializer_class(self):
        if self.action == "partial_update":
            return ContributionUpdateSerializer
        return ContributionSerializer

    def list(self, request, *args, **kwargs):
        ensure_event_access(request.user, require_event_id(request))
        queryset = self.filter_queryset(self.get_queryset())
        data = self.get_serializer(queryset, many=True).data
        return Response({"contributions": data, "count": len(data)})

    def retrieve(self, request, *args, **kwargs):
        contribution = self.get_object()
        ensure_event_access(request.user, contribution.event_id)
        return Response(self.wrap(self.get_serializer(contribution).data))

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        event = serializer.validated_data["event"]
        ensure_event_access(request.user, event.pk)
        if "assignee" not in serializer.validated_data:
            serializer.validated_data["assignee"] = request.user
        serializer.save()
        return Response(self.wrap(serializer.data), status=status.HTTP_201_CREATED)

    def partial_update(self, request, *args, **kwargs):
        contribution = self.get_object()
        ensure_event_access(request.user, contribution.event_id)
        serializer = self.get_serializer(contribution, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(self.wrap(serializer.data))

    def destroy(self, request, *args, **kwargs):
        contribution = self.get_object()
        if not (
            request.user.is_admin or contribution.assignee_id == request.user.pk
        ):
            raise PermissionDenied(ACCESS_DENIED)
        # The uploaded picture is removed by the post_delete signal
        contribution.delete()
        return Response({"success": True})


@extend_schema_view(post=extend_schema(tags=["Contributions"]))
class ContributionImageUploadView(EventImageUploadView):
    pass
