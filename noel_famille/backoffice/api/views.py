import logging

from django.db.models import Count
from django.db.models import Prefetch
from django.utils import timezone
from drf_spectacular.utils import OpenApiParameter
from drf_spectacular.utils import extend_schema
from drf_spectacular.utils import extend_schema_view
from rest_framework import mixins
from rest_framework import status
from rest_framework import viewsets
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from noel_famille.backoffice.metrics import collect_metrics
from noel_famille.backoffice.moderation import delete_orphans
from noel_famille.backoffice.moderation import moderate_image
from noel_famille.chat.models import ChatMessage
from noel_famille.core.views import ResourceViewSetMixin
from noel_famille.core.views import optional_event_id
from noel_famille.events.api.serializers import EventCodeSerializer
from noel_famille.events.api.views import with_counts
from noel_famille.events.models import Event
from noel_famille.events.models import EventCode
from noel_famille.events.models import EventUser
from noel_famille.polls.api.serializers import PollSerializer
from noel_famille.polls.models import Poll
from noel_famille.uploads.storage import delete_image_file
from noel_famille.uploads.storage import filename_from_url
from noel_famille.users.api.permissions import IsAdminRole
from noel_famille.users.models import User

from .serializers import AdminEventSerializer
from .serializers import AdminMessageSerializer
from .serializers import AdminPollUpdateSerializer
from .serializers import AdminUserSerializer
from .serializers import UploadsActionSerializer

logger = logging.getLogger(__name__)

DEFAULT_MESSAGE_LIMIT = 50
OWN_ROLE = "Vous ne pouvez pas modifier votre propre rôle"
OWN_ACCOUNT = "Vous ne pouvez pas supprimer votre propre compte"


class AdminViewSetMixin(ResourceViewSetMixin):
    permission_classes = [IsAuthenticated, IsAdminRole]


@extend_schema_view(
    list=extend_schema(tags=["Admin"]),
    create=extend_schema(tags=["Admin"]),
    destroy=extend_schema(tags=["Admin"]),
)
class AdminCodeViewSet(
    AdminViewSetMixin,
    mixins.ListModelMixin,
    mixins.CreateModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet,
):
    queryset = EventCode.objects.prefetch_related("events")
    serializer_class = EventCodeSerializer
    not_found_message = "Code non trouvé"
    envelope = "code"

    def list(self, request, *args, **kwargs):
        return Response({"codes": self.get_serializer(self.get_queryset(), many=True).data})

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(self.wrap(serializer.data), status=status.HTTP_201_CREATED)

    def destroy(self, request, *args, **kwargs):
        self.get_object().delete()
        return Response({"success": True})


@extend_schema_view(
    list=extend_schema(tags=["Admin"]),
    retrieve=extend_schema(tags=["Admin"]),
    partial_update=extend_schema(tags=["Admin"]),
    destroy=extend_schema(tags=["Admin"]),
)
class AdminEventViewSet(
    AdminViewSetMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.UpdateModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet,
):
    serializer_class = AdminEventSerializer
    not_found_message = "Événement non trouvé"
    envelope = "event"

    def get_queryset(self):
        return with_counts(Event.objects.all()).annotate(
            poll_count=Count("polls", distinct=True),
            message_count=Count("chat_messages", distinct=True),
        ).order_by("-date")

    def list(self, request, *args, **kwargs):
        return Response({"events": self.get_serializer(self.get_queryset(), many=True).data})

    def retrieve(self, request, *args, **kwargs):
        return Response(self.wrap(self.get_serializer(self.get_object()).data))

    def partial_update(self, request, *args, **kwargs):
        serializer = self.get_serializer(self.get_object(), data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(self.wrap(serializer.data))

    def destroy(self, request, *args, **kwargs):
        event = self.get_object()
        logger.info("Admin %s deleted event %s", request.user.pk, event.pk)
        event.delete()
        return Response({"message": "Événement supprimé avec succès"})


@extend_schema_view(
    list=extend_schema(tags=["Admin"]),
    create=extend_schema(tags=["Admin"]),
    retrieve=extend_schema(tags=["Admin"]),
    partial_update=extend_schema(tags=["Admin"]),
    destroy=extend_schema(tags=["Admin"]),
)
class AdminUserViewSet(AdminViewSetMixin, viewsets.ModelViewSet):
    queryset = User.objects.prefetch_related(
        Prefetch(
            "event_memberships",
            queryset=EventUser.objects.select_related("event"),
        ),
    )
    serializer_class = AdminUserSerializer
    not_found_message = "Utilisateur non trouvé"
    envelope = "user"

    def list(self, request, *args, **kwargs):
        return Response(self.get_serializer(self.get_queryset(), many=True).data)

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(serializer.data, status=status.HTTP_201_CREATED)

    def retrieve(self, request, *args, **kwargs):
        return Response(self.get_serializer(self.get_object()).data)

    def partial_update(self, request, *args, **kwargs):
        user = self.get_object()
        serializer = self.get_serializer(user, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        new_role = serializer.validated_data.get("role")
        if user.pk == request.user.pk and new_role and new_role != user.role:
            raise ValidationError(OWN_ROLE)
        serializer.save()
        return Response(serializer.data)

    def destroy(self, request, *args, **kwargs):
        user = self.get_object()
        if user.pk == request.user.pk:
            raise ValidationError(OWN_ACCOUNT)
        user.delete()
        return Response({"success": True})


@extend_schema_view(
    list=extend_schema(
        tags=["Admin"],
        parameters=[OpenApiParameter("eventId", int), OpenApiParameter("limit", int)],
    ),
    retrieve=extend_schema(tags=["Admin"]),
    destroy=extend_schema(tags=["Admin"]),
)
class AdminMessageViewSet(
    AdminViewSetMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet,
):
    queryset = ChatMessage.objects.select_related("event", "user").prefetch_related("media")
    serializer_class = AdminMessageSerializer
    not_found_message = "Message non trouvé"
    envelope = "message"

    def list(self, request, *args, **kwargs):
        messages = self.get_queryset().order_by("-created_at", "-id")
        event_id = optional_event_id(request)
        if event_id is not None:
            messages = messages.filter(event_id=event_id)
        try:
            limit = int(request.query_params.get("limit", DEFAULT_MESSAGE_LIMIT))
        except ValueError:
            limit = DEFAULT_MESSAGE_LIMIT
        return Response(self.get_serializer(messages[: max(limit, 1)], many=True).data)

    def retrieve(self, request, *args, **kwargs):
        return Response(self.get_serializer(self.get_object()).data)

    def destroy(self, request, *args, **kwargs):
        message = self.get_object()
        data = self.get_serializer(message).data
        # Media rows cascade and their files go with them
        message.delete()
        return Response(
            {"message": "Message supprimé avec succès", "deletedMessage": data},
        )


@extend_schema_view(
    list=extend_schema(tags=["Admin"]),
    retrieve=extend_schema(tags=["Admin"]),
    partial_update=extend_schema(tags=["Admin"], request=AdminPollUpdateSerializer),
    destroy=extend_schema(tags=["Admin"]),
)
class AdminPollViewSet(
    AdminViewSetMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.UpdateModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet,
):
    queryset = Poll.objects.with_vote_details()
    serializer_class = PollSerializer
    not_found_message = "Sondage non trouvé"
    envelope = "poll"

    def list(self, request, *args, **kwargs):
        polls = self.get_queryset()
        event_id = optional_event_id(request)
        if event_id is not None:
            polls = polls.filter(event_id=event_id)
        return Response({"polls": self.get_serializer(polls, many=True).data})

    def retrieve(self, request, *args, **kwargs):
        return Response(self.wrap(self.get_serializer(self.get_object()).data))

    def partial_update(self, request, *args, **kwargs):
        poll = self.get_object()
        serializer = AdminPollUpdateSerializer(poll, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        is_closed = serializer.validated_data.get("is_closed")
        if is_closed is True and not poll.is_closed:
            serializer.save(closed_at=timezone.now())
        elif is_closed is False:
            serializer.save(closed_at=None)
        else:
            serializer.save()
        poll = self.get_queryset().get(pk=poll.pk)
        return Response(self.wrap(self.get_serializer(poll).data))

    def destroy(self, request, *args, **kwargs):
        self.get_object().delete()
        return Response({"success": True})


class UploadsModerationView(APIView):
    """Maintenance of ``/uploads/``: single files, references, orphans."""

    permission_classes = [IsAuthenticated, IsAdminRole]

    @extend_schema(tags=["Admin"], request=UploadsActionSerializer)
    def post(self, request):
        serializer = UploadsActionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        action = serializer.validated_data["action"]

        if action == "delete-orphans":
            deleted = delete_orphans()
            return Response(
                {"success": True, "deletedCount": len(deleted), "deleted": deleted},
            )

        url = serializer.validated_data["url"]
        if filename_from_url(url) is None:
            msg = "URL invalide"
            raise ValidationError(msg)
        if action == "delete-file":
            return Response({"success": True, "deleted": delete_image_file(url)})
        result = moderate_image(url)
        return Response({"success": True, **result.as_dict()})


class MetricsView(APIView):
    permission_classes = [IsAuthenticated, IsAdminRole]

    @extend_schema(tags=["Admin"], responses=dict)
    def get(self, request):
        return Response(collect_metrics())
