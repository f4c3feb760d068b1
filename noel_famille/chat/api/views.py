from drf_spectacular.utils import OpenApiParameter
from drf_spectacular.utils import extend_schema
from drf_spectacular.utils import extend_schema_view
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from noel_famille.chat.models import ChatMessage
from noel_famille.core.views import require_event_id
from noel_famille.events.access import ensure_event_access
from noel_famille.uploads.views import EventImageUploadView

from .serializers import ChatMessageCreateSerializer
from .serializers import ChatMessageSerializer

CHAT_HISTORY_LIMIT = 100


def recent_messages(event_id, limit: int, skip: int = 0) -> list[ChatMessage]:
    """The ``limit`` newest messages (after skipping ``skip``), oldest first."""
    newest = (
        ChatMessage.objects.filter(event_id=event_id)
        .select_related("user")
        .prefetch_related("media")
        .order_by("-created_at", "-id")[skip : skip + limit]
    )
    return list(reversed(newest))


@extend_schema_view(
    get=extend_schema(
        tags=["Chat"],
        parameters=[OpenApiParameter("eventId", int, required=True)],
        responses=ChatMessageSerializer(many=True),
    ),
    post=extend_schema(
        tags=["Chat"],
        request=ChatMessageCreateSerializer,
        responses=ChatMessageSerializer,
    ),
)
class ChatMessagesView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, *args, **kwargs):
        event_id = require_event_id(request)
        ensure_event_access(request.user, event_id)
        messages = recent_messages(event_id, CHAT_HISTORY_LIMIT)
        return Response({"messages": ChatMessageSerializer(messages, many=True).data})

    def post(self, request, *args, **kwargs):
        serializer = ChatMessageCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        ensure_event_access(request.user, serializer.validated_data["eventId"].pk)
        message = serializer.save(user=request.user)
        message = (
            ChatMessage.objects.select_related("user")
            .prefetch_related("media")
            .get(pk=message.pk)
        )
        return Response(
            {"message": ChatMessageSerializer(message).data},
            status=status.HTTP_201_CREATED,
        )


@extend_schema_view(post=extend_schema(tags=["Chat"]))
class ChatImageUploadView(EventImageUploadView):
    pass
