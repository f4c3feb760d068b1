from django.db import transaction
from drf_spectacular.utils import extend_schema
from drf_spectacular.utils import extend_schema_view
from rest_framework import mixins
from rest_framework import status
from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from noel_famille.contributions.api.serializers import ContributionSerializer
from noel_famille.core.cron import CronEndpointMixin
from noel_famille.core.views import ResourceViewSetMixin
from noel_famille.events.access import ensure_event_access
from noel_famille.polls import services
from noel_famille.polls.models import Poll
from noel_famille.realtime.events.event_updates import UPDATED
from noel_famille.realtime.events.event_updates import publish_poll_update
from noel_famille.uploads.storage import delete_image_file
from noel_famille.uploads.views import EventImageUploadView
from noel_famille.users.api.permissions import IsAdminRole

from .serializers import PollCreateSerializer
from .serializers import PollSerializer
from .serializers import PollUpdateSerializer

CANNOT_EDIT = "Vous n'êtes pas autorisé à modifier ce sondage"
CANNOT_DELETE = "Vous n'êtes pas autorisé à supprimer ce sondage"
POLL_DELETED = "Sondage supprimé avec succès"


@extend_schema_view(
    retrieve=extend_schema(tags=["Polls"]),
    create=extend_schema(tags=["Polls"], request=PollCreateSerializer),
    partial_update=extend_schema(tags=["Polls"], request=PollUpdateSerializer),
    destroy=extend_schema(tags=["Polls"]),
    vote=extend_schema(tags=["Polls"]),
    close=extend_schema(tags=["Polls"]),
)
class PollViewSet(
    ResourceViewSetMixin,
    mixins.RetrieveModelMixin,
    mixins.CreateModelMixin,
    mixins.UpdateModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet,
):
    queryset = Poll.objects.with_vote_details()
    serializer_class = PollSerializer
    permission_classes = [IsAuthenticated]
    not_found_message = "Sondage non trouvé"
    envelope = "poll"

    def get_permissions(self):
        if self.action == "close":
            return [IsAuthenticated(), IsAdminRole()]
        return super().get_permissions()

    def _fresh(self, poll: Poll) -> dict:
        poll = Poll.objects.with_vote_details().get(pk=poll.pk)
        return self.get_serializer(poll).data

    def _ensure_owner(self, poll: Poll, message: str) -> None:
        user = self.request.user
        if not (user.is_admin or poll.created_by_id == user.pk):
            raise PermissionDenied(message)
        ensure_event_access(user, poll.event_id)

    def retrieve(self, request, *args, **kwargs):
        poll = self.get_object()
        ensure_event_access(request.user, poll.event_id)
        return Response(self.wrap(self.get_serializer(poll).data))

    def create(self, request, *args, **kwargs):
        serializer = PollCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        ensure_event_access(request.user, serializer.validated_data["eventId"].pk)
        poll = serializer.save(created_by=request.user)
        return Response(self.wrap(self._fresh(poll)), status=status.HTTP_201_CREATED)

    def partial_update(self, request, *args, **kwargs):
        poll = self.get_object()
        self._ensure_owner(poll, CANNOT_EDIT)
        serializer = PollUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        if "imageUrl" in data and data["imageUrl"] != poll.image_url:
            old_image = poll.image_url
            if old_image:
                transaction.on_commit(lambda: delete_image_file(old_image))
            poll.image_url = data["imageUrl"]
        for field, attr in (("title", "title"), ("description", "description"), ("type", "type")):
            if field in data:
                setattr(poll, attr, data[field])
        poll.save()

        if "options" in data:
            services.replace_options(poll, [option["label"] for option in data["options"]])

        return Response({"success": True, "poll": self._fresh(poll)})

    def destroy(self, request, *args, **kwargs):
        poll = self.get_object()
        self._ensure_owner(poll, CANNOT_DELETE)
        # The picture is removed by the post_delete signal
        poll.delete()
        return Response({"message": POLL_DELETED})

    @action(detail=True, methods=["post", "delete"])
    def vote(self, request, pk=None):
        poll = self.get_object()
        ensure_event_access(request.user, poll.event_id)
        if request.method == "DELETE":
            services.remove_votes(poll, request.user)
            response = Response({"success": True})
        else:
            services.cast_vote(poll, request.user, request.data.get("optionIds"))
            response = Response(self.wrap(self._fresh(poll)))
        event_id, poll_id = poll.event_id, poll.pk
        transaction.on_commit(lambda: publish_poll_update(event_id, poll_id, UPDATED))
        return response

    @action(detail=True, methods=["post"])
    def close(self, request, pk=None):
        result = services.close_poll(self.get_object())
        return Response(
            {
                "poll": self._fresh(result.poll),
                "createdContributions": ContributionSerializer(
                    result.contributions,
                    many=True,
                ).data,
                "message": result.message,
            },
        )


@extend_schema_view(get=extend_schema(tags=["Polls"]))
class PollAutoCloseView(CronEndpointMixin, APIView):
    """Scheduler hook closing polls whose auto-close moment has passed."""

    serializer_class = None

    def get(self, request, *args, **kwargs):
        closed = services.auto_close_due_polls()
        return Response(
            {
                "success": True,
                "closed": len(closed),
                "polls": [
                    {"id": poll.pk, "title": poll.title, "eventId": poll.event_id}
                    for poll in closed
                ],
            },
        )


@extend_schema_view(post=extend_schema(tags=["Polls"]))
class PollImageUploadView(EventImageUploadView):
    pass
