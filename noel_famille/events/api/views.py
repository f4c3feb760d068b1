from __future__ import annotations

from django.db import transaction
from django.db.models import Count
from django.db.models import Q
from django.http import HttpResponse
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter
from drf_spectacular.utils import extend_schema
from drf_spectacular.utils import extend_schema_view
from rest_framework import status
from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from noel_famille.chat.api.serializers import ChatMessageSerializer
from noel_famille.chat.api.views import recent_messages
from noel_famille.chat.models import ChatMessage
from noel_famille.contributions.api.serializers import ContributionSerializer
from noel_famille.contributions.models import Contribution
from noel_famille.core.views import ResourceViewSetMixin
from noel_famille.events.access import get_accessible_event
from noel_famille.events.access import visible_events
from noel_famille.events.exports import contributions_csv
from noel_famille.events.exports import export_filename
from noel_famille.events.models import Event
from noel_famille.events.models import EventUser
from noel_famille.menu.api.serializers import MenuRecipeSerializer
from noel_famille.menu.services import recipes_for_event
from noel_famille.polls.api.serializers import PollSerializer
from noel_famille.polls.models import Poll
from noel_famille.tasks.api.serializers import TaskSerializer
from noel_famille.tasks.models import Task
from noel_famille.users.api.permissions import IsAdminRole
from noel_famille.users.api.serializers import UserSummarySerializer
from noel_famille.users.models import User

from .serializers import EventCodeSerializer
from .serializers import EventListSerializer
from .serializers import EventSerializer

DEFAULT_MESSAGE_PAGE = 50
MAX_MESSAGE_PAGE = 100
EVENT_CHAT_PREVIEW = 50


def _int_param(value, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def with_counts(queryset, user=None):
    tasks_filter = None
    if user is not None and not getattr(user, "is_admin", False):
        tasks_filter = (
            Q(tasks__is_private=False) | Q(tasks__created_by=user) | Q(tasks__assignee=user)
        )
    return queryset.annotate(
        participant_count=Count("memberships", distinct=True),
        contribution_count=Count("contributions", distinct=True),
        task_count=Count("tasks", filter=tasks_filter, distinct=True),
    )


def event_counts(event: Event, user) -> dict[str, int]:
    return {
        "eventUsers": EventUser.objects.filter(event=event).count(),
        "contributions": Contribution.objects.filter(event=event).count(),
        "polls": Poll.objects.filter(event=event).count(),
        "tasks": Task.objects.visible_to(user).filter(event=event).count(),
        "chatMessages": ChatMessage.objects.filter(event=event).count(),
        "menuRecipes": event.menu_recipes.count(),
    }


def participants_of(event: Event):
    return User.objects.filter(event_memberships__event=event).order_by(
        "event_memberships__joined_at",
    )


@extend_schema_view(
    list=extend_schema(tags=["Events"], responses=EventListSerializer(many=True)),
    create=extend_schema(tags=["Events"]),
    retrieve=extend_schema(
        tags=["Events"],
        parameters=[
            OpenApiParameter(
                "include",
                str,
                description=(
                    "Comma separated: contributions, polls, tasks, chatMessages, "
                    "menuRecipes, participants, codes"
                ),
            ),
        ],
    ),
    partial_update=extend_schema(tags=["Events"]),
    destroy=extend_schema(tags=["Events"]),
    minimal=extend_schema(tags=["Events"]),
    participants=extend_schema(tags=["Events"]),
    contributions=extend_schema(tags=["Events"]),
    menu=extend_schema(tags=["Events"]),
    polls=extend_schema(tags=["Events"]),
    tasks=extend_schema(tags=["Events"]),
    messages=extend_schema(
        tags=["Events"],
        parameters=[
            OpenApiParameter("limit", int),
            OpenApiParameter("skip", int),
        ],
    ),
    export_contributions=extend_schema(
        tags=["Events"],
        responses={(200, "text/csv"): OpenApiTypes.STR},
    ),
)
class EventViewSet(ResourceViewSetMixin, viewsets.ModelViewSet):
    """Events and the per-tab sections of an event page."""

    queryset = Event.objects.all()
    serializer_class = EventSerializer
    permission_classes = [IsAuthenticated]
    not_found_message = "Événement non trouvé"
    envelope = "event"

    def get_permissions(self):
        if self.action in {"create", "partial_update", "destroy"}:
            return [IsAuthenticated(), IsAdminRole()]
        return super().get_permissions()

    def get_object(self):
        return get_accessible_event(self.request.user, self.kwargs[self.lookup_field])

    def list(self, request, *args, **kwargs):
        events = with_counts(visible_events(request.user), request.user).order_by("date")
        return Response({"events": EventListSerializer(events, many=True).data})

    @transaction.atomic
    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        event = serializer.save()
        EventUser.objects.get_or_create(user=request.user, event=event)
        return Response(self.wrap(serializer.data), status=status.HTTP_201_CREATED)

    def partial_update(self, request, *args, **kwargs):
        serializer = self.get_serializer(self.get_object(), data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(self.wrap(serializer.data))

    def destroy(self, request, *args, **kwargs):
        self.get_object().delete()
        return Response({"success": True})

    def retrieve(self, request, *args, **kwargs):
        event = self.get_object()
        raw = request.query_params.get("include", "")
        include = {part.strip() for part in raw.split(",") if part.strip()}
        context = self.get_serializer_context()

        data = dict(self.get_serializer(event).data)
        if not include or "participants" in include:
            data["participants"] = UserSummarySerializer(participants_of(event), many=True).data
        if "contributions" in include:
            data["contributions"] = ContributionSerializer(
                event.contributions.select_related("assignee"),
                many=True,
            ).data
        if "polls" in include:
            data["polls"] = PollSerializer(
                Poll.objects.with_vote_details().filter(event=event),
                many=True,
                context=context,
            ).data
        if "tasks" in include:
            data["tasks"] = TaskSerializer(
                Task.objects.visible_to(request.user)
                .filter(event=event)
                .select_related("assignee", "created_by"),
                many=True,
            ).data
        if "chatMessages" in include:
            data["chatMessages"] = ChatMessageSerializer(
                recent_messages(event.pk, EVENT_CHAT_PREVIEW),
                many=True,
            ).data
        if "menuRecipes" in include:
            data["menuRecipes"] = MenuRecipeSerializer(
                recipes_for_event(event.pk),
                many=True,
            ).data
        if "codes" in include and request.user.is_admin:
            data["eventCodes"] = EventCodeSerializer(
                event.event_codes.prefetch_related("events"),
                many=True,
            ).data
        return Response({"event": data})

    @action(detail=True, methods=["get"])
    def minimal(self, request, pk=None):
        event = self.get_object()
        data = dict(self.get_serializer(event).data)
        data["counts"] = event_counts(event, request.user)
        return Response({"event": data})

    @action(detail=True, methods=["get"])
    def participants(self, request, pk=None):
        event = self.get_object()
        users = UserSummarySerializer(participants_of(event), many=True).data
        return Response({"participants": users, "count": len(users)})

    @action(detail=True, methods=["get"])
    def contributions(self, request, pk=None):
        event = self.get_object()
        contributions = ContributionSerializer(
            event.contributions.select_related("assignee"),
            many=True,
        ).data
        return Response({"contributions": contributions, "count": len(contributions)})

    @action(detail=True, methods=["get"])
    def menu(self, request, pk=None):
        event = self.get_object()
        recipes = MenuRecipeSerializer(recipes_for_event(event.pk), many=True).data
        return Response({"menuRecipes": recipes, "count": len(recipes)})

    @action(detail=True, methods=["get"])
    def polls(self, request, pk=None):
        event = self.get_object()
        polls = PollSerializer(
            Poll.objects.with_vote_details().filter(event=event),
            many=True,
            context=self.get_serializer_context(),
        ).data
        return Response({"polls": polls, "count": len(polls)})

    @action(detail=True, methods=["get"])
    def tasks(self, request, pk=None):
        event = self.get_object()
        tasks = TaskSerializer(
            Task.objects.visible_to(request.user)
            .filter(event=event)
            .select_related("assignee", "created_by")
            .order_by("-created_at"),
            many=True,
        ).data
        return Response({"tasks": tasks, "count": len(tasks)})

    @action(detail=True, methods=["get"])
    def messages(self, request, pk=None):
        event = self.get_object()
        limit = _int_param(request.query_params.get("limit"), DEFAULT_MESSAGE_PAGE)
        limit = max(1, min(limit, MAX_MESSAGE_PAGE))
        skip = max(0, _int_param(request.query_params.get("skip"), 0))
        total = ChatMessage.objects.filter(event=event).count()
        messages = recent_messages(event.pk, limit, skip)
        return Response(
            {
                "messages": ChatMessageSerializer(messages, many=True).data,
                "pagination": {
                    "total": total,
                    "limit": limit,
                    "skip": skip,
                    "hasMore": skip + limit < total,
                },
            },
        )

    @action(detail=True, methods=["get"], url_path="contributions/export")
    def export_contributions(self, request, pk=None):
        event = self.get_object()
        response = HttpResponse(
            contributions_csv(event.pk),
            content_type="text/csv; charset=utf-8",
        )
        response["Content-Disposition"] = (
            f'attachment; filename="{export_filename(event.pk)}"'
        )
        return response
