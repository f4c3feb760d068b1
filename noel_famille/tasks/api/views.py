from django.http import HttpResponse
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import extend_schema
from drf_spectacular.utils import extend_schema_view
from rest_framework import mixins
from rest_framework import status
from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from noel_famille.core.views import ResourceViewSetMixin
from noel_famille.events.access import ensure_event_access
from noel_famille.tasks.ical import build_task_calendar
from noel_famille.tasks.ical import calendar_filename
from noel_famille.tasks.models import Task

from .serializers import TaskSerializer
from .serializers import TaskUpdateSerializer

ACCESS_DENIED = "Accès non autorisé"


@extend_schema_view(
    retrieve=extend_schema(tags=["Tasks"]),
    create=extend_schema(tags=["Tasks"]),
    partial_update=extend_schema(tags=["Tasks"]),
    destroy=extend_schema(tags=["Tasks"]),
    ical=extend_schema(tags=["Tasks"], responses={(200, "text/calendar"): OpenApiTypes.STR}),
)
class TaskViewSet(
    ResourceViewSetMixin,
    mixins.RetrieveModelMixin,
    mixins.CreateModelMixin,
    mixins.UpdateModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet,
):
    queryset = Task.objects.select_related("event", "assignee", "created_by")
    serializer_class = TaskSerializer
    permission_classes = [IsAuthenticated]
    not_found_message = "Tâche non trouvée"
    envelope = "task"

    def get_serializer_class(self):
        if self.action == "partial_update":
            return TaskUpdateSerializer
        return TaskSerializer

    def _get_visible_task(self) -> Task:
        task = self.get_object()
        ensure_event_access(self.request.user, task.event_id)
        if task.is_private and not task.is_involved(self.request.user):
            raise PermissionDenied(ACCESS_DENIED)
        return task

    def retrieve(self, request, *args, **kwargs):
        task = self._get_visible_task()
        return Response(self.wrap(self.get_serializer(task).data))

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        ensure_event_access(request.user, serializer.validated_data["event"].pk)
        serializer.save(created_by=request.user)
        return Response(self.wrap(serializer.data), status=status.HTTP_201_CREATED)

    def partial_update(self, request, *args, **kwargs):
        task = self.get_object()
        if not task.is_involved(request.user):
            raise PermissionDenied(ACCESS_DENIED)
        serializer = self.get_serializer(task, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(self.wrap(serializer.data))

    def destroy(self, request, *args, **kwargs):
        task = self.get_object()
        if not (request.user.is_admin or task.created_by_id == request.user.pk):
            raise PermissionDenied(ACCESS_DENIED)
        task.delete()
        return Response({"success": True})

    @action(detail=True, methods=["get"])
    def ical(self, request, pk=None):
        task = self._get_visible_task()
        response = HttpResponse(
            build_task_calendar(task),
            content_type="text/calendar; charset=utf-8",
            status=status.HTTP_200_OK,
        )
        response["Content-Disposition"] = (
            f'attachment; filename="{calendar_filename(task)}"'
        )
        return response
