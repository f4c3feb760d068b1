from rest_framework import serializers

from noel_famille.events.models import Event
from noel_famille.tasks.models import Task
from noel_famille.users.api.serializers import UserSummarySerializer
from noel_famille.users.models import User


class TaskSerializer(serializers.ModelSerializer):
    eventId = serializers.PrimaryKeyRelatedField(  # noqa: N815
        source="event",
        queryset=Event.objects.all(),
    )
    title = serializers.CharField(min_length=2, max_length=100)
    description = serializers.CharField(
        max_length=500,
        required=False,
        allow_blank=True,
        allow_null=True,
    )
    isPrivate = serializers.BooleanField(source="is_private", default=False)  # noqa: N815
    dueDate = serializers.DateTimeField(  # noqa: N815
        source="due_date",
        required=False,
        allow_null=True,
    )
    assigneeId = serializers.PrimaryKeyRelatedField(  # noqa: N815
        source="assignee",
        queryset=User.objects.all(),
        required=False,
        allow_null=True,
    )
    assignee = UserSummarySerializer(read_only=True)
    createdById = serializers.IntegerField(source="created_by_id", read_only=True)  # noqa: N815
    createdBy = UserSummarySerializer(source="created_by", read_only=True)  # noqa: N815
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)  # noqa: N815
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)  # noqa: N815

    class Meta:
        model = Task
        fields = [
            "id",
            "eventId",
            "title",
            "description",
            "isPrivate",
            "status",
            "dueDate",
            "assigneeId",
            "assignee",
            "createdById",
            "createdBy",
            "createdAt",
            "updatedAt",
        ]
        read_only_fields = ["id", "status"]


class TaskUpdateSerializer(TaskSerializer):
    eventId = serializers.IntegerField(source="event_id", read_only=True)  # noqa: N815
    isPrivate = serializers.BooleanField(source="is_private", read_only=True)  # noqa: N815
    status = serializers.ChoiceField(choices=Task.Status.choices, required=False)

    class Meta(TaskSerializer.Meta):
        read_only_fields = ["id"]
