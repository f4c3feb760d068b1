from rest_framework import serializers

from noel_famille.events.models import Event
from noel_famille.events.models import EventCode
from noel_famille.uploads.fields import ImageUrlField


class EventSerializer(serializers.ModelSerializer):
    name = serializers.CharField(min_length=2, max_length=100)
    description = serializers.CharField(
        max_length=1000,
        required=False,
        allow_blank=True,
        allow_null=True,
    )
    endDate = serializers.DateTimeField(  # noqa: N815
        source="end_date",
        required=False,
        allow_null=True,
    )
    location = serializers.CharField(
        max_length=200,
        required=False,
        allow_blank=True,
        allow_null=True,
    )
    mapUrl = serializers.URLField(  # noqa: N815
        source="map_url",
        max_length=500,
        required=False,
        allow_blank=True,
        allow_null=True,
    )
    bannerImage = ImageUrlField(source="banner_image", max_length=255)  # noqa: N815
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)  # noqa: N815
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)  # noqa: N815

    class Meta:
        model = Event
        fields = [
            "id",
            "name",
            "description",
            "date",
            "endDate",
            "location",
            "mapUrl",
            "status",
            "bannerImage",
            "createdAt",
            "updatedAt",
        ]
        read_only_fields = ["id"]

    def validate_mapUrl(self, value):  # noqa: N802
        return value or None


class EventListSerializer(EventSerializer):
    """Events of the dashboard, with counts annotated by the queryset."""

    participantCount = serializers.IntegerField(  # noqa: N815
        source="participant_count",
        read_only=True,
    )
    contributionCount = serializers.IntegerField(  # noqa: N815
        source="contribution_count",
        read_only=True,
    )
    taskCount = serializers.IntegerField(source="task_count", read_only=True)  # noqa: N815

    class Meta(EventSerializer.Meta):
        fields = [
            *EventSerializer.Meta.fields,
            "participantCount",
            "contributionCount",
            "taskCount",
        ]


class EventCodeSerializer(serializers.ModelSerializer):
    code = serializers.CharField(min_length=4, max_length=30)
    isMaster = serializers.BooleanField(source="is_master", default=False)  # noqa: N815
    isActive = serializers.BooleanField(source="is_active", read_only=True)  # noqa: N815
    expiresAt = serializers.DateTimeField(  # noqa: N815
        source="expires_at",
        required=False,
        allow_null=True,
    )
    eventIds = serializers.PrimaryKeyRelatedField(  # noqa: N815
        source="events",
        queryset=Event.objects.all(),
        many=True,
        allow_empty=False,
        error_messages={"empty": "Sélectionnez au moins un événement"},
    )
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)  # noqa: N815

    class Meta:
        model = EventCode
        fields = ["id", "code", "isMaster", "isActive", "expiresAt", "eventIds", "createdAt"]

    def validate_code(self, value: str) -> str:
        value = value.strip().upper()
        if EventCode.objects.filter(code=value).exists():
            msg = "Ce code existe déjà"
            raise serializers.ValidationError(msg)
        return value
