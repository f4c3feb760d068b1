from rest_framework import serializers

from noel_famille.chat.api.serializers import ChatMessageSerializer
from noel_famille.events.api.serializers import EventListSerializer
from noel_famille.polls.models import Poll
from noel_famille.users.models import User

EMAIL_TAKEN = "Cet email est déjà utilisé"


class EventRefSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    name = serializers.CharField()


class AdminUserSerializer(serializers.ModelSerializer):
    name = serializers.CharField(min_length=2, max_length=50)
    email = serializers.EmailField(required=False, allow_blank=True, allow_null=True)
    avatar = serializers.CharField(
        max_length=10,
        required=False,
        allow_blank=True,
        allow_null=True,
    )
    role = serializers.ChoiceField(choices=User.Role.choices, default=User.Role.USER)
    events = serializers.SerializerMethodField()
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)  # noqa: N815

    class Meta:
        model = User
        fields = ["id", "name", "email", "avatar", "role", "events", "createdAt"]
        read_only_fields = ["id"]

    def get_events(self, obj) -> list[dict]:
        return EventRefSerializer(
            [membership.event for membership in obj.event_memberships.all()],
            many=True,
        ).data

    def validate_email(self, value):
        if not value:
            return None
        qs = User.objects.filter(email__iexact=value)
        if self.instance is not None:
            qs = qs.exclude(pk=self.instance.pk)
        if qs.exists():
            raise serializers.ValidationError(EMAIL_TAKEN)
        return value

    def create(self, validated_data):
        user = User(**validated_data)
        user.set_unusable_password()
        user.save()
        return user


class AdminEventSerializer(EventListSerializer):
    pollCount = serializers.IntegerField(source="poll_count", read_only=True)  # noqa: N815
    messageCount = serializers.IntegerField(  # noqa: N815
        source="message_count",
        read_only=True,
    )

    class Meta(EventListSerializer.Meta):
        fields = [*EventListSerializer.Meta.fields, "pollCount", "messageCount"]


class AdminMessageSerializer(ChatMessageSerializer):
    event = EventRefSerializer(read_only=True)

    class Meta(ChatMessageSerializer.Meta):
        fields = [*ChatMessageSerializer.Meta.fields, "event"]


class AdminPollUpdateSerializer(serializers.ModelSerializer):
    title = serializers.CharField(min_length=2, max_length=200, required=False)
    description = serializers.CharField(
        max_length=1000,
        required=False,
        allow_blank=True,
        allow_null=True,
    )
    isClosed = serializers.BooleanField(source="is_closed", required=False)  # noqa: N815
    autoClose = serializers.DateTimeField(  # noqa: N815
        source="auto_close",
        required=False,
        allow_null=True,
    )

    class Meta:
        model = Poll
        fields = ["title", "description", "type", "isClosed", "autoClose"]


class UploadsActionSerializer(serializers.Serializer):
    ACTIONS = ("delete-file", "moderate-image", "delete-orphans")

    action = serializers.CharField(
        error_messages={"required": "Paramètres manquants", "blank": "Paramètres manquants"},
    )
    url = serializers.CharField(required=False, allow_blank=True, allow_null=True)

    def validate_action(self, value):
        if value not in self.ACTIONS:
            msg = "Action inconnue"
            raise serializers.ValidationError(msg)
        return value

    def validate(self, attrs):
        if attrs["action"] != "delete-orphans" and not attrs.get("url"):
            msg = "Paramètres manquants"
            raise serializers.ValidationError(msg)
        return attrs
