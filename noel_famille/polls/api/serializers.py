from rest_framework import serializers

from noel_famille.events.models import Event
from noel_famille.polls.models import Poll
from noel_famille.polls.models import PollOption
from noel_famille.uploads.fields import ImageUrlField
from noel_famille.users.api.serializers import UserSummarySerializer

MIN_OPTIONS_MESSAGE = "Au moins 2 options sont requises"


class PollOptionSerializer(serializers.ModelSerializer):
    voteCount = serializers.SerializerMethodField()  # noqa: N815
    voters = serializers.SerializerMethodField()

    class Meta:
        model = PollOption
        fields = ["id", "label", "voteCount", "voters"]

    # Both read the prefetched votes, see PollQuerySet.with_vote_details
    def get_voteCount(self, obj) -> int:  # noqa: N802
        return len(obj.votes.all())

    def get_voters(self, obj) -> list[dict]:
        return UserSummarySerializer(
            [vote.user for vote in obj.votes.all()],
            many=True,
        ).data


class PollSerializer(serializers.ModelSerializer):
    """A poll as seen by the requesting user."""

    eventId = serializers.IntegerField(source="event_id", read_only=True)  # noqa: N815
    imageUrl = serializers.CharField(source="image_url", read_only=True)  # noqa: N815
    isClosed = serializers.BooleanField(source="is_closed", read_only=True)  # noqa: N815
    closedAt = serializers.DateTimeField(source="closed_at", read_only=True)  # noqa: N815
    autoClose = serializers.DateTimeField(source="auto_close", read_only=True)  # noqa: N815
    createdById = serializers.IntegerField(source="created_by_id", read_only=True)  # noqa: N815
    createdBy = UserSummarySerializer(source="created_by", read_only=True)  # noqa: N815
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)  # noqa: N815
    options = PollOptionSerializer(many=True, read_only=True)
    hasVoted = serializers.SerializerMethodField()  # noqa: N815
    userVotes = serializers.SerializerMethodField()  # noqa: N815

    class Meta:
        model = Poll
        fields = [
            "id",
            "eventId",
            "title",
            "description",
            "type",
            "imageUrl",
            "isClosed",
            "closedAt",
            "autoClose",
            "createdById",
            "createdBy",
            "createdAt",
            "options",
            "hasVoted",
            "userVotes",
        ]

    def _user_votes(self, obj) -> list[int]:
        request = self.context.get("request")
        user_id = getattr(getattr(request, "user", None), "pk", None)
        if user_id is None:
            return []
        return [vote.option_id for vote in obj.votes.all() if vote.user_id == user_id]

    def get_hasVoted(self, obj) -> bool:  # noqa: N802
        return bool(self._user_votes(obj))

    def get_userVotes(self, obj) -> list[int]:  # noqa: N802
        return self._user_votes(obj)


class PollCreateSerializer(serializers.Serializer):
    title = serializers.CharField(min_length=2, max_length=200)
    description = serializers.CharField(
        max_length=500,
        required=False,
        allow_blank=True,
        allow_null=True,
    )
    type = serializers.ChoiceField(choices=Poll.Type.choices, default=Poll.Type.SINGLE)
    imageUrl = ImageUrlField()  # noqa: N815
    eventId = serializers.PrimaryKeyRelatedField(queryset=Event.objects.all())  # noqa: N815
    autoClose = serializers.DateTimeField(required=False, allow_null=True)  # noqa: N815
    options = serializers.ListField(
        child=serializers.CharField(min_length=1, max_length=100),
        min_length=2,
        max_length=10,
        error_messages={"min_length": MIN_OPTIONS_MESSAGE},
    )

    def create(self, validated_data):
        poll = Poll.objects.create(
            event=validated_data["eventId"],
            title=validated_data["title"],
            description=validated_data.get("description"),
            type=validated_data["type"],
            image_url=validated_data.get("imageUrl"),
            auto_close=validated_data.get("autoClose"),
            created_by=validated_data["created_by"],
        )
        PollOption.objects.bulk_create(
            [PollOption(poll=poll, label=label) for label in validated_data["options"]],
        )
        return poll


class PollOptionInputSerializer(serializers.Serializer):
    id = serializers.IntegerField(required=False)
    label = serializers.CharField(min_length=1, max_length=100)


class PollUpdateSerializer(serializers.Serializer):
    title = serializers.CharField(min_length=1, max_length=200, required=False)
    description = serializers.CharField(
        max_length=500,
        required=False,
        allow_blank=True,
        allow_null=True,
    )
    type = serializers.ChoiceField(choices=Poll.Type.choices, required=False)
    imageUrl = ImageUrlField()  # noqa: N815
    options = PollOptionInputSerializer(many=True, required=False)

