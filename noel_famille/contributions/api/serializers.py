from rest_framework import serializers

from noel_famille.contributions.models import Contribution
from noel_famille.events.models import Event
from noel_famille.uploads.fields import ImageUrlField
from noel_famille.users.api.serializers import UserSummarySerializer
from noel_famille.users.models import User

# Categories a family member may pick; "ingredient" is reserved for menu claims
USER_CATEGORIES = [
    Contribution.Category.PLAT,
    Contribution.Category.BOISSON,
    Contribution.Category.DECOR,
    Contribution.Category.AUTRE,
]


class ContributionSerializer(serializers.ModelSerializer):
    eventId = serializers.PrimaryKeyRelatedField(  # noqa: N815
        source="event",
        queryset=Event.objects.all(),
    )
    assigneeId = serializers.PrimaryKeyRelatedField(  # noqa: N815
        source="assignee",
        queryset=User.objects.all(),
        required=False,
        allow_null=True,
    )
    assignee = UserSummarySerializer(read_only=True)
    title = serializers.CharField(min_length=2, max_length=100)
    description = serializers.CharField(
        max_length=500,
        required=False,
        allow_blank=True,
        allow_null=True,
    )
    category = serializers.ChoiceField(
        choices=USER_CATEGORIES,
        required=False,
        allow_null=True,
    )
    quantity = serializers.IntegerField(min_value=1, max_value=100, default=1)
    budget = serializers.DecimalField(
        max_digits=10,
        decimal_places=2,
        min_value=0,
        required=False,
        allow_null=True,
        coerce_to_string=False,
    )
    imageUrl = ImageUrlField(source="image_url")  # noqa: N815
    fromPollId = serializers.IntegerField(  # noqa: N815
        source="from_poll_id",
        read_only=True,
    )
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)  # noqa: N815
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)  # noqa: N815

    class Meta:
        model = Contribution
        fields = [
            "id",
            "eventId",
            "title",
            "description",
            "category",
            "quantity",
            "budget",
            "status",
            "imageUrl",
            "assigneeId",
            "assignee",
            "fromPollId",
            "createdAt",
            "updatedAt",
        ]
        read_only_fields = ["id", "status"]


class ContributionUpdateSerializer(ContributionSerializer):
    """Edits keep the contribution in its event; status becomes writable."""

    eventId = serializers.IntegerField(source="event_id", read_only=True)  # noqa: N815
    quantity = serializers.IntegerField(min_value=1, max_value=100, required=False)
    status = serializers.ChoiceField(choices=Contribution.Status.choices, required=False)

    class Meta(ContributionSerializer.Meta):
        read_only_fields = ["id"]
