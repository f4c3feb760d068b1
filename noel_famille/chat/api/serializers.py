from rest_framework import serializers

from noel_famille.chat.models import ChatMessage
from noel_famille.chat.models import ChatMessageMedia
from noel_famille.events.models import Event
from noel_famille.uploads.fields import ImageUrlField
from noel_famille.users.api.serializers import UserSummarySerializer


class ChatMessageMediaSerializer(serializers.ModelSerializer):
    imageUrl = serializers.CharField(source="image_url", read_only=True)  # noqa: N815

    class Meta:
        model = ChatMessageMedia
        fields = ["id", "imageUrl"]


class ChatMessageSerializer(serializers.ModelSerializer):
    eventId = serializers.IntegerField(source="event_id", read_only=True)  # noqa: N815
    userId = serializers.IntegerField(source="user_id", read_only=True)  # noqa: N815
    user = UserSummarySerializer(read_only=True)
    media = ChatMessageMediaSerializer(many=True, read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)  # noqa: N815

    class Meta:
        model = ChatMessage
        fields = ["id", "eventId", "userId", "user", "content", "media", "createdAt"]


class ChatMessageCreateSerializer(serializers.Serializer):
    content = serializers.CharField(min_length=1, max_length=1000, trim_whitespace=False)
    eventId = serializers.PrimaryKeyRelatedField(queryset=Event.objects.all())  # noqa: N815
    imageUrls = serializers.ListField(  # noqa: N815
        child=ImageUrlField(allow_null=False, allow_blank=False, required=True),
        required=False,
        default=list,
    )

    def create(self, validated_data):
        message = ChatMessage.objects.create(
            event=validated_data["eventId"],
            user=validated_data["user"],
            content=validated_data["content"],
        )
        ChatMessageMedia.objects.bulk_create(
            [
                ChatMessageMedia(message=message, image_url=url)
                for url in validated_data["imageUrls"]
            ],
        )
        return message
