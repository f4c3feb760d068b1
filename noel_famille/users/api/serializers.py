from django.utils.translation import gettext_lazy as _
from rest_framework import serializers

from noel_famille.users.models import User


class UserSummarySerializer(serializers.ModelSerializer):
    """Minimal public identity embedded in other resources."""

    class Meta:
        model = User
        fields = ["id", "name", "avatar"]


class UserSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ["id", "name", "email", "avatar", "role"]


class LoginSerializer(serializers.Serializer):
    name = serializers.CharField(
        min_length=2,
        max_length=50,
        trim_whitespace=True,
        error_messages={
            "min_length": _("Le nom doit contenir au moins 2 caractères"),
            "max_length": _("Le nom ne peut pas dépasser 50 caractères"),
            "required": _("Le nom est requis"),
            "blank": _("Le nom doit contenir au moins 2 caractères"),
        },
    )
    eventCode = serializers.CharField(  # noqa: N815
        min_length=4,
        max_length=30,
        error_messages={
            "min_length": _("Le code doit contenir au moins 4 caractères"),
            "max_length": _("Le code ne peut pas dépasser 30 caractères"),
            "required": _("Le code est requis"),
            "blank": _("Le code doit contenir au moins 4 caractères"),
        },
    )

    def validate_eventCode(self, value: str) -> str:  # noqa: N802
        return value.upper()


class ProfileSerializer(serializers.ModelSerializer):
    name = serializers.CharField(min_length=2, max_length=50, required=False)
    email = serializers.EmailField(required=False, allow_blank=True, allow_null=True)
    avatar = serializers.CharField(
        max_length=10,
        required=False,
        allow_blank=True,
        allow_null=True,
    )

    class Meta:
        model = User
        fields = ["id", "name", "email", "avatar", "role"]
        read_only_fields = ["id", "role"]

    def validate_email(self, value):
        if not value:
            return None
        qs = User.objects.filter(email__iexact=value)
        if self.instance is not None:
            qs = qs.exclude(pk=self.instance.pk)
        if qs.exists():
            msg = _("Cet email est déjà utilisé")
            raise serializers.ValidationError(msg)
        return value
