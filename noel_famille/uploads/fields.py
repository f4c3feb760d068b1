from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.validators import URLValidator
from rest_framework import serializers

from noel_famille.uploads.storage import is_uploads_url

INVALID_IMAGE_URL = "URL d'image invalide"


class ImageUrlField(serializers.CharField):
    """An absolute http(s) URL or a local ``/uploads/...`` path."""

    default_error_messages = {"invalid_image_url": INVALID_IMAGE_URL}

    def __init__(self, **kwargs):
        kwargs.setdefault("max_length", 500)
        kwargs.setdefault("required", False)
        kwargs.setdefault("allow_null", True)
        kwargs.setdefault("allow_blank", True)
        super().__init__(**kwargs)

    def to_internal_value(self, data):
        value = super().to_internal_value(data)
        if not value:
            return None
        if is_uploads_url(value):
            return value
        try:
            URLValidator(schemes=["http", "https"])(value)
        except DjangoValidationError:
            self.fail("invalid_image_url")
        return value
