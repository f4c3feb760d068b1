from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.exceptions import ValidationError
from rest_framework.parsers import FormParser
from rest_framework.parsers import MultiPartParser
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from noel_famille.core.views import require_event_id
from noel_famille.events.access import ensure_event_access
from noel_famille.uploads.images import ImageProcessingError
from noel_famille.uploads.images import process_image_upload

NO_FILE = "Aucun fichier fourni"


class EventImageUploadView(APIView):
    """Store a picture for something that belongs to an event."""

    permission_classes = [IsAuthenticated]
    parser_classes = [MultiPartParser, FormParser]

    @extend_schema(
        request={
            "multipart/form-data": {
                "type": "object",
                "properties": {
                    "file": {"type": "string", "format": "binary"},
                    "eventId": {"type": "integer"},
                },
                "required": ["file", "eventId"],
            },
        },
        responses={200: {"type": "object"}},
    )
    def post(self, request, *args, **kwargs):
        uploaded = request.FILES.get("file")
        if uploaded is None:
            raise ValidationError(NO_FILE)
        ensure_event_access(request.user, require_event_id(request))

        try:
            stored = process_image_upload(uploaded)
        except ImageProcessingError as exc:
            raise ValidationError(str(exc)) from exc

        return Response(
            {"success": True, "imageUrl": stored.url, "filename": stored.filename},
            status=status.HTTP_200_OK,
        )
