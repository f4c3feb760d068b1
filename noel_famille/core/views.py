from django.http import Http404
from rest_framework.exceptions import NotFound
from rest_framework.exceptions import ValidationError

EVENT_ID_REQUIRED = "ID d'événement requis"
EVENT_ID_INVALID = "ID d'événement invalide"


class ResourceViewSetMixin:
    """Shared behaviour of the event-scoped resource viewsets.

    ``not_found_message`` replaces DRF's generic 404 text and
    ``envelope`` names the key single objects are wrapped in.
    """

    not_found_message = "Ressource non trouvée"
    envelope = "data"
    http_method_names = ["get", "post", "patch", "delete", "head", "options"]
    lookup_value_regex = "[0-9]+"

    def get_object(self):
        try:
            return super().get_object()
        except Http404 as exc:
            raise NotFound(self.not_found_message) from exc

    def wrap(self, data):
        return {self.envelope: data}


def _as_event_id(value) -> int:
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ValidationError(EVENT_ID_INVALID) from exc


def require_event_id(request) -> int:
    event_id = request.query_params.get("eventId") or request.data.get("eventId")
    if not event_id:
        raise ValidationError(EVENT_ID_REQUIRED)
    return _as_event_id(event_id)


def optional_event_id(request) -> int | None:
    """``eventId`` filter of the admin lists; absent means every event."""
    event_id = request.query_params.get("eventId")
    return _as_event_id(event_id) if event_id else None
