"""API error rendering.

Every error leaves the API as ``{"error": "<message>"}``. Validation errors
join all field messages with `` | ``; anything unhandled is logged and
reported as a generic 500.
"""

from __future__ import annotations

import logging
from typing import Any

from django.core.exceptions import PermissionDenied as DjangoPermissionDenied
from django.http import Http404
from django.utils.translation import gettext_lazy as _
from rest_framework import exceptions
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler
from rest_framework.views import set_rollback
from rest_framework_simplejwt.exceptions import InvalidToken

logger = logging.getLogger(__name__)

NOT_AUTHENTICATED = "Non authentifié"
INTERNAL_ERROR = "Erreur interne du serveur"
MESSAGE_SEPARATOR = " | "


class ConflictError(exceptions.APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = _("Conflit")
    default_code = "conflict"


def flatten_messages(detail: Any) -> list[str]:
    """Collect the human-readable messages of a DRF error detail, in order."""
    if isinstance(detail, dict):
        messages: list[str] = []
        for value in detail.values():
            messages.extend(flatten_messages(value))
        return messages
    if isinstance(detail, (list, tuple)):
        messages = []
        for value in detail:
            messages.extend(flatten_messages(value))
        return messages
    return [str(detail)]


def api_exception_handler(exc, context):
    if isinstance(exc, Http404):
        exc = exceptions.NotFound(str(exc) or None)
    elif isinstance(exc, DjangoPermissionDenied):
        exc = exceptions.PermissionDenied(str(exc) or None)

    response = exception_handler(exc, context)
    if response is None:
        view = context.get("view")
        logger.error(
            "Unhandled error in %s",
            type(view).__name__ if view else "view",
            exc_info=exc,
        )
        set_rollback()
        return Response(
            {"error": INTERNAL_ERROR},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    if isinstance(exc, (exceptions.NotAuthenticated, InvalidToken)):
        message = NOT_AUTHENTICATED
    else:
        message = MESSAGE_SEPARATOR.join(flatten_messages(response.data))
    response.data = {"error": message}
    return response
