"""Authentication for the scheduler-triggered endpoints.

The scheduler calls them with ``Authorization: Bearer <CRON_SECRET>``. When
no secret is configured the endpoints stay closed.
"""

import hmac

from django.conf import settings
from rest_framework.exceptions import AuthenticationFailed
from rest_framework.permissions import BasePermission

from noel_famille.users.authentication import TokenlessEndpointMixin

CRON_UNAUTHORIZED = "Non autorisé"


def has_cron_secret(request) -> bool:
    secret = getattr(settings, "CRON_SECRET", "")
    if not secret:
        return False
    header = request.headers.get("Authorization", "")
    return hmac.compare_digest(header.encode(), f"Bearer {secret}".encode())


class HasCronSecret(BasePermission):
    message = CRON_UNAUTHORIZED

    def has_permission(self, request, view):
        return has_cron_secret(request)


class CronEndpointMixin(TokenlessEndpointMixin):
    permission_classes = [HasCronSecret]

    def permission_denied(self, request, message=None, code=None):
        # No authenticators run here, so DRF would answer 403
        raise AuthenticationFailed(message or CRON_UNAUTHORIZED)
