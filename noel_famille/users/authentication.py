from django.conf import settings
from rest_framework_simplejwt.authentication import JWTAuthentication


class CookieJWTAuthentication(JWTAuthentication):
    """JWT auth from the ``Authorization: Bearer`` header or the access cookie."""

    def authenticate(self, request):
        header = self.get_header(request)
        if header is not None:
            raw_token = self.get_raw_token(header)
        else:
            raw_token = request.COOKIES.get(settings.JWT_AUTH_COOKIE) or None
        if raw_token is None:
            return None

        validated_token = self.get_validated_token(raw_token)
        return self.get_user(validated_token), validated_token


class TokenlessEndpointMixin:
    """For endpoints that authenticate by other means (cookie, cron secret).

    Skips JWT authentication entirely but still answers 401 rather than 403
    when the view rejects the caller.
    """

    authentication_classes: list = []

    def get_authenticate_header(self, request):
        return 'Bearer realm="api"'
