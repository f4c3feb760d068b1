from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from django.conf import settings
from drf_spectacular.utils import extend_schema
from drf_spectacular.utils import extend_schema_view
from rest_framework import status
from rest_framework.exceptions import Throttled
from rest_framework.permissions import AllowAny
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.throttling import SimpleRateThrottle
from rest_framework.views import APIView

from noel_famille.users.authentication import TokenlessEndpointMixin
from noel_famille.users.models import User
from noel_famille.users.services import login_with_event_code
from noel_famille.users.tokens import access_lifetime
from noel_famille.users.tokens import consume_refresh_token
from noel_famille.users.tokens import issue_token_pair
from noel_famille.users.tokens import refresh_lifetime
from noel_famille.users.tokens import revoke_refresh_token
from noel_famille.users.tokens import verify_refresh_token

from .serializers import LoginSerializer
from .serializers import UserSerializer

if TYPE_CHECKING:  # pragma: no cover - typing only
    from noel_famille.users.tokens import TokenPair

logger = logging.getLogger(__name__)

TOO_MANY_ATTEMPTS = "Trop de tentatives. Réessayez dans une minute."
REFRESH_MISSING = "Token de rafraîchissement manquant"
REFRESH_INVALID = "Token invalide"
REFRESH_REVOKED = "Token révoqué ou expiré"
USER_NOT_FOUND = "Utilisateur non trouvé"


def _set_cookie(
    response: Response,
    name: str,
    value: str,
    max_age: int | None,
    samesite: str,
) -> None:
    if not value:
        return
    cookie_kwargs = {
        "httponly": True,
        "secure": getattr(settings, "JWT_AUTH_COOKIE_SECURE", not settings.DEBUG),
        "samesite": samesite,
        "path": "/",
    }
    if max_age is not None:
        cookie_kwargs["max_age"] = max_age
    response.set_cookie(name, value, **cookie_kwargs)


def _set_jwt_cookies(response: Response, pair: TokenPair) -> None:
    # The refresh cookie never leaves same-site navigation; the access cookie
    # must survive top-level links into the app.
    _set_cookie(
        response,
        settings.JWT_AUTH_REFRESH_COOKIE,
        pair.refresh,
        int(refresh_lifetime().total_seconds()),
        "Strict",
    )
    _set_cookie(
        response,
        settings.JWT_AUTH_COOKIE,
        pair.access,
        int(access_lifetime().total_seconds()),
        "Lax",
    )


def _clear_jwt_cookies(response: Response) -> None:
    response.delete_cookie(settings.JWT_AUTH_REFRESH_COOKIE, path="/", samesite="Strict")
    response.delete_cookie(settings.JWT_AUTH_COOKIE, path="/", samesite="Lax")


def _session_response(user: User, pair: TokenPair) -> Response:
    response = Response(
        {"accessToken": pair.access, "user": UserSerializer(user).data},
    )
    _set_jwt_cookies(response, pair)
    return response


class LoginRateThrottle(SimpleRateThrottle):
    """Sign-in attempts per client IP (X-Forwarded-For aware)."""

    scope = "login"

    def get_cache_key(self, request, view):
        return self.cache_format % {
            "scope": self.scope,
            "ident": self.get_ident(request),
        }


@extend_schema_view(post=extend_schema(tags=["Authentication"]))
class LoginView(TokenlessEndpointMixin, APIView):
    """Sign in with a display name and an event invite code."""

    permission_classes = [AllowAny]
    throttle_classes = [LoginRateThrottle]
    serializer_class = LoginSerializer

    def throttled(self, request, wait):
        exc = Throttled(detail=TOO_MANY_ATTEMPTS)
        exc.wait = wait
        raise exc

    def post(self, request, *args, **kwargs):
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = login_with_event_code(
            serializer.validated_data["name"],
            serializer.validated_data["eventCode"],
        )
        return _session_response(user, issue_token_pair(user))


@extend_schema_view(post=extend_schema(tags=["Authentication"]))
class RefreshView(TokenlessEndpointMixin, APIView):
    """Rotate the refresh cookie: the presented token is spent either way."""

    permission_classes = [AllowAny]
    serializer_class = None

    def _reject(self, message: str) -> Response:
        response = Response({"error": message}, status=status.HTTP_401_UNAUTHORIZED)
        _clear_jwt_cookies(response)
        return response

    def post(self, request, *args, **kwargs):
        token = request.COOKIES.get(settings.JWT_AUTH_REFRESH_COOKIE)
        if not token:
            return self._reject(REFRESH_MISSING)

        payload = verify_refresh_token(token)
        if payload is None:
            return self._reject(REFRESH_INVALID)

        if not consume_refresh_token(token):
            logger.warning("Refused reuse of a spent refresh token")
            return self._reject(REFRESH_REVOKED)

        user = User.objects.filter(
            pk=payload.get(settings.SIMPLE_JWT["USER_ID_CLAIM"]),
            is_active=True,
        ).first()
        if user is None:
            return self._reject(USER_NOT_FOUND)

        return _session_response(user, issue_token_pair(user))


@extend_schema_view(post=extend_schema(tags=["Authentication"]))
class LogoutView(TokenlessEndpointMixin, APIView):
    permission_classes = [AllowAny]
    serializer_class = None

    def post(self, request, *args, **kwargs):
        token = request.COOKIES.get(settings.JWT_AUTH_REFRESH_COOKIE)
        if token:
            revoke_refresh_token(token)
        response = Response({"success": True})
        _clear_jwt_cookies(response)
        return response


@extend_schema_view(get=extend_schema(tags=["Authentication"]))
class MeView(APIView):
    permission_classes = [IsAuthenticated]
    serializer_class = UserSerializer

    def get(self, request, *args, **kwargs):
        return Response({"user": UserSerializer(request.user).data})
