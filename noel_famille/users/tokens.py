"""Access/refresh token issuance, verification, rotation and revocation.

Access tokens are regular simplejwt ``AccessToken`` objects signed with
``JWT_ACCESS_SECRET``. Refresh tokens are signed with a separate secret
(``JWT_REFRESH_SECRET``) and every issued refresh token is persisted, so a
token is only honoured while its row exists, is not revoked and has not
expired. Refreshing revokes the presented token: each refresh token can mint
exactly one new pair.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import TYPE_CHECKING
from typing import Any
from uuid import uuid4

from django.conf import settings
from django.utils import timezone
from rest_framework_simplejwt.backends import TokenBackend
from rest_framework_simplejwt.exceptions import TokenBackendError
from rest_framework_simplejwt.settings import api_settings
from rest_framework_simplejwt.tokens import AccessToken
from rest_framework_simplejwt.utils import aware_utcnow
from rest_framework_simplejwt.utils import datetime_to_epoch

from noel_famille.users.models import RefreshToken

if TYPE_CHECKING:
    from noel_famille.users.models import User

logger = logging.getLogger(__name__)

REFRESH_TOKEN_TYPE = "refresh"  # noqa: S105


@dataclass(frozen=True)
class TokenPair:
    access: str
    refresh: str


def access_lifetime() -> timedelta:
    return api_settings.ACCESS_TOKEN_LIFETIME


def refresh_lifetime() -> timedelta:
    return api_settings.REFRESH_TOKEN_LIFETIME


def _identity_claims(user: User) -> dict[str, Any]:
    return {
        api_settings.USER_ID_CLAIM: user.pk,
        "name": user.name,
        "role": user.role,
    }


def _refresh_backend() -> TokenBackend:
    return TokenBackend(
        api_settings.ALGORITHM,
        signing_key=settings.JWT_REFRESH_SECRET,
    )


def generate_access_token(user: User) -> str:
    token = AccessToken.for_user(user)
    token["name"] = user.name
    token["role"] = user.role
    return str(token)


def generate_refresh_token(user: User) -> str:
    issued_at = aware_utcnow()
    payload = {
        **_identity_claims(user),
        api_settings.TOKEN_TYPE_CLAIM: REFRESH_TOKEN_TYPE,
        api_settings.JTI_CLAIM: uuid4().hex,
        "iat": datetime_to_epoch(issued_at),
        "exp": datetime_to_epoch(issued_at + refresh_lifetime()),
    }
    return _refresh_backend().encode(payload)


def verify_refresh_token(token: str) -> dict[str, Any] | None:
    """Check signature and expiry of a refresh token, not its server record."""
    try:
        payload = _refresh_backend().decode(token, verify=True)
    except TokenBackendError:
        return None
    if payload.get(api_settings.TOKEN_TYPE_CLAIM) != REFRESH_TOKEN_TYPE:
        return None
    return payload


def save_refresh_token(user: User, token: str) -> RefreshToken:
    record, _ = RefreshToken.objects.update_or_create(
        token=token,
        defaults={
            "user": user,
            "expires_at": timezone.now() + refresh_lifetime(),
            "revoked_at": None,
        },
    )
    return record


def is_refresh_token_valid(token: str) -> bool:
    return RefreshToken.objects.live().filter(token=token).exists()


def revoke_refresh_token(token: str) -> bool:
    updated = RefreshToken.objects.filter(
        token=token,
        revoked_at__isnull=True,
    ).update(revoked_at=timezone.now())
    return updated > 0


def consume_refresh_token(token: str) -> bool:
    """Atomically revoke a live token; False if it was already spent."""
    updated = (
        RefreshToken.objects.live()
        .filter(token=token)
        .update(revoked_at=timezone.now())
    )
    return updated > 0


def revoke_all_user_refresh_tokens(user: User) -> int:
    return RefreshToken.objects.filter(
        user=user,
        revoked_at__isnull=True,
    ).update(revoked_at=timezone.now())


def purge_stale_refresh_tokens() -> int:
    deleted, _ = RefreshToken.objects.stale().delete()
    if deleted:
        logger.info("Purged %s expired or revoked refresh tokens", deleted)
    return deleted


def issue_token_pair(user: User) -> TokenPair:
    pair = TokenPair(
        access=generate_access_token(user),
        refresh=generate_refresh_token(user),
    )
    save_refresh_token(user, pair.refresh)
    return pair
