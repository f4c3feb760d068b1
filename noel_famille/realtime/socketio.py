"""Socket.IO server shared by every event page.

Frontend convention:
- Socket.IO path: /api/socketio
- Auth: `auth.token`, `query.token` or the `access_token` cookie
- One room per event, named `event:<id>`; clients join it with `join-event`

The server emits `new-message`, `poll-update`, `contribution-update` and
`task-update` after mutations (see ``noel_famille.realtime.events``), and
relays the same kind of hints between connected clients.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from http.cookies import SimpleCookie
from typing import Any
from urllib.parse import parse_qs

import socketio
from asgiref.sync import async_to_sync
from channels.db import database_sync_to_async
from django.conf import settings
from rest_framework.exceptions import AuthenticationFailed
from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.exceptions import TokenError

from noel_famille.events.access import has_event_access

logger = logging.getLogger(__name__)


sio = socketio.AsyncServer(
    async_mode="asgi",
    cors_allowed_origins=settings.SOCKETIO_CORS_ALLOWED_ORIGINS,
    logger=False,
    engineio_logger=False,
)

# client event -> event broadcast to the room
RELAYED_EVENTS = {
    "chat-message": "new-message",
    "poll-update": "poll-updated",
    "contribution-update": "contribution-update",
    "task-update": "task-update",
}


@dataclass(frozen=True)
class UserRealtimeContext:
    user_id: int
    name: str
    is_admin: bool


def room_for_event(event_id: int | str) -> str:
    return f"event:{int(event_id)}"


@database_sync_to_async
def _get_user_context_from_access_token(token: str) -> UserRealtimeContext:
    jwt_auth = JWTAuthentication()
    validated = jwt_auth.get_validated_token(token)
    user = jwt_auth.get_user(validated)
    return UserRealtimeContext(
        user_id=int(user.id),
        name=user.name,
        is_admin=bool(getattr(user, "is_admin", False)),
    )


@database_sync_to_async
def _can_join(ctx: UserRealtimeContext, event_id: int) -> bool:
    from noel_famille.users.models import User  # noqa: PLC0415

    user = User.objects.filter(pk=ctx.user_id, is_active=True).first()
    return user is not None and has_event_access(user, event_id)


def _scope(environ: dict[str, Any]) -> dict[str, Any]:
    if isinstance(environ, dict) and isinstance(environ.get("asgi.scope"), dict):
        return environ["asgi.scope"]
    return environ if isinstance(environ, dict) else {}


def _extract_token(environ: dict[str, Any], auth: Any | None) -> str | None:
    """Extract the access token from Socket.IO auth, query string or cookie."""

    if isinstance(auth, dict):
        auth_token = auth.get("token")
        if isinstance(auth_token, str) and auth_token:
            return auth_token

    scope = _scope(environ)
    query_string: str | bytes = scope.get("query_string", b"") or environ.get(
        "QUERY_STRING",
        "",
    )
    if isinstance(query_string, (bytes, bytearray)):
        query_string = query_string.decode(errors="ignore")
    token = parse_qs(str(query_string)).get("token", [None])[0]
    if isinstance(token, str) and token:
        return token

    raw_cookie = environ.get("HTTP_COOKIE", "")
    if not raw_cookie:
        for key, value in scope.get("headers", []) or []:
            if key == b"cookie":
                raw_cookie = value.decode(errors="ignore")
                break
    if raw_cookie:
        morsel = SimpleCookie(raw_cookie).get(settings.JWT_AUTH_COOKIE)
        if morsel is not None and morsel.value:
            return morsel.value

    return None


def _event_id_from(data: Any) -> int | None:
    value = data.get("eventId") if isinstance(data, dict) else data
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


@sio.event
async def connect(sid: str, environ: dict[str, Any], auth: Any | None = None):
    token = _extract_token(environ, auth)
    if not token:
        msg = "unauthorized"
        raise ConnectionRefusedError(msg)

    try:
        ctx = await _get_user_context_from_access_token(token)
    except TokenError as exc:
        if "expired" in str(exc).lower():
            msg = "jwt_expired"
            raise ConnectionRefusedError(msg) from exc
        msg = "unauthorized"
        raise ConnectionRefusedError(msg) from exc
    except AuthenticationFailed as exc:  # user not found / inactive, etc.
        msg = "unauthorized"
        raise ConnectionRefusedError(msg) from exc
    except Exception as exc:
        logger.exception("Socket.IO connect error")
        msg = "server_error"
        raise ConnectionRefusedError(msg) from exc

    await sio.save_session(
        sid,
        {"user_id": ctx.user_id, "name": ctx.name, "is_admin": ctx.is_admin},
    )


@sio.event
async def disconnect(sid: str):
    _ = sid


@sio.on("join-event")
async def join_event(sid: str, data: Any):
    event_id = _event_id_from(data)
    if event_id is None:
        return {"ok": False, "error": "invalid_event"}

    session = await sio.get_session(sid)
    ctx = UserRealtimeContext(
        user_id=session["user_id"],
        name=session.get("name", ""),
        is_admin=session.get("is_admin", False),
    )
    if not await _can_join(ctx, event_id):
        return {"ok": False, "error": "forbidden"}

    await sio.enter_room(sid, room_for_event(event_id))
    logger.debug("sid %s joined %s", sid, room_for_event(event_id))
    return {"ok": True}


@sio.on("leave-event")
async def leave_event(sid: str, data: Any):
    event_id = _event_id_from(data)
    if event_id is None:
        return {"ok": False, "error": "invalid_event"}
    await sio.leave_room(sid, room_for_event(event_id))
    return {"ok": True}


async def _relay(sid: str, event: str, data: Any, *, skip_sender: bool) -> None:
    event_id = _event_id_from(data)
    if event_id is None:
        return
    room = room_for_event(event_id)
    # Only members of the room may broadcast into it
    if room not in sio.rooms(sid):
        return
    await sio.emit(event, data, room=room, skip_sid=sid if skip_sender else None)


def _register_relay(source: str, target: str) -> None:
    async def handler(sid: str, data: Any):
        await _relay(sid, target, data, skip_sender=False)

    sio.on(source, handler)


for _source, _target in RELAYED_EVENTS.items():
    _register_relay(_source, _target)


@sio.on("typing")
async def typing(sid: str, data: Any):
    session = await sio.get_session(sid)
    payload = dict(data) if isinstance(data, dict) else {"eventId": data}
    payload.setdefault("userId", session.get("user_id"))
    payload.setdefault("userName", session.get("name"))
    await _relay(sid, "user-typing", payload, skip_sender=True)


def emit_event_to_room(room: str, event: str, payload: dict[str, Any]) -> None:
    """Emit an event to a room from sync Django code."""

    async_to_sync(sio.emit)(event, payload, room=room)


def emit_event_to_event_room(
    event_id: int,
    event: str,
    payload: dict[str, Any],
) -> None:
    emit_event_to_room(room_for_event(event_id), event, payload)
