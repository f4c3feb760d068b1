"""Liveness probe: database, redis (socket fan-out and celery broker) and uploads."""

from __future__ import annotations

import logging
import os
from typing import Any

import redis
from django.conf import settings
from django.db import DatabaseError
from django.db import connection
from django.http import JsonResponse

logger = logging.getLogger(__name__)


def check_db() -> dict[str, Any]:
    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1;")
            cursor.fetchone()
    except DatabaseError as exc:
        logger.warning("Health: database unreachable: %s", exc)
        return {"ok": False, "error": str(exc)}
    return {"ok": True, "vendor": connection.vendor}


def check_redis() -> dict[str, Any]:
    url = getattr(settings, "REDIS_URL", None)
    if not url:
        return {"ok": False, "error": "REDIS_URL not configured"}
    try:
        client = redis.Redis.from_url(
            url,
            socket_timeout=0.5,
            socket_connect_timeout=0.5,
        )
        client.ping()
    except redis.RedisError as exc:
        logger.warning("Health: redis unreachable: %s", exc)
        return {"ok": False, "error": str(exc)}
    return {"ok": True}


def check_uploads() -> dict[str, Any]:
    root = str(settings.MEDIA_ROOT)
    if not os.path.isdir(root):
        # Created on the first upload
        return {"ok": True, "exists": False}
    return {"ok": os.access(root, os.W_OK), "exists": True}


def health(request):
    components = {
        "db": check_db(),
        "redis": check_redis(),
        "uploads": check_uploads(),
    }

    all_ok = all(v.get("ok", False) for v in components.values())
    some_ok = any(v.get("ok", False) for v in components.values())

    status = "ok" if all_ok else ("degraded" if some_ok else "down")
    http_status = 200 if all_ok else 503

    return JsonResponse(
        {"status": status, "components": components},
        status=http_status,
    )
