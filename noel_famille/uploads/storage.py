"""Files under the public ``/uploads/`` URL prefix.

Images are stored flat in ``MEDIA_ROOT`` and referenced from the database
by their public URL (``/uploads/<filename>``).
"""

from __future__ import annotations

import logging
import re
from pathlib import PurePosixPath

from django.core.files.base import ContentFile
from django.core.files.storage import default_storage

logger = logging.getLogger(__name__)

UPLOADS_PREFIX = "/uploads/"
_UPLOADS_URL_RE = re.compile(r"^/uploads/.+")


def is_uploads_url(url: str | None) -> bool:
    return isinstance(url, str) and bool(_UPLOADS_URL_RE.match(url))


def url_for(filename: str) -> str:
    return f"{UPLOADS_PREFIX}{filename}"


def filename_from_url(url: str) -> str | None:
    """Return the stored file name for an /uploads/ URL, refusing traversal."""
    if not is_uploads_url(url):
        return None
    name = PurePosixPath(url[len(UPLOADS_PREFIX) :]).name
    if not name or name in {".", ".."}:
        return None
    return name


def save_upload(filename: str, content: bytes) -> str:
    stored = default_storage.save(filename, ContentFile(content))
    return url_for(stored)


def delete_image_file(url: str | None) -> bool:
    """Remove the file behind an /uploads/ URL; external URLs are ignored."""
    name = filename_from_url(url) if url else None
    if name is None:
        return False
    if not default_storage.exists(name):
        return False
    default_storage.delete(name)
    logger.info("Deleted uploaded file %s", name)
    return True


def list_uploaded_files() -> list[str]:
    if not default_storage.exists(""):
        return []
    _, files = default_storage.listdir("")
    return sorted(files)


def uploads_size() -> int:
    return sum(default_storage.size(name) for name in list_uploaded_files())
