"""Normalise uploaded pictures to WebP.

Every accepted image is rotated according to its EXIF orientation, shrunk
to fit inside 4000x4000 (never enlarged) and re-encoded as WebP, quality 80.
"""

from __future__ import annotations

import logging
import secrets
import string
import time
import warnings
from dataclasses import dataclass
from io import BytesIO

from django.conf import settings
from PIL import Image
from PIL import ImageOps
from PIL import UnidentifiedImageError

from noel_famille.uploads.storage import save_upload

logger = logging.getLogger(__name__)

ALLOWED_CONTENT_TYPES = frozenset(
    {
        "image/jpeg",
        "image/jpg",
        "image/png",
        "image/gif",
        "image/webp",
        "image/bmp",
    },
)
MAX_DIMENSION = 4000
WEBP_QUALITY = 80
_RANDOM_ALPHABET = string.ascii_lowercase + string.digits


class ImageProcessingError(ValueError):
    """The upload is not an image we accept."""


@dataclass(frozen=True)
class StoredImage:
    filename: str
    url: str
    size: int


def generate_filename() -> str:
    suffix = "".join(secrets.choice(_RANDOM_ALPHABET) for _ in range(6))
    return f"{int(time.time() * 1000)}-{suffix}.webp"


def _has_alpha(img: Image.Image) -> bool:
    return img.mode in ("RGBA", "LA") or (
        img.mode == "P" and "transparency" in img.info
    )


def convert_to_webp(data: bytes) -> bytes:
    try:
        with warnings.catch_warnings():
            # Oversized pictures are refused rather than decoded
            warnings.simplefilter("error", Image.DecompressionBombWarning)
            webp = _encode_webp(data)
    except (
        UnidentifiedImageError,
        OSError,
        Image.DecompressionBombError,
        Image.DecompressionBombWarning,
    ) as exc:
        msg = "Fichier image invalide"
        raise ImageProcessingError(msg) from exc
    return webp


def _encode_webp(data: bytes) -> bytes:
    with Image.open(BytesIO(data)) as source:
        img = ImageOps.exif_transpose(source)
        img.thumbnail((MAX_DIMENSION, MAX_DIMENSION))
        img = img.convert("RGBA" if _has_alpha(img) else "RGB")
        out = BytesIO()
        img.save(out, format="WEBP", quality=WEBP_QUALITY)
    return out.getvalue()


def validate_upload(uploaded_file) -> None:
    content_type = (getattr(uploaded_file, "content_type", "") or "").lower()
    if content_type not in ALLOWED_CONTENT_TYPES:
        msg = "Type de fichier non autorisé. Formats acceptés : JPEG, PNG, GIF, WebP, BMP"
        raise ImageProcessingError(msg)
    max_bytes = settings.UPLOAD_MAX_BYTES
    if (getattr(uploaded_file, "size", 0) or 0) > max_bytes:
        max_mb = max_bytes // (1024 * 1024)
        msg = f"Fichier trop volumineux (max {max_mb} Mo)"
        raise ImageProcessingError(msg)


def process_image_upload(uploaded_file) -> StoredImage:
    """Validate, convert and store an uploaded image."""
    validate_upload(uploaded_file)
    webp = convert_to_webp(uploaded_file.read())
    url = save_upload(generate_filename(), webp)
    filename = url.rsplit("/", 1)[-1]
    logger.info(
        "Stored image %s (%s -> %s bytes)",
        filename,
        getattr(uploaded_file, "size", "?"),
        len(webp),
    )
    return StoredImage(filename=filename, url=url, size=len(webp))
