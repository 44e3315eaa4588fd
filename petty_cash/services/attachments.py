"""
Receipt Attachments

A transaction can carry one picture of its receipt. The picture is stored
inline on the transaction as a base64 data URL, so the ledger file stays a
single self-contained document.

DESIGN DECISION: We check uploads with Pillow before accepting them:
1. The bytes must decode as an image in a supported format
2. The size cap keeps the saved ledger small enough to load quickly

Thumbnails for the transaction list are generated on demand and never
stored.
"""

import base64
import binascii
from io import BytesIO
from typing import Optional

import structlog
from PIL import Image, UnidentifiedImageError

from petty_cash.config import AppSettings, get_settings


logger = structlog.get_logger(__name__)

DATA_URL_PREFIX = "data:"
BASE64_MARKER = ";base64,"


class AttachmentError(Exception):
    """The uploaded file cannot be used as a receipt attachment."""
    pass


def _image_format(image_bytes: bytes) -> str:
    """Identify the image format, verifying the file is not truncated."""
    try:
        with Image.open(BytesIO(image_bytes)) as img:
            image_format = (img.format or "").lower()
            img.verify()
    except (UnidentifiedImageError, OSError, SyntaxError) as e:
        raise AttachmentError(f"File is not a readable image: {e}")
    return image_format


def encode_attachment(
    image_bytes: bytes,
    filename: Optional[str] = None,
    settings: Optional[AppSettings] = None,
) -> str:
    """
    Turn uploaded image bytes into a data URL.

    Raises:
        AttachmentError: If the file is empty, too large, unreadable,
            or in an unsupported format
    """
    settings = settings or get_settings().app

    if not image_bytes:
        raise AttachmentError("File is empty")
    if len(image_bytes) > settings.max_attachment_size_bytes:
        raise AttachmentError(
            f"File is larger than {settings.max_attachment_size_mb} MB"
        )

    image_format = _image_format(image_bytes)
    if image_format not in settings.supported_formats_list:
        raise AttachmentError(
            f"Unsupported image format: {image_format or 'unknown'}. "
            f"Allowed: {', '.join(settings.supported_formats_list)}"
        )

    mime_type = Image.MIME.get(image_format.upper(), f"image/{image_format}")
    encoded = base64.b64encode(image_bytes).decode("ascii")

    logger.info(
        "attachment_encoded",
        filename=filename,
        image_format=image_format,
        size=len(image_bytes),
    )
    return f"{DATA_URL_PREFIX}{mime_type}{BASE64_MARKER}{encoded}"


def decode_data_url(data_url: str) -> tuple[str, bytes]:
    """Split a base64 data URL into (mime_type, raw bytes)."""
    if not data_url.startswith(DATA_URL_PREFIX) or BASE64_MARKER not in data_url:
        raise AttachmentError("Attachment is not a base64 data URL")
    header, payload = data_url[len(DATA_URL_PREFIX):].split(BASE64_MARKER, 1)
    try:
        return header, base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise AttachmentError(f"Attachment data is corrupt: {e}")


def make_thumbnail(data_url: str, size: tuple[int, int] = (96, 96)) -> str:
    """Shrink a stored attachment to a PNG thumbnail data URL."""
    _, image_bytes = decode_data_url(data_url)
    try:
        with Image.open(BytesIO(image_bytes)) as img:
            img.thumbnail(size)
            if img.mode not in ("RGB", "RGBA"):
                img = img.convert("RGBA")
            buffer = BytesIO()
            img.save(buffer, format="PNG")
    except (UnidentifiedImageError, OSError) as e:
        raise AttachmentError(f"Cannot build thumbnail: {e}")

    encoded = base64.b64encode(buffer.getvalue()).decode("ascii")
    return f"{DATA_URL_PREFIX}image/png{BASE64_MARKER}{encoded}"
