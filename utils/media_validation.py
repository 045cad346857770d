"""Validation helpers for captured medicine images."""

import base64
import binascii
import io
from typing import Tuple

from PIL import Image, UnidentifiedImageError

ALLOWED_IMAGE_TYPES = {
    "image/jpeg",
    "image/jpg",
    "image/png",
    "image/webp",
    "image/heic",
    "image/bmp",
}


def parse_data_url(data_url: str) -> Tuple[str, bytes]:
    """Split a base64 data URL into its MIME type and decoded bytes.

    Raises:
        ValueError: If the string is not a base64 image data URL.
    """
    if not data_url or not data_url.startswith("data:"):
        raise ValueError("Image must be provided as a data URL.")
    header, sep, encoded = data_url.partition(",")
    if not sep or not encoded:
        raise ValueError("Image data URL has no payload.")

    media = header[len("data:"):]
    mime_type, _, params = media.partition(";")
    if "base64" not in params.split(";"):
        raise ValueError("Image data URL must be base64-encoded.")
    mime_type = mime_type.strip().lower() or "image/jpeg"
    if mime_type not in ALLOWED_IMAGE_TYPES:
        raise ValueError(f"Unsupported image content type: {mime_type}")

    try:
        raw = base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ValueError("Image data URL payload is not valid base64.") from exc
    if not raw:
        raise ValueError("Image data URL payload is empty.")
    return mime_type, raw


def ensure_image_data_url(data_url: str) -> bytes:
    """Return the decoded image bytes, checking that Pillow can read them.

    HEIC captures are accepted without decoding since Pillow cannot open
    them without a plugin; the completion backend handles them directly.
    """
    mime_type, raw = parse_data_url(data_url)
    if mime_type == "image/heic":
        return raw
    try:
        with Image.open(io.BytesIO(raw)) as img:
            img.verify()
    except (UnidentifiedImageError, OSError, SyntaxError) as exc:
        raise ValueError("Decoded bytes are not a supported image format") from exc
    return raw
