"""Thumbnail generator service.

Provides a small OOP wrapper around Pillow to create history thumbnails
from captured images stored as data URLs. The resulting thumbnail fits
within 160x160 pixels and is returned as raw PNG bytes.

Public class: `ThumbnailGenerator`

Example:
    tg = ThumbnailGenerator(max_size=(160, 160))
    png_bytes = tg.create_thumbnail_from_data_url(record.image_data)
"""
from __future__ import annotations

import io
from typing import Tuple

from PIL import Image

from utils.media_validation import parse_data_url


class ThumbnailGenerator:
    """Generate PNG thumbnails from captured images.

    Args:
        max_size: Maximum width and height for the thumbnail. Defaults to (160, 160).
        background: Optional background color used when flattening images with alpha.
            If None, images with alpha are flattened against white.
    """

    def __init__(self, max_size: Tuple[int, int] = (160, 160), background: Tuple[int, int, int] | None = None):
        self.max_size = max_size
        self.background = background or (255, 255, 255)

    def create_thumbnail_from_data_url(self, data_url: str) -> bytes:
        """Create a PNG thumbnail from an image data URL.

        Raises:
            ValueError: If the data URL cannot be decoded or opened as an image.
        """
        _, raw = parse_data_url(data_url)
        return self.create_thumbnail(raw)

    def create_thumbnail(self, raw: bytes) -> bytes:
        """Create a PNG thumbnail from raw image bytes."""
        try:
            src = Image.open(io.BytesIO(raw))
            src.load()
        except Exception as exc:
            raise ValueError("Decoded bytes are not a supported image format") from exc

        src = src.convert("RGBA")
        src.thumbnail(self.max_size, Image.LANCZOS)

        # Flatten alpha against the background color
        background = Image.new("RGB", src.size, self.background)
        background.paste(src, mask=src.split()[3])

        out_io = io.BytesIO()
        background.save(out_io, format="PNG", optimize=True)
        return out_io.getvalue()
