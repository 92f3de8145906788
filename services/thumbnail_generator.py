"""Thumbnail generator for the history gallery.

Wraps Pillow to shrink a generated image (base64 payload) into a square-bounded
PNG used by the gallery grid. Full-size images are served untouched.

Example:
    tg = ThumbnailGenerator(max_size=(256, 256))
    png_bytes = tg.create_thumbnail(generated.data)
"""
from __future__ import annotations

import base64
import binascii
import io
from typing import Tuple

from PIL import Image, UnidentifiedImageError


class ThumbnailGenerator:
    """Generate PNG thumbnails that fit within `max_size`, preserving aspect ratio.

    Args:
        max_size: Maximum width and height for the thumbnail. Defaults to (256, 256).
        background: Color used to flatten transparency. Defaults to white.
    """

    def __init__(self, max_size: Tuple[int, int] = (256, 256), background: Tuple[int, int, int] | None = None):
        self.max_size = max_size
        self.background = background or (255, 255, 255)

    def create_thumbnail(self, image_b64: str | bytes) -> bytes:
        """Return raw PNG bytes of a thumbnail for the base64-encoded image.

        Raises:
            ValueError: If the data is not valid base64 or not a readable image.
        """
        try:
            raw = base64.b64decode(image_b64, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise ValueError("Invalid base64 data provided") from exc

        try:
            src = Image.open(io.BytesIO(raw))
            src.load()
        except (UnidentifiedImageError, OSError) as exc:
            raise ValueError("Decoded bytes are not a supported image format") from exc

        src = src.convert("RGBA")
        src.thumbnail(self.max_size, Image.LANCZOS)

        background = Image.new("RGB", src.size, self.background)
        background.paste(src, mask=src.split()[3])

        out_io = io.BytesIO()
        background.save(out_io, format="PNG", optimize=True)
        return out_io.getvalue()
