"""Validation and base64 encoding helpers for uploaded images."""

import asyncio
import base64
import inspect
import os
from typing import Any

import aiofiles

from utils.errors import ValidationError

ALLOWED_IMAGE_TYPES = {
    "image/jpeg",
    "image/jpg",
    "image/png",
    "image/webp",
    "image/gif",
    "image/heic",
    "image/heif",
}


def normalize_mime_type(mime_type: str | None) -> str:
    """Strip MIME parameters and lowercase the type (e.g. 'image/PNG; q=1' -> 'image/png')."""
    return (mime_type or "").lower().split(";", 1)[0].strip()


def validate_image_upload(content: bytes, mime_type: str | None) -> str:
    """Check an uploaded image and return its normalized MIME type.

    Raises:
        ValidationError: If the payload is empty or the type is not a supported image.
    """
    if not content:
        raise ValidationError("Uploaded image is empty.")
    normalized = normalize_mime_type(mime_type)
    if normalized not in ALLOWED_IMAGE_TYPES:
        raise ValidationError(f"Unsupported image content type: {mime_type or 'unknown'}")
    return normalized


def _encode(raw: bytes) -> str:
    return base64.b64encode(raw).decode("ascii")


async def _read_path(path: str | os.PathLike) -> bytes:
    async with aiofiles.open(path, "rb") as fh:
        return await fh.read()


async def file_to_base64(source: Any) -> str:
    """Read a binary image source fully and return its base64 encoding.

    The source may be raw bytes, a filesystem path, or a file-like object whose
    `read()` is either synchronous or a coroutine (e.g. FastAPI's UploadFile).

    Raises:
        OSError: If the source cannot be read.
    """
    if isinstance(source, (bytes, bytearray, memoryview)):
        return await asyncio.to_thread(_encode, bytes(source))

    try:
        if isinstance(source, (str, os.PathLike)):
            raw = await _read_path(source)
        else:
            reader = getattr(source, "read", None)
            if reader is None:
                raise TypeError(f"{type(source).__name__} is not a readable binary source")
            if inspect.iscoroutinefunction(reader):
                raw = await reader()
            else:
                raw = await asyncio.to_thread(reader)
    except OSError:
        raise
    except Exception as exc:
        raise OSError(f"Unable to read image file: {exc}") from exc

    if not isinstance(raw, (bytes, bytearray)):
        raise OSError("Image source did not return binary data.")
    return await asyncio.to_thread(_encode, bytes(raw))
