import asyncio
import base64
import logging

from fastapi import HTTPException, Request
from fastapi.responses import Response

from controllers.session_controller import get_style_session
from models.session_models import GeneratedImage
from services.thumbnail_generator import ThumbnailGenerator

LOGGER = logging.getLogger(__name__)


def _find_image(request: Request, session_id: str, image_id: int) -> GeneratedImage:
    session = get_style_session(request, session_id)
    try:
        return session.find_image(int(image_id))
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="Image not found") from exc


async def get_preview(request: Request, session_id: str, preview_id: str) -> Response:
    """Return the bytes of an uploaded image that is still on display.

    Raises:
        HTTPException(404) if the preview was superseded or never existed.
    """
    session = get_style_session(request, session_id)
    try:
        preview = session.previews.get(preview_id)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="Preview not found") from exc
    return Response(content=preview.content, media_type=preview.mime_type)


async def get_generated_image(request: Request, session_id: str, image_id: int) -> Response:
    """Return a full-size generated image for the viewer."""
    image = _find_image(request, session_id, image_id)
    return Response(content=base64.b64decode(image.data), media_type=image.mime_type)


async def download_generated_image(request: Request, session_id: str, image_id: int) -> Response:
    """Return a generated image as an attachment named `creaura-generated-<id>.png`."""
    image = _find_image(request, session_id, image_id)
    return Response(
        content=base64.b64decode(image.data),
        media_type=image.mime_type,
        headers={"Content-Disposition": f'attachment; filename="{image.download_filename}"'},
    )


async def get_thumbnail(request: Request, session_id: str, image_id: int) -> Response:
    """Return a PNG thumbnail of a history entry for the gallery grid.

    Raises:
        HTTPException(404) if the image is unknown, 422 if its payload is not a readable image.
    """
    image = _find_image(request, session_id, image_id)
    thumbnailer = ThumbnailGenerator()
    try:
        # Pillow work is blocking -> run in thread
        png_bytes = await asyncio.to_thread(thumbnailer.create_thumbnail, image.data)
    except ValueError as exc:
        LOGGER.error("Thumbnail generation failed for image %s: %s", image_id, exc)
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return Response(content=png_bytes, media_type="image/png")
