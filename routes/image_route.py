from fastapi import APIRouter, Request

from controllers.image_controller import (
	download_generated_image,
	get_generated_image,
	get_preview,
	get_thumbnail,
)

router = APIRouter(prefix="/sessions/{session_id}", tags=["images"])


@router.get("/previews/{preview_id}")
async def get_preview_route(request: Request, session_id: str, preview_id: str):
	"""Return the uploaded bytes behind a preview URI."""
	return await get_preview(request, session_id, preview_id)


@router.get("/images/{image_id}")
async def get_image_route(request: Request, session_id: str, image_id: int):
	"""Return a full-size generated image."""
	return await get_generated_image(request, session_id, image_id)


@router.get("/images/{image_id}/thumbnail")
async def get_image_thumbnail(request: Request, session_id: str, image_id: int):
	"""Return the PNG thumbnail bytes for the specified history image."""
	return await get_thumbnail(request, session_id, image_id)


@router.get("/images/{image_id}/download")
async def download_image_route(request: Request, session_id: str, image_id: int):
	"""Return the generated PNG as a file download."""
	return await download_generated_image(request, session_id, image_id)
