"""Session lifecycle helpers for the style-transfer workflow."""

from __future__ import annotations

from fastapi import HTTPException, Request, UploadFile

from models.session_models import SessionSnapshot, UploadedImage
from services.session.session_store import SessionStore
from services.session.style_session import StyleSession
from utils.errors import ValidationError
from utils.media_validation import validate_image_upload


def _require_store(request: Request) -> SessionStore:
	store = getattr(request.app.state, "session_store", None)
	if store is None:
		raise HTTPException(status_code=500, detail="Session store unavailable")
	return store


def get_style_session(request: Request, session_id: str) -> StyleSession:
	"""Return the session or translate a missing id into a 404."""
	try:
		return _require_store(request).get(session_id)
	except KeyError as exc:
		raise HTTPException(status_code=404, detail="Session not found") from exc


async def read_upload(file: UploadFile) -> UploadedImage:
	"""Read and validate an uploaded image."""
	try:
		content = await file.read()
	except Exception as exc:  # pylint: disable=broad-exception-caught
		raise HTTPException(status_code=400, detail="Unable to read uploaded image.") from exc
	try:
		mime_type = validate_image_upload(content, file.content_type)
	except ValidationError as exc:
		raise HTTPException(status_code=400, detail=exc.message) from exc
	return UploadedImage(content=content, mime_type=mime_type, filename=file.filename or "upload")


async def start_session(request: Request) -> SessionSnapshot:
	"""Create a new session and return its initial snapshot."""
	return _require_store(request).create().snapshot()


async def get_session(request: Request, session_id: str) -> SessionSnapshot:
	return get_style_session(request, session_id).snapshot()


async def discard_session(request: Request, session_id: str) -> None:
	"""Drop a session and release its previews."""
	try:
		_require_store(request).discard(session_id)
	except KeyError as exc:
		raise HTTPException(status_code=404, detail="Session not found") from exc


async def upload_target(request: Request, session_id: str, file: UploadFile) -> SessionSnapshot:
	"""Replace the target image and wait for its style analysis to settle."""
	session = get_style_session(request, session_id)
	image = await read_upload(file)
	return await session.upload_target(image)


async def upload_user(request: Request, session_id: str, file: UploadFile) -> SessionSnapshot:
	session = get_style_session(request, session_id)
	image = await read_upload(file)
	return session.upload_user(image)


async def generate(request: Request, session_id: str) -> SessionSnapshot:
	"""Run a generation; failures are reported in the snapshot, not as HTTP errors."""
	return await get_style_session(request, session_id).generate()
