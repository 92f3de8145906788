"""FastAPI routes for style-transfer sessions."""

from typing import List, Optional

from fastapi import APIRouter, File, HTTPException, Request, Response, UploadFile
from pydantic import BaseModel

from controllers import session_controller
from models.session_models import SessionSnapshot

router = APIRouter(prefix="/sessions", tags=["sessions"])


class GeneratedImageView(BaseModel):
	id: int
	data_uri: str
	filename: str
	url: str
	download_url: str


class HistoryEntryView(BaseModel):
	id: int
	filename: str
	url: str
	thumbnail_url: str
	download_url: str


class SessionView(BaseModel):
	session_id: str
	status: str
	status_label: str
	style_description: Optional[str] = None
	target_preview: Optional[str] = None
	user_preview: Optional[str] = None
	generated_image: Optional[GeneratedImageView] = None
	history: List[HistoryEntryView] = []
	error: Optional[str] = None
	error_kind: Optional[str] = None
	can_generate: bool = False

	@classmethod
	def from_snapshot(cls, snapshot: SessionSnapshot) -> "SessionView":
		base = f"/sessions/{snapshot.session_id}/images"
		current = snapshot.generated_image
		return cls(
			session_id=snapshot.session_id,
			status=snapshot.status.value,
			status_label=snapshot.status_label,
			style_description=snapshot.style_description,
			target_preview=snapshot.target_preview,
			user_preview=snapshot.user_preview,
			generated_image=GeneratedImageView(
				id=current.id,
				data_uri=current.data_uri,
				filename=current.download_filename,
				url=f"{base}/{current.id}",
				download_url=f"{base}/{current.id}/download",
			)
			if current
			else None,
			history=[
				HistoryEntryView(
					id=entry.id,
					filename=entry.filename,
					url=f"{base}/{entry.id}",
					thumbnail_url=f"{base}/{entry.id}/thumbnail",
					download_url=f"{base}/{entry.id}/download",
				)
				for entry in snapshot.history
			],
			error=snapshot.error,
			error_kind=snapshot.error_kind,
			can_generate=snapshot.can_generate,
		)


@router.post("", response_model=SessionView, summary="Start a new session")
async def start_session_route(request: Request):
	try:
		snapshot = await session_controller.start_session(request)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))
	return SessionView.from_snapshot(snapshot)


@router.get("/{session_id}", response_model=SessionView, summary="Read the session state")
async def get_session_route(request: Request, session_id: str):
	return SessionView.from_snapshot(await session_controller.get_session(request, session_id))


@router.delete("/{session_id}", status_code=204, summary="Discard a session")
async def discard_session_route(request: Request, session_id: str):
	await session_controller.discard_session(request, session_id)
	return Response(status_code=204)


@router.post("/{session_id}/target", response_model=SessionView, summary="Upload the target image")
async def upload_target_route(request: Request, session_id: str, image: UploadFile = File(...)):
	"""Store the target image and return the state once its style analysis settles.

	Analysis failures are reported in `error`/`error_kind`, never as 5xx responses.
	"""
	snapshot = await session_controller.upload_target(request, session_id, image)
	return SessionView.from_snapshot(snapshot)


@router.post("/{session_id}/user", response_model=SessionView, summary="Upload the user image")
async def upload_user_route(request: Request, session_id: str, image: UploadFile = File(...)):
	snapshot = await session_controller.upload_user(request, session_id, image)
	return SessionView.from_snapshot(snapshot)


@router.post("/{session_id}/generate", response_model=SessionView, summary="Generate a styled image")
async def generate_route(request: Request, session_id: str):
	"""Run a generation. Validation, empty results and service failures land in `error`."""
	snapshot = await session_controller.generate(request, session_id)
	return SessionView.from_snapshot(snapshot)
