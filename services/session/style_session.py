"""Finite-state session driving upload, analysis, generation and history."""

from __future__ import annotations

import logging
import time
from typing import Callable, Optional

from models.session_models import (
	GeneratedImage,
	HistoryEntry,
	SessionSnapshot,
	SessionState,
	SessionStatus,
	UploadedImage,
)
from services.openai.error_mapping import to_service_failure
from services.openai.image_synthesizer import ImageSynthesisClient
from services.openai.style_analyzer import StyleAnalysisClient
from services.session.preview_store import PreviewStore
from utils.errors import EmptyResultError, ValidationError
from utils.media_validation import file_to_base64

LOGGER = logging.getLogger(__name__)

MISSING_INPUTS_MESSAGE = "Please upload both images and wait for the style analysis to complete."
BUSY_MESSAGE = "Please wait for the current operation to finish."
EMPTY_RESULT_MESSAGE = "The API did not return an image. Please try again."


class StyleSession:
	"""Coordinate one user's uploads and remote calls.

	Every operation takes a ticket from `state.operation`. Results are applied,
	and the status returned to IDLE, only by the operation holding the newest
	ticket; a superseded operation finishes silently. A generation whose user
	image was replaced while it ran is dropped the same way.
	"""

	def __init__(
		self,
		session_id: str,
		analyzer: StyleAnalysisClient,
		synthesizer: ImageSynthesisClient,
		*,
		previews: Optional[PreviewStore] = None,
		clock: Callable[[], float] = time.time,
	) -> None:
		self.state = SessionState(session_id=session_id)
		self.analyzer = analyzer
		self.synthesizer = synthesizer
		self.previews = previews if previews is not None else PreviewStore()
		self._clock = clock
		self._last_image_id = 0

	@property
	def session_id(self) -> str:
		return self.state.session_id

	async def upload_target(self, image: UploadedImage) -> SessionSnapshot:
		"""Store a new target image and derive its style description."""
		state = self.state
		self._attach_preview(image, state.target_image)
		state.target_image = image
		state.error = None
		state.style_description = None
		state.generated_image = None
		ticket = self._begin(SessionStatus.ANALYZING)
		try:
			image_b64 = await file_to_base64(image.content)
			description = await self.analyzer.analyze_style(image_b64, image.mime_type)
		except Exception as exc:  # pylint: disable=broad-exception-caught
			self._fail(ticket, exc, "analyze image style")
		else:
			if self._is_current(ticket):
				state.style_description = description
		finally:
			self._finish(ticket)
		return self.snapshot()

	def upload_user(self, image: UploadedImage) -> SessionSnapshot:
		"""Store a new user image. No remote call is made.

		A generation already in flight still finishes, but its result (or failure)
		belongs to the replaced photo and is dropped.
		"""
		state = self.state
		self._attach_preview(image, state.user_image)
		state.user_image = image
		state.generated_image = None
		return self.snapshot()

	async def generate(self) -> SessionSnapshot:
		"""Restyle the user image with the current style description."""
		state = self.state
		if not state.can_generate:
			busy = state.status is not SessionStatus.IDLE
			state.error = ValidationError(BUSY_MESSAGE if busy else MISSING_INPUTS_MESSAGE)
			return self.snapshot()

		user_image = state.user_image
		style_description = state.style_description
		state.error = None
		state.generated_image = None
		ticket = self._begin(SessionStatus.GENERATING)
		try:
			image_b64 = await file_to_base64(user_image.content)
			result = await self.synthesizer.synthesize(image_b64, user_image.mime_type, style_description)
			if not result:
				raise EmptyResultError(EMPTY_RESULT_MESSAGE)
		except Exception as exc:  # pylint: disable=broad-exception-caught
			self._fail(ticket, exc, "generate image", applies=self._user_image_unchanged(ticket, user_image))
		else:
			if self._is_current(ticket) and self._user_image_unchanged(ticket, user_image):
				generated = GeneratedImage(id=self._next_image_id(), data=result)
				state.generated_image = generated
				state.history.insert(0, generated)
		finally:
			self._finish(ticket)
		return self.snapshot()

	def find_image(self, image_id: int) -> GeneratedImage:
		"""Return a history entry by id or raise KeyError."""
		for image in self.state.history:
			if image.id == image_id:
				return image
		raise KeyError(f"Image {image_id} not found")

	def close(self) -> None:
		"""Release every preview held by the session."""
		self.previews.clear()
		for image in (self.state.target_image, self.state.user_image):
			if image is not None:
				image.preview_id = None
				image.preview_uri = None

	def snapshot(self) -> SessionSnapshot:
		state = self.state
		return SessionSnapshot(
			session_id=state.session_id,
			status=state.status,
			status_label=state.status.label,
			style_description=state.style_description,
			target_preview=state.target_image.preview_uri if state.target_image else None,
			user_preview=state.user_image.preview_uri if state.user_image else None,
			generated_image=state.generated_image,
			history=[HistoryEntry(id=image.id, filename=image.download_filename) for image in state.history],
			error=state.error.message if state.error else None,
			error_kind=state.error.kind if state.error else None,
			can_generate=state.can_generate,
		)

	def _attach_preview(self, image: UploadedImage, previous: Optional[UploadedImage]) -> None:
		if previous is not None:
			self.previews.release(previous.preview_id)
			previous.preview_id = None
			previous.preview_uri = None
		image.preview_id = self.previews.create(image.content, image.mime_type)
		image.preview_uri = f"/sessions/{self.session_id}/previews/{image.preview_id}"

	def _begin(self, status: SessionStatus) -> int:
		self.state.operation += 1
		self.state.status = status
		return self.state.operation

	def _is_current(self, ticket: int) -> bool:
		if ticket == self.state.operation:
			return True
		LOGGER.debug("Session %s: discarding result of superseded operation %d", self.session_id, ticket)
		return False

	def _user_image_unchanged(self, ticket: int, user_image: UploadedImage) -> bool:
		if self.state.user_image is user_image:
			return True
		LOGGER.debug("Session %s: user image replaced during operation %d, dropping its result", self.session_id, ticket)
		return False

	def _fail(self, ticket: int, exc: Exception, action: str, applies: bool = True) -> None:
		error = to_service_failure(exc, action)
		LOGGER.error("Session %s: failed to %s: %s", self.session_id, action, exc)
		if applies and self._is_current(ticket):
			self.state.error = error

	def _finish(self, ticket: int) -> None:
		if ticket == self.state.operation:
			self.state.status = SessionStatus.IDLE

	def _next_image_id(self) -> int:
		image_id = int(self._clock() * 1000)
		if image_id <= self._last_image_id:
			image_id = self._last_image_id + 1
		self._last_image_id = image_id
		return image_id
