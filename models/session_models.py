"""Session domain models for the style-transfer workflow."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import List, Optional

from utils.errors import CreauraError

DOWNLOAD_PREFIX = "creaura-generated"


class SessionStatus(str, enum.Enum):
	"""Which asynchronous operation, if any, the session is waiting on."""

	IDLE = "idle"
	ANALYZING = "analyzing"
	GENERATING = "generating"

	@property
	def label(self) -> str:
		"""Return the button caption shown for this status."""
		return _STATUS_LABELS[self]


_STATUS_LABELS = {
	SessionStatus.IDLE: "Generate Image",
	SessionStatus.ANALYZING: "Analyzing Style...",
	SessionStatus.GENERATING: "Generating Image...",
}


@dataclass
class UploadedImage:
	"""An uploaded file held for the lifetime of the session slot it occupies."""

	content: bytes
	mime_type: str
	filename: str = "upload"
	preview_id: Optional[str] = None
	preview_uri: Optional[str] = None


@dataclass(frozen=True)
class GeneratedImage:
	"""A synthesized result. The id is a millisecond timestamp, unique per session."""

	id: int
	data: str
	mime_type: str = "image/png"

	@property
	def data_uri(self) -> str:
		return f"data:{self.mime_type};base64,{self.data}"

	@property
	def download_filename(self) -> str:
		extension = self.mime_type.split("/")[-1] if "/" in self.mime_type else "png"
		return f"{DOWNLOAD_PREFIX}-{self.id}.{extension}"


@dataclass
class SessionState:
	"""Mutable in-memory state behind a single browser session."""

	session_id: str
	target_image: Optional[UploadedImage] = None
	user_image: Optional[UploadedImage] = None
	style_description: Optional[str] = None
	generated_image: Optional[GeneratedImage] = None
	history: List[GeneratedImage] = field(default_factory=list)
	status: SessionStatus = SessionStatus.IDLE
	error: Optional[CreauraError] = None
	operation: int = 0

	@property
	def can_generate(self) -> bool:
		return bool(self.style_description) and self.user_image is not None and self.status is SessionStatus.IDLE


@dataclass(frozen=True)
class HistoryEntry:
	"""Read-only summary of a history item for the presentation layer."""

	id: int
	filename: str


@dataclass(frozen=True)
class SessionSnapshot:
	"""Immutable view of a session handed to the presentation layer."""

	session_id: str
	status: SessionStatus
	status_label: str
	style_description: Optional[str]
	target_preview: Optional[str]
	user_preview: Optional[str]
	generated_image: Optional[GeneratedImage]
	history: List[HistoryEntry]
	error: Optional[str]
	error_kind: Optional[str]
	can_generate: bool
