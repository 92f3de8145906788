"""Transient preview handles for uploaded images."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict
from uuid import uuid4


@dataclass(frozen=True)
class Preview:
	content: bytes
	mime_type: str


class PreviewStore:
	"""Hold uploaded bytes behind opaque ids until the upload is superseded."""

	def __init__(self) -> None:
		self._previews: Dict[str, Preview] = {}

	def __len__(self) -> int:
		return len(self._previews)

	def create(self, content: bytes, mime_type: str) -> str:
		"""Register a preview and return its id."""
		preview_id = uuid4().hex
		self._previews[preview_id] = Preview(content=content, mime_type=mime_type)
		return preview_id

	def get(self, preview_id: str) -> Preview:
		"""Return a preview or raise KeyError if it was released or never existed."""
		preview = self._previews.get(preview_id)
		if preview is None:
			raise KeyError(f"Preview {preview_id} not found")
		return preview

	def release(self, preview_id: str | None) -> None:
		"""Drop a preview. Unknown or empty ids are ignored."""
		if preview_id:
			self._previews.pop(preview_id, None)

	def clear(self) -> None:
		self._previews.clear()
