"""Simple in-memory store for style-transfer sessions."""

from __future__ import annotations

import logging
from typing import Callable, Dict
from uuid import uuid4

from services.session.style_session import StyleSession

LOGGER = logging.getLogger(__name__)

SessionFactory = Callable[[str], StyleSession]


class SessionStore:
	"""Manage browser sessions for the lifetime of the process."""

	def __init__(self, factory: SessionFactory) -> None:
		self._factory = factory
		self._sessions: Dict[str, StyleSession] = {}

	def __len__(self) -> int:
		return len(self._sessions)

	def create(self) -> StyleSession:
		"""Create a new idle session."""
		session_id = uuid4().hex
		session = self._factory(session_id)
		self._sessions[session_id] = session
		LOGGER.info("Session %s created", session_id)
		return session

	def get(self, session_id: str) -> StyleSession:
		"""Return a session or raise KeyError if missing."""
		session = self._sessions.get(session_id)
		if session is None:
			raise KeyError(f"Session {session_id} not found")
		return session

	def discard(self, session_id: str) -> None:
		"""Forget a session and release its previews."""
		session = self._sessions.pop(session_id, None)
		if session is None:
			raise KeyError(f"Session {session_id} not found")
		session.close()
		LOGGER.info("Session %s discarded", session_id)

	def close_all(self) -> None:
		for session in self._sessions.values():
			session.close()
		self._sessions.clear()
