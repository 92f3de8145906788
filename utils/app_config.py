"""Process-wide configuration loaded once at startup."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import load_dotenv

from utils.errors import ConfigurationError

DEFAULT_ANALYSIS_MODEL = "gpt-4.1-mini"
DEFAULT_SYNTHESIS_MODEL = "gpt-4.1"
DEFAULT_TIMEOUT = 600.0


@dataclass(frozen=True)
class AppConfig:
    """Credential and model settings injected into both remote clients.

    Attributes:
        api_key: OpenAI API key. Read once, never mutated.
        analysis_model: Vision-capable model used to describe the target style.
        synthesis_model: Model driving the image generation tool.
        timeout: Transport timeout in seconds handed to the OpenAI client.
        log_level: Root logging level name.
    """

    api_key: str
    analysis_model: str = DEFAULT_ANALYSIS_MODEL
    synthesis_model: str = DEFAULT_SYNTHESIS_MODEL
    timeout: float = DEFAULT_TIMEOUT
    log_level: str = "INFO"

    def __repr__(self) -> str:
        return (
            f"AppConfig(api_key='***', analysis_model={self.analysis_model!r}, "
            f"synthesis_model={self.synthesis_model!r}, timeout={self.timeout!r})"
        )


def load_config(environ: Optional[Mapping[str, str]] = None) -> AppConfig:
    """Build an `AppConfig` from the environment (and `.env` when present).

    Args:
        environ: Optional mapping used instead of `os.environ`, mainly for tests.
            When given, `.env` files are not consulted.

    Raises:
        ConfigurationError: If OPENAI_API_KEY is missing or the timeout is not a number.
    """
    if environ is None:
        load_dotenv()  # Load environment variables from .env file if present
        environ = os.environ

    api_key = (environ.get("OPENAI_API_KEY") or "").strip()
    if not api_key:
        raise ConfigurationError("OPENAI_API_KEY environment variable is not set")

    raw_timeout = environ.get("OPENAI_TIMEOUT")
    try:
        timeout = float(raw_timeout) if raw_timeout else DEFAULT_TIMEOUT
    except ValueError as exc:
        raise ConfigurationError(f"OPENAI_TIMEOUT must be a number of seconds, got {raw_timeout!r}") from exc

    return AppConfig(
        api_key=api_key,
        analysis_model=environ.get("STYLE_ANALYSIS_MODEL") or DEFAULT_ANALYSIS_MODEL,
        synthesis_model=environ.get("IMAGE_SYNTHESIS_MODEL") or DEFAULT_SYNTHESIS_MODEL,
        timeout=timeout,
        log_level=(environ.get("LOG_LEVEL") or "INFO").upper(),
    )
