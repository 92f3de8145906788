"""Style description of a target image using OpenAI's Responses API."""

import logging
import time
from typing import Any, Dict, List

from openai import AsyncOpenAI

from services.openai.error_mapping import to_service_failure
from services.openai.media_inputs import build_image_message
from services.openai.prompts import build_analysis_prompt
from services.openai.response_parser import extract_text, extract_usage
from utils.app_config import AppConfig
from utils.errors import ServiceError

LOGGER = logging.getLogger(__name__)


class StyleAnalysisClient:
    """Ask a vision-capable model for a free-text description of an image's style."""

    def __init__(self, client: AsyncOpenAI, config: AppConfig) -> None:
        """Initialize the client with a shared OpenAI client and the app configuration."""
        if client is None:
            raise ValueError("OpenAI client must be provided.")
        self.client = client
        self.config = config
        self.prompt = build_analysis_prompt()

    async def analyze_style(self, image_b64: str, mime_type: str) -> str:
        """Return the model's style description of the image, verbatim.

        Args:
            image_b64: Base64-encoded image bytes.
            mime_type: MIME type of the encoded image (e.g., image/jpeg).

        Returns:
            The free-text description produced by the model.

        Raises:
            AuthenticationError: If the API key was rejected.
            ServiceError: For any other failure, including an empty answer.
        """
        start_time = time.time()
        inputs = build_image_message(image_b64, mime_type, self.prompt)
        try:
            response = await self._create_response(inputs)
        except Exception as exc:
            raise to_service_failure(exc, "analyze image style") from exc

        description = extract_text(response)
        if not description:
            LOGGER.error("Style analysis returned no text. Full response object: %r", response)
            raise ServiceError("Failed to analyze image style: the model returned an empty description.")

        usage: Dict[str, Any] = extract_usage(response)
        LOGGER.info(
            "Style analysis finished in %.3fs (input_tokens=%s, output_tokens=%s)",
            time.time() - start_time,
            usage["input_tokens"],
            usage["output_tokens"],
        )
        return description

    async def _create_response(self, inputs: List[Dict[str, Any]]) -> Any:
        """Send the image and prompt to the analysis model."""
        try:
            return await self.client.responses.create(model=self.config.analysis_model, input=inputs)
        except Exception as exc:
            LOGGER.error("Error calling OpenAI for style analysis: %s", exc)
            raise
