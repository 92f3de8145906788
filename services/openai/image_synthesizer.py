"""Identity-preserving restyling of the user image via the image generation tool."""

import base64
import binascii
import logging
import time
from typing import Any, Dict, List, Optional

from openai import AsyncOpenAI

from services.openai.error_mapping import to_service_failure
from services.openai.media_inputs import build_image_generation_tool, build_image_message
from services.openai.prompts import build_synthesis_prompt
from services.openai.response_parser import find_first_image, iter_parts
from utils.app_config import AppConfig
from utils.errors import ServiceError

LOGGER = logging.getLogger(__name__)
OUTPUT_FORMAT = "png"


class ImageSynthesisClient:
    """Re-render a user photo in a described style while keeping the subject's face."""

    def __init__(self, client: AsyncOpenAI, config: AppConfig) -> None:
        if client is None:
            raise ValueError("OpenAI client must be provided.")
        self.client = client
        self.config = config

    async def synthesize(self, image_b64: str, mime_type: str, style_description: str) -> Optional[str]:
        """Return the base64 payload of the generated image, or None if no image came back.

        Raises:
            AuthenticationError: If the API key was rejected.
            ServiceError: For any other failure, including image data that is not valid base64.
        """
        start_time = time.time()
        inputs = build_image_message(image_b64, mime_type, build_synthesis_prompt(style_description))
        try:
            response = await self._create_response(inputs)
        except Exception as exc:
            raise to_service_failure(exc, "generate image") from exc

        parts = iter_parts(response)
        image = find_first_image(parts)
        if image is None:
            LOGGER.warning(
                "Image synthesis returned no image data (part types: %s)",
                [type(part).__name__ for part in parts],
            )
            return None

        try:
            base64.b64decode(image.data, validate=True)
        except (binascii.Error, ValueError) as exc:
            LOGGER.error("Image synthesis returned undecodable image data: %s", exc)
            raise ServiceError(f"Failed to generate image: the returned image data is not valid base64 ({exc})") from exc

        LOGGER.info("Image synthesis finished in %.3fs", time.time() - start_time)
        return image.data

    async def _create_response(self, inputs: List[Dict[str, Any]]) -> Any:
        """Send the image and composite instruction, forcing image-only output."""
        try:
            return await self.client.responses.create(
                model=self.config.synthesis_model,
                input=inputs,
                tools=[build_image_generation_tool(OUTPUT_FORMAT)],
                tool_choice={"type": "image_generation"},
            )
        except Exception as exc:
            LOGGER.error("Error calling OpenAI for image generation: %s", exc)
            raise
