"""Utilities to build multimodal input payloads for the Responses API."""

from typing import Any, Dict, List


def to_image_data_url(image_b64: str, mime_type: str) -> str:
    """Wrap a base64 image payload into a data URL suitable for vision input."""
    if not image_b64:
        raise ValueError("Image payload must not be empty.")
    return f"data:{mime_type or 'image/jpeg'};base64,{image_b64}"


def build_image_message(image_b64: str, mime_type: str, prompt: str) -> List[Dict[str, Any]]:
    """Return a single user message carrying the inline image followed by the prompt."""
    return [
        {
            "type": "message",
            "role": "user",
            "content": [
                {"type": "input_image", "image_url": to_image_data_url(image_b64, mime_type)},
                {"type": "input_text", "text": prompt},
            ],
        }
    ]


def build_image_generation_tool(output_format: str = "png") -> Dict[str, Any]:
    """Describe the hosted image generation tool."""
    return {"type": "image_generation", "output_format": output_format}
