"""Helpers to parse Responses API outputs into tagged parts."""

from typing import Any, Dict, Iterable, List, Optional

from models.response_parts import ImagePart, OtherPart, ResponsePart, TextPart

IMAGE_CALL_TYPE = "image_generation_call"


def _field(item: Any, name: str, default: Any = None) -> Any:
    """Read an attribute from an SDK model or a key from a plain dict."""
    if isinstance(item, dict):
        return item.get(name, default)
    return getattr(item, name, default)


def _message_parts(item: Any) -> List[ResponsePart]:
    parts: List[ResponsePart] = []
    for content in _field(item, "content", None) or []:
        content_type = _field(content, "type")
        if content_type == "output_text":
            parts.append(TextPart(text=_field(content, "text", "") or ""))
        else:
            parts.append(OtherPart(type=content_type))
    return parts


def iter_parts(response: Any) -> List[ResponsePart]:
    """Flatten a response's output items into an ordered list of tagged parts."""
    parts: List[ResponsePart] = []
    for item in _field(response, "output", None) or []:
        item_type = _field(item, "type")
        if item_type == "message":
            parts.extend(_message_parts(item))
        elif item_type == IMAGE_CALL_TYPE and _field(item, "result"):
            parts.append(ImagePart(data=_field(item, "result")))
        else:
            parts.append(OtherPart(type=item_type))
    return parts


def find_first_image(parts: Iterable[ResponsePart]) -> Optional[ImagePart]:
    """Return the first part carrying inline image data, or None."""
    for part in parts:
        if isinstance(part, ImagePart):
            return part
    return None


def extract_text(response: Any) -> str:
    """Return the concatenated text output of the response."""
    texts = [part.text for part in iter_parts(response) if isinstance(part, TextPart)]
    if texts:
        return "".join(texts)
    return _field(response, "output_text", "") or ""


def extract_usage(response: Any) -> Dict[str, Optional[int]]:
    """Return token usage information from the response, if present."""
    usage = _field(response, "usage", None)
    return {
        "input_tokens": _field(usage, "input_tokens", None) if usage else None,
        "output_tokens": _field(usage, "output_tokens", None) if usage else None,
    }
