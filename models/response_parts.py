"""Tagged variants for the heterogeneous parts a model response can carry."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union


@dataclass(frozen=True)
class TextPart:
    """Free text emitted by the model."""

    text: str


@dataclass(frozen=True)
class ImagePart:
    """Inline image bytes (base64) emitted by the model."""

    data: str


@dataclass(frozen=True)
class OtherPart:
    """Any output item the application does not interpret (reasoning, tool calls...)."""

    type: Optional[str]


ResponsePart = Union[TextPart, ImagePart, OtherPart]
