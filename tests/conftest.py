"""Shared fixtures: a scripted stand-in for the async OpenAI client."""

from __future__ import annotations

import base64
import io
from types import SimpleNamespace
from typing import Any, Callable, List

import httpx
import openai
import pytest
from PIL import Image

from services.openai.image_synthesizer import ImageSynthesisClient
from services.openai.style_analyzer import StyleAnalysisClient
from services.session.style_session import StyleSession
from utils.app_config import AppConfig


class ScriptedResponses:
    """Replays queued results for `responses.create`, recording every call."""

    def __init__(self) -> None:
        self.calls: List[dict] = []
        self._script: List[Any] = []

    def queue(self, *results: Any) -> None:
        self._script.extend(results)

    async def create(self, **kwargs: Any) -> Any:
        self.calls.append(kwargs)
        if not self._script:
            raise AssertionError("Unexpected call to responses.create")
        result = self._script.pop(0)
        if isinstance(result, BaseException):
            raise result
        if callable(result):
            return await result(**kwargs)
        return result


class FakeOpenAI:
    def __init__(self) -> None:
        self.responses = ScriptedResponses()


def text_response(text: str) -> SimpleNamespace:
    message = SimpleNamespace(type="message", content=[SimpleNamespace(type="output_text", text=text)])
    return SimpleNamespace(output=[message], output_text=text, usage=SimpleNamespace(input_tokens=12, output_tokens=7))


def image_response(b64: str) -> SimpleNamespace:
    return SimpleNamespace(
        output=[
            SimpleNamespace(type="reasoning", summary=[]),
            SimpleNamespace(type="image_generation_call", result=b64, output_format="png", status="completed"),
        ],
        output_text="",
        usage=None,
    )


def no_image_response() -> SimpleNamespace:
    return text_response("I cannot edit this photo.")


def auth_error() -> openai.AuthenticationError:
    request = httpx.Request("POST", "https://api.openai.com/v1/responses")
    response = httpx.Response(401, request=request)
    return openai.AuthenticationError("Incorrect API key provided: sk-***", response=response, body=None)


def connection_error() -> openai.APIConnectionError:
    return openai.APIConnectionError(request=httpx.Request("POST", "https://api.openai.com/v1/responses"))


def png_bytes(size=(32, 24), color=(200, 80, 40)) -> bytes:
    out = io.BytesIO()
    Image.new("RGB", size, color).save(out, format="PNG")
    return out.getvalue()


def png_b64(**kwargs: Any) -> str:
    return base64.b64encode(png_bytes(**kwargs)).decode("ascii")


@pytest.fixture
def config() -> AppConfig:
    return AppConfig(api_key="sk-test", analysis_model="vision-test", synthesis_model="image-test")


@pytest.fixture
def fake_client() -> FakeOpenAI:
    return FakeOpenAI()


@pytest.fixture
def session_factory(fake_client: FakeOpenAI, config: AppConfig) -> Callable[..., StyleSession]:
    def _make(session_id: str = "s1", **kwargs: Any) -> StyleSession:
        analyzer = StyleAnalysisClient(fake_client, config)
        synthesizer = ImageSynthesisClient(fake_client, config)
        return StyleSession(session_id, analyzer, synthesizer, **kwargs)

    return _make


@pytest.fixture
def session(session_factory) -> StyleSession:
    return session_factory()
