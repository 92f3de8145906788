import base64
import io

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from main import create_app
from utils.errors import ConfigurationError

from conftest import auth_error, image_response, no_image_response, png_b64, png_bytes, text_response

STYLE = "soft window light, urban background, 90s film look"


@pytest.fixture
def client(config, fake_client):
    with TestClient(create_app(config=config, openai_client=fake_client)) as test_client:
        yield test_client


def new_session(client) -> str:
    response = client.post("/sessions")
    assert response.status_code == 200
    return response.json()["session_id"]


def upload(client, session_id, slot, name="photo.png", content=None, mime="image/png"):
    files = {"image": (name, content if content is not None else png_bytes(), mime)}
    return client.post(f"/sessions/{session_id}/{slot}", files=files)


def test_missing_api_key_aborts_startup(monkeypatch):
    monkeypatch.setattr("utils.app_config.load_dotenv", lambda: False)
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    with pytest.raises(ConfigurationError):
        with TestClient(create_app()):
            pass


def test_health_reports_models(client):
    body = client.get("/health").json()
    assert body["ok"] is True
    assert body["analysis_model"] == "vision-test"
    assert body["synthesis_model"] == "image-test"


def test_new_session_is_idle(client):
    body = client.post("/sessions").json()
    assert body["status"] == "idle"
    assert body["status_label"] == "Generate Image"
    assert body["can_generate"] is False
    assert body["history"] == []


def test_full_flow_and_downloads(client, fake_client):
    session_id = new_session(client)
    result_b64 = png_b64(size=(640, 480))
    fake_client.responses.queue(text_response(STYLE), image_response(result_b64))

    analyzed = upload(client, session_id, "target", "target.jpg", mime="image/jpeg").json()
    assert analyzed["style_description"] == STYLE
    assert analyzed["status"] == "idle"
    preview = client.get(analyzed["target_preview"])
    assert preview.status_code == 200
    assert preview.headers["content-type"] == "image/jpeg"

    ready = upload(client, session_id, "user", "user.png").json()
    assert ready["can_generate"] is True
    assert len(fake_client.responses.calls) == 1

    generated = client.post(f"/sessions/{session_id}/generate").json()
    image = generated["generated_image"]
    assert image["data_uri"] == f"data:image/png;base64,{result_b64}"
    assert [entry["id"] for entry in generated["history"]] == [image["id"]]

    full = client.get(image["url"])
    assert full.content == base64.b64decode(result_b64)

    download = client.get(image["download_url"])
    assert download.status_code == 200
    assert download.headers["content-type"] == "image/png"
    assert f'filename="creaura-generated-{image["id"]}.png"' in download.headers["content-disposition"]

    thumbnail = client.get(generated["history"][0]["thumbnail_url"])
    assert thumbnail.status_code == 200
    assert max(Image.open(io.BytesIO(thumbnail.content)).size) <= 256


def test_errors_are_reported_in_the_snapshot(client, fake_client):
    session_id = new_session(client)
    fake_client.responses.queue(auth_error())

    body = upload(client, session_id, "target").json()

    assert body["error_kind"] == "authentication"
    assert "Invalid API Key" in body["error"]
    assert body["status"] == "idle"


def test_generate_without_inputs_is_a_validation_message(client, fake_client):
    session_id = new_session(client)
    response = client.post(f"/sessions/{session_id}/generate")
    assert response.status_code == 200
    assert response.json()["error_kind"] == "validation"
    assert fake_client.responses.calls == []


def test_empty_result_is_reported(client, fake_client):
    session_id = new_session(client)
    fake_client.responses.queue(text_response(STYLE), no_image_response())
    upload(client, session_id, "target")
    upload(client, session_id, "user")

    body = client.post(f"/sessions/{session_id}/generate").json()

    assert body["error_kind"] == "empty_result"
    assert body["history"] == []
    assert body["status"] == "idle"


def test_undecodable_result_never_reaches_history(client, fake_client):
    session_id = new_session(client)
    fake_client.responses.queue(text_response(STYLE), image_response("not*base64!"))
    upload(client, session_id, "target")
    upload(client, session_id, "user")

    body = client.post(f"/sessions/{session_id}/generate").json()

    assert body["error_kind"] == "service"
    assert body["generated_image"] is None
    assert body["history"] == []
    assert body["status"] == "idle"


def test_superseded_preview_is_gone(client, fake_client):
    session_id = new_session(client)
    first = upload(client, session_id, "user").json()["user_preview"]
    second = upload(client, session_id, "user").json()["user_preview"]
    assert client.get(first).status_code == 404
    assert client.get(second).status_code == 200


@pytest.mark.parametrize("content,mime", [(b"", "image/png"), (b"hello", "text/plain")])
def test_bad_uploads_are_rejected(client, fake_client, content, mime):
    session_id = new_session(client)
    response = upload(client, session_id, "target", "notes.txt", content=content, mime=mime)
    assert response.status_code == 400
    assert fake_client.responses.calls == []


def test_unknown_session_and_image(client):
    assert client.get("/sessions/missing").status_code == 404
    assert client.post("/sessions/missing/generate").status_code == 404
    session_id = new_session(client)
    assert client.get(f"/sessions/{session_id}/images/123/download").status_code == 404
    assert client.get(f"/sessions/{session_id}/previews/nope").status_code == 404


def test_discard_session(client):
    session_id = new_session(client)
    assert client.delete(f"/sessions/{session_id}").status_code == 204
    assert client.get(f"/sessions/{session_id}").status_code == 404
    assert client.delete(f"/sessions/{session_id}").status_code == 404
