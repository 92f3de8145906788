from types import SimpleNamespace

from models.response_parts import ImagePart, OtherPart, TextPart
from services.openai.response_parser import extract_text, extract_usage, find_first_image, iter_parts

from conftest import image_response, text_response


def test_iter_parts_tags_each_output_item():
    response = SimpleNamespace(
        output=[
            SimpleNamespace(type="reasoning"),
            SimpleNamespace(type="message", content=[SimpleNamespace(type="output_text", text="hello")]),
            SimpleNamespace(type="image_generation_call", result="Zm9v", output_format="webp"),
        ]
    )
    assert iter_parts(response) == [
        OtherPart(type="reasoning"),
        TextPart(text="hello"),
        ImagePart(data="Zm9v"),
    ]


def test_find_first_image_skips_non_image_parts():
    response = image_response("Zm9v")
    response.output.append(SimpleNamespace(type="image_generation_call", result="YmFy", output_format="png"))
    assert find_first_image(iter_parts(response)) == ImagePart(data="Zm9v")


def test_image_call_without_result_is_not_an_image():
    response = SimpleNamespace(output=[SimpleNamespace(type="image_generation_call", result=None)])
    assert find_first_image(iter_parts(response)) is None


def test_find_first_image_returns_none_for_text_only():
    assert find_first_image(iter_parts(text_response("no picture"))) is None


def test_plain_dict_output_items_are_supported():
    response = {"output": [{"type": "image_generation_call", "result": "Zm9v"}]}
    assert find_first_image(iter_parts(response)).data == "Zm9v"


def test_extract_text_falls_back_to_output_text():
    assert extract_text(text_response("soft light")) == "soft light"
    assert extract_text(SimpleNamespace(output=[], output_text="fallback")) == "fallback"
    assert extract_text(SimpleNamespace(output=None)) == ""


def test_extract_usage():
    assert extract_usage(text_response("x")) == {"input_tokens": 12, "output_tokens": 7}
    assert extract_usage(SimpleNamespace()) == {"input_tokens": None, "output_tokens": None}
