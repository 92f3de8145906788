import pytest

from utils.app_config import DEFAULT_ANALYSIS_MODEL, DEFAULT_SYNTHESIS_MODEL, load_config
from utils.errors import ConfigurationError


def test_defaults():
    config = load_config({"OPENAI_API_KEY": "sk-live"})
    assert config.api_key == "sk-live"
    assert config.analysis_model == DEFAULT_ANALYSIS_MODEL
    assert config.synthesis_model == DEFAULT_SYNTHESIS_MODEL
    assert config.log_level == "INFO"


def test_overrides():
    config = load_config(
        {
            "OPENAI_API_KEY": "sk-live",
            "STYLE_ANALYSIS_MODEL": "gpt-5",
            "IMAGE_SYNTHESIS_MODEL": "gpt-5",
            "OPENAI_TIMEOUT": "30",
            "LOG_LEVEL": "debug",
        }
    )
    assert (config.analysis_model, config.synthesis_model, config.timeout, config.log_level) == (
        "gpt-5",
        "gpt-5",
        30.0,
        "DEBUG",
    )


@pytest.mark.parametrize("environ", [{}, {"OPENAI_API_KEY": "   "}])
def test_missing_key_is_fatal(environ):
    with pytest.raises(ConfigurationError, match="OPENAI_API_KEY"):
        load_config(environ)


def test_bad_timeout():
    with pytest.raises(ConfigurationError):
        load_config({"OPENAI_API_KEY": "sk-live", "OPENAI_TIMEOUT": "soon"})


def test_repr_hides_the_key():
    assert "sk-live" not in repr(load_config({"OPENAI_API_KEY": "sk-live"}))
