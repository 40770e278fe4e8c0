from collections.abc import Generator
from unittest.mock import MagicMock, patch

import pytest
from google.genai import types
from licitasaas.exceptions.analysis import AiConfigurationError
from licitasaas.providers.ai import AiProvider, GenerationOptions


@pytest.fixture
def mock_genai_client() -> Generator[MagicMock, None, None]:
    with (
        patch("licitasaas.providers.ai.genai.Client") as mock_client_class,
        patch("licitasaas.providers.ai.ConfigProvider") as mock_config_provider,
    ):
        mock_config_provider.get_config.return_value = MagicMock(GEMINI_API_KEY="test-key")
        yield mock_client_class


def test_generation_options_build_sdk_config() -> None:
    """Tests the conversion of the options into the SDK configuration."""
    options = GenerationOptions(system_instruction="Seja preciso.", temperature=0.1, max_output_tokens=16384)

    config = options.to_generate_config()

    assert isinstance(config, types.GenerateContentConfig)
    assert config.temperature == 0.1
    assert config.max_output_tokens == 16384
    assert config.system_instruction == "Seja preciso."


def test_get_client_requires_api_key() -> None:
    """Tests that a missing API key raises a configuration error."""
    with patch("licitasaas.providers.ai.ConfigProvider") as mock_config_provider:
        mock_config_provider.get_config.return_value = MagicMock(GEMINI_API_KEY=None)
        provider = AiProvider()

        with pytest.raises(AiConfigurationError, match="GEMINI_API_KEY"):
            provider.get_client()


def test_client_is_created_once(mock_genai_client: MagicMock) -> None:
    """Tests that the client is created lazily and reused."""
    provider = AiProvider()
    mock_genai_client.assert_not_called()

    first = provider.get_client()
    second = provider.get_client()

    assert first is second
    mock_genai_client.assert_called_once_with(api_key="test-key")


def test_generate_forwards_model_contents_and_options(mock_genai_client: MagicMock) -> None:
    """Tests that a generation call reaches the SDK unchanged."""
    mock_response = MagicMock()
    mock_models_api = mock_genai_client.return_value.models
    mock_models_api.generate_content.return_value = mock_response
    contents = [types.Content(role="user", parts=[types.Part(text="Olá")])]

    response = AiProvider().generate("gemini-2.5-flash", contents, GenerationOptions(temperature=0.35))

    assert response is mock_response
    call_kwargs = mock_models_api.generate_content.call_args.kwargs
    assert call_kwargs["model"] == "gemini-2.5-flash"
    assert call_kwargs["contents"] == contents
    assert call_kwargs["config"].temperature == 0.35
