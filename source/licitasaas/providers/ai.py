"""This module provides a thin interface to Google's Gemini API.

The `AiProvider` owns the `genai.Client` and issues single generation calls.
It knows nothing about retries or model fallback; that policy belongs to the
`GenerativeCallExecutor` in the services layer.
"""

from google import genai
from google.genai import types
from licitasaas.exceptions.analysis import AiConfigurationError
from licitasaas.providers.config import Config, ConfigProvider
from licitasaas.providers.logging import Logger, LoggingProvider
from pydantic import BaseModel


class GenerationOptions(BaseModel):
    """Per-call generation settings.

    Attributes:
        system_instruction: The system prompt sent with the call.
        temperature: The sampling temperature.
        max_output_tokens: The output token limit.
        response_mime_type: Optional response media type, e.g. `application/json`.
    """

    system_instruction: str | None = None
    temperature: float | None = None
    max_output_tokens: int | None = None
    response_mime_type: str | None = None

    def to_generate_config(self) -> types.GenerateContentConfig:
        """Builds the SDK configuration object for these options.

        Returns:
            The matching `types.GenerateContentConfig`.
        """
        return types.GenerateContentConfig(
            system_instruction=self.system_instruction,
            temperature=self.temperature,
            max_output_tokens=self.max_output_tokens,
            response_mime_type=self.response_mime_type,
        )


class AiProvider:
    """Issues generation requests against the Gemini Developer API."""

    logger: Logger
    config: Config
    _client: genai.Client | None

    def __init__(self) -> None:
        """Initializes the provider.

        The client itself is created on first use so that a missing API key
        only fails the requests that actually need the model.
        """
        self.logger = LoggingProvider().get_logger()
        self.config = ConfigProvider.get_config()
        self._client = None

    def get_client(self) -> genai.Client:
        """Returns the Gemini client, creating it if needed.

        Returns:
            A configured `genai.Client`.

        Raises:
            AiConfigurationError: If `GEMINI_API_KEY` is not set.
        """
        if self._client is None:
            if not self.config.GEMINI_API_KEY:
                self.logger.error("GEMINI_API_KEY is missing.")
                raise AiConfigurationError("GEMINI_API_KEY is not configured in the backend.")
            self._client = genai.Client(api_key=self.config.GEMINI_API_KEY)
            self.logger.info("Google Generative AI client configured successfully.")
        return self._client

    def generate(
        self,
        model_id: str,
        contents: list[types.Content],
        options: GenerationOptions,
    ) -> types.GenerateContentResponse:
        """Sends one generation request to the given model.

        Args:
            model_id: The Gemini model identifier.
            contents: The conversation turns, including inline file parts.
            options: The generation settings for this call.

        Returns:
            The raw response from the Gemini API.
        """
        return self.get_client().models.generate_content(
            model=model_id,
            contents=contents,
            config=options.to_generate_config(),
        )
