"""This module defines custom exceptions related to the edital analysis pipeline."""


class AnalysisError(Exception):
    """Base exception for errors that occur during the analysis pipeline execution."""

    pass


class NoUsableContextError(AnalysisError):
    """Raised when a request has neither loadable files nor a textual fallback."""

    pass


class MalformedResponseError(AnalysisError):
    """Raised when no JSON object can be recovered from the AI response.

    Attributes:
        raw_text: The text that failed to parse, as written to the dump file.
    """

    def __init__(self, message: str, raw_text: str = "") -> None:
        """Initializes the exception.

        Args:
            message: A description of the parse failure.
            raw_text: The text that could not be parsed.
        """
        super().__init__(message)
        self.raw_text = raw_text


class EmptyResponseError(AnalysisError):
    """Raised when the AI call succeeds but returns no text."""

    pass


class AiConfigurationError(AnalysisError):
    """Raised when the AI provider cannot be used because of missing settings."""

    pass
