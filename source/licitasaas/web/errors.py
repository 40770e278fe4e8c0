"""This module translates pipeline failures into user-facing messages.

No provider text or stack trace is ever returned to the client; the message
is chosen by matching the error class, its status code and its message.
"""

from licitasaas.exceptions.analysis import (
    AiConfigurationError,
    EmptyResponseError,
    MalformedResponseError,
    NoUsableContextError,
)
from licitasaas.services.generation import error_status_code

OVERLOADED_MESSAGE = "O serviço de IA está sobrecarregado no momento. Tente novamente em alguns minutos."
RATE_LIMITED_MESSAGE = "Limite de requisições à IA atingido. Aguarde alguns instantes e tente novamente."
MISCONFIGURED_MESSAGE = "A chave da API de IA não está configurada no servidor. Contate o administrador."
MALFORMED_MESSAGE = "A IA retornou uma resposta em formato inválido. Tente novamente."
EMPTY_MESSAGE = "A IA não retornou nenhum texto. Tente novamente."
ANALYSIS_GENERIC_MESSAGE = "Erro na análise da Inteligência Artificial. Tente novamente mais tarde."
CHAT_GENERIC_MESSAGE = "Falha ao responder via chat de IA. Tente novamente mais tarde."


def describe_ai_failure(error: BaseException, generic_message: str = ANALYSIS_GENERIC_MESSAGE) -> str:
    """Selects the localized message for a failed AI request.

    Args:
        error: The exception raised by the pipeline.
        generic_message: The message used when no specific cause matches.

    Returns:
        A pt-BR message safe to show to the user.
    """
    if isinstance(error, NoUsableContextError):
        return str(error)
    if isinstance(error, MalformedResponseError):
        return MALFORMED_MESSAGE
    if isinstance(error, EmptyResponseError):
        return EMPTY_MESSAGE

    message = str(error)
    if isinstance(error, AiConfigurationError) or "API key" in message or "API_KEY" in message:
        return MISCONFIGURED_MESSAGE

    status_code = error_status_code(error)
    if status_code == 503 or "503" in message or "overloaded" in message.lower():
        return OVERLOADED_MESSAGE
    if status_code == 429 or "429" in message:
        return RATE_LIMITED_MESSAGE
    return generic_message
