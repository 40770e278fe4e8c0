"""Routes exposing the edital analysis and chat pipelines.

The handlers are plain functions, so FastAPI runs each request in its
threadpool and the pipeline's blocking I/O never stalls the event loop.
"""

from typing import Any

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from licitasaas.exceptions.analysis import NoUsableContextError
from licitasaas.models.chat import ChatMessage
from licitasaas.providers.logging import LoggingProvider
from licitasaas.services.analysis import AnalysisService
from licitasaas.web.dependencies import get_analysis_service, get_correlation_id, get_tenant_id
from licitasaas.web.errors import CHAT_GENERIC_MESSAGE, describe_ai_failure
from pydantic import BaseModel, ConfigDict, Field

router = APIRouter(prefix="/api/analyze-edital")


class AnalyzeEditalRequest(BaseModel):
    """Body of an analysis request."""

    model_config = ConfigDict(populate_by_name=True)

    file_names: list[str] = Field(default_factory=list, alias="fileNames")
    bidding_process_id: str | None = Field(default=None, alias="biddingProcessId")


class ChatRequest(BaseModel):
    """Body of a chat request."""

    model_config = ConfigDict(populate_by_name=True)

    file_names: list[str] | None = Field(default=None, alias="fileNames")
    bidding_process_id: str | None = Field(default=None, alias="biddingProcessId")
    messages: list[ChatMessage] | None = None


def error_response(status_code: int, message: str) -> JSONResponse:
    """Builds the JSON error body used by the pipeline routes.

    Args:
        status_code: The HTTP status.
        message: The user-facing message.

    Returns:
        A response shaped like `{"error": message}`.
    """
    return JSONResponse(status_code=status_code, content={"error": message})


@router.post("")
def analyze_edital(
    body: AnalyzeEditalRequest,
    tenant_id: str = Depends(get_tenant_id),
    correlation_id: str = Depends(get_correlation_id),
    service: AnalysisService = Depends(get_analysis_service),
) -> Any:
    """Analyzes the uploaded PDFs of an edital.

    Args:
        body: The file names to analyze.
        tenant_id: The requesting tenant.
        correlation_id: The request ID used in the logs.
        service: The analysis service.

    Returns:
        The analysis document, or a `{"error": ...}` body with status 400 or 500.
    """
    logging_provider = LoggingProvider()
    logger = logging_provider.get_logger()

    if not body.file_names:
        return error_response(400, "O campo fileNames deve conter ao menos um arquivo.")

    with logging_provider.set_correlation_id(correlation_id):
        try:
            return service.analyze_edital(tenant_id, body.file_names, body.bidding_process_id)
        except NoUsableContextError as e:
            return error_response(400, str(e))
        except Exception as e:
            logger.error(
                f"AI analysis error: {e} (status={getattr(e, 'status', None)}, code={getattr(e, 'code', None)})",
                exc_info=True,
            )
            return error_response(500, describe_ai_failure(e))


@router.post("/chat")
def chat_with_edital(
    body: ChatRequest,
    tenant_id: str = Depends(get_tenant_id),
    correlation_id: str = Depends(get_correlation_id),
    service: AnalysisService = Depends(get_analysis_service),
) -> Any:
    """Answers a question about an edital, using its PDFs or its prior analysis.

    Args:
        body: The conversation and the document context.
        tenant_id: The requesting tenant.
        correlation_id: The request ID used in the logs.
        service: The analysis service.

    Returns:
        `{"text": answer}`, or a `{"error": ...}` body with status 400 or 500.
    """
    logging_provider = LoggingProvider()
    logger = logging_provider.get_logger()

    if body.messages is None:
        return error_response(400, "O campo messages é obrigatório.")

    with logging_provider.set_correlation_id(correlation_id):
        try:
            text = service.chat(tenant_id, body.messages, body.file_names, body.bidding_process_id)
        except NoUsableContextError as e:
            return error_response(400, str(e))
        except Exception as e:
            logger.error(f"AI chat error: {e}", exc_info=True)
            return error_response(500, describe_ai_failure(e, CHAT_GENERIC_MESSAGE))
        return {"text": text}
