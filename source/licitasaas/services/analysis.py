"""This module defines the service orchestrating edital analyses and chats."""

import time
from typing import Any

from google.genai import types
from licitasaas.constants.prompts import ANALYSIS_SYSTEM_INSTRUCTION, ANALYSIS_USER_PROMPT
from licitasaas.exceptions.analysis import EmptyResponseError, NoUsableContextError
from licitasaas.models.analyses import AnalysisPayload
from licitasaas.models.chat import ChatMessage
from licitasaas.providers.ai import AiProvider, GenerationOptions
from licitasaas.providers.config import Config, ConfigProvider
from licitasaas.providers.database import DatabaseManager
from licitasaas.providers.logging import Logger, LoggingProvider
from licitasaas.providers.storage import StorageProvider, StorageProviderFactory
from licitasaas.repositories.analyses import AnalysesRepository
from licitasaas.repositories.bidding_processes import BiddingProcessesRepository
from licitasaas.repositories.documents import DocumentsRepository
from licitasaas.services.authorization import TenantFileAuthorizer
from licitasaas.services.chat_context import ChatContextAssembler
from licitasaas.services.file_resolution import FileReferenceResolver
from licitasaas.services.generation import GenerativeCallExecutor, ModelAttemptPlan
from licitasaas.services.normalizer import AnalysisResponseNormalizer
from pydantic import ValidationError


class AnalysisService:
    """Runs the edital analysis and chat pipelines.

    Both pipelines resolve the tenant's files first, then call Gemini through
    the retrying executor. The analysis answer is normalized into a JSON
    document; the chat answer is returned as text.
    """

    logger: Logger
    config: Config
    resolver: FileReferenceResolver
    executor: GenerativeCallExecutor
    normalizer: AnalysisResponseNormalizer
    assembler: ChatContextAssembler
    plan: ModelAttemptPlan

    def __init__(
        self,
        resolver: FileReferenceResolver,
        executor: GenerativeCallExecutor,
        normalizer: AnalysisResponseNormalizer,
        assembler: ChatContextAssembler,
        plan: ModelAttemptPlan | None = None,
    ) -> None:
        """Initializes the service with its dependencies.

        Args:
            resolver: Gathers and loads the authorized files.
            executor: Issues the Gemini calls with retries and fallback.
            normalizer: Recovers the JSON document of an analysis answer.
            assembler: Builds the chat conversation.
            plan: The models to try. Defaults to the configured plan.
        """
        self.logger = LoggingProvider().get_logger()
        self.config = ConfigProvider.get_config()
        self.resolver = resolver
        self.executor = executor
        self.normalizer = normalizer
        self.assembler = assembler
        self.plan = plan or ModelAttemptPlan.from_config(self.config)

    def analyze_edital(
        self,
        tenant_id: str,
        file_names: list[str],
        bidding_process_id: str | None = None,
    ) -> dict[str, Any]:
        """Extracts the structured analysis of an edital from its PDFs.

        Args:
            tenant_id: The requesting tenant.
            file_names: The uploaded file names to analyze.
            bidding_process_id: An optional process whose files are added.

        Returns:
            The analysis document, loosely shaped like `AnalysisPayload`.

        Raises:
            NoUsableContextError: If no file could be authorized and loaded.
            EmptyResponseError: If the model answered without text.
            MalformedResponseError: If the answer holds no JSON object.
        """
        resolution = self.resolver.resolve(file_names, bidding_process_id, tenant_id)
        if not resolution.authorized_files:
            self.logger.warning(f"No valid files found for analysis among: {', '.join(resolution.candidates)}")
            raise NoUsableContextError(
                "Nenhum arquivo válido encontrado para análise no servidor. "
                f"Foram processados {len(resolution.candidates)} arquivos, mas nenhum pôde ser recuperado."
            )

        parts = [authorized.to_part() for authorized in resolution.authorized_files]
        contents = [types.Content(role="user", parts=[*parts, types.Part(text=ANALYSIS_USER_PROMPT)])]
        options = GenerationOptions(
            system_instruction=ANALYSIS_SYSTEM_INSTRUCTION,
            temperature=self.config.GEMINI_ANALYSIS_TEMPERATURE,
            max_output_tokens=self.config.GEMINI_ANALYSIS_MAX_OUTPUT_TOKENS,
        )

        self.logger.info(f"Calling Gemini API with {len(parts)} PDF part(s)...")
        start_time = time.monotonic()
        response = self.executor.call(self.plan, contents, options)
        self.logger.info(f"Gemini responded in {time.monotonic() - start_time:.1f}s.")

        raw_text = response.text
        if not raw_text:
            self.logger.error("Empty response text from Gemini.")
            raise EmptyResponseError("A IA não retornou nenhum texto.")

        self.logger.info(f"Raw response length: {len(raw_text)}")
        document = self.normalizer.normalize(raw_text)
        self._log_payload_shape(document)
        return document

    def chat(
        self,
        tenant_id: str,
        messages: list[ChatMessage],
        file_names: list[str] | None = None,
        bidding_process_id: str | None = None,
    ) -> str:
        """Answers a question about an edital.

        The original PDFs are attached when they can be loaded. The summary
        of a prior analysis is always added to the system instruction when it
        exists, and is enough on its own when no PDF is available.

        Args:
            tenant_id: The requesting tenant.
            messages: The client history, oldest first.
            file_names: File names sent by the client.
            bidding_process_id: The bidding process being discussed.

        Returns:
            The model's answer.

        Raises:
            NoUsableContextError: If there are neither files nor a prior summary.
            EmptyResponseError: If the model answered without text.
        """
        trace = LoggingProvider().get_chat_trace_logger()
        trace.info(f"Chat request received. processId: {bidding_process_id}, messages: {len(messages)}")

        resolution = self.resolver.resolve(file_names, bidding_process_id, tenant_id, logger=trace)
        analysis = resolution.analysis
        fallback_text_context = analysis.to_context_text() if analysis else ""

        if not resolution.authorized_files and not (analysis and analysis.has_summary()):
            trace.error("No PDF parts and no analysis context found.")
            raise NoUsableContextError("Nenhum contexto de documento ou análise encontrado para este chat.")

        parts = [authorized.to_part() for authorized in resolution.authorized_files]
        context = self.assembler.assemble(messages, parts, fallback_text_context)
        options = GenerationOptions(
            system_instruction=context.system_instruction,
            temperature=self.config.GEMINI_CHAT_TEMPERATURE,
            max_output_tokens=self.config.GEMINI_CHAT_MAX_OUTPUT_TOKENS,
        )

        trace.info(f"Calling Gemini with {len(parts)} PDF part(s) and {len(context.turns)} turn(s).")
        response = self.executor.call(self.plan, context.contents(), options)
        if not response.text:
            trace.error("Empty chat response from Gemini.")
            raise EmptyResponseError("A IA não retornou nenhum texto.")
        return response.text

    def _log_payload_shape(self, document: dict[str, Any]) -> None:
        """Logs how closely the document follows the instructed schema.

        Deviations are only reported; the document is returned unchanged.

        Args:
            document: The normalized analysis document.
        """
        try:
            payload = AnalysisPayload.model_validate(document)
        except ValidationError as e:
            self.logger.warning(f"Analysis payload deviates from the expected shape: {e.error_count()} issue(s).")
            return

        if payload.process is None or payload.analysis is None:
            self.logger.warning("Analysis payload lacks the 'process' or 'analysis' section.")
            return
        self.logger.info(
            f"Analysis payload has {payload.analysis.required_document_count()} required document(s) "
            f"in {len(payload.analysis.required_documents)} categor(ies)."
        )


def create_analysis_service(
    storage: StorageProvider | None = None,
    ai_provider: AiProvider | None = None,
) -> AnalysisService:
    """Wires an `AnalysisService` with the configured providers.

    Args:
        storage: The storage backend. Defaults to the configured one.
        ai_provider: The Gemini provider. Defaults to a new instance.

    Returns:
        A ready-to-use service.
    """
    config = ConfigProvider.get_config()
    engine = DatabaseManager.get_engine()
    documents_repo = DocumentsRepository(engine=engine)

    resolver = FileReferenceResolver(
        authorizer=TenantFileAuthorizer.default(documents_repo),
        storage=storage or StorageProviderFactory.create(config),
        bidding_processes_repo=BiddingProcessesRepository(engine=engine),
        analyses_repo=AnalysesRepository(engine=engine),
        documents_repo=documents_repo,
        upload_dir=config.UPLOAD_DIR,
    )
    return AnalysisService(
        resolver=resolver,
        executor=GenerativeCallExecutor(ai_provider or AiProvider()),
        normalizer=AnalysisResponseNormalizer(config.FAILED_JSON_DUMP_PATH),
        assembler=ChatContextAssembler(),
        plan=ModelAttemptPlan.from_config(config),
    )
