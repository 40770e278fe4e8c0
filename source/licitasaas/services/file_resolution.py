"""This module gathers, authorizes and loads the files behind an AI request.

Candidate file names come from three sources of different shape and
reliability:

1. the file names sent in the request payload;
2. the comma-joined link field of the bidding process, which mixes uploaded
   files with links to external portals;
3. the JSON list of source file names recorded by a previous analysis, which
   is the most reliable since it lists exactly what was analyzed.

The sources are merged in that order, deduplicated, and every candidate is
authorized and read from storage one at a time. Unauthorized or missing files
are skipped; only the aggregate outcome is reported back.
"""

from pathlib import Path, PurePosixPath
from urllib.parse import unquote, urlparse

from google.api_core.exceptions import GoogleAPIError
from licitasaas.exceptions.storage import StorageError, StorageFileNotFoundError
from licitasaas.models.analyses import AnalysisRecord
from licitasaas.models.bidding_processes import BiddingProcess
from licitasaas.models.files import AuthorizedFile
from licitasaas.providers.logging import Logger, LoggingProvider
from licitasaas.providers.storage import LOCAL_URL_PREFIX, StorageProvider, file_name_from_locator
from licitasaas.repositories.analyses import AnalysesRepository
from licitasaas.repositories.bidding_processes import BiddingProcessesRepository
from licitasaas.repositories.documents import DocumentsRepository
from licitasaas.services.authorization import AuthorizationContext, TenantFileAuthorizer
from pydantic import BaseModel, Field
from sqlalchemy.exc import SQLAlchemyError


def normalize_file_reference(file_ref: str) -> str:
    """Brings a file reference to its canonical form.

    Args:
        file_ref: A file name, possibly URI-encoded and with a `?query` suffix.

    Returns:
        The decoded name without the query suffix.
    """
    return unquote(file_ref.strip()).split("?")[0]


def file_name_from_link(link: str) -> str:
    """Extracts the file name from a bidding-process link.

    Absolute URLs are parsed and their last path segment is used. Anything
    that does not parse as an absolute URL falls back to splitting on `/`.

    Args:
        link: One entry of the bidding-process link field.

    Returns:
        The trailing file name, possibly empty.
    """
    try:
        parsed = urlparse(link)
        if parsed.scheme and parsed.netloc:
            return PurePosixPath(parsed.path).name
    except ValueError:
        pass
    return link.split("/")[-1].split("?")[0]


def merge_unique(target: list[str], names: list[str]) -> int:
    """Appends names that are not already present, keeping first-seen order.

    Args:
        target: The list to extend in place.
        names: The names to merge in.

    Returns:
        How many names were added.
    """
    added = 0
    for name in names:
        if name and name not in target:
            target.append(name)
            added += 1
    return added


class ResolutionResult(BaseModel):
    """The outcome of resolving the files for one request.

    Attributes:
        authorized_files: The files that passed authorization and were loaded.
        rejected_count: How many candidates were unauthorized or missing.
        candidates: Every candidate name considered, in merge order.
        bidding_process: The tenant-owned bidding process, when one was given.
        analysis: The prior analysis of that process, if any.
    """

    authorized_files: list[AuthorizedFile] = Field(default_factory=list)
    rejected_count: int = 0
    candidates: list[str] = Field(default_factory=list)
    bidding_process: BiddingProcess | None = None
    analysis: AnalysisRecord | None = None


class FileReferenceResolver:
    """Resolves request, bidding-process and prior-analysis file references."""

    logger: Logger

    def __init__(
        self,
        authorizer: TenantFileAuthorizer,
        storage: StorageProvider,
        bidding_processes_repo: BiddingProcessesRepository,
        analyses_repo: AnalysesRepository,
        documents_repo: DocumentsRepository,
        upload_dir: Path | None = None,
    ) -> None:
        """Initializes the resolver with its collaborators.

        Args:
            authorizer: Decides whether each candidate belongs to the tenant.
            storage: The backend the files are fetched from.
            bidding_processes_repo: Reads tenant-scoped bidding processes.
            analyses_repo: Reads prior analyses.
            documents_repo: Provides the database copy of lost uploads.
            upload_dir: A local upload directory read when the storage backend
                does not have a file, e.g. uploads kept from before a move to
                GCS. None skips that step.
        """
        self.logger = LoggingProvider().get_logger()
        self.authorizer = authorizer
        self.storage = storage
        self.bidding_processes_repo = bidding_processes_repo
        self.analyses_repo = analyses_repo
        self.documents_repo = documents_repo
        self.upload_dir = upload_dir

    def resolve(
        self,
        request_file_names: list[str] | None,
        bidding_process_id: str | None,
        tenant_id: str,
        logger: Logger | None = None,
    ) -> ResolutionResult:
        """Collects the candidates and loads the authorized files.

        Args:
            request_file_names: File names sent by the client, possibly empty.
            bidding_process_id: The bidding process the request refers to.
            tenant_id: The requesting tenant.
            logger: Overrides the logger for this call, e.g. the chat trace.

        Returns:
            The loaded files plus the context gathered on the way. An empty
            result is not an error at this level.
        """
        log = logger or self.logger
        result = ResolutionResult()
        merge_unique(result.candidates, list(request_file_names or []))

        if bidding_process_id:
            result.bidding_process = self.bidding_processes_repo.find_bidding_process(bidding_process_id, tenant_id)
            log.info(
                f"Process lookup: {'FOUND' if result.bidding_process else 'NOT FOUND'} "
                f"for {bidding_process_id} and tenant {tenant_id}."
            )

        if result.bidding_process:
            link_names = self._file_names_from_links(result.bidding_process, tenant_id, log)
            merge_unique(result.candidates, link_names)

            result.analysis = self.analyses_repo.find_analysis(result.bidding_process.id)
            if result.analysis:
                try:
                    source_names = result.analysis.parsed_source_file_names()
                except ValueError as e:
                    log.warning(f"Failed to parse sourceFileNames of analysis for {bidding_process_id}: {e}")
                    source_names = []
                added = merge_unique(result.candidates, source_names)
                log.info(f"Merged {added} source file names from the prior analysis.")

        log.info(f"Final candidate file names: {result.candidates}")

        bidding_links = result.bidding_process.link if result.bidding_process else None
        context = AuthorizationContext(bidding_links=bidding_links or "")
        seen_names: set[str] = set()
        for candidate in result.candidates:
            file_name = normalize_file_reference(candidate)
            if file_name in seen_names:
                continue
            seen_names.add(file_name)

            decision = self.authorizer.authorize(file_name, tenant_id, context)
            if not decision.authorized:
                log.info(f"REJECTED: '{file_name}' is unauthorized or unmapped.")
                result.rejected_count += 1
                continue

            locator = decision.document.file_url if decision.document else file_name
            content = self._fetch(locator, file_name, tenant_id, log)
            if content is None:
                log.error(f"Could not find file anywhere: '{file_name}'.")
                result.rejected_count += 1
                continue

            log.info(f"LOADED: '{file_name}' ({len(content)} bytes) via proof '{decision.proof}'.")
            result.authorized_files.append(AuthorizedFile(file_name=file_name, content=content))

        return result

    def _file_names_from_links(self, bidding_process: BiddingProcess, tenant_id: str, log: Logger) -> list[str]:
        """Derives upload file names from the bidding-process link field.

        Only links that point to the local upload namespace or embed the
        tenant ID are kept; the rest are external portal links.

        Args:
            bidding_process: The tenant-owned process.
            tenant_id: The requesting tenant.
            log: The logger for this call.

        Returns:
            The derived file names, in link order.
        """
        names: list[str] = []
        for link in bidding_process.links():
            if LOCAL_URL_PREFIX not in link and tenant_id not in link:
                log.info(f"Skipping external link: {link}")
                continue
            name = file_name_from_link(link)
            if name:
                names.append(name)
        log.info(f"Derived file names from process links: {names}")
        return names

    def _fetch(self, locator: str, file_name: str, tenant_id: str, log: Logger) -> bytes | None:
        """Reads a file from storage, then the local upload directory, then the database.

        Args:
            locator: The registered URL, or the file name itself.
            file_name: The normalized file name.
            tenant_id: The requesting tenant.
            log: The logger for this call.

        Returns:
            The file content, or None if no source has it.
        """
        try:
            return self.storage.fetch(locator)
        except StorageFileNotFoundError:
            log.warning(f"'{file_name}' is missing from storage, trying the fallbacks.")
        except (StorageError, OSError, GoogleAPIError) as e:
            log.warning(f"Storage read failed for '{file_name}': {e}. Trying the fallbacks.")

        if self.upload_dir is not None:
            local_path = self.upload_dir / file_name_from_locator(file_name)
            try:
                if local_path.is_file():
                    log.info(f"Read '{file_name}' from the local upload directory.")
                    return local_path.read_bytes()
            except OSError as e:
                log.warning(f"Local read failed for '{local_path}': {e}")

        try:
            return self.documents_repo.find_document_content(file_name, tenant_id)
        except SQLAlchemyError as e:
            log.error(f"Database copy lookup failed for '{file_name}': {e}")
            return None
