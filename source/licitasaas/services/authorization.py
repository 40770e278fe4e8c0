"""This module decides whether a file reference may be used by a tenant.

Uploaded files are not always registered as `Document` rows; some are only
referenced through the link field of a bidding process. Ownership is
therefore established by any one of several independent proofs, evaluated in
order and short-circuiting on the first one that holds. When none holds the
file is rejected.
"""

from abc import ABC, abstractmethod

from licitasaas.models.documents import Document
from licitasaas.providers.logging import Logger, LoggingProvider
from licitasaas.repositories.documents import DocumentsRepository
from pydantic import BaseModel


class AuthorizationContext(BaseModel):
    """Facts about the request that the caller has already verified.

    Attributes:
        bidding_links: The raw, comma-joined link field of a bidding process
            confirmed to belong to the requesting tenant. Empty when the
            request is not tied to such a process.
    """

    bidding_links: str = ""


class AuthorizationDecision(BaseModel):
    """The outcome of authorizing one file reference.

    Attributes:
        authorized: Whether the tenant may use the file.
        proof: The name of the proof that held, if any.
        document: The registered document that matched, if that proof held.
    """

    authorized: bool
    proof: str | None = None
    document: Document | None = None


class AuthorizationProof(ABC):
    """A single, independent way of proving file ownership."""

    name: str

    @abstractmethod
    def prove(self, file_ref: str, tenant_id: str, context: AuthorizationContext) -> AuthorizationDecision | None:
        """Checks the proof for a file reference.

        Args:
            file_ref: The normalized file reference.
            tenant_id: The requesting tenant.
            context: Facts already verified by the caller.

        Returns:
            A positive decision when the proof holds, None otherwise.
        """


class DocumentRecordProof(AuthorizationProof):
    """Holds when a document of the tenant has a URL containing the reference."""

    name = "document"

    def __init__(self, documents_repo: DocumentsRepository) -> None:
        """Initializes the proof.

        Args:
            documents_repo: The repository used to look documents up.
        """
        self.documents_repo = documents_repo

    def prove(self, file_ref: str, tenant_id: str, context: AuthorizationContext) -> AuthorizationDecision | None:
        document = self.documents_repo.find_document_by_url_fragment(file_ref, tenant_id)
        if document is None or document.tenant_id != tenant_id:
            return None
        return AuthorizationDecision(authorized=True, proof=self.name, document=document)


class TenantPrefixProof(AuthorizationProof):
    """Holds when the reference carries the `<tenant_id>_` upload prefix."""

    name = "prefix"

    def prove(self, file_ref: str, tenant_id: str, context: AuthorizationContext) -> AuthorizationDecision | None:
        if not file_ref.startswith(f"{tenant_id}_"):
            return None
        return AuthorizationDecision(authorized=True, proof=self.name)


class BiddingLinkProof(AuthorizationProof):
    """Holds when the reference appears in a tenant-confirmed bidding process."""

    name = "linked"

    def prove(self, file_ref: str, tenant_id: str, context: AuthorizationContext) -> AuthorizationDecision | None:
        if not context.bidding_links or file_ref not in context.bidding_links:
            return None
        return AuthorizationDecision(authorized=True, proof=self.name)


class TenantFileAuthorizer:
    """Combines the ownership proofs with a logical OR, failing closed."""

    logger: Logger
    proofs: list[AuthorizationProof]

    def __init__(self, proofs: list[AuthorizationProof]) -> None:
        """Initializes the authorizer.

        Args:
            proofs: The proofs to evaluate, in order.
        """
        self.logger = LoggingProvider().get_logger()
        self.proofs = proofs

    @classmethod
    def default(cls, documents_repo: DocumentsRepository) -> "TenantFileAuthorizer":
        """Builds the authorizer with the standard proof order.

        Args:
            documents_repo: The repository backing the document proof.

        Returns:
            An authorizer checking document, prefix and link proofs.
        """
        return cls([DocumentRecordProof(documents_repo), TenantPrefixProof(), BiddingLinkProof()])

    def authorize(
        self, file_ref: str, tenant_id: str, context: AuthorizationContext | None = None
    ) -> AuthorizationDecision:
        """Evaluates the proofs until one holds.

        Empty references and empty tenant IDs are always rejected, since they
        would trivially satisfy the substring and prefix proofs.

        Args:
            file_ref: The normalized file reference.
            tenant_id: The requesting tenant.
            context: Facts already verified by the caller.

        Returns:
            The decision, naming the proof that held.
        """
        context = context or AuthorizationContext()
        if not file_ref or not tenant_id:
            self.logger.warning(f"Rejected empty file reference or tenant: file='{file_ref}' tenant='{tenant_id}'.")
            return AuthorizationDecision(authorized=False)

        for proof in self.proofs:
            decision = proof.prove(file_ref, tenant_id, context)
            if decision is not None:
                self.logger.debug(f"File '{file_ref}' authorized for tenant {tenant_id} by proof '{proof.name}'.")
                return decision

        self.logger.warning(f"Unauthorized access attempt to file '{file_ref}' by tenant {tenant_id}.")
        return AuthorizationDecision(authorized=False)

    def is_authorized(self, file_ref: str, tenant_id: str, context: AuthorizationContext | None = None) -> bool:
        """Tells whether the tenant may use the file.

        Args:
            file_ref: The normalized file reference.
            tenant_id: The requesting tenant.
            context: Facts already verified by the caller.

        Returns:
            True if at least one proof holds.
        """
        return self.authorize(file_ref, tenant_id, context).authorized
