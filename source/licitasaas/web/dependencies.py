"""FastAPI dependencies shared by the pipeline routes."""

import uuid

import jwt
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from licitasaas.providers.config import ConfigProvider
from licitasaas.providers.database import DatabaseManager
from licitasaas.providers.storage import StorageProvider, StorageProviderFactory
from licitasaas.repositories.documents import DocumentsRepository
from licitasaas.services.analysis import AnalysisService, create_analysis_service

bearer_scheme = HTTPBearer(auto_error=False)

CORRELATION_ID_HEADER = "X-Request-ID"


def get_tenant_id(credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme)) -> str:
    """Extracts the tenant ID from the bearer token.

    Args:
        credentials: The bearer token of the Authorization header.

    Returns:
        The `tenantId` claim of the token.

    Raises:
        HTTPException: 401 if the token is missing, invalid, expired or has no tenant.
    """
    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing authentication credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    config = ConfigProvider.get_config()
    try:
        payload = jwt.decode(credentials.credentials, config.JWT_SECRET, algorithms=[config.JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token has expired",
            headers={"WWW-Authenticate": "Bearer"},
        )
    except jwt.InvalidTokenError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    tenant_id = payload.get("tenantId")
    if not tenant_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token payload missing tenant ID",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return str(tenant_id)


def get_correlation_id(request: Request) -> str:
    """Returns the caller-supplied request ID, or a new one.

    Args:
        request: The incoming request.

    Returns:
        The value of `X-Request-ID`, or a random UUID.
    """
    return request.headers.get(CORRELATION_ID_HEADER) or str(uuid.uuid4())


def get_analysis_service() -> AnalysisService:
    """Builds the analysis service for a request.

    Returns:
        A wired `AnalysisService`.
    """
    return create_analysis_service()


def get_storage() -> StorageProvider:
    """Builds the configured storage backend.

    Returns:
        The storage provider.
    """
    return StorageProviderFactory.create()


def get_documents_repo() -> DocumentsRepository:
    """Builds the documents repository.

    Returns:
        A repository bound to the shared engine.
    """
    return DocumentsRepository(engine=DatabaseManager.get_engine())
