"""This module initializes the services package.

It re-exports the pipeline services so that callers do not depend on the
internal module layout.
"""

from licitasaas.services.analysis import AnalysisService, create_analysis_service
from licitasaas.services.authorization import TenantFileAuthorizer
from licitasaas.services.chat_context import ChatContextAssembler
from licitasaas.services.file_resolution import FileReferenceResolver
from licitasaas.services.generation import GenerativeCallExecutor, ModelAttemptPlan
from licitasaas.services.normalizer import AnalysisResponseNormalizer

__all__ = [
    "AnalysisResponseNormalizer",
    "AnalysisService",
    "ChatContextAssembler",
    "FileReferenceResolver",
    "GenerativeCallExecutor",
    "ModelAttemptPlan",
    "TenantFileAuthorizer",
    "create_analysis_service",
]
