"""This module defines the Pydantic models for edital analyses.

Two families live here. `AnalysisRecord` is the persisted result of an
earlier analysis, read back to give the chat a textual fallback and the list
of files that were analyzed. `AnalysisPayload` and its parts describe the
document the AI is instructed to return; the model does not enforce it, so
every field is optional and unknown keys are preserved.
"""

import json
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class RequiredDocument(BaseModel):
    """A single document demanded by the edital.

    Attributes:
        item: The edital clause that demands it, e.g. "9.1.5". Empty when the
            edital does not cite one.
        description: The document name, e.g. "Certidão Negativa Estadual".
    """

    model_config = ConfigDict(extra="allow")

    item: str = ""
    description: str = Field(..., min_length=1)


class ProcessSummary(BaseModel):
    """The bidding-process fields extracted from the edital."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    title: str | None = None
    summary: str | None = None
    modality: str | None = None
    portal: str | None = None
    estimated_value: float | str | None = Field(default=None, alias="estimatedValue")
    session_date: str | None = Field(default=None, alias="sessionDate")
    risk: str | None = None


class EditalAnalysis(BaseModel):
    """The analytical fields extracted from the edital."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    required_documents: dict[str, list[RequiredDocument]] = Field(default_factory=dict, alias="requiredDocuments")
    bidding_items: Any = Field(default=None, alias="biddingItems")
    pricing_considerations: Any = Field(default=None, alias="pricingConsiderations")
    irregularities_flags: list[str] = Field(default_factory=list, alias="irregularitiesFlags")
    full_summary: str | None = Field(default=None, alias="fullSummary")
    deadlines: list[str] = Field(default_factory=list)
    penalties: Any = None
    qualification_requirements: Any = Field(default=None, alias="qualificationRequirements")

    def required_document_count(self) -> int:
        """Counts the required documents across every category.

        Returns:
            The total number of entries.
        """
        return sum(len(entries) for entries in self.required_documents.values())


class AnalysisPayload(BaseModel):
    """The full document returned by the edital analysis call."""

    model_config = ConfigDict(extra="allow")

    process: ProcessSummary | None = None
    analysis: EditalAnalysis | None = None


class AnalysisRecord(BaseModel):
    """A previously persisted analysis of a bidding process.

    The list-like columns are stored as serialized JSON strings and are kept
    as such, since they are embedded verbatim into the chat prompt.
    """

    model_config = ConfigDict(populate_by_name=True)

    bidding_process_id: str = Field(alias="biddingProcessId")
    source_file_names: str | None = Field(default=None, alias="sourceFileNames")
    full_summary: str | None = Field(default=None, alias="fullSummary")
    bidding_items: str | None = Field(default=None, alias="biddingItems")
    qualification_requirements: str | None = Field(default=None, alias="qualificationRequirements")
    pricing_considerations: str | None = Field(default=None, alias="pricingConsiderations")
    penalties: str | None = None
    required_documents: str | None = Field(default=None, alias="requiredDocuments")
    deadlines: str | None = None
    irregularities_flags: str | None = Field(default=None, alias="irregularitiesFlags")

    def parsed_source_file_names(self) -> list[str]:
        """Decodes the serialized list of analyzed file names.

        Returns:
            The file names, or an empty list when none were recorded.

        Raises:
            ValueError: If the stored value is not a JSON list of strings.
        """
        if not self.source_file_names:
            return []
        names = json.loads(self.source_file_names)
        if not isinstance(names, list) or not all(isinstance(name, str) for name in names):
            raise ValueError(f"sourceFileNames is not a list of strings: {self.source_file_names}")
        return names

    def has_summary(self) -> bool:
        """Tells whether the record can stand in for the original PDFs.

        Returns:
            True when an executive summary was recorded.
        """
        return bool(self.full_summary and self.full_summary.strip())

    def to_context_text(self) -> str:
        """Renders the summary fields as the textual fallback for the chat.

        Returns:
            A pt-BR block listing every summary field, with `N/A` or `[]` for
            absent values.
        """
        return (
            "CONTEÚDO DO RELATÓRIO ANALÍTICO EXISTENTE:\n"
            f"Resumo Executivo: {self.full_summary or 'N/A'}\n"
            f"Itens Licitados: {self.bidding_items or 'N/A'}\n"
            f"Requisitos de Qualificação Técnica: {self.qualification_requirements or 'N/A'}\n"
            f"Considerações de Preço: {self.pricing_considerations or 'N/A'}\n"
            f"Penalidades: {self.penalties or 'N/A'}\n"
            f"Documentos Exigidos: {self.required_documents or '[]'}\n"
            f"Prazos: {self.deadlines or '[]'}\n"
            f"Riscos e Irregularidades: {self.irregularities_flags or '[]'}\n"
        )
