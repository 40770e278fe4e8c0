"""This module defines the repository for persisted AI analyses."""

from licitasaas.models.analyses import AnalysisRecord
from sqlalchemy import Engine, text


class AnalysesRepository:
    """Reads the `AiAnalysis` table, keyed by bidding process."""

    def __init__(self, engine: Engine) -> None:
        """Initializes the repository with its dependencies.

        Args:
            engine: The SQLAlchemy Engine for database connections.
        """
        self.engine = engine

    def find_analysis(self, bidding_process_id: str) -> AnalysisRecord | None:
        """Retrieves the analysis recorded for a bidding process.

        There is at most one analysis per process. Callers are expected to
        have confirmed tenant ownership of the process beforehand.

        Args:
            bidding_process_id: The bidding process identifier.

        Returns:
            The `AnalysisRecord`, or None if the process was never analyzed.
        """
        sql = text(
            """
            SELECT
                "biddingProcessId",
                "sourceFileNames",
                "fullSummary",
                "biddingItems",
                "qualificationRequirements",
                "pricingConsiderations",
                penalties,
                "requiredDocuments",
                deadlines,
                "irregularitiesFlags"
            FROM "AiAnalysis"
            WHERE "biddingProcessId" = :bidding_process_id;
            """
        )
        with self.engine.connect() as conn:
            row = conn.execute(sql, {"bidding_process_id": bidding_process_id}).mappings().first()

        if not row:
            return None
        return AnalysisRecord.model_validate(dict(row))
