"""This module defines the repository for bidding process records."""

from licitasaas.models.bidding_processes import BiddingProcess
from sqlalchemy import Engine, text


class BiddingProcessesRepository:
    """Reads bidding processes, always scoped to a tenant."""

    def __init__(self, engine: Engine) -> None:
        """Initializes the repository with its dependencies.

        Args:
            engine: The SQLAlchemy Engine for database connections.
        """
        self.engine = engine

    def find_bidding_process(self, bidding_process_id: str, tenant_id: str) -> BiddingProcess | None:
        """Retrieves a bidding process owned by the given tenant.

        Args:
            bidding_process_id: The process identifier.
            tenant_id: The tenant that must own the process.

        Returns:
            The `BiddingProcess`, or None when it does not exist or belongs
            to another tenant.
        """
        sql = text(
            """
            SELECT id, "tenantId", link
            FROM "BiddingProcess"
            WHERE id = :id AND "tenantId" = :tenant_id;
            """
        )
        with self.engine.connect() as conn:
            row = conn.execute(sql, {"id": bidding_process_id, "tenant_id": tenant_id}).mappings().first()

        if not row:
            return None
        return BiddingProcess.model_validate(dict(row))
