"""This module defines the Pydantic model for bidding processes."""

from pydantic import BaseModel, ConfigDict, Field


class BiddingProcess(BaseModel):
    """The subset of a bidding process the analysis pipeline reads.

    Attributes:
        id: The bidding process identifier.
        tenant_id: The tenant that owns the process.
        link: A comma-joined list of URLs attached to the process. It may mix
            uploaded files with external portal links.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str
    tenant_id: str = Field(alias="tenantId")
    link: str | None = None

    def links(self) -> list[str]:
        """Splits the link field into trimmed, non-empty entries.

        Returns:
            The individual links, in their stored order.
        """
        if not self.link:
            return []
        return [entry.strip() for entry in self.link.split(",") if entry.strip()]
