"""Ledger row models."""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class TicketRecord(BaseModel):
    """One ticket holder's row, with counts already parsed."""

    identifier: str
    image_reference: str = ""
    tickets_allotted: int = Field(default=0, ge=0)
    scans_used: int = Field(default=0, ge=0)
    holder_name: Optional[str] = None
    position: int = Field(ge=2, description="1-based sheet row; row 1 is the header")
    cells: Dict[str, str] = Field(default_factory=dict)

    @property
    def has_image(self) -> bool:
        """True when a QR code was actually issued for this holder."""
        return bool(self.image_reference.strip())

    def as_row(self) -> Dict[str, object]:
        """Raw header -> cell mapping plus the row locator, as fetchLedger returns it."""
        row: Dict[str, object] = dict(self.cells)
        row["rowIndex"] = self.position
        return row


class LedgerSnapshot(BaseModel):
    """Full read of the ledger at one point in time."""

    headers: List[str]
    records: List[TicketRecord] = Field(default_factory=list)

    def find(self, identifier: str) -> Optional[TicketRecord]:
        """Return the first record whose identifier matches exactly."""
        for record in self.records:
            if record.identifier == identifier:
                return record
        return None
