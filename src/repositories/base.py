"""Ledger repository protocol and header-to-field binding.

Both the Google Sheets adapter and the in-memory ledger expose the same
positional cell model: row 1 holds headers, every following row is one
ticket holder addressed by its 1-based sheet row number.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Protocol, Sequence, runtime_checkable

from config.settings import DEFAULT_TICKETS_COLUMN, SCANS_USED_COLUMN, Settings
from models.ticket import LedgerSnapshot, TicketRecord
from utils.validators import parse_count


@runtime_checkable
class LedgerRepository(Protocol):
    """Operations the scan engine needs from the ticket ledger."""

    def fetch_all(self) -> LedgerSnapshot:
        """Read header plus every data row; raise EmptyLedgerError on no rows."""
        ...

    def fetch_headers(self) -> List[str]:
        """Read only the header row."""
        ...

    def ensure_column(self, name: str = SCANS_USED_COLUMN) -> int:
        """Return the 0-based index of ``name``, appending the header if absent."""
        ...

    def write_scan_count(self, position: int, value: int) -> None:
        """Overwrite the Scans Used cell of one row."""
        ...

    def compare_and_set_scan_count(self, position: int, expected: int, value: int) -> bool:
        """Write ``value`` only if the cell still holds ``expected``."""
        ...

    def mark_exhausted(self, position: int) -> None:
        """Tint the row to show its tickets are used up."""
        ...


@dataclass(frozen=True)
class ColumnBinding:
    """Names of the headers that feed each TicketRecord field."""

    number: str = "Number"
    image: str = "Image"
    tickets: str = DEFAULT_TICKETS_COLUMN
    name: str = "name"
    scans_used: str = SCANS_USED_COLUMN

    @classmethod
    def from_settings(cls, settings: Settings) -> "ColumnBinding":
        return cls(
            number=settings.number_column,
            image=settings.image_column,
            tickets=settings.tickets_column,
            name=settings.name_column,
            scans_used=settings.scans_used_column,
        )

    def resolve(self, headers: Sequence[str]) -> Dict[str, Optional[int]]:
        """
        Map field names to header indexes.

        Exact matches are bound first; remaining fields fall back to a
        case-insensitive substring match over headers not already taken.
        Scans Used is exact-only.
        """
        wanted = {
            "number": self.number,
            "image": self.image,
            "tickets": self.tickets,
            "name": self.name,
        }
        positions: Dict[str, Optional[int]] = {}
        taken = set()

        scans_index = find_exact(headers, self.scans_used)
        positions["scans_used"] = scans_index
        if scans_index is not None:
            taken.add(scans_index)

        for field_name, header in wanted.items():
            index = find_exact(headers, header)
            if index is not None and index not in taken:
                positions[field_name] = index
                taken.add(index)

        for field_name, header in wanted.items():
            if field_name in positions:
                continue
            needle = header.lower()
            positions[field_name] = None
            for index, candidate in enumerate(headers):
                if index not in taken and needle in (candidate or "").lower():
                    positions[field_name] = index
                    taken.add(index)
                    break
        return positions

    def build_snapshot(self, rows: Sequence[Sequence[object]]) -> LedgerSnapshot:
        """Turn a raw value grid (header first) into typed records."""
        headers = [str(cell) if cell is not None else "" for cell in rows[0]]
        positions = self.resolve(headers)

        def cell(row: Sequence[object], field_name: str) -> str:
            index = positions.get(field_name)
            if index is None or index >= len(row) or row[index] is None:
                return ""
            return str(row[index])

        records: List[TicketRecord] = []
        for offset, row in enumerate(rows[1:]):
            cells = {
                header: (str(row[i]) if i < len(row) and row[i] is not None else "")
                for i, header in enumerate(headers)
            }
            holder_name = cell(row, "name").strip() or None
            records.append(
                TicketRecord(
                    identifier=cell(row, "number"),
                    image_reference=cell(row, "image"),
                    tickets_allotted=parse_count(cell(row, "tickets")),
                    scans_used=parse_count(cell(row, "scans_used")),
                    holder_name=holder_name,
                    position=offset + 2,
                    cells=cells,
                )
            )
        return LedgerSnapshot(headers=headers, records=records)


def find_exact(headers: Sequence[str], name: str) -> Optional[int]:
    """Case-sensitive exact header lookup."""
    for index, header in enumerate(headers):
        if header == name:
            return index
    return None
