"""In-memory ledger for tests and the ``memory`` demo backend.

Keeps the same grid semantics as the Sheets adapter (header row, 1-based
positions, string cells) so the engine cannot tell the two apart.
"""

from __future__ import annotations

from threading import Lock
from typing import Dict, List, Optional, Sequence, Set

from config.settings import SCANS_USED_COLUMN
from models.ticket import LedgerSnapshot
from repositories.base import ColumnBinding, find_exact
from utils.error_handling import ColumnMissingError, EmptyLedgerError
from utils.logging_config import get_logger
from utils.validators import parse_count

logger = get_logger(__name__)

DEMO_HEADERS = [
    "Image",
    "Enter total number of tickets needed (Kids above 8 - ticket required)",
    "Number",
    "name",
    "email",
    "phone number",
    "Scans Used",
]

DEMO_ROWS = [
    ["https://example.com/qr1.png", "2", "1001", "John Doe", "john@example.com", "555-0123", "0"],
    ["https://example.com/qr2.png", "1", "1002", "Jane Smith", "jane@example.com", "555-0124", "0"],
    ["https://example.com/qr3.png", "3", "1003", "Bob Johnson", "bob@example.com", "555-0125", "2"],
    ["", "1", "1004", "Alice Brown", "alice@example.com", "555-0126", "0"],
]


class InMemoryLedger:
    """Grid-backed ledger implementing LedgerRepository."""

    def __init__(
        self,
        rows: Optional[Sequence[Sequence[object]]] = None,
        binding: Optional[ColumnBinding] = None,
    ):
        self.grid: List[List[str]] = [
            ["" if cell is None else str(cell) for cell in row] for row in (rows or [])
        ]
        self.binding = binding or ColumnBinding()
        self.highlighted: Set[int] = set()
        self.writes: List[Dict[str, int]] = []
        self._lock = Lock()

    @classmethod
    def demo(cls, binding: Optional[ColumnBinding] = None) -> "InMemoryLedger":
        """Ledger seeded with the sample guests used for local walkthroughs."""
        return cls([DEMO_HEADERS] + [list(row) for row in DEMO_ROWS], binding=binding)

    def fetch_all(self) -> LedgerSnapshot:
        with self._lock:
            if not self.grid:
                raise EmptyLedgerError()
            rows = [list(row) for row in self.grid]
        snapshot = self.binding.build_snapshot(rows)
        logger.debug("Ledger read", extra={"rows": len(snapshot.records)})
        return snapshot

    def fetch_headers(self) -> List[str]:
        with self._lock:
            return list(self.grid[0]) if self.grid else []

    def ensure_column(self, name: str = SCANS_USED_COLUMN) -> int:
        with self._lock:
            if not self.grid:
                self.grid.append([])
            headers = self.grid[0]
            index = find_exact(headers, name)
            if index is not None:
                return index
            headers.append(name)
            logger.info("Header added", extra={"column": name, "index": len(headers) - 1})
            return len(headers) - 1

    def write_scan_count(self, position: int, value: int) -> None:
        with self._lock:
            column = self._scans_column()
            self._set_cell(position, column, str(value))
            self.writes.append({"position": position, "value": value})

    def compare_and_set_scan_count(self, position: int, expected: int, value: int) -> bool:
        with self._lock:
            column = self._scans_column()
            if parse_count(self._get_cell(position, column)) != expected:
                return False
            self._set_cell(position, column, str(value))
            self.writes.append({"position": position, "value": value})
            return True

    def mark_exhausted(self, position: int) -> None:
        with self._lock:
            self.highlighted.add(position)

    def scan_count(self, position: int) -> int:
        """Current parsed Scans Used value for a row (test helper)."""
        with self._lock:
            return parse_count(self._get_cell(position, self._scans_column()))

    def _scans_column(self) -> int:
        headers = self.grid[0] if self.grid else []
        index = find_exact(headers, self.binding.scans_used)
        if index is None:
            raise ColumnMissingError(self.binding.scans_used)
        return index

    def _get_cell(self, position: int, column: int) -> str:
        row_index = position - 1
        if row_index >= len(self.grid) or column >= len(self.grid[row_index]):
            return ""
        return self.grid[row_index][column]

    def _set_cell(self, position: int, column: int, value: str) -> None:
        row_index = position - 1
        while len(self.grid) <= row_index:
            self.grid.append([])
        row = self.grid[row_index]
        while len(row) <= column:
            row.append("")
        row[column] = value
