"""Google Sheets repository for the ticket ledger (Sheets API v4)."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import httplib2
from google.auth.exceptions import GoogleAuthError
from googleapiclient.errors import HttpError

from config.settings import SCANS_USED_COLUMN
from models.ticket import LedgerSnapshot
from repositories.base import ColumnBinding, find_exact
from utils.a1 import cell_range, column_letter
from utils.error_handling import (
    ColumnMissingError,
    EmptyLedgerError,
    LedgerUnavailableError,
)
from utils.logging_config import get_logger
from utils.validators import parse_count

logger = get_logger(__name__)

# Light red, matching what door staff already recognise as "used up".
EXHAUSTED_COLOR = {"red": 1.0, "green": 0.0, "blue": 0.0, "alpha": 0.3}

PERMISSION_HINT = "Make sure to share your Google Sheet with the service account email"


class GoogleSheetsLedger:
    """LedgerRepository backed by one tab of a Google spreadsheet."""

    def __init__(
        self,
        service: Any,
        spreadsheet_id: str,
        sheet_name: str = "Sheet1",
        sheet_gid: int = 0,
        binding: Optional[ColumnBinding] = None,
        highlight_columns: int = 20,
    ):
        self.service = service
        self.spreadsheet_id = spreadsheet_id
        self.sheet_name = sheet_name
        self.sheet_gid = sheet_gid
        self.binding = binding or ColumnBinding()
        self.highlight_columns = highlight_columns

    def fetch_all(self) -> LedgerSnapshot:
        """
        Read every populated cell of the tab; row 1 is treated as the header.

        The range has no column bound so data rows always cover the same
        columns as the header row that ensure_column and writes resolve against.
        """
        rows = self._get_values(self.sheet_name)
        if not rows:
            raise EmptyLedgerError()
        snapshot = self.binding.build_snapshot(rows)
        logger.info(
            "Ledger fetched",
            extra={"spreadsheet_id": self.spreadsheet_id, "rows": len(snapshot.records)},
        )
        return snapshot

    def fetch_headers(self) -> List[str]:
        rows = self._get_values(f"{self.sheet_name}!1:1")
        return [str(cell) for cell in rows[0]] if rows else []

    def ensure_column(self, name: str = SCANS_USED_COLUMN) -> int:
        """Append ``name`` to the right of the last header unless it exists."""
        headers = self.fetch_headers()
        index = find_exact(headers, name)
        if index is not None:
            return index

        index = len(headers)
        self._update_values(cell_range(self.sheet_name, index + 1, 1), name)
        logger.info(
            "Header added",
            extra={"column": name, "letter": column_letter(index + 1)},
        )
        return index

    def write_scan_count(self, position: int, value: int) -> None:
        column_number = self._scans_column_number()
        self._update_values(cell_range(self.sheet_name, column_number, position), value)
        logger.info("Scan count written", extra={"position": position, "value": value})

    def compare_and_set_scan_count(self, position: int, expected: int, value: int) -> bool:
        """
        Re-read the cell and write only if it still holds ``expected``.

        Sheets has no conditional write, so another writer can still land
        between the read and the update; this only narrows that window.
        """
        column_number = self._scans_column_number()
        target = cell_range(self.sheet_name, column_number, position)
        rows = self._get_values(target)
        current = parse_count(rows[0][0] if rows and rows[0] else None)
        if current != expected:
            logger.warning(
                "Scan count changed underneath",
                extra={"position": position, "expected": expected, "current": current},
            )
            return False
        self._update_values(target, value)
        logger.info("Scan count written", extra={"position": position, "value": value})
        return True

    def mark_exhausted(self, position: int) -> None:
        """Tint the first ``highlight_columns`` cells of the row."""
        requests = [
            {
                "repeatCell": {
                    "range": {
                        "sheetId": self.sheet_gid,
                        "startRowIndex": position - 1,
                        "endRowIndex": position,
                        "startColumnIndex": 0,
                        "endColumnIndex": self.highlight_columns,
                    },
                    "cell": {"userEnteredFormat": {"backgroundColor": EXHAUSTED_COLOR}},
                    "fields": "userEnteredFormat.backgroundColor",
                }
            }
        ]
        self._execute(
            "highlight row",
            self.service.spreadsheets().batchUpdate(
                spreadsheetId=self.spreadsheet_id, body={"requests": requests}
            ),
        )
        logger.info("Row highlighted", extra={"position": position})

    def _scans_column_number(self) -> int:
        index = find_exact(self.fetch_headers(), self.binding.scans_used)
        if index is None:
            raise ColumnMissingError(self.binding.scans_used)
        return index + 1

    def _get_values(self, range_: str) -> List[List[Any]]:
        response = self._execute(
            f"read {range_}",
            self.service.spreadsheets()
            .values()
            .get(spreadsheetId=self.spreadsheet_id, range=range_),
        )
        return response.get("values") or []

    def _update_values(self, range_: str, value: Any) -> Dict[str, Any]:
        return self._execute(
            f"write {range_}",
            self.service.spreadsheets()
            .values()
            .update(
                spreadsheetId=self.spreadsheet_id,
                range=range_,
                valueInputOption="RAW",
                body={"values": [[value]]},
            ),
        )

    def _execute(self, action: str, request: Any) -> Dict[str, Any]:
        """Run one API request, translating client failures to LedgerUnavailableError."""
        try:
            return request.execute() or {}
        except HttpError as exc:
            status = getattr(exc.resp, "status", None)
            logger.error(
                "Sheets request failed",
                extra={"action": action, "status": status, "error": str(exc)},
            )
            if status == 403:
                raise LedgerUnavailableError(
                    PERMISSION_HINT, status_code=403, details=str(exc)
                ) from exc
            raise LedgerUnavailableError(f"Failed to {action}", details=str(exc)) from exc
        except (GoogleAuthError, httplib2.HttpLib2Error, OSError) as exc:
            logger.error("Sheets unreachable", extra={"action": action, "error": str(exc)})
            raise LedgerUnavailableError(f"Failed to {action}", details=str(exc)) from exc
