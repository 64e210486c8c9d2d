"""GoogleSheetsLedger against a mocked discovery service."""

import httplib2
import pytest
from unittest.mock import MagicMock

from googleapiclient.errors import HttpError

from config.settings import DEFAULT_TICKETS_COLUMN
from repositories.sheets_repo import EXHAUSTED_COLOR, PERMISSION_HINT, GoogleSheetsLedger
from utils.error_handling import ColumnMissingError, EmptyLedgerError, LedgerUnavailableError

HEADERS = ["Image", "Enter total number of tickets needed (Kids above 8 - ticket required)",
           "Number", "name", "email", "phone number", "Scans Used"]


def _http_error(status: int, message: str = "boom") -> HttpError:
    resp = httplib2.Response({"status": str(status)})
    content = ('{"error": {"message": "%s"}}' % message).encode()
    return HttpError(resp, content)


@pytest.fixture
def service():
    return MagicMock()


@pytest.fixture
def sheets(service):
    return GoogleSheetsLedger(service=service, spreadsheet_id="sheet-123", sheet_gid=7)


def _values(service):
    return service.spreadsheets.return_value.values.return_value


def test_fetch_all_reads_full_range(service, sheets):
    _values(service).get.return_value.execute.return_value = {
        "values": [HEADERS, ["https://x/1.png", "2", "1001", "John Doe", "j@x", "555", "1"]]
    }

    snapshot = sheets.fetch_all()

    _values(service).get.assert_called_with(spreadsheetId="sheet-123", range="Sheet1")
    record = snapshot.records[0]
    assert record.identifier == "1001"
    assert record.tickets_allotted == 2
    assert record.scans_used == 1
    assert record.position == 2


def test_fetch_all_without_values_raises_empty(service, sheets):
    _values(service).get.return_value.execute.return_value = {}
    with pytest.raises(EmptyLedgerError):
        sheets.fetch_all()


def test_ensure_column_appends_after_last_header(service, sheets):
    _values(service).get.return_value.execute.return_value = {"values": [["Image", "Number", "name"]]}

    index = sheets.ensure_column("Scans Used")

    assert index == 3
    _values(service).update.assert_called_once_with(
        spreadsheetId="sheet-123",
        range="Sheet1!D1",
        valueInputOption="RAW",
        body={"values": [["Scans Used"]]},
    )


def test_ensure_column_existing_is_noop(service, sheets):
    _values(service).get.return_value.execute.return_value = {"values": [HEADERS]}

    assert sheets.ensure_column("Scans Used") == 6
    _values(service).update.assert_not_called()


def test_write_scan_count_targets_single_cell(service, sheets):
    _values(service).get.return_value.execute.return_value = {"values": [HEADERS]}

    sheets.write_scan_count(5, 2)

    _values(service).update.assert_called_once_with(
        spreadsheetId="sheet-123",
        range="Sheet1!G5",
        valueInputOption="RAW",
        body={"values": [[2]]},
    )


def test_write_scan_count_without_column(service, sheets):
    _values(service).get.return_value.execute.return_value = {"values": [["Number", "Image"]]}
    with pytest.raises(ColumnMissingError):
        sheets.write_scan_count(2, 1)
    _values(service).update.assert_not_called()


def test_compare_and_set_skips_write_when_cell_changed(service, sheets):
    _values(service).get.return_value.execute.side_effect = [
        {"values": [HEADERS]},
        {"values": [["2"]]},
    ]

    assert sheets.compare_and_set_scan_count(4, expected=1, value=2) is False
    _values(service).update.assert_not_called()


def test_compare_and_set_writes_when_cell_matches(service, sheets):
    _values(service).get.return_value.execute.side_effect = [
        {"values": [HEADERS]},
        {},  # blank cell reads as 0
    ]

    assert sheets.compare_and_set_scan_count(4, expected=0, value=1) is True
    assert _values(service).update.call_args.kwargs["range"] == "Sheet1!G4"


def test_mark_exhausted_sends_repeat_cell(service, sheets):
    sheets.mark_exhausted(9)

    body = service.spreadsheets.return_value.batchUpdate.call_args.kwargs["body"]
    request = body["requests"][0]["repeatCell"]
    assert request["range"] == {
        "sheetId": 7,
        "startRowIndex": 8,
        "endRowIndex": 9,
        "startColumnIndex": 0,
        "endColumnIndex": 20,
    }
    assert request["cell"]["userEnteredFormat"]["backgroundColor"] == EXHAUSTED_COLOR
    assert request["fields"] == "userEnteredFormat.backgroundColor"


def test_permission_denied_maps_to_403(service, sheets):
    _values(service).get.return_value.execute.side_effect = _http_error(
        403, "The caller does not have permission"
    )

    with pytest.raises(LedgerUnavailableError) as exc_info:
        sheets.fetch_all()

    assert exc_info.value.status_code == 403
    assert str(exc_info.value) == PERMISSION_HINT
    assert "permission" in exc_info.value.details


def test_server_error_maps_to_unavailable(service, sheets):
    _values(service).get.return_value.execute.side_effect = _http_error(503, "backend down")

    with pytest.raises(LedgerUnavailableError) as exc_info:
        sheets.fetch_headers()
    assert exc_info.value.status_code == 502


def test_transport_error_maps_to_unavailable(service, sheets):
    service.spreadsheets.return_value.batchUpdate.return_value.execute.side_effect = (
        TimeoutError("timed out")
    )
    with pytest.raises(LedgerUnavailableError) as exc_info:
        sheets.mark_exhausted(2)
    assert "timed out" in exc_info.value.details


class _FakeRequest:
    def __init__(self, result):
        self._result = result

    def execute(self):
        return self._result


class _GridSheetsService:
    """Stateful stand-in for the discovery client holding one tab as a grid."""

    def __init__(self, rows):
        self.rows = [list(row) for row in rows]
        self.batch_updates = []

    def spreadsheets(self):
        return self

    def values(self):
        return self

    def get(self, spreadsheetId, range):
        _, _, cells = range.partition("!")
        if not cells:
            return _FakeRequest({"values": [list(row) for row in self.rows]})
        if cells == "1:1":
            return _FakeRequest({"values": [list(self.rows[0])]})
        column, row = self._locate(cells)
        line = self.rows[row - 1]
        value = line[column - 1] if column <= len(line) else ""
        return _FakeRequest({"values": [[value]]} if value != "" else {})

    def update(self, spreadsheetId, range, valueInputOption, body):
        column, row = self._locate(range.partition("!")[2])
        while len(self.rows) < row:
            self.rows.append([])
        line = self.rows[row - 1]
        while len(line) < column:
            line.append("")
        # Sheets hands back formatted strings on the next read.
        line[column - 1] = str(body["values"][0][0])
        return _FakeRequest({"updatedCells": 1})

    def batchUpdate(self, spreadsheetId, body):
        self.batch_updates.append(body)
        return _FakeRequest({})

    @staticmethod
    def _locate(cell):
        letters = "".join(ch for ch in cell if ch.isalpha())
        number = 0
        for ch in letters:
            number = number * 26 + (ord(ch) - ord("A") + 1)
        return number, int(cell[len(letters):])


def _wide_ledger_rows():
    form_columns = ["Image", DEFAULT_TICKETS_COLUMN, "Number", "name"]
    form_columns += [f"Question {n}" for n in range(len(form_columns) + 1, 27)]
    headers = form_columns + ["Scans Used"]
    row = ["https://x/1.png", "1", "1001", "Wide Holder"] + [""] * 22
    return headers, row


def test_fetch_all_reads_columns_beyond_z():
    headers, row = _wide_ledger_rows()
    service = _GridSheetsService([headers, row + ["1"]])
    sheets = GoogleSheetsLedger(service=service, spreadsheet_id="sheet-123")

    record = sheets.fetch_all().records[0]

    assert len(headers) == 27
    assert record.scans_used == 1
    assert record.cells["Scans Used"] == "1"


def test_scans_used_column_beyond_z_blocks_reentry():
    from services.scan_service import ScanService

    headers, row = _wide_ledger_rows()
    service = _GridSheetsService([headers, row])
    sheets = GoogleSheetsLedger(service=service, spreadsheet_id="sheet-123")
    engine = ScanService(sheets)

    outcomes = [engine.process_scan("1001") for _ in range(3)]

    assert [outcome.verdict.valid for outcome in outcomes] == [True, False, False]
    assert outcomes[1].verdict.reason.value == "LIMIT_EXCEEDED"
    assert service.rows[1][26] == "1"
