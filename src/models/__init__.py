"""Pydantic models for ledger rows, verdicts and API payloads."""

from models.payloads import HighlightRequest, ScanCountUpdate, ScanRequest  # noqa: F401
from models.response import ApiResponse, HealthResponse  # noqa: F401
from models.ticket import LedgerSnapshot, TicketRecord  # noqa: F401
from models.verdict import (  # noqa: F401
    InvalidReason,
    InvalidVerdict,
    RedemptionResult,
    ScanOutcome,
    ValidVerdict,
    Verdict,
)
