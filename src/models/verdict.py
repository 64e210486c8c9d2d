"""Validation verdicts and redemption results."""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, Field, model_validator

from models.ticket import TicketRecord

GRANTED_MESSAGE = "QR Code valid - Entry granted!"


class InvalidReason(str, Enum):
    """Business-rule rejections; these are answers, not errors."""

    NOT_FOUND = "NOT_FOUND"
    NO_IMAGE = "NO_IMAGE"
    LIMIT_EXCEEDED = "LIMIT_EXCEEDED"


REASON_MESSAGES = {
    InvalidReason.NOT_FOUND: "QR code not found in records",
    InvalidReason.NO_IMAGE: "No QR Code exists, manual check needed if guest persists ticket bought",
    InvalidReason.LIMIT_EXCEEDED: "All QR Codes already used",
}


class ValidVerdict(BaseModel):
    """The code may be redeemed at least once more."""

    record: TicketRecord
    tickets_allotted: int = Field(ge=0)
    scans_used: int = Field(ge=0)
    remaining_scans: int = Field(ge=1)

    @property
    def valid(self) -> bool:
        return True

    def to_payload(self) -> Dict[str, Any]:
        return {
            "valid": True,
            "message": GRANTED_MESSAGE,
            "guestName": self.record.holder_name or "Guest",
            "totalTickets": self.tickets_allotted,
            "scansUsed": self.scans_used,
            "remainingScans": self.remaining_scans,
            "rowIndex": self.record.position,
        }


class InvalidVerdict(BaseModel):
    """The code must not grant entry."""

    reason: InvalidReason
    message: str = ""
    record: Optional[TicketRecord] = None

    @model_validator(mode="after")
    def default_message(self) -> "InvalidVerdict":
        if not self.message:
            self.message = REASON_MESSAGES[self.reason]
        return self

    @property
    def valid(self) -> bool:
        return False

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "valid": False,
            "error": self.message,
            "errorType": self.reason.value,
        }
        if self.record is not None:
            payload["guestName"] = self.record.holder_name or "Guest"
            payload["totalTickets"] = self.record.tickets_allotted
            payload["scansUsed"] = self.record.scans_used
            payload["remainingScans"] = max(
                self.record.tickets_allotted - self.record.scans_used, 0
            )
        return payload


Verdict = Union[ValidVerdict, InvalidVerdict]


class RedemptionResult(BaseModel):
    """Outcome of applying one scan to a valid record."""

    guest_name: str
    new_scans_used: int
    tickets_allotted: int
    remaining_scans: int
    fully_used: bool
    highlighted: bool = False

    def to_payload(self) -> Dict[str, Any]:
        return {
            "valid": True,
            "message": GRANTED_MESSAGE,
            "guestName": self.guest_name,
            "scansUsed": self.new_scans_used,
            "totalTickets": self.tickets_allotted,
            "remainingScans": self.remaining_scans,
            "isFullyUsed": self.fully_used,
        }


class ScanOutcome(BaseModel):
    """Validate-then-redeem result returned by ScanService.process_scan."""

    verdict: Union[ValidVerdict, InvalidVerdict]
    redemption: Optional[RedemptionResult] = None

    @property
    def valid(self) -> bool:
        return self.redemption is not None

    def to_payload(self) -> Dict[str, Any]:
        if self.redemption is not None:
            return self.redemption.to_payload()
        return self.verdict.to_payload()
