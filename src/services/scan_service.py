"""
Scan validation and redemption.

``validate`` is a read-only check; ``redeem`` applies one scan to a valid
verdict; ``process_scan`` composes the two for the door-scanning path.
Nothing here retries ledger failures: they propagate to the handler.
"""

from __future__ import annotations

from config.settings import HIGHLIGHT_ALWAYS, Settings
from models.verdict import (
    InvalidReason,
    InvalidVerdict,
    RedemptionResult,
    ScanOutcome,
    ValidVerdict,
    Verdict,
)
from repositories.base import LedgerRepository
from utils.error_handling import LedgerError, ScanConflictError
from utils.locks import KeyedLock
from utils.logging_config import get_logger
from utils.validators import ensure_present

logger = get_logger(__name__)


class ScanService:
    """Decides whether a code grants entry and records the redemption."""

    def __init__(
        self,
        ledger: LedgerRepository,
        highlight_policy: str = HIGHLIGHT_ALWAYS,
        strict_redemption: bool = False,
        max_conflict_retries: int = 3,
    ):
        self.ledger = ledger
        self.highlight_policy = highlight_policy
        self.strict_redemption = strict_redemption
        self.max_conflict_retries = max_conflict_retries
        self._locks = KeyedLock()

    @classmethod
    def from_settings(cls, ledger: LedgerRepository, settings: Settings) -> "ScanService":
        return cls(
            ledger,
            highlight_policy=settings.highlight_policy,
            strict_redemption=settings.strict_redemption,
            max_conflict_retries=settings.max_conflict_retries,
        )

    def validate(self, identifier: str) -> Verdict:
        """Check ``identifier`` against a fresh ledger snapshot without writing."""
        ensure_present(identifier, "identifier")
        snapshot = self.ledger.fetch_all()
        record = snapshot.find(identifier)
        if record is None:
            logger.info("Code not found", extra={"identifier": identifier})
            return InvalidVerdict(reason=InvalidReason.NOT_FOUND)

        if not record.has_image:
            logger.info(
                "No QR image issued",
                extra={"identifier": identifier, "position": record.position},
            )
            return InvalidVerdict(reason=InvalidReason.NO_IMAGE, record=record)

        if record.scans_used >= record.tickets_allotted:
            logger.info(
                "Scan limit reached",
                extra={
                    "identifier": identifier,
                    "scans_used": record.scans_used,
                    "tickets": record.tickets_allotted,
                },
            )
            return InvalidVerdict(reason=InvalidReason.LIMIT_EXCEEDED, record=record)

        return ValidVerdict(
            record=record,
            tickets_allotted=record.tickets_allotted,
            scans_used=record.scans_used,
            remaining_scans=record.tickets_allotted - record.scans_used,
        )

    def redeem(self, verdict: ValidVerdict) -> RedemptionResult:
        """Apply one scan to a valid verdict: last write wins on the ledger."""
        if not isinstance(verdict, ValidVerdict):
            raise TypeError("only a ValidVerdict can be redeemed")
        new_scans_used = verdict.scans_used + 1
        self.ledger.write_scan_count(verdict.record.position, new_scans_used)
        return self._finish(verdict, new_scans_used)

    def process_scan(self, identifier: str) -> ScanOutcome:
        """Validate and, when valid, immediately redeem ``identifier``."""
        with self._locks.hold(identifier):
            verdict = self.validate(identifier)
            if not isinstance(verdict, ValidVerdict):
                return ScanOutcome(verdict=verdict)

            if not self.strict_redemption:
                return ScanOutcome(verdict=verdict, redemption=self.redeem(verdict))

            return self._redeem_conditionally(identifier, verdict)

    def _redeem_conditionally(self, identifier: str, verdict: ValidVerdict) -> ScanOutcome:
        current: Verdict = verdict
        for attempt in range(1, self.max_conflict_retries + 1):
            if not isinstance(current, ValidVerdict):
                # Someone else used the last ticket while we were retrying.
                return ScanOutcome(verdict=current)

            new_scans_used = current.scans_used + 1
            written = self.ledger.compare_and_set_scan_count(
                current.record.position, current.scans_used, new_scans_used
            )
            if written:
                return ScanOutcome(
                    verdict=current, redemption=self._finish(current, new_scans_used)
                )

            logger.warning(
                "Concurrent scan detected, re-validating",
                extra={"identifier": identifier, "attempt": attempt},
            )
            current = self.validate(identifier)

        raise ScanConflictError(identifier, self.max_conflict_retries)

    def _finish(self, verdict: ValidVerdict, new_scans_used: int) -> RedemptionResult:
        record = verdict.record
        fully_used = new_scans_used >= verdict.tickets_allotted
        highlighted = False
        if self.highlight_policy == HIGHLIGHT_ALWAYS or fully_used:
            highlighted = self._highlight(record.position)

        result = RedemptionResult(
            guest_name=record.holder_name or "Guest",
            new_scans_used=new_scans_used,
            tickets_allotted=verdict.tickets_allotted,
            remaining_scans=verdict.tickets_allotted - new_scans_used,
            fully_used=fully_used,
            highlighted=highlighted,
        )
        logger.info(
            "Scan redeemed",
            extra={
                "identifier": record.identifier,
                "position": record.position,
                "scans_used": new_scans_used,
                "fully_used": fully_used,
            },
        )
        return result

    def _highlight(self, position: int) -> bool:
        """Best-effort: the scan count is already persisted, so failures only log."""
        try:
            self.ledger.mark_exhausted(position)
            return True
        except LedgerError as exc:
            logger.warning(
                "Row highlight failed",
                extra={"position": position, "error": str(exc)},
            )
            return False
