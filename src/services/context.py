"""
Process-wide scanner context.

Built once per warm Lambda container by the handlers and passed into every
operation, so the engine itself holds no hidden global state and tests can
swap in an InMemoryLedger.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from config.settings import Settings
from repositories.base import ColumnBinding, LedgerRepository
from repositories.memory_repo import InMemoryLedger
from services.scan_service import ScanService
from utils.logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class ScannerContext:
    """Everything a request needs: settings, the ledger and the engine."""

    settings: Settings
    ledger: LedgerRepository
    scans: ScanService

    @classmethod
    def from_settings(cls, settings: Settings) -> "ScannerContext":
        """Validate configuration and wire the configured ledger backend."""
        settings.require_credentials()
        binding = ColumnBinding.from_settings(settings)

        if settings.ledger_backend == "memory":
            ledger: LedgerRepository = InMemoryLedger.demo(binding)
        else:
            from repositories.sheets_repo import GoogleSheetsLedger
            from services.google_client import build_sheets_service

            ledger = GoogleSheetsLedger(
                service=build_sheets_service(settings),
                spreadsheet_id=settings.sheet_id,
                sheet_name=settings.sheet_name,
                sheet_gid=settings.sheet_gid,
                binding=binding,
                highlight_columns=settings.highlight_columns,
            )

        logger.info(
            "Scanner context created",
            extra={"backend": settings.ledger_backend, "environment": settings.environment},
        )
        return cls(
            settings=settings,
            ledger=ledger,
            scans=ScanService.from_settings(ledger, settings),
        )


# Lazy-loaded so cold starts without credentials can still serve /api/health.
_context: Optional[ScannerContext] = None


def get_context() -> ScannerContext:
    """Return the container's context, building it on first use."""
    global _context
    if _context is None:
        _context = ScannerContext.from_settings(Settings.from_environment())
    return _context


def set_context(context: Optional[ScannerContext]) -> None:
    """Install (or clear, with None) the container's context."""
    global _context
    _context = context
