"""
Pytest configuration to ensure paths are set up correctly for tests.

This allows imports like `from handlers import main` to work when running
tests, simulating the Lambda environment where code is deployed from the
src/ directory.
"""

import os
import sys
from pathlib import Path

import pytest


def _ensure_paths_on_sys_path() -> None:
    """Add src/ to sys.path if missing.

    The src/ directory is added to simulate Lambda's import behavior,
    where the function code is zipped from src/ as the package root.
    """
    src_root = Path(__file__).resolve().parents[1] / "src"
    src_str = str(src_root)
    if src_str not in sys.path:
        sys.path.insert(0, src_str)


_ensure_paths_on_sys_path()

# Offline-friendly defaults so nothing reaches Google or AWS during tests.
os.environ.setdefault("AWS_REGION", "eu-west-2")
os.environ.setdefault("AWS_DEFAULT_REGION", "eu-west-2")
os.environ.setdefault("AWS_ACCESS_KEY_ID", "test")
os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "test")
os.environ.setdefault("ENVIRONMENT", "dev")
os.environ.setdefault("FRONTEND_URL", "https://scanner.example.com")


@pytest.fixture
def ledger():
    """Fresh demo ledger: 1001 (2 tickets), 1002 (1), 1003 (2 of 3 used), 1004 (no image)."""
    from repositories.memory_repo import InMemoryLedger

    return InMemoryLedger.demo()


@pytest.fixture
def scanner_context(ledger):
    """Install a memory-backed context for the handlers and clear it afterwards."""
    from config.settings import Settings
    from services.context import ScannerContext, set_context
    from services.scan_service import ScanService

    settings = Settings(ledger_backend="memory", sheet_id="test-sheet")
    ctx = ScannerContext(settings=settings, ledger=ledger, scans=ScanService(ledger))
    set_context(ctx)
    yield ctx
    set_context(None)


@pytest.fixture
def http_event():
    """Build an API Gateway HTTP API (v2) event."""
    import json

    def _build(method: str, path: str, body=None):
        event = {"requestContext": {"http": {"method": method, "path": path}}}
        if body is not None:
            event["body"] = body if isinstance(body, str) else json.dumps(body)
        return event

    return _build
