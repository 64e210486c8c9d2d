"""
Import validation tests.

These tests ensure all modules can be imported successfully, catching
issues like missing dependencies or circular imports BEFORE deployment.

Run with: pytest tests/unit/test_imports.py -v
"""

import importlib

import pytest


class TestHandlerImports:
    """Verify all handler modules can be imported without errors."""

    @pytest.mark.parametrize("module_name", [
        "handlers.main",
        "handlers.health_check",
        "handlers.initialize",
        "handlers.ledger_data",
        "handlers.validate_qr",
        "handlers.process_scan",
    ])
    def test_handler_import(self, module_name: str):
        """Each handler module should import without errors."""
        module = importlib.import_module(module_name)
        assert hasattr(module, "lambda_handler"), f"{module_name} missing lambda_handler"

    def test_manual_update_handlers(self):
        module = importlib.import_module("handlers.manual_update")
        assert callable(module.scan_count_handler)
        assert callable(module.highlight_handler)


class TestServiceImports:
    """Verify services and repositories import, including the Google client stack."""

    @pytest.mark.parametrize("module_name", [
        "services.scan_service",
        "services.context",
        "services.google_client",
        "repositories.base",
        "repositories.memory_repo",
        "repositories.sheets_repo",
        "config.settings",
    ])
    def test_module_import(self, module_name: str):
        assert importlib.import_module(module_name) is not None
