"""Custom exceptions and helpers for consistent error responses."""

from typing import Any, Dict, Optional


class AppError(Exception):
    """Base class for application errors."""

    error = "Request failed"

    def __init__(self, message: str, status_code: int = 400, details: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.details = details or message


class BadRequestError(AppError):
    """Raised when the caller sent a missing or malformed payload."""

    error = "Bad request"

    def __init__(self, message: str = "Invalid input"):
        super().__init__(message, status_code=400)


class ConfigurationError(AppError):
    """Raised when required settings (sheet id, credentials) are missing."""

    error = "Configuration error"

    def __init__(self, message: str = "Service is not configured"):
        super().__init__(message, status_code=500)


class LedgerError(AppError):
    """Base class for failures talking to the ticket ledger."""

    error = "Ledger error"

    def __init__(self, message: str, status_code: int = 500, details: Optional[str] = None):
        super().__init__(message, status_code=status_code, details=details)


class EmptyLedgerError(LedgerError):
    """Raised when the sheet range returned no rows, not even a header."""

    def __init__(self, message: str = "No data found in sheet"):
        super().__init__(message, status_code=500)


class ColumnMissingError(LedgerError):
    """Raised when a required header (usually "Scans Used") is absent."""

    def __init__(self, column: str):
        super().__init__(f"{column} column not found", status_code=500)
        self.column = column


class LedgerUnavailableError(LedgerError):
    """Raised on transport, auth, permission or quota failures."""

    error = "Ledger unavailable"

    def __init__(self, message: str, status_code: int = 502, details: Optional[str] = None):
        super().__init__(message, status_code=status_code, details=details)


class ScanConflictError(AppError):
    """Raised when a conditional scan-count write kept losing to other writers."""

    error = "Scan conflict"

    def __init__(self, identifier: str, attempts: int):
        super().__init__(
            f"Scan count for {identifier} changed during {attempts} attempts",
            status_code=409,
        )
        self.identifier = identifier


def error_body(error: AppError, headline: Optional[str] = None) -> Dict[str, Any]:
    """Render the ``{success, error, details}`` failure payload."""
    return {
        "success": False,
        "error": headline or error.error,
        "details": error.details,
    }
