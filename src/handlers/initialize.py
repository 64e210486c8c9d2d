"""
Handler for POST /api/initialize.

Checks configuration and sheet access, then makes sure the Scans Used
header exists so later scans have a column to write to.
"""

import uuid

from utils.error_handling import AppError, error_body
from utils.logging_config import get_logger
from utils.responses import json_response

logger = get_logger(__name__)


def _get_context():
    """Lazy-load the scanner context."""
    from services.context import get_context

    return get_context()


def lambda_handler(event, context):
    """Verify access and add the Scans Used column if missing."""
    correlation_id = str(uuid.uuid4())
    try:
        ctx = _get_context()
        column = ctx.settings.scans_used_column
        existed = column in ctx.ledger.fetch_headers()
        index = ctx.ledger.ensure_column(column)

        logger.info(
            "Scanner initialized",
            extra={
                "correlation_id": correlation_id,
                "column_index": index,
                "column_added": not existed,
            },
        )
        return json_response(
            200,
            {
                "success": True,
                "message": "Google Sheets service initialized successfully",
                "sheetId": ctx.settings.sheet_id,
                "scansUsedColumnAdded": not existed,
            },
        )
    except AppError as exc:
        logger.exception("Initialization failed", extra={"correlation_id": correlation_id})
        body = error_body(exc, "Failed to initialize Google Sheets service")
        body["correlation_id"] = correlation_id
        return json_response(exc.status_code, body)
