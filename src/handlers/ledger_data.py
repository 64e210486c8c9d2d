"""Handler for GET /api/sheet-data (operator debugging view of the ledger)."""

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
    """Return headers and every row as header -> cell maps."""
    correlation_id = str(uuid.uuid4())

    try:
        snapshot = _get_context().ledger.fetch_all()
    except AppError as exc:
        logger.exception("Ledger fetch failed", extra={"correlation_id": correlation_id})
        body = error_body(exc, "Failed to fetch sheet data")
        body["correlation_id"] = correlation_id
        return json_response(exc.status_code, body)

    data = [record.as_row() for record in snapshot.records]
    return json_response(
        200,
        {"success": True, "headers": snapshot.headers, "data": data, "count": len(data)},
    )
