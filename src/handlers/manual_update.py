"""Handlers for the operator overrides: set a scan count, highlight a row."""

import uuid

from pydantic import ValidationError

from models.payloads import HighlightRequest, ScanCountUpdate
from models.response import ApiResponse
from utils.error_handling import AppError, BadRequestError, error_body
from utils.logging_config import get_logger
from utils.responses import json_response, parse_body

logger = get_logger(__name__)


def _get_context():
    """Lazy-load the scanner context."""
    from services.context import get_context

    return get_context()


def scan_count_handler(event, context):
    """Handle POST /api/update-scan-count."""
    correlation_id = str(uuid.uuid4())

    try:
        update = ScanCountUpdate.model_validate(parse_body(event))
    except (ValidationError, ValueError):
        return json_response(
            400, error_body(BadRequestError("Row index and scan count are required"))
        )

    try:
        _get_context().ledger.write_scan_count(update.position, update.scan_count)
    except AppError as exc:
        logger.exception(
            "Manual scan count update failed",
            extra={"correlation_id": correlation_id, "position": update.position},
        )
        body = error_body(exc, "Failed to update scan count")
        body["correlation_id"] = correlation_id
        return json_response(exc.status_code, body)

    logger.info(
        "Scan count set manually",
        extra={
            "correlation_id": correlation_id,
            "position": update.position,
            "value": update.scan_count,
        },
    )
    message = f"Updated scan count for row {update.position} to {update.scan_count}"
    return json_response(200, ApiResponse(message=message).model_dump())


def highlight_handler(event, context):
    """Handle POST /api/highlight-row."""
    correlation_id = str(uuid.uuid4())

    try:
        request = HighlightRequest.model_validate(parse_body(event))
    except (ValidationError, ValueError):
        return json_response(400, error_body(BadRequestError("Row index is required")))

    try:
        _get_context().ledger.mark_exhausted(request.position)
    except AppError as exc:
        logger.exception(
            "Manual highlight failed",
            extra={"correlation_id": correlation_id, "position": request.position},
        )
        body = error_body(exc, "Failed to highlight row")
        body["correlation_id"] = correlation_id
        return json_response(exc.status_code, body)

    message = f"Highlighted row {request.position}"
    return json_response(200, ApiResponse(message=message).model_dump())
