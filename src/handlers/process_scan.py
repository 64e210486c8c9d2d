"""
Handler for POST /api/process-scan.

Validates the decoded code and, if it grants entry, records the scan.
Rejections (unknown code, no image, all used) are normal answers and come
back as ``valid: false`` with a 200.
"""

import time
import uuid

from pydantic import ValidationError

from models.payloads import ScanRequest
from utils.error_handling import AppError, BadRequestError, error_body
from utils.logging_config import get_logger
from utils.responses import json_response, parse_body

logger = get_logger(__name__)


def _get_context():
    """Lazy-load the scanner context."""
    from services.context import get_context

    return get_context()


def lambda_handler(event, context):
    """Process one scan."""
    start = time.perf_counter()
    correlation_id = str(uuid.uuid4())

    try:
        request = ScanRequest.model_validate(parse_body(event))
    except (ValidationError, ValueError) as exc:
        logger.info(
            "Rejected scan request",
            extra={"correlation_id": correlation_id, "error": str(exc)},
        )
        return json_response(400, error_body(BadRequestError("QR code is required")))

    try:
        outcome = _get_context().scans.process_scan(request.identifier)
    except AppError as exc:
        logger.exception(
            "Process scan failed",
            extra={"correlation_id": correlation_id, "identifier": request.identifier},
        )
        body = error_body(exc, "Failed to process scan")
        body["correlation_id"] = correlation_id
        return json_response(exc.status_code, body)

    logger.info(
        "Scan processed",
        extra={
            "correlation_id": correlation_id,
            "identifier": request.identifier,
            "valid": outcome.valid,
            "processing_time_ms": int((time.perf_counter() - start) * 1000),
        },
    )
    return json_response(200, {"success": True, **outcome.to_payload()})
