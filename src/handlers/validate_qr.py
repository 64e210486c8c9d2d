"""Handler for POST /api/validate-qr: a read-only check that never consumes a scan."""

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
    """Return the verdict for the posted identifier."""
    correlation_id = str(uuid.uuid4())

    try:
        request = ScanRequest.model_validate(parse_body(event))
    except (ValidationError, ValueError) as exc:
        logger.info(
            "Rejected validate request",
            extra={"correlation_id": correlation_id, "error": str(exc)},
        )
        return json_response(400, error_body(BadRequestError("QR code is required")))

    try:
        verdict = _get_context().scans.validate(request.identifier)
    except AppError as exc:
        logger.exception(
            "QR validation failed",
            extra={"correlation_id": correlation_id, "identifier": request.identifier},
        )
        body = error_body(exc, "Failed to validate QR code")
        body["correlation_id"] = correlation_id
        return json_response(exc.status_code, body)

    return json_response(200, {"success": True, **verdict.to_payload()})
