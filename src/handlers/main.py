"""
Single entrypoint Lambda that routes HTTP API requests to thin handler modules.

One function keeps the Sheets client warm across routes; each route still
lives in its own module.
"""

from typing import Callable, Dict, Tuple

from . import health_check, initialize, ledger_data, manual_update, process_scan, validate_qr
from utils.responses import json_response


def lambda_handler(event, context):
    """
    Entry point invoked by API Gateway HTTP API.

    The event contains the HTTP method and path; we route it to the correct
    handler while keeping CORS preflight handling centralized.
    """
    method = event.get("requestContext", {}).get("http", {}).get("method", "")
    path = event.get("requestContext", {}).get("http", {}).get("path", "")
    route_key = f"{method.upper()} {path.rstrip('/') or '/'}"

    if method.upper() == "OPTIONS":
        return json_response(200)

    route_table: Tuple[Tuple[str, Callable], ...] = (
        ("GET /api/health", health_check.lambda_handler),
        ("POST /api/initialize", initialize.lambda_handler),
        ("GET /api/sheet-data", ledger_data.lambda_handler),
        ("POST /api/validate-qr", validate_qr.lambda_handler),
        ("POST /api/process-scan", process_scan.lambda_handler),
        ("POST /api/update-scan-count", manual_update.scan_count_handler),
        ("POST /api/highlight-row", manual_update.highlight_handler),
    )

    for key, handler in route_table:
        if route_key == key:
            return handler(event, context)

    body: Dict = {"success": False, "error": "Endpoint not found", "route": route_key}
    return json_response(404, body)
