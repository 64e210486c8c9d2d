"""API Gateway proxy response helpers with CORS headers."""

import base64
import json
import os
from typing import Any, Dict, Optional


def cors_headers() -> Dict[str, str]:
    """Headers letting the scanner front end call us from its own origin."""
    return {
        "Access-Control-Allow-Origin": os.environ.get("FRONTEND_URL", "*"),
        "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
        "Access-Control-Allow-Headers": "Content-Type",
    }


def json_response(status: int, body: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Format a JSON API Gateway HTTP API response."""
    return {
        "statusCode": status,
        "headers": {"Content-Type": "application/json", **cors_headers()},
        "body": json.dumps(body) if body is not None else "",
    }


def parse_body(event: Dict[str, Any]) -> Dict[str, Any]:
    """Decode the JSON body; an absent body reads as an empty object."""
    raw = event.get("body")
    if not raw:
        return {}
    if event.get("isBase64Encoded"):
        raw = base64.b64decode(raw).decode("utf-8")
    payload = json.loads(raw)
    if not isinstance(payload, dict):
        raise ValueError("request body must be a JSON object")
    return payload
