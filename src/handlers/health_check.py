"""Lightweight health check handler."""

import os
from datetime import datetime, timezone

from models.response import HealthResponse
from utils.responses import json_response


def lambda_handler(event, context):
    """Return a simple 200 response to verify the scanner API is alive."""
    health = HealthResponse(
        message="QR Scanner API is running",
        timestamp=datetime.now(timezone.utc).isoformat(),
        environment=os.environ.get("ENVIRONMENT", "dev"),
    )
    return json_response(200, health.model_dump())
