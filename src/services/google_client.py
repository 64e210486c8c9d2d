"""
Google Sheets client factory.

Builds a service-account authorised Sheets v4 client from settings. The key
can come from environment variables or, for Lambda deployments that keep
secrets out of the function config, from an AWS Secrets Manager secret
holding the service-account JSON.
"""

from __future__ import annotations

import json
from typing import Any, Dict

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from google.oauth2 import service_account
from googleapiclient.discovery import build

from config.settings import Settings
from utils.error_handling import ConfigurationError
from utils.logging_config import get_logger

logger = get_logger(__name__)

SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]
TOKEN_URI = "https://oauth2.googleapis.com/token"


def _secret_to_service_account_info(secret_arn: str) -> Dict[str, Any]:
    """Load the service-account JSON stored in Secrets Manager."""
    try:
        sm = boto3.client("secretsmanager")
        secret_value = sm.get_secret_value(SecretId=secret_arn)["SecretString"]
        info = json.loads(secret_value)
    except (BotoCoreError, ClientError, KeyError, ValueError) as exc:
        logger.error("Failed to load Google credentials secret", extra={"error": str(exc)})
        raise ConfigurationError(f"Could not read credentials secret: {exc}") from exc

    if not (info.get("client_email") and info.get("private_key")):
        raise ConfigurationError("Credentials secret must contain client_email and private_key")
    info.setdefault("token_uri", TOKEN_URI)
    return info


def service_account_info(settings: Settings) -> Dict[str, Any]:
    """Resolve the service-account info dict from settings."""
    settings.require_credentials()
    if settings.credentials_secret_arn:
        return _secret_to_service_account_info(settings.credentials_secret_arn)
    return {
        "type": "service_account",
        "client_email": settings.service_account_email,
        "private_key": settings.private_key,
        "token_uri": TOKEN_URI,
    }


def build_sheets_service(settings: Settings):
    """Return a discovery-built Sheets v4 service; no network call is made here."""
    info = service_account_info(settings)
    try:
        creds = service_account.Credentials.from_service_account_info(info, scopes=SCOPES)
    except ValueError as exc:
        raise ConfigurationError(f"Invalid Google service-account key: {exc}") from exc

    logger.info(
        "Sheets client created",
        extra={"service_account": info["client_email"], "sheet_id": settings.sheet_id},
    )
    return build("sheets", "v4", credentials=creds, cache_discovery=False)
