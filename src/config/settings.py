"""
Environment-driven configuration for the scanner Lambdas.

Defaults match the event ticket sheet layout so a fresh deployment only
needs the sheet id and service-account credentials.
"""

from dataclasses import dataclass
import os
from typing import Optional

from utils.error_handling import ConfigurationError

SCANS_USED_COLUMN = "Scans Used"
DEFAULT_TICKETS_COLUMN = "Enter total number of tickets needed (Kids above 8 - ticket required)"

HIGHLIGHT_ALWAYS = "always"
HIGHLIGHT_EXHAUSTED = "exhausted"


def _env_bool(name: str, default: bool) -> bool:
    return os.environ.get(name, str(default)).strip().lower() in ("1", "true", "yes")


@dataclass
class Settings:
    """Application settings with development-friendly defaults."""

    environment: str = "dev"
    ledger_backend: str = "sheets"  # "sheets" or "memory"

    # Google Sheets
    sheet_id: Optional[str] = None
    sheet_name: str = "Sheet1"
    sheet_gid: int = 0
    service_account_email: Optional[str] = None
    private_key: Optional[str] = None
    credentials_secret_arn: Optional[str] = None

    # Header binding
    number_column: str = "Number"
    image_column: str = "Image"
    tickets_column: str = DEFAULT_TICKETS_COLUMN
    name_column: str = "name"
    scans_used_column: str = SCANS_USED_COLUMN

    # Redemption behaviour
    highlight_policy: str = HIGHLIGHT_ALWAYS
    highlight_columns: int = 20
    strict_redemption: bool = False
    max_conflict_retries: int = 3

    @classmethod
    def from_environment(cls) -> "Settings":
        """Load settings from environment variables."""
        private_key = os.environ.get("GOOGLE_PRIVATE_KEY")
        if private_key:
            # Keys pasted into dashboards arrive with escaped newlines.
            private_key = private_key.replace("\\n", "\n")

        try:
            sheet_gid = int(os.environ.get("SHEET_GID", "0"))
        except ValueError as exc:
            raise ConfigurationError("SHEET_GID must be an integer") from exc

        highlight_policy = os.environ.get("HIGHLIGHT_POLICY", HIGHLIGHT_ALWAYS).lower()
        if highlight_policy not in (HIGHLIGHT_ALWAYS, HIGHLIGHT_EXHAUSTED):
            raise ConfigurationError(
                f"HIGHLIGHT_POLICY must be '{HIGHLIGHT_ALWAYS}' or '{HIGHLIGHT_EXHAUSTED}'"
            )

        return cls(
            environment=os.environ.get("ENVIRONMENT", "dev"),
            ledger_backend=os.environ.get("LEDGER_BACKEND", "sheets").lower(),
            sheet_id=os.environ.get("SHEET_ID") or None,
            sheet_name=os.environ.get("SHEET_NAME", "Sheet1"),
            sheet_gid=sheet_gid,
            service_account_email=os.environ.get("GOOGLE_SERVICE_ACCOUNT_EMAIL") or None,
            private_key=private_key or None,
            credentials_secret_arn=os.environ.get("GOOGLE_CREDENTIALS_SECRET_ARN") or None,
            number_column=os.environ.get("NUMBER_COLUMN", "Number"),
            image_column=os.environ.get("IMAGE_COLUMN", "Image"),
            tickets_column=os.environ.get("TICKETS_COLUMN", DEFAULT_TICKETS_COLUMN),
            name_column=os.environ.get("NAME_COLUMN", "name"),
            highlight_policy=highlight_policy,
            strict_redemption=_env_bool("STRICT_REDEMPTION", False),
        )

    def require_credentials(self) -> None:
        """
        Fail fast before any ledger call when the Sheets backend is unusable.

        A Secrets Manager ARN stands in for the inline email/key pair.
        """
        if self.ledger_backend == "memory":
            return
        if self.ledger_backend != "sheets":
            raise ConfigurationError(f"Unknown LEDGER_BACKEND '{self.ledger_backend}'")
        if not self.sheet_id:
            raise ConfigurationError("SHEET_ID environment variable is required")
        if self.credentials_secret_arn:
            return
        if not self.service_account_email:
            raise ConfigurationError(
                "GOOGLE_SERVICE_ACCOUNT_EMAIL environment variable is required"
            )
        if not self.private_key:
            raise ConfigurationError("GOOGLE_PRIVATE_KEY environment variable is required")
