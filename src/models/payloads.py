"""Inbound request payloads for the scanner endpoints."""

from pydantic import AliasChoices, BaseModel, Field, field_validator


class ScanRequest(BaseModel):
    """Body of validate-qr and process-scan; older clients send ``qrCode``."""

    identifier: str = Field(validation_alias=AliasChoices("identifier", "qrCode"))

    @field_validator("identifier", mode="before")
    @classmethod
    def validate_identifier(cls, value):
        """Decoded payloads often carry a trailing newline; numbers arrive unquoted."""
        if isinstance(value, bool) or value is None:
            raise ValueError("identifier is required")
        cleaned = str(value).strip()
        if not cleaned:
            raise ValueError("identifier is required")
        return cleaned


class ScanCountUpdate(BaseModel):
    """Manual override of a row's scan count."""

    position: int = Field(ge=2, validation_alias=AliasChoices("position", "rowIndex"))
    scan_count: int = Field(ge=0, validation_alias=AliasChoices("scanCount", "scan_count"))


class HighlightRequest(BaseModel):
    """Manual highlight of a row."""

    position: int = Field(ge=2, validation_alias=AliasChoices("position", "rowIndex"))
