"""
Pydantic models for relay requests and outbound webhook payloads.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ProcessingStatus(str, Enum):
    """Processing status of a source record."""

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


def utc_timestamp() -> str:
    """Current UTC time in ISO-8601 with millisecond precision and a Z suffix."""
    return (
        datetime.now(timezone.utc)
        .isoformat(timespec="milliseconds")
        .replace("+00:00", "Z")
    )


class ProcessDocumentRequest(BaseModel):
    """Incoming document-processing request."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    source_id: str | None = Field(default=None, alias="sourceId")
    file_path: str | None = Field(default=None, alias="filePath")
    source_type: str | None = Field(default=None, alias="sourceType")

    @field_validator("source_id", "file_path", "source_type", mode="before")
    @classmethod
    def coerce_scalar(cls, v):
        """Numbers are accepted as identifiers; zero counts as absent."""
        if isinstance(v, bool):
            raise ValueError("must be a string")
        if isinstance(v, (int, float)):
            return str(v) if v else None
        return v

    def missing_fields(self) -> list[str]:
        """Request field names that are absent or empty."""
        fields = {
            "sourceId": self.source_id,
            "filePath": self.file_path,
            "sourceType": self.source_type,
        }
        return [name for name, value in fields.items() if not value]

    @classmethod
    def from_request_data(cls, data: dict[str, Any]) -> "ProcessDocumentRequest":
        return cls.model_validate(data)


class DocumentWebhookPayload(BaseModel):
    """Body POSTed to the document-processing webhook."""

    source_id: str
    file_url: str
    file_path: str
    source_type: str
    callback_url: str


class ChatMessageRequest(BaseModel):
    """
    Incoming chat message. Fields are passed through as received,
    including when absent.
    """

    model_config = ConfigDict(extra="ignore")

    session_id: Any = None
    message: Any = None
    user_id: Any = None


class ChatWebhookPayload(BaseModel):
    """Body POSTed to the chat webhook."""

    session_id: Any = None
    message: Any = None
    user_id: Any = None
    timestamp: str = Field(default_factory=utc_timestamp)

    @classmethod
    def from_request(cls, request: ChatMessageRequest) -> "ChatWebhookPayload":
        return cls(
            session_id=request.session_id,
            message=request.message,
            user_id=request.user_id,
        )


class RelayResponse(BaseModel):
    """What a relay hands back to the HTTP layer."""

    status_code: int = 200
    content: dict[str, Any]
