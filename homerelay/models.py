"""Pydantic models for change events and outbound notifications."""

import copy
from datetime import datetime, timezone
from typing import Any, Literal

from pydantic import BaseModel, Field

from homerelay.config import MESSAGE_FIELD


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ChangeEvent(BaseModel):
    """Snapshot of the watched record after a write. Read-only to the relay."""

    path: str
    fields: dict[str, Any] = Field(default_factory=dict)
    message_field: str = MESSAGE_FIELD
    received_at: datetime = Field(default_factory=_utcnow)

    model_config = {"frozen": True}

    @property
    def message(self) -> str | None:
        """The relayed field, or None when absent or not a string."""
        value = self.fields.get(self.message_field)
        return value if isinstance(value, str) else None

    @classmethod
    def from_record(cls, path: str, record: Any, message_field: str = MESSAGE_FIELD) -> "ChangeEvent":
        """Build a snapshot from a raw record value (a dict, or a scalar/None for a non-object node)."""
        fields = copy.deepcopy(record) if isinstance(record, dict) else {}
        return cls(path=path, fields=fields, message_field=message_field)


class NotificationRequest(BaseModel):
    """A single outbound message, form-encoded as one `text` field."""

    text: str = Field(..., min_length=1)

    def form(self) -> dict[str, str]:
        return {"text": self.text}


class NotificationResult(BaseModel):
    """Outcome of one Notifier.send call."""

    status: Literal["delivered", "failed"]
    text: str
    status_code: int | None = None
    body: str | None = None
    error: str | None = None
    elapsed_ms: float = 0.0

    @property
    def ok(self) -> bool:
        return self.status == "delivered"


class StoreError(BaseModel):
    """A read/authorization failure reported by the realtime store."""

    code: str
    path: str
    detail: str | None = None
