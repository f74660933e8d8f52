from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .fingerprint import FINGERPRINT_RE


DEFAULT_SUBMISSION_KIND = "form-based"


def utc_timestamp() -> str:
    """ISO-8601 with millisecond precision and a trailing Z, e.g. 2024-01-01T10:00:00.000Z"""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class DetectionEvent(BaseModel):
    """The only artifact that leaves the page. Carries a fingerprint, never the password."""

    model_config = ConfigDict(frozen=True)

    identity: str
    fingerprint: str = Field(..., pattern=FINGERPRINT_RE.pattern)
    timestamp: str = Field(default_factory=utc_timestamp)
    submission_kind: str = DEFAULT_SUBMISSION_KIND

    def to_wire(self) -> Dict[str, Any]:
        return {
            "email": self.identity,
            "passwordHash": self.fingerprint,
            "timestamp": self.timestamp,
            "loginType": self.submission_kind,
        }


# -------------------- Collection endpoint schemas --------------------
class EventIn(BaseModel):
    email: str = Field(..., min_length=1)
    passwordHash: str = Field(..., min_length=1)
    timestamp: Optional[str] = None
    loginType: Optional[str] = None

    model_config = ConfigDict(extra="ignore")

    @field_validator("passwordHash")
    @classmethod
    def _hex_digest(cls, v: str) -> str:
        if not FINGERPRINT_RE.match(v):
            raise ValueError("passwordHash must be 64 lowercase hex characters")
        return v


class EventsOut(BaseModel):
    events: List[Dict[str, Any]]
    count: int
