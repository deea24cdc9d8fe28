from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class CheckInToken:
    """Decoded check-in credential (never persisted by the codec)."""

    session_id: str
    issued_at_ms: int
    signature: str


@dataclass(frozen=True)
class TokenValidation:
    is_valid: bool
    session_id: Optional[str]
    error: Optional[str] = None


@dataclass(frozen=True)
class TokenIssuance:
    """Issuance record kept by the caller so only the newest token is honoured."""

    session_id: str
    token: str
    valid_from: datetime
    valid_until: datetime
    is_active: bool = True
    created_by: Optional[str] = None


@dataclass(frozen=True)
class IssuedToken:
    token: str
    check_in_url: str
    valid_from: datetime
    valid_until: datetime

    def to_dict(self) -> dict:
        return {
            "token": self.token,
            "checkInUrl": self.check_in_url,
            "validFrom": self.valid_from.isoformat(timespec="seconds"),
            "validUntil": self.valid_until.isoformat(timespec="seconds"),
        }
