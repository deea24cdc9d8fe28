from __future__ import annotations

from typing import Optional, Protocol

from .model import TokenIssuance


class TokenIssuanceRepository(Protocol):
    def save(self, issuance: TokenIssuance) -> None:
        raise NotImplementedError

    def deactivate_for_session(self, session_id: str) -> int:
        """Drop the session's active issuance; returns how many were dropped."""

        raise NotImplementedError

    def get_active(self, session_id: str) -> Optional[TokenIssuance]:
        raise NotImplementedError
