from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from ..common.datetime_utils import now_local, to_epoch_ms
from ..core.constants import REFRESH_THRESHOLD_SECONDS
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, NotFoundError
from ..programs.repository import SessionRepository
from .codec import CheckInTokenCodec
from .model import IssuedToken, TokenIssuance, TokenValidation
from .repository import TokenIssuanceRepository

SUPERSEDED_TOKEN_MESSAGE = "이전에 발급된 QR 코드입니다. 최신 QR 코드를 스캔해 주세요"


@dataclass(frozen=True)
class TokenStatus:
    has_token: bool
    is_expired: bool
    expires_at: Optional[datetime]
    token: Optional[str]
    remaining: str
    should_refresh: bool

    def to_dict(self) -> dict:
        return {
            "hasToken": self.has_token,
            "isExpired": self.is_expired,
            "expiresAt": self.expires_at.isoformat(timespec="seconds") if self.expires_at else None,
            "token": self.token,
            "remaining": self.remaining,
            "shouldRefresh": self.should_refresh,
        }


class CheckInTokenService:
    """Use case: organizers issue check-in tokens; check-in surfaces verify them.

    Issuing a new token deactivates the previous ones for the same session
    (latest wins), and ``verify`` only honours the active issuance.
    """

    def __init__(
        self,
        codec: CheckInTokenCodec,
        sessions: SessionRepository,
        issuances: TokenIssuanceRepository,
        *,
        base_url: str,
        refresh_threshold_seconds: int = REFRESH_THRESHOLD_SECONDS,
    ):
        self._codec = codec
        self._sessions = sessions
        self._issuances = issuances
        self._base_url = base_url
        self._refresh_threshold_seconds = int(refresh_threshold_seconds)

    def issue(
        self,
        *,
        current_role: Role,
        session_id: str,
        issued_by: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> IssuedToken:
        if current_role != Role.ORGANIZER:
            raise AuthorizationError("진행자만 QR 코드를 발급할 수 있습니다")
        if not self._sessions.get_by_id(session_id):
            raise NotFoundError("세션을 찾을 수 없습니다")

        now = now or now_local()
        valid_from = now.replace(microsecond=(now.microsecond // 1000) * 1000)
        valid_until = valid_from + timedelta(milliseconds=self._codec.validity_window_ms)
        token = self._codec.generate(session_id, to_epoch_ms(valid_from))

        self._issuances.deactivate_for_session(session_id)
        self._issuances.save(
            TokenIssuance(
                session_id=session_id,
                token=token,
                valid_from=valid_from,
                valid_until=valid_until,
                is_active=True,
                created_by=issued_by,
            )
        )

        return IssuedToken(
            token=token,
            check_in_url=self._codec.build_check_in_url(token, self._base_url),
            valid_from=valid_from,
            valid_until=valid_until,
        )

    def verify(self, token: str, *, now: Optional[datetime] = None) -> TokenValidation:
        now = now or now_local()
        validation = self._codec.validate(token, to_epoch_ms(now))
        if not validation.is_valid:
            return validation

        active = self._issuances.get_active(validation.session_id)
        if active is None or active.token != token:
            return TokenValidation(is_valid=False, session_id=None, error=SUPERSEDED_TOKEN_MESSAGE)
        return validation

    def status(self, session_id: str, *, current_role: Role, now: Optional[datetime] = None) -> TokenStatus:
        if current_role != Role.ORGANIZER:
            raise AuthorizationError("진행자만 QR 코드를 조회할 수 있습니다")

        now = now or now_local()
        active = self._issuances.get_active(session_id)
        if active is None:
            return TokenStatus(
                has_token=False,
                is_expired=True,
                expires_at=None,
                token=None,
                remaining=self._codec.format_remaining("", 0),
                should_refresh=True,
            )

        now_value = to_epoch_ms(now)
        is_expired = not self._codec.validate(active.token, now_value).is_valid
        return TokenStatus(
            has_token=True,
            is_expired=is_expired,
            expires_at=active.valid_until,
            token=None if is_expired else active.token,
            remaining=self._codec.format_remaining(active.token, now_value),
            should_refresh=self._codec.should_refresh(active.token, self._refresh_threshold_seconds, now_value),
        )

    def check_in_url(self, token: str) -> str:
        return self._codec.build_check_in_url(token, self._base_url)
