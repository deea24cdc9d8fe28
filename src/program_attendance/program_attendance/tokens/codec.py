from __future__ import annotations

import base64
import binascii
import hashlib
import hmac
import string
from typing import Optional, Union
from urllib.parse import quote

from ..common.datetime_utils import now_ms
from ..common.validators import require_non_negative
from ..core.constants import (
    EXPIRED_LABEL,
    MAX_TIMESTAMP_DIGITS,
    SIGNATURE_LENGTH,
    TOKEN_DELIMITER,
    VALIDITY_WINDOW_MS,
)
from ..core.exceptions import ValidationError
from .model import CheckInToken, TokenValidation

INVALID_TOKEN_MESSAGE = "유효하지 않은 QR 코드입니다"
EXPIRED_TOKEN_MESSAGE = "QR 코드가 만료되었습니다. 새로운 QR 코드를 요청해 주세요"

_HEX = frozenset(string.hexdigits.lower())


class CheckInTokenCodec:
    """Signs and verifies self-contained check-in tokens.

    Token layout, before unpadded URL-safe base64:
    ``<session_id>:<issued_at_ms>:<signature>`` where the signature is an
    HMAC-SHA256 over ``<session_id>:<issued_at_ms>`` truncated to
    ``SIGNATURE_LENGTH`` hex characters.

    Nothing here raises for attacker-controlled input: ``parse`` returns
    ``None`` and ``validate`` returns ``is_valid=False``.
    """

    def __init__(self, secret: Union[str, bytes], *, validity_window_ms: int = VALIDITY_WINDOW_MS):
        if not secret:
            raise ValidationError("서명 키가 설정되지 않았습니다")
        self._secret = secret.encode("utf-8") if isinstance(secret, str) else bytes(secret)
        if int(validity_window_ms) <= 0:
            raise ValidationError("QR 유효 시간은 0보다 커야 합니다")
        self._validity_window_ms = int(validity_window_ms)

    @property
    def validity_window_ms(self) -> int:
        return self._validity_window_ms

    def _sign(self, session_id: str, issued_at_ms: int) -> str:
        message = f"{session_id}{TOKEN_DELIMITER}{issued_at_ms}".encode("utf-8")
        return hmac.new(self._secret, message, hashlib.sha256).hexdigest()[:SIGNATURE_LENGTH]

    def generate(self, session_id: str, issued_at_ms: Optional[int] = None) -> str:
        if not session_id or not isinstance(session_id, str):
            raise ValidationError("세션 ID가 필요합니다")
        if TOKEN_DELIMITER in session_id:
            raise ValidationError(f"세션 ID에 '{TOKEN_DELIMITER}' 문자를 사용할 수 없습니다")
        if issued_at_ms is None:
            issued_at_ms = now_ms()
        if isinstance(issued_at_ms, bool) or not isinstance(issued_at_ms, int):
            raise ValidationError("발급 시각은 밀리초 단위 정수여야 합니다")
        require_non_negative(issued_at_ms, "발급 시각")

        signature = self._sign(session_id, issued_at_ms)
        raw = TOKEN_DELIMITER.join((session_id, str(issued_at_ms), signature))
        return base64.urlsafe_b64encode(raw.encode("utf-8")).decode("ascii").rstrip("=")

    def parse(self, token: str) -> Optional[CheckInToken]:
        if not token or not isinstance(token, str):
            return None
        try:
            padded = token + "=" * (-len(token) % 4)
            decoded = base64.b64decode(padded, altchars=b"-_", validate=True)
            raw = decoded.decode("utf-8")
        except (binascii.Error, ValueError):
            return None
        # one canonical spelling per token: no "+" or "/", no stray padding bits
        if base64.urlsafe_b64encode(decoded).decode("ascii").rstrip("=") != token:
            return None

        parts = raw.split(TOKEN_DELIMITER)
        if len(parts) != 3:
            return None
        session_id, issued_at, signature = parts

        if not session_id:
            return None
        if len(issued_at) > MAX_TIMESTAMP_DIGITS or not (issued_at.isascii() and issued_at.isdigit()):
            return None
        if len(signature) != SIGNATURE_LENGTH or not set(signature) <= _HEX:
            return None

        return CheckInToken(session_id=session_id, issued_at_ms=int(issued_at), signature=signature)

    def validate(self, token: str, now_ms_value: Optional[int] = None) -> TokenValidation:
        now_value = now_ms() if now_ms_value is None else int(now_ms_value)

        parsed = self.parse(token)
        if parsed is None:
            return TokenValidation(is_valid=False, session_id=None, error=INVALID_TOKEN_MESSAGE)

        expected = self._sign(parsed.session_id, parsed.issued_at_ms)
        signature_ok = hmac.compare_digest(expected, parsed.signature)
        # expiry is evaluated for every parsed token, signed or not
        expired = now_value - parsed.issued_at_ms >= self._validity_window_ms

        if not signature_ok:
            return TokenValidation(is_valid=False, session_id=None, error=INVALID_TOKEN_MESSAGE)
        if expired:
            return TokenValidation(is_valid=False, session_id=None, error=EXPIRED_TOKEN_MESSAGE)
        return TokenValidation(is_valid=True, session_id=parsed.session_id)

    def remaining_seconds(self, token: str, now_ms_value: Optional[int] = None) -> int:
        now_value = now_ms() if now_ms_value is None else int(now_ms_value)
        if not self.validate(token, now_value).is_valid:
            return 0
        parsed = self.parse(token)
        remaining_ms = parsed.issued_at_ms + self._validity_window_ms - now_value
        # issued_at may sit ahead of the local clock
        remaining_ms = min(remaining_ms, self._validity_window_ms)
        return max(remaining_ms // 1000, 0)

    def format_remaining(self, token: str, now_ms_value: Optional[int] = None) -> str:
        seconds = self.remaining_seconds(token, now_ms_value)
        if seconds <= 0:
            return EXPIRED_LABEL
        return f"{seconds // 60:02d}:{seconds % 60:02d}"

    def should_refresh(self, token: str, threshold_seconds: int, now_ms_value: Optional[int] = None) -> bool:
        require_non_negative(threshold_seconds, "갱신 기준 시간")
        return self.remaining_seconds(token, now_ms_value) <= int(threshold_seconds)

    @staticmethod
    def build_check_in_url(token: str, base_url: str) -> str:
        return f"{base_url.rstrip('/')}/attendance/check?token={quote(token, safe='')}"
