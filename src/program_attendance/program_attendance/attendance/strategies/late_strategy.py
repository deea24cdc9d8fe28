from __future__ import annotations

from datetime import datetime

from ...core.enums import AttendanceOutcome
from ..window import CheckInWindow
from .base import CheckInStrategy, OutcomeDecision


class LateStrategy(CheckInStrategy):
    """Late check-in; the delay is kept for display and audit."""

    def decide(self, *, session_start: datetime, checked_at: datetime, window: CheckInWindow) -> OutcomeDecision:
        minutes = window.late_minutes(session_start, checked_at)
        return OutcomeDecision(
            outcome=AttendanceOutcome.LATE,
            message=f"지각 처리되었습니다 ({minutes}분 지각)",
            late_minutes=minutes,
        )
