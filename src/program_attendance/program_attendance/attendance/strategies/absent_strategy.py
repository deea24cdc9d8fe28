from __future__ import annotations

from datetime import datetime

from ...core.enums import AttendanceOutcome
from ..window import CheckInWindow
from .base import CheckInStrategy, OutcomeDecision


class AbsentStrategy(CheckInStrategy):
    """Checked in past the absence threshold."""

    def decide(self, *, session_start: datetime, checked_at: datetime, window: CheckInWindow) -> OutcomeDecision:
        return OutcomeDecision(outcome=AttendanceOutcome.ABSENT, message="출석 인정 시간이 지나 결석 처리됩니다")
