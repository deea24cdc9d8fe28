from __future__ import annotations

from datetime import datetime

from ...core.enums import AttendanceOutcome
from ..window import CheckInWindow
from .base import CheckInStrategy, OutcomeDecision


class PresentStrategy(CheckInStrategy):
    """On-time (or early) check-in."""

    def decide(self, *, session_start: datetime, checked_at: datetime, window: CheckInWindow) -> OutcomeDecision:
        return OutcomeDecision(outcome=AttendanceOutcome.PRESENT, message="출석이 완료되었습니다!")
