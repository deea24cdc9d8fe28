from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from ..core.enums import AttendanceOutcome
from .strategies.absent_strategy import AbsentStrategy
from .strategies.base import CheckInStrategy
from .strategies.late_strategy import LateStrategy
from .strategies.present_strategy import PresentStrategy
from .window import CheckInWindow


@dataclass
class CheckInStrategyFactory:
    """Factory Pattern: choose the strategy from the window's classification."""

    def for_checkin(self, *, session_start: datetime, checked_at: datetime, window: CheckInWindow) -> CheckInStrategy:
        outcome = window.classify(session_start, checked_at)
        if outcome == AttendanceOutcome.PRESENT:
            return PresentStrategy()
        if outcome == AttendanceOutcome.LATE:
            return LateStrategy()
        return AbsentStrategy()
