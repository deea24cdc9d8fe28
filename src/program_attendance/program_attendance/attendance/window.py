from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from ..core.constants import (
    ABSENT_THRESHOLD_MIN,
    ADMISSIBLE_BEFORE_MIN,
    ADMISSIBLE_DEFAULT_DURATION_MIN,
    LATE_THRESHOLD_MIN,
)
from ..core.enums import AttendanceOutcome
from ..core.exceptions import ValidationError

_MINUTE = timedelta(minutes=1)


@dataclass(frozen=True)
class CheckInWindow:
    """Timing rules for one session's check-in.

    Two separate questions:
    - classification: how late was an accepted check-in (PRESENT/LATE/ABSENT);
    - admissibility: may a check-in be evaluated at all right now.

    The lateness thresholds are unrelated to the token validity window even
    though both default to 15 minutes.
    """

    late_threshold_min: int = LATE_THRESHOLD_MIN
    absent_threshold_min: int = ABSENT_THRESHOLD_MIN
    admissible_before_min: int = ADMISSIBLE_BEFORE_MIN
    admissible_default_duration_min: int = ADMISSIBLE_DEFAULT_DURATION_MIN

    def __post_init__(self) -> None:
        for name in (
            "late_threshold_min",
            "absent_threshold_min",
            "admissible_before_min",
            "admissible_default_duration_min",
        ):
            if int(getattr(self, name)) < 0:
                raise ValidationError(f"{name} 값은 0 이상이어야 합니다")
        if self.late_threshold_min > self.absent_threshold_min:
            raise ValidationError("지각 기준은 결석 기준보다 클 수 없습니다")

    def late_minutes(self, session_start: datetime, checked_at: datetime) -> int:
        """Signed whole minutes between start and check-in (negative when early)."""
        return (checked_at - session_start) // _MINUTE

    def classify(self, session_start: datetime, checked_at: datetime) -> AttendanceOutcome:
        delta = self.late_minutes(session_start, checked_at)
        if delta <= self.late_threshold_min:
            return AttendanceOutcome.PRESENT
        if delta <= self.absent_threshold_min:
            return AttendanceOutcome.LATE
        return AttendanceOutcome.ABSENT

    def admissible_range(self, session_start: datetime, session_end: Optional[datetime]) -> tuple[datetime, datetime]:
        earliest = session_start - timedelta(minutes=self.admissible_before_min)
        latest = session_end or session_start + timedelta(minutes=self.admissible_default_duration_min)
        return earliest, latest

    def is_admissible(self, session_start: datetime, session_end: Optional[datetime], now: datetime) -> bool:
        earliest, latest = self.admissible_range(session_start, session_end)
        return earliest <= now <= latest

    def remaining_admissible_seconds(
        self, session_start: datetime, session_end: Optional[datetime], now: datetime
    ) -> int:
        _, latest = self.admissible_range(session_start, session_end)
        return max(int((latest - now).total_seconds()), 0)
