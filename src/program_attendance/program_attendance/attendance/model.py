from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.numbers import percent
from ..core.enums import AttendanceOutcome, CheckMethod


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one participant's attendance in one session.

    At most one record exists per (participant_id, session_id); a repeated
    check-in overwrites it.
    """

    participant_id: str
    session_id: str
    outcome: AttendanceOutcome
    checked_at: Optional[datetime]
    method: CheckMethod
    note: Optional[str] = None


@dataclass(frozen=True)
class AttendanceSummary:
    """Derived per-participant counts across one program's sessions."""

    present: int = 0
    late: int = 0
    absent: int = 0
    total: int = 0
    excused: int = 0

    @property
    def attendance_rate(self) -> int:
        return percent(self.present + self.late + self.excused, self.total)

    def to_dict(self) -> dict:
        return {
            "present": self.present,
            "late": self.late,
            "absent": self.absent,
            "excused": self.excused,
            "total": self.total,
            "attendanceRate": self.attendance_rate,
        }


@dataclass(frozen=True)
class CheckInResult:
    success: bool
    message: str
    outcome: AttendanceOutcome
    late_minutes: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "message": self.message,
            "status": self.outcome.value,
            "lateMinutes": self.late_minutes,
        }
