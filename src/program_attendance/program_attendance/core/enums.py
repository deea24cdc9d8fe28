from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Program role used for authorization."""

    ORGANIZER = "organizer"
    PARTICIPANT = "participant"


class AttendanceOutcome(str, Enum):
    """Attendance classification for one participant in one session."""

    PRESENT = "PRESENT"
    LATE = "LATE"
    ABSENT = "ABSENT"
    EXCUSED = "EXCUSED"


class CheckMethod(str, Enum):
    TOKEN = "TOKEN"
    MANUAL = "MANUAL"


class EligibilityReason(str, Enum):
    """Which side of the deposit rule was satisfied."""

    BOTH_MET = "BOTH_MET"
    ATTENDANCE_MET = "ATTENDANCE_MET"
    REVIEW_MET = "REVIEW_MET"
    NOT_MET = "NOT_MET"
