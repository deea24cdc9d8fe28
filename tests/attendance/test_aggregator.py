from __future__ import annotations

import pytest

from src.program_attendance.program_attendance.attendance.aggregator import summarize
from src.program_attendance.program_attendance.attendance.model import AttendanceRecord
from src.program_attendance.program_attendance.core.enums import AttendanceOutcome, CheckMethod
from src.program_attendance.program_attendance.core.exceptions import ValidationError

P, L, A, E = AttendanceOutcome.PRESENT, AttendanceOutcome.LATE, AttendanceOutcome.ABSENT, AttendanceOutcome.EXCUSED


def test_mixed_outcomes():
    stats = summarize([P, P, L, A, E])

    assert (stats.present, stats.late, stats.absent, stats.excused, stats.total) == (2, 1, 1, 1, 5)
    assert stats.attendance_rate == 80


def test_empty_is_all_zero():
    stats = summarize([])
    assert stats.total == 0
    assert stats.attendance_rate == 0


def test_all_present_is_100():
    assert summarize([P, P]).attendance_rate == 100


def test_accepts_records():
    records = [
        AttendanceRecord(participant_id="p1", session_id="s1", outcome=L, checked_at=None, method=CheckMethod.TOKEN),
        AttendanceRecord(participant_id="p1", session_id="s2", outcome=A, checked_at=None, method=CheckMethod.MANUAL),
    ]
    stats = summarize(records)
    assert stats.late == 1 and stats.absent == 1


def test_missing_sessions_count_as_absent():
    stats = summarize([P], total_sessions=3)

    assert stats.absent == 2
    assert stats.total == 3
    assert stats.attendance_rate == 33


def test_rate_rounds_half_up():
    # 1/8 = 12.5%
    assert summarize([P], total_sessions=8).attendance_rate == 13


def test_more_records_than_sessions_is_rejected():
    with pytest.raises(ValidationError):
        summarize([P, P], total_sessions=1)
