from datetime import datetime, timedelta

from src.program_attendance.program_attendance.attendance.factory import CheckInStrategyFactory
from src.program_attendance.program_attendance.attendance.strategies.absent_strategy import AbsentStrategy
from src.program_attendance.program_attendance.attendance.strategies.late_strategy import LateStrategy
from src.program_attendance.program_attendance.attendance.strategies.present_strategy import PresentStrategy
from src.program_attendance.program_attendance.attendance.window import CheckInWindow
from src.program_attendance.program_attendance.core.enums import AttendanceOutcome

START = datetime(2026, 2, 3, 14, 0, 0)


def test_factory_checkin_on_time():
    window = CheckInWindow()
    strategy = CheckInStrategyFactory().for_checkin(session_start=START, checked_at=START + timedelta(minutes=10), window=window)

    assert isinstance(strategy, PresentStrategy)


def test_factory_checkin_late_reports_minutes():
    window = CheckInWindow()
    checked_at = START + timedelta(minutes=12)
    strategy = CheckInStrategyFactory().for_checkin(session_start=START, checked_at=checked_at, window=window)

    assert isinstance(strategy, LateStrategy)
    decision = strategy.decide(session_start=START, checked_at=checked_at, window=window)
    assert decision.outcome == AttendanceOutcome.LATE
    assert decision.late_minutes == 12
    assert "12분 지각" in decision.message


def test_factory_checkin_absent():
    window = CheckInWindow()
    strategy = CheckInStrategyFactory().for_checkin(session_start=START, checked_at=START + timedelta(minutes=16), window=window)

    assert isinstance(strategy, AbsentStrategy)
    assert "결석" in strategy.decide(session_start=START, checked_at=START, window=window).message
