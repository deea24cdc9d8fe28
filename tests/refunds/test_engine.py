from __future__ import annotations

import pytest

from src.program_attendance.program_attendance.attendance.model import AttendanceSummary
from src.program_attendance.program_attendance.core.enums import EligibilityReason
from src.program_attendance.program_attendance.core.exceptions import ValidationError
from src.program_attendance.program_attendance.refunds.engine import RefundEligibilityEngine
from src.program_attendance.program_attendance.refunds.model import ReviewSummary


@pytest.fixture
def engine() -> RefundEligibilityEngine:
    return RefundEligibilityEngine()


def test_eligible_by_attendance_alone(engine):
    result = engine.evaluate(AttendanceSummary(present=1, late=0, absent=1, total=2), ReviewSummary(submitted=0, total=2))

    assert result.is_eligible is True
    assert result.attendance_rate == 50
    assert result.review_rate == 0
    assert result.attendance_met is True and result.review_met is False
    assert result.reason_code == EligibilityReason.ATTENDANCE_MET


def test_eligible_by_review_alone(engine):
    result = engine.evaluate(AttendanceSummary(present=0, late=0, absent=2, total=2), ReviewSummary(submitted=1, total=2))

    assert result.is_eligible is True
    assert result.reason_code == EligibilityReason.REVIEW_MET


def test_both_met(engine):
    result = engine.evaluate(AttendanceSummary(present=2, late=1, absent=1, total=4), ReviewSummary(submitted=4, total=4))

    assert result.reason_code == EligibilityReason.BOTH_MET
    assert result.attendance_rate == 75


def test_both_at_40_percent_is_not_eligible(engine):
    result = engine.evaluate(AttendanceSummary(present=2, late=0, absent=3, total=5), ReviewSummary(submitted=2, total=5))

    assert result.is_eligible is False
    assert result.reason_code == EligibilityReason.NOT_MET
    assert "40%" in result.reason


def test_late_counts_but_excused_does_not(engine):
    result = engine.evaluate(
        AttendanceSummary(present=0, late=1, absent=2, excused=1, total=4), ReviewSummary(submitted=0, total=4)
    )
    assert result.attendance_rate == 25


def test_zero_sessions_is_safe(engine):
    result = engine.evaluate(AttendanceSummary(), ReviewSummary())

    assert result.attendance_rate == 0
    assert result.review_rate == 0
    assert result.is_eligible is False


def test_rates_round_half_up(engine):
    result = engine.evaluate(AttendanceSummary(present=1, absent=7, total=8), ReviewSummary(submitted=2, total=3))
    assert result.attendance_rate == 13
    assert result.review_rate == 67


def test_refund_amount(engine):
    eligible = engine.evaluate(AttendanceSummary(present=1, total=1), ReviewSummary(total=1))
    not_eligible = engine.evaluate(AttendanceSummary(absent=1, total=1), ReviewSummary(total=1))

    assert engine.refund_amount(50000, eligible) == 50000
    assert engine.refund_amount(50000, not_eligible) == 0
    with pytest.raises(ValidationError):
        engine.refund_amount(-1, eligible)


def test_progress(engine):
    low = engine.evaluate(AttendanceSummary(present=2, absent=3, total=5), ReviewSummary(submitted=1, total=10))
    high = engine.evaluate(AttendanceSummary(present=3, absent=2, total=5), ReviewSummary(total=5))

    assert engine.progress_toward_eligibility(low) == 80
    assert engine.progress_toward_eligibility(high) == 100


def test_guidance_when_eligible(engine):
    result = engine.evaluate(AttendanceSummary(present=1, total=1), ReviewSummary(total=1))
    assert "충족했습니다" in engine.guidance_message(result, 3)


def test_guidance_both_paths(engine):
    result = engine.evaluate(AttendanceSummary(present=1, absent=3, total=4), ReviewSummary(submitted=0, total=4))

    assert engine.guidance_message(result, 4) == "앞으로 3회 더 출석하거나 독후감을 4편 더 제출하면 환급 조건을 충족합니다"


def test_guidance_attendance_path_only(engine):
    result = engine.evaluate(AttendanceSummary(present=1, absent=3, total=4), ReviewSummary(submitted=0, total=4))

    assert engine.guidance_message(result, 2) == "앞으로 2회 더 출석하면 환급 조건을 충족합니다"


def test_guidance_no_path(engine):
    result = engine.evaluate(AttendanceSummary(absent=6, total=6), ReviewSummary(total=6))

    message = engine.guidance_message(result, 2)
    assert "남은 2회차" in message
    assert "도달할 수 없습니다" in message


def test_guidance_without_remaining_sessions(engine):
    result = engine.evaluate(AttendanceSummary(absent=2, total=2), ReviewSummary(total=2))
    assert engine.guidance_message(result, 0) == "남은 회차가 없어 환급 조건을 충족할 수 없습니다"


def test_guidance_rejects_negative_remaining(engine):
    result = engine.evaluate(AttendanceSummary(absent=2, total=2), ReviewSummary(total=2))
    with pytest.raises(ValidationError):
        engine.guidance_message(result, -1)


def test_custom_threshold():
    engine = RefundEligibilityEngine(threshold_pct=80)
    result = engine.evaluate(AttendanceSummary(present=3, absent=1, total=4), ReviewSummary(total=4))

    assert result.is_eligible is False
    assert engine.progress_toward_eligibility(result) == 94
