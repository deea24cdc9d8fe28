from __future__ import annotations

from typing import Sequence

from ..common.validators import require_non_negative
from .calculator.base import RefundCalculator
from .calculator.one_time_calculator import OneTimeRefundCalculator
from .calculator.tiered_calculator import AttendanceAndReportRefundCalculator, AttendanceOnlyRefundCalculator
from .model import (
    DepositCalculationInput,
    DepositCalculationResult,
    PerSessionRefund,
    SessionParticipation,
    SessionRefundLine,
)
from .policies import RefundPolicyType

SURVEY_MISSING_REASON = "만족도 조사 미제출"

_CALCULATORS: dict[RefundPolicyType, RefundCalculator] = {
    RefundPolicyType.ONE_TIME: OneTimeRefundCalculator(),
    RefundPolicyType.ATTENDANCE_ONLY: AttendanceOnlyRefundCalculator(),
    RefundPolicyType.ATTENDANCE_AND_REPORT: AttendanceAndReportRefundCalculator(),
}


def calculator_for(policy_type: RefundPolicyType) -> RefundCalculator:
    return _CALCULATORS[RefundPolicyType(policy_type)]


def calculate_refund(data: DepositCalculationInput) -> DepositCalculationResult:
    """Refund amount for one participant under a tiered policy."""
    require_non_negative(data.deposit_amount, "보증금")

    if data.survey_required and not data.survey_submitted:
        return DepositCalculationResult(
            attendance_rate=0,
            report_rate=0,
            refund_rate=0,
            refund_amount=0,
            reason=SURVEY_MISSING_REASON,
            eligible=False,
            ineligible_reason="만족도 조사에 응답하지 않아 보증금이 반환되지 않습니다.",
        )
    return calculator_for(data.policy_type).calculate(data)


def calculate_per_session_refund(
    *,
    deposit_per_session: int,
    sessions: Sequence[SessionParticipation],
    require_report: bool,
    survey_submitted: bool,
    survey_required: bool,
) -> PerSessionRefund:
    """Book-club style refund: each session returns its share when its conditions hold."""
    require_non_negative(deposit_per_session, "회차별 보증금")

    if survey_required and not survey_submitted:
        return PerSessionRefund(
            total_refund=0,
            session_results=[SessionRefundLine(refundable=False, amount=0, reason=SURVEY_MISSING_REASON) for _ in sessions],
        )

    lines = []
    for no, s in enumerate(sessions, start=1):
        if not s.attended:
            lines.append(SessionRefundLine(refundable=False, amount=0, reason=f"{no}회차 불참"))
        elif require_report and not s.report_submitted:
            lines.append(SessionRefundLine(refundable=False, amount=0, reason=f"{no}회차 독후감 미제출"))
        elif require_report and s.report_approved is False:
            lines.append(SessionRefundLine(refundable=False, amount=0, reason=f"{no}회차 독후감 미승인"))
        else:
            lines.append(SessionRefundLine(refundable=True, amount=int(deposit_per_session), reason=f"{no}회차 조건 충족"))

    return PerSessionRefund(total_refund=sum(line.amount for line in lines), session_results=lines)


def refund_status_label(refund_rate: int) -> tuple[str, str]:
    """(label, color) for a refund rate."""
    if refund_rate == 100:
        return "전액 반환", "green"
    if refund_rate >= 80:
        return "대부분 반환", "blue"
    if refund_rate >= 60:
        return "일부 반환", "yellow"
    if refund_rate > 0:
        return "최소 반환", "orange"
    return "미반환", "red"


def format_currency(amount: int) -> str:
    return f"₩{int(amount):,}"
