from __future__ import annotations

from typing import Optional

from ...common.numbers import percent
from ..model import DepositCalculationInput, DepositCalculationResult
from ..policies import RefundPolicyCriteria
from .base import RefundCalculator


class TieredRefundCalculator(RefundCalculator):
    """Multi-session program: first tier (highest min_attendance first) that matches wins."""

    def matches(self, policy: RefundPolicyCriteria, *, attendance_rate: int, report_rate: int) -> bool:
        return attendance_rate >= policy.min_attendance

    def describe(self, policy: RefundPolicyCriteria, *, attendance_rate: int, report_rate: int) -> str:
        return f"출석률 {attendance_rate}% ({policy.label})"

    def calculate(self, data: DepositCalculationInput) -> DepositCalculationResult:
        attendance_rate = percent(data.attended_sessions, data.total_sessions)
        report_count = data.approved_reports if data.approved_reports is not None else data.submitted_reports
        report_rate = percent(report_count, data.total_sessions)

        matched: Optional[RefundPolicyCriteria] = None
        refund_rate = 0
        reason = ""
        for policy in sorted(data.policies, key=lambda p: p.min_attendance, reverse=True):
            if self.matches(policy, attendance_rate=attendance_rate, report_rate=report_rate):
                matched = policy
                refund_rate = policy.refund_rate
                reason = self.describe(policy, attendance_rate=attendance_rate, report_rate=report_rate)
                break

        refund_amount = self.amount_for(data.deposit_amount, refund_rate)
        return DepositCalculationResult(
            attendance_rate=attendance_rate,
            report_rate=report_rate,
            refund_rate=refund_rate,
            refund_amount=refund_amount,
            reason=reason,
            eligible=refund_amount > 0,
            ineligible_reason=(
                f"출석률({attendance_rate}%) 또는 독후감 제출률({report_rate}%)이 기준에 미달합니다."
                if refund_amount == 0
                else None
            ),
            matched_policy=matched,
        )


class AttendanceOnlyRefundCalculator(TieredRefundCalculator):
    pass


class AttendanceAndReportRefundCalculator(TieredRefundCalculator):
    def matches(self, policy: RefundPolicyCriteria, *, attendance_rate: int, report_rate: int) -> bool:
        return attendance_rate >= policy.min_attendance and report_rate >= (policy.min_report or 0)

    def describe(self, policy: RefundPolicyCriteria, *, attendance_rate: int, report_rate: int) -> str:
        return f"출석 {attendance_rate}%, 독후감 {report_rate}% ({policy.label})"
