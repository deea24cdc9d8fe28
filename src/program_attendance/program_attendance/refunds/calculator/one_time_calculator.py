from __future__ import annotations

from ..model import DepositCalculationInput, DepositCalculationResult
from .base import RefundCalculator


class OneTimeRefundCalculator(RefundCalculator):
    """Single-session program: attended means a full refund, otherwise nothing."""

    def calculate(self, data: DepositCalculationInput) -> DepositCalculationResult:
        if data.attended:
            return DepositCalculationResult(
                attendance_rate=100,
                report_rate=0,
                refund_rate=100,
                refund_amount=int(data.deposit_amount),
                reason="참석 완료",
                eligible=True,
                matched_policy=data.policies[0] if data.policies else None,
            )
        return DepositCalculationResult(
            attendance_rate=0,
            report_rate=0,
            refund_rate=0,
            refund_amount=0,
            reason="불참",
            eligible=False,
            ineligible_reason="프로그램에 불참하여 보증금이 반환되지 않습니다.",
            matched_policy=data.policies[1] if len(data.policies) > 1 else None,
        )
