from __future__ import annotations

from typing import Optional

from ..attendance.model import AttendanceSummary
from ..common.numbers import percent, round_half_up_div
from ..common.validators import require_non_negative
from ..core.constants import ELIGIBILITY_THRESHOLD_PCT
from ..core.enums import EligibilityReason
from ..core.exceptions import ValidationError
from .model import RefundEligibility, ReviewSummary


class RefundEligibilityEngine:
    """Deposit rule: refundable when attendance OR review submission reaches the threshold.

    Attendance here counts PRESENT and LATE only; EXCUSED sessions do not
    help the deposit even though they count in the attendance summary.
    """

    def __init__(self, threshold_pct: int = ELIGIBILITY_THRESHOLD_PCT):
        if not 0 < int(threshold_pct) <= 100:
            raise ValidationError("환급 기준은 1~100% 사이여야 합니다")
        self._threshold = int(threshold_pct)

    @property
    def threshold_pct(self) -> int:
        return self._threshold

    def evaluate(self, attendance: AttendanceSummary, review: ReviewSummary) -> RefundEligibility:
        attendance_rate = percent(attendance.present + attendance.late, attendance.total)
        review_rate = percent(review.submitted, review.total)
        attendance_met = attendance_rate >= self._threshold
        review_met = review_rate >= self._threshold

        if attendance_met and review_met:
            code = EligibilityReason.BOTH_MET
            reason = f"출석률 {attendance_rate}%, 독후감 제출률 {review_rate}%로 환급 조건을 모두 충족했습니다"
        elif attendance_met:
            code = EligibilityReason.ATTENDANCE_MET
            reason = f"출석률 {attendance_rate}%로 환급 조건을 충족했습니다"
        elif review_met:
            code = EligibilityReason.REVIEW_MET
            reason = f"독후감 제출률 {review_rate}%로 환급 조건을 충족했습니다"
        else:
            code = EligibilityReason.NOT_MET
            reason = (
                f"출석률 {attendance_rate}%, 독후감 제출률 {review_rate}%로 "
                f"환급 기준({self._threshold}%)에 미달합니다"
            )

        return RefundEligibility(
            is_eligible=attendance_met or review_met,
            attendance_rate=attendance_rate,
            review_rate=review_rate,
            attendance_met=attendance_met,
            review_met=review_met,
            reason_code=code,
            reason=reason,
            attendance=attendance,
            review=review,
        )

    @staticmethod
    def refund_amount(deposit_amount: int, eligibility: RefundEligibility) -> int:
        require_non_negative(deposit_amount, "보증금")
        return int(deposit_amount) if eligibility.is_eligible else 0

    def progress_toward_eligibility(self, eligibility: RefundEligibility) -> int:
        """Better of the two rates rescaled so the pass line maps to 100."""
        best = max(eligibility.attendance_rate, eligibility.review_rate)
        return min(round_half_up_div(best * 100, self._threshold), 100)

    @staticmethod
    def status_text(eligibility: RefundEligibility) -> str:
        return "환급 가능" if eligibility.is_eligible else "환급 불가"

    def _extra_needed(self, done: int, total: int, remaining: int) -> Optional[int]:
        final_total = total + remaining
        for extra in range(remaining + 1):
            if percent(done + extra, final_total) >= self._threshold:
                return extra
        return None

    def guidance_message(self, eligibility: RefundEligibility, remaining_sessions: int) -> str:
        remaining = require_non_negative(remaining_sessions, "남은 회차")
        if eligibility.is_eligible:
            return "환급 조건을 충족했습니다. 프로그램 종료 후 보증금이 환급됩니다"
        if remaining == 0:
            return "남은 회차가 없어 환급 조건을 충족할 수 없습니다"

        attendance = eligibility.attendance
        review = eligibility.review
        need_attend = self._extra_needed(attendance.present + attendance.late, attendance.total, remaining)
        need_review = self._extra_needed(review.submitted, review.total, remaining)

        if need_attend is not None and need_review is not None:
            return f"앞으로 {need_attend}회 더 출석하거나 독후감을 {need_review}편 더 제출하면 환급 조건을 충족합니다"
        if need_attend is not None:
            return f"앞으로 {need_attend}회 더 출석하면 환급 조건을 충족합니다"
        if need_review is not None:
            return f"독후감을 {need_review}편 더 제출하면 환급 조건을 충족합니다"
        return f"남은 {remaining}회차에 모두 참여해도 환급 기준({self._threshold}%)에 도달할 수 없습니다"
