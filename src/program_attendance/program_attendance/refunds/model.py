from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..attendance.model import AttendanceSummary
from ..common.numbers import percent
from ..core.enums import EligibilityReason
from .policies import DEFAULT_REFUND_POLICIES, RefundPolicyCriteria, RefundPolicyType


@dataclass(frozen=True)
class ReviewSummary:
    """Write-ups submitted versus required (deadline rules live elsewhere)."""

    submitted: int = 0
    total: int = 0

    @property
    def rate(self) -> int:
        return percent(self.submitted, self.total)


@dataclass(frozen=True)
class RefundEligibility:
    is_eligible: bool
    attendance_rate: int
    review_rate: int
    attendance_met: bool
    review_met: bool
    reason_code: EligibilityReason
    reason: str
    attendance: AttendanceSummary = field(default_factory=AttendanceSummary)
    review: ReviewSummary = field(default_factory=ReviewSummary)

    def to_dict(self) -> dict:
        return {
            "isEligible": self.is_eligible,
            "attendanceRate": self.attendance_rate,
            "reviewRate": self.review_rate,
            "attendanceMet": self.attendance_met,
            "reviewMet": self.review_met,
            "reasonCode": self.reason_code.value,
            "reason": self.reason,
            "details": {
                "attendance": self.attendance.to_dict(),
                "reviews": {"submitted": self.review.submitted, "total": self.review.total},
            },
        }


@dataclass(frozen=True)
class DepositCalculationInput:
    deposit_amount: int
    policy_type: RefundPolicyType
    policies: list[RefundPolicyCriteria]
    total_sessions: int
    attended_sessions: int
    submitted_reports: int
    survey_submitted: bool
    survey_required: bool
    approved_reports: Optional[int] = None
    attended: Optional[bool] = None  # one-time programs only


@dataclass(frozen=True)
class DepositCalculationResult:
    attendance_rate: int
    report_rate: int
    refund_rate: int
    refund_amount: int
    reason: str
    eligible: bool
    ineligible_reason: Optional[str] = None
    matched_policy: Optional[RefundPolicyCriteria] = None


@dataclass(frozen=True)
class SessionParticipation:
    attended: bool
    report_submitted: bool
    report_approved: Optional[bool] = None


@dataclass(frozen=True)
class SessionRefundLine:
    refundable: bool
    amount: int
    reason: str


@dataclass(frozen=True)
class PerSessionRefund:
    total_refund: int
    session_results: list[SessionRefundLine]


@dataclass(frozen=True)
class ReviewSubmission:
    """One write-up per participant and session; ``approved`` stays None until reviewed."""

    program_id: str
    user_id: str
    session_id: str
    approved: Optional[bool] = None


@dataclass(frozen=True)
class DepositSetting:
    """Deposit terms of a program.

    ``policies`` falls back to the default tiers of ``policy_type``;
    ``per_session`` splits the deposit evenly across sessions instead.
    """

    program_id: str
    deposit_amount: int
    policy_type: RefundPolicyType
    policies: Optional[list[RefundPolicyCriteria]] = None
    survey_required: bool = False
    per_session: bool = False

    @property
    def criteria(self) -> list[RefundPolicyCriteria]:
        if self.policies is not None:
            return list(self.policies)
        return list(DEFAULT_REFUND_POLICIES[RefundPolicyType(self.policy_type)])
