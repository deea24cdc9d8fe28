"""Refund policy tiers for deposits.

A policy type picks which rates matter; the criteria list is ordered from
the most to the least generous tier.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class RefundPolicyType(str, Enum):
    ONE_TIME = "ONE_TIME"
    ATTENDANCE_ONLY = "ATTENDANCE_ONLY"
    ATTENDANCE_AND_REPORT = "ATTENDANCE_AND_REPORT"


@dataclass(frozen=True)
class RefundPolicyCriteria:
    min_attendance: int
    refund_rate: int
    label: str
    min_report: Optional[int] = None


DEFAULT_REFUND_POLICIES: dict[RefundPolicyType, list[RefundPolicyCriteria]] = {
    RefundPolicyType.ONE_TIME: [
        RefundPolicyCriteria(min_attendance=100, refund_rate=100, label="참석 시 전액 반환"),
        RefundPolicyCriteria(min_attendance=0, refund_rate=0, label="불참 시 미반환"),
    ],
    RefundPolicyType.ATTENDANCE_ONLY: [
        RefundPolicyCriteria(min_attendance=100, refund_rate=100, label="출석 100%"),
        RefundPolicyCriteria(min_attendance=80, refund_rate=80, label="출석 80% 이상"),
        RefundPolicyCriteria(min_attendance=60, refund_rate=60, label="출석 60% 이상"),
        RefundPolicyCriteria(min_attendance=0, refund_rate=0, label="출석 60% 미만"),
    ],
    RefundPolicyType.ATTENDANCE_AND_REPORT: [
        RefundPolicyCriteria(min_attendance=100, min_report=100, refund_rate=100, label="출석 100%, 독후감 100%"),
        RefundPolicyCriteria(min_attendance=100, min_report=80, refund_rate=90, label="출석 100%, 독후감 80%+"),
        RefundPolicyCriteria(min_attendance=80, min_report=80, refund_rate=80, label="출석 80%+, 독후감 80%+"),
        RefundPolicyCriteria(min_attendance=80, min_report=60, refund_rate=70, label="출석 80%+, 독후감 60%+"),
        RefundPolicyCriteria(min_attendance=60, min_report=60, refund_rate=60, label="출석 60%+, 독후감 60%+"),
        RefundPolicyCriteria(min_attendance=0, min_report=0, refund_rate=0, label="기준 미달"),
    ],
}
