from __future__ import annotations

from typing import Iterable, Optional, Union

from ..core.enums import AttendanceOutcome
from ..core.exceptions import ValidationError
from .model import AttendanceRecord, AttendanceSummary

OutcomeLike = Union[AttendanceOutcome, AttendanceRecord]


def _outcome_of(item: OutcomeLike) -> AttendanceOutcome:
    return AttendanceOutcome(getattr(item, "outcome", item))


def summarize(items: Iterable[OutcomeLike], *, total_sessions: Optional[int] = None) -> AttendanceSummary:
    """Reduce one participant's outcomes to an AttendanceSummary.

    With ``total_sessions`` the sessions that have no record at all are
    counted as ABSENT (a participant who never checked in was absent).
    """

    counts = {outcome: 0 for outcome in AttendanceOutcome}
    for item in items:
        counts[_outcome_of(item)] += 1

    recorded = sum(counts.values())
    total = recorded
    if total_sessions is not None:
        if int(total_sessions) < recorded:
            raise ValidationError("출석 기록 수가 전체 회차 수보다 많습니다")
        total = int(total_sessions)
        counts[AttendanceOutcome.ABSENT] += total - recorded

    return AttendanceSummary(
        present=counts[AttendanceOutcome.PRESENT],
        late=counts[AttendanceOutcome.LATE],
        absent=counts[AttendanceOutcome.ABSENT],
        excused=counts[AttendanceOutcome.EXCUSED],
        total=total,
    )
