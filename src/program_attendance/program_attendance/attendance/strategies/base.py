from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ...core.enums import AttendanceOutcome
from ..window import CheckInWindow


@dataclass(frozen=True)
class OutcomeDecision:
    outcome: AttendanceOutcome
    message: str
    late_minutes: Optional[int] = None


class CheckInStrategy(ABC):
    """Strategy Pattern: encapsulate how a timed check-in is recorded and reported."""

    @abstractmethod
    def decide(self, *, session_start: datetime, checked_at: datetime, window: CheckInWindow) -> OutcomeDecision:
        raise NotImplementedError
