from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class ProgramSession:
    """Domain entity: one scheduled meeting of a multi-session program."""

    session_id: str
    program_id: str
    session_no: int
    title: str
    starts_at: datetime
    ends_at: Optional[datetime] = None


@dataclass(frozen=True)
class Participant:
    """Domain entity: a user enrolled in a program, holding a deposit."""

    participant_id: str
    program_id: str
    user_id: str
    name: str = ""
    deposit_amount: Optional[int] = None
