from __future__ import annotations

from datetime import datetime, timedelta

from ..programs.model import Participant, ProgramSession
from ..refunds.model import DepositSetting
from ..refunds.policies import RefundPolicyType
from .memory import InMemoryStore

DEMO_PROGRAM_ID = "demo-bookclub"


def seed_demo(store: InMemoryStore, *, now: datetime) -> None:
    """Demo data: a weekly 4-session book club whose 2nd session starts now."""

    first = now.replace(second=0, microsecond=0) - timedelta(days=7)
    for no in range(1, 5):
        starts_at = first + timedelta(days=7 * (no - 1))
        store.add_session(
            ProgramSession(
                session_id=f"{DEMO_PROGRAM_ID}-s{no}",
                program_id=DEMO_PROGRAM_ID,
                session_no=no,
                title=f"{no}회차 모임",
                starts_at=starts_at,
                ends_at=starts_at + timedelta(hours=2),
            )
        )

    store.add_participant(
        Participant(participant_id="demo-p1", program_id=DEMO_PROGRAM_ID, user_id="organizer", name="진행자")
    )
    store.add_participant(
        Participant(
            participant_id="demo-p2",
            program_id=DEMO_PROGRAM_ID,
            user_id="member",
            name="참가자",
            deposit_amount=50000,
        )
    )
    store.add_review(DEMO_PROGRAM_ID, "member", f"{DEMO_PROGRAM_ID}-s1")
    store.set_deposit_setting(
        DepositSetting(
            program_id=DEMO_PROGRAM_ID,
            deposit_amount=50000,
            policy_type=RefundPolicyType.ATTENDANCE_AND_REPORT,
        )
    )
