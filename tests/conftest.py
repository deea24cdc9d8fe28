from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from src.program_attendance.program_attendance.container import build_container
from src.program_attendance.program_attendance.programs.model import Participant, ProgramSession
from src.program_attendance.program_attendance.storage.memory import InMemoryStore
from src.program_attendance.program_attendance.tokens.codec import CheckInTokenCodec

SECRET = "unit-test-secret"
PROGRAM_ID = "bookclub-2026"


@pytest.fixture
def fixed_now() -> datetime:
    # 2nd session of the program starts exactly now
    return datetime(2026, 2, 3, 14, 0, 0)


@pytest.fixture
def codec() -> CheckInTokenCodec:
    return CheckInTokenCodec(SECRET)


@pytest.fixture
def store(fixed_now) -> InMemoryStore:
    """A 4-session weekly program: s1 a week ago, s2 now, s3/s4 in the future."""

    store = InMemoryStore()
    for no in range(1, 5):
        starts_at = fixed_now + timedelta(days=7 * (no - 2))
        store.add_session(
            ProgramSession(
                session_id=f"s{no}",
                program_id=PROGRAM_ID,
                session_no=no,
                title=f"{no}회차",
                starts_at=starts_at,
                ends_at=starts_at + timedelta(hours=2),
            )
        )
    store.add_participant(Participant(participant_id="p1", program_id=PROGRAM_ID, user_id="u1", name="A", deposit_amount=50000))
    store.add_participant(Participant(participant_id="p2", program_id=PROGRAM_ID, user_id="u2", name="B"))
    return store


@pytest.fixture
def container(store):
    return build_container(
        checkin_config={"token_secret": SECRET, "base_url": "https://example.com"},
        store=store,
    )
