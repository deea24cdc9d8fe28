from __future__ import annotations

import threading
from datetime import datetime
from typing import Optional, Sequence

from ..attendance.model import AttendanceRecord
from ..programs.model import Participant, ProgramSession
from ..refunds.model import DepositSetting, ReviewSubmission
from ..tokens.model import TokenIssuance


class InMemoryStore:
    """Process-local storage shared by the in-memory repositories.

    Note: One lock guards every table; the surrounding platform swaps these
    repositories for its own persistence.
    """

    _instance: Optional["InMemoryStore"] = None

    def __init__(self):
        self.lock = threading.RLock()
        self.sessions: dict[str, ProgramSession] = {}
        self.participants: dict[str, Participant] = {}
        self.attendance: dict[tuple[str, str], AttendanceRecord] = {}
        # only the active issuance of each session is kept
        self.issuances: dict[str, TokenIssuance] = {}
        self.reviews: dict[tuple[str, str, str], ReviewSubmission] = {}
        self.deposit_settings: dict[str, DepositSetting] = {}
        self.surveys: set[tuple[str, str]] = set()

    @classmethod
    def get_instance(cls) -> "InMemoryStore":
        if cls._instance is None:
            cls._instance = InMemoryStore()
        return cls._instance

    def add_session(self, session: ProgramSession) -> None:
        with self.lock:
            self.sessions[session.session_id] = session

    def add_participant(self, participant: Participant) -> None:
        with self.lock:
            self.participants[participant.participant_id] = participant

    def add_review(self, program_id: str, user_id: str, session_id: str, *, approved: Optional[bool] = None) -> None:
        with self.lock:
            self.reviews[(program_id, user_id, session_id)] = ReviewSubmission(
                program_id=program_id, user_id=user_id, session_id=session_id, approved=approved
            )

    def set_deposit_setting(self, setting: DepositSetting) -> None:
        with self.lock:
            self.deposit_settings[setting.program_id] = setting

    def mark_survey_submitted(self, program_id: str, user_id: str) -> None:
        with self.lock:
            self.surveys.add((program_id, user_id))


class InMemorySessionRepository:
    def __init__(self, store: InMemoryStore):
        self._store = store

    def get_by_id(self, session_id: str) -> Optional[ProgramSession]:
        return self._store.sessions.get(session_id)

    def list_for_program(self, program_id: str, *, until: Optional[datetime] = None) -> Sequence[ProgramSession]:
        with self._store.lock:
            items = [s for s in self._store.sessions.values() if s.program_id == program_id]
        if until is not None:
            items = [s for s in items if s.starts_at <= until]
        items.sort(key=lambda s: s.session_no)
        return items


class InMemoryParticipantRepository:
    def __init__(self, store: InMemoryStore):
        self._store = store

    def get_by_id(self, participant_id: str) -> Optional[Participant]:
        return self._store.participants.get(participant_id)

    def get_for_user(self, program_id: str, user_id: str) -> Optional[Participant]:
        with self._store.lock:
            for p in self._store.participants.values():
                if p.program_id == program_id and p.user_id == user_id:
                    return p
        return None

    def list_for_program(self, program_id: str) -> Sequence[Participant]:
        with self._store.lock:
            return [p for p in self._store.participants.values() if p.program_id == program_id]


class InMemoryAttendanceRepository:
    def __init__(self, store: InMemoryStore):
        self._store = store

    def get(self, participant_id: str, session_id: str) -> Optional[AttendanceRecord]:
        return self._store.attendance.get((participant_id, session_id))

    def upsert(self, record: AttendanceRecord) -> None:
        with self._store.lock:
            self._store.attendance[(record.participant_id, record.session_id)] = record

    def list_for_session(self, session_id: str) -> Sequence[AttendanceRecord]:
        with self._store.lock:
            return [r for r in self._store.attendance.values() if r.session_id == session_id]

    def list_for_participant(self, participant_id: str) -> Sequence[AttendanceRecord]:
        with self._store.lock:
            return [r for r in self._store.attendance.values() if r.participant_id == participant_id]


class InMemoryTokenIssuanceRepository:
    def __init__(self, store: InMemoryStore):
        self._store = store

    def save(self, issuance: TokenIssuance) -> None:
        with self._store.lock:
            if issuance.is_active:
                self._store.issuances[issuance.session_id] = issuance

    def deactivate_for_session(self, session_id: str) -> int:
        with self._store.lock:
            return 1 if self._store.issuances.pop(session_id, None) else 0

    def get_active(self, session_id: str) -> Optional[TokenIssuance]:
        return self._store.issuances.get(session_id)


class InMemoryReviewRepository:
    def __init__(self, store: InMemoryStore):
        self._store = store

    def list_for_user(self, program_id: str, user_id: str) -> Sequence[ReviewSubmission]:
        with self._store.lock:
            return [r for r in self._store.reviews.values() if r.program_id == program_id and r.user_id == user_id]


class InMemoryDepositSettingRepository:
    def __init__(self, store: InMemoryStore):
        self._store = store

    def get_for_program(self, program_id: str) -> Optional[DepositSetting]:
        return self._store.deposit_settings.get(program_id)


class InMemorySurveyRepository:
    def __init__(self, store: InMemoryStore):
        self._store = store

    def has_submitted(self, program_id: str, user_id: str) -> bool:
        return (program_id, user_id) in self._store.surveys
