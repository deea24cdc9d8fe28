from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import format_iso, now_local
from ..core.enums import AttendanceOutcome, CheckMethod, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..programs.model import ProgramSession
from ..programs.repository import ParticipantRepository, SessionRepository
from ..tokens.service import CheckInTokenService
from .aggregator import summarize
from .factory import CheckInStrategyFactory
from .model import AttendanceRecord, CheckInResult
from .repository import AttendanceRepository
from .window import CheckInWindow

OUTCOME_LABELS = {
    AttendanceOutcome.PRESENT: "출석",
    AttendanceOutcome.LATE: "지각",
    AttendanceOutcome.ABSENT: "결석",
    AttendanceOutcome.EXCUSED: "공결",
}


@dataclass(frozen=True)
class AttendanceRowUI:
    session_no: int
    title: str
    date: str
    checked_at: str
    status: str
    label: str


class AttendanceService:
    """Use cases around recording attendance.

    Token check-in and organizer check-in share the same window and
    strategies, so both paths classify a given instant identically.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        sessions: SessionRepository,
        participants: ParticipantRepository,
        tokens: CheckInTokenService,
        *,
        window: Optional[CheckInWindow] = None,
        strategy_factory: Optional[CheckInStrategyFactory] = None,
    ):
        self._attendance = attendance
        self._sessions = sessions
        self._participants = participants
        self._tokens = tokens
        self._window = window or CheckInWindow()
        self._factory = strategy_factory or CheckInStrategyFactory()

    @property
    def window(self) -> CheckInWindow:
        return self._window

    def _get_session(self, session_id: str) -> ProgramSession:
        session = self._sessions.get_by_id(session_id)
        if not session:
            raise NotFoundError("세션을 찾을 수 없습니다")
        return session

    def check_in_with_token(self, *, user_id: str, token: str, now: Optional[datetime] = None) -> CheckInResult:
        now = now or now_local()

        validation = self._tokens.verify(token, now=now)
        if not validation.is_valid or not validation.session_id:
            raise ValidationError(validation.error or "QR 코드가 유효하지 않습니다")

        session = self._get_session(validation.session_id)
        participant = self._participants.get_for_user(session.program_id, user_id)
        if not participant:
            raise AuthorizationError("이 프로그램의 참가자가 아닙니다")

        existing = self._attendance.get(participant.participant_id, session.session_id)
        if existing and existing.outcome != AttendanceOutcome.ABSENT:
            return CheckInResult(success=False, message="이미 출석 처리되었습니다", outcome=existing.outcome)

        if not self._window.is_admissible(session.starts_at, session.ends_at, now):
            raise ValidationError("출석 체크 가능 시간이 아닙니다")

        strategy = self._factory.for_checkin(session_start=session.starts_at, checked_at=now, window=self._window)
        decision = strategy.decide(session_start=session.starts_at, checked_at=now, window=self._window)

        self._attendance.upsert(
            AttendanceRecord(
                participant_id=participant.participant_id,
                session_id=session.session_id,
                outcome=decision.outcome,
                checked_at=now,
                method=CheckMethod.TOKEN,
            )
        )
        return CheckInResult(
            success=True,
            message=decision.message,
            outcome=decision.outcome,
            late_minutes=decision.late_minutes,
        )

    def mark_manually(
        self,
        *,
        current_role: Role,
        session_id: str,
        participant_id: str,
        outcome: Optional[AttendanceOutcome] = None,
        checked_at: Optional[datetime] = None,
        note: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> AttendanceRecord:
        """Organizer path: record an explicit outcome, or classify ``checked_at`` like a token check-in."""

        if current_role != Role.ORGANIZER:
            raise AuthorizationError("진행자만 출석을 수정할 수 있습니다")

        session = self._get_session(session_id)
        participant = self._participants.get_by_id(participant_id)
        if not participant or participant.program_id != session.program_id:
            raise NotFoundError("참가자를 찾을 수 없습니다")

        note = note.strip() if note else None
        if outcome is None:
            checked_at = checked_at or now or now_local()
            if not self._window.is_admissible(session.starts_at, session.ends_at, checked_at):
                raise ValidationError("출석 체크 가능 시간이 아닙니다")
            strategy = self._factory.for_checkin(
                session_start=session.starts_at, checked_at=checked_at, window=self._window
            )
            outcome = strategy.decide(session_start=session.starts_at, checked_at=checked_at, window=self._window).outcome
        elif outcome == AttendanceOutcome.ABSENT:
            checked_at = None
        else:
            checked_at = checked_at or now or now_local()

        record = AttendanceRecord(
            participant_id=participant.participant_id,
            session_id=session.session_id,
            outcome=AttendanceOutcome(outcome),
            checked_at=checked_at,
            method=CheckMethod.MANUAL,
            note=note,
        )
        self._attendance.upsert(record)
        return record

    def session_attendances(self, *, current_role: Role, session_id: str) -> dict:
        if current_role != Role.ORGANIZER:
            raise AuthorizationError("진행자만 출석 현황을 볼 수 있습니다")

        session = self._get_session(session_id)
        by_participant = {r.participant_id: r for r in self._attendance.list_for_session(session_id)}
        participants = self._participants.list_for_program(session.program_id)

        rows = []
        for p in participants:
            rec = by_participant.get(p.participant_id)
            rows.append(
                {
                    "participantId": p.participant_id,
                    "name": p.name,
                    "attendance": None
                    if not rec
                    else {
                        "status": rec.outcome.value,
                        "checkedAt": format_iso(rec.checked_at),
                        "method": rec.method.value,
                        "note": rec.note,
                    },
                }
            )

        recorded = [by_participant[p.participant_id] for p in participants if p.participant_id in by_participant]
        stats = summarize(recorded, total_sessions=len(participants))

        return {
            "session": {
                "id": session.session_id,
                "sessionNumber": session.session_no,
                "title": session.title,
                "date": format_iso(session.starts_at),
            },
            "participants": rows,
            "stats": stats.to_dict(),
        }

    def my_attendances(self, *, program_id: str, user_id: str) -> list[AttendanceRowUI]:
        participant = self._participants.get_for_user(program_id, user_id)
        if not participant:
            return []

        records = {r.session_id: r for r in self._attendance.list_for_participant(participant.participant_id)}
        rows = []
        for s in self._sessions.list_for_program(program_id):
            rec = records.get(s.session_id)
            if rec:
                rows.append(self._to_ui(s, rec))
        return rows

    def _to_ui(self, session: ProgramSession, r: AttendanceRecord) -> AttendanceRowUI:
        return AttendanceRowUI(
            session_no=session.session_no,
            title=session.title,
            date=session.starts_at.strftime("%Y-%m-%d"),
            checked_at=r.checked_at.strftime("%H:%M:%S") if r.checked_at else "-",
            status=r.outcome.value,
            label=OUTCOME_LABELS.get(r.outcome, r.outcome.value),
        )
