from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..attendance.aggregator import summarize
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import now_local
from ..common.numbers import percent
from ..core.constants import DEFAULT_DEPOSIT_AMOUNT
from ..core.enums import AttendanceOutcome, Role
from ..core.exceptions import AuthorizationError, NotFoundError
from ..programs.model import Participant
from ..programs.repository import ParticipantRepository, SessionRepository
from .deposit import calculate_per_session_refund, calculate_refund, format_currency, refund_status_label
from .engine import RefundEligibilityEngine
from .model import (
    DepositCalculationInput,
    DepositCalculationResult,
    PerSessionRefund,
    RefundEligibility,
    ReviewSummary,
    SessionParticipation,
)
from .policies import RefundPolicyType
from .repository import DepositSettingRepository, ReviewRepository, SurveyRepository

_ATTENDED = (AttendanceOutcome.PRESENT, AttendanceOutcome.LATE)


@dataclass(frozen=True)
class Settlement:
    eligibility: RefundEligibility
    deposit_amount: int
    refund_amount: int
    progress: int
    status_text: str
    guidance: str
    remaining_sessions: int

    def to_dict(self) -> dict:
        return {
            "eligibility": self.eligibility.to_dict(),
            "depositAmount": self.deposit_amount,
            "refundAmount": self.refund_amount,
            "progress": self.progress,
            "statusText": self.status_text,
            "guidance": self.guidance,
            "remainingSessions": self.remaining_sessions,
        }


@dataclass(frozen=True)
class RefundStats:
    total_participants: int
    eligible_count: int
    ineligible_count: int
    total_refund_amount: int

    def to_dict(self) -> dict:
        return {
            "totalParticipants": self.total_participants,
            "eligibleCount": self.eligible_count,
            "ineligibleCount": self.ineligible_count,
            "totalRefundAmount": self.total_refund_amount,
        }


@dataclass(frozen=True)
class PolicyRefund:
    """Refund under the program's deposit setting (tiered or per session)."""

    participant: Participant
    deposit_amount: int
    survey_submitted: bool
    result: DepositCalculationResult
    per_session: Optional[PerSessionRefund] = None

    @property
    def refund_amount(self) -> int:
        return self.per_session.total_refund if self.per_session else self.result.refund_amount

    @property
    def refund_rate(self) -> int:
        if self.per_session:
            return percent(self.per_session.total_refund, self.deposit_amount)
        return self.result.refund_rate

    def to_dict(self) -> dict:
        label, color = refund_status_label(self.refund_rate)
        body = {
            "participantId": self.participant.participant_id,
            "userId": self.participant.user_id,
            "name": self.participant.name,
            "depositAmount": self.deposit_amount,
            "surveySubmitted": self.survey_submitted,
            "attendanceRate": self.result.attendance_rate,
            "reportRate": self.result.report_rate,
            "refundRate": self.refund_rate,
            "refundAmount": self.refund_amount,
            "refundAmountText": format_currency(self.refund_amount),
            "eligible": self.refund_amount > 0,
            "reason": self.result.reason,
            "ineligibleReason": self.result.ineligible_reason,
            "statusLabel": label,
            "statusColor": color,
        }
        if self.per_session:
            body["sessions"] = [
                {"refundable": line.refundable, "amount": line.amount, "reason": line.reason}
                for line in self.per_session.session_results
            ]
        return body


class SettlementService:
    """Use case: deposit settlement at (or before) program completion.

    Only sessions that have started by ``now`` count; sessions without any
    attendance record count as absent.
    """

    def __init__(
        self,
        sessions: SessionRepository,
        participants: ParticipantRepository,
        attendance: AttendanceRepository,
        reviews: ReviewRepository,
        *,
        deposit_settings: Optional[DepositSettingRepository] = None,
        surveys: Optional[SurveyRepository] = None,
        engine: Optional[RefundEligibilityEngine] = None,
        default_deposit_amount: int = DEFAULT_DEPOSIT_AMOUNT,
    ):
        self._sessions = sessions
        self._participants = participants
        self._attendance = attendance
        self._reviews = reviews
        self._deposit_settings = deposit_settings
        self._surveys = surveys
        self._engine = engine or RefundEligibilityEngine()
        self._default_deposit_amount = int(default_deposit_amount)

    def _get_participant(self, program_id: str, user_id: str) -> Participant:
        participant = self._participants.get_for_user(program_id, user_id)
        if not participant:
            raise NotFoundError("이 프로그램의 참가자가 아닙니다")
        return participant

    def _deposit_for(self, participant: Participant, fallback: Optional[int] = None) -> int:
        if participant.deposit_amount is not None:
            return participant.deposit_amount
        return self._default_deposit_amount if fallback is None else int(fallback)

    def participant_eligibility(
        self, *, program_id: str, user_id: str, now: Optional[datetime] = None
    ) -> Optional[RefundEligibility]:
        now = now or now_local()
        participant = self._participants.get_for_user(program_id, user_id)
        if not participant:
            return None

        held = {s.session_id for s in self._sessions.list_for_program(program_id, until=now)}
        records = [r for r in self._attendance.list_for_participant(participant.participant_id) if r.session_id in held]
        reviews = [r for r in self._reviews.list_for_user(program_id, user_id) if r.session_id in held]

        attendance = summarize(records, total_sessions=len(held))
        review = ReviewSummary(submitted=len(reviews), total=len(held))
        return self._engine.evaluate(attendance, review)

    def settlement(self, *, program_id: str, user_id: str, now: Optional[datetime] = None) -> Settlement:
        now = now or now_local()
        participant = self._get_participant(program_id, user_id)

        eligibility = self.participant_eligibility(program_id=program_id, user_id=user_id, now=now)
        all_sessions = self._sessions.list_for_program(program_id)
        held = self._sessions.list_for_program(program_id, until=now)
        remaining = max(len(all_sessions) - len(held), 0)

        deposit = self._deposit_for(participant)
        return Settlement(
            eligibility=eligibility,
            deposit_amount=deposit,
            refund_amount=self._engine.refund_amount(deposit, eligibility),
            progress=self._engine.progress_toward_eligibility(eligibility),
            status_text=self._engine.status_text(eligibility),
            guidance=self._engine.guidance_message(eligibility, remaining),
            remaining_sessions=remaining,
        )

    def _settlements(self, program_id: str, now: datetime) -> list[tuple[Participant, Settlement]]:
        return [
            (p, self.settlement(program_id=program_id, user_id=p.user_id, now=now))
            for p in self._participants.list_for_program(program_id)
        ]

    def all_participants(self, *, current_role: Role, program_id: str, now: Optional[datetime] = None) -> list[dict]:
        if current_role != Role.ORGANIZER:
            raise AuthorizationError("진행자만 환급 현황을 볼 수 있습니다")

        now = now or now_local()
        return [
            {"participantId": p.participant_id, "userId": p.user_id, "name": p.name, **s.to_dict()}
            for p, s in self._settlements(program_id, now)
        ]

    def stats(self, *, current_role: Role, program_id: str, now: Optional[datetime] = None) -> RefundStats:
        if current_role != Role.ORGANIZER:
            raise AuthorizationError("진행자만 환급 현황을 볼 수 있습니다")

        settlements = [s for _, s in self._settlements(program_id, now or now_local())]
        eligible = [s for s in settlements if s.eligibility.is_eligible]
        return RefundStats(
            total_participants=len(settlements),
            eligible_count=len(eligible),
            ineligible_count=len(settlements) - len(eligible),
            total_refund_amount=sum(s.refund_amount for s in eligible),
        )

    def policy_refund(self, *, program_id: str, user_id: str, now: Optional[datetime] = None) -> PolicyRefund:
        """Refund under the program's deposit setting, counting every session of the program."""
        participant = self._get_participant(program_id, user_id)
        return self._policy_refund(program_id, participant, now or now_local())

    def _policy_refund(self, program_id: str, participant: Participant, now: datetime) -> PolicyRefund:
        setting = self._deposit_settings.get_for_program(program_id) if self._deposit_settings else None
        if setting is None:
            raise NotFoundError("보증금 설정이 없는 프로그램입니다")

        sessions = self._sessions.list_for_program(program_id)
        held = {s.session_id for s in self._sessions.list_for_program(program_id, until=now)}
        outcomes = {
            r.session_id: r.outcome
            for r in self._attendance.list_for_participant(participant.participant_id)
            if r.session_id in held
        }
        reviews = {r.session_id: r for r in self._reviews.list_for_user(program_id, participant.user_id)}
        reviews = {sid: r for sid, r in reviews.items() if sid in held}

        attended = sum(1 for o in outcomes.values() if o in _ATTENDED)
        judged = [r for r in reviews.values() if r.approved is not None]
        survey_submitted = bool(self._surveys and self._surveys.has_submitted(program_id, participant.user_id))
        deposit = self._deposit_for(participant, setting.deposit_amount)

        result = calculate_refund(
            DepositCalculationInput(
                deposit_amount=deposit,
                policy_type=setting.policy_type,
                policies=setting.criteria,
                total_sessions=len(sessions),
                attended_sessions=attended,
                submitted_reports=len(reviews),
                approved_reports=sum(1 for r in judged if r.approved) if judged else None,
                survey_submitted=survey_submitted,
                survey_required=setting.survey_required,
                attended=attended > 0,
            )
        )

        per_session = None
        if setting.per_session:
            per_session = calculate_per_session_refund(
                deposit_per_session=deposit // len(sessions) if sessions else 0,
                sessions=[
                    SessionParticipation(
                        attended=outcomes.get(s.session_id) in _ATTENDED,
                        report_submitted=s.session_id in reviews,
                        report_approved=reviews[s.session_id].approved if s.session_id in reviews else None,
                    )
                    for s in sessions
                ],
                require_report=RefundPolicyType(setting.policy_type) == RefundPolicyType.ATTENDANCE_AND_REPORT,
                survey_submitted=survey_submitted,
                survey_required=setting.survey_required,
            )

        return PolicyRefund(
            participant=participant,
            deposit_amount=deposit,
            survey_submitted=survey_submitted,
            result=result,
            per_session=per_session,
        )

    def policy_refunds(self, *, current_role: Role, program_id: str, now: Optional[datetime] = None) -> dict:
        """Organizer view: every participant's policy refund plus totals."""
        if current_role != Role.ORGANIZER:
            raise AuthorizationError("진행자만 환급 현황을 볼 수 있습니다")

        now = now or now_local()
        refunds = [
            self._policy_refund(program_id, p, now) for p in self._participants.list_for_program(program_id)
        ]
        total_refund = sum(r.refund_amount for r in refunds)
        return {
            "participants": [r.to_dict() for r in refunds],
            "summary": {
                "total": len(refunds),
                "surveyResponded": sum(1 for r in refunds if r.survey_submitted),
                "eligible": sum(1 for r in refunds if r.refund_amount > 0),
                "forfeited": sum(1 for r in refunds if r.refund_amount == 0),
                "totalRefundAmount": total_refund,
                "totalRefundAmountText": format_currency(total_refund),
            },
        }
