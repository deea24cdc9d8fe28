from __future__ import annotations

from datetime import timedelta

import pytest

from src.program_attendance.program_attendance.core.enums import AttendanceOutcome, CheckMethod, Role
from src.program_attendance.program_attendance.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from src.program_attendance.program_attendance.programs.model import Participant


def _issue(container, session_id, now):
    return container.token_service.issue(current_role=Role.ORGANIZER, session_id=session_id, now=now).token


def test_token_checkin_on_time(container, fixed_now):
    token = _issue(container, "s2", fixed_now - timedelta(minutes=5))

    result = container.attendance_service.check_in_with_token(user_id="u1", token=token, now=fixed_now + timedelta(minutes=3))

    assert result.success is True
    assert result.outcome == AttendanceOutcome.PRESENT
    rec = container.attendance_repo.get("p1", "s2")
    assert rec.outcome == AttendanceOutcome.PRESENT
    assert rec.method == CheckMethod.TOKEN


def test_token_checkin_late(container, fixed_now):
    token = _issue(container, "s2", fixed_now)

    result = container.attendance_service.check_in_with_token(user_id="u1", token=token, now=fixed_now + timedelta(minutes=12))

    assert result.outcome == AttendanceOutcome.LATE
    assert result.late_minutes == 12


def test_repeat_checkin_is_not_double_counted(container, fixed_now):
    token = _issue(container, "s2", fixed_now)
    svc = container.attendance_service
    svc.check_in_with_token(user_id="u1", token=token, now=fixed_now)

    again = svc.check_in_with_token(user_id="u1", token=token, now=fixed_now + timedelta(minutes=1))

    assert again.success is False
    assert again.outcome == AttendanceOutcome.PRESENT
    assert len(container.attendance_repo.list_for_participant("p1")) == 1


def test_absent_record_can_be_overwritten_by_checkin(container, fixed_now):
    svc = container.attendance_service
    svc.mark_manually(current_role=Role.ORGANIZER, session_id="s2", participant_id="p1", outcome=AttendanceOutcome.ABSENT)
    token = _issue(container, "s2", fixed_now)

    result = svc.check_in_with_token(user_id="u1", token=token, now=fixed_now + timedelta(minutes=1))

    assert result.success is True
    assert container.attendance_repo.get("p1", "s2").outcome == AttendanceOutcome.PRESENT


def test_invalid_token_raises_validation_error(container, fixed_now):
    with pytest.raises(ValidationError):
        container.attendance_service.check_in_with_token(user_id="u1", token="invalid-token", now=fixed_now)


def test_expired_token_raises(container, fixed_now):
    token = _issue(container, "s2", fixed_now)
    with pytest.raises(ValidationError, match="만료"):
        container.attendance_service.check_in_with_token(user_id="u1", token=token, now=fixed_now + timedelta(minutes=20))


def test_superseded_token_is_refused(container, fixed_now):
    old = _issue(container, "s2", fixed_now)
    _issue(container, "s2", fixed_now + timedelta(minutes=1))

    with pytest.raises(ValidationError):
        container.attendance_service.check_in_with_token(user_id="u1", token=old, now=fixed_now + timedelta(minutes=2))


def test_non_participant_is_refused(container, fixed_now):
    token = _issue(container, "s2", fixed_now)
    with pytest.raises(AuthorizationError):
        container.attendance_service.check_in_with_token(user_id="stranger", token=token, now=fixed_now)


def test_checkin_outside_admissible_window(container, fixed_now):
    # s3 starts in a week; a token issued now cannot be used for it yet
    token = _issue(container, "s3", fixed_now)
    with pytest.raises(ValidationError):
        container.attendance_service.check_in_with_token(user_id="u1", token=token, now=fixed_now)


def test_manual_excused(container):
    record = container.attendance_service.mark_manually(
        current_role=Role.ORGANIZER,
        session_id="s1",
        participant_id="p2",
        outcome=AttendanceOutcome.EXCUSED,
        note="  병가  ",
    )

    assert record.outcome == AttendanceOutcome.EXCUSED
    assert record.method == CheckMethod.MANUAL
    assert record.note == "병가"


def test_manual_absent_has_no_checked_at(container, fixed_now):
    record = container.attendance_service.mark_manually(
        current_role=Role.ORGANIZER, session_id="s2", participant_id="p1", outcome=AttendanceOutcome.ABSENT, now=fixed_now
    )
    assert record.checked_at is None


def test_manual_without_outcome_classifies_like_token_path(container, fixed_now):
    record = container.attendance_service.mark_manually(
        current_role=Role.ORGANIZER,
        session_id="s2",
        participant_id="p1",
        checked_at=fixed_now + timedelta(minutes=14),
    )
    assert record.outcome == AttendanceOutcome.LATE


def test_manual_requires_organizer(container):
    with pytest.raises(AuthorizationError):
        container.attendance_service.mark_manually(
            current_role=Role.PARTICIPANT, session_id="s2", participant_id="p1", outcome=AttendanceOutcome.PRESENT
        )


def test_manual_rejects_participant_of_other_program(container, store):
    store.add_participant(Participant(participant_id="x1", program_id="other", user_id="u9"))
    with pytest.raises(NotFoundError):
        container.attendance_service.mark_manually(
            current_role=Role.ORGANIZER, session_id="s2", participant_id="x1", outcome=AttendanceOutcome.PRESENT
        )


def test_session_attendances_counts_missing_as_absent(container, fixed_now):
    svc = container.attendance_service
    svc.mark_manually(current_role=Role.ORGANIZER, session_id="s2", participant_id="p1", outcome=AttendanceOutcome.LATE, now=fixed_now)

    roster = svc.session_attendances(current_role=Role.ORGANIZER, session_id="s2")

    assert roster["session"]["sessionNumber"] == 2
    assert roster["stats"]["late"] == 1
    assert roster["stats"]["absent"] == 1
    assert roster["stats"]["total"] == 2
    by_id = {row["participantId"]: row for row in roster["participants"]}
    assert by_id["p2"]["attendance"] is None


def test_my_attendances_in_session_order(container, fixed_now):
    svc = container.attendance_service
    svc.mark_manually(current_role=Role.ORGANIZER, session_id="s2", participant_id="p1", outcome=AttendanceOutcome.PRESENT, now=fixed_now)
    svc.mark_manually(current_role=Role.ORGANIZER, session_id="s1", participant_id="p1", outcome=AttendanceOutcome.EXCUSED, now=fixed_now)

    rows = svc.my_attendances(program_id="bookclub-2026", user_id="u1")

    assert [r.session_no for r in rows] == [1, 2]
    assert rows[0].label == "공결"
    assert svc.my_attendances(program_id="bookclub-2026", user_id="nobody") == []
