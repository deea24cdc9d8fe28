from __future__ import annotations

from datetime import timedelta

import pytest

from src.program_attendance.program_attendance.core.enums import Role
from src.program_attendance.program_attendance.core.exceptions import AuthorizationError, NotFoundError


def test_issue_returns_token_url_and_validity(container, fixed_now):
    issued = container.token_service.issue(current_role=Role.ORGANIZER, session_id="s2", issued_by="u1", now=fixed_now)

    assert issued.valid_from == fixed_now
    assert issued.valid_until == fixed_now + timedelta(minutes=15)
    assert issued.check_in_url.startswith("https://example.com/attendance/check?token=")
    assert set(issued.to_dict()) == {"token", "checkInUrl", "validFrom", "validUntil"}


def test_issue_requires_organizer(container, fixed_now):
    with pytest.raises(AuthorizationError):
        container.token_service.issue(current_role=Role.PARTICIPANT, session_id="s2", now=fixed_now)


def test_issue_unknown_session(container, fixed_now):
    with pytest.raises(NotFoundError):
        container.token_service.issue(current_role=Role.ORGANIZER, session_id="nope", now=fixed_now)


def test_latest_issuance_wins(container, fixed_now):
    svc = container.token_service
    first = svc.issue(current_role=Role.ORGANIZER, session_id="s2", now=fixed_now)
    second = svc.issue(current_role=Role.ORGANIZER, session_id="s2", now=fixed_now + timedelta(minutes=1))

    later = fixed_now + timedelta(minutes=2)
    assert svc.verify(second.token, now=later).is_valid is True

    old = svc.verify(first.token, now=later)
    assert old.is_valid is False
    assert old.session_id is None


def test_status_without_token(container, fixed_now):
    status = container.token_service.status("s2", current_role=Role.ORGANIZER, now=fixed_now)

    assert status.has_token is False
    assert status.is_expired is True
    assert status.should_refresh is True


def test_status_counts_down_and_expires(container, fixed_now):
    svc = container.token_service
    issued = svc.issue(current_role=Role.ORGANIZER, session_id="s2", now=fixed_now)

    live = svc.status("s2", current_role=Role.ORGANIZER, now=fixed_now + timedelta(minutes=5))
    assert live.token == issued.token
    assert live.remaining == "10:00"
    assert live.should_refresh is False

    expired = svc.status("s2", current_role=Role.ORGANIZER, now=fixed_now + timedelta(minutes=16))
    assert expired.is_expired is True
    assert expired.token is None
    assert expired.remaining == "만료됨"


def test_status_is_organizer_only(container, fixed_now):
    container.token_service.issue(current_role=Role.ORGANIZER, session_id="s2", now=fixed_now)

    with pytest.raises(AuthorizationError):
        container.token_service.status("s2", current_role=Role.PARTICIPANT, now=fixed_now)


def test_refreshing_keeps_one_issuance_per_session(container, store, fixed_now):
    svc = container.token_service
    for minute in range(5):
        svc.issue(current_role=Role.ORGANIZER, session_id="s2", now=fixed_now + timedelta(minutes=minute))
    svc.issue(current_role=Role.ORGANIZER, session_id="s1", now=fixed_now)

    assert set(store.issuances) == {"s1", "s2"}
    assert store.issuances["s2"].valid_from == fixed_now + timedelta(minutes=4)
